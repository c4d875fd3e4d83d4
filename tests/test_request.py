"""Alignment request contract tests"""

import json

import pytest

from joint_sequencer import (
    AlignmentRequest,
    InvalidInputError,
    SequencingResult,
    align_request,
    sample_request,
)
from conftest import records


def valid_request(**overrides):
    fields = dict(
        base_data=records([2.0, 4.5, 6.0]),
        target_data=records([2.1, 4.6, 6.1]),
        tolerance=0.5,
        pivot_required=1,
    )
    fields.update(overrides)
    return AlignmentRequest(**fields)


def test_defaults():
    request = AlignmentRequest()

    assert request.pivot_percentile == 0.1
    assert request.tolerance == 1.5
    assert request.pivot_required == 10
    assert request.base_length_col == "length"
    assert request.target_length_col == "length"


def test_valid_request_has_no_errors():
    request = valid_request()

    assert request.validate() == []
    assert request.is_valid


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"base_data": []}, "BaseData is null or empty."),
        ({"base_data": None}, "BaseData is null or empty."),
        ({"target_data": []}, "TargetData is null or empty."),
        ({"pivot_percentile": 0.0}, "PivotPercentile should be between 0 and 1."),
        ({"pivot_percentile": 1.5}, "PivotPercentile should be between 0 and 1."),
        ({"tolerance": 0.0}, "Tolerance should be greater than 0."),
        ({"tolerance": -1.0}, "Tolerance should be greater than 0."),
        ({"pivot_required": 0}, "PivotRequired should be greater than 0."),
        ({"base_length_col": "  "}, "BaseLengthCol is null or whitespace."),
        ({"target_length_col": ""}, "TargetLengthCol is null or whitespace."),
    ],
)
def test_validation_messages(overrides, message):
    request = valid_request(**overrides)

    assert request.validate() == [message]
    assert not request.is_valid


def test_percentile_of_one_is_allowed():
    assert valid_request(pivot_percentile=1.0).is_valid


def test_all_problems_are_reported():
    errors = AlignmentRequest(tolerance=0, pivot_required=0).validate()

    assert len(errors) == 4


def test_from_dict_accepts_camel_case():
    request = AlignmentRequest.from_dict(
        {
            "baseData": records([1.0], column="baseLength"),
            "targetData": records([1.0], column="targetLength"),
            "pivotPercentile": 0.2,
            "tolerance": 0.75,
            "pivotRequired": 3,
            "baseLengthCol": "baseLength",
            "targetLengthCol": "targetLength",
        }
    )

    assert request.base_data == [{"baseLength": 1.0}]
    assert request.pivot_percentile == 0.2
    assert request.tolerance == 0.75
    assert request.pivot_required == 3
    assert request.base_length_col == "baseLength"
    assert request.target_length_col == "targetLength"


def test_from_dict_accepts_snake_case_and_ignores_extras():
    request = AlignmentRequest.from_dict(
        {"tolerance": 2.0, "pivot_required": 4, "pageSize": 50, "baseData": None}
    )

    assert request.tolerance == 2.0
    assert request.pivot_required == 4
    assert request.base_data is None


def test_json_round_trip_uses_wire_names():
    request = valid_request()
    payload = json.loads(request.to_json())

    assert set(payload) == {
        "baseData",
        "targetData",
        "pivotPercentile",
        "tolerance",
        "pivotRequired",
        "baseLengthCol",
        "targetLengthCol",
    }
    assert AlignmentRequest.from_json(request.to_json()) == request


def test_sample_request_is_valid():
    request = sample_request()

    assert request.is_valid
    assert len(request.base_data) == 20
    assert len(request.target_data) == 20
    assert request.tolerance == 1.5


def test_align_request_rejects_invalid_request():
    with pytest.raises(InvalidInputError) as excinfo:
        align_request(valid_request(base_data=[], tolerance=0))

    message = str(excinfo.value)
    assert "BaseData is null or empty." in message
    assert "Tolerance should be greater than 0." in message


def test_align_request_runs_valid_request():
    result = align_request(valid_request(), parallel=False)

    assert isinstance(result, SequencingResult)
    assert [m.to_dict() for m in result.matches] == [
        {"baseIndex": 0, "targetIndex": 0},
        {"baseIndex": 1, "targetIndex": 1},
        {"baseIndex": 2, "targetIndex": 2},
    ]
    assert result.stats["total_matches"] == 3


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"pivot_percentile": "x"}, "PivotPercentile should be a number."),
        ({"pivot_percentile": None}, "PivotPercentile should be a number."),
        ({"tolerance": "abc"}, "Tolerance should be a number."),
        ({"tolerance": True}, "Tolerance should be a number."),
        ({"pivot_required": "10"}, "PivotRequired should be an integer."),
        ({"pivot_required": 2.5}, "PivotRequired should be an integer."),
        ({"base_length_col": 3}, "BaseLengthCol is null or whitespace."),
        ({"target_data": "not records"}, "TargetData should be a list of records."),
    ],
)
def test_wrongly_typed_fields_are_reported(overrides, message):
    """Wrong JSON types become messages instead of exceptions"""
    assert valid_request(**overrides).validate() == [message]


def test_wrongly_typed_json_request_is_rejected():
    request = AlignmentRequest.from_json(
        json.dumps({"baseData": records([1.0]), "targetData": records([1.0]), "tolerance": "abc"})
    )

    with pytest.raises(InvalidInputError, match="Tolerance should be a number."):
        align_request(request)
