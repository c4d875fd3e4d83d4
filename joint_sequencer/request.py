"""Alignment request data contract

Carries the two datasets and the algorithm parameters of one sequencing call,
in the shape callers send them (camelCase JSON) or as plain keyword fields.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional
import json

# camelCase wire name -> field name
_WIRE_NAMES = {
    "baseData": "base_data",
    "targetData": "target_data",
    "pivotPercentile": "pivot_percentile",
    "tolerance": "tolerance",
    "pivotRequired": "pivot_required",
    "baseLengthCol": "base_length_col",
    "targetLengthCol": "target_length_col",
}


def _is_number(value: Any) -> bool:
    # bool is an int subclass but not a parameter value
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass
class AlignmentRequest:
    """Datasets plus parameters for one sequencing call"""

    base_data: Optional[List[Dict[str, Any]]] = None
    target_data: Optional[List[Dict[str, Any]]] = None
    pivot_percentile: float = 0.1
    tolerance: float = 1.5
    pivot_required: int = 10
    base_length_col: str = "length"
    target_length_col: str = "length"

    def validate(self) -> List[str]:
        """Check datasets and parameter ranges

        Returns:
            Error messages, each naming the offending field; empty when valid
        """
        errors = []
        if not self.base_data:
            errors.append("BaseData is null or empty.")
        elif not isinstance(self.base_data, list):
            errors.append("BaseData should be a list of records.")
        if not self.target_data:
            errors.append("TargetData is null or empty.")
        elif not isinstance(self.target_data, list):
            errors.append("TargetData should be a list of records.")
        if not _is_number(self.pivot_percentile):
            errors.append("PivotPercentile should be a number.")
        elif not (0 < self.pivot_percentile <= 1):
            errors.append("PivotPercentile should be between 0 and 1.")
        if not _is_number(self.tolerance):
            errors.append("Tolerance should be a number.")
        elif not self.tolerance > 0:
            errors.append("Tolerance should be greater than 0.")
        if not _is_number(self.pivot_required) or isinstance(self.pivot_required, float):
            errors.append("PivotRequired should be an integer.")
        elif self.pivot_required <= 0:
            errors.append("PivotRequired should be greater than 0.")
        if not isinstance(self.base_length_col, str) or not self.base_length_col.strip():
            errors.append("BaseLengthCol is null or whitespace.")
        if not isinstance(self.target_length_col, str) or not self.target_length_col.strip():
            errors.append("TargetLengthCol is null or whitespace.")
        return errors

    @property
    def is_valid(self) -> bool:
        return not self.validate()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AlignmentRequest":
        """Build from camelCase or snake_case keys; unknown keys are ignored"""
        fields = set(_WIRE_NAMES.values())
        kwargs = {}
        for key, value in data.items():
            name = _WIRE_NAMES.get(key, key)
            if name in fields and value is not None:
                kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def from_json(cls, text: str) -> "AlignmentRequest":
        return cls.from_dict(json.loads(text))

    def to_dict(self) -> Dict[str, Any]:
        """camelCase representation"""
        return {wire: getattr(self, name) for wire, name in _WIRE_NAMES.items()}

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


def sample_request() -> AlignmentRequest:
    """Bundled demo request: two shuffled runs of 20 joints each"""
    base_lengths = [
        2, 4.5, 3.5, 6, 5, 7.5, 6.5, 9, 8, 10.5,
        9.5, 12, 11, 13.5, 12.5, 15, 14, 16.5, 15.5, 18,
    ]
    target_lengths = [
        3.6, 5.1, 2.1, 6.6, 8.1, 14.1, 9.6, 11.1, 12.6, 15.6,
        4.6, 7.1, 16, 10, 13, 17.5, 19, 20.5, 22, 24.5,
    ]
    return AlignmentRequest(
        base_data=[{"length": value} for value in base_lengths],
        target_data=[{"length": value} for value in target_lengths],
        pivot_percentile=0.1,
        tolerance=1.5,
        pivot_required=10,
        base_length_col="length",
        target_length_col="length",
    )
