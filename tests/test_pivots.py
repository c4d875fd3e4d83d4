"""Search strategy and pivot selection tests"""

import pytest
import numpy as np

from joint_sequencer.core import (
    BinarySearch,
    LinearScan,
    candidate_count,
    get_search_strategy,
    normalize_dataset,
    select_pivots,
)
from joint_sequencer.models import NormalizedSequence, UnsupportedConfigurationError
from conftest import records


def sequence(lengths):
    return normalize_dataset(records(lengths), "length")


# Search strategies
LENGTHS = np.array([1.0, 2.0, 2.0, 2.0, 3.5, 4.0, 7.0])


@pytest.mark.parametrize("value", [0.0, 1.0, 1.5, 2.0, 3.5, 3.9, 7.0, 8.0])
@pytest.mark.parametrize("lo", [0, 2, 5, 7])
def test_binary_and_linear_agree(value, lo):
    binary, linear = BinarySearch(), LinearScan()

    assert binary.first_at_least(LENGTHS, value, lo) == linear.first_at_least(
        LENGTHS, value, lo
    )
    assert binary.first_greater(LENGTHS, value, lo) == linear.first_greater(
        LENGTHS, value, lo
    )


def test_search_boundaries():
    search = BinarySearch()

    assert search.first_at_least(LENGTHS, 2.0) == 1
    assert search.first_greater(LENGTHS, 2.0) == 4
    assert search.first_at_least(LENGTHS, 100.0) == len(LENGTHS)
    assert search.first_at_least(LENGTHS, 2.0, lo=3) == 3


def test_get_search_strategy():
    assert isinstance(get_search_strategy(None), BinarySearch)
    assert isinstance(get_search_strategy("binary"), BinarySearch)
    assert isinstance(get_search_strategy("LINEAR"), LinearScan)

    custom = LinearScan()
    assert get_search_strategy(custom) is custom


def test_unknown_search_strategy_is_fatal():
    with pytest.raises(UnsupportedConfigurationError, match="quantum"):
        get_search_strategy("quantum")
    with pytest.raises(NotImplementedError):
        get_search_strategy("quantum")


# Pivot selection
def test_candidate_count():
    assert candidate_count(20, 0.1, 10) == 10
    assert candidate_count(5, 0.5, 2) == 2
    assert candidate_count(100, 0.25, 10) == 25
    assert candidate_count(1, 0.1, 1) == 1


def test_well_separated_joints_are_all_pivots():
    pivots = select_pivots(sequence([2.0, 4.5, 6.0, 8.5, 10.0]), 0.5, 2, 0.5)

    assert pivots.lengths.tolist() == [2.0, 4.5, 6.0, 8.5, 10.0]


def test_pivots_respect_tolerance_gap():
    """Each pivot is the first joint reaching previous pivot + tolerance"""
    joints = sequence([0.0, 0.4, 1.0, 1.2, 2.1, 2.5, 3.0, 5.0])
    pivots = select_pivots(joints, 0.1, 1, 1.0)

    assert pivots.lengths.tolist() == [0.0, 1.0, 2.1, 5.0]
    assert np.all(np.diff(pivots.lengths) >= 1.0)


def test_pivots_keep_original_indices():
    pivots = select_pivots(sequence([9.0, 1.0, 5.0]), 0.1, 1, 2.0)

    assert pivots.original_indices.tolist() == [1, 2, 0]


def test_insufficient_pivots_returns_none():
    """Too few separated joints signals insufficiency rather than raising"""
    assert select_pivots(sequence([1.0, 1.1, 1.2]), 0.1, 2, 1.0) is None


def test_percentile_raises_the_bar():
    joints = sequence([float(i) for i in range(10)])

    # Spacing 1.0 with tolerance 1.5 keeps every other joint: 5 pivots
    assert len(select_pivots(joints, 0.5, 1, 1.5)) == 5
    assert select_pivots(joints, 0.6, 1, 1.5) is None


def test_zero_tolerance_takes_every_joint():
    joints = sequence([1.0, 1.0, 2.0, 2.0])
    pivots = select_pivots(joints, 1.0, 1, 0.0)

    assert len(pivots) == 4


def test_empty_sequence_has_no_pivots():
    empty = NormalizedSequence(np.array([]), np.array([]))

    assert select_pivots(empty, 0.1, 1, 1.0) is None


def test_linear_scan_selects_same_pivots():
    rng = np.random.default_rng(11)
    joints = sequence(rng.uniform(0, 50, 500).tolist())

    binary = select_pivots(joints, 0.05, 5, 0.75, BinarySearch())
    linear = select_pivots(joints, 0.05, 5, 0.75, LinearScan())

    assert binary.original_indices.tolist() == linear.original_indices.tolist()
