"""Pytest configuration and fixtures

Shared fixtures for all joint sequencer tests.
"""

import pytest
import numpy as np

from joint_sequencer import JointLengthSequencer


def records(lengths, column="length"):
    """Wrap raw lengths as keyed records"""
    return [{column: value} for value in lengths]


def pairs(matches):
    """Matches as (base, target) tuples"""
    return [(m.base_index, m.target_index) for m in matches]


@pytest.fixture
def sequencer():
    """Sequential sequencer with binary search"""
    return JointLengthSequencer(parallel=False)


@pytest.fixture
def parallel_sequencer():
    """Thread-pool sequencer that parallelizes any number of intervals"""
    return JointLengthSequencer(
        parallel=True, executor="thread", max_workers=4, min_parallel_intervals=1
    )


@pytest.fixture
def scenario_a():
    """Five base joints and five slightly longer target joints"""
    return (
        records([2.0, 4.5, 6.0, 8.5, 10.0]),
        records([2.1, 4.6, 6.1, 8.6, 10.1]),
    )


@pytest.fixture
def segmented_runs():
    """Shuffled base run whose pivots enclose one non-empty segment.

    Base pivots are 0.0, 1.0 and 2.0 (tolerance 1.0); 0.3 and 0.6 lie in the
    first interval. Input positions: 1.0->0, 0.0->1, 2.0->2, 0.6->3, 0.3->4.
    """
    base = records([1.0, 0.0, 2.0, 0.6, 0.3])
    target = records([0.05, 0.35, 0.65, 1.05, 2.05])
    return base, target


@pytest.fixture
def noisy_runs():
    """Two scans of 300 joints: target = base + noise, shuffled"""
    rng = np.random.default_rng(7)
    base_lengths = rng.uniform(0.0, 100.0, 300)
    target_lengths = rng.permutation(base_lengths + rng.uniform(-0.2, 0.2, 300))
    return (
        records(base_lengths.tolist()),
        records(target_lengths.tolist()),
    )
