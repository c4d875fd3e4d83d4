"""Pivot selection: sparse, tolerance-separated anchors of a normalized dataset."""

from typing import Optional
import logging

from ..models import NormalizedSequence
from .search import SearchStrategy, BinarySearch

logger = logging.getLogger(__name__)


def candidate_count(size: int, percentile: float, required: int) -> int:
    """Minimum pivot count for a dataset of ``size`` joints"""
    return max(int(percentile * size), required)


def select_pivots(
    joints: NormalizedSequence,
    percentile: float,
    required: int,
    tolerance: float,
    search: Optional[SearchStrategy] = None,
) -> Optional[NormalizedSequence]:
    """Greedily pick pivots separated by at least ``tolerance``.

    The first joint is always a pivot; each next pivot is the first joint whose
    length reaches the previous pivot's length plus ``tolerance``.

    Args:
        joints: Length-sorted joints
        percentile: Fraction of the dataset that must end up as pivots
        required: Absolute minimum number of pivots
        tolerance: Minimum length separation between consecutive pivots
        search: Lookup strategy (binary search by default)

    Returns:
        The pivot subsequence, or None when fewer than
        ``max(floor(percentile * n), required)`` pivots qualify
    """
    size = len(joints)
    if size == 0:
        return None

    search = search or BinarySearch()
    lengths = joints.lengths
    needed = candidate_count(size, percentile, required)

    positions = []
    current = 0
    while current < size:
        positions.append(current)
        # lo=current+1 guarantees progress even with tolerance == 0
        current = search.first_at_least(
            lengths, lengths[current] + tolerance, lo=current + 1
        )

    if len(positions) < needed:
        logger.warning(
            f"Insufficient pivots: {len(positions)} found, {needed} needed "
            f"(n={size}, percentile={percentile}, required={required}, "
            f"tolerance={tolerance})"
        )
        return None

    return joints.take(positions)
