"""Segment extraction: joints strictly between two aligned pivot lengths."""

from typing import Optional, Tuple

from ..models import NormalizedSequence
from .search import SearchStrategy, BinarySearch


def segment_bounds(
    joints: NormalizedSequence,
    start_length: float,
    end_length: float,
    search: Optional[SearchStrategy] = None,
) -> Tuple[int, int]:
    """Half-open index range [start, stop) of joints with start < length < end.

    Returns an empty range (start == stop) when nothing qualifies.
    """
    search = search or BinarySearch()
    start = search.first_greater(joints.lengths, start_length)
    stop = search.first_at_least(joints.lengths, end_length, lo=start)
    return start, stop


def extract_segment(
    joints: NormalizedSequence,
    start_length: float,
    end_length: float,
    search: Optional[SearchStrategy] = None,
) -> NormalizedSequence:
    """Joints whose length lies strictly between the two bounds, in order"""
    start, stop = segment_bounds(joints, start_length, end_length, search)
    return joints.slice(start, stop)
