"""
Core modules for joint length alignment.
"""

from .normalizer import FieldAccessor, normalize_dataset
from .search import (
    SearchStrategy,
    BinarySearch,
    LinearScan,
    get_search_strategy,
)
from .pivots import select_pivots, candidate_count
from .aligner import align_lengths, align_pivots, align_segment
from .segments import segment_bounds, extract_segment

__all__ = [
    "FieldAccessor",
    "normalize_dataset",
    "SearchStrategy",
    "BinarySearch",
    "LinearScan",
    "get_search_strategy",
    "select_pivots",
    "candidate_count",
    "align_lengths",
    "align_pivots",
    "align_segment",
    "segment_bounds",
    "extract_segment",
]
