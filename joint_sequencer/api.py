"""
API module for joint length sequencing.
Provides high-level helpers for easy integration.
"""

from typing import Any, List, Mapping, Optional, Sequence

from .models import InvalidInputError, JointMatchResult, SequencingResult
from .request import AlignmentRequest
from .sequencer import JointLengthSequencer


def calculate_matches(
    base_data: Optional[Sequence[Mapping[str, Any]]],
    target_data: Optional[Sequence[Mapping[str, Any]]],
    pivot_percentile: float = JointLengthSequencer.PIVOT_PERCENTILE,
    tolerance: float = JointLengthSequencer.TOLERANCE,
    pivot_required: int = JointLengthSequencer.PIVOT_REQUIRED,
    base_length_col: str = JointLengthSequencer.LENGTH_COLUMN,
    target_length_col: str = JointLengthSequencer.LENGTH_COLUMN,
    **config,
) -> List[JointMatchResult]:
    """Match two joint datasets by length with a one-off sequencer.

    Args:
        base_data: Base dataset records
        target_data: Target dataset records
        pivot_percentile: Fraction of joints required as pivots
        tolerance: Maximum length difference for a match
        pivot_required: Absolute minimum pivot count
        base_length_col: Length column of base records
        target_length_col: Length column of target records
        **config: Execution configuration forwarded to JointLengthSequencer

    Returns:
        Matches ordered by base length (empty when no alignment is possible)
    """
    sequencer = JointLengthSequencer(**config)
    return sequencer.calculate_matches(
        base_data,
        target_data,
        pivot_percentile=pivot_percentile,
        tolerance=tolerance,
        pivot_required=pivot_required,
        base_length_col=base_length_col,
        target_length_col=target_length_col,
    )


def align_request(request: AlignmentRequest, **config) -> SequencingResult:
    """Validate a request and run it.

    Raises:
        InvalidInputError: The request fails validation; the message lists
            every problem found
    """
    errors = request.validate()
    if errors:
        raise InvalidInputError("; ".join(errors))

    sequencer = JointLengthSequencer(**config)
    return sequencer.run(
        request.base_data,
        request.target_data,
        pivot_percentile=request.pivot_percentile,
        tolerance=request.tolerance,
        pivot_required=request.pivot_required,
        base_length_col=request.base_length_col,
        target_length_col=request.target_length_col,
    )
