"""
Pairwise Dynamic Programming Aligner for Joint Lengths

One DP serves both passes of the sequencer:
- coarse pass over the two pivot sets
- fine pass over each pair of segments enclosed by consecutive aligned pivots

Scoring model (LCS with an approximate-equality predicate):
- base[i-1] and target[j-1] may match when |diff| <= tolerance; a match adds
  1 to the score and (tolerance - diff) to the quality
- skipping a base or target joint keeps score and quality unchanged
- the best candidate is the highest score, then the highest quality

Only the previous row of scores/qualities is needed to fill a row, so those are
kept as two rolling rows, and length differences are computed one row at a
time; the move of every cell is kept in a byte table for the backtrace.
"""

from typing import List, Sequence, Tuple, Union
import logging
import numpy as np

from ..models import Cell, Joint, JointMatchResult, Move, NormalizedSequence

logger = logging.getLogger(__name__)

_NONE = int(Move.NONE)
_DIAGONAL = int(Move.DIAGONAL)
_SKIP_BASE = int(Move.SKIP_BASE)
_SKIP_TARGET = int(Move.SKIP_TARGET)


def fill_table(
    base: Union[Sequence[float], np.ndarray],
    target: Union[Sequence[float], np.ndarray],
    tolerance: float,
) -> Tuple[List[bytearray], Cell]:
    """Fill the DP move table.

    Args:
        base: Ascending base lengths (m values)
        target: Ascending target lengths (n values)
        tolerance: Maximum length difference for a match

    Returns:
        (moves, final_cell) where ``moves[i][j]`` is the Move of cell (i, j) for
        the (m+1) x (n+1) table and ``final_cell`` is cell (m, n)
    """
    base = np.asarray(base, dtype=np.float64)
    target = np.asarray(target, dtype=np.float64)
    m, n = len(base), len(target)

    moves = [bytearray(n + 1) for _ in range(m + 1)]
    if m == 0 or n == 0:
        return moves, Cell()

    prev_score = [0] * (n + 1)
    prev_quality = [0.0] * (n + 1)

    for i in range(1, m + 1):
        cur_score = [0] * (n + 1)
        cur_quality = [0.0] * (n + 1)
        row_moves = moves[i]
        # One row of differences at a time; only the move table is m x n
        diff = np.abs(base[i - 1] - target)
        row_within = (diff <= tolerance).tolist()
        row_gain = (tolerance - diff).tolist()

        for j in range(1, n + 1):
            best_score, best_quality, best_move = 0, 0.0, _NONE

            if row_within[j - 1]:
                score = prev_score[j - 1] + 1
                quality = prev_quality[j - 1] + row_gain[j - 1]
                if score > best_score or (
                    score == best_score and quality > best_quality
                ):
                    best_score, best_quality, best_move = score, quality, _DIAGONAL

            score, quality = prev_score[j], prev_quality[j]
            if score > best_score or (score == best_score and quality > best_quality):
                best_score, best_quality, best_move = score, quality, _SKIP_BASE

            score, quality = cur_score[j - 1], cur_quality[j - 1]
            if score > best_score or (score == best_score and quality > best_quality):
                best_score, best_quality, best_move = score, quality, _SKIP_TARGET

            cur_score[j] = best_score
            cur_quality[j] = best_quality
            row_moves[j] = best_move

        prev_score, prev_quality = cur_score, cur_quality

    return moves, Cell(prev_score[n], prev_quality[n], Move(moves[m][n]))


def backtrace(moves: List[bytearray]) -> List[Tuple[int, int]]:
    """Follow recorded moves from the bottom-right cell.

    Returns:
        Matched (base_position, target_position) pairs in ascending order
    """
    i = len(moves) - 1
    j = len(moves[0]) - 1 if moves else 0
    pairs: List[Tuple[int, int]] = []

    while i > 0 and j > 0:
        move = moves[i][j]
        if move == _DIAGONAL:
            pairs.append((i - 1, j - 1))
            i -= 1
            j -= 1
        elif move == _SKIP_BASE:
            i -= 1
        elif move == _SKIP_TARGET:
            j -= 1
        else:
            # Score 0 from here on: nothing left to emit
            break

    pairs.reverse()
    return pairs


def align_lengths(
    base: Union[Sequence[float], np.ndarray],
    target: Union[Sequence[float], np.ndarray],
    tolerance: float,
) -> List[Tuple[int, int]]:
    """Best correspondence between two ascending length sequences.

    Args:
        base: Base lengths
        target: Target lengths
        tolerance: Maximum length difference for a match

    Returns:
        Ascending list of (base_position, target_position) pairs; empty when
        either side is empty
    """
    if len(base) == 0 or len(target) == 0:
        return []
    moves, final = fill_table(base, target, tolerance)
    pairs = backtrace(moves)
    logger.debug(
        f"Aligned {len(base)}x{len(target)}: score={final.score}, "
        f"quality={final.quality:.4f}"
    )
    return pairs


def align_pivots(
    base_pivots: NormalizedSequence,
    target_pivots: NormalizedSequence,
    tolerance: float,
) -> List[Tuple[Joint, Joint]]:
    """Coarse pass: align two pivot sets and return the matched joints"""
    pairs = align_lengths(base_pivots.lengths, target_pivots.lengths, tolerance)
    return [(base_pivots[i], target_pivots[j]) for i, j in pairs]


def align_segment(
    base_segment: NormalizedSequence,
    target_segment: NormalizedSequence,
    tolerance: float,
) -> List[JointMatchResult]:
    """Fine pass: align two segments and map matches to original indices"""
    pairs = align_lengths(base_segment.lengths, target_segment.lengths, tolerance)
    base_idx = base_segment.original_indices
    target_idx = target_segment.original_indices
    return [
        JointMatchResult(base_index=int(base_idx[i]), target_index=int(target_idx[j]))
        for i, j in pairs
    ]
