"""Joint sequencing data models

Data structures, enums and exceptions shared by the alignment engine.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Dict, Any, Sequence, Union
import numpy as np


class SequencingError(Exception):
    """Base class for joint sequencing errors"""

    pass


class InvalidInputError(SequencingError, ValueError):
    """Raised when a dataset record cannot be turned into a joint"""

    pass


class MissingFieldError(InvalidInputError):
    """Raised when the configured length column is absent from a record"""

    def __init__(self, column: str, position: int):
        self.column = column
        self.position = position
        super().__init__(
            f"Length column '{column}' is missing from record {position}"
        )


class InvalidValueError(InvalidInputError):
    """Raised when a length value cannot be parsed as a finite number"""

    def __init__(self, column: str, value: Any, position: int):
        self.column = column
        self.value = value
        self.position = position
        super().__init__(
            f"Invalid length value {value!r} in column '{column}' "
            f"(record {position})"
        )


class UnsupportedConfigurationError(SequencingError, NotImplementedError):
    """Raised for unknown strategy or executor names"""

    pass


class AlignmentCancelledError(SequencingError):
    """Raised when a sequencing run is cancelled before all intervals finish"""

    pass


class Move(IntEnum):
    """Direction recorded in a DP cell"""

    NONE = 0
    DIAGONAL = 1  # match base[i-1] with target[j-1]
    SKIP_BASE = 2  # from (i-1, j)
    SKIP_TARGET = 3  # from (i, j-1)


@dataclass(frozen=True)
class Joint:
    """A measurement reduced to its length and its position in the input dataset"""

    original_index: int
    length: float


@dataclass(frozen=True)
class Cell:
    """DP state: number of matches, accumulated closeness, and winning move"""

    score: int = 0
    quality: float = 0.0
    move: Move = Move.NONE


@dataclass(frozen=True)
class JointMatchResult:
    """A correspondence between a base joint and a target joint (original positions)"""

    base_index: int
    target_index: int

    def to_dict(self) -> Dict[str, int]:
        return {"baseIndex": self.base_index, "targetIndex": self.target_index}

    def __repr__(self):
        return f"JointMatchResult({self.base_index}<->{self.target_index})"


class NormalizedSequence:
    """Joints ordered by non-decreasing length.

    Stored column-wise as two numpy arrays so slices and binary searches stay
    cheap. Indexing yields ``Joint`` objects; ``slice`` and ``take`` return new
    sequences sharing the same ordering guarantee.
    """

    def __init__(self, lengths: np.ndarray, original_indices: np.ndarray):
        self.lengths = np.asarray(lengths, dtype=np.float64)
        self.original_indices = np.asarray(original_indices, dtype=np.int64)
        if self.lengths.shape != self.original_indices.shape:
            raise ValueError(
                f"lengths and original_indices differ in shape: "
                f"{self.lengths.shape} vs {self.original_indices.shape}"
            )

    def __len__(self) -> int:
        return int(self.lengths.shape[0])

    def __getitem__(self, idx: int) -> Joint:
        return Joint(
            original_index=int(self.original_indices[idx]),
            length=float(self.lengths[idx]),
        )

    def __repr__(self):
        return f"NormalizedSequence(n={len(self)})"

    def slice(self, start: int, stop: int) -> "NormalizedSequence":
        """Contiguous sub-range [start, stop)"""
        return NormalizedSequence(
            self.lengths[start:stop], self.original_indices[start:stop]
        )

    def take(self, indices: Union[Sequence[int], np.ndarray]) -> "NormalizedSequence":
        """Subsequence at the given (ascending) positions"""
        idx = np.asarray(indices, dtype=np.int64)
        return NormalizedSequence(self.lengths[idx], self.original_indices[idx])


@dataclass
class SequencingResult:
    """Matches of one sequencing run plus run statistics"""

    matches: List[JointMatchResult] = field(default_factory=list)
    stats: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "matches": [m.to_dict() for m in self.matches],
            "stats": self.stats,
        }
