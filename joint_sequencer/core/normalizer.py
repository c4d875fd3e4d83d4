"""Dataset normalization: raw keyed records -> length-sorted joints."""

from typing import Any, Callable, Mapping, Sequence, Union
import math
import logging
import numpy as np

from ..models import NormalizedSequence, MissingFieldError, InvalidValueError

logger = logging.getLogger(__name__)


class FieldAccessor:
    """Extracts a named numeric field from a record.

    Calling the accessor either returns a finite float or raises
    ``MissingFieldError`` / ``InvalidValueError``; it never coerces silently.
    """

    def __init__(self, column: str):
        self.column = column

    def __call__(self, record: Mapping[str, Any], position: int) -> float:
        try:
            raw = record[self.column]
        except (KeyError, TypeError):
            raise MissingFieldError(self.column, position) from None
        return self.parse(raw, position)

    def parse(self, raw: Any, position: int) -> float:
        """Convert a raw field value to float"""
        # bool is an int subclass; a flag is not a length
        if raw is None or isinstance(raw, bool):
            raise InvalidValueError(self.column, raw, position)
        try:
            value = float(raw)
        except (TypeError, ValueError):
            raise InvalidValueError(self.column, raw, position) from None
        if not math.isfinite(value):
            raise InvalidValueError(self.column, raw, position)
        return value

    def __repr__(self):
        return f"FieldAccessor({self.column!r})"


def normalize_dataset(
    records: Sequence[Mapping[str, Any]],
    accessor: Union[str, Callable[[Mapping[str, Any], int], float]],
) -> NormalizedSequence:
    """Turn records into a NormalizedSequence.

    Args:
        records: Input dataset, in its original order
        accessor: Length column name, or a callable ``(record, position) -> float``

    Returns:
        Joints sorted ascending by length; equal lengths keep input order

    Raises:
        MissingFieldError: A record lacks the length column
        InvalidValueError: A length value is not a finite number
    """
    if isinstance(accessor, str):
        accessor = FieldAccessor(accessor)

    lengths = np.fromiter(
        (accessor(record, pos) for pos, record in enumerate(records)),
        dtype=np.float64,
        count=len(records),
    )
    order = np.argsort(lengths, kind="stable")

    if logger.isEnabledFor(logging.DEBUG):
        span = ""
        if len(records):
            span = f" (range {lengths[order[0]]:.3f}..{lengths[order[-1]]:.3f})"
        logger.debug(f"Normalized {len(records)} records via {accessor!r}{span}")
    return NormalizedSequence(lengths[order], order.astype(np.int64))
