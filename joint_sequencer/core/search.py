"""Search strategies over length-sorted arrays

Pivot selection and segment extraction only need two lookups on a sorted
length array. Both are expressed through a strategy so the binary-search
implementation and the plain scan stay interchangeable.
"""

from abc import ABC, abstractmethod
from typing import Dict, Type, Union
import numpy as np

from ..models import UnsupportedConfigurationError


class SearchStrategy(ABC):
    """Lookup interface over an ascending float array"""

    name = "base"

    @abstractmethod
    def first_at_least(self, lengths: np.ndarray, value: float, lo: int = 0) -> int:
        """Index of the first element >= value at or after ``lo`` (len if none)"""
        raise NotImplementedError

    @abstractmethod
    def first_greater(self, lengths: np.ndarray, value: float, lo: int = 0) -> int:
        """Index of the first element > value at or after ``lo`` (len if none)"""
        raise NotImplementedError

    def __repr__(self):
        return f"{self.__class__.__name__}()"


class BinarySearch(SearchStrategy):
    """O(log n) lookups via numpy.searchsorted"""

    name = "binary"

    def first_at_least(self, lengths: np.ndarray, value: float, lo: int = 0) -> int:
        return lo + int(np.searchsorted(lengths[lo:], value, side="left"))

    def first_greater(self, lengths: np.ndarray, value: float, lo: int = 0) -> int:
        return lo + int(np.searchsorted(lengths[lo:], value, side="right"))


class LinearScan(SearchStrategy):
    """O(n) forward scan; reference behaviour for the binary strategy"""

    name = "linear"

    def first_at_least(self, lengths: np.ndarray, value: float, lo: int = 0) -> int:
        idx = lo
        while idx < len(lengths) and lengths[idx] < value:
            idx += 1
        return idx

    def first_greater(self, lengths: np.ndarray, value: float, lo: int = 0) -> int:
        idx = lo
        while idx < len(lengths) and lengths[idx] <= value:
            idx += 1
        return idx


SEARCH_STRATEGIES: Dict[str, Type[SearchStrategy]] = {
    BinarySearch.name: BinarySearch,
    LinearScan.name: LinearScan,
}


def get_search_strategy(strategy: Union[str, SearchStrategy, None]) -> SearchStrategy:
    """Resolve a strategy name (or instance) to a SearchStrategy.

    Raises:
        UnsupportedConfigurationError: Unknown strategy name
    """
    if strategy is None:
        return BinarySearch()
    if isinstance(strategy, SearchStrategy):
        return strategy
    try:
        return SEARCH_STRATEGIES[strategy.lower()]()
    except (KeyError, AttributeError):
        raise UnsupportedConfigurationError(
            f"Search strategy {strategy!r} is not implemented "
            f"(available: {', '.join(sorted(SEARCH_STRATEGIES))})"
        ) from None
