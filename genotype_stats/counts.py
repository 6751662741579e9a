"""Mergeable counter over a fixed key set.

The key set is fixed at construction. Counts only ever grow, through add()
or through merge() with an accumulator over the same key set. Merging is an
element-wise sum, so it is associative and commutative and shards can be
reduced in any order.
"""

from collections.abc import Hashable, Iterable, Mapping
from types import MappingProxyType
from typing import Generic, TypeVar

from genotype_stats.exceptions import (
    IncompatibleAccumulatorsError,
    UnknownCategoryError,
)

K = TypeVar("K", bound=Hashable)


class Counts(Generic[K]):
    """Per-key counter with associative merge.

    Usage:
        counts = Counts.zeros(["a", "b"])
        counts.add("a")
        counts += other_counts
    """

    def __init__(self, initial: Mapping[K, int]) -> None:
        """Initialize from a key -> starting count mapping.

        Args:
            initial: Starting counts; its keys become the fixed key set

        Raises:
            ValueError: If a starting count is negative
        """
        for key, value in initial.items():
            if value < 0:
                raise ValueError(f"Count for {key} must be >= 0: {value}")
        self._counts: dict[K, int] = dict(initial)

    @classmethod
    def zeros(cls, keys: Iterable[K]) -> "Counts[K]":
        return cls({key: 0 for key in keys})

    def add(self, key: K) -> None:
        """Increment the count of key by one.

        Raises:
            UnknownCategoryError: If key is not in the key set
        """
        if key not in self._counts:
            raise UnknownCategoryError(key)
        self._counts[key] += 1

    def get(self, key: K) -> int:
        """Return the count of key.

        Raises:
            UnknownCategoryError: If key is not in the key set
        """
        try:
            return self._counts[key]
        except KeyError:
            raise UnknownCategoryError(key) from None

    def keys(self) -> frozenset[K]:
        return frozenset(self._counts)

    def is_compatible(self, other: "Counts[K]") -> bool:
        """Check whether other has the same key set (order irrelevant)."""
        return self._counts.keys() == other._counts.keys()

    def merge(self, other: "Counts[K]") -> "Counts[K]":
        """Add the counts of other into this accumulator.

        Key sets are validated before anything is changed, so a failed merge
        leaves both accumulators untouched.

        Returns:
            self

        Raises:
            IncompatibleAccumulatorsError: If the key sets differ
        """
        if not self.is_compatible(other):
            missing = self._counts.keys() ^ other._counts.keys()
            raise IncompatibleAccumulatorsError(
                f"Cannot merge counts with different keys: {sorted(map(str, missing))}"
            )
        for key, value in other._counts.items():
            self._counts[key] += value
        return self

    def copy(self) -> "Counts[K]":
        return Counts(self._counts)

    def to_map(self) -> Mapping[K, int]:
        """Return a read-only snapshot of the counts."""
        return MappingProxyType(dict(self._counts))

    def __iadd__(self, other: "Counts[K]") -> "Counts[K]":
        return self.merge(other)

    def __add__(self, other: "Counts[K]") -> "Counts[K]":
        return self.copy().merge(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Counts):
            return NotImplemented
        return self._counts == other._counts

    def __len__(self) -> int:
        return len(self._counts)

    def __repr__(self) -> str:
        inner = ", ".join(f"{key}={value}" for key, value in self._counts.items())
        return f"Counts({inner})"
