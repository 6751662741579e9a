"""Multiset overlap between allele collections.

Both collections are treated as multisets: every element of the first
collection consumes at most one equal, not yet consumed occurrence in the
second collection.

Example:
    >>> allele_overlap(["A", "A", "C"], ["A", "C", "C"])
    2
"""

from collections import Counter
from collections.abc import Hashable, Iterable


def _overlap(g1: Iterable[Hashable], g2: Iterable[Hashable], start: int) -> int:
    remaining = Counter(g2)
    count = start
    for allele in g1:
        if remaining[allele] > 0:
            remaining[allele] -= 1
            count += 1
    return count


def allele_overlap(
    g1: Iterable[str | None],
    g2: Iterable[str | None],
    start: int = 0,
) -> int:
    """Count the alleles of g1 that can be matched to a distinct allele of g2.

    Args:
        g1: First allele collection (order is the matching order)
        g2: Second allele collection
        start: Baseline added to the match count

    Returns:
        start plus the number of matched alleles

    Example:
        >>> allele_overlap(["A", "G"], ["G", "G"])
        1
        >>> allele_overlap([], ["A"], start=3)
        3
    """
    return _overlap(g1, g2, start)


def allele_index_overlap(
    g1: Iterable[int],
    g2: Iterable[int],
    start: int = 0,
) -> int:
    """Count the allele indices of g1 matched to a distinct index of g2.

    Same semantics as allele_overlap() over integer allele indices
    (0 = reference, 1.. = alternates).

    Raises:
        TypeError: If an element is not an integer
    """
    g1 = list(g1)
    g2 = list(g2)
    for index in (*g1, *g2):
        if not isinstance(index, int) or isinstance(index, bool):
            raise TypeError(f"Allele index must be an int, got {index!r}")
    return _overlap(g1, g2, start)
