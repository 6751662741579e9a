"""Genotype categories counted per sample.

A category is a name plus a predicate over a Genotype. The registry is a
closed, ordered table: categories are fixed when it is built and the order
defines the row order of the statistics report. Categories are not mutually
exclusive, a genotype is counted in every category it satisfies.
"""

from collections.abc import Callable, Iterable, Iterator
from typing import NamedTuple

from genotype_stats.models import Genotype


class Category(NamedTuple):
    """Named boolean classifier over a genotype."""

    name: str
    predicate: Callable[[Genotype], bool]

    def matches(self, genotype: Genotype) -> bool:
        return self.predicate(genotype)

    def __str__(self) -> str:
        return self.name


# Predicates are module-level functions so categories survive pickling
# into process-pool workers.


def _total(genotype: Genotype) -> bool:
    return True


def _het(genotype: Genotype) -> bool:
    return genotype.is_het


def _het_non_ref(genotype: Genotype) -> bool:
    return genotype.is_het_non_ref


def _hom(genotype: Genotype) -> bool:
    return genotype.is_hom


def _hom_ref(genotype: Genotype) -> bool:
    return genotype.is_hom_ref


def _hom_var(genotype: Genotype) -> bool:
    return genotype.is_hom_var


def _mixed(genotype: Genotype) -> bool:
    return genotype.is_mixed


def _no_call(genotype: Genotype) -> bool:
    return genotype.is_no_call


def _non_informative(genotype: Genotype) -> bool:
    return genotype.is_non_informative


def _available(genotype: Genotype) -> bool:
    return genotype.is_available


def _called(genotype: Genotype) -> bool:
    return genotype.is_called


def _filtered(genotype: Genotype) -> bool:
    return genotype.is_filtered


def _variant(genotype: Genotype) -> bool:
    return genotype.is_het_non_ref or genotype.is_het or genotype.is_hom_var


TOTAL = Category("Total", _total)
HET = Category("Het", _het)
HET_NON_REF = Category("HetNonRef", _het_non_ref)
HOM = Category("Hom", _hom)
HOM_REF = Category("HomRef", _hom_ref)
HOM_VAR = Category("HomVar", _hom_var)
MIXED = Category("Mixed", _mixed)
NO_CALL = Category("NoCall", _no_call)
NON_INFORMATIVE = Category("NonInformative", _non_informative)
AVAILABLE = Category("Available", _available)
CALLED = Category("Called", _called)
FILTERED = Category("Filtered", _filtered)
VARIANT = Category("Variant", _variant)

GENOTYPE_CATEGORIES: tuple[Category, ...] = (
    TOTAL,
    HET,
    HET_NON_REF,
    HOM,
    HOM_REF,
    HOM_VAR,
    MIXED,
    NO_CALL,
    NON_INFORMATIVE,
    AVAILABLE,
    CALLED,
    FILTERED,
    VARIANT,
)


class CategoryRegistry:
    """Fixed, ordered collection of categories.

    Usage:
        registry = CategoryRegistry(GENOTYPE_CATEGORIES)
        for category in registry.classify(genotype):
            counts.add(category)
    """

    def __init__(self, categories: Iterable[Category]) -> None:
        self._categories: tuple[Category, ...] = tuple(categories)
        self._by_name: dict[str, Category] = {}
        for category in self._categories:
            if category.name in self._by_name:
                raise ValueError(f"Duplicate category name: {category.name}")
            self._by_name[category.name] = category

    @property
    def categories(self) -> tuple[Category, ...]:
        return self._categories

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(c.name for c in self._categories)

    def classify(self, genotype: Genotype) -> list[Category]:
        """Return every category the genotype satisfies, in registry order."""
        return [c for c in self._categories if c.matches(genotype)]

    def __getitem__(self, name: str) -> Category:
        return self._by_name[name]

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            return item in self._by_name
        return item in self._categories

    def __iter__(self) -> Iterator[Category]:
        return iter(self._categories)

    def __len__(self) -> int:
        return len(self._categories)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CategoryRegistry):
            return NotImplemented
        return self._categories == other._categories

    def __hash__(self) -> int:
        return hash(self._categories)

    def __repr__(self) -> str:
        return f"CategoryRegistry({', '.join(self.names)})"


DEFAULT_REGISTRY = CategoryRegistry(GENOTYPE_CATEGORIES)
