"""Data models for genotype statistics.

Immutable representations of variant records, per-sample genotypes and
genomic intervals. The genotype call-state capabilities follow the htsjdk
genotype model (type derived from the allele list).
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class GenotypeType(Enum):
    """Call state of a genotype, derived from its alleles."""

    NO_CALL = auto()
    HOM_REF = auto()
    HET = auto()
    HOM_VAR = auto()
    UNAVAILABLE = auto()
    MIXED = auto()


def determine_type(alleles: tuple[str | None, ...], ref: str) -> GenotypeType:
    """Derive the call state from an allele list.

    Args:
        alleles: Called alleles, None for a no-call allele
        ref: Reference allele of the record

    Returns:
        GenotypeType of the allele list
    """
    if not alleles:
        return GenotypeType.UNAVAILABLE

    saw_no_call = False
    saw_multiple = False
    first_called: str | None = None
    for allele in alleles:
        if allele is None:
            saw_no_call = True
        elif first_called is None:
            first_called = allele
        elif allele != first_called:
            saw_multiple = True

    if saw_no_call:
        return GenotypeType.NO_CALL if first_called is None else GenotypeType.MIXED
    if saw_multiple:
        return GenotypeType.HET
    return GenotypeType.HOM_REF if first_called == ref else GenotypeType.HOM_VAR


@dataclass(frozen=True, slots=True)
class Genotype:
    """One sample's call at a variant record.

    Attributes:
        sample: Sample name
        alleles: Called alleles in GT order, None for a no-call allele
        ref: Reference allele of the record
        allele_indices: Allele indices (0 = reference), None for no-call
        phased: Whether the GT is phased
        filters: Per-sample FT value (None when unset)
        pl: Phred-scaled genotype likelihoods (None when absent)
        gq: Genotype quality (None when absent)
        attributes: Remaining FORMAT fields
    """

    sample: str
    alleles: tuple[str | None, ...]
    ref: str
    allele_indices: tuple[int | None, ...] = ()
    phased: bool = False
    filters: str | None = None
    pl: tuple[int, ...] | None = None
    gq: int | None = None
    attributes: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def missing(cls, sample: str, ref: str, ploidy: int = 2) -> "Genotype":
        """Build the no-call genotype used when a sample has no data."""
        return cls(
            sample=sample,
            alleles=(None,) * ploidy,
            ref=ref,
            allele_indices=(None,) * ploidy,
        )

    @property
    def type(self) -> GenotypeType:
        return determine_type(self.alleles, self.ref)

    @property
    def ploidy(self) -> int:
        return len(self.alleles)

    def allele_equals_reference(self, allele: str | None) -> bool:
        return allele is not None and allele == self.ref

    @property
    def is_het(self) -> bool:
        return self.type is GenotypeType.HET

    @property
    def is_het_non_ref(self) -> bool:
        return self.is_het and not any(
            self.allele_equals_reference(a) for a in self.alleles
        )

    @property
    def is_hom(self) -> bool:
        return self.type in (GenotypeType.HOM_REF, GenotypeType.HOM_VAR)

    @property
    def is_hom_ref(self) -> bool:
        return self.type is GenotypeType.HOM_REF

    @property
    def is_hom_var(self) -> bool:
        return self.type is GenotypeType.HOM_VAR

    @property
    def is_mixed(self) -> bool:
        return self.type is GenotypeType.MIXED

    @property
    def is_no_call(self) -> bool:
        return self.type is GenotypeType.NO_CALL

    @property
    def is_available(self) -> bool:
        return self.type is not GenotypeType.UNAVAILABLE

    @property
    def is_called(self) -> bool:
        """Fully determined call: no uncalled alleles."""
        return self.type in (
            GenotypeType.HET,
            GenotypeType.HOM_REF,
            GenotypeType.HOM_VAR,
        )

    @property
    def is_filtered(self) -> bool:
        return self.filters is not None and self.filters != "PASS"

    @property
    def is_non_informative(self) -> bool:
        """True when there are no likelihoods or all of them are 0."""
        if self.pl is None:
            return True
        return all(value == 0 for value in self.pl)


@dataclass(frozen=True, slots=True)
class VariantRecord:
    """One variant position with call data for all samples.

    Attributes:
        contig: Contig name
        start: 1-based start position
        end: 1-based inclusive end position
        ref: Reference allele
        alts: Alternate alleles
        genotypes: Sample name -> Genotype
        attributes: INFO key -> value
        id: Variant identifier (None when '.')
    """

    contig: str
    start: int
    end: int
    ref: str
    alts: tuple[str, ...] = ()
    genotypes: Mapping[str, Genotype] = field(default_factory=dict)
    attributes: Mapping[str, Any] = field(default_factory=dict)
    id: str | None = None

    @property
    def alleles(self) -> tuple[str, ...]:
        return (self.ref, *self.alts)

    @property
    def sample_names(self) -> tuple[str, ...]:
        return tuple(self.genotypes)

    def genotype(self, sample: str) -> Genotype:
        """Get a sample's genotype, a no-call genotype when absent."""
        genotype = self.genotypes.get(sample)
        if genotype is None:
            return Genotype.missing(sample, self.ref)
        return genotype

    def has_attribute(self, key: str) -> bool:
        return key in self.attributes


@dataclass(frozen=True, slots=True)
class GenomicInterval:
    """Genomic region in BED convention.

    Attributes:
        contig: Contig name
        start: 0-based inclusive start
        end: 0-based exclusive end
        name: Optional region name
    """

    contig: str
    start: int
    end: int
    name: str | None = None

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"Interval start must be >= 0: {self.start}")
        if self.end < self.start:
            raise ValueError(
                f"Interval end ({self.end}) is before start ({self.start})"
            )

    @property
    def length(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "GenomicInterval") -> bool:
        return (
            self.contig == other.contig
            and self.start < other.end
            and other.start < self.end
        )

    def __str__(self) -> str:
        return f"{self.contig}:{self.start + 1}-{self.end}"
