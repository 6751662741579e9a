"""Helper functions for variant files, records and genotypes."""

from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Any

import pysam

from genotype_stats.models import Genotype, VariantRecord


def _unique(values: list[Any]) -> list[Any]:
    return list(dict.fromkeys(values))


class FieldMethod(Enum):
    """Reduction applied to a multi-valued INFO/FORMAT field."""

    ALL = "all"
    MAX = "max"
    MIN = "min"
    AVG = "avg"
    UNIQUE = "unique"

    def apply(self, values: list[Any]) -> list[Any]:
        """Reduce a list of values; empty input stays empty."""
        if not values:
            return []
        reducer: Callable[[list[Any]], list[Any]] = {
            FieldMethod.ALL: list,
            FieldMethod.MAX: lambda v: [max(v)],
            FieldMethod.MIN: lambda v: [min(v)],
            FieldMethod.AVG: lambda v: [sum(v) / len(v)],
            FieldMethod.UNIQUE: _unique,
        }[self]
        return reducer(values)


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [v for v in value if v is not None]
    if isinstance(value, str):
        return [v for v in value.split(",") if v not in ("", ".")]
    return [value]


def _to_floats(value: Any) -> list[float]:
    return [float(v) for v in _as_list(value)]


def _to_strings(value: Any) -> list[str]:
    return [str(v) for v in _as_list(value)]


def fill_allele(bases: str, new_size: int, fill_with: str = "-") -> str:
    """Extend an allele to a new length.

    Example:
        >>> fill_allele("A", 3)
        "A--"
    """
    return bases + fill_with * (new_size - len(bases))


def identical_variant_record(var1: VariantRecord, var2: VariantRecord) -> bool:
    """Compare position and attributes of two records (genotypes are ignored)."""
    return (
        var1.contig == var2.contig
        and var1.start == var2.start
        and var1.end == var2.end
        and dict(var1.attributes) == dict(var2.attributes)
    )


def is_block_gvcf(header: pysam.VariantHeader) -> bool:
    """Return True if the header declares a block-type GVCF."""
    return any(rec.key.startswith("GVCFBlock") for rec in header.records)


def get_sample_ids(vcf: Path) -> list[str]:
    """Get sample IDs from a variant file, in header order."""
    with pysam.VariantFile(str(vcf)) as reader:
        return list(reader.header.samples)


def get_vcf_index_file(vcf_file: Path) -> Path:
    """Return the expected index path of a variant file.

    Raises:
        ValueError: If the path is not a .vcf or .vcf.gz file
    """
    name = str(Path(vcf_file).absolute())
    if name.endswith(".vcf"):
        return Path(name + ".idx")
    if name.endswith(".vcf.gz"):
        return Path(name + ".tbi")
    raise ValueError(f"File given is no vcf file: {vcf_file}")


def vcf_file_is_empty(vcf_file: Path) -> bool:
    """Return True if a variant file has no records."""
    with pysam.VariantFile(str(vcf_file)) as reader:
        return next(iter(reader), None) is None


def is_compound_no_call(genotype: Genotype) -> bool:
    """Check whether a genotype is of the form 0/. (reference plus no-call)."""
    return (
        genotype.is_mixed
        and any(genotype.allele_equals_reference(a) for a in genotype.alleles)
    )


def longest_allele(record: VariantRecord) -> str:
    """Return the allele with the most bases (first one on ties)."""
    return max(record.alleles, key=len)


def attribute_as_floats(
    record: VariantRecord,
    key: str,
    method: FieldMethod = FieldMethod.ALL,
) -> list[float]:
    """Look up an INFO field as a list of floats ([] when absent)."""
    return method.apply(_to_floats(record.attributes.get(key)))


def attribute_as_strings(
    record: VariantRecord,
    key: str,
    method: FieldMethod = FieldMethod.ALL,
) -> list[str]:
    """Look up an INFO field as a list of strings ([] when absent)."""
    return method.apply(_to_strings(record.attributes.get(key)))


def _genotype_field(genotype: Genotype, key: str) -> Any:
    standard = {"GQ": genotype.gq, "PL": genotype.pl, "FT": genotype.filters}
    if key in standard:
        return standard[key]
    return genotype.attributes.get(key)


def genotype_attribute_as_floats(
    genotype: Genotype,
    key: str,
    method: FieldMethod = FieldMethod.ALL,
) -> list[float]:
    """Look up a FORMAT field as a list of floats ([] when absent)."""
    return method.apply(_to_floats(_genotype_field(genotype, key)))


def genotype_attribute_as_strings(
    genotype: Genotype,
    key: str,
    method: FieldMethod = FieldMethod.ALL,
) -> list[str]:
    """Look up a FORMAT field as a list of strings ([] when absent)."""
    return method.apply(_to_strings(_genotype_field(genotype, key)))


def has_min_genome_quality(genotype: Genotype, min_gq: int) -> bool:
    """Check whether a genotype has a GQ of at least min_gq."""
    return genotype.gq is not None and genotype.gq >= min_gq

