"""Indexed variant store backed by pysam.

Defines the interface the statistics code consumes (sample names, range
queries, full scans) and an implementation over VCF/BCF files read with
pysam.VariantFile. pysam records are converted into the immutable
VariantRecord/Genotype models.

Coordinates passed to query() are 0-based half-open (BED/pysam convention).

Example:
    with open_store(Path("calls.vcf.gz")) as store:
        for record in store.query("chr1", 10000, 20000):
            print(record.start)
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from pathlib import Path
from types import TracebackType
from typing import Any

import pysam

from genotype_stats.exceptions import VariantStoreError
from genotype_stats.models import Genotype, VariantRecord

logger = logging.getLogger(__name__)

# FORMAT fields mapped onto dedicated Genotype attributes
_GENOTYPE_FIELDS = {"GT", "FT", "PL", "GQ"}


class VariantStore(ABC):
    """Abstract handle on an indexed variant file.

    A handle is not safe for concurrent use; parallel workers open their own.
    """

    @property
    @abstractmethod
    def sample_names(self) -> Sequence[str]:
        """Sample names in header order."""

    @abstractmethod
    def query(self, contig: str, start: int, end: int) -> Iterator[VariantRecord]:
        """Yield records overlapping a 0-based half-open range."""

    @abstractmethod
    def records(self) -> Iterator[VariantRecord]:
        """Yield every record of the file in file order."""

    @abstractmethod
    def close(self) -> None:
        """Release the underlying file handle."""

    def __enter__(self) -> "VariantStore":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


def _normalize_filter(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, (tuple, list)):
        parts = [str(v) for v in value if v is not None and v != "."]
        return ";".join(parts) if parts else None
    value = str(value)
    return None if value in ("", ".") else value


def _normalize_pl(value: Any) -> tuple[int, ...] | None:
    if value is None:
        return None
    if not isinstance(value, (tuple, list)):
        value = (value,)
    pl = tuple(int(v) for v in value if v is not None)
    return pl or None


def genotype_from_pysam(sample: Any, ref: str) -> Genotype:
    """Convert a pysam VariantRecordSample into a Genotype.

    Args:
        sample: pysam VariantRecordSample
        ref: Reference allele of the record

    Returns:
        Immutable Genotype
    """
    has_gt = "GT" in sample
    alleles = tuple(sample.alleles) if has_gt else ()
    allele_indices = tuple(sample.allele_indices) if has_gt else ()
    attributes = {k: v for k, v in sample.items() if k not in _GENOTYPE_FIELDS}

    return Genotype(
        sample=sample.name,
        alleles=alleles,
        ref=ref,
        allele_indices=allele_indices,
        phased=bool(sample.phased) if has_gt else False,
        filters=_normalize_filter(sample.get("FT")),
        pl=_normalize_pl(sample.get("PL")),
        gq=sample.get("GQ"),
        attributes=attributes,
    )


def record_from_pysam(rec: Any) -> VariantRecord:
    """Convert a pysam VariantRecord into a VariantRecord.

    Args:
        rec: pysam VariantRecord

    Returns:
        Immutable VariantRecord with 1-based start and inclusive end
    """
    ref = rec.ref
    return VariantRecord(
        contig=rec.contig,
        start=rec.pos,
        end=rec.stop,
        ref=ref,
        alts=tuple(rec.alts or ()),
        genotypes={
            name: genotype_from_pysam(sample, ref)
            for name, sample in rec.samples.items()
        },
        attributes=dict(rec.info.items()),
        id=rec.id,
    )


class PysamVariantStore(VariantStore):
    """Variant store over a VCF/BCF file opened with pysam.

    Usage:
        with PysamVariantStore(Path("calls.vcf.gz")) as store:
            records = list(store.query("1", 0, 50000))
    """

    def __init__(self, path: Path, require_index: bool = True) -> None:
        """Open the variant file.

        Args:
            path: Path to .vcf, .vcf.gz or .bcf file
            require_index: Fail when no .tbi/.csi index is available

        Raises:
            VariantStoreError: If the file is missing, unreadable or unindexed
        """
        self.path = Path(path)
        if not self.path.exists():
            raise VariantStoreError(f"Variant file not found: {self.path}")

        try:
            self._file = pysam.VariantFile(str(self.path))
        except (OSError, ValueError) as e:
            raise VariantStoreError(f"Cannot open variant file {self.path}: {e}") from e

        if require_index and self._file.index is None:
            self._file.close()
            raise VariantStoreError(
                f"Variant file is not indexed: {self.path} (expected .tbi or .csi)"
            )

        self._closed = False
        logger.debug(f"Opened variant store {self.path}")

    @property
    def header(self) -> pysam.VariantHeader:
        return self._file.header

    @property
    def sample_names(self) -> tuple[str, ...]:
        return tuple(self._file.header.samples)

    @property
    def closed(self) -> bool:
        return self._closed

    def _has_contig(self, contig: str) -> bool:
        if contig not in self._file.header.contigs:
            return False
        index = self._file.index
        return index is None or contig in index

    def query(self, contig: str, start: int, end: int) -> Iterator[VariantRecord]:
        if self._closed:
            raise VariantStoreError(f"Variant store is closed: {self.path}")

        if not self._has_contig(contig):
            logger.debug(f"Contig {contig} not present in {self.path}; no records")
            return iter(())

        try:
            fetched = self._file.fetch(contig, start, end)
        except ValueError as e:
            raise VariantStoreError(
                f"Query {contig}:{start}-{end} failed on {self.path}: {e}"
            ) from e
        return (record_from_pysam(rec) for rec in fetched)

    def records(self) -> Iterator[VariantRecord]:
        if self._closed:
            raise VariantStoreError(f"Variant store is closed: {self.path}")
        return (record_from_pysam(rec) for rec in self._file)

    def close(self) -> None:
        if not self._closed:
            self._file.close()
            self._closed = True
            logger.debug(f"Closed variant store {self.path}")


def open_store(path: Path, require_index: bool = True) -> PysamVariantStore:
    """Open a variant file as a store.

    Raises:
        VariantStoreError: If the file cannot be opened
    """
    return PysamVariantStore(path, require_index=require_index)
