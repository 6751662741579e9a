"""Pytest fixtures for genotype_stats tests."""

from collections.abc import Callable, Iterator, Sequence
from pathlib import Path

import pysam
import pytest

from genotype_stats.models import Genotype, VariantRecord
from genotype_stats.store import VariantStore


class InMemoryStore(VariantStore):
    """Variant store over a list of records, recording queries and closes."""

    def __init__(self, samples: Sequence[str], records: Sequence[VariantRecord]) -> None:
        self._samples = tuple(samples)
        self._records = list(records)
        self.queries: list[tuple[str, int, int]] = []
        self.closed = False

    @property
    def sample_names(self) -> tuple[str, ...]:
        return self._samples

    def query(self, contig: str, start: int, end: int) -> Iterator[VariantRecord]:
        self.queries.append((contig, start, end))
        return (
            r for r in self._records
            if r.contig == contig and r.start - 1 < end and r.end > start
        )

    def records(self) -> Iterator[VariantRecord]:
        return iter(self._records)

    def close(self) -> None:
        self.closed = True


def _genotype(sample: str, alleles: Sequence[str | None], ref: str = "A", **kwargs) -> Genotype:
    return Genotype(sample=sample, alleles=tuple(alleles), ref=ref, **kwargs)


@pytest.fixture
def make_record() -> Callable[..., VariantRecord]:
    """Factory for records from sample -> alleles mappings.

    Example:
        make_record(100, {"S1": ["A", "G"]}, ref="A", alts=("G",))
    """

    def _make(
        pos: int,
        calls: dict[str, Sequence[str | None]],
        ref: str = "A",
        alts: tuple[str, ...] = ("G",),
        contig: str = "1",
        pl: tuple[int, ...] | None = (10, 0, 20),
    ) -> VariantRecord:
        return VariantRecord(
            contig=contig,
            start=pos,
            end=pos + len(ref) - 1,
            ref=ref,
            alts=alts,
            genotypes={s: _genotype(s, a, ref=ref, pl=pl) for s, a in calls.items()},
        )

    return _make


@pytest.fixture
def store_records(make_record: Callable[..., VariantRecord]) -> list[VariantRecord]:
    """Records at 1:100, 1:200, 1:300 and 2:150 for samples S1, S2."""
    return [
        make_record(100, {"S1": ["A", "G"], "S2": ["A", "A"]}),
        make_record(200, {"S1": ["G", "G"], "S2": ["A", "G"]}),
        make_record(300, {"S1": ["A", "A"], "S2": [None, None]}),
        make_record(150, {"S1": ["A", "G"], "S2": ["A", "A"]}, contig="2"),
    ]


@pytest.fixture
def memory_store(store_records: list[VariantRecord]) -> InMemoryStore:
    """In-memory store over store_records."""
    return InMemoryStore(["S1", "S2"], store_records)


VCF_TEXT = (
    "##fileformat=VCFv4.2\n"
    "##contig=<ID=1,length=100000>\n"
    "##contig=<ID=2,length=100000>\n"
    "##contig=<ID=3,length=100000>\n"
    '##INFO=<ID=DP,Number=1,Type=Integer,Description="Depth">\n'
    '##FORMAT=<ID=GT,Number=1,Type=String,Description="Genotype">\n'
    '##FORMAT=<ID=GQ,Number=1,Type=Integer,Description="Genotype quality">\n'
    '##FORMAT=<ID=PL,Number=G,Type=Integer,Description="Phred-scaled likelihoods">\n'
    '##FORMAT=<ID=FT,Number=1,Type=String,Description="Genotype filter">\n'
    "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\tS1\tS2\tS3\n"
    "1\t100\trs1\tA\tG\t50\tPASS\tDP=10\tGT:GQ:PL:FT\t0/1:30:10,0,20:PASS\t0/0:40:0,30,60:PASS\t./.:.:.:.\n"
    "1\t200\trs2\tC\tT\t50\tPASS\tDP=12\tGT:GQ:PL:FT\t1/1:20:50,20,0:PASS\t0/1:10:0,0,0:LowGQ\t0/.:.:.:.\n"
    "1\t300\t.\tG\tA,C\t50\tPASS\tDP=8\tGT:GQ:PL:FT\t1/2:30:.:PASS\t0/0:30:0,10,20,30,40,50:PASS\t1/1:35:60,40,30,20,10,0:PASS\n"
    "2\t150\trs4\tT\tC\t50\tPASS\tDP=5\tGT:GQ:PL:FT\t0/0:50:0,50,90:PASS\t0/1:30:20,0,30:PASS\t1/1:30:90,30,0:PASS\n"
)

# Expected counts over all four records of VCF_TEXT
EXPECTED_COUNTS = {
    "S1": {
        "Total": 4, "Het": 2, "HetNonRef": 1, "Hom": 2, "HomRef": 1, "HomVar": 1,
        "Mixed": 0, "NoCall": 0, "NonInformative": 1, "Available": 4,
        "Called": 4, "Filtered": 0, "Variant": 3,
    },
    "S2": {
        "Total": 4, "Het": 2, "HetNonRef": 0, "Hom": 2, "HomRef": 2, "HomVar": 0,
        "Mixed": 0, "NoCall": 0, "NonInformative": 1, "Available": 4,
        "Called": 4, "Filtered": 1, "Variant": 2,
    },
    "S3": {
        "Total": 4, "Het": 0, "HetNonRef": 0, "Hom": 2, "HomRef": 0, "HomVar": 2,
        "Mixed": 1, "NoCall": 1, "NonInformative": 2, "Available": 4,
        "Called": 2, "Filtered": 0, "Variant": 2,
    },
}


@pytest.fixture
def expected_counts() -> dict[str, dict[str, int]]:
    return EXPECTED_COUNTS


@pytest.fixture
def plain_vcf(tmp_path: Path) -> Path:
    """Uncompressed, unindexed VCF."""
    vcf = tmp_path / "calls.vcf"
    vcf.write_text(VCF_TEXT)
    return vcf


@pytest.fixture
def indexed_vcf(tmp_path: Path) -> Path:
    """Bgzipped, tabix-indexed VCF (calls.vcf.gz + calls.vcf.gz.tbi)."""
    vcf = tmp_path / "indexed" / "calls.vcf"
    vcf.parent.mkdir()
    vcf.write_text(VCF_TEXT)
    compressed = pysam.tabix_index(str(vcf), preset="vcf", force=True)
    return Path(compressed)
