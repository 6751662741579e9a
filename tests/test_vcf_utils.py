"""Tests for variant file, record and genotype helpers."""

from pathlib import Path

import pysam
import pytest

from genotype_stats.models import Genotype, VariantRecord
from genotype_stats.vcf_utils import (
    FieldMethod,
    attribute_as_floats,
    attribute_as_strings,
    fill_allele,
    genotype_attribute_as_floats,
    genotype_attribute_as_strings,
    get_sample_ids,
    get_vcf_index_file,
    has_min_genome_quality,
    identical_variant_record,
    is_block_gvcf,
    is_compound_no_call,
    longest_allele,
    vcf_file_is_empty,
)


class TestFieldMethod:
    """Tests for FieldMethod reductions."""

    @pytest.mark.parametrize(
        "method,expected",
        [
            (FieldMethod.ALL, [3.0, 1.0, 3.0]),
            (FieldMethod.MAX, [3.0]),
            (FieldMethod.MIN, [1.0]),
            (FieldMethod.UNIQUE, [3.0, 1.0]),
        ],
    )
    def test_reductions(self, method: FieldMethod, expected: list[float]) -> None:
        assert method.apply([3.0, 1.0, 3.0]) == expected

    def test_avg(self) -> None:
        assert FieldMethod.AVG.apply([1.0, 2.0]) == [1.5]

    def test_empty(self) -> None:
        for method in FieldMethod:
            assert method.apply([]) == []


class TestRecordHelpers:
    """Tests for record-level helpers."""

    def test_fill_allele(self) -> None:
        assert fill_allele("A", 3) == "A--"
        assert fill_allele("AT", 4, "N") == "ATNN"
        assert fill_allele("ATG", 2) == "ATG"

    def test_identical_variant_record(self) -> None:
        a = VariantRecord("1", 100, 100, "A", ("G",), attributes={"DP": 10})
        b = VariantRecord("1", 100, 100, "A", ("T",), attributes={"DP": 10})
        c = VariantRecord("1", 100, 100, "A", ("G",), attributes={"DP": 11})
        assert identical_variant_record(a, b)
        assert not identical_variant_record(a, c)

    def test_longest_allele(self) -> None:
        record = VariantRecord("1", 100, 100, "A", ("GTT", "C"))
        assert longest_allele(record) == "GTT"

    def test_attribute_lookup(self) -> None:
        record = VariantRecord(
            "1", 100, 100, "A", ("G", "T"),
            attributes={"AF": (0.25, 0.75), "DP": 12, "CSQ": "missense,synonymous"},
        )
        assert attribute_as_floats(record, "AF") == [0.25, 0.75]
        assert attribute_as_floats(record, "AF", FieldMethod.MAX) == [0.75]
        assert attribute_as_floats(record, "DP") == [12.0]
        assert attribute_as_strings(record, "CSQ") == ["missense", "synonymous"]
        assert attribute_as_floats(record, "MQ") == []


class TestGenotypeHelpers:
    """Tests for genotype-level helpers."""

    def test_compound_no_call(self) -> None:
        assert is_compound_no_call(Genotype("S1", ("A", None), ref="A"))
        assert not is_compound_no_call(Genotype("S1", ("G", None), ref="A"))
        assert not is_compound_no_call(Genotype("S1", (None, None), ref="A"))
        assert not is_compound_no_call(Genotype("S1", ("A", "A"), ref="A"))

    def test_genotype_attributes(self) -> None:
        genotype = Genotype(
            "S1", ("A", "G"), ref="A", pl=(10, 0, 20), gq=30, attributes={"AD": (5, 7)}
        )
        assert genotype_attribute_as_floats(genotype, "GQ") == [30.0]
        assert genotype_attribute_as_floats(genotype, "PL", FieldMethod.MIN) == [0.0]
        assert genotype_attribute_as_strings(genotype, "AD") == ["5", "7"]
        assert genotype_attribute_as_strings(genotype, "DP") == []

    def test_min_genome_quality(self) -> None:
        assert has_min_genome_quality(Genotype("S1", ("A", "G"), ref="A", gq=30), 20)
        assert not has_min_genome_quality(Genotype("S1", ("A", "G"), ref="A", gq=10), 20)
        assert not has_min_genome_quality(Genotype("S1", ("A", "G"), ref="A"), 0)


class TestFileHelpers:
    """Tests for file-level helpers."""

    def test_get_sample_ids(self, plain_vcf: Path) -> None:
        assert get_sample_ids(plain_vcf) == ["S1", "S2", "S3"]

    def test_vcf_file_is_empty(self, plain_vcf: Path, tmp_path: Path) -> None:
        assert not vcf_file_is_empty(plain_vcf)

        empty = tmp_path / "empty.vcf"
        header = plain_vcf.read_text().split("\n")
        empty.write_text("\n".join(line for line in header if line.startswith("#")) + "\n")
        assert vcf_file_is_empty(empty)

    def test_index_file(self) -> None:
        assert get_vcf_index_file(Path("/data/calls.vcf")) == Path("/data/calls.vcf.idx")
        assert get_vcf_index_file(Path("/data/calls.vcf.gz")) == Path("/data/calls.vcf.gz.tbi")
        with pytest.raises(ValueError, match="no vcf file"):
            get_vcf_index_file(Path("/data/calls.bam"))

    def test_is_block_gvcf(self) -> None:
        header = pysam.VariantHeader()
        assert not is_block_gvcf(header)
        header.add_line("##GVCFBlock0-1=minGQ=0(inclusive),maxGQ=1(exclusive)")
        assert is_block_gvcf(header)
