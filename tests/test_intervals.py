"""Tests for BED parsing and region file dispatch."""

import gzip
from pathlib import Path

import pytest

from genotype_stats.exceptions import IntervalParseError
from genotype_stats.intervals import parse_bed, parse_bed_line, read_regions
from genotype_stats.models import GenomicInterval


class TestParseBedLine:
    """Tests for parse_bed_line function."""

    def test_three_columns(self) -> None:
        assert parse_bed_line("chr1\t999\t2000") == GenomicInterval("chr1", 999, 2000)

    def test_name_column(self) -> None:
        assert parse_bed_line("chr1\t999\t2000\texon1\t0\t+").name == "exon1"
        assert parse_bed_line("chr1\t999\t2000\t.").name is None

    def test_space_separated(self) -> None:
        assert parse_bed_line("chr2 10 20") == GenomicInterval("chr2", 10, 20)

    @pytest.mark.parametrize(
        "line,match",
        [
            ("chr1\t999", "at least 3 columns"),
            ("chr1\tabc\t2000", "Invalid BED coordinates"),
            ("chr1\t2000\t999", "before start"),
            ("chr1\t-5\t999", ">= 0"),
        ],
    )
    def test_invalid(self, line: str, match: str) -> None:
        with pytest.raises(IntervalParseError, match=match):
            parse_bed_line(line, 3)


class TestParseBed:
    """Tests for parse_bed function."""

    def test_skips_headers(self, tmp_path: Path) -> None:
        bed = tmp_path / "targets.bed"
        bed.write_text(
            "browser position chr1:1-100\n"
            "track name=targets\n"
            "# comment\n"
            "chr1\t0\t100\n"
            "\n"
            "chr2\t50\t60\tamplicon\n"
        )
        assert list(parse_bed(bed)) == [
            GenomicInterval("chr1", 0, 100),
            GenomicInterval("chr2", 50, 60, "amplicon"),
        ]

    def test_error_line_number(self, tmp_path: Path) -> None:
        bed = tmp_path / "targets.bed"
        bed.write_text("chr1\t0\t100\nchr1\tx\t5\n")
        with pytest.raises(IntervalParseError) as exc_info:
            list(parse_bed(bed))
        assert exc_info.value.line_number == 2

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            list(parse_bed(tmp_path / "absent.bed"))


class TestReadRegions:
    """Tests for read_regions dispatch."""

    def test_bed_gz(self, tmp_path: Path) -> None:
        bed = tmp_path / "targets.bed.gz"
        with gzip.open(bed, "wt") as f:
            f.write("1\t0\t150\n")
        assert list(read_regions(bed)) == [GenomicInterval("1", 0, 150)]

    def test_gtf(self, tmp_path: Path) -> None:
        gtf = tmp_path / "genes.gtf"
        gtf.write_text(
            '1\tsrc\tgene\t100\t300\t.\t+\t.\tgene_id "G1";\n'
            '1\tsrc\texon\t100\t150\t.\t+\t.\tgene_id "G1";\n'
        )
        assert list(read_regions(gtf)) == [
            GenomicInterval("1", 99, 300, "G1"),
            GenomicInterval("1", 99, 150, "G1"),
        ]
        assert list(read_regions(gtf, feature_type="exon")) == [
            GenomicInterval("1", 99, 150, "G1"),
        ]

    def test_unknown_extension(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="Unrecognized region file"):
            read_regions(tmp_path / "targets.txt")
