"""BED interval file parser.

Streams GenomicInterval objects from BED files. Supports gzipped files.

BED format (tab-separated, 0-based half-open coordinates):
chrom  start  end  [name  ...]
chr1   999    2000 exon1
"""

import logging
from collections.abc import Iterator
from pathlib import Path

from genotype_stats.annotation import GTF_EXTENSIONS, parse_gtf
from genotype_stats.exceptions import IntervalParseError
from genotype_stats.io_utils import iter_lines, strip_gz_suffix
from genotype_stats.models import GenomicInterval

logger = logging.getLogger(__name__)

BED_EXTENSIONS = {".bed"}

_SKIP_PREFIXES = ("#", "track", "browser")


def parse_bed_line(line: str, line_num: int | None = None) -> GenomicInterval:
    """Parse a single BED line.

    Raises:
        IntervalParseError: If the line has fewer than 3 columns or invalid
            coordinates
    """
    parts = line.split("\t")
    if len(parts) < 3:
        parts = line.split()
    if len(parts) < 3:
        raise IntervalParseError(
            f"Invalid BED format: expected at least 3 columns, got {len(parts)}",
            line,
            line_num,
        )

    try:
        start = int(parts[1])
        end = int(parts[2])
    except ValueError:
        raise IntervalParseError("Invalid BED coordinates", line, line_num) from None

    name = parts[3] if len(parts) > 3 and parts[3] not in ("", ".") else None

    try:
        return GenomicInterval(contig=parts[0], start=start, end=end, name=name)
    except ValueError as e:
        raise IntervalParseError(str(e), line, line_num) from None


def parse_bed(filepath: Path) -> Iterator[GenomicInterval]:
    """Stream intervals from a BED file.

    Blank lines, comments and track/browser lines are skipped.

    Yields:
        GenomicInterval for each region line

    Raises:
        FileNotFoundError: If file doesn't exist
        IntervalParseError: If a line is malformed
    """
    for line_num, line in iter_lines(filepath):
        if not line.strip() or line.startswith(_SKIP_PREFIXES):
            continue
        yield parse_bed_line(line, line_num)


def read_regions(
    filepath: Path,
    feature_type: str | None = None,
) -> Iterator[GenomicInterval]:
    """Read regions from a BED or GTF/GFF file (format from extension).

    Args:
        filepath: Region file, may be gzipped
        feature_type: For GTF/GFF input, only keep features of this type
            (e.g. "exon")

    Raises:
        ValueError: If the file extension is not recognized
    """
    extension = strip_gz_suffix(filepath)
    if extension in BED_EXTENSIONS:
        if feature_type is not None:
            logger.warning(f"Ignoring feature type '{feature_type}' for BED input")
        return parse_bed(filepath)
    if extension in GTF_EXTENSIONS:
        return (
            feature.to_interval()
            for feature in parse_gtf(filepath, feature_type=feature_type)
        )
    raise ValueError(
        f"Unrecognized region file extension: {filepath.name}. "
        f"Expected .bed, .gtf, .gff or .gff3 (optionally .gz)"
    )
