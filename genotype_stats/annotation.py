"""GTF/GFF feature parser.

GTF/GFF format (tab-separated, 1-based closed coordinates, 9 columns):
contig  source  feature  start  end  score  strand  frame  attributes

GTF attributes look like `gene_id "ENSG00000223972.4"; level 2;`, GFF3
attributes like `ID=gene1;Name=DDX11L1`. Both are accepted; surrounding
quotes are removed from values.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from genotype_stats.exceptions import FeatureParseError
from genotype_stats.io_utils import iter_lines
from genotype_stats.models import GenomicInterval

GTF_EXTENSIONS = {".gtf", ".gff", ".gff3"}

# Attribute keys tried, in order, for the interval name
_NAME_KEYS = ("gene_name", "gene_id", "transcript_id", "Name", "ID")


def parse_attributes(text: str) -> dict[str, str]:
    """Parse the attribute column of a GTF or GFF3 line."""
    attributes: dict[str, str] = {}
    for token in text.split(";"):
        token = token.strip()
        if not token:
            continue
        if "=" in token and " " not in token.split("=", 1)[0]:
            key, value = token.split("=", 1)
        elif " " in token:
            key, value = token.split(" ", 1)
        else:
            continue
        attributes[key.strip()] = value.strip().strip('"')
    return attributes


@dataclass(frozen=True, slots=True)
class Feature:
    """One annotation line.

    Attributes:
        contig: Contig name
        source: Annotation source (e.g. HAVANA)
        feature: Feature type (gene, transcript, exon, ...)
        start: 1-based start
        end: 1-based inclusive end
        score: Score, None when '.'
        strand: '+' or '-', None when '.'
        frame: 0, 1 or 2, None when '.'
        attributes: Attribute key -> value
    """

    contig: str
    source: str
    feature: str
    start: int
    end: int
    score: float | None = None
    strand: str | None = None
    frame: int | None = None
    attributes: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_line(cls, line: str, line_num: int | None = None) -> "Feature":
        """Parse a single GTF/GFF line.

        Raises:
            FeatureParseError: If the line is malformed; the message carries
                the line text
        """
        parts = line.rstrip("\r\n").split("\t")
        if len(parts) != 9:
            raise FeatureParseError(
                f"Invalid GTF format: expected 9 columns, got {len(parts)}",
                line,
                line_num,
            )

        contig, source, feature, start, end, score, strand, frame, attrs = parts

        try:
            start_val = int(start)
            end_val = int(end)
            score_val = None if score == "." else float(score)
            frame_val = None if frame == "." else int(frame)
        except ValueError:
            raise FeatureParseError("Invalid numeric field", line, line_num) from None

        if start_val < 1 or end_val < start_val:
            raise FeatureParseError(
                f"Invalid feature coordinates {start_val}-{end_val}", line, line_num
            )
        if strand not in ("+", "-", "."):
            raise FeatureParseError(f"Invalid strand '{strand}'", line, line_num)

        return cls(
            contig=contig,
            source=source,
            feature=feature,
            start=start_val,
            end=end_val,
            score=score_val,
            strand=None if strand == "." else strand,
            frame=frame_val,
            attributes=parse_attributes(attrs),
        )

    @property
    def name(self) -> str | None:
        for key in _NAME_KEYS:
            if key in self.attributes:
                return self.attributes[key]
        return None

    def to_interval(self) -> GenomicInterval:
        """Convert to a 0-based half-open interval."""
        return GenomicInterval(
            contig=self.contig,
            start=self.start - 1,
            end=self.end,
            name=self.name,
        )


def parse_gtf(filepath: Path, feature_type: str | None = None) -> Iterator[Feature]:
    """Stream features from a GTF/GFF file.

    Args:
        filepath: Annotation file, may be gzipped
        feature_type: Only yield features of this type

    Yields:
        Feature for each annotation line

    Raises:
        FileNotFoundError: If file doesn't exist
        FeatureParseError: If a line is malformed
    """
    for line_num, line in iter_lines(filepath):
        if not line.strip() or line.startswith("#"):
            continue
        feature = Feature.from_line(line, line_num)
        if feature_type is None or feature.feature == feature_type:
            yield feature
