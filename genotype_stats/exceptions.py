"""Custom exceptions for genotype statistics.

Kept minimal - only what's needed for clear error handling.
"""


class GenotypeStatsError(Exception):
    """Base exception for genotype statistics errors."""
    pass


class UnknownCategoryError(GenotypeStatsError, KeyError):
    """Raised when a count is added for a key the accumulator was not built with.

    This signals a registry/accumulator mismatch, i.e. a programming error.
    """

    def __init__(self, key: object) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Unknown category: {self.key}"


class IncompatibleAccumulatorsError(GenotypeStatsError, ValueError):
    """Raised when merging accumulators built over different key sets."""
    pass


class IncompatibleSampleSetsError(GenotypeStatsError, ValueError):
    """Raised when combining engines built over different sample sets."""
    pass


class VariantStoreError(GenotypeStatsError):
    """Raised when a variant file cannot be opened or queried."""
    pass


class ParseError(GenotypeStatsError, ValueError):
    """Raised when a line of a text input cannot be parsed.

    Attributes:
        line: Text of the offending line
        line_number: 1-based line number, if known
    """

    def __init__(self, message: str, line: str, line_number: int | None = None) -> None:
        location = f" at line {line_number}" if line_number is not None else ""
        super().__init__(f"{message}{location}: {line!r}")
        self.line = line
        self.line_number = line_number


class IntervalParseError(ParseError):
    """Raised on a malformed BED line."""
    pass


class FeatureParseError(ParseError):
    """Raised on a malformed GTF/GFF line."""
    pass


class ReportFormatError(ParseError):
    """Raised when a statistics report cannot be read back."""
    pass
