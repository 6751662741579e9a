"""Per-sample genotype statistics.

One GenotypeStats instance is built per shard (file, region batch or
worker). Records are ingested one at a time and every sample's genotype is
counted in each category it satisfies. Shards are folded together with
combine(); because the underlying merge is an element-wise sum the result
does not depend on the reduction order.

Report layout (tab-separated):
Sample  S1  S2
Total   3   3
Het     3   0
...
"""

import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from pathlib import Path

import pandas as pd

from genotype_stats.categories import DEFAULT_REGISTRY, Category, CategoryRegistry
from genotype_stats.counts import Counts
from genotype_stats.exceptions import (
    IncompatibleAccumulatorsError,
    IncompatibleSampleSetsError,
    ReportFormatError,
)
from genotype_stats.models import VariantRecord
from genotype_stats.store import VariantStore

logger = logging.getLogger(__name__)

SAMPLE_HEADER = "Sample"


class GenotypeStats:
    """Genotype category counts for a fixed set of samples.

    Attributes:
        samples: Sample names in header order
        registry: Categories counted for every sample
    """

    def __init__(
        self,
        sample_names: Sequence[str],
        registry: CategoryRegistry = DEFAULT_REGISTRY,
    ) -> None:
        """Allocate one accumulator per sample.

        Args:
            sample_names: Unique sample names (header order)
            registry: Category registry shared by all samples

        Raises:
            ValueError: If sample names are not unique
        """
        self.samples: tuple[str, ...] = tuple(sample_names)
        self.registry = registry

        # Stable ordinal per sample, assigned once
        self._index: dict[str, int] = {}
        for idx, name in enumerate(self.samples):
            if name in self._index:
                raise ValueError(f"Duplicate sample name: {name}")
            self._index[name] = idx

        self._counts: list[Counts[Category]] = [
            Counts.zeros(registry) for _ in self.samples
        ]

    @classmethod
    def from_store(
        cls,
        store: VariantStore,
        registry: CategoryRegistry = DEFAULT_REGISTRY,
    ) -> "GenotypeStats":
        """Create an empty instance for the samples of a variant store."""
        return cls(store.sample_names, registry)

    @property
    def sample_set(self) -> frozenset[str]:
        return frozenset(self.samples)

    def counts(self, sample: str) -> Counts[Category]:
        """Get the accumulator of a sample.

        Raises:
            KeyError: If the sample is unknown
        """
        return self._counts[self._index[sample]]

    def ingest(self, record: VariantRecord) -> None:
        """Count every sample's genotype at one record."""
        for idx, name in enumerate(self.samples):
            genotype = record.genotype(name)
            counts = self._counts[idx]
            for category in self.registry.classify(genotype):
                counts.add(category)

    def ingest_all(self, records: Iterable[VariantRecord]) -> int:
        """Ingest a sequence of records.

        Returns:
            Number of records ingested
        """
        n = 0
        for record in records:
            self.ingest(record)
            n += 1
        logger.debug(f"Ingested {n} records for {len(self.samples)} samples")
        return n

    def combine(self, other: "GenotypeStats") -> "GenotypeStats":
        """Fold the counts of other into this instance.

        Sample sets must be equal (order-independent). Everything is
        validated before any accumulator is changed, so a failed combine
        leaves both instances as they were.

        Returns:
            self

        Raises:
            IncompatibleSampleSetsError: If the sample sets differ
            IncompatibleAccumulatorsError: If category sets differ
        """
        self.check_compatible(other)
        for name in self.samples:
            self.counts(name).merge(other.counts(name))
        return self

    def check_compatible(self, other: "GenotypeStats") -> None:
        """Check that other can be combined into this instance.

        Raises:
            IncompatibleSampleSetsError: If the sample sets differ
            IncompatibleAccumulatorsError: If category sets differ
        """
        if self.sample_set != other.sample_set:
            only_self = sorted(self.sample_set - other.sample_set)
            only_other = sorted(other.sample_set - self.sample_set)
            raise IncompatibleSampleSetsError(
                f"Sample sets differ: only in left {only_self}, only in right {only_other}"
            )

        for name in self.samples:
            if not self.counts(name).is_compatible(other.counts(name)):
                raise IncompatibleAccumulatorsError(
                    "Cannot combine statistics built with different categories"
                )

    def copy(self) -> "GenotypeStats":
        clone = GenotypeStats(self.samples, self.registry)
        clone._counts = [c.copy() for c in self._counts]
        return clone

    def __iadd__(self, other: "GenotypeStats") -> "GenotypeStats":
        return self.combine(other)

    def __add__(self, other: "GenotypeStats") -> "GenotypeStats":
        return self.copy().combine(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GenotypeStats):
            return NotImplemented
        return self.to_map() == other.to_map()

    def to_map(self) -> dict[str, dict[str, int]]:
        """Return sample -> category name -> count."""
        return {
            name: {str(c): count for c, count in self._counts[idx].to_map().items()}
            for idx, name in enumerate(self.samples)
        }

    def report(self) -> pd.DataFrame:
        """Build the report table.

        Returns:
            DataFrame with categories as rows (registry order) and samples as
            columns (sorted by name)
        """
        sorted_samples = sorted(self.samples)
        snapshots = [self.counts(name).to_map() for name in sorted_samples]
        rows = [
            [snapshot.get(category, 0) for snapshot in snapshots]
            for category in self.registry
        ]

        frame = pd.DataFrame(
            rows,
            index=pd.Index(self.registry.names, name=SAMPLE_HEADER),
            columns=sorted_samples,
            dtype="int64",
        )
        return frame

    def write_tsv(self, path: Path) -> Path:
        """Write the report as tab-separated text.

        Args:
            path: Output file

        Returns:
            Path to the written file
        """
        path = Path(path)
        self.report().to_csv(path, sep="\t", lineterminator="\n")
        logger.info(f"Wrote genotype statistics for {len(self.samples)} samples to {path}")
        return path

    @classmethod
    def from_report(
        cls,
        frame: pd.DataFrame,
        registry: CategoryRegistry = DEFAULT_REGISTRY,
    ) -> "GenotypeStats":
        """Rebuild statistics from a report table.

        Categories absent from the table count as 0.

        Raises:
            ReportFormatError: If the table has an unknown category or a
                negative/non-integer count
        """
        stats = cls([str(c) for c in frame.columns], registry)
        values: dict[str, dict[Category, int]] = {name: {} for name in stats.samples}

        for category_name, row in frame.iterrows():
            name = str(category_name)
            line = "\t".join([name, *map(str, row.tolist())])
            if name not in registry:
                raise ReportFormatError(f"Unknown category '{name}'", line)
            category = registry[name]
            for sample, value in row.items():
                try:
                    count = int(value)
                except (TypeError, ValueError):
                    raise ReportFormatError(f"Invalid count '{value}'", line) from None
                if count < 0 or count != value:
                    raise ReportFormatError(f"Invalid count '{value}'", line)
                values[str(sample)][category] = count

        stats._counts = [
            Counts({c: values[name].get(c, 0) for c in registry})
            for name in stats.samples
        ]
        return stats

    @classmethod
    def read_tsv(
        cls,
        path: Path,
        registry: CategoryRegistry = DEFAULT_REGISTRY,
    ) -> "GenotypeStats":
        """Read a report written by write_tsv().

        Raises:
            FileNotFoundError: If the file doesn't exist
            ReportFormatError: If the content is not a valid report
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Report file not found: {path}")

        with open(path, encoding="utf-8") as f:
            header = f.readline().rstrip("\r\n")
        columns = header.split("\t")
        if columns[0] != SAMPLE_HEADER:
            raise ReportFormatError(
                f"Report header must start with '{SAMPLE_HEADER}'", header, 1
            )
        duplicates = sorted(name for name, n in Counter(columns[1:]).items() if n > 1)
        if duplicates:
            raise ReportFormatError(f"Duplicate sample names {duplicates}", header, 1)

        try:
            frame = pd.read_csv(path, sep="\t", index_col=0, dtype=str)
        except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
            raise ReportFormatError(f"Cannot parse report ({e})", header, 1) from e
        return cls.from_report(frame.apply(pd.to_numeric, errors="coerce"), registry)

    def __repr__(self) -> str:
        return f"GenotypeStats(samples={len(self.samples)}, categories={len(self.registry)})"


def combine_all(engines: Iterable[GenotypeStats]) -> GenotypeStats:
    """Reduce shard statistics with a balanced pairwise tree.

    Every shard is checked against the first one before anything is merged,
    and the reduction runs over copies, so the inputs are never modified.

    Args:
        engines: Statistics of independent shards over the same samples

    Returns:
        New combined statistics

    Raises:
        ValueError: If no statistics are given
        IncompatibleSampleSetsError: If sample sets differ
        IncompatibleAccumulatorsError: If category sets differ
    """
    shards = list(engines)
    if not shards:
        raise ValueError("No statistics to combine")
    for shard in shards[1:]:
        shards[0].check_compatible(shard)

    level = [shard.copy() for shard in shards]

    while len(level) > 1:
        paired = [
            level[i].combine(level[i + 1]) for i in range(0, len(level) - 1, 2)
        ]
        if len(level) % 2:
            paired.append(level[-1])
        level = paired
    return level[0]
