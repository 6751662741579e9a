"""Region-restricted record iteration.

RegionIterator turns a (possibly unbounded) sequence of genomic intervals
into one lazy sequence of variant records. It holds exactly one store handle
for its whole lifetime and queries intervals in input order, so records
covered by overlapping intervals are yielded once per interval.

The handle is released when the iterator is exhausted, when close() is
called, on leaving a with block, and when a query fails.

Example:
    with RegionIterator(Path("calls.vcf.gz"), parse_bed(Path("targets.bed"))) as it:
        while it.has_next():
            stats.ingest(it.next())
"""

import logging
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path
from types import TracebackType

from genotype_stats.models import GenomicInterval, VariantRecord
from genotype_stats.store import VariantStore, open_store

logger = logging.getLogger(__name__)

_EXHAUSTED = object()


class RegionIterator(Iterator[VariantRecord]):
    """Lazy concatenation of range queries over a single store handle."""

    def __init__(
        self,
        path: Path,
        regions: Iterable[GenomicInterval],
        opener: Callable[[Path], VariantStore] = open_store,
    ) -> None:
        """Open the store handle.

        Args:
            path: Indexed variant file
            regions: Intervals to query, in order
            opener: Store factory (defaults to the pysam store)

        Raises:
            VariantStoreError: If the store cannot be opened; raised before
                any interval is consumed
        """
        self._store = opener(path)
        self._regions = iter(regions)
        self._current: Iterator[VariantRecord] = iter(())
        self._pending: object = _EXHAUSTED
        self._closed = False
        self.regions_queried = 0

    @property
    def store(self) -> VariantStore:
        return self._store

    @property
    def closed(self) -> bool:
        return self._closed

    def _advance(self) -> object:
        while True:
            record = next(self._current, _EXHAUSTED)
            if record is not _EXHAUSTED:
                return record

            region = next(self._regions, _EXHAUSTED)
            if region is _EXHAUSTED:
                return _EXHAUSTED
            if not isinstance(region, GenomicInterval):
                raise TypeError(f"Expected a GenomicInterval, got {region!r}")

            logger.debug(f"Querying region {region}")
            self._current = self._store.query(region.contig, region.start, region.end)
            self.regions_queried += 1

    def has_next(self) -> bool:
        """Check whether another record is available (may block on I/O)."""
        if self._pending is not _EXHAUSTED:
            return True
        if self._closed:
            return False

        try:
            self._pending = self._advance()
        except BaseException:
            self.close()
            raise

        if self._pending is _EXHAUSTED:
            self.close()
            return False
        return True

    def next(self) -> VariantRecord:
        """Take the next record.

        Raises:
            StopIteration: If the sequence is exhausted
        """
        if not self.has_next():
            raise StopIteration
        record = self._pending
        self._pending = _EXHAUSTED
        return record  # type: ignore[return-value]

    def __next__(self) -> VariantRecord:
        return self.next()

    def __iter__(self) -> "RegionIterator":
        return self

    def close(self) -> None:
        """Release the store handle. Safe to call more than once."""
        if not self._closed:
            self._closed = True
            self._pending = _EXHAUSTED
            self._current = iter(())
            self._store.close()
            logger.debug(f"Released store after {self.regions_queried} regions")

    def __enter__(self) -> "RegionIterator":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


def load_region(
    path: Path,
    region: GenomicInterval,
    opener: Callable[[Path], VariantStore] = open_store,
) -> list[VariantRecord]:
    """Read all records of a single region.

    Args:
        path: Indexed variant file
        region: Region to fetch

    Returns:
        Records overlapping the region
    """
    with opener(path) as store:
        return list(store.query(region.contig, region.start, region.end))


def load_regions(
    path: Path,
    regions: Iterable[GenomicInterval],
    opener: Callable[[Path], VariantStore] = open_store,
) -> RegionIterator:
    """Return the records of multiple regions as a single iterator."""
    return RegionIterator(path, regions, opener=opener)
