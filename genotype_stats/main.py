"""Main orchestration for genotype statistics runs.

Pipeline:
1. Read regions (BED/GTF/GFF) if given
2. Split regions into contiguous batches, one shard per batch
3. Collect statistics per shard in parallel worker processes; every
   worker opens its own store handle
4. Fold shard statistics with a balanced reduction tree
5. Write the TSV report

Without a regions file the whole variant file is scanned in one process.
"""

import logging
import math
from collections.abc import Sequence
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from genotype_stats.config import Config
from genotype_stats.intervals import read_regions
from genotype_stats.logging_config import get_progress_logger
from genotype_stats.models import GenomicInterval
from genotype_stats.regions import RegionIterator
from genotype_stats.stats import GenotypeStats, combine_all
from genotype_stats.store import open_store

logger = logging.getLogger(__name__)

console = Console()


def split_batches(
    regions: Sequence[GenomicInterval],
    n_batches: int = 1,
    batch_size: int | None = None,
) -> list[list[GenomicInterval]]:
    """Split regions into contiguous batches, preserving order.

    Args:
        regions: Regions to split
        n_batches: Number of batches when batch_size is not given
        batch_size: Fixed number of regions per batch

    Returns:
        List of non-empty batches

    Example:
        >>> [len(b) for b in split_batches(regions_of_5, n_batches=2)]
        [3, 2]
    """
    if not regions:
        return []
    if batch_size is None:
        batch_size = math.ceil(len(regions) / max(1, n_batches))
    return [
        list(regions[i:i + batch_size]) for i in range(0, len(regions), batch_size)
    ]


def collect_shard(vcf_file: Path, regions: Sequence[GenomicInterval]) -> GenotypeStats:
    """Collect statistics for one batch of regions (runs as parallel worker).

    Args:
        vcf_file: Indexed variant file
        regions: Regions of this shard

    Returns:
        Statistics of the shard
    """
    with RegionIterator(vcf_file, regions) as records:
        stats = GenotypeStats.from_store(records.store)
        n = stats.ingest_all(records)
    logger.debug(f"Shard of {len(regions)} regions: {n} records")
    return stats


def scan_file(vcf_file: Path) -> GenotypeStats:
    """Collect statistics over every record of a variant file."""
    with open_store(vcf_file, require_index=False) as store:
        stats = GenotypeStats.from_store(store)
        n = stats.ingest_all(store.records())
    logger.debug(f"Full scan of {vcf_file}: {n} records")
    return stats


def _run_shards(
    vcf_file: Path,
    batches: list[list[GenomicInterval]],
    max_workers: int,
) -> list[GenotypeStats]:
    results: list[GenotypeStats] = []

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Collecting genotype stats...", total=len(batches))

        if max_workers == 1 or len(batches) == 1:
            for batch in batches:
                results.append(collect_shard(vcf_file, batch))
                progress.advance(task)
            return results

        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            futures = {
                executor.submit(collect_shard, vcf_file, batch): i
                for i, batch in enumerate(batches)
            }
            for future in as_completed(futures):
                results.append(future.result())
                progress.advance(task)

    return results


def run_stats(config: Config) -> GenotypeStats:
    """Run a genotype statistics collection and write the report.

    Args:
        config: Run configuration

    Returns:
        Combined statistics

    Raises:
        VariantStoreError: If the variant file cannot be opened
        ParseError: If the regions file is malformed
        IncompatibleSampleSetsError: If shards disagree on samples
    """
    if config.regions_file is None:
        console.print(f"Scanning {config.vcf_file.name}")
        stats = scan_file(config.vcf_file)
    else:
        console.print(f"Reading regions from {config.regions_file.name}")
        regions = list(read_regions(config.regions_file, config.feature_type))
        console.print(f"Loaded {len(regions):,} regions\n")

        workers = min(config.workers, max(1, len(regions)))
        batches = split_batches(regions, n_batches=workers, batch_size=config.batch_size)

        if not batches:
            logger.warning(f"No regions in {config.regions_file}; report will be empty")
            with open_store(config.vcf_file) as store:
                stats = GenotypeStats.from_store(store)
        else:
            console.print(
                f"Processing {len(batches)} shards with {min(workers, len(batches))} workers"
            )
            shards = _run_shards(config.vcf_file, batches, min(workers, len(batches)))
            stats = combine_all(shards)

    stats.write_tsv(config.output_file)
    console.print(
        f"\n[green]Wrote statistics for {len(stats.samples)} samples to "
        f"{config.output_file}[/green]"
    )
    return stats


def merge_reports(reports: Sequence[Path], output_file: Path) -> GenotypeStats:
    """Combine reports of independent runs into one.

    Args:
        reports: TSV reports written by run_stats()
        output_file: Path for the combined report

    Returns:
        Combined statistics

    Raises:
        ReportFormatError: If a report cannot be read
        IncompatibleSampleSetsError: If reports disagree on samples
    """
    stats = combine_all(GenotypeStats.read_tsv(path) for path in reports)
    stats.write_tsv(output_file)
    get_progress_logger().info(
        f"Merged {len(reports)} reports ({len(stats.samples)} samples) into {output_file}"
    )
    return stats
