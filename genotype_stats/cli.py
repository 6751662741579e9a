"""Typer CLI for genotype statistics.

Usage:
    # Whole-file statistics
    genotype-stats stats -i calls.vcf.gz -o stats.tsv

    # Restricted to target regions, 8 workers
    genotype-stats stats -i calls.vcf.gz -r targets.bed -o stats.tsv -j 8

    # Restricted to exons of a GTF annotation
    genotype-stats stats -i calls.vcf.gz -r genes.gtf.gz --feature-type exon -o stats.tsv

    # Combine reports of independent runs
    genotype-stats merge chr1.tsv chr2.tsv -o all.tsv
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from genotype_stats import __version__
from genotype_stats.exceptions import GenotypeStatsError

app = typer.Typer(
    name="genotype-stats",
    help="Per-sample genotype statistics over VCF/BCF files",
    add_completion=False,
)

console = Console()


@app.command()
def stats(
    vcf: Annotated[
        Path,
        typer.Option(
            "--vcf", "-i",
            help="Input VCF/BCF file (indexed when --regions is used)",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    output: Annotated[
        Path,
        typer.Option(
            "--output", "-o",
            help="Output TSV report",
            file_okay=True,
            dir_okay=False,
        ),
    ],
    regions: Annotated[
        Path | None,
        typer.Option(
            "--regions", "-r",
            help="BED, GTF or GFF file restricting the records (may be gzipped)",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ] = None,
    feature_type: Annotated[
        str | None,
        typer.Option(
            "--feature-type",
            help="Only use GTF/GFF features of this type (e.g. exon)",
        ),
    ] = None,
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers", "-j",
            help="Number of parallel workers (default: CPU count)",
            min=1,
        ),
    ] = None,
    batch_size: Annotated[
        int | None,
        typer.Option(
            "--batch-size",
            help="Regions per worker task (default: split evenly over workers)",
            min=1,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose", "-v",
            help="Enable verbose logging",
        ),
    ] = False,
    log_dir: Annotated[
        Path | None,
        typer.Option(
            "--log-dir",
            help="Directory for a detailed log file",
            file_okay=False,
            dir_okay=True,
        ),
    ] = None,
) -> None:
    """Count genotype categories per sample and write a TSV report.

    Rows are the categories (Total, Het, HetNonRef, Hom, HomRef, HomVar,
    Mixed, NoCall, NonInformative, Available, Called, Filtered, Variant),
    columns the samples sorted by name.
    """
    from genotype_stats.config import Config
    from genotype_stats.logging_config import setup_logging
    from genotype_stats.main import run_stats

    log_file = setup_logging(log_dir=log_dir, verbose=verbose)

    console.print(f"[bold]Genotype statistics[/bold] v{__version__}\n", style="blue")

    config = Config(
        vcf_file=vcf,
        output_file=output,
        regions_file=regions,
        feature_type=feature_type,
        max_workers=workers,
        batch_size=batch_size,
        verbose=verbose,
        log_dir=log_dir,
    )

    console.print("Options Set:")
    console.print(f"VCF filename:      {config.vcf_file}")
    console.print(f"Regions filename:  {config.regions_file or '[whole file]'}")
    if config.feature_type:
        console.print(f"Feature type:      {config.feature_type}")
    console.print(f"Output filename:   {config.output_file}")
    console.print(f"Workers:           {config.workers}")
    if log_file:
        console.print(f"Log file:          {log_file}")
    console.print("")

    errors = config.validate()
    if errors:
        for error in errors:
            console.print(f"[red]ERROR:[/red] {error}")
        raise typer.Exit(code=1)

    try:
        run_stats(config)
    except (GenotypeStatsError, OSError, ValueError) as e:
        console.print(f"[red]ERROR:[/red] {e}")
        if verbose:
            import traceback
            console.print(traceback.format_exc())
        raise typer.Exit(code=1)


@app.command()
def merge(
    reports: Annotated[
        list[Path],
        typer.Argument(
            help="TSV reports to combine",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    output: Annotated[
        Path,
        typer.Option(
            "--output", "-o",
            help="Output TSV report",
            file_okay=True,
            dir_okay=False,
        ),
    ],
) -> None:
    """Combine reports of independent runs (same samples) into one."""
    from genotype_stats.main import merge_reports

    try:
        merge_reports(reports, output)
    except (GenotypeStatsError, OSError) as e:
        console.print(f"[red]ERROR:[/red] {e}")
        raise typer.Exit(code=1)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
