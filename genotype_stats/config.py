"""Configuration dataclass for genotype statistics runs."""

import os
from dataclasses import dataclass
from pathlib import Path

from genotype_stats.io_utils import strip_gz_suffix

VARIANT_EXTENSIONS = {".vcf", ".bcf"}
INDEX_SUFFIXES = (".tbi", ".csi")


@dataclass
class Config:
    """Configuration for a genotype statistics run.

    Attributes:
        vcf_file: Path to the VCF/BCF file
        output_file: Path to the TSV report
        regions_file: Optional BED/GTF/GFF file restricting the records
        feature_type: GTF/GFF feature type to keep (e.g. "exon")
        max_workers: Maximum parallel workers (default: CPU count)
        batch_size: Regions per worker task (default: split evenly)
        verbose: Enable verbose logging
        log_dir: Directory for log files (default: no log file)
    """

    vcf_file: Path
    output_file: Path
    regions_file: Path | None = None
    feature_type: str | None = None

    # Parallelism
    max_workers: int | None = None
    batch_size: int | None = None

    # Logging
    verbose: bool = False
    log_dir: Path | None = None

    def __post_init__(self) -> None:
        """Ensure paths are Path objects."""
        if isinstance(self.vcf_file, str):
            self.vcf_file = Path(self.vcf_file)
        if isinstance(self.output_file, str):
            self.output_file = Path(self.output_file)
        if isinstance(self.regions_file, str):
            self.regions_file = Path(self.regions_file)
        if isinstance(self.log_dir, str):
            self.log_dir = Path(self.log_dir)

    @property
    def workers(self) -> int:
        """Number of workers to use."""
        return self.max_workers or os.cpu_count() or 1

    def has_index(self) -> bool:
        """Check whether a .tbi or .csi index exists next to the VCF."""
        return any(
            self.vcf_file.with_name(self.vcf_file.name + suffix).exists()
            for suffix in INDEX_SUFFIXES
        )

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors.

        Returns:
            List of error messages (empty if valid)
        """
        errors: list[str] = []

        if not self.vcf_file.exists():
            errors.append(f"VCF file not found: {self.vcf_file}")
        elif strip_gz_suffix(self.vcf_file) not in VARIANT_EXTENSIONS:
            errors.append(f"Not a VCF/BCF file: {self.vcf_file}")

        if self.regions_file is not None:
            if not self.regions_file.exists():
                errors.append(f"Regions file not found: {self.regions_file}")
            if self.vcf_file.exists() and not self.has_index():
                errors.append(
                    f"Region queries need an index (.tbi or .csi) for {self.vcf_file}"
                )

        if not self.output_file.parent.exists():
            errors.append(f"Output directory does not exist: {self.output_file.parent}")

        if self.max_workers is not None and self.max_workers < 1:
            errors.append(f"max_workers must be at least 1: {self.max_workers}")

        if self.batch_size is not None and self.batch_size < 1:
            errors.append(f"batch_size must be at least 1: {self.batch_size}")

        return errors
