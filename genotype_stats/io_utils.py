"""I/O utilities for transparent gzip handling.

Region and annotation files are often distributed gzipped (.bed.gz,
.gtf.gz). Compression is detected from the magic bytes so both forms read
the same way.

Example:
    for line_num, line in iter_lines(Path("targets.bed.gz")):
        process(line)
"""

import gzip
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO

# Gzip magic bytes (first two bytes of gzip/bgzip file)
GZIP_MAGIC = b"\x1f\x8b"


def is_gzipped(filepath: Path) -> bool:
    """Detect if a file is gzip-compressed.

    Checks magic bytes first, falls back to the extension if the file is
    too small or unreadable.

    Example:
        >>> is_gzipped(Path("targets.bed.gz"))
        True
    """
    try:
        with open(filepath, "rb") as f:
            magic = f.read(2)
            if len(magic) >= 2:
                return magic == GZIP_MAGIC
    except OSError:
        pass

    return str(filepath).endswith(".gz")


def strip_gz_suffix(filepath: Path) -> str:
    """Return the extension of a file ignoring a trailing .gz.

    Example:
        >>> strip_gz_suffix(Path("genes.gtf.gz"))
        ".gtf"
    """
    suffix = filepath.suffix.lower()
    if suffix == ".gz":
        return filepath.with_suffix("").suffix.lower()
    return suffix


@contextmanager
def smart_open(filepath: Path) -> Iterator[IO[str]]:
    """Open a text file with automatic gzip detection.

    Yields:
        Text file handle
    """
    if is_gzipped(filepath):
        f = gzip.open(filepath, "rt", encoding="utf-8")
    else:
        f = open(filepath, "rt", encoding="utf-8")

    try:
        yield f
    finally:
        f.close()


def iter_lines(filepath: Path) -> Iterator[tuple[int, str]]:
    """Iterate over numbered lines of a possibly gzipped file.

    Lines are stripped of trailing newlines.

    Yields:
        (1-based line number, line) tuples

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    if not filepath.exists():
        raise FileNotFoundError(f"File not found: {filepath}")

    with smart_open(filepath) as f:
        for line_num, line in enumerate(f, 1):
            yield line_num, line.rstrip("\r\n")
