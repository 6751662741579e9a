"""
Logging setup for genotype statistics runs.

Handlers installed on the root logger:
- stderr: WARNING and above, or everything with --verbose
- log file: optional, everything, rotated by size

Worker processes inherit the configuration through the root logger, so
modules only ever call logging.getLogger(__name__).
"""

import logging
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

PROGRESS_LOGGER = "genotype_stats.progress"

_CONSOLE_FORMAT = "%(levelname)s: %(message)s"
_FILE_FORMAT = "%(asctime)s [%(processName)s] %(name)s %(levelname)s: %(message)s"

_configured = False
_log_file: Optional[Path] = None

# Handlers installed by this module; other handlers are left alone
_root_handlers: list[logging.Handler] = []
_progress_handler: Optional[logging.Handler] = None


def setup_logging(
    log_dir: Optional[Path] = None,
    job_name: str = "genotype_stats",
    verbose: bool = False,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5
) -> Optional[Path]:
    """
    Configure the root logger once per process.

    Args:
        log_dir: Directory for the log file. No file is written when None.
        job_name: Prefix of the log file name.
        verbose: Show DEBUG messages on stderr.
        max_bytes: Size at which the log file is rotated.
        backup_count: Rotated files kept next to the current one.

    Returns:
        Path of the log file, None without log_dir. Later calls return the
        path of the first call.
    """
    global _configured, _log_file

    if _configured:
        return _log_file

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    stderr_handler = logging.StreamHandler()
    stderr_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    stderr_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    root.addHandler(stderr_handler)
    _root_handlers.append(stderr_handler)

    if log_dir is not None:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        _log_file = directory / f"{job_name}_{stamp}.log"

        file_handler = RotatingFileHandler(
            _log_file,
            maxBytes=max_bytes,
            backupCount=backup_count
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        root.addHandler(file_handler)
        _root_handlers.append(file_handler)

    _configured = True
    return _log_file


def get_progress_logger() -> logging.Logger:
    """
    Logger for run summaries that are shown regardless of --verbose.

    Messages go to stderr as plain text and are not repeated by the root
    handlers.
    """
    global _progress_handler
    progress = logging.getLogger(PROGRESS_LOGGER)

    if _progress_handler is None:
        _progress_handler = logging.StreamHandler()
        _progress_handler.setFormatter(logging.Formatter("%(message)s"))
        progress.addHandler(_progress_handler)
        progress.setLevel(logging.INFO)
        progress.propagate = False

    return progress


def reset_logging() -> None:
    """Drop all handlers installed by this module (used by tests)."""
    global _configured, _log_file, _progress_handler
    _configured = False
    _log_file = None

    root = logging.getLogger()
    for handler in _root_handlers:
        root.removeHandler(handler)
        handler.close()
    _root_handlers.clear()

    if _progress_handler is not None:
        logging.getLogger(PROGRESS_LOGGER).removeHandler(_progress_handler)
        _progress_handler.close()
        _progress_handler = None
