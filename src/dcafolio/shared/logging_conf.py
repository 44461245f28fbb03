# src/dcafolio/shared/logging_conf.py
"""
Logging Configuration - Console and Rotating File Handlers

The report command prints its report on stdout, so diagnostics never go
there: the console handler writes to stderr, and an optional rotating
file (dcafolio.log) keeps a persistent trail of FX fallbacks and provider
errors. Calling setup_logging again replaces the previous handlers
(basicConfig with force=True), so repeated runs in one process do not
duplicate output.

Files that USE this module:
- dcafolio.app (setup_logging before the report runs)
- tests.test_app (handler wiring)

Files that this module USES:
- None (pure configuration module)
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s :: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILENAME = "dcafolio.log"


def _log_path(log_file: Optional[Union[str, Path]], log_dir: Optional[Union[str, Path]]) -> Optional[Path]:
    """Resolve the log file path; log_dir wins over log_file. Creates parent directories."""
    if log_dir:
        path = Path(log_dir) / LOG_FILENAME
    elif log_file:
        path = Path(log_file)
    else:
        return None
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def setup_logging(
    level=logging.WARNING,
    log_file: Optional[Union[str, Path]] = None,
    log_dir: Optional[Union[str, Path]] = None,
    log_console: bool = True,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> Optional[Path]:
    """
    Configure the root logger for the report command.

    Args:
        level: Logging level (default: logging.WARNING, so only fallbacks show)
        log_file: Optional path to a log file
        log_dir: Optional directory for the log file (file is named dcafolio.log)
        log_console: Whether to log to stderr (default: True)
        max_bytes: Maximum size per log file before rotation (default: 10MB)
        backup_count: Number of rotated files to keep (default: 5)

    Returns:
        Path of the log file, or None when logging only to the console
    """
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    handlers: List[logging.Handler] = []

    log_path = _log_path(log_file, log_dir)
    if log_path is not None:
        file_handler = RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    # A console handler is always kept when there is no file, or warnings would vanish
    if log_console or not handlers:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)
    logging.getLogger(__name__).debug(
        "Logging configured: file=%s, console=%s, level=%s", log_path, log_console, level
    )
    return log_path
