"""Diagnostic logging.

The full-screen view owns the terminal, so nothing is logged to the console.
The package logger carries a NullHandler by default; a log file is attached
only when one is configured.
"""

import logging
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER = "concurrently_ui"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(log_file: Optional[Path] = None, level: str = "INFO") -> Optional[logging.Handler]:
    """
    Configure the package logger.

    Call this ONCE, before the supervisor starts.

    Args:
        log_file: File to append log records to; logging stays silent when None
        level: Level name for the package logger

    Returns:
        The file handler that was installed, if any

    Raises:
        OSError: If the log file cannot be opened
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    warnings_logger = logging.getLogger("py.warnings")

    # Remove handlers from an earlier call to avoid duplicate records
    for target in (logger, warnings_logger):
        for handler in list(target.handlers):
            if isinstance(handler, logging.FileHandler):
                target.removeHandler(handler)
                handler.close()

    if log_file is None:
        return None

    log_file.parent.mkdir(parents=True, exist_ok=True)
    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(level)
    fh.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(fh)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
    warnings_logger.addHandler(fh)
    return fh
