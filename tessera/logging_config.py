"""
Logging setup for Tessera.

Every tessera.* logger writes to a rotating debug.log under the data
directory; the console only shows warnings unless asked for more.

Usage:
    from tessera.logging_config import setup_logging
    log_path = setup_logging("data")
"""

import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path


ROOT_LOGGER = "tessera"
LOG_FILE_NAME = "debug.log"
MAX_LOG_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 5

FILE_FORMAT = "%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-40s | %(message)s"
CONSOLE_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"

_banner_written = False


def _file_handler(log_path: Path, level: int) -> logging.Handler:
    handler = RotatingFileHandler(
        log_path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%H:%M:%S"))
    return handler


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler


def setup_logging(
    data_root: Path | str,
    log_level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
) -> Path:
    """
    Attach file and console handlers to the tessera logger.

    Safe to call more than once: previous handlers are closed and replaced.

    Args:
        data_root: Directory that receives debug.log (created if missing)
        log_level: Minimum level written to the file
        console_level: Minimum level echoed to stderr

    Returns:
        Path to the log file
    """
    global _banner_written

    data_path = Path(data_root)
    data_path.mkdir(parents=True, exist_ok=True)
    log_path = data_path / LOG_FILE_NAME

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    logger.addHandler(_file_handler(log_path, log_level))
    logger.addHandler(_console_handler(console_level))

    if not _banner_written:
        logger.info("-" * 60)
        logger.info(f"Session started {datetime.now():%Y-%m-%d %H:%M:%S}, logging to {log_path.absolute()}")
        logger.info("-" * 60)
        _banner_written = True

    return log_path


def get_logger(name: str) -> logging.Logger:
    """Return a logger below the tessera namespace."""
    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def log_step(
    logger: logging.Logger,
    generation: int,
    step: int,
    details: str | None = None,
) -> None:
    """Debug line for one solver step, e.g. `GEN 0002 | STEP 00017 | ...`."""
    suffix = f" | {details}" if details else ""
    logger.debug(f"GEN {generation:04d} | STEP {step:05d}{suffix}")
