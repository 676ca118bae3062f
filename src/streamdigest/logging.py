"""Console and file logging for the command line interface."""

from __future__ import annotations

import logging
import sys
from os import PathLike
from pathlib import Path

from tqdm.auto import tqdm

log = logging.getLogger(__name__)

LOGGING_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOGGING_DATEFMT = "%Y-%m-%d %I:%M %p"


def _formatter() -> logging.Formatter:
    return logging.Formatter(fmt=LOGGING_FORMAT, datefmt=LOGGING_DATEFMT)


class TqdmLoggingHandler(logging.Handler):
    """
    Writes log records to stderr through ``tqdm.write``.

    Records are printed above any active progress bar instead of breaking it,
    and stdout stays free for digests.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            tqdm.write(self.format(record), file=sys.stderr)
        except Exception:
            self.handleError(record)


def add_filelogger(file_path: str | PathLike, level: str = "INFO", logger_name: str | None = None) -> logging.FileHandler:
    """
    Also write records of ``logger_name`` (the root logger by default) to ``file_path``.

    :param level: Minimum level written to the file, case-insensitive
    :returns: The installed handler
    """
    logger = logging.getLogger(logger_name)
    handler = logging.FileHandler(Path(file_path))
    handler.setLevel(level.upper())
    handler.setFormatter(_formatter())
    logger.addHandler(handler)
    log.info(f"Logging {logger.name} records at {level.upper()} and above to {file_path}")
    return handler


def setup_cli_logging(log_file: str | None, log_level: str) -> None:
    """
    Route all records at ``log_level`` or above to stderr and, optionally, to ``log_file``.

    Calling this again replaces the console handler of the previous call.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level.upper())

    for handler in [h for h in root_logger.handlers if isinstance(h, TqdmLoggingHandler)]:
        root_logger.removeHandler(handler)

    console_handler = TqdmLoggingHandler()
    console_handler.setFormatter(_formatter())
    root_logger.addHandler(console_handler)

    if log_file:
        add_filelogger(log_file, log_level)

    log.debug(f"Logging to stderr at {log_level.upper()}")
