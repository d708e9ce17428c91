"""
Logging configuration for flac2mp3.

This module sets up the logging system with multiple outputs:
    - Console: Real-time messages with tqdm-compatible formatting
    - log_full.log: Complete log of all events (DEBUG and above)
    - log_errors.log: Only ERROR and CRITICAL level messages
    - conversion_failures.log: Source files that failed, with the failure kind

The file outputs are only created when a log directory is given
(--log-dir on the command line). Without it, everything goes to the console.

Usage:
    from flac2mp3.core.logger import setup_logging, get_logger

    setup_logging(log_dir)  # Call once at startup
    logger = get_logger(__name__)  # Get logger for each module

    logger.info("Starting conversion")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

from tqdm import tqdm

from flac2mp3.core.exceptions import Flac2Mp3Error


# Log file name prefixes (a timestamp is appended per run)
LOG_FULL_PREFIX = "log_full"
LOG_ERRORS_PREFIX = "log_errors"
CONVERSION_FAILURES_PREFIX = "conversion_failures"

# Log format for file output (detailed with timestamp and thread)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    WHITE = "\033[37m"
    BOLD = "\033[1m"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Formatter that adds colors to console output.

    Colors:
        - DEBUG: Blue
        - INFO: Green
        - WARNING: Yellow
        - ERROR: Red
        - CRITICAL: Bold Red
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.BLUE,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        colored_levelname = f"{color}{record.levelname}{Colors.RESET}"
        return f"{colored_levelname}: {record.getMessage()}"


class TqdmLoggingHandler(logging.Handler):
    """
    Logging handler that writes to the console through tqdm.write().

    External encoders often draw their own progress output on stderr;
    tqdm.write() keeps our lines intact when several workers log at once.

    Attributes:
        stream: The output stream (defaults to sys.stderr).
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream or sys.stderr)
        except Exception:
            self.handleError(record)


class ConversionFailureHandler(logging.Handler):
    """
    Handler that collects failed conversions into a report file.

    Listens for log records carrying a 'conversion_failed_path' extra field
    and writes them in a simple, human-readable format:

        /music/albumA/01 Intro.flac
        conversion: Encoder 'lame' exited with status 1

        /music/albumB/02 Song.flac
        destination-exists: Destination already exists: /music/albumB/02 Song.mp3

    Records without the field are ignored.

    Attributes:
        report_path: Path to the conversion_failures log file.
        report_file: Open file handle (set by open()).

    Usage:
        log_conversion_failure(logger, error)
    """

    def __init__(self, report_path: Path) -> None:
        super().__init__()
        self.report_path = report_path
        self.report_file: TextIO | None = None

    def open(self) -> None:
        """Open the report file for writing (overwrites existing content)."""
        self.report_file = open(self.report_path, "w", encoding="utf-8")

    def emit(self, record: logging.LogRecord) -> None:
        if not hasattr(record, "conversion_failed_path"):
            return

        if self.report_file is None:
            return

        try:
            path = getattr(record, "conversion_failed_path")
            category = getattr(record, "conversion_failed_category", "error")
            reason = getattr(record, "conversion_failed_reason", "")

            self.report_file.write(f"{path}\n")
            self.report_file.write(f"{category}: {reason}\n\n")
            self.report_file.flush()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        """Close the report file handle. Safe to call multiple times."""
        if self.report_file is not None:
            try:
                self.report_file.close()
            except OSError:
                pass
            self.report_file = None
        super().close()


class ErrorOnlyFilter(logging.Filter):
    """Filter that only allows ERROR and CRITICAL level records."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def setup_logging(log_dir: Path | None = None, verbose: bool = False) -> None:
    """
    Configure the logging system for the application.

    This function should be called ONCE at application startup, before
    any worker threads are created.

    Args:
        log_dir: Directory where log files will be created. If None, only
                 the console handler is installed.
        verbose: Show DEBUG messages on the console (default INFO).

    Behavior:
        1. Configure root logger level to DEBUG and drop existing handlers
        2. Add the console handler (TqdmLoggingHandler, colored)
        3. If log_dir is given, create it and add:
           - log_full_{timestamp}.log (DEBUG, full format)
           - log_errors_{timestamp}.log (ERROR+ through ErrorOnlyFilter)
           - conversion_failures_{timestamp}.log (ConversionFailureHandler)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(ColoredConsoleFormatter())
    root_logger.addHandler(console_handler)

    if log_dir is None:
        return

    log_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    full_handler = logging.FileHandler(
        log_dir / f"{LOG_FULL_PREFIX}_{timestamp}.log", mode="w", encoding="utf-8"
    )
    full_handler.setLevel(logging.DEBUG)
    full_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    root_logger.addHandler(full_handler)

    error_handler = logging.FileHandler(
        log_dir / f"{LOG_ERRORS_PREFIX}_{timestamp}.log", mode="w", encoding="utf-8"
    )
    error_handler.setLevel(logging.DEBUG)  # Filter handles the level restriction
    error_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    error_handler.addFilter(ErrorOnlyFilter())
    root_logger.addHandler(error_handler)

    failures_handler = ConversionFailureHandler(
        log_dir / f"{CONVERSION_FAILURES_PREFIX}_{timestamp}.log"
    )
    failures_handler.open()
    root_logger.addHandler(failures_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The logger name, typically __name__ of the calling module.

    Returns:
        logging.Logger configured by setup_logging().

    Note:
        Loggers obtained before setup_logging() is called have no handlers
        of their own and fall back to Python's last-resort handler.
    """
    return logging.getLogger(name)


def log_conversion_failure(logger: logging.Logger, error: Flac2Mp3Error) -> None:
    """
    Log an error record so the ConversionFailureHandler picks it up.

    Args:
        logger: The logger to use for the message.
        error: The error record returned by the batch converter.

    Behavior:
        Logs an ERROR level line "[category] message" and attaches the
        path, category and reason as extra fields.

    Example:
        for error in errors:
            log_conversion_failure(logger, error)
    """
    path = error.path
    logger.error(
        f"[{error.category}] {error.message}",
        extra={
            "conversion_failed_path": str(path) if path is not None else "-",
            "conversion_failed_category": error.category,
            "conversion_failed_reason": error.message,
        }
    )


def shutdown_logging() -> None:
    """
    Flush, close and remove all handlers from the root logger.

    Typically called in a finally block at application exit.
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        try:
            handler.flush()
            handler.close()
        except OSError:
            pass
        root_logger.removeHandler(handler)
