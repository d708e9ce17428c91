"""
Batch conversion for flac2mp3.

This module drives the whole run: it pulls files from the directory
scanner and hands each one to the FileConverter, either one after another
(serial mode) or on a fixed-size thread pool (parallel mode). Every failure
is collected and returned; nothing stops the batch except an invalid worker
count, which is rejected before any directory is scanned.

Dispatch Policy (decided once per run):
    workers == 0  -> a single ConfigError is returned, nothing is touched
    workers == 1  -> serial: convert each file as it is discovered
    workers >= 2  -> parallel: ThreadPoolExecutor with exactly that many threads

Error Order:
    Serial mode returns errors in discovery order. Parallel mode returns
    them in completion order, which changes from run to run.

Usage:
    from flac2mp3.convert.batch import BatchConverter

    batch = BatchConverter(config)
    errors = batch.convert_directories([Path("/music/a"), Path("/music/b")])
    for error in errors:
        logger.error(str(error))
"""

import queue
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Iterable

from flac2mp3.convert.converter import FileConverter
from flac2mp3.convert.scanner import MultiDirectoryScanner
from flac2mp3.core.config import Config
from flac2mp3.core.exceptions import ConfigError, Flac2Mp3Error, JobError, ScanError
from flac2mp3.core.logger import get_logger

logger = get_logger(__name__)


class BatchState(Enum):
    """Lifecycle of a batch run."""
    IDLE = auto()
    DISPATCHING = auto()  # Pulling files from the scanner
    DRAINING = auto()     # Waiting for in-flight conversions
    DONE = auto()


@dataclass
class BatchStats:
    """
    Statistics from a batch run.

    Attributes:
        dispatched: Files handed to the converter.
        converted: Files converted without error.
        failed: Files whose conversion returned an error.
        scan_errors: Directories that could not be opened or read.
    """

    dispatched: int = 0
    converted: int = 0
    failed: int = 0
    scan_errors: int = 0

    @property
    def success_rate(self) -> float:
        """Calculate success rate as percentage."""
        if self.dispatched == 0:
            return 0.0
        return (self.converted / self.dispatched) * 100


class BatchConverter:
    """
    Converts every candidate file found in a list of directories.

    Attributes:
        config: Run configuration. config.workers must already be resolved
                (the "auto" value replaced by the CPU count).
        converter: FileConverter used for each file.
        state: Current BatchState.
        stats: BatchStats of the last (or current) run.

    Note:
        One BatchConverter runs one batch at a time. Calling
        convert_directories() again starts a fresh run.
    """

    def __init__(self, config: Config, converter: FileConverter | None = None) -> None:
        """
        Initialize the batch converter.

        Args:
            config: Run configuration.
            converter: Optional FileConverter; built from config if None.

        Raises:
            ConfigError: If the default FileConverter cannot be built.
        """
        self.config = config
        self.converter = converter or FileConverter(config)
        self.state = BatchState.IDLE
        self.stats = BatchStats()
        self._stats_lock = threading.Lock()

    def convert_directories(self, directories: Iterable[Path]) -> list[Flac2Mp3Error]:
        """
        Convert all candidate files in the given directories.

        This is the main entry point of a run.

        Args:
            directories: Directories to scan (immediate children only).
                         Paths that are not directories are skipped.

        Returns:
            Every error record of the run (empty list if all went well).
        """
        self.stats = BatchStats()
        workers = self.config.workers

        if workers == 0:
            logger.debug("Refusing to run with 0 workers")
            self.state = BatchState.DONE
            return [ConfigError("Invalid workers value", details={"workers": workers})]

        scanner = MultiDirectoryScanner(directories, self.config.source_extension)
        try:
            if workers == 1:
                errors = self._convert_serial(scanner)
            else:
                errors = self._convert_parallel(scanner, workers)
        finally:
            scanner.close()
            self.state = BatchState.DONE

        logger.info(
            f"Batch complete: {self.stats.converted}/{self.stats.dispatched} converted, "
            f"{self.stats.failed} failed, {self.stats.scan_errors} scan errors"
        )
        return errors

    def _convert_serial(self, scanner: MultiDirectoryScanner) -> list[Flac2Mp3Error]:
        """Convert files one at a time in discovery order."""
        logger.debug("Converting serially")
        errors: list[Flac2Mp3Error] = []

        self.state = BatchState.DISPATCHING
        for result in scanner:
            if isinstance(result, ScanError):
                self.stats.scan_errors += 1
                errors.append(result)
                continue

            self.stats.dispatched += 1
            error = self.converter.convert(result)
            self._count(error)
            if error is not None:
                errors.append(error)

        self.state = BatchState.DRAINING
        return errors

    def _convert_parallel(self, scanner: MultiDirectoryScanner, workers: int) -> list[Flac2Mp3Error]:
        """
        Convert files on a pool of exactly `workers` threads.

        Scan errors go straight to the error queue without using a worker.
        Leaving the executor block waits for every submitted conversion.
        """
        logger.debug(f"Converting with {workers} workers")
        error_queue: queue.SimpleQueue[Flac2Mp3Error] = queue.SimpleQueue()

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="convert") as executor:
            self.state = BatchState.DISPATCHING
            for result in scanner:
                if isinstance(result, ScanError):
                    logger.debug(f"Scan error: {result}")
                    self.stats.scan_errors += 1
                    error_queue.put(result)
                    continue

                self.stats.dispatched += 1
                future = executor.submit(self.converter.convert, result)
                future.add_done_callback(
                    lambda f, path=result: self._collect(f, path, error_queue)
                )
            self.state = BatchState.DRAINING

        errors = []
        while not error_queue.empty():
            errors.append(error_queue.get_nowait())
        return errors

    def _collect(self, future, path: Path, error_queue: "queue.SimpleQueue[Flac2Mp3Error]") -> None:
        """Done-callback: move a finished job's error (if any) onto the queue."""
        exception = future.exception()
        if exception is not None:
            # FileConverter.convert() does not raise; keep the record anyway
            error = JobError(
                f"Unexpected error converting {path}: {exception}",
                details={"path": str(path), "original_error": repr(exception)}
            )
        else:
            error = future.result()

        self._count(error)
        if error is not None:
            error_queue.put(error)

    def _count(self, error: Flac2Mp3Error | None) -> None:
        # Called from worker threads in parallel mode
        with self._stats_lock:
            if error is None:
                self.stats.converted += 1
            else:
                self.stats.failed += 1
