"""
Directory scanning for flac2mp3.

This module lazily finds the files to convert in a list of directories.
Only the immediate children of each directory are looked at (no recursion),
and only regular files with the configured source extension are returned.

The scanner never loads a whole directory listing into memory: it keeps one
os.scandir() stream open at a time and pulls entries from it on demand.

Results:
    Each item produced is either a Path (a file to convert) or a ScanError
    (a directory that could not be opened or read). Errors are produced in
    place so the caller can record them and keep going.

Usage:
    from flac2mp3.convert.scanner import MultiDirectoryScanner

    for result in MultiDirectoryScanner([Path("/music/a"), Path("/music/b")], "flac"):
        if isinstance(result, ScanError):
            errors.append(result)
        else:
            convert(result)
"""

import os
from collections import deque
from pathlib import Path
from typing import Iterable, Iterator

from flac2mp3.core.exceptions import ScanError
from flac2mp3.core.logger import get_logger

logger = get_logger(__name__)


ScanResult = Path | ScanError


def is_candidate(path: Path, extension: str) -> bool:
    """
    Check whether a directory entry should be converted.

    Args:
        path: Path of the entry.
        extension: Source extension without the dot (case-sensitive).

    Returns:
        True if path is a regular file (symlinks followed) with the extension.
        An entry that cannot be stat'ed is not a candidate.
    """
    if path.suffix != f".{extension}":
        return False
    try:
        return path.is_file()
    except OSError as e:
        logger.debug(f"Skipping entry that cannot be inspected: {path}: {e}")
        return False


def _is_directory(path: Path) -> bool:
    # Path.is_dir() only hides some stat errors (e.g. not ENAMETOOLONG or EACCES)
    try:
        return path.is_dir()
    except OSError as e:
        logger.debug(f"Cannot inspect {path}: {e}")
        return False


class MultiDirectoryScanner:
    """
    Iterator over the candidate files of several directories.

    Directories are visited in the order given. A path that does not exist
    or is not a directory is skipped silently. A directory listed twice is
    scanned twice.

    Attributes:
        _directories: Directories still to visit.
        _extension: Source extension without the dot.
        _current: Open scandir stream of the directory being read, or None.
        _current_dir: Path of that directory (for error reporting).

    Note:
        The scanner is single-pass. Once exhausted it stays exhausted.
    """

    def __init__(self, directories: Iterable[Path], extension: str) -> None:
        self._directories: deque[Path] = deque(Path(d) for d in directories)
        self._extension = extension
        self._current: Iterator[os.DirEntry] | None = None
        self._current_dir: Path | None = None
        self._pending_error: ScanError | None = None

    def __iter__(self) -> "MultiDirectoryScanner":
        return self

    def __next__(self) -> ScanResult:
        while True:
            if self._current is not None:
                result = self._next_in_current()
                if result is not None:
                    return result
            if not self._open_next_directory():
                raise StopIteration
            if self._current is None:
                # Opening failed; the error is reported and the next
                # directory is tried on the following pull
                error, self._pending_error = self._pending_error, None
                return error

    def _next_in_current(self) -> ScanResult | None:
        """
        Pull the next matching entry from the open directory stream.

        Returns:
            A Path, a ScanError if reading failed (the stream is then closed),
            or None once the stream is exhausted.
        """
        while True:
            try:
                entry = next(self._current)
            except StopIteration:
                self._close_current()
                return None
            except OSError as e:
                directory = self._current_dir
                self._close_current()
                logger.debug(f"Reading directory {directory} failed: {e}")
                return ScanError(
                    f"Cannot read directory {directory}: {e.strerror or e}",
                    details={"path": str(directory), "original_error": str(e)}
                )

            path = Path(entry.path)
            if is_candidate(path, self._extension):
                return path

    def _open_next_directory(self) -> bool:
        """
        Advance to the next directory that exists.

        Returns:
            False when no directory is left. Otherwise True, with either
            self._current set to the new stream or self._pending_error set
            when the directory could not be opened.
        """
        while self._directories:
            candidate = self._directories.popleft()

            if not _is_directory(candidate):
                logger.debug(f"Skipping non-directory: {candidate}")
                continue

            logger.debug(f"Scanning directory: {candidate}")
            try:
                self._current = os.scandir(candidate)
                self._current_dir = candidate
            except OSError as e:
                logger.debug(f"Opening directory {candidate} failed: {e}")
                self._pending_error = ScanError(
                    f"Cannot open directory {candidate}: {e.strerror or e}",
                    details={"path": str(candidate), "original_error": str(e)}
                )
            return True

        logger.debug("All directories scanned")
        return False

    def _close_current(self) -> None:
        if self._current is not None:
            close = getattr(self._current, "close", None)
            if close is not None:
                close()
        self._current = None
        self._current_dir = None

    def close(self) -> None:
        """Stop scanning and release the open directory handle, if any."""
        self._close_current()
        self._directories.clear()

    def __del__(self) -> None:
        self._close_current()


def scan_directories(directories: Iterable[Path], extension: str) -> Iterator[ScanResult]:
    """
    Convenience generator over MultiDirectoryScanner.

    Args:
        directories: Directories to scan (immediate children only).
        extension: Source extension without the dot.

    Yields:
        Path for each candidate file, ScanError for each unreadable directory.
    """
    scanner = MultiDirectoryScanner(directories, extension)
    try:
        yield from scanner
    finally:
        scanner.close()
