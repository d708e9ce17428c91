"""
Utility functions for flac2mp3.

This module provides small helpers used across the application:
    - Worker count resolution (the "auto" value)
    - Destination path computation
    - Short error excerpts from process output

Usage:
    from flac2mp3.utils import resolve_worker_count, replace_extension
"""

import os
from pathlib import Path

from flac2mp3.core.logger import get_logger

logger = get_logger(__name__)


# Worker count meaning "one worker per CPU" on the command line
AUTO_WORKERS = 0


def detect_cpu_count() -> int:
    """
    Return the number of CPUs available to this process (at least 1).

    Prefers the scheduler affinity mask where the platform has one, so a
    process pinned to a subset of CPUs does not oversubscribe them.
    """
    if hasattr(os, "sched_getaffinity"):
        try:
            return max(1, len(os.sched_getaffinity(0)))
        except OSError:
            pass
    return os.cpu_count() or 1


def resolve_worker_count(requested: int | None, configured: int = 0) -> int:
    """
    Turn the command-line and configured worker counts into the count to run with.

    Args:
        requested: Value of --num-workers, or None if not given.
                   AUTO_WORKERS (0) means the detected CPU count.
        configured: 'workers' from the configuration (0 = unset).

    Returns:
        Worker count >= 1.

    Examples:
        resolve_worker_count(None)     # 1 (serial)
        resolve_worker_count(None, 3)  # 3
        resolve_worker_count(0)        # detect_cpu_count()
        resolve_worker_count(6, 3)     # 6
    """
    if requested is None:
        return configured if configured > 0 else 1
    if requested == AUTO_WORKERS:
        workers = detect_cpu_count()
        logger.debug(f"Using detected CPU count: {workers} workers")
        return workers
    return requested


def replace_extension(path: Path, extension: str) -> Path:
    """
    Return path with its extension replaced (same directory, same stem).

    Example:
        replace_extension(Path("/music/01 Intro.flac"), "mp3")
        # Returns: Path("/music/01 Intro.mp3")
    """
    return path.with_suffix(f".{extension}")


def tail_text(data: bytes | None, max_lines: int = 5) -> str:
    """
    Decode process output and keep its last few non-empty lines.

    Used to attach a readable excerpt of an encoder's stderr to an error.
    """
    if not data:
        return ""
    text = data.decode("utf-8", errors="replace")
    lines = [line.strip() for line in text.replace("\r", "\n").splitlines() if line.strip()]
    return "\n".join(lines[-max_lines:])
