"""
Exception classes for flac2mp3.

This module defines all custom exceptions used throughout the application.
Every per-file failure is represented by one of these classes, and the batch
converter returns them as values (error records) instead of raising them, so
one broken file never stops the rest of the batch.

Exception Hierarchy:
    Flac2Mp3Error (base)
        ConfigError - Configuration issues (fatal, stops the run)
        ScanError - A directory could not be opened or read
        JobError - Base for per-file conversion failures
            DestinationExistsError - Destination file exists, overwrite disabled
            PipelineError - Decode/encode command pipeline failed
            TagError - Tags could not be copied to the destination
            RemoveSourceError - Source file could not be removed afterwards
"""

from pathlib import Path


class Flac2Mp3Error(Exception):
    """
    Base exception for all flac2mp3 errors.

    All custom exceptions in this project inherit from this class,
    allowing callers to catch all flac2mp3 errors with a single
    except clause if desired.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g., file path,
                 return code, original error).
        category: Short name of the error kind, used when reporting.

    Example:
        try:
            # some operation
        except Flac2Mp3Error as e:
            logger.error(f"Operation failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    category = "error"

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description that will be shown to the user.
            details: Optional dictionary containing additional context about the error.
                     Common keys include:
                     - 'path': File or directory involved in the error
                     - 'original_error': The underlying exception if wrapping another error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message

    @property
    def path(self) -> Path | None:
        """The file or directory this error is about, if any."""
        path = self.details.get("path")
        return Path(path) if path is not None else None


class ConfigError(Flac2Mp3Error):
    """
    Raised when there's an issue with the configuration.

    This is a CRITICAL error that should stop program execution before
    any directory is scanned.

    Common causes:
        - Config file not found or invalid YAML syntax
        - Empty decode/encode command template
        - Invalid worker count (zero reaching the batch converter)
        - No tag format registered for the configured extensions

    Example:
        raise ConfigError(
            "'decode_command' must be a non-empty list of strings",
            details={'field': 'decode_command'}
        )
    """

    category = "config"


class ScanError(Flac2Mp3Error):
    """
    Raised when a directory cannot be opened or read while scanning.

    This is a NON-CRITICAL error. The scanner yields it in place of a
    file and moves on to the next directory.

    Example:
        raise ScanError(
            "Cannot read directory: Permission denied",
            details={'path': '/music/locked', 'original_error': '...'}
        )
    """

    category = "scan"


class JobError(Flac2Mp3Error):
    """
    Base class for failures of a single file conversion.

    Raised directly only for unexpected failures; the subclasses cover the
    known failure modes. The 'path' detail is always the source file.
    """

    category = "unexpected"


class DestinationExistsError(JobError):
    """
    Raised when the destination file exists and overwriting is disabled.

    No conversion or tag work is done for the file.
    """

    category = "destination-exists"


class PipelineError(JobError):
    """
    Raised when the decode/encode command pipeline fails.

    Common causes:
        - Decoder or encoder program not found (spawn failure)
        - Either stage exited with a non-zero status
        - The pipe between the stages broke (decoder killed by SIGPIPE)

    Tags are never written when this error occurs.

    Example:
        raise PipelineError(
            "Encoder 'lame' exited with status 1",
            details={'path': '/music/a.flac', 'stage': 'encode', 'returncode': 1}
        )
    """

    category = "conversion"


class TagError(JobError):
    """
    Raised when tags cannot be read from the source or written to the destination.

    The destination file is left on disk with its audio data but without
    (or with stale) tags. This partial state is not rolled back.
    """

    category = "tags"


class RemoveSourceError(JobError):
    """
    Raised when the source file cannot be removed after a successful conversion.

    The destination file is complete; only the cleanup failed.
    """

    category = "remove-source"
