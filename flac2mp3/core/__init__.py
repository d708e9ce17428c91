"""
Core module for flac2mp3.

This module provides the foundational components used throughout the application:
    - exceptions: Custom exception classes (also used as error records)
    - config: Configuration loading and validation
    - logger: Logging system with console and optional file outputs

Usage:
    from flac2mp3.core import (
        Config, load_config,
        setup_logging, get_logger,
        Flac2Mp3Error, ConfigError
    )
"""

from flac2mp3.core.config import Config, load_config, parse_config
from flac2mp3.core.exceptions import (
    ConfigError,
    DestinationExistsError,
    Flac2Mp3Error,
    JobError,
    PipelineError,
    RemoveSourceError,
    ScanError,
    TagError,
)
from flac2mp3.core.logger import (
    get_logger,
    log_conversion_failure,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    # Config
    "Config",
    "load_config",
    "parse_config",
    # Exceptions
    "Flac2Mp3Error",
    "ConfigError",
    "ScanError",
    "JobError",
    "DestinationExistsError",
    "PipelineError",
    "TagError",
    "RemoveSourceError",
    # Logger
    "setup_logging",
    "get_logger",
    "log_conversion_failure",
    "shutdown_logging",
]
