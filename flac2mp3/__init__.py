"""
flac2mp3: Batch convert FLAC files to MP3 with external encoders.

Every matching file found directly inside the given directories is piped
through a decode command and an encode command, its tags are copied to the
new file, and optionally the original is deleted. Files are converted one
at a time or on a pool of worker threads; a failing file is recorded and
the rest of the batch continues.

Modules:
    core/       - Configuration, logging, exceptions
    convert/    - Directory scanning, command pipeline, file and batch conversion
    tags/       - Tag reading and writing (Vorbis comments, ID3)
    utils/      - Worker count and path helpers
    cli.py      - Command-line interface

Usage:
    Command Line:
        flac2mp3 ~/Music/albumA ~/Music/albumB
        flac2mp3 -j 0 --remove ~/Music/albumA
        flac2mp3 -c config.yaml --overwrite ~/Music/albumA

    Python API:
        from flac2mp3 import BatchConverter, load_config, setup_logging

        setup_logging()
        config = load_config()
        errors = BatchConverter(config).convert_directories([Path("~/Music/a").expanduser()])

Dependencies:
    - mutagen: Tag reading and writing
    - click: CLI framework
    - tqdm: Console output that plays well with progress bars
    - pyyaml: Configuration file parsing
"""

__version__ = "0.1.0"
__author__ = "flac2mp3"
__license__ = "MIT"

# Convenience imports for common usage
from flac2mp3.convert import BatchConverter, FileConverter
from flac2mp3.core import (
    Config,
    ConfigError,
    Flac2Mp3Error,
    JobError,
    ScanError,
    get_logger,
    load_config,
    setup_logging,
)

__all__ = [
    "__version__",
    "BatchConverter",
    "FileConverter",
    "Config",
    "load_config",
    "setup_logging",
    "get_logger",
    "Flac2Mp3Error",
    "ConfigError",
    "ScanError",
    "JobError",
]
