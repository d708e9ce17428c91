"""
Conversion module for flac2mp3.

Modules:
    scanner    - Lazy multi-directory scanner for candidate files
    command    - Command templates and the decode | encode pipeline
    converter  - FileConverter: one file through pipeline, tags, removal
    batch      - BatchConverter: serial or thread pool dispatch

Usage:
    from flac2mp3.convert import BatchConverter

    errors = BatchConverter(config).convert_directories(directories)
"""

from flac2mp3.convert.batch import BatchConverter, BatchState, BatchStats
from flac2mp3.convert.command import CommandPipeline, build_command
from flac2mp3.convert.converter import FileConverter
from flac2mp3.convert.scanner import (
    MultiDirectoryScanner,
    ScanResult,
    is_candidate,
    scan_directories,
)

__all__ = [
    "MultiDirectoryScanner",
    "ScanResult",
    "is_candidate",
    "scan_directories",
    "CommandPipeline",
    "build_command",
    "FileConverter",
    "BatchConverter",
    "BatchState",
    "BatchStats",
]
