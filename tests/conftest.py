"""Test configuration and fixtures"""

import struct
import tempfile
from collections import namedtuple
from pathlib import Path
from unittest.mock import Mock

import pytest

from flac2mp3.convert.converter import FileConverter
from flac2mp3.core.config import Config

# Stand-in pipeline: "decode" prints the source, "encode" writes stdin to the destination
COPY_DECODE = ("cat", "{}")
COPY_ENCODE = ("sh", "-c", 'cat > "$0"', "{}")

CopyCommands = namedtuple("CopyCommands", ["decode", "encode"])


def build_flac_bytes() -> bytes:
    """Smallest FLAC file mutagen accepts: marker plus a STREAMINFO block."""
    streaminfo = (
        struct.pack(">HH", 4096, 4096)   # min/max block size
        + bytes(6)                        # min/max frame size (unknown)
        + bytes([0x0A, 0xC4, 0x42, 0xF0]) # 44100 Hz, 2 channels, 16 bit
        + bytes(4)                        # total samples
        + bytes(16)                       # MD5 of audio data
    )
    header = bytes([0x80]) + len(streaminfo).to_bytes(3, "big")
    return b"fLaC" + header + streaminfo


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def copy_commands():
    """Decode and encode templates that copy bytes unchanged"""
    return CopyCommands(COPY_DECODE, COPY_ENCODE)


@pytest.fixture
def make_config():
    """Factory for a Config that copies .src files to .dst files"""
    def _make(**overrides) -> Config:
        values = {
            "decode_command": COPY_DECODE,
            "encode_command": COPY_ENCODE,
            "workers": 1,
            "source_extension": "src",
            "destination_extension": "dst",
        }
        values.update(overrides)
        return Config(**values)
    return _make


@pytest.fixture
def mock_translator():
    """Tag translator that does nothing"""
    return Mock()


@pytest.fixture
def make_converter(make_config, mock_translator):
    """Factory for a FileConverter using the copy pipeline and a mock translator"""
    def _make(**overrides) -> FileConverter:
        return FileConverter(make_config(**overrides), translator=mock_translator)
    return _make


@pytest.fixture
def make_files():
    """Factory creating files with the given names (content = name)"""
    def _make(directory: Path, *names: str) -> list[Path]:
        directory.mkdir(parents=True, exist_ok=True)
        paths = []
        for name in names:
            path = directory / name
            path.write_text(f"audio of {name}")
            paths.append(path)
        return paths
    return _make


@pytest.fixture
def flac_file(temp_dir):
    """A minimal, valid FLAC file without tags"""
    path = temp_dir / "track.flac"
    path.write_bytes(build_flac_bytes())
    return path
