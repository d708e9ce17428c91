"""
Tag handling for flac2mp3.

This module copies descriptive metadata (artist, album, album artist,
title, genre, track number) from converted source files to their
destinations.

Modules:
    base        - TrackTags value and the TagReader/TagWriter interface
    vorbis      - Vorbis comments (FLAC)
    id3         - ID3v2 (MP3)
    translator  - TagTranslator and the extension -> format registry

Usage:
    from flac2mp3.tags import TagTranslator

    translator = TagTranslator.for_extensions("flac", "mp3")
    translator.translate(flac_path, mp3_path)
"""

from flac2mp3.tags.base import TagFormat, TagReader, TagWriter, TrackTags
from flac2mp3.tags.id3 import ID3TagFormat
from flac2mp3.tags.translator import TAG_FORMATS, TagTranslator, get_tag_format
from flac2mp3.tags.vorbis import VorbisTagFormat, parse_track_number

__all__ = [
    "TrackTags",
    "TagReader",
    "TagWriter",
    "TagFormat",
    "VorbisTagFormat",
    "ID3TagFormat",
    "TagTranslator",
    "TAG_FORMATS",
    "get_tag_format",
    "parse_track_number",
]
