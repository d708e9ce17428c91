"""
Tag access interface for flac2mp3.

The tag translator only talks to these abstractions. Each concrete tag
format (Vorbis comments in FLAC, ID3 in MP3) implements a reader and a
writer once, and the translator copies a TrackTags value between them.

Fields:
    All descriptive fields are optional. A file with no tags at all reads
    as an empty TrackTags, and writing an empty TrackTags writes an empty tag.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from pathlib import Path


@dataclass(frozen=True)
class TrackTags:
    """
    Descriptive metadata copied from source to destination.

    Attributes:
        artist: Track artist.
        album: Album title.
        album_artist: Album artist (for compilations).
        title: Track title.
        genre: Genre name.
        track_number: Position of the track on the album.
    """
    artist: str | None = None
    album: str | None = None
    album_artist: str | None = None
    title: str | None = None
    genre: str | None = None
    track_number: int | None = None

    def is_empty(self) -> bool:
        """True if no field is set."""
        return all(getattr(self, f.name) is None for f in fields(self))


class TagReader(ABC):
    """Reads descriptive fields from one tag format."""

    @abstractmethod
    def read(self, path: Path) -> TrackTags:
        """
        Read the descriptive fields of a file.

        Raises:
            mutagen.MutagenError or OSError: If the file cannot be read.
        """


class TagWriter(ABC):
    """Writes descriptive fields in one tag format."""

    @abstractmethod
    def write(self, path: Path, tags: TrackTags) -> None:
        """
        Replace the tag of an existing file with one holding the given fields.

        Only fields that are set are written.

        Raises:
            mutagen.MutagenError or OSError: If the file cannot be written.
        """


class TagFormat(TagReader, TagWriter):
    """A tag format that can be both read and written."""

    #: File extensions (without dot) that use this format
    extensions: tuple[str, ...] = ()
