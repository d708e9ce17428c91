"""
Vorbis comment (FLAC) tag format.

FLAC files store metadata as Vorbis comments: case-insensitive keys
mapping to lists of strings. Only the first value of each key is used.

Vorbis Key Mapping:
    TrackTags Field   -> Vorbis Key
    ---------------   -----------
    artist            -> artist
    album             -> album
    album_artist      -> albumartist
    title             -> title
    genre             -> genre
    track_number      -> tracknumber ("7" or "7/12")
"""

from pathlib import Path

from mutagen.flac import FLAC

from flac2mp3.core.logger import get_logger
from flac2mp3.tags.base import TagFormat, TrackTags

logger = get_logger(__name__)


VORBIS_KEYS = {
    "artist": "artist",
    "album": "album",
    "album_artist": "albumartist",
    "title": "title",
    "genre": "genre",
}

TRACK_NUMBER_KEY = "tracknumber"


def parse_track_number(value: str | None) -> int | None:
    """
    Parse a track number tag value.

    Accepts "7" and the common "7/12" form. Anything else is treated as
    absent rather than an error.

    Examples:
        parse_track_number("7")      # 7
        parse_track_number("07/12")  # 7
        parse_track_number("side A") # None
    """
    if value is None:
        return None
    number = value.split("/", 1)[0].strip()
    # isdigit() also accepts superscripts that int() rejects
    if not number.isdecimal():
        return None
    return int(number)


class VorbisTagFormat(TagFormat):
    """Reads and writes Vorbis comments in FLAC files using mutagen."""

    extensions = ("flac",)

    def read(self, path: Path) -> TrackTags:
        audio = FLAC(path)
        if audio.tags is None:
            logger.debug(f"No Vorbis comment block in {path}")
            return TrackTags()

        values = {
            field: self._first(audio, key)
            for field, key in VORBIS_KEYS.items()
        }
        values["track_number"] = parse_track_number(self._first(audio, TRACK_NUMBER_KEY))
        return TrackTags(**values)

    def write(self, path: Path, tags: TrackTags) -> None:
        audio = FLAC(path)
        if audio.tags is None:
            audio.add_tags()
        else:
            audio.tags.clear()

        for field, key in VORBIS_KEYS.items():
            value = getattr(tags, field)
            if value is not None:
                audio.tags[key] = [value]
        if tags.track_number is not None:
            audio.tags[TRACK_NUMBER_KEY] = [str(tags.track_number)]

        audio.save()

    @staticmethod
    def _first(audio: FLAC, key: str) -> str | None:
        values = audio.tags.get(key)
        if not values:
            return None
        return values[0]
