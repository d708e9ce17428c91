"""
ID3v2 (MP3) tag format.

ID3 Frame Mapping:
    TrackTags Field   -> ID3 Frame
    ---------------   ---------
    artist            -> TPE1 (lead performer)
    album             -> TALB
    album_artist      -> TPE2 (band / album artist)
    title             -> TIT2
    genre             -> TCON
    track_number      -> TRCK ("7" or "7/12")

Writing always replaces the whole ID3v2 tag with a fresh one (ID3v2.4,
UTF-8 text encoding), so stale frames from an earlier run are dropped.
"""

from pathlib import Path

from mutagen.id3 import ID3, ID3NoHeaderError, TALB, TCON, TIT2, TPE1, TPE2, TRCK

from flac2mp3.core.logger import get_logger
from flac2mp3.tags.base import TagFormat, TrackTags
from flac2mp3.tags.vorbis import parse_track_number

logger = get_logger(__name__)


# UTF-8, see mutagen.id3.Encoding
UTF8 = 3

ID3_FRAMES = {
    "artist": TPE1,
    "album": TALB,
    "album_artist": TPE2,
    "title": TIT2,
}


class ID3TagFormat(TagFormat):
    """Reads and writes ID3v2 tags in MP3 files using mutagen."""

    extensions = ("mp3",)

    def read(self, path: Path) -> TrackTags:
        try:
            tag = ID3(path)
        except ID3NoHeaderError:
            logger.debug(f"No ID3 header in {path}")
            return TrackTags()

        values = {
            field: self._text(tag, frame.__name__)
            for field, frame in ID3_FRAMES.items()
        }

        genre = tag.get("TCON")
        values["genre"] = genre.genres[0] if genre is not None and genre.genres else None
        values["track_number"] = parse_track_number(self._text(tag, "TRCK"))
        return TrackTags(**values)

    def write(self, path: Path, tags: TrackTags) -> None:
        tag = ID3()

        for field, frame in ID3_FRAMES.items():
            value = getattr(tags, field)
            if value is not None:
                tag.add(frame(encoding=UTF8, text=[value]))
        if tags.genre is not None:
            tag.add(TCON(encoding=UTF8, text=[tags.genre]))
        if tags.track_number is not None:
            tag.add(TRCK(encoding=UTF8, text=[str(tags.track_number)]))

        tag.save(path)

    @staticmethod
    def _text(tag: ID3, frame_id: str) -> str | None:
        frame = tag.get(frame_id)
        if frame is None or not frame.text:
            return None
        return str(frame.text[0])
