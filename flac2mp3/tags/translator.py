"""
Tag translation between formats.

The translator reads the descriptive fields of the source file through a
TagReader and writes them to the destination through a TagWriter. It has
no knowledge of any concrete tag format.

Format Registry:
    TAG_FORMATS maps a file extension to the TagFormat handling it. The
    default pair is flac -> mp3.

Usage:
    from flac2mp3.tags.translator import TagTranslator

    translator = TagTranslator.for_extensions("flac", "mp3")
    translator.translate(Path("song.flac"), Path("song.mp3"))
"""

from pathlib import Path

from mutagen import MutagenError

from flac2mp3.core.exceptions import ConfigError, TagError
from flac2mp3.core.logger import get_logger
from flac2mp3.tags.base import TagFormat, TagReader, TagWriter
from flac2mp3.tags.id3 import ID3TagFormat
from flac2mp3.tags.vorbis import VorbisTagFormat

logger = get_logger(__name__)


def _build_registry(*formats: TagFormat) -> dict[str, TagFormat]:
    registry = {}
    for tag_format in formats:
        for extension in tag_format.extensions:
            registry[extension] = tag_format
    return registry


TAG_FORMATS: dict[str, TagFormat] = _build_registry(VorbisTagFormat(), ID3TagFormat())


def get_tag_format(extension: str) -> TagFormat:
    """
    Look up the tag format for a file extension.

    Args:
        extension: Extension without the dot. Matching ignores case.

    Raises:
        ConfigError: If no format handles the extension.
    """
    try:
        return TAG_FORMATS[extension.lower()]
    except KeyError:
        raise ConfigError(
            f"No tag format known for '.{extension}' files "
            f"(supported: {', '.join(sorted(TAG_FORMATS))})",
            details={"extension": extension}
        ) from None


class TagTranslator:
    """
    Copies descriptive tags from a source file to a destination file.

    Attributes:
        reader: Reads the source file's tags.
        writer: Writes the destination file's tags.

    Thread Safety:
        Stateless apart from the reader and writer, which are stateless
        too. Safe to share between workers.
    """

    def __init__(self, reader: TagReader, writer: TagWriter) -> None:
        self.reader = reader
        self.writer = writer

    @classmethod
    def for_extensions(cls, source_extension: str, destination_extension: str) -> "TagTranslator":
        """
        Build a translator from the registered formats.

        Raises:
            ConfigError: If either extension has no registered format.
        """
        return cls(get_tag_format(source_extension), get_tag_format(destination_extension))

    def translate(self, source: Path, destination: Path) -> None:
        """
        Copy tags from source to destination.

        Both files must exist. The destination's existing tag is replaced.

        Raises:
            TagError: If reading or writing fails.
        """
        logger.debug(f"Copying tags {source} -> {destination}")

        try:
            tags = self.reader.read(source)
        except (MutagenError, OSError) as e:
            raise TagError(
                f"Failed to read tags from {source}: {e}",
                details={"path": str(source), "original_error": str(e)}
            ) from e

        if tags.is_empty():
            logger.debug(f"No descriptive tags found in {source}")

        try:
            self.writer.write(destination, tags)
        except (MutagenError, OSError) as e:
            raise TagError(
                f"Failed to write tags to {destination}: {e}",
                details={
                    "path": str(source),
                    "destination": str(destination),
                    "original_error": str(e),
                }
            ) from e

        logger.debug(f"Copied tags to {destination}")
