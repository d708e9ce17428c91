"""
Single file conversion for flac2mp3.

This module converts one source file into its destination file:

    1. Compute the destination path (same directory and stem, new extension)
    2. Refuse to continue if the destination exists and overwriting is off
    3. Run the decode | encode command pipeline
    4. Copy the descriptive tags to the destination
    5. Remove the source file if configured to

Each step only runs if the previous ones succeeded. A failure is returned
as an error record (a JobError subclass) instead of being raised, so one
bad file never stops the batch.

Partial State:
    If tag copying fails, the destination file is left on disk with its
    audio but without correct tags. It is not removed.

Usage:
    from flac2mp3.convert.converter import FileConverter

    converter = FileConverter(config)
    error = converter.convert(Path("/music/album/01 Intro.flac"))
    if error is not None:
        logger.error(str(error))
"""

import os
from pathlib import Path

from flac2mp3.convert.command import CommandPipeline
from flac2mp3.core.config import Config
from flac2mp3.core.exceptions import (
    ConfigError,
    DestinationExistsError,
    JobError,
    RemoveSourceError,
)
from flac2mp3.core.logger import get_logger
from flac2mp3.tags.translator import TagTranslator
from flac2mp3.utils import replace_extension

logger = get_logger(__name__)


class FileConverter:
    """
    Converts one file at a time: pipeline, tags, optional source removal.

    Attributes:
        config: Run configuration (read-only).
        pipeline: Runs the decode/encode commands. Anything with a
                  run(source, destination) method that raises PipelineError.
        translator: Copies the tags. Anything with a
                    translate(source, destination) method that raises TagError.

    Thread Safety:
        convert() keeps no per-call state on the instance. Workers may call
        it concurrently for different source files.
    """

    def __init__(
        self,
        config: Config,
        pipeline: CommandPipeline | None = None,
        translator: TagTranslator | None = None
    ) -> None:
        """
        Initialize the converter.

        Args:
            config: Run configuration.
            pipeline: Optional pipeline; built from the config's templates if None.
            translator: Optional translator; looked up from the config's
                        extensions if None.

        Raises:
            ConfigError: If the templates are empty, the two extensions are
                         the same, or an extension has no registered tag format.
        """
        if config.source_extension.lower() == config.destination_extension.lower():
            raise ConfigError(
                "Source and destination extensions must differ",
                details={"extension": config.source_extension}
            )
        self.config = config
        self.pipeline = pipeline or CommandPipeline(config.decode_command, config.encode_command)
        self.translator = translator or TagTranslator.for_extensions(
            config.source_extension, config.destination_extension
        )

    def destination_for(self, source: Path) -> Path:
        """Return the destination path for a source file."""
        return replace_extension(source, self.config.destination_extension)

    def convert(self, source: Path) -> JobError | None:
        """
        Convert one file, returning the failure instead of raising it.

        Args:
            source: Source file to convert.

        Returns:
            None on success, or the JobError describing the failure.
        """
        try:
            self._convert(source)
        except JobError as e:
            logger.debug(f"Conversion of {source} failed: {e}")
            return e
        except Exception as e:
            logger.debug(f"Unexpected failure converting {source}", exc_info=True)
            return JobError(
                f"Unexpected error converting {source}: {e}",
                details={"path": str(source), "original_error": repr(e)}
            )
        return None

    def _convert(self, source: Path) -> None:
        """
        Run all conversion steps for one file.

        Raises:
            DestinationExistsError: Destination exists and overwrite is off.
            PipelineError: The command pipeline failed.
            TagError: Tag copying failed (destination stays on disk).
            RemoveSourceError: The source could not be removed.
        """
        destination = self.destination_for(source)
        logger.info(f"Converting {source} -> {destination.name}")

        if destination.exists() and not self.config.overwrite:
            logger.debug(f"Skipping {source}, destination exists: {destination}")
            raise DestinationExistsError(
                f"Destination already exists: {destination}",
                details={"path": str(source), "destination": str(destination)}
            )

        self.pipeline.run(source, destination)
        self.translator.translate(source, destination)

        if self.config.remove_after:
            self._remove_source(source)

        logger.debug(f"Finished conversion of {source}")

    @staticmethod
    def _remove_source(source: Path) -> None:
        try:
            os.remove(source)
        except OSError as e:
            raise RemoveSourceError(
                f"Converted {source} but failed to remove it: {e.strerror or e}",
                details={"path": str(source), "original_error": str(e)}
            ) from e
        logger.debug(f"Removed source file {source}")
