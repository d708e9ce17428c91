"""
External command pipeline for flac2mp3.

This module runs the configured decode and encode programs as a pipe:
the decoder writes raw audio to stdout, the encoder reads it from stdin
and writes the destination file.

    flac -cd song.flac | lame -V0 - song.mp3

Command Templates:
    Each template is a list of tokens. "{}" is replaced with the file path
    ("source" for the decoder, "destination" for the encoder) and "{{}}" is
    replaced with a literal "{}". All other tokens are passed unchanged.
    No shell is involved, so paths with spaces or quotes are safe.

Failure Modes (all raised as PipelineError):
    - A program cannot be started (not installed, not executable)
    - Either program exits with a non-zero status
    - The decoder is killed by SIGPIPE (the encoder stopped reading)

Usage:
    from flac2mp3.convert.command import CommandPipeline

    pipeline = CommandPipeline(config.decode_command, config.encode_command)
    pipeline.run(Path("song.flac"), Path("song.mp3"))
"""

import signal
import subprocess
import tempfile
from pathlib import Path
from typing import Sequence

from flac2mp3.core.exceptions import ConfigError, PipelineError
from flac2mp3.core.logger import get_logger
from flac2mp3.utils import tail_text

logger = get_logger(__name__)


PATH_PLACEHOLDER = "{}"
ESCAPED_PLACEHOLDER = "{{}}"

# Not defined on Windows
SIGPIPE = getattr(signal, "SIGPIPE", None)


def build_command(template: Sequence[str], path: Path) -> list[str]:
    """
    Build a command line from a template.

    Args:
        template: Program followed by its arguments.
        path: Path substituted for each "{}" token.

    Returns:
        The argument list to execute.

    Raises:
        ConfigError: If the template is empty.

    Examples:
        build_command(["flac", "-cd", "{}"], Path("a.flac"))
        # Returns: ["flac", "-cd", "a.flac"]

        build_command(["sh", "-c", "echo {{}}", "{{}}"], Path("a.flac"))
        # Returns: ["sh", "-c", "echo {{}}", "{}"]
    """
    if not template:
        raise ConfigError("Invalid command template, no program given")

    path_str = str(path)
    command = []
    for token in template:
        if token == ESCAPED_PLACEHOLDER:
            command.append(PATH_PLACEHOLDER)
        elif token == PATH_PLACEHOLDER:
            command.append(path_str)
        else:
            command.append(token)
    return command


class CommandPipeline:
    """
    Runs a decode command piped into an encode command.

    Attributes:
        decode_template: Template for the decoder (gets the source path).
        encode_template: Template for the encoder (gets the destination path).

    Thread Safety:
        run() keeps no state on the instance. Several workers can use the
        same pipeline for different files at the same time.
    """

    def __init__(self, decode_template: Sequence[str], encode_template: Sequence[str]) -> None:
        if not decode_template or not encode_template:
            raise ConfigError("Invalid command template, no program given")
        self.decode_template = tuple(decode_template)
        self.encode_template = tuple(encode_template)

    def run(self, source: Path, destination: Path) -> None:
        """
        Convert source into destination through the two commands.

        Args:
            source: File given to the decoder.
            destination: File given to the encoder.

        Raises:
            PipelineError: If a process cannot be started, exits non-zero,
                           or the pipe between them breaks.

        Behavior:
            1. Start the decoder with stdout piped (stderr to a temp file)
            2. Start the encoder reading the decoder's stdout
            3. Close our copy of the pipe so the decoder sees SIGPIPE if
               the encoder exits early
            4. Wait for the encoder, then the decoder
            5. Check both exit statuses
        """
        decode_cmd = build_command(self.decode_template, source)
        encode_cmd = build_command(self.encode_template, destination)
        logger.debug(f"Pipeline for {source}: {decode_cmd} | {encode_cmd}")

        with tempfile.TemporaryFile() as decode_stderr:
            decoder = self._start(decode_cmd, source, "decode",
                                  stdout=subprocess.PIPE, stderr=decode_stderr)
            try:
                encoder = self._start(encode_cmd, source, "encode",
                                      stdin=decoder.stdout,
                                      stdout=subprocess.PIPE, stderr=subprocess.PIPE)
            except PipelineError:
                decoder.kill()
                decoder.stdout.close()
                decoder.wait()
                raise

            decoder.stdout.close()
            _, encode_err = encoder.communicate()
            decode_status = decoder.wait()

            decode_stderr.seek(0)
            decode_err = decode_stderr.read()

        logger.debug(
            f"Pipeline finished for {source}: "
            f"decode={decode_status}, encode={encoder.returncode}"
        )

        if encoder.returncode != 0:
            raise self._failure(source, "encode", encode_cmd, encoder.returncode, encode_err)
        if SIGPIPE is not None and decode_status == -SIGPIPE:
            raise PipelineError(
                f"Broken pipe between decoder and encoder for {source}",
                details={
                    "path": str(source),
                    "stage": "decode",
                    "returncode": decode_status,
                    "stderr": tail_text(decode_err),
                }
            )
        if decode_status != 0:
            raise self._failure(source, "decode", decode_cmd, decode_status, decode_err)

    @staticmethod
    def _start(command: list[str], source: Path, stage: str, **kwargs) -> subprocess.Popen:
        """
        Start one stage of the pipeline.

        Raises:
            PipelineError: If the program cannot be executed.
        """
        try:
            return subprocess.Popen(command, **kwargs)
        except (OSError, ValueError) as e:
            raise PipelineError(
                f"Failed to start {stage} command '{command[0]}': {e}",
                details={
                    "path": str(source),
                    "stage": stage,
                    "command": command,
                    "original_error": str(e),
                }
            ) from e

    @staticmethod
    def _failure(
        source: Path,
        stage: str,
        command: list[str],
        returncode: int,
        stderr: bytes | None
    ) -> PipelineError:
        """Build the error for a stage that exited unsuccessfully."""
        if returncode < 0:
            reason = f"was terminated by signal {-returncode}"
        else:
            reason = f"exited with status {returncode}"

        message = f"{stage.capitalize()} command '{command[0]}' {reason} for {source}"
        excerpt = tail_text(stderr)
        if excerpt:
            message = f"{message}: {excerpt.splitlines()[-1]}"

        return PipelineError(
            message,
            details={
                "path": str(source),
                "stage": stage,
                "command": command,
                "returncode": returncode,
                "stderr": excerpt,
            }
        )
