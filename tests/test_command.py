"""Test command templates and the decode | encode pipeline"""

import shutil
from pathlib import Path

import pytest

from flac2mp3.convert.command import CommandPipeline, build_command
from flac2mp3.core.exceptions import ConfigError, PipelineError

requires_posix_tools = pytest.mark.skipif(
    shutil.which("sh") is None or shutil.which("cat") is None,
    reason="needs sh and cat"
)


class TestBuildCommand:
    """Test placeholder substitution"""

    def test_placeholder_replaced(self):
        """Test every "{}" token becomes the path"""
        command = build_command(["flac", "-cd", "{}"], Path("/music/a.flac"))
        assert command == ["flac", "-cd", "/music/a.flac"]

    def test_multiple_placeholders(self):
        """Test all placeholder tokens are substituted"""
        command = build_command(["tool", "{}", "--copy", "{}"], Path("x"))
        assert command == ["tool", "x", "--copy", "x"]

    def test_escaped_placeholder(self):
        """Test "{{}}" becomes a literal "{}" """
        command = build_command(["find", ".", "-exec", "echo", "{{}}", ";"], Path("x"))
        assert command == ["find", ".", "-exec", "echo", "{}", ";"]

    def test_placeholder_only_whole_tokens(self):
        """Test placeholders inside longer tokens are left alone"""
        command = build_command(["tool", "--out={}"], Path("x"))
        assert command == ["tool", "--out={}"]

    def test_path_with_spaces_is_one_argument(self):
        """Test paths are never split"""
        command = build_command(["cat", "{}"], Path("/music/01 My Song.flac"))
        assert command == ["cat", "/music/01 My Song.flac"]

    def test_empty_template(self):
        """Test an empty template is a configuration error"""
        with pytest.raises(ConfigError):
            build_command([], Path("x"))


class TestCommandPipelineInit:
    """Test pipeline construction"""

    def test_empty_decode_template(self):
        """Test an empty decode template is rejected up front"""
        with pytest.raises(ConfigError):
            CommandPipeline([], ["lame", "-", "{}"])

    def test_empty_encode_template(self):
        """Test an empty encode template is rejected up front"""
        with pytest.raises(ConfigError):
            CommandPipeline(["flac", "-cd", "{}"], [])


@requires_posix_tools
class TestCommandPipelineRun:
    """Test running real processes"""

    def test_copies_through_pipe(self, temp_dir, copy_commands):
        """Test decoder output reaches the encoder"""
        source = temp_dir / "in.src"
        source.write_bytes(b"raw audio" * 1000)
        destination = temp_dir / "out.dst"

        CommandPipeline(copy_commands.decode, copy_commands.encode).run(source, destination)

        assert destination.read_bytes() == b"raw audio" * 1000

    def test_encoder_failure(self, temp_dir, copy_commands):
        """Test a non-zero encoder exit is a PipelineError with its stderr"""
        source = temp_dir / "in.src"
        source.write_bytes(b"data")
        encode = ["sh", "-c", "cat > /dev/null; echo 'bad bitrate' >&2; exit 3"]

        with pytest.raises(PipelineError) as exc_info:
            CommandPipeline(copy_commands.decode, encode).run(source, temp_dir / "out.dst")

        error = exc_info.value
        assert error.details["stage"] == "encode"
        assert error.details["returncode"] == 3
        assert error.path == source
        assert "bad bitrate" in error.message

    def test_decoder_failure(self, temp_dir, copy_commands):
        """Test a non-zero decoder exit is a PipelineError"""
        source = temp_dir / "in.src"
        source.write_bytes(b"data")
        decode = ["sh", "-c", "echo 'not a flac file' >&2; exit 2", "{}"]

        with pytest.raises(PipelineError) as exc_info:
            CommandPipeline(decode, copy_commands.encode).run(source, temp_dir / "out.dst")

        error = exc_info.value
        assert error.details["stage"] == "decode"
        assert error.details["returncode"] == 2
        assert "not a flac file" in error.message

    def test_missing_decoder_program(self, temp_dir, copy_commands):
        """Test a decoder that cannot be started"""
        source = temp_dir / "in.src"
        source.write_bytes(b"data")

        with pytest.raises(PipelineError) as exc_info:
            CommandPipeline(["no-such-decoder-f2m", "{}"], copy_commands.encode).run(
                source, temp_dir / "out.dst"
            )

        assert "Failed to start decode command 'no-such-decoder-f2m'" in exc_info.value.message

    def test_missing_encoder_program(self, temp_dir, copy_commands):
        """Test an encoder that cannot be started does not leave the decoder running"""
        source = temp_dir / "in.src"
        source.write_bytes(b"data")
        destination = temp_dir / "out.dst"

        with pytest.raises(PipelineError) as exc_info:
            CommandPipeline(copy_commands.decode, ["no-such-encoder-f2m", "{}"]).run(source, destination)

        assert exc_info.value.details["stage"] == "encode"
        assert not destination.exists()

    @pytest.mark.skipif(shutil.which("yes") is None, reason="needs yes")
    def test_broken_pipe(self, temp_dir):
        """Test an encoder that stops reading early breaks the pipe"""
        source = temp_dir / "in.src"
        source.write_bytes(b"data")

        with pytest.raises(PipelineError) as exc_info:
            CommandPipeline(["yes"], ["true"]).run(source, temp_dir / "out.dst")

        assert "Broken pipe" in exc_info.value.message
