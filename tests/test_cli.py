"""Test the command-line interface"""

from unittest.mock import patch

import pytest
import yaml
from click.testing import CliRunner
from mutagen.id3 import ID3

from flac2mp3 import __version__
from flac2mp3.cli import cli
from flac2mp3.core.logger import shutdown_logging
from flac2mp3.tags import TrackTags, VorbisTagFormat


@pytest.fixture
def runner():
    """Click test runner"""
    yield CliRunner()
    shutdown_logging()


@pytest.fixture
def write_config(temp_dir, copy_commands):
    """Factory writing a config file that uses the copy commands"""
    def _write(**overrides):
        values = {
            "decode_command": list(copy_commands.decode),
            "encode_command": list(copy_commands.encode),
        }
        values.update(overrides)
        path = temp_dir / "flac2mp3.yaml"
        path.write_text(yaml.safe_dump(values))
        return path
    return _write


@pytest.fixture
def mock_batch():
    """Replace the batch converter and capture its configuration"""
    with patch("flac2mp3.cli.BatchConverter") as batch_class:
        batch_class.return_value.convert_directories.return_value = []
        yield batch_class


def used_config(batch_class):
    return batch_class.call_args[0][0]


class TestArguments:
    """Test argument and option parsing"""

    def test_directories_required(self, runner):
        """Test running without directories is a usage error"""
        result = runner.invoke(cli, [])
        assert result.exit_code == 2

    def test_version(self, runner):
        """Test --version prints the version"""
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_explains_worker_default(self, runner):
        """Test the -j help says where the default worker count comes from"""
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        help_text = " ".join(result.output.split())
        assert "from the config file if positive, otherwise 1" in help_text

    @pytest.mark.parametrize("flags", [
        ["--remove", "--no-remove"],
        ["--overwrite", "--no-overwrite"],
    ])
    def test_conflicting_flags(self, runner, temp_dir, flags):
        """Test a flag and its negation together are rejected"""
        result = runner.invoke(cli, [*flags, str(temp_dir)])
        assert result.exit_code == 2

    def test_negative_workers(self, runner, temp_dir):
        """Test a negative worker count is rejected"""
        result = runner.invoke(cli, ["-j", "-1", str(temp_dir)])
        assert result.exit_code == 2


class TestOverrides:
    """Test command line options override the configuration"""

    def test_defaults(self, runner, temp_dir, mock_batch):
        """Test the built-in configuration runs serially"""
        result = runner.invoke(cli, [str(temp_dir)])

        assert result.exit_code == 0
        config = used_config(mock_batch)
        assert config.decode_command == ("flac", "-cd", "{}")
        assert config.workers == 1
        assert config.remove_after is False
        assert config.overwrite is False
        mock_batch.return_value.convert_directories.assert_called_once_with([temp_dir])

    def test_auto_workers(self, runner, temp_dir, mock_batch):
        """Test -j 0 uses the CPU count"""
        with patch("flac2mp3.utils.detect_cpu_count", return_value=7):
            result = runner.invoke(cli, ["-j", "0", str(temp_dir)])

        assert result.exit_code == 0
        assert used_config(mock_batch).workers == 7

    def test_config_workers(self, runner, temp_dir, mock_batch, write_config):
        """Test the configured worker count applies without -j"""
        path = write_config(workers=3)

        runner.invoke(cli, ["-c", str(path), str(temp_dir)])
        assert used_config(mock_batch).workers == 3

        runner.invoke(cli, ["-c", str(path), "-j", "2", str(temp_dir)])
        assert used_config(mock_batch).workers == 2

    def test_negation_flags(self, runner, temp_dir, mock_batch, write_config):
        """Test --no-overwrite and --no-remove each clear their own setting"""
        path = write_config(overwrite=True, remove_after=True)

        runner.invoke(cli, ["-c", str(path), "--no-overwrite", str(temp_dir)])
        config = used_config(mock_batch)
        assert config.overwrite is False
        assert config.remove_after is True

        runner.invoke(cli, ["-c", str(path), "--no-remove", str(temp_dir)])
        config = used_config(mock_batch)
        assert config.overwrite is True
        assert config.remove_after is False

    def test_enable_flags(self, runner, temp_dir, mock_batch):
        """Test --remove and --overwrite enable their settings"""
        runner.invoke(cli, ["--remove", "--overwrite", str(temp_dir)])

        config = used_config(mock_batch)
        assert config.remove_after is True
        assert config.overwrite is True


class TestExitCodes:
    """Test exit codes and error reporting"""

    def test_invalid_config(self, runner, temp_dir):
        """Test an invalid configuration exits with 1"""
        path = temp_dir / "bad.yaml"
        path.write_text("decode_command: []\n")

        result = runner.invoke(cli, ["-c", str(path), str(temp_dir)])

        assert result.exit_code == 1
        assert "Configuration error" in result.output

    def test_missing_config(self, runner, temp_dir):
        """Test a missing configuration file exits with 1"""
        result = runner.invoke(cli, ["-c", str(temp_dir / "nope.yaml"), str(temp_dir)])
        assert result.exit_code == 1

    def test_interrupted(self, runner, temp_dir, mock_batch):
        """Test Ctrl-C exits with 130"""
        mock_batch.return_value.convert_directories.side_effect = KeyboardInterrupt

        result = runner.invoke(cli, [str(temp_dir)])

        assert result.exit_code == 130


class TestEndToEnd:
    """Run real conversions through the CLI"""

    def test_convert_and_copy_tags(self, runner, temp_dir, flac_file, write_config):
        """Test a FLAC file is converted and its tags end up in the MP3"""
        VorbisTagFormat().write(flac_file, TrackTags(artist="Artist", title="Song", track_number=1))
        path = write_config()

        result = runner.invoke(cli, ["-c", str(path), str(temp_dir)])

        assert result.exit_code == 0, result.output
        tag = ID3(temp_dir / "track.mp3")
        assert tag["TPE1"].text == ["Artist"]
        assert tag["TIT2"].text == ["Song"]
        assert tag["TRCK"].text == ["1"]
        assert flac_file.exists()

    def test_remove_source(self, runner, temp_dir, flac_file, write_config):
        """Test --remove deletes the FLAC file"""
        result = runner.invoke(cli, ["-c", str(write_config()), "--remove", "-j", "2", str(temp_dir)])

        assert result.exit_code == 0, result.output
        assert not flac_file.exists()
        assert (temp_dir / "track.mp3").exists()

    def test_existing_destination(self, runner, temp_dir, flac_file, write_config):
        """Test an existing MP3 makes the run fail unless --overwrite is given"""
        (temp_dir / "track.mp3").write_bytes(b"old")
        path = write_config()

        result = runner.invoke(cli, ["-c", str(path), str(temp_dir)])
        assert result.exit_code == 1
        assert "destination-exists" in result.output
        assert (temp_dir / "track.mp3").read_bytes() == b"old"

        result = runner.invoke(cli, ["-c", str(path), "--overwrite", str(temp_dir)])
        assert result.exit_code == 0, result.output
        assert (temp_dir / "track.mp3").read_bytes() != b"old"

    def test_log_dir(self, runner, temp_dir, flac_file, write_config):
        """Test failures are written to the report in the log directory"""
        (temp_dir / "track.mp3").write_bytes(b"old")
        log_dir = temp_dir / "logs"

        result = runner.invoke(cli, ["-c", str(write_config()), "--log-dir", str(log_dir), str(temp_dir)])

        assert result.exit_code == 1
        report, = log_dir.glob("conversion_failures_*.log")
        assert str(flac_file) in report.read_text()
