"""Test utilities and helpers"""

from pathlib import Path
from unittest.mock import patch

from flac2mp3.utils import (
    detect_cpu_count,
    replace_extension,
    resolve_worker_count,
    tail_text,
)


class TestWorkerCount:
    """Test worker count resolution"""

    def test_explicit_count(self):
        """Test an explicit count is used as is"""
        assert resolve_worker_count(4, configured=2) == 4
        assert resolve_worker_count(1) == 1

    def test_auto_uses_cpu_count(self):
        """Test 0 is replaced by the CPU count"""
        with patch("flac2mp3.utils.detect_cpu_count", return_value=6):
            assert resolve_worker_count(0, configured=2) == 6

    def test_absent_uses_config(self):
        """Test the configured count applies when none was requested"""
        assert resolve_worker_count(None, configured=3) == 3

    def test_absent_defaults_to_serial(self):
        """Test no request and no configured count means one worker"""
        assert resolve_worker_count(None, configured=0) == 1

    def test_detect_cpu_count_positive(self):
        """Test the detected CPU count is at least 1"""
        assert detect_cpu_count() >= 1


class TestHelpers:
    """Test helper functions"""

    def test_replace_extension(self):
        """Test extension replacement keeps directory and stem"""
        assert replace_extension(Path("/music/01 Intro.flac"), "mp3") == Path("/music/01 Intro.mp3")
        assert replace_extension(Path("a.b.flac"), "mp3") == Path("a.b.mp3")

    def test_tail_text(self):
        """Test the last non-empty lines are kept"""
        data = b"line 1\n\nline 2\r\nprogress 10%\rprogress 100%\nlast\n"
        assert tail_text(data, max_lines=2) == "progress 100%\nlast"
        assert tail_text(b"") == ""
        assert tail_text(None) == ""

    def test_tail_text_invalid_utf8(self):
        """Test undecodable bytes do not raise"""
        assert "bad" in tail_text(b"\xffbad\n")
