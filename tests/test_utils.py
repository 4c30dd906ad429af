"""Tests for path translation utilities."""

from pathlib import Path

import pytest

from siasync.utils import format_size, quote_sia_path, to_sia_path


class TestSiaPaths:
    """Tests for translating between local paths and siapaths."""

    def test_to_sia_path(self):
        assert to_sia_path(Path("/data"), Path("/data/a.txt")) == "a.txt"

    def test_to_sia_path_nested(self):
        assert to_sia_path(Path("/data"), Path("/data/sub/b.txt")) == "sub/b.txt"

    def test_to_sia_path_outside_root_raises(self):
        with pytest.raises(ValueError):
            to_sia_path(Path("/data"), Path("/other/a.txt"))

    def test_quote_keeps_separators(self):
        assert quote_sia_path("sub/b.txt") == "sub/b.txt"

    def test_quote_escapes_special_characters(self):
        assert quote_sia_path("my dir/a?b#c.txt") == "my%20dir/a%3Fb%23c.txt"

    def test_quote_strips_leading_slash(self):
        assert quote_sia_path("/a.txt") == "a.txt"


class TestFormatSize:
    """Tests for format_size."""

    def test_bytes(self):
        assert format_size(256) == "256 B"

    def test_kilobytes(self):
        assert format_size(1536) == "1.5 KB"

    def test_megabytes(self):
        assert format_size(5 * 1024 * 1024) == "5.0 MB"

    def test_gigabytes(self):
        assert format_size(2 * 1024 * 1024 * 1024) == "2.0 GB"
