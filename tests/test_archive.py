"""
Tests for release archive extraction.
"""
from __future__ import annotations

import pytest

from hola_installer.archive import extract_binary, extract_from_tar, extract_from_zip
from hola_installer.errors import BinaryNotFoundInArchiveError, ExtractionError
from tests.helpers.archives import make_tar_xz, make_zip


def _write(tmp_path, name, data):
    path = tmp_path / name
    path.write_bytes(data)
    return path


class TestTarExtraction:
    """Test tar.xz extraction."""

    def test_binary_at_root(self, tmp_path):
        archive = _write(tmp_path, "tool-linux-amd64.tar.xz", make_tar_xz({"tool": b"BIN", "README.md": b"docs"}))
        dest = tmp_path / "out"

        path = extract_binary(archive, dest, "tool")

        assert path == dest / "tool"
        assert path.read_bytes() == b"BIN"
        assert not (dest / "README.md").exists()

    def test_binary_in_top_level_directory(self, tmp_path):
        archive = _write(tmp_path, "t.tar.xz", make_tar_xz({"tool-linux-amd64/tool": b"NESTED"}))
        assert extract_from_tar(archive, tmp_path / "out", "tool").read_bytes() == b"NESTED"

    def test_shallowest_match_preferred(self, tmp_path):
        archive = _write(tmp_path, "t.tar.xz", make_tar_xz({"dir/tool": b"DEEP", "tool": b"ROOT"}))
        assert extract_from_tar(archive, tmp_path / "out", "tool").read_bytes() == b"ROOT"

    def test_too_deep_not_matched(self, tmp_path):
        archive = _write(tmp_path, "t.tar.xz", make_tar_xz({"a/b/tool": b"X"}))
        with pytest.raises(BinaryNotFoundInArchiveError):
            extract_from_tar(archive, tmp_path / "out", "tool")

    def test_missing_binary(self, tmp_path):
        archive = _write(tmp_path, "t.tar.xz", make_tar_xz({"other": b"X"}))
        with pytest.raises(BinaryNotFoundInArchiveError, match="Could not find 'tool'"):
            extract_binary(archive, tmp_path / "out", "tool")

    def test_corrupt_archive(self, tmp_path):
        archive = _write(tmp_path, "t.tar.xz", b"\xfd7zXZ\x00garbage" * 10)
        with pytest.raises(ExtractionError, match="Extraction failed"):
            extract_binary(archive, tmp_path / "out", "tool")

    def test_dot_rooted_archive(self, tmp_path):
        """Test the layout produced by `tar -cJf x.tar.xz -C dir .`."""
        data = make_tar_xz({"./tool": b"DOT", "./README.md": b"docs"}, directories=["./"])
        archive = _write(tmp_path, "tool-linux-amd64.tar.xz", data)

        path = extract_binary(archive, tmp_path / "out", "tool")

        assert path.read_bytes() == b"DOT"

    def test_dot_rooted_archive_still_checks_members(self, tmp_path):
        data = make_tar_xz({"./tool": b"OK", "./../escape": b"X"}, directories=["./"])
        archive = _write(tmp_path, "t.tar.xz", data)
        with pytest.raises(ExtractionError, match="unsafe path"):
            extract_binary(archive, tmp_path / "out", "tool")

    def test_unsafe_member_rejected(self, tmp_path):
        archive = _write(tmp_path, "t.tar.xz", make_tar_xz({"tool": b"OK", "../escape": b"X"}))
        with pytest.raises(ExtractionError, match="unsafe path"):
            extract_binary(archive, tmp_path / "out", "tool")
        assert not (tmp_path / "escape").exists()
        assert not (tmp_path / "out" / "tool").exists()


class TestZipExtraction:
    """Test zip extraction (Windows releases)."""

    def test_exe_extracted(self, tmp_path):
        archive = _write(tmp_path, "tool-windows-amd64.zip", make_zip({"tool.exe": b"MZ"}))
        path = extract_binary(archive, tmp_path / "out", "tool.exe")
        assert path.read_bytes() == b"MZ"

    def test_missing_exe(self, tmp_path):
        archive = _write(tmp_path, "t.zip", make_zip({"tool": b"not windows"}))
        with pytest.raises(BinaryNotFoundInArchiveError):
            extract_from_zip(archive, tmp_path / "out", "tool.exe")

    def test_corrupt_zip(self, tmp_path):
        archive = _write(tmp_path, "t.zip", b"PK\x03\x04 definitely not a zip")
        with pytest.raises(ExtractionError):
            extract_binary(archive, tmp_path / "out", "tool.exe")

    def test_absolute_member_rejected(self, tmp_path):
        archive = _write(tmp_path, "t.zip", make_zip({"/etc/tool.exe": b"X"}))
        with pytest.raises(ExtractionError, match="unsafe path"):
            extract_from_zip(archive, tmp_path / "out", "tool.exe")
