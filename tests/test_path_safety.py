"""
Tests for archive member name validation.
"""
from __future__ import annotations

import pytest

from hola_installer.path_safety import safe_member_name


class TestSafeMemberName:
    """Test safe_member_name function directly."""

    def test_safe_names_allowed(self):
        """Test that safe relative names are allowed and normalized."""
        assert safe_member_name("hola") == "hola"
        assert safe_member_name("hola-linux-amd64/hola") == "hola-linux-amd64/hola"
        assert safe_member_name("./hola") == "hola"
        assert safe_member_name("dir//hola") == "dir/hola"
        assert safe_member_name("bin/") == "bin"

    def test_backslashes_treated_as_separators(self):
        """Test that zip entries written on Windows are normalized."""
        assert safe_member_name("hola\\hola.exe") == "hola/hola.exe"

    def test_absolute_paths_rejected(self):
        """Test that absolute paths are rejected."""
        with pytest.raises(ValueError, match="unsafe path: /usr/local/bin/hola"):
            safe_member_name("/usr/local/bin/hola")

        with pytest.raises(ValueError, match="unsafe path"):
            safe_member_name("\\Windows\\hola.exe")

    def test_parent_directory_traversal_rejected(self):
        """Test that parent directory traversal is rejected."""
        with pytest.raises(ValueError, match="unsafe path: ../evil"):
            safe_member_name("../evil")

        with pytest.raises(ValueError, match="unsafe path"):
            safe_member_name("dir/../../evil")

        with pytest.raises(ValueError, match="unsafe path"):
            safe_member_name("dir\\..\\evil")

    def test_drive_letters_rejected(self):
        """Test that Windows drive-qualified names are rejected."""
        with pytest.raises(ValueError, match="unsafe path"):
            safe_member_name("C:\\Windows\\hola.exe")

        with pytest.raises(ValueError, match="unsafe path"):
            safe_member_name("c:hola.exe")

    @pytest.mark.parametrize("name", ["", ".", "./"])
    def test_empty_names_rejected(self, name):
        """Test that names referring to the archive root are rejected."""
        with pytest.raises(ValueError, match="unsafe path"):
            safe_member_name(name)
