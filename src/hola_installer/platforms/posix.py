"""POSIX (Linux, macOS) platform operations."""
from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import Mapping, Optional

from ..archive import extract_from_tar
from ..errors import PathReconciliationWarning
from ..path_config import append_path_block, detect_profile_file, export_line, path_contains
from .base import PathOutcome

logger = logging.getLogger(__name__)

SYSTEM_INSTALL_DIR = Path("/usr/local/bin")


class PosixPlatform:
    """Linux and macOS: tar.xz archives, chmod, shell profile edits."""

    name = "posix"

    def __init__(self, home: Optional[Path] = None, is_root: Optional[bool] = None):
        """
        Args:
            home: Home directory (defaults to ``Path.home()``)
            is_root: Override privilege detection (defaults to euid == 0)
        """
        self.home = home if home is not None else Path.home()
        self.is_root = is_root if is_root is not None else os.geteuid() == 0

    def binary_filename(self, bin_name: str) -> str:
        return bin_name

    def default_install_dir(self, bin_name: str) -> Path:
        if self.is_root:
            return SYSTEM_INSTALL_DIR
        return self.home / ".local" / "bin"

    def extract(self, archive: Path, dest_dir: Path, binary_filename: str) -> Path:
        return extract_from_tar(archive, dest_dir, binary_filename)

    def set_executable(self, path: Path) -> None:
        mode = path.stat().st_mode
        path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    def path_contains(self, path_value: str, install_dir: Path) -> bool:
        return path_contains(path_value, install_dir, sep=":")

    def path_instruction(self, install_dir: Path) -> str:
        return export_line(install_dir)

    def edit_path_config(self, install_dir: Path, marker: str, env: Mapping[str, str]) -> PathOutcome:
        profile = detect_profile_file(env, self.home)
        if profile is None:
            logger.debug("No shell profile detected")
            return PathOutcome(action="manual", install_dir=install_dir, instruction=self.path_instruction(install_dir))

        try:
            changed = append_path_block(profile, install_dir, marker)
        except OSError as e:
            raise PathReconciliationWarning(f"Could not update {profile}: {e}") from e

        return PathOutcome(
            action="profile_updated" if changed else "marker_present",
            install_dir=install_dir,
            target=str(profile),
        )
