"""
Windows platform operations.

PATH is persisted in the user-scope environment (``HKCU\\Environment``)
rather than a profile file. The check is against the structured PATH value
itself, so rewriting it is idempotent without any marker comment.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping, Optional, Protocol, Tuple

from ..archive import extract_from_zip
from ..errors import PathReconciliationWarning
from ..path_config import path_components, path_contains
from .base import PathOutcome

logger = logging.getLogger(__name__)

ENVIRONMENT_KEY = r"HKCU\Environment"

# REG_EXPAND_SZ; keeps %USERPROFILE%-style entries working
_REG_EXPAND_SZ = 2

__all__ = ["WindowsPlatform", "UserEnvironmentStore", "WinregEnvironmentStore"]


class UserEnvironmentStore(Protocol):
    """Read/write access to the user-scope PATH value."""

    def read_path(self) -> Tuple[str, int]:
        """Return (PATH value, registry value type); ("", REG_EXPAND_SZ) when unset."""
        ...

    def write_path(self, value: str, value_type: int) -> None:
        ...


class WinregEnvironmentStore:
    """User environment store backed by the Windows registry."""

    def read_path(self) -> Tuple[str, int]:
        import winreg

        with winreg.OpenKey(winreg.HKEY_CURRENT_USER, "Environment", 0, winreg.KEY_READ) as key:
            try:
                value, value_type = winreg.QueryValueEx(key, "Path")
            except FileNotFoundError:
                return "", winreg.REG_EXPAND_SZ
        return value or "", value_type

    def write_path(self, value: str, value_type: int) -> None:
        import winreg

        with winreg.OpenKey(winreg.HKEY_CURRENT_USER, "Environment", 0, winreg.KEY_SET_VALUE) as key:
            winreg.SetValueEx(key, "Path", 0, value_type, value)
        self._broadcast_change()

    def _broadcast_change(self) -> None:
        """Tell running programs (Explorer, new shells) that the environment changed."""
        import ctypes
        from ctypes import wintypes

        HWND_BROADCAST = 0xFFFF
        WM_SETTINGCHANGE = 0x001A
        SMTO_ABORTIFHUNG = 0x0002
        result = wintypes.DWORD()
        sent = ctypes.windll.user32.SendMessageTimeoutW(
            HWND_BROADCAST, WM_SETTINGCHANGE, 0, "Environment",
            SMTO_ABORTIFHUNG, 5000, ctypes.byref(result),
        )
        if not sent:
            logger.warning("Environment change broadcast failed; new terminals may need a sign-out to see PATH")


class WindowsPlatform:
    """Windows: zip archives, no chmod, user-scope PATH in the registry."""

    name = "windows"

    def __init__(self, store: Optional[UserEnvironmentStore] = None,
                 local_app_data: Optional[Path] = None):
        """
        Args:
            store: User environment store (defaults to the registry)
            local_app_data: Override for %LOCALAPPDATA%
        """
        self.store = store if store is not None else WinregEnvironmentStore()
        if local_app_data is None:
            env_value = os.environ.get("LOCALAPPDATA")
            local_app_data = Path(env_value) if env_value else Path.home() / "AppData" / "Local"
        self.local_app_data = local_app_data

    def binary_filename(self, bin_name: str) -> str:
        return f"{bin_name}.exe"

    def default_install_dir(self, bin_name: str) -> Path:
        return self.local_app_data / "Programs" / bin_name

    def extract(self, archive: Path, dest_dir: Path, binary_filename: str) -> Path:
        return extract_from_zip(archive, dest_dir, binary_filename)

    def set_executable(self, path: Path) -> None:
        # .exe extension plus inherited ACLs already allow execution
        return None

    def path_contains(self, path_value: str, install_dir: Path) -> bool:
        return path_contains(path_value, install_dir, sep=";", case_insensitive=True)

    def path_instruction(self, install_dir: Path) -> str:
        # PowerShell, user scope
        return (
            f"[Environment]::SetEnvironmentVariable(\"Path\", \"{install_dir};\" + "
            "[Environment]::GetEnvironmentVariable(\"Path\", \"User\"), \"User\")"
        )

    def edit_path_config(self, install_dir: Path, marker: str, env: Mapping[str, str]) -> PathOutcome:
        try:
            current, value_type = self.store.read_path()
        except OSError as e:
            raise PathReconciliationWarning(f"Could not read user PATH from {ENVIRONMENT_KEY}: {e}") from e

        if self.path_contains(current, install_dir):
            # persisted already, just not visible in this session yet
            logger.debug(f"{install_dir} already in user PATH")
            return PathOutcome(action="already_present", install_dir=install_dir, target=ENVIRONMENT_KEY)

        updated = ";".join([str(install_dir)] + path_components(current, ";"))
        try:
            self.store.write_path(updated, value_type or _REG_EXPAND_SZ)
        except OSError as e:
            raise PathReconciliationWarning(f"Could not write user PATH to {ENVIRONMENT_KEY}: {e}") from e

        logger.info(f"Prepended {install_dir} to user PATH")
        return PathOutcome(action="registry_updated", install_dir=install_dir, target=ENVIRONMENT_KEY)
