"""
Platform capability interface.

The installer runs one flow on every OS; the operations that genuinely differ
between POSIX and Windows are collected behind this protocol.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Mapping, Optional, Protocol, runtime_checkable

PathAction = Literal[
    "already_present",   # install dir already on PATH, nothing touched
    "skipped",           # caller asked not to modify PATH
    "profile_updated",   # marker block appended to a shell profile
    "marker_present",    # profile already carries the marker, nothing touched
    "registry_updated",  # user-scope PATH value rewritten
    "manual",            # no profile found; user must edit config by hand
]

__all__ = ["PathAction", "PathOutcome", "PlatformOps"]


@dataclass(frozen=True)
class PathOutcome:
    """
    Result of PATH reconciliation.

    ``target`` is the profile file or registry location that was inspected,
    when there was one. ``instruction`` is the line the user should add by
    hand, set whenever nothing was written automatically.
    """
    action: PathAction
    install_dir: Path
    target: Optional[str] = None
    instruction: Optional[str] = None

    @property
    def changed(self) -> bool:
        return self.action in ("profile_updated", "registry_updated")


@runtime_checkable
class PlatformOps(Protocol):
    """Protocol for platform-specific installer operations."""

    name: str

    def binary_filename(self, bin_name: str) -> str:
        """File name of the executable, e.g. ``hola`` or ``hola.exe``."""
        ...

    def default_install_dir(self, bin_name: str) -> Path:
        """Install directory used when none is configured."""
        ...

    def extract(self, archive: Path, dest_dir: Path, binary_filename: str) -> Path:
        """
        Extract the binary from a verified archive.

        Raises:
            ExtractionError: If the archive cannot be read
            BinaryNotFoundInArchiveError: If the entry is missing
        """
        ...

    def set_executable(self, path: Path) -> None:
        """
        Make the installed file executable.

        Raises:
            OSError: If permissions cannot be changed
        """
        ...

    def path_contains(self, path_value: str, install_dir: Path) -> bool:
        """Whether ``install_dir`` is a component of a PATH-style string."""
        ...

    def path_instruction(self, install_dir: Path) -> str:
        """Command the user can run or add by hand to put ``install_dir`` on PATH."""
        ...

    def edit_path_config(self, install_dir: Path, marker: str, env: Mapping[str, str]) -> PathOutcome:
        """
        Persist ``install_dir`` on the user's PATH.

        Called only when the directory is absent from the session PATH.

        Raises:
            PathReconciliationWarning: If the configuration cannot be written
        """
        ...
