"""
Host platform detection.

Maps the raw OS and machine names reported by the interpreter onto the
(os, arch) pairs that releases are published for.
"""
from __future__ import annotations

import platform
from dataclasses import dataclass
from typing import Literal, Optional

from .errors import UnsupportedPlatformError

OsName = Literal["linux", "darwin", "windows"]
ArchName = Literal["amd64", "arm64"]

__all__ = ["PlatformTarget", "resolve_platform", "OsName", "ArchName"]

_ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    "arm64": "arm64",
    "aarch64": "arm64",
}


@dataclass(frozen=True)
class PlatformTarget:
    """
    Resolved OS/architecture pair.

    Invariants:
    - os is one of "linux", "darwin", "windows"
    - arch is one of "amd64", "arm64"
    """
    os: OsName
    arch: ArchName

    def __post_init__(self) -> None:
        if self.os not in ("linux", "darwin", "windows"):
            raise ValueError(f"unknown os: {self.os}")
        if self.arch not in ("amd64", "arm64"):
            raise ValueError(f"unknown arch: {self.arch}")

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    @property
    def archive_ext(self) -> str:
        """Release archive extension: zip on Windows, tar.xz elsewhere."""
        return "zip" if self.is_windows else "tar.xz"

    @property
    def exe_suffix(self) -> str:
        return ".exe" if self.is_windows else ""

    def __str__(self) -> str:
        return f"{self.os}({self.arch})"


def _map_os(system: str) -> Optional[OsName]:
    lowered = system.lower()
    if lowered.startswith("linux"):
        return "linux"
    if lowered.startswith("darwin"):
        return "darwin"
    # Git Bash and friends report MINGW64_NT-10.0 and similar
    if lowered.startswith(("windows", "mingw", "msys", "cygwin")):
        return "windows"
    return None


def resolve_platform(system: Optional[str] = None, machine: Optional[str] = None) -> PlatformTarget:
    """
    Resolve the release platform for this host.

    Args:
        system: Raw OS name (defaults to ``platform.system()``)
        machine: Raw machine name (defaults to ``platform.machine()``)

    Returns:
        PlatformTarget for the supported pair

    Raises:
        UnsupportedPlatformError: If either value has no released counterpart
    """
    system = platform.system() if system is None else system
    machine = platform.machine() if machine is None else machine

    os_name = _map_os(system)
    if os_name is None:
        raise UnsupportedPlatformError(f"Unsupported OS: {system or '<unknown>'}", system, machine)

    arch = _ARCH_ALIASES.get(machine.lower())
    if arch is None:
        raise UnsupportedPlatformError(f"Unsupported Arch: {machine or '<unknown>'}", system, machine)

    return PlatformTarget(os=os_name, arch=arch)
