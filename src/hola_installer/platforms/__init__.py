"""
Platform-specific operations.

``platform_ops_for`` picks the POSIX or Windows implementation of the
``PlatformOps`` protocol for a resolved target.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from .base import PathAction, PathOutcome, PlatformOps

if TYPE_CHECKING:
    from ..host import PlatformTarget

__all__ = ["PathAction", "PathOutcome", "PlatformOps", "platform_ops_for"]


def platform_ops_for(target: "PlatformTarget") -> PlatformOps:
    # Imported here to avoid a cycle with path_config
    if target.is_windows:
        from .windows import WindowsPlatform
        return WindowsPlatform()
    from .posix import PosixPlatform
    return PosixPlatform()
