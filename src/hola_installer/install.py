"""
Placing the verified binary at its final location.

This is the only persistent side effect of a run besides the optional PATH
update. The previous binary, if any, is removed first; the new one is moved
(not copied) in from the run's workspace.
"""
from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .errors import InstallationError
from .platforms.base import PlatformOps

logger = logging.getLogger(__name__)

__all__ = ["InstallationTarget", "InstallReport", "installation_target", "install_binary"]


@dataclass(frozen=True)
class InstallationTarget:
    """Final on-disk location of the binary."""
    install_dir: Path
    binary_path: Path


@dataclass
class InstallReport:
    target: InstallationTarget
    replaced_previous: bool = False
    warnings: List[str] = field(default_factory=list)


def installation_target(ops: PlatformOps, bin_name: str, install_dir: Optional[Path] = None) -> InstallationTarget:
    """Build the target from an explicit directory or the platform default."""
    directory = Path(install_dir).expanduser() if install_dir is not None else ops.default_install_dir(bin_name)
    directory = directory.absolute()
    return InstallationTarget(install_dir=directory, binary_path=directory / ops.binary_filename(bin_name))


def install_binary(extracted: Path, target: InstallationTarget, ops: PlatformOps) -> InstallReport:
    """
    Move the extracted binary into place.

    Steps:
    1. Remove an existing file at the install path (failure is a warning)
    2. Create the install directory and parents
    3. Move the binary in
    4. Set executable permission (POSIX)

    Args:
        extracted: Verified, extracted binary inside the workspace
        target: Where to install it
        ops: Platform operations

    Returns:
        InstallReport noting whether a previous binary was replaced

    Raises:
        InstallationError: If something other than a file blocks the install
            path, the directory cannot be created, the move fails, or
            permissions cannot be set
    """
    report = InstallReport(target=target)
    dest = target.binary_path

    if dest.exists() or dest.is_symlink():
        logger.info(f"Removing existing binary at {dest}")
        try:
            dest.unlink()
            report.replaced_previous = True
        except OSError as e:
            msg = f"Failed to remove existing binary at {dest} ({e}), proceeding with caution."
            logger.warning(msg)
            report.warnings.append(msg)

    if dest.exists() and not dest.is_file():
        raise InstallationError(f"Install path {dest} exists and is not a regular file", path=str(dest))

    try:
        target.install_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise InstallationError(f"Failed to create directory {target.install_dir}: {e}", path=str(target.install_dir)) from e

    try:
        shutil.move(str(extracted), str(dest))
    except OSError as e:
        raise InstallationError(f"Failed to move binary to {dest}: {e}", path=str(dest)) from e

    try:
        ops.set_executable(dest)
    except OSError as e:
        raise InstallationError(f"Failed to set execute permission on {dest}: {e}", path=str(dest)) from e

    logger.debug(f"Installed {dest}")
    return report
