"""
PATH reconciliation.

Checks whether the install directory is already reachable on the command
search path and, if not, asks the platform to persist it. Shell profile
edits are guarded by a marker comment: a profile is modified if and only if
the marker text is absent from it, so re-running never duplicates the block.

Everything here is best-effort. Failures surface as
``PathReconciliationWarning`` and never fail an installation.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from .errors import PathReconciliationWarning
from .platforms.base import PathOutcome, PlatformOps

logger = logging.getLogger(__name__)

__all__ = [
    "path_components",
    "path_contains",
    "export_line",
    "detect_profile_file",
    "append_path_block",
    "reconcile_path_configuration",
]


def _normalize(component: str, case_insensitive: bool) -> str:
    component = os.path.expandvars(component.strip().strip('"'))
    if len(component) > 1:
        component = component.rstrip("/\\")
    return component.casefold() if case_insensitive else component


def path_components(path_value: str, sep: str = os.pathsep) -> list:
    return [c for c in path_value.split(sep) if c.strip()]


def path_contains(path_value: str, install_dir: Path, *, sep: str = os.pathsep,
                  case_insensitive: bool = False) -> bool:
    """
    Whether ``install_dir`` is one of the components of ``path_value``.

    Components are compared after expanding environment references and
    dropping trailing separators, so ``~/.local/bin/`` matches
    ``~/.local/bin``. Substrings never match.
    """
    wanted = _normalize(str(install_dir), case_insensitive)
    return any(_normalize(c, case_insensitive) == wanted for c in path_components(path_value, sep))


def export_line(install_dir: Path) -> str:
    return f'export PATH="{install_dir}:$PATH"'


def detect_profile_file(env: Mapping[str, str], home: Path) -> Optional[Path]:
    """
    Pick the shell profile to edit.

    Precedence:
    1. ``$ZDOTDIR/.zshrc`` (or ``~/.zshrc``) when ``ZSH_VERSION`` is set
    2. ``~/.bashrc`` when ``BASH_VERSION`` is set
    3. the rc file of the login shell named by ``$SHELL``, if it exists
    4. the first existing of ``~/.profile``, ``~/.bash_profile``, ``~/.zprofile``

    Returns:
        Existing profile path, or None when nothing suitable exists
    """
    zshrc = Path(env.get("ZDOTDIR") or home) / ".zshrc"
    bashrc = home / ".bashrc"

    if env.get("ZSH_VERSION"):
        return zshrc if zshrc.is_file() else None
    if env.get("BASH_VERSION"):
        return bashrc if bashrc.is_file() else None

    shell = Path(env.get("SHELL", "")).name
    if shell == "zsh" and zshrc.is_file():
        return zshrc
    if shell == "bash" and bashrc.is_file():
        return bashrc

    for name in (".profile", ".bash_profile", ".zprofile"):
        candidate = home / name
        if candidate.is_file():
            return candidate
    return None


def append_path_block(profile: Path, install_dir: Path, marker: str) -> bool:
    """
    Append the marker comment and export line to a profile.

    The file is modified if and only if ``marker`` does not already occur in
    it. The block is preceded by a blank line, and a newline is added first
    if the file does not end with one.

    Returns:
        True if the profile was modified

    Raises:
        OSError: If the profile cannot be read or written
    """
    content = profile.read_text(encoding="utf-8", errors="replace")
    if marker in content:
        logger.debug(f"Marker already present in {profile}")
        return False

    block = ""
    if content and not content.endswith("\n"):
        block += "\n"
    block += f"\n{marker}\n{export_line(install_dir)}\n"

    with open(profile, "a", encoding="utf-8") as f:
        f.write(block)
    logger.info(f"Appended PATH update to {profile}")
    return True


def reconcile_path_configuration(ops: PlatformOps, install_dir: Path, marker: str, *,
                                 env: Optional[Mapping[str, str]] = None,
                                 modify: bool = True) -> PathOutcome:
    """
    Make sure ``install_dir`` is on the user's PATH.

    Args:
        ops: Platform operations (decides how PATH is persisted)
        install_dir: Directory holding the installed binary
        marker: Marker comment guarding profile edits
        env: Environment to inspect (defaults to ``os.environ``)
        modify: When False, only report what the user should do

    Returns:
        PathOutcome describing what was (or was not) done

    Raises:
        PathReconciliationWarning: If the configuration could not be updated
    """
    env = os.environ if env is None else env

    if ops.path_contains(env.get("PATH", ""), install_dir):
        logger.debug(f"{install_dir} already on PATH")
        return PathOutcome(action="already_present", install_dir=install_dir)

    if not modify:
        return PathOutcome(action="skipped", install_dir=install_dir, instruction=ops.path_instruction(install_dir))

    try:
        return ops.edit_path_config(install_dir, marker, env)
    except PathReconciliationWarning:
        raise
    except OSError as e:
        raise PathReconciliationWarning(f"Could not update PATH configuration: {e}") from e
