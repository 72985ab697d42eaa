"""
Scoped temporary workspace for one installation run.

The directory exists for exactly the duration of the ``with`` block and is
removed on every exit path, including failures in any step.
"""
from __future__ import annotations

import logging
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

logger = logging.getLogger(__name__)

__all__ = ["Workspace", "run_workspace"]


@dataclass(frozen=True)
class Workspace:
    """Handle to the run's temporary directory."""
    root: Path

    def file(self, name: str) -> Path:
        return self.root / name

    @property
    def extract_dir(self) -> Path:
        return self.root / "extracted"


@contextmanager
def run_workspace(parent: Optional[Path] = None, prefix: str = "hola-install-") -> Iterator[Workspace]:
    """
    Create a fresh temporary directory unique to this run.

    Args:
        parent: Directory to create it in (defaults to the system temp dir)
        prefix: Directory name prefix

    Yields:
        Workspace handle; the directory is deleted when the block exits
    """
    root = Path(tempfile.mkdtemp(prefix=prefix, dir=parent))
    logger.debug(f"Created workspace {root}")
    try:
        yield Workspace(root=root)
    finally:
        shutil.rmtree(root, ignore_errors=True)
        if root.exists():
            logger.warning(f"Could not fully remove temporary directory {root}")
        else:
            logger.debug(f"Removed workspace {root}")
