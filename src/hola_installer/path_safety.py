"""
Path safety utilities for archive extraction.

Release archives are untrusted input until their members are checked; this
module validates member names before anything is written to disk.
"""
from __future__ import annotations

from pathlib import PurePosixPath


def safe_member_name(name: str) -> str:
    """
    Validate and normalize an archive member name.

    This function enforces the following safety rules:
    - No empty strings or "." (the archive root itself)
    - No absolute paths (starting with '/') or drive letters
    - No parent directory references ('..' components)
    - Backslashes are treated as separators (zip files built on Windows)

    Args:
        name: Member name as stored in the archive

    Returns:
        Normalized relative POSIX path

    Raises:
        ValueError: If the name violates safety rules

    Examples:
        >>> safe_member_name("hola")
        'hola'

        >>> safe_member_name("./hola-linux-amd64/hola")
        'hola-linux-amd64/hola'

        >>> safe_member_name("../evil")
        ValueError: unsafe path: ../evil
    """
    rel = PurePosixPath(name.replace("\\", "/"))
    s = str(rel)
    if not s or s == ".":
        raise ValueError(f"unsafe path: {name}")
    if rel.is_absolute() or ".." in rel.parts:
        raise ValueError(f"unsafe path: {name}")
    if len(rel.parts[0]) >= 2 and rel.parts[0][1] == ":":
        raise ValueError(f"unsafe path: {name}")
    return s
