"""
Release archive extraction.

Pulls the single expected executable out of a verified release archive
(tar.xz on POSIX, zip on Windows). Only that one entry is written to disk;
every member name is validated first so a malformed archive is rejected as a
whole rather than partially trusted.
"""
from __future__ import annotations

import logging
import lzma
import shutil
import tarfile
import zipfile
from pathlib import Path, PurePosixPath
from typing import IO, Callable, List, Tuple

from .errors import BinaryNotFoundInArchiveError, ExtractionError
from .path_safety import safe_member_name

logger = logging.getLogger(__name__)

# Entries may sit at the root or inside one top-level directory
MAX_ENTRY_DEPTH = 2

__all__ = ["extract_binary", "extract_from_tar", "extract_from_zip"]


def _pick_entry(names: List[Tuple[str, bool]], binary_filename: str, archive: Path) -> str:
    """
    Choose the member holding the binary.

    Args:
        names: (member name, is regular file) pairs in archive order
        binary_filename: Expected file name, e.g. "hola" or "hola.exe"
        archive: Archive path (for messages)

    Returns:
        Original member name of the shallowest match
    """
    candidates = []
    for name, is_file in names:
        if str(PurePosixPath(name.replace("\\", "/"))) == ".":
            # "./" root entry written by `tar -C dir .`
            continue
        try:
            safe = safe_member_name(name)
        except ValueError as e:
            raise ExtractionError(f"Refusing to extract {archive.name}: {e}") from e
        parts = PurePosixPath(safe).parts
        if is_file and parts[-1] == binary_filename and len(parts) <= MAX_ENTRY_DEPTH:
            candidates.append((len(parts), name))

    if not candidates:
        raise BinaryNotFoundInArchiveError(
            f"Could not find '{binary_filename}' executable in the extracted contents of {archive.name}."
        )
    candidates.sort(key=lambda c: c[0])
    return candidates[0][1]


def _write_entry(opener: Callable[[], IO[bytes]], dest: Path) -> None:
    dest.parent.mkdir(parents=True, exist_ok=True)
    with opener() as src, open(dest, "wb") as out:
        shutil.copyfileobj(src, out)


def extract_from_tar(archive: Path, dest_dir: Path, binary_filename: str) -> Path:
    """
    Extract ``binary_filename`` from a (compressed) tarball.

    Raises:
        ExtractionError: If the archive is corrupt or has unsafe members
        BinaryNotFoundInArchiveError: If no member matches
    """
    dest = dest_dir / binary_filename
    try:
        with tarfile.open(archive, "r:*") as tar:
            members = tar.getmembers()
            chosen = _pick_entry([(m.name, m.isreg()) for m in members], binary_filename, archive)
            member = tar.getmember(chosen)
            _write_entry(lambda: tar.extractfile(member), dest)
    except (tarfile.TarError, lzma.LZMAError, EOFError) as e:
        raise ExtractionError(f"Extraction failed for {archive.name}: {e}") from e
    except OSError as e:
        raise ExtractionError(f"Extraction failed for {archive.name}: {e}") from e
    return dest


def extract_from_zip(archive: Path, dest_dir: Path, binary_filename: str) -> Path:
    """
    Extract ``binary_filename`` from a zip archive.

    Raises:
        ExtractionError: If the archive is corrupt or has unsafe members
        BinaryNotFoundInArchiveError: If no member matches
    """
    dest = dest_dir / binary_filename
    try:
        with zipfile.ZipFile(archive) as zf:
            infos = zf.infolist()
            chosen = _pick_entry([(i.filename, not i.is_dir()) for i in infos], binary_filename, archive)
            _write_entry(lambda: zf.open(chosen), dest)
    except zipfile.BadZipFile as e:
        raise ExtractionError(f"Extraction failed for {archive.name}: {e}") from e
    except OSError as e:
        raise ExtractionError(f"Extraction failed for {archive.name}: {e}") from e
    return dest


def extract_binary(archive: Path, dest_dir: Path, binary_filename: str) -> Path:
    """
    Extract the release binary, choosing the format from the archive name.

    Args:
        archive: Verified archive path
        dest_dir: Directory to write the binary into (created if missing)
        binary_filename: Expected entry name

    Returns:
        Path of the extracted binary
    """
    logger.debug(f"Extracting {binary_filename} from {archive}")
    if archive.name.endswith(".zip"):
        path = extract_from_zip(archive, dest_dir, binary_filename)
    else:
        path = extract_from_tar(archive, dest_dir, binary_filename)

    if not path.is_file():
        raise BinaryNotFoundInArchiveError(f"Could not find '{binary_filename}' after extracting {archive.name}.")
    return path
