"""
Checksum manifest parsing and artifact verification.

This is the only integrity gate: nothing downstream touches an archive until
``verify_artifact`` has returned. Manifest lines follow the sha256sum format,
``<hex-digest> <filename>``, and filenames are matched exactly so that one
archive name being a substring of another can never select the wrong digest.
"""
from __future__ import annotations

import hashlib
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

from .errors import ChecksumEntryNotFoundError, ChecksumMismatchError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024  # 1 MiB

_HEX_DIGEST = re.compile(r"[0-9a-fA-F]{64}")

__all__ = ["VerifiedArtifact", "parse_manifest", "expected_digest", "sha256_file", "verify_artifact"]


@dataclass(frozen=True)
class VerifiedArtifact:
    """An archive whose SHA-256 matched the manifest."""
    path: Path
    expected_sha256: str
    actual_sha256: str


def parse_manifest(text: str) -> Dict[str, str]:
    """
    Parse a checksum manifest into ``{filename: lowercase hex digest}``.

    Blank lines, ``#`` comments and lines without a 64-hex digest are skipped.
    A leading ``*`` on the filename (binary-mode marker) is dropped. When a
    filename repeats, the first entry wins.
    """
    entries: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        parts = line.split(None, 1)
        if len(parts) != 2 or not _HEX_DIGEST.fullmatch(parts[0]):
            logger.debug(f"Skipping malformed checksum line: {line!r}")
            continue
        filename = parts[1].strip()
        if filename.startswith("*"):
            filename = filename[1:]
        entries.setdefault(filename, parts[0].lower())
    return entries


def expected_digest(manifest_text: str, archive_name: str) -> str:
    """
    Find the digest listed for ``archive_name``.

    Raises:
        ChecksumEntryNotFoundError: If no line names the archive exactly
    """
    digest = parse_manifest(manifest_text).get(archive_name)
    if digest is None:
        raise ChecksumEntryNotFoundError(
            f"Could not find checksum for '{archive_name}' in the checksums file.",
            archive_name=archive_name,
        )
    return digest


def sha256_file(path: Path) -> str:
    """Compute the SHA-256 of a file, reading in chunks."""
    hash_obj = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            hash_obj.update(chunk)
    return hash_obj.hexdigest()


def verify_artifact(artifact_path: Path, manifest_text: str, archive_name: str) -> VerifiedArtifact:
    """
    Verify a downloaded archive against the manifest.

    Args:
        artifact_path: Downloaded archive
        manifest_text: Contents of checksums.txt
        archive_name: Name to look up in the manifest

    Returns:
        VerifiedArtifact with both digests

    Raises:
        ChecksumEntryNotFoundError: If the manifest lacks the archive
        ChecksumMismatchError: If the digests differ (case-insensitive)
    """
    expected = expected_digest(manifest_text, archive_name)
    actual = sha256_file(artifact_path)
    if actual.lower() != expected.lower():
        raise ChecksumMismatchError(
            f"Checksum mismatch for {archive_name}: expected {expected}, got {actual}. "
            "The downloaded file may be corrupt or tampered with.",
            expected=expected,
            actual=actual,
        )
    logger.debug(f"Checksum verified for {archive_name}: {actual}")
    return VerifiedArtifact(path=artifact_path, expected_sha256=expected, actual_sha256=actual)
