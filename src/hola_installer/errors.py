"""
Installer error classes.

Provides a clear taxonomy of errors that can occur during an installation run.
Every fatal error names the step that failed so the CLI can report it; the
exit-code mapping lives in ``operations.mappers``.
"""
from __future__ import annotations

from typing import Optional


class InstallerError(Exception):
    """
    Base class for all fatal installer errors.

    Attributes:
        step: Name of the run step that failed (e.g. "download")
    """
    step = "install"

    def __init__(self, message: str, *, step: Optional[str] = None):
        super().__init__(message)
        if step is not None:
            self.step = step


class UnsupportedPlatformError(InstallerError):
    """Host OS or architecture does not map to a released platform pair."""
    step = "platform"

    def __init__(self, message: str, system: str, machine: str):
        super().__init__(message)
        self.system = system
        self.machine = machine


class MetadataFetchError(InstallerError):
    """
    Release metadata could not be fetched.

    Raised when:
    - The releases API is unreachable or returns non-2xx
    - The response is not JSON or lacks a usable ``tag_name``
    """
    step = "release"


class DownloadError(InstallerError):
    """
    Archive download failed.

    Raised when:
    - HTTP status is not 2xx
    - Connection fails mid-transfer
    - Body is shorter than the declared Content-Length
    """
    step = "download"


class ChecksumManifestFetchError(InstallerError):
    """The checksums.txt manifest could not be downloaded."""
    step = "checksum"


class ChecksumEntryNotFoundError(InstallerError):
    """The manifest has no line for the target archive name."""
    step = "checksum"

    def __init__(self, message: str, archive_name: str):
        super().__init__(message)
        self.archive_name = archive_name


class ChecksumMismatchError(InstallerError):
    """
    Archive digest does not match the manifest.

    The archive is untrusted and must not be extracted or installed.
    """
    step = "checksum"

    def __init__(self, message: str, expected: str, actual: str):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class ExtractionError(InstallerError):
    """Archive is corrupt, unreadable, or contains unsafe member paths."""
    step = "extract"


class BinaryNotFoundInArchiveError(InstallerError):
    """The expected binary entry is absent from the extracted archive."""
    step = "extract"


class InstallationError(InstallerError):
    """
    Moving the verified binary into place failed.

    Wraps the underlying OSError (permission denied, disk full,
    cross-device move failure).
    """
    step = "install"

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


class PathReconciliationWarning(Exception):
    """
    PATH configuration could not be updated.

    Non-fatal: the binary is already installed when this is raised. The
    installer catches it and reports a warning instead of failing the run.
    """
    step = "path"


__all__ = [
    "InstallerError",
    "UnsupportedPlatformError",
    "MetadataFetchError",
    "DownloadError",
    "ChecksumManifestFetchError",
    "ChecksumEntryNotFoundError",
    "ChecksumMismatchError",
    "ExtractionError",
    "BinaryNotFoundInArchiveError",
    "InstallationError",
    "PathReconciliationWarning",
]
