"""
Hola installer: fetch, verify and install prebuilt hola releases.

The installer resolves the host platform, looks up the latest GitHub
release, downloads the matching archive, checks it against the release's
checksums.txt, and only then replaces the installed binary and makes sure
its directory is on PATH.
"""
__version__ = "0.1.0"

from .errors import (
    BinaryNotFoundInArchiveError,
    ChecksumEntryNotFoundError,
    ChecksumManifestFetchError,
    ChecksumMismatchError,
    DownloadError,
    ExtractionError,
    InstallationError,
    InstallerError,
    MetadataFetchError,
    PathReconciliationWarning,
    UnsupportedPlatformError,
)
from .host import PlatformTarget, resolve_platform
from .installer import InstallResult, Installer, InstallState
from .settings import Settings, create_settings_from_env

__all__ = [
    "__version__",
    "Installer",
    "InstallResult",
    "InstallState",
    "PlatformTarget",
    "resolve_platform",
    "Settings",
    "create_settings_from_env",
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
