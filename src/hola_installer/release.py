"""
Release resolution.

Turns a repository identifier and a resolved platform into the concrete
archive name and URLs for one release. URL layout is fixed:

    {download_base}/{repo}/releases/download/{tag}/{bin}-{os}-{arch}.{ext}
    {download_base}/{repo}/releases/download/{tag}/checksums.txt
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .host import PlatformTarget
from .models import validate_tag
from .release_http import ReleaseHTTP
from .settings import Settings

logger = logging.getLogger(__name__)

CHECKSUMS_FILENAME = "checksums.txt"

__all__ = ["ReleaseDescriptor", "DownloadedArtifact", "archive_name_for", "describe_release", "resolve_latest_release", "CHECKSUMS_FILENAME"]


@dataclass(frozen=True)
class ReleaseDescriptor:
    """Metadata for the version to install. Immutable after resolution."""
    repo: str
    tag: str
    archive_name: str
    download_url: str
    checksum_url: str


@dataclass(frozen=True)
class DownloadedArtifact:
    """An archive on disk that has not been verified yet."""
    path: Path
    size: int


def archive_name_for(bin_name: str, target: PlatformTarget) -> str:
    """Per-platform archive name, e.g. ``hola-linux-amd64.tar.xz``."""
    return f"{bin_name}-{target.os}-{target.arch}.{target.archive_ext}"


def describe_release(repo: str, tag: str, target: PlatformTarget, bin_name: str, *,
                     download_base: str = "https://github.com") -> ReleaseDescriptor:
    """
    Derive archive and checksum URLs for a release tag.

    Args:
        repo: Repository identifier ("owner/name")
        tag: Release tag
        target: Resolved platform
        bin_name: Binary name used as the archive prefix
        download_base: Base URL assets are served from

    Returns:
        Fully populated ReleaseDescriptor

    Raises:
        ValueError: If the tag is empty or cannot be used in a URL path
    """
    if not tag:
        raise ValueError("tag is required")
    tag = validate_tag(tag)
    base = f"{download_base.rstrip('/')}/{repo}/releases/download/{tag}"
    archive = archive_name_for(bin_name, target)
    return ReleaseDescriptor(
        repo=repo,
        tag=tag,
        archive_name=archive,
        download_url=f"{base}/{archive}",
        checksum_url=f"{base}/{CHECKSUMS_FILENAME}",
    )


def resolve_latest_release(http: ReleaseHTTP, settings: Settings, target: PlatformTarget, *,
                           tag: Optional[str] = None) -> ReleaseDescriptor:
    """
    Resolve the release to install.

    Queries the latest release unless ``tag`` pins one explicitly.

    Raises:
        MetadataFetchError: If the latest tag cannot be determined
        ValueError: If a pinned tag cannot be used in a URL path
    """
    if tag is None:
        release = http.latest_tag(settings.repo)
        tag = release.tag_name
        if release.assets and archive_name_for(settings.bin_name, target) not in release.asset_names():
            logger.warning(f"Release {tag} does not list an asset for {target}; download may fail")
    else:
        logger.debug(f"Using pinned tag {tag}")

    descriptor = describe_release(
        settings.repo, tag, target, settings.bin_name,
        download_base=settings.download_base,
    )
    logger.info(f"Resolved {settings.repo} {tag}: {descriptor.download_url}")
    return descriptor
