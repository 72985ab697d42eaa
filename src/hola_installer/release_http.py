"""
HTTP client for the releases API and release asset downloads.

Wraps httpx with the installer's error taxonomy: transport and status
failures are mapped onto the error class the calling step expects, so every
network call surfaces as a single, step-specific error.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Type

import httpx
from pydantic import ValidationError
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from . import __version__
from .errors import DownloadError, InstallerError, MetadataFetchError
from .models import GithubRelease
from .settings import Settings

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 64

__all__ = ["ReleaseHTTP"]


class ReleaseHTTP:
    """
    HTTP client for release metadata and asset downloads.

    Network calls are attempted once by default; ``settings.http_retry``
    allows extra attempts on timeouts only.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.BaseTransport] = None):
        """
        Initialize release HTTP client.

        Args:
            settings: Installer settings (URLs, timeout, retry, token)
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.settings = settings
        timeout = settings.http_timeout_s
        self.client = httpx.Client(
            timeout=httpx.Timeout(connect=min(timeout, 10.0), read=timeout, write=timeout, pool=5.0),
            follow_redirects=True,
            headers={"User-Agent": f"hola-installer/{__version__}"},
            transport=transport,
        )

    def latest_tag(self, repo: str) -> GithubRelease:
        """
        Fetch the latest release for a repository.

        Args:
            repo: Repository identifier ("owner/name")

        Returns:
            Validated release payload with a non-empty ``tag_name``

        Raises:
            MetadataFetchError: On network failure, non-2xx, or missing tag
        """
        url = f"{self.settings.api_base}/repos/{repo}/releases/latest"
        headers = {"Accept": "application/vnd.github+json"}
        if self.settings.github_token:
            headers["Authorization"] = f"Bearer {self.settings.github_token}"

        hint = "Please check the repository path and network."
        try:
            response = self._request("GET", url, headers=headers)
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 404:
                raise MetadataFetchError(f"No published release found for {repo} (404). {hint}") from e
            if status in (401, 403):
                raise MetadataFetchError(
                    f"Release API refused the request ({status}); a GITHUB_TOKEN may be required. {hint}"
                ) from e
            raise MetadataFetchError(f"Release API error {status} for {repo}. {hint}") from e
        except httpx.RequestError as e:
            raise MetadataFetchError(f"Network error fetching latest release of {repo}: {e}. {hint}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise MetadataFetchError(f"Release API returned invalid JSON for {repo}: {e}") from e

        if not isinstance(payload, dict):
            raise MetadataFetchError(f"Unexpected release payload for {repo}. {hint}")

        try:
            release = GithubRelease.model_validate(payload)
        except ValidationError as e:
            raise MetadataFetchError(
                f"Could not fetch the latest release tag for {repo}: {e.errors()[0]['msg']}. {hint}"
            ) from e

        logger.debug(f"Latest release of {repo} is {release.tag_name}")
        return release

    def download(self, url: str, dest: Path, *,
                 error_cls: Type[InstallerError] = DownloadError) -> int:
        """
        Stream a URL to a local file.

        Args:
            url: Asset URL
            dest: Destination file (parent must exist)
            error_cls: Error raised on failure, chosen by the calling step

        Returns:
            Number of bytes written

        Raises:
            error_cls: On non-2xx status, connection failure, or truncated body.
                The partial file is removed before raising.
        """
        logger.debug(f"Downloading {url} -> {dest}")
        try:
            for attempt in self._retrying():
                with attempt:
                    return self._stream_to(url, dest, error_cls)
        except httpx.HTTPStatusError as e:
            dest.unlink(missing_ok=True)
            raise error_cls(f"HTTP {e.response.status_code} downloading {url}") from e
        except httpx.RequestError as e:
            dest.unlink(missing_ok=True)
            raise error_cls(f"Network error downloading {url}: {e}") from e
        except OSError as e:
            dest.unlink(missing_ok=True)
            raise error_cls(f"Could not write {dest}: {e}") from e
        except InstallerError:
            dest.unlink(missing_ok=True)
            raise
        raise AssertionError("unreachable")  # pragma: no cover

    def _stream_to(self, url: str, dest: Path, error_cls: Type[InstallerError] = DownloadError) -> int:
        written = 0
        with self.client.stream("GET", url) as response:
            response.raise_for_status()
            with open(dest, "wb") as out:
                for chunk in response.iter_bytes(CHUNK_SIZE):
                    out.write(chunk)
                    written += len(chunk)

            declared = response.headers.get("Content-Length")
            if declared is not None and declared.isdigit():
                # Content-Length counts encoded bytes when a Content-Encoding is applied
                encoding = response.headers.get("Content-Encoding", "identity").lower()
                received = written if encoding == "identity" else response.num_bytes_downloaded
                if received < int(declared):
                    raise error_cls(
                        f"Truncated download from {url}: received {received} of {declared} bytes"
                    )
        logger.debug(f"Downloaded {written} bytes from {url}")
        return written

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.settings.http_retry + 1),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception_type(httpx.TimeoutException),
            reraise=True,
        )

    def _request(self, method: str, url: str, headers: Optional[dict] = None) -> httpx.Response:
        """Make an HTTP request under the retry policy and raise for HTTP errors."""
        for attempt in self._retrying():
            with attempt:
                response = self.client.request(method, url, headers=headers or {})
                response.raise_for_status()
                return response
        raise AssertionError("unreachable")  # pragma: no cover

    def close(self):
        """Close HTTP client."""
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
