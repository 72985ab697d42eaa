"""
Settings and configuration for the Hola installer.

Centralizes configuration values and provides validation with fail-fast behavior.
Loads settings from environment variables at installer construction time.
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass, replace
from typing import Optional

__all__ = ["Settings", "create_settings_from_env", "DEFAULT_REPO", "DEFAULT_BIN_NAME"]

DEFAULT_REPO = "Zillowe/Hola"
DEFAULT_BIN_NAME = "hola"
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_DOWNLOAD_BASE_URL = "https://github.com"
DEFAULT_PATH_MARKER = "# Hola PATH addition"


@dataclass(frozen=True)
class Settings:
    """
    Configuration settings for the installer.

    Release Settings:
        repo: GitHub repository identifier ("owner/name")
        bin_name: Binary name inside the release archive
        api_url: Base URL of the releases metadata API
        download_base_url: Base URL release assets are downloaded from
        github_token: Optional token sent to the metadata API

    HTTP Settings:
        http_timeout_s: HTTP request timeout in seconds
        http_retry: Number of retries on timeouts (0=single attempt)

    Local Settings:
        install_dir: Explicit install directory (None=platform default)
        path_marker: Marker comment guarding profile file edits
    """
    repo: str = DEFAULT_REPO
    bin_name: str = DEFAULT_BIN_NAME
    api_url: str = DEFAULT_API_URL
    download_base_url: str = DEFAULT_DOWNLOAD_BASE_URL
    github_token: Optional[str] = None
    http_timeout_s: float = 30.0
    http_retry: int = 0
    install_dir: Optional[str] = None
    path_marker: str = DEFAULT_PATH_MARKER

    def __post_init__(self):
        """Validate settings on construction."""
        if not self.repo:
            raise ValueError("repo is required")

        # owner/name, GitHub's allowed characters
        repo_pattern = r"^[A-Za-z0-9][A-Za-z0-9_.-]*/[A-Za-z0-9_.-]+$"
        if not re.match(repo_pattern, self.repo):
            raise ValueError(f"Invalid repo format: {self.repo}. Expected 'owner/name'")

        if not self.bin_name or not re.match(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$", self.bin_name):
            raise ValueError(f"Invalid bin_name: {self.bin_name!r}")

        for name in ("api_url", "download_base_url"):
            value = getattr(self, name)
            if not value or not re.match(r"^https?://[A-Za-z0-9.-]+(?::[0-9]+)?(?:/.*)?$", value):
                raise ValueError(f"Invalid {name} format: {value}")

        if self.http_timeout_s <= 0:
            raise ValueError(f"http_timeout_s must be positive, got {self.http_timeout_s}")

        if self.http_retry < 0:
            raise ValueError(f"http_retry must be non-negative, got {self.http_retry}")

        if not self.path_marker.strip():
            raise ValueError("path_marker must not be blank")
        if "\n" in self.path_marker:
            raise ValueError("path_marker must be a single line")

    @property
    def api_base(self) -> str:
        return self.api_url.rstrip("/")

    @property
    def download_base(self) -> str:
        return self.download_base_url.rstrip("/")

    def with_overrides(self, **overrides) -> Settings:
        """
        Return a copy with the non-None overrides applied.

        Used by the CLI so that explicit options win over environment values.
        """
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self


def create_settings_from_env() -> Settings:
    """
    Load settings from environment variables.

    Environment Variables:
        - HOLA_REPO (default: Zillowe/Hola)
        - HOLA_BIN_NAME (default: hola)
        - HOLA_API_URL (default: https://api.github.com)
        - HOLA_DOWNLOAD_BASE_URL (default: https://github.com)
        - HOLA_GITHUB_TOKEN, falling back to GITHUB_TOKEN (optional)
        - HOLA_HTTP_TIMEOUT (default: 30.0)
        - HOLA_HTTP_RETRY (default: 0)
        - HOLA_INSTALL_DIR (optional)
        - HOLA_PATH_MARKER (default: "# Hola PATH addition")

    Returns:
        Settings object with validated configuration

    Raises:
        ValueError: If configuration is invalid

    Note:
        Creates a fresh Settings instance every time (no caching).
    """
    def get_float(key: str, default: float) -> float:
        value = os.getenv(key)
        try:
            return float(value) if value else default
        except ValueError:
            raise ValueError(f"{key} must be a number, got {value!r}") from None

    def get_int(key: str, default: int) -> int:
        value = os.getenv(key)
        try:
            return int(value) if value else default
        except ValueError:
            raise ValueError(f"{key} must be an integer, got {value!r}") from None

    return Settings(
        repo=os.getenv("HOLA_REPO") or DEFAULT_REPO,
        bin_name=os.getenv("HOLA_BIN_NAME") or DEFAULT_BIN_NAME,
        api_url=os.getenv("HOLA_API_URL") or DEFAULT_API_URL,
        download_base_url=os.getenv("HOLA_DOWNLOAD_BASE_URL") or DEFAULT_DOWNLOAD_BASE_URL,
        github_token=os.getenv("HOLA_GITHUB_TOKEN") or os.getenv("GITHUB_TOKEN") or None,
        http_timeout_s=get_float("HOLA_HTTP_TIMEOUT", 30.0),
        http_retry=get_int("HOLA_HTTP_RETRY", 0),
        install_dir=os.getenv("HOLA_INSTALL_DIR") or None,
        path_marker=os.getenv("HOLA_PATH_MARKER") or DEFAULT_PATH_MARKER,
    )
