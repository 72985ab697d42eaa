"""
Operations Facade - Application service layer.

Provides a clean interface between the CLI and the installer, centralizing
command orchestration and configuration policy while keeping CLI commands
thin and testable.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..host import PlatformTarget
from ..installer import InstallResult, Installer, Reporter, RunContext
from ..platforms import PlatformOps
from ..release_http import ReleaseHTTP
from ..settings import Settings


@dataclass(frozen=True)
class OpsConfig:
    """
    Configuration for Operations facade.

    Centralizes per-invocation policy so it is not scattered across commands.
    """
    modify_path: bool = True      # Persist install dir on PATH when missing


class Operations:
    """
    Application service facade for CLI operations.

    One method per CLI verb. Exceptions bubble up for central mapping in
    ``run_and_exit``. HTTP client, platform and platform operations are
    injectable so tests can run the full flow against fakes.
    """

    def __init__(self, config: OpsConfig, settings: Optional[Settings] = None, *,
                 http: Optional[ReleaseHTTP] = None,
                 platform: Optional[PlatformTarget] = None,
                 ops: Optional[PlatformOps] = None,
                 reporter: Optional[Reporter] = None):
        """
        Initialize Operations facade.

        Args:
            config: Invocation policy
            settings: Optional settings (if None, loaded from environment)
            http: Release HTTP client (if None, created from settings)
            platform: Platform override (if None, detected from the host)
            ops: Platform operations override
            reporter: Progress reporter
        """
        self.cfg = config
        if settings is None:
            from ..settings import create_settings_from_env
            settings = create_settings_from_env()
        self.settings = settings
        self._http = http
        self._platform = platform
        self._ops = ops
        self._reporter = reporter

    def _installer(self) -> Installer:
        return Installer(
            self.settings,
            http=self._http,
            platform=self._platform,
            ops=self._ops,
            reporter=self._reporter,
        )

    def resolve(self, *, tag: Optional[str] = None) -> RunContext:
        """
        Resolve what would be installed, without side effects.

        Args:
            tag: Pinned tag (None for latest)

        Returns:
            RunContext with platform, release and target populated
        """
        with self._installer() as installer:
            return installer.plan(tag=tag)

    def install(self, *, tag: Optional[str] = None) -> InstallResult:
        """
        Install or update the binary.

        Args:
            tag: Pinned tag (None for latest)

        Returns:
            InstallResult from the installer
        """
        with self._installer() as installer:
            return installer.run(tag=tag, modify_path=self.cfg.modify_path)
