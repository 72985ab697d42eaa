"""
Installer run orchestration.

One run walks a fixed, linear sequence of states:

    START -> PLATFORM_RESOLVED -> RELEASE_RESOLVED -> DOWNLOADED
          -> CHECKSUM_VERIFIED -> EXTRACTED -> INSTALLED
          -> PATH_RECONCILED -> DONE

Any fatal error moves the run to FAILED after the temporary workspace has
been removed. PATH reconciliation problems never fail a run; they are
recorded as a warning and the run still ends in DONE.

All values produced along the way live on an explicit ``RunContext`` that is
passed from step to step; nothing is kept in module-level state.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from .checksum import VerifiedArtifact, verify_artifact
from .errors import ChecksumManifestFetchError, InstallerError, PathReconciliationWarning
from .host import PlatformTarget, resolve_platform
from .install import InstallationTarget, InstallReport, install_binary, installation_target
from .path_config import reconcile_path_configuration
from .platforms import PathOutcome, PlatformOps, platform_ops_for
from .release import CHECKSUMS_FILENAME, DownloadedArtifact, ReleaseDescriptor, resolve_latest_release
from .release_http import ReleaseHTTP
from .settings import Settings
from .workspace import Workspace, run_workspace

logger = logging.getLogger(__name__)

# (level, message); level is "info" or "warn"
Reporter = Callable[[str, str], None]

__all__ = ["InstallState", "RunContext", "InstallResult", "Installer", "Reporter"]


class InstallState(str, Enum):
    START = "start"
    PLATFORM_RESOLVED = "platform_resolved"
    RELEASE_RESOLVED = "release_resolved"
    DOWNLOADED = "downloaded"
    CHECKSUM_VERIFIED = "checksum_verified"
    EXTRACTED = "extracted"
    INSTALLED = "installed"
    PATH_RECONCILED = "path_reconciled"
    DONE = "done"
    FAILED = "failed"


@dataclass
class RunContext:
    """Values accumulated by one run, in the order the steps produce them."""
    state: InstallState = InstallState.START
    platform: Optional[PlatformTarget] = None
    ops: Optional[PlatformOps] = None
    release: Optional[ReleaseDescriptor] = None
    target: Optional[InstallationTarget] = None
    workspace: Optional[Workspace] = None
    artifact: Optional[DownloadedArtifact] = None
    verified: Optional[VerifiedArtifact] = None
    extracted: Optional[Path] = None
    install: Optional[InstallReport] = None
    path: Optional[PathOutcome] = None
    warnings: List[str] = field(default_factory=list)

    def advance(self, state: InstallState) -> None:
        logger.debug(f"{self.state.value} -> {state.value}")
        self.state = state


@dataclass(frozen=True)
class InstallResult:
    """Summary of a successful run."""
    platform: PlatformTarget
    release: ReleaseDescriptor
    target: InstallationTarget
    sha256: str
    replaced_previous: bool
    path: Optional[PathOutcome]
    warnings: List[str]


def _log_reporter(level: str, message: str) -> None:
    if level == "warn":
        logger.warning(message)
    else:
        logger.info(message)


class Installer:
    """
    Verified-artifact installer.

    Dependencies are injectable for testing:
    - ``http``: release HTTP client (a MockTransport-backed one in tests)
    - ``platform``: resolved platform, skipping host detection
    - ``ops``: platform operations, e.g. a PosixPlatform with a fake home
    """

    def __init__(self, settings: Settings, *,
                 http: Optional[ReleaseHTTP] = None,
                 platform: Optional[PlatformTarget] = None,
                 ops: Optional[PlatformOps] = None,
                 reporter: Optional[Reporter] = None,
                 temp_parent: Optional[Path] = None):
        self.settings = settings
        self._owns_http = http is None
        self.http = http if http is not None else ReleaseHTTP(settings)
        self._platform = platform
        self._ops = ops
        self.report = reporter or _log_reporter
        self.temp_parent = temp_parent

    # Steps

    def resolve_platform(self, ctx: RunContext) -> PlatformTarget:
        ctx.platform = self._platform if self._platform is not None else resolve_platform()
        ctx.ops = self._ops if self._ops is not None else platform_ops_for(ctx.platform)
        ctx.advance(InstallState.PLATFORM_RESOLVED)
        return ctx.platform

    def resolve_release(self, ctx: RunContext, tag: Optional[str] = None) -> ReleaseDescriptor:
        if tag is None:
            self.report("info", "Fetching the latest release tag from GitHub API...")
        ctx.release = resolve_latest_release(self.http, self.settings, ctx.platform, tag=tag)
        self.report("info", f"Latest tag found: {ctx.release.tag}" if tag is None else f"Using tag: {ctx.release.tag}")
        ctx.advance(InstallState.RELEASE_RESOLVED)
        return ctx.release

    def download(self, ctx: RunContext) -> DownloadedArtifact:
        self.report("info", f"Downloading {self.settings.bin_name} from: {ctx.release.download_url}")
        dest = ctx.workspace.file(ctx.release.archive_name)
        size = self.http.download(ctx.release.download_url, dest)
        ctx.artifact = DownloadedArtifact(path=dest, size=size)
        ctx.advance(InstallState.DOWNLOADED)
        return ctx.artifact

    def verify(self, ctx: RunContext) -> VerifiedArtifact:
        self.report("info", "Verifying checksum...")
        manifest_path = ctx.workspace.file(CHECKSUMS_FILENAME)
        self.http.download(ctx.release.checksum_url, manifest_path, error_cls=ChecksumManifestFetchError)
        manifest_text = manifest_path.read_text(encoding="utf-8", errors="replace")
        ctx.verified = verify_artifact(ctx.artifact.path, manifest_text, ctx.release.archive_name)
        self.report("info", "Checksum verified successfully.")
        ctx.advance(InstallState.CHECKSUM_VERIFIED)
        return ctx.verified

    def extract(self, ctx: RunContext) -> Path:
        self.report("info", "Extracting binary...")
        binary_filename = ctx.ops.binary_filename(self.settings.bin_name)
        ctx.extracted = ctx.ops.extract(ctx.verified.path, ctx.workspace.extract_dir, binary_filename)
        ctx.advance(InstallState.EXTRACTED)
        return ctx.extracted

    def install(self, ctx: RunContext) -> InstallReport:
        self.report("info", f"Moving binary to {ctx.target.binary_path}...")
        ctx.install = install_binary(ctx.extracted, ctx.target, ctx.ops)
        for warning in ctx.install.warnings:
            self.report("warn", warning)
        ctx.warnings.extend(ctx.install.warnings)
        ctx.advance(InstallState.INSTALLED)
        return ctx.install

    def reconcile_path(self, ctx: RunContext, modify: bool = True) -> Optional[PathOutcome]:
        install_dir = ctx.target.install_dir
        self.report("info", f"Checking if '{install_dir}' is in PATH...")
        try:
            ctx.path = reconcile_path_configuration(
                ctx.ops, install_dir, self.settings.path_marker, modify=modify,
            )
        except PathReconciliationWarning as e:
            self.report("warn", str(e))
            ctx.warnings.append(str(e))
            ctx.path = None
        ctx.advance(InstallState.PATH_RECONCILED)
        return ctx.path

    # Runs

    def plan(self, tag: Optional[str] = None, install_dir: Optional[Path] = None) -> RunContext:
        """
        Resolve platform, release and install target without downloading.

        Returns:
            RunContext in the RELEASE_RESOLVED state
        """
        if install_dir is None and self.settings.install_dir:
            install_dir = Path(self.settings.install_dir)

        ctx = RunContext()
        try:
            self.resolve_platform(ctx)
            self.resolve_release(ctx, tag=tag)
        except InstallerError:
            ctx.advance(InstallState.FAILED)
            raise
        ctx.target = installation_target(ctx.ops, self.settings.bin_name, install_dir)
        return ctx

    def run(self, tag: Optional[str] = None, install_dir: Optional[Path] = None,
            modify_path: bool = True) -> InstallResult:
        """
        Perform a full installation.

        Args:
            tag: Pin a release tag instead of querying the latest
            install_dir: Override the install directory
            modify_path: Persist the install dir on PATH when missing

        Returns:
            InstallResult summarising the run

        Raises:
            InstallerError: Any fatal step failure (workspace already removed)
        """
        ctx = self.plan(tag=tag, install_dir=install_dir)
        self.report("info", f"Installing/Updating {self.settings.bin_name} for {ctx.platform}...")
        self.report("info", f"Target: {ctx.target.binary_path}")

        try:
            with run_workspace(self.temp_parent) as workspace:
                ctx.workspace = workspace
                self.download(ctx)
                self.verify(ctx)
                self.extract(ctx)
                self.install(ctx)
        except InstallerError as e:
            logger.debug(f"Run failed in state {ctx.state.value}: {e}")
            ctx.advance(InstallState.FAILED)
            raise
        finally:
            ctx.workspace = None

        self.reconcile_path(ctx, modify=modify_path)
        ctx.advance(InstallState.DONE)

        return InstallResult(
            platform=ctx.platform,
            release=ctx.release,
            target=ctx.target,
            sha256=ctx.verified.actual_sha256,
            replaced_previous=ctx.install.replaced_previous,
            path=ctx.path,
            warnings=list(ctx.warnings),
        )

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
