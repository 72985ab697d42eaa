"""
Test Operations facade wiring and integration.

Validates that the Operations facade builds installers from its settings,
applies configuration policy and forwards results unchanged.
"""
from __future__ import annotations

from unittest.mock import patch

import pytest

from hola_installer.installer import InstallState
from hola_installer.operations import Operations, OpsConfig
from tests.helpers.archives import BINARY_CONTENT, publish


@pytest.fixture
def facade_kwargs(settings, http, linux, posix_ops, tmp_path):
    """Facade collaborators; the install directory comes from settings."""
    return dict(
        settings=settings.with_overrides(install_dir=str(tmp_path / "bin")),
        http=http,
        platform=linux,
        ops=posix_ops,
    )


class TestOperationsFacade:
    """Test Operations facade orchestration."""

    def test_facade_initialization(self, settings):
        """Test facade keeps its configuration and settings."""
        config = OpsConfig(modify_path=False)

        ops = Operations(config=config, settings=settings)

        assert ops.cfg is config
        assert ops.settings is settings

    def test_settings_loaded_from_env(self, monkeypatch):
        """Test that settings default to the environment."""
        monkeypatch.setenv("HOLA_REPO", "someone/else")

        ops = Operations(config=OpsConfig())

        assert ops.settings.repo == "someone/else"

    def test_resolve_returns_plan(self, facade_kwargs, server, tmp_path):
        publish(server)
        ops = Operations(config=OpsConfig(), **facade_kwargs)

        ctx = ops.resolve()

        assert ctx.state == InstallState.RELEASE_RESOLVED
        assert ctx.target.binary_path == tmp_path / "bin" / "tool"

    def test_install_runs_installer(self, facade_kwargs, server, tmp_path):
        publish(server)
        ops = Operations(config=OpsConfig(), **facade_kwargs)

        result = ops.install()

        assert result.target.binary_path == tmp_path / "bin" / "tool"
        assert result.target.binary_path.read_bytes() == BINARY_CONTENT

    def test_resolve_then_install_reuse_client(self, facade_kwargs, server):
        """Test that an injected HTTP client survives across calls."""
        publish(server)
        ops = Operations(config=OpsConfig(), **facade_kwargs)

        ops.resolve()
        result = ops.install()

        assert result.release.tag == "v1.2.3"

    @pytest.mark.parametrize("modify_path", [True, False])
    def test_install_respects_modify_path(self, facade_kwargs, modify_path):
        """Test that the PATH policy is forwarded to the installer."""
        ops = Operations(config=OpsConfig(modify_path=modify_path), **facade_kwargs)

        with patch("hola_installer.operations.facade.Installer.run") as mock_run:
            ops.install(tag="v9.9.9")

        mock_run.assert_called_once_with(tag="v9.9.9", modify_path=modify_path)
