"""Root pytest configuration for hola-installer tests."""
import pytest

from hola_installer.host import PlatformTarget
from hola_installer.platforms.posix import PosixPlatform
from hola_installer.release_http import ReleaseHTTP
from hola_installer.settings import Settings

from .fakes.fake_release_server import API_URL, DOWNLOAD_BASE_URL, FakeReleaseServer

ENV_VARS = [
    "ZSH_VERSION", "BASH_VERSION", "ZDOTDIR", "SHELL",
    "HOLA_REPO", "HOLA_BIN_NAME", "HOLA_API_URL", "HOLA_DOWNLOAD_BASE_URL",
    "HOLA_GITHUB_TOKEN", "GITHUB_TOKEN", "HOLA_HTTP_TIMEOUT", "HOLA_HTTP_RETRY",
    "HOLA_INSTALL_DIR", "HOLA_PATH_MARKER",
]


# Set up test environment variables
@pytest.fixture(autouse=True)
def test_env(monkeypatch):
    """Isolate every test from the developer's shell and PATH."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PATH", "/usr/bin:/bin")


# Standardized test fixtures
@pytest.fixture
def settings():
    """Standard test settings pointing at the fake release server."""
    return Settings(
        repo="org/tool",
        bin_name="tool",
        api_url=API_URL,
        download_base_url=DOWNLOAD_BASE_URL,
    )


@pytest.fixture
def server():
    """Fake release server with no assets published yet."""
    return FakeReleaseServer(repo="org/tool", tag="v1.2.3")


@pytest.fixture
def http(settings, server):
    """ReleaseHTTP wired to the fake server."""
    client = ReleaseHTTP(settings, transport=server.transport())
    yield client
    client.close()


@pytest.fixture
def linux():
    return PlatformTarget(os="linux", arch="amd64")


@pytest.fixture
def home(tmp_path):
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def posix_ops(home):
    """Unprivileged POSIX operations rooted at a temporary home."""
    return PosixPlatform(home=home, is_root=False)


@pytest.fixture
def temp_parent(tmp_path):
    """Parent directory for run workspaces, so leftovers are observable."""
    path = tmp_path / "tmp"
    path.mkdir()
    return path
