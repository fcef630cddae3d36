"""
Pytest configuration and shared fixtures for DevEnvKit tests.
"""

import io
from pathlib import Path

import pytest

from devenvkit.bootstrap.context import BootstrapContext
from devenvkit.config.settings import BootstrapConfig
from devenvkit.core.console import Reporter, create_console
from devenvkit.core.platform import PlatformInfo, clear_platform_cache
from devenvkit.core.privilege import NO_PRIVILEGE, Privilege
from devenvkit.core.prompts import ScriptedPrompt
from tests.mocks.runner import FakeRunner


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _fresh_platform_cache():
    """Platform detection is cached per process; reset it around each test."""
    clear_platform_cache()
    yield
    clear_platform_cache()


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """Isolated home directory."""
    fake_home = tmp_path / "home"
    fake_home.mkdir()
    return fake_home


@pytest.fixture
def system_root(tmp_path: Path) -> Path:
    """Isolated system root with an empty /etc."""
    root = tmp_path / "root"
    (root / "etc").mkdir(parents=True)
    return root


@pytest.fixture
def runner() -> FakeRunner:
    """Command runner double with no tools installed."""
    return FakeRunner()


@pytest.fixture
def output() -> io.StringIO:
    """Buffer receiving everything the reporter prints."""
    return io.StringIO()


@pytest.fixture
def reporter(output: io.StringIO) -> Reporter:
    """Reporter writing plain text into the output buffer."""
    return Reporter(create_console(no_color=True, file=output, width=200))


@pytest.fixture
def linux() -> PlatformInfo:
    return PlatformInfo("linux", "x64", "6.1.0", "ubuntu")


@pytest.fixture
def macos() -> PlatformInfo:
    return PlatformInfo("macos", "arm64", "14.1")


@pytest.fixture
def sudo() -> Privilege:
    return Privilege(available=True, method="sudo")


@pytest.fixture
def make_context(home, system_root, runner, reporter, linux):
    """Factory building a BootstrapContext over the isolated fixtures."""

    def _make(
        answers=(),
        platform=None,
        privilege=NO_PRIVILEGE,
        package_manager=None,
        config=None,
    ) -> BootstrapContext:
        return BootstrapContext(
            config=config or BootstrapConfig(),
            platform=platform or linux,
            runner=runner,
            prompts=ScriptedPrompt(answers),
            reporter=reporter,
            home=home,
            system_root=system_root,
            privilege=privilege,
            package_manager=package_manager,
        )

    return _make
