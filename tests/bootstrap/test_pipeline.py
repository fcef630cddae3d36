"""
Tests for the detection phase and the step pipeline, including full runs
over an isolated home directory.
"""

from unittest.mock import patch

import pytest
import responses

from devenvkit.bootstrap.pipeline import Bootstrapper, default_steps, prepare_context
from devenvkit.bootstrap.steps.base import Step, StepResult, StepStatus
from devenvkit.config.settings import BootstrapConfig
from devenvkit.core.exceptions import SetupCancelledError
from devenvkit.core.platform import PlatformInfo
from devenvkit.core.prompts import ScriptedPrompt

FLAKE_URL = BootstrapConfig().config_url
FLAKE = b'{ description = "CMPUT 350 Development Environment"; }\n'
PROJECT = "cmput350-f25"

INSTALL_COMMANDS = {"apt", "dnf", "yum", "pacman", "brew", "nix-env", "sh", "chsh", "sudo"}


class _Fixed(Step):
    """Step returning a canned result."""

    def __init__(self, name, result):
        self.name = name
        self.title = f"{name}..."
        self.result = result
        self.ran = False

    def run(self, ctx):
        self.ran = True
        return self.result


class _Raising(Step):
    name = "boom"
    title = "Exploding..."

    def run(self, ctx):
        raise SetupCancelledError("Setup cancelled.")


def _prepare(runner, reporter, home, system_root, platform, answers=()):
    return prepare_context(
        BootstrapConfig(),
        ScriptedPrompt(answers),
        reporter,
        runner=runner,
        home=home,
        system_root=system_root,
        platform=platform,
    )


class TestDefaultSteps:
    """Tests for the step order."""

    def test_order(self):
        assert [step.name for step in default_steps()] == [
            "zsh",
            "default-shell",
            "nix",
            "flakes",
            "direnv",
            "shell-hooks",
            "project-dir",
            "fetch-config",
            "envrc",
            "direnv-allow",
            "smoke-test",
        ]


@patch("devenvkit.core.privilege._effective_uid", return_value=1000)
class TestPrepareContext:
    """Tests for prepare_context()."""

    def test_linux_with_cached_sudo(self, mock_uid, runner, reporter, output, home, system_root, linux):
        runner.add_tool("sudo")
        runner.add_tool("true")
        runner.add_tool("apt")

        ctx = _prepare(runner, reporter, home, system_root, linux)

        assert ctx.has_privilege
        assert ctx.package_manager.name == "apt"
        out = output.getvalue()
        assert "Detected OS: linux" in out
        assert "Sudo access confirmed" in out
        assert "Package manager: apt" in out
        assert "Zsh: not installed" in out

    def test_linux_without_sudo(self, mock_uid, runner, reporter, output, home, system_root, linux):
        ctx = _prepare(runner, reporter, home, system_root, linux)

        assert not ctx.has_privilege
        assert ctx.package_manager is None
        out = output.getvalue()
        assert "No sudo access. Some features will be limited:" in out
        assert "Nix will be installed in single-user mode" in out
        assert "Could not detect package manager" in out

    def test_macos_skips_package_manager(self, mock_uid, runner, reporter, output, home, system_root, macos):
        runner.add_tool("apt")

        ctx = _prepare(runner, reporter, home, system_root, macos)

        assert ctx.package_manager is None
        assert "Checking for sudo access" not in output.getvalue()

    def test_existing_installations(self, mock_uid, runner, reporter, output, home, system_root, linux):
        runner.add_tool("nix")
        runner.versions["nix"] = "nix (Nix) 2.18.1"

        _prepare(runner, reporter, home, system_root, linux)

        assert "Nix: nix (Nix) 2.18.1" in output.getvalue()

    def test_unknown_platform_warns(self, mock_uid, runner, reporter, output, home, system_root):
        platform = PlatformInfo("unknown", "x64", "1.0")
        _prepare(runner, reporter, home, system_root, platform)
        assert "Unsupported operating system" in output.getvalue()


class TestBootstrapper:
    """Tests for running steps."""

    def test_failed_step_does_not_stop_the_run(self, make_context, output):
        first = _Fixed("first", StepResult.failed("could not do it", ["try later"]))
        second = _Fixed("second", StepResult.satisfied("fine"))

        report = Bootstrapper(make_context(), [first, second]).run()

        assert second.ran
        assert report.failed == ["first"]
        assert report.get("second").status is StepStatus.SATISFIED
        out = output.getvalue()
        assert "Step 1: first..." in out
        assert "⚠ could not do it" in out
        assert "⚠ try later" in out
        assert "✓ fine" in out

    def test_exception_aborts(self, make_context):
        after = _Fixed("after", StepResult.satisfied("fine"))

        with pytest.raises(SetupCancelledError):
            Bootstrapper(make_context(), [_Raising(), after]).run()

        assert not after.ran


@patch("devenvkit.core.privilege._effective_uid", return_value=1000)
class TestFullRun:
    """Full pipeline runs against an isolated home and system root."""

    @pytest.fixture
    def provisioned(self, runner):
        """A machine that already has Zsh (as login shell), Nix and direnv."""
        for tool in ("zsh", "nix", "direnv"):
            runner.add_tool(tool)
        runner.env["SHELL"] = "/usr/bin/zsh"
        return runner

    @responses.activate
    def test_rerun_is_a_no_op(self, mock_uid, provisioned, reporter, home, system_root, linux):
        """Test a second run installs nothing and duplicates no lines."""
        responses.add(responses.GET, FLAKE_URL, body=FLAKE, status=200)

        ctx = _prepare(provisioned, reporter, home, system_root, linux, answers=["1"])
        first = Bootstrapper(ctx).run()

        assert first.ok
        project = home / PROJECT
        snapshot = {
            path: path.read_bytes()
            for path in [
                home / ".zshrc",
                home / ".bashrc",
                home / ".config" / "nix" / "nix.conf",
                project / "flake.nix",
                project / ".envrc",
            ]
        }

        provisioned.calls.clear()
        ctx = _prepare(provisioned, reporter, home, system_root, linux, answers=["1", "y", "n"])
        second = Bootstrapper(ctx).run()

        assert second.ok
        assert [name for name in second.changed if name != "direnv-allow"] == []
        assert not any(call[0] in INSTALL_COMMANDS for call in provisioned.calls)
        assert {path: path.read_bytes() for path in snapshot} == snapshot
        assert len(responses.calls) == 1

    def test_declined_reuse_creates_no_files(self, mock_uid, provisioned, reporter, home, system_root, linux):
        (home / PROJECT).mkdir()
        ctx = _prepare(provisioned, reporter, home, system_root, linux, answers=["1", "n"])

        with pytest.raises(SetupCancelledError):
            Bootstrapper(ctx).run()

        assert list((home / PROJECT).iterdir()) == []
