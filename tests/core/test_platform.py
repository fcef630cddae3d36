"""
Unit tests for the platform detection module.

Tests cover:
- PlatformInfo properties and string form
- OS detection (macOS, Linux, WSL, unknown) with mocking
- Architecture normalization
- Distribution detection through distro
- Cache behavior
"""

from unittest.mock import patch

from devenvkit.core.platform import (
    PlatformInfo,
    detect_platform,
    clear_platform_cache,
    _detect_os,
    _detect_architecture,
    _detect_distribution,
    _is_wsl,
)


class TestPlatformInfo:
    """Tests for PlatformInfo dataclass."""

    def test_linux_is_linux_like(self):
        """Test Linux uses the system package manager."""
        assert PlatformInfo("linux", "x64", "6.1").is_linux_like

    def test_wsl_is_linux_like(self):
        """Test WSL is treated like Linux."""
        assert PlatformInfo("wsl", "x64", "5.15").is_linux_like

    def test_macos_is_not_linux_like(self):
        """Test macOS is not Linux-like but is supported."""
        info = PlatformInfo("macos", "arm64", "14.1")
        assert not info.is_linux_like
        assert info.is_supported

    def test_unknown_is_not_supported(self):
        """Test unknown platforms get no platform-specific behaviour."""
        info = PlatformInfo("unknown", "x64", "1.0")
        assert not info.is_supported
        assert not info.is_linux_like

    def test_str_with_distribution(self):
        """Test string representation with distribution."""
        result = str(PlatformInfo("linux", "x64", "5.15", "ubuntu"))
        assert result == "linux-x64 (ubuntu) v5.15"

    def test_str_without_distribution(self):
        """Test string representation without distribution."""
        assert str(PlatformInfo("macos", "arm64", "14.1")) == "macos-arm64 v14.1"


class TestDetectOS:
    """Tests for OS detection."""

    @patch("platform.system", return_value="Darwin")
    def test_detect_macos(self, mock_system, tmp_path):
        """Test macOS detection."""
        assert _detect_os(tmp_path / "missing") == "macos"

    @patch("platform.system", return_value="Linux")
    def test_detect_linux(self, mock_system, tmp_path):
        """Test plain Linux detection."""
        proc_version = tmp_path / "version"
        proc_version.write_text("Linux version 6.1.0-13-amd64 (debian-kernel@lists.debian.org)")
        assert _detect_os(proc_version) == "linux"

    @patch("platform.system", return_value="Linux")
    def test_detect_wsl(self, mock_system, tmp_path):
        """Test WSL detection from the kernel version string."""
        proc_version = tmp_path / "version"
        proc_version.write_text("Linux version 5.15.90.1-microsoft-standard-WSL2")
        assert _detect_os(proc_version) == "wsl"

    @patch("platform.system", return_value="Linux")
    def test_detect_wsl_is_case_insensitive(self, mock_system, tmp_path):
        """Test WSL1 kernels that spell it 'Microsoft'."""
        proc_version = tmp_path / "version"
        proc_version.write_text("Linux version 4.4.0-19041-Microsoft")
        assert _detect_os(proc_version) == "wsl"

    @patch("platform.system", return_value="Linux")
    def test_missing_proc_version_is_linux(self, mock_system, tmp_path):
        """Test an unreadable /proc/version falls back to Linux."""
        assert _detect_os(tmp_path / "missing") == "linux"

    @patch("platform.system", return_value="Windows")
    def test_detect_unknown(self, mock_system, tmp_path):
        """Test anything else is unknown."""
        assert _detect_os(tmp_path / "missing") == "unknown"

    def test_is_wsl_missing_file(self, tmp_path):
        """Test _is_wsl tolerates a missing file."""
        assert _is_wsl(tmp_path / "nope") is False


class TestDetectArchitecture:
    """Tests for architecture detection."""

    @patch("platform.machine", return_value="x86_64")
    def test_x86_64(self, mock_machine):
        assert _detect_architecture() == "x64"

    @patch("platform.machine", return_value="AMD64")
    def test_amd64(self, mock_machine):
        assert _detect_architecture() == "x64"

    @patch("platform.machine", return_value="aarch64")
    def test_aarch64(self, mock_machine):
        assert _detect_architecture() == "arm64"

    @patch("platform.machine", return_value="arm64")
    def test_arm64(self, mock_machine):
        assert _detect_architecture() == "arm64"

    @patch("platform.machine", return_value="i686")
    def test_i686(self, mock_machine):
        assert _detect_architecture() == "x86"

    @patch("platform.machine", return_value="armv7l")
    def test_armv7(self, mock_machine):
        assert _detect_architecture() == "arm"

    @patch("platform.machine", return_value="riscv64")
    def test_unknown_passthrough(self, mock_machine):
        """Test unknown machines are reported as-is."""
        assert _detect_architecture() == "riscv64"


class TestDetectDistribution:
    """Tests for Linux distribution detection."""

    @patch("distro.id", return_value="fedora")
    def test_distribution_from_distro(self, mock_id):
        assert _detect_distribution() == "fedora"

    @patch("distro.id", return_value="")
    def test_distribution_unknown(self, mock_id):
        assert _detect_distribution() == "unknown"


class TestDetectPlatform:
    """Tests for the cached detect_platform()."""

    @patch("devenvkit.core.platform._detect_distribution", return_value="arch")
    @patch("devenvkit.core.platform._detect_os_version", return_value="6.6.1")
    @patch("devenvkit.core.platform._detect_architecture", return_value="x64")
    @patch("devenvkit.core.platform._detect_os", return_value="linux")
    def test_detect_platform_linux(self, *mocks):
        """Test detect_platform assembles the parts."""
        info = detect_platform()
        assert info == PlatformInfo("linux", "x64", "6.6.1", "arch")

    @patch("devenvkit.core.platform._detect_distribution")
    @patch("devenvkit.core.platform._detect_os_version", return_value="14.1")
    @patch("devenvkit.core.platform._detect_architecture", return_value="arm64")
    @patch("devenvkit.core.platform._detect_os", return_value="macos")
    def test_no_distribution_on_macos(self, mock_os, mock_arch, mock_ver, mock_distro):
        """Test the distribution is only looked up on Linux-like systems."""
        info = detect_platform()
        assert info.distribution == ""
        mock_distro.assert_not_called()

    @patch("devenvkit.core.platform._detect_os", return_value="linux")
    def test_detection_is_cached(self, mock_os):
        """Test detection runs once until the cache is cleared."""
        first = detect_platform()
        second = detect_platform()
        assert first is second
        assert mock_os.call_count == 1

        clear_platform_cache()
        detect_platform()
        assert mock_os.call_count == 2
