"""
Platform detection for DevEnvKit.

This module classifies the current machine so the bootstrap steps can pick
the right install method for each tool.

Features:
- Operating system detection (macOS, Linux, WSL, unknown)
- CPU architecture detection (x64, ARM64, x86, ARM)
- Linux distribution detection (Ubuntu, Debian, Fedora, Arch, etc.)
- Detection caching (runs once per process)

Usage:
    from devenvkit.core.platform import detect_platform

    platform_info = detect_platform()
    if platform_info.is_linux_like:
        print("Using the system package manager")
"""

import functools
import platform
from dataclasses import dataclass
from pathlib import Path

import distro

PROC_VERSION = Path("/proc/version")

SUPPORTED_OS = ("macos", "linux", "wsl")


@dataclass
class PlatformInfo:
    """
    Platform information.

    Attributes:
        os: Operating system ('macos', 'linux', 'wsl', 'unknown')
        arch: CPU architecture ('x64', 'arm64', 'x86', 'arm')
        os_version: OS version string (e.g., '14.1', '5.15.0-56-generic')
        distribution: Linux distribution ('ubuntu', 'fedora', 'arch', etc.) or empty
    """

    os: str
    arch: str
    os_version: str
    distribution: str = ""

    @property
    def is_linux_like(self) -> bool:
        """True for Linux and WSL, where the system package manager is used."""
        return self.os in ("linux", "wsl")

    @property
    def is_supported(self) -> bool:
        """True when the platform gets platform-specific install behaviour."""
        return self.os in SUPPORTED_OS

    def __str__(self) -> str:
        parts = [f"{self.os}-{self.arch}"]
        if self.distribution:
            parts.append(f"({self.distribution})")
        parts.append(f"v{self.os_version}")
        return " ".join(parts)


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect current platform information.

    This function is cached - it only runs detection once per process.

    Returns:
        PlatformInfo instance with detected platform information

    Example:
        >>> platform_info = detect_platform()
        >>> print(f"Detected OS: {platform_info.os}")
        Detected OS: wsl
    """
    os_name = _detect_os()
    return PlatformInfo(
        os=os_name,
        arch=_detect_architecture(),
        os_version=_detect_os_version(),
        distribution=_detect_distribution() if os_name in ("linux", "wsl") else "",
    )


def _detect_os(proc_version: Path = PROC_VERSION) -> str:
    """
    Detect operating system.

    Args:
        proc_version: Kernel version file inspected for the WSL signature

    Returns:
        Normalized OS name: 'macos', 'linux', 'wsl' or 'unknown'
    """
    system = platform.system().lower()

    if system == "darwin":
        return "macos"
    elif system == "linux":
        if _is_wsl(proc_version):
            return "wsl"
        return "linux"
    else:
        return "unknown"


def _is_wsl(proc_version: Path = PROC_VERSION) -> bool:
    """Check the kernel version string for the Microsoft signature WSL kernels carry."""
    try:
        return "microsoft" in proc_version.read_text().lower()
    except OSError:
        return False


def _detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'x64', 'arm64', 'x86', 'arm'
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    elif machine.startswith("arm"):
        return "arm"
    else:
        return machine


def _detect_os_version() -> str:
    """
    Detect OS version.

    Returns:
        macOS product version, or the kernel release elsewhere
    """
    if platform.system().lower() == "darwin":
        version = platform.mac_ver()[0]
        return version if version else "unknown"
    return platform.release()


def _detect_distribution() -> str:
    """
    Detect Linux distribution.

    Returns:
        Distribution ID: 'ubuntu', 'fedora', 'arch', etc., or 'unknown'
    """
    return distro.id() or "unknown"


def clear_platform_cache():
    """
    Clear the platform detection cache.

    This forces the next call to detect_platform() to re-detect.
    """
    detect_platform.cache_clear()


__all__ = [
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
]
