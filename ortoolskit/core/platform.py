"""
Platform detection and artifact resolution for ortoolskit.

This module classifies the running operating system into one of the
platform families for which a prebuilt OR-Tools distribution exists, and
maps each family to the URL of its archive.

Supported families:
- Arch Linux and its derivatives (Manjaro, EndeavourOS)
- Debian, and Linux distributions that cannot be identified more precisely
- macOS on Apple silicon

Every other OS identity is classified as unsupported and carries the raw
OS name so that the failure can be reported before any network access.

Usage:
    from ortoolskit.core.platform import detect_platform, resolve_artifact_location

    descriptor = detect_platform()
    url = resolve_artifact_location(descriptor)
"""

import functools
import logging
import platform
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import distro

from ortoolskit.core.exceptions import UnsupportedPlatformError

logger = logging.getLogger(__name__)


ORTOOLS_VERSION = "9.14"
ORTOOLS_BUILD = "6206"

_RELEASE_URL = (
    f"https://github.com/google/or-tools/releases/download/v{ORTOOLS_VERSION}"
)

DEBIAN_12_BINARIES = (
    f"{_RELEASE_URL}/or-tools_amd64_debian-12_cpp_v{ORTOOLS_VERSION}.{ORTOOLS_BUILD}.tar.gz"
)
ARCH_BINARIES = (
    f"{_RELEASE_URL}/or-tools_amd64_archlinux_cpp_v{ORTOOLS_VERSION}.{ORTOOLS_BUILD}.tar.gz"
)
MACOS_ARM_BINARIES = (
    f"{_RELEASE_URL}/or-tools_arm64_macOS-15.5_cpp_v{ORTOOLS_VERSION}.{ORTOOLS_BUILD}.tar.gz"
)


class PlatformFamily(Enum):
    """Platform families with a prebuilt distribution (plus UNSUPPORTED)."""

    ARCH = "arch"
    DEBIAN = "debian"
    MACOS_ARM = "macos-arm64"
    UNSUPPORTED = "unsupported"


_ARTIFACT_LOCATIONS = {
    PlatformFamily.ARCH: ARCH_BINARIES,
    PlatformFamily.DEBIAN: DEBIAN_12_BINARIES,
    PlatformFamily.MACOS_ARM: MACOS_ARM_BINARIES,
}

# OS identity -> family. Anything missing here is unsupported.
_FAMILY_BY_OS = {
    "Arch": PlatformFamily.ARCH,
    "Manjaro": PlatformFamily.ARCH,
    "EndeavourOS": PlatformFamily.ARCH,
    "Debian": PlatformFamily.DEBIAN,
    "Linux": PlatformFamily.DEBIAN,
    "Macos": PlatformFamily.MACOS_ARM,
}

# Distributions that are recognized on their own. They are reported under
# their own name (and are therefore unsupported) instead of falling back to
# generic Linux.
_KNOWN_DISTRIBUTIONS = {
    "arch": "Arch",
    "manjaro": "Manjaro",
    "endeavouros": "EndeavourOS",
    "debian": "Debian",
    "ubuntu": "Ubuntu",
    "linuxmint": "Mint",
    "pop": "Pop",
    "raspbian": "Raspbian",
    "fedora": "Fedora",
    "centos": "CentOS",
    "rhel": "RedHatEnterprise",
    "rocky": "RockyLinux",
    "almalinux": "AlmaLinux",
    "amzn": "Amazon",
    "opensuse": "openSUSE",
    "opensuse-leap": "openSUSE",
    "opensuse-tumbleweed": "openSUSE",
    "sles": "SUSE",
    "gentoo": "Gentoo",
    "alpine": "Alpine",
    "void": "Void",
    "nixos": "NixOS",
    "mageia": "Mageia",
    "solus": "Solus",
    "garuda": "Garuda",
    "artix": "Artix",
}


@dataclass(frozen=True)
class PlatformDescriptor:
    """
    Classification of the running OS into a platform family.

    Attributes:
        family: Platform family the OS belongs to
        os_name: Raw OS identity the classification was made from
    """

    family: PlatformFamily
    os_name: str

    @property
    def is_supported(self) -> bool:
        return self.family is not PlatformFamily.UNSUPPORTED

    def __str__(self) -> str:
        return f"{self.family.value} ({self.os_name})"


def classify_os(os_name: str) -> PlatformDescriptor:
    """
    Classify an OS identity into a platform descriptor.

    Args:
        os_name: OS identity as returned by detect_os_identity()

    Returns:
        PlatformDescriptor; UNSUPPORTED when the OS has no prebuilt archive

    Example:
        >>> classify_os("Manjaro").family
        <PlatformFamily.ARCH: 'arch'>
    """
    family = _FAMILY_BY_OS.get(os_name, PlatformFamily.UNSUPPORTED)
    return PlatformDescriptor(family=family, os_name=os_name)


def detect_os_identity() -> str:
    """
    Detect the identity of the running operating system.

    Returns:
        OS name such as 'Arch', 'Debian', 'Linux', 'Macos', 'Windows'
    """
    system = platform.system()

    if system == "Darwin":
        return "Macos"
    if system == "Linux":
        return _detect_linux_identity()
    return system or "Unknown"


def _detect_linux_identity() -> str:
    """
    Detect the Linux distribution.

    Returns:
        Distribution name, or 'Linux' if it can't be identified
    """
    distribution = distro.id().lower()
    if not distribution:
        return "Linux"

    name = _KNOWN_DISTRIBUTIONS.get(distribution)
    if name is None:
        logger.debug(f"Unrecognized distribution '{distribution}', using generic Linux")
        return "Linux"
    return name


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformDescriptor:
    """
    Detect and classify the current platform.

    This function is cached - it only runs detection once per process.

    Returns:
        PlatformDescriptor for the running OS
    """
    descriptor = classify_os(detect_os_identity())
    logger.debug(f"Detected platform: {descriptor}")
    return descriptor


def lookup_artifact_location(descriptor: PlatformDescriptor) -> Optional[str]:
    """
    Look up the prebuilt archive URL for a descriptor.

    Returns:
        Archive URL, or None for unsupported platforms
    """
    return _ARTIFACT_LOCATIONS.get(descriptor.family)


def resolve_artifact_location(descriptor: PlatformDescriptor) -> str:
    """
    Resolve the prebuilt archive URL for a descriptor.

    Args:
        descriptor: Platform descriptor to resolve

    Returns:
        Archive URL

    Raises:
        UnsupportedPlatformError: If no archive exists for the platform
    """
    url = lookup_artifact_location(descriptor)
    if url is None:
        raise UnsupportedPlatformError(descriptor.os_name)
    return url


def get_supported_platforms() -> list[str]:
    """
    Get the OS identities that resolve to a prebuilt archive.

    Returns:
        List of OS names
    """
    return list(_FAMILY_BY_OS)


def clear_platform_cache():
    """
    Clear the platform detection cache.

    This forces the next call to detect_platform() to re-detect.
    """
    detect_platform.cache_clear()


__all__ = [
    "ORTOOLS_VERSION",
    "ARCH_BINARIES",
    "DEBIAN_12_BINARIES",
    "MACOS_ARM_BINARIES",
    "PlatformFamily",
    "PlatformDescriptor",
    "classify_os",
    "detect_os_identity",
    "detect_platform",
    "lookup_artifact_location",
    "resolve_artifact_location",
    "get_supported_platforms",
    "clear_platform_cache",
]
