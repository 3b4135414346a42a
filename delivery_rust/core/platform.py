"""
Platform family model and detection for delivery-rust.

A platform family is the coarse OS classification (RHEL-like, Debian-like,
Windows, macOS) used to select which preparation steps a build host needs.

Features:
- Closed enumeration of the platform families with a preparation branch
- Explicit ``UnsupportedPlatform`` variant for everything else
- Host detection from ``platform.system()`` and the ``distro`` package
- Cached detection

Usage:
    from delivery_rust.core.platform import detect_platform_family, parse_platform_family

    family = parse_platform_family(detect_platform_family())
    if isinstance(family, UnsupportedPlatform):
        print(f"No preparation steps for {family.value}")
"""

import functools
import logging
import platform
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union

import distro

logger = logging.getLogger(__name__)


class PlatformFamily(str, Enum):
    """Platform families that have a preparation branch."""

    RHEL = "rhel"
    FEDORA = "fedora"
    DEBIAN = "debian"
    WINDOWS = "windows"
    MAC_OS_X = "mac_os_x"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class UnsupportedPlatform:
    """
    A platform family with no preparation branch.

    Attributes:
        value: The literal platform family string as supplied
    """

    value: str

    def __str__(self) -> str:
        return self.value


class UnsupportedPolicy(str, Enum):
    """What the caller wants done with an unsupported platform family."""

    LOG = "log"
    WARN = "warn"
    REJECT = "reject"


PlatformFamilyVariant = Union[PlatformFamily, UnsupportedPlatform]


def parse_platform_family(value: str) -> PlatformFamilyVariant:
    """
    Parse a platform family string into the closed variant.

    Matching is exact, the same way node attributes are compared.

    Args:
        value: Platform family string (e.g., 'rhel', 'debian')

    Returns:
        PlatformFamily member, or UnsupportedPlatform wrapping the literal value

    Example:
        >>> parse_platform_family("fedora")
        <PlatformFamily.FEDORA: 'fedora'>
        >>> parse_platform_family("freebsd")
        UnsupportedPlatform(value='freebsd')
    """
    try:
        return PlatformFamily(value)
    except ValueError:
        return UnsupportedPlatform(value)


# Distribution IDs as reported by distro, mapped the way Ohai assigns platform_family.
_LINUX_FAMILIES: Dict[str, str] = {
    "debian": "debian",
    "ubuntu": "debian",
    "linuxmint": "debian",
    "raspbian": "debian",
    "rhel": "rhel",
    "centos": "rhel",
    "rocky": "rhel",
    "almalinux": "rhel",
    "ol": "rhel",
    "oracle": "rhel",
    "scientific": "rhel",
    "fedora": "fedora",
    "amzn": "amazon",
    "arch": "arch",
    "sles": "suse",
    "opensuse": "suse",
    "opensuse-leap": "suse",
    "opensuse-tumbleweed": "suse",
    "suse": "suse",
    "gentoo": "gentoo",
    "alpine": "alpine",
}


@functools.lru_cache(maxsize=1)
def detect_platform_family() -> str:
    """
    Detect the platform family of the running host.

    This function is cached - it only runs detection once per process.

    Returns:
        Platform family string (e.g., 'debian', 'rhel', 'windows', 'mac_os_x')

    Example:
        >>> detect_platform_family()
        'debian'
    """
    system = platform.system().lower()

    if system == "windows":
        return "windows"
    elif system == "darwin":
        return "mac_os_x"
    elif system == "linux":
        return _detect_linux_family()
    else:
        return system


def _detect_linux_family() -> str:
    """
    Map the Linux distribution to a platform family.

    The distribution ID wins; ``ID_LIKE`` entries are tried in order for
    derivatives that are not listed explicitly.

    Returns:
        Platform family string, or the raw ID (or 'linux') when unknown
    """
    distro_id = distro.id().lower()
    if distro_id in _LINUX_FAMILIES:
        return _LINUX_FAMILIES[distro_id]

    for like in distro.like().lower().split():
        if like in _LINUX_FAMILIES:
            return _LINUX_FAMILIES[like]

    if not distro_id:
        logger.debug("Linux distribution could not be identified")
    return distro_id or "linux"


def clear_platform_cache():
    """
    Clear the platform detection cache.

    This forces the next call to detect_platform_family() to re-detect.
    """
    detect_platform_family.cache_clear()


__all__ = [
    "PlatformFamily",
    "UnsupportedPlatform",
    "UnsupportedPolicy",
    "PlatformFamilyVariant",
    "parse_platform_family",
    "detect_platform_family",
    "clear_platform_cache",
]
