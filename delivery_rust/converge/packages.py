"""
OS package manager backends.

Each backend answers two questions for the package resource: is a package
installed, and how to install it. Backends are chosen by platform family.

Classes:
    PackageBackend: Abstract base class
    AptBackend: Debian family (dpkg-query / apt-get)
    YumBackend: RHEL family (rpm / yum)
    DnfBackend: Fedora (rpm / dnf)
"""

import logging
import os
from abc import ABC, abstractmethod
from typing import Optional

from delivery_rust.converge.runner import CommandRunner
from delivery_rust.core.exceptions import CommandFailedError, PackageInstallError
from delivery_rust.core.platform import PlatformFamily, parse_platform_family

logger = logging.getLogger(__name__)


class PackageBackend(ABC):
    """
    Abstract base class for OS package manager backends.

    Attributes:
        runner: CommandRunner used for all queries and installs
    """

    name = "abstract"

    def __init__(self, runner: Optional[CommandRunner] = None):
        self.runner = runner or CommandRunner()

    @abstractmethod
    def is_installed(self, package_name: str) -> bool:
        """
        Check whether a package is installed.

        Args:
            package_name: OS package name

        Returns:
            True if installed
        """
        pass

    @abstractmethod
    def install(self, package_name: str) -> None:
        """
        Install a package.

        Args:
            package_name: OS package name

        Raises:
            PackageInstallError: If the package manager fails
        """
        pass

    def _install(self, package_name: str, command, env=None) -> None:
        logger.info(f"Installing package {package_name} with {self.name}")
        try:
            self.runner.run(command, env=env)
        except CommandFailedError as e:
            raise PackageInstallError(package_name, str(e)) from e


class AptBackend(PackageBackend):
    """Debian family backend."""

    name = "apt"

    def is_installed(self, package_name: str) -> bool:
        result = self.runner.run(
            ["dpkg-query", "-W", "-f=${Status}", package_name], check=False
        )
        return result.returncode == 0 and "install ok installed" in result.stdout

    def install(self, package_name: str) -> None:
        env = dict(os.environ)
        env["DEBIAN_FRONTEND"] = "noninteractive"
        self._install(
            package_name, ["apt-get", "-q", "-y", "install", package_name], env=env
        )


class YumBackend(PackageBackend):
    """RHEL family backend."""

    name = "yum"

    def is_installed(self, package_name: str) -> bool:
        result = self.runner.run(["rpm", "-q", package_name], check=False)
        return result.returncode == 0

    def install(self, package_name: str) -> None:
        self._install(package_name, [self.name, "-y", "install", package_name])


class DnfBackend(YumBackend):
    """Fedora backend."""

    name = "dnf"


def package_backend_for(
    platform_family: str, runner: Optional[CommandRunner] = None
) -> Optional[PackageBackend]:
    """
    Get the package backend for a platform family.

    Args:
        platform_family: Platform family string
        runner: CommandRunner to hand to the backend

    Returns:
        PackageBackend instance, or None if the family has no backend
    """
    family = parse_platform_family(platform_family)

    if family == PlatformFamily.DEBIAN:
        return AptBackend(runner)
    elif family == PlatformFamily.RHEL:
        return YumBackend(runner)
    elif family == PlatformFamily.FEDORA:
        return DnfBackend(runner)
    return None
