"""
Environment variable stores for the env resource.

A store reads and writes named variables. The process store wraps a
mapping such as ``os.environ``; on Windows the machine store persists
variables in the registry the way system environment settings do, and
mirrors each change into the current process.
"""

import logging
import os
from abc import ABC, abstractmethod
from typing import MutableMapping, Optional

from delivery_rust.core.exceptions import EnvironmentUpdateError

logger = logging.getLogger(__name__)

MACHINE_ENVIRONMENT_KEY = r"SYSTEM\CurrentControlSet\Control\Session Manager\Environment"


class EnvironmentStore(ABC):
    """Abstract interface for reading and writing environment variables."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the variable's value, or None when unset."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Set the variable."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the variable if present."""
        pass


class ProcessEnvironment(EnvironmentStore):
    """Environment backed by a mutable mapping (default: ``os.environ``)."""

    def __init__(self, environ: Optional[MutableMapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ

    def get(self, key: str) -> Optional[str]:
        return self.environ.get(key)

    def set(self, key: str, value: str) -> None:
        self.environ[key] = value

    def delete(self, key: str) -> None:
        self.environ.pop(key, None)


class WindowsMachineEnvironment(EnvironmentStore):
    """
    Machine-wide environment stored in the Windows registry.

    Changes are also applied to ``os.environ`` so later steps in the same
    run see them.
    """

    def get(self, key: str) -> Optional[str]:
        import winreg

        try:
            with winreg.OpenKey(
                winreg.HKEY_LOCAL_MACHINE, MACHINE_ENVIRONMENT_KEY
            ) as handle:
                value, _ = winreg.QueryValueEx(handle, key)
                return value
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        import winreg

        try:
            with winreg.OpenKey(
                winreg.HKEY_LOCAL_MACHINE,
                MACHINE_ENVIRONMENT_KEY,
                0,
                winreg.KEY_SET_VALUE,
            ) as handle:
                winreg.SetValueEx(handle, key, 0, winreg.REG_EXPAND_SZ, value)
        except OSError as e:
            raise EnvironmentUpdateError(f"Failed to set {key}: {e}") from e

        os.environ[key] = value

    def delete(self, key: str) -> None:
        import winreg

        try:
            with winreg.OpenKey(
                winreg.HKEY_LOCAL_MACHINE,
                MACHINE_ENVIRONMENT_KEY,
                0,
                winreg.KEY_SET_VALUE,
            ) as handle:
                winreg.DeleteValue(handle, key)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise EnvironmentUpdateError(f"Failed to delete {key}: {e}") from e

        os.environ.pop(key, None)


def default_environment_store() -> EnvironmentStore:
    """
    Get the environment store appropriate for the running host.

    Returns:
        WindowsMachineEnvironment on Windows, ProcessEnvironment elsewhere
    """
    if os.name == "nt":
        return WindowsMachineEnvironment()
    return ProcessEnvironment()
