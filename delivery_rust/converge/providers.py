"""
Resource providers.

A provider knows how to test one resource type against the host and how
to repair it. The engine only calls ``apply`` when ``needs_update`` says
the host has drifted from the desired state.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from delivery_rust.converge.environment import EnvironmentStore
from delivery_rust.converge.packages import PackageBackend
from delivery_rust.converge.runner import CommandRunner
from delivery_rust.core.exceptions import (
    FileResourceError,
    PackageManagerNotFoundError,
)
from delivery_rust.core.filesystem import atomic_write, mode_matches, read_text_if_exists
from delivery_rust.recipes.resources import (
    EnvResource,
    ExecuteResource,
    FileResource,
    PackageResource,
)

logger = logging.getLogger(__name__)


class Provider(ABC):
    """Abstract base class for resource providers."""

    @abstractmethod
    def needs_update(self, resource) -> bool:
        """
        Check whether the host differs from the resource's desired state.

        Args:
            resource: Resource descriptor

        Returns:
            True if ``apply`` must run
        """
        pass

    @abstractmethod
    def apply(self, resource) -> None:
        """
        Bring the host to the resource's desired state.

        Args:
            resource: Resource descriptor

        Raises:
            ResourceError: If the change fails
        """
        pass


class FileProvider(Provider):
    """Manages whole-file content and mode."""

    def needs_update(self, resource: FileResource) -> bool:
        current = read_text_if_exists(resource.path)
        if current != resource.content:
            return True
        return not mode_matches(resource.path, resource.mode)

    def apply(self, resource: FileResource) -> None:
        try:
            atomic_write(resource.path, resource.content, mode=resource.mode)
        except OSError as e:
            raise FileResourceError(f"Failed to write {resource.path}: {e}") from e


class ExecuteProvider(Provider):
    """Runs commands; an execute resource is never up to date."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def needs_update(self, resource: ExecuteResource) -> bool:
        return True

    def apply(self, resource: ExecuteResource) -> None:
        result = self.runner.run(resource.command)
        if result.stdout:
            logger.debug(result.stdout.rstrip())


class PackageProvider(Provider):
    """Installs packages that are not already present."""

    def __init__(self, backend: Optional[PackageBackend]):
        self.backend = backend

    def _require_backend(self) -> PackageBackend:
        if self.backend is None:
            raise PackageManagerNotFoundError(
                "No package manager backend for this platform family"
            )
        return self.backend

    def needs_update(self, resource: PackageResource) -> bool:
        return not self._require_backend().is_installed(resource.package_name)

    def apply(self, resource: PackageResource) -> None:
        self._require_backend().install(resource.package_name)


class EnvProvider(Provider):
    """
    Manages environment variables.

    With a delimiter, ``modify`` treats the variable as a list and appends
    the value only when it is missing, so repeated runs do not duplicate
    entries. ``delete`` with a delimiter removes just that element.
    """

    def __init__(self, store: EnvironmentStore):
        self.store = store

    @staticmethod
    def _split(value: Optional[str], delim: str) -> List[str]:
        if not value:
            return []
        return value.split(delim)

    def _desired(self, resource: EnvResource) -> Optional[str]:
        """Compute the variable's desired value (None means unset)."""
        current = self.store.get(resource.key_name)

        if resource.action == "delete":
            if resource.delim and resource.value:
                parts = [
                    p
                    for p in self._split(current, resource.delim)
                    if p != resource.value
                ]
                return resource.delim.join(parts) if parts else None
            return None

        if resource.action == "modify" and resource.delim:
            if not current:
                return resource.value
            if resource.value in self._split(current, resource.delim):
                return current
            if current.endswith(resource.delim):
                current = current[: -len(resource.delim)]
            return current + resource.delim + resource.value

        return resource.value

    def needs_update(self, resource: EnvResource) -> bool:
        return self.store.get(resource.key_name) != self._desired(resource)

    def apply(self, resource: EnvResource) -> None:
        desired = self._desired(resource)
        if desired is None:
            self.store.delete(resource.key_name)
        else:
            self.store.set(resource.key_name, desired)
