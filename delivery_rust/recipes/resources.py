"""
Declarative resource descriptors.

A resource describes a desired state of the host, not a command. Recipes
return lists of resources and the convergence engine decides whether each
one needs repairing. All descriptors are immutable.

Classes:
    FileResource: A file with exact content and mode
    ExecuteResource: A command that runs on every converge
    PackageResource: An OS package that must be installed
    EnvResource: An environment variable to create, modify or delete
    IncludeRecipe: Delegation to another named recipe
    LogResource: A message written to the log
"""

import logging
from dataclasses import dataclass, field
from typing import ClassVar, Optional, Tuple, Union


@dataclass(frozen=True)
class FileResource:
    """
    Ensure a file exists with exactly the given content.

    Attributes:
        path: Absolute file path
        content: Full file content
        mode: Permission bits, or None to leave mode unmanaged
    """

    resource_type: ClassVar[str] = "file"

    path: str
    content: str
    mode: Optional[int] = None

    @property
    def name(self) -> str:
        return self.path

    def describe(self) -> str:
        return f"{self.resource_type}[{self.name}]"


@dataclass(frozen=True)
class ExecuteResource:
    """
    Run a command unconditionally.

    Attributes:
        name: Human-readable resource name (e.g., 'reload ldconfig')
        command: argv list
    """

    resource_type: ClassVar[str] = "execute"

    name: str
    command: Tuple[str, ...]

    def __post_init__(self):
        if not self.command:
            raise ValueError("execute resource needs a command")
        # Accept lists for convenience; store as a tuple to stay hashable
        object.__setattr__(self, "command", tuple(self.command))

    def describe(self) -> str:
        return f"{self.resource_type}[{self.name}]"


@dataclass(frozen=True)
class PackageResource:
    """Ensure an OS package is installed."""

    resource_type: ClassVar[str] = "package"

    package_name: str

    @property
    def name(self) -> str:
        return self.package_name

    def describe(self) -> str:
        return f"{self.resource_type}[{self.name}]"


ENV_ACTIONS = ("create", "modify", "delete")


@dataclass(frozen=True)
class EnvResource:
    """
    Manage an environment variable.

    With ``action="modify"`` and a delimiter, ``value`` is appended as one
    element of the delimited list (e.g., a PATH entry) unless it is already
    present.

    Attributes:
        name: Human-readable resource name
        key_name: Variable name (e.g., 'PATH')
        value: Value to set or element to append
        delim: List delimiter (e.g., ';'), or None for scalar values
        action: 'create', 'modify' or 'delete'
    """

    resource_type: ClassVar[str] = "env"

    name: str
    key_name: str
    value: str = ""
    delim: Optional[str] = None
    action: str = "create"

    def __post_init__(self):
        if self.action not in ENV_ACTIONS:
            raise ValueError(
                f"Invalid env action: {self.action} (expected one of {ENV_ACTIONS})"
            )

    def describe(self) -> str:
        return f"{self.resource_type}[{self.name}]"


@dataclass(frozen=True)
class IncludeRecipe:
    """Delegate to another recipe by its qualified name (e.g., 'apt::default')."""

    resource_type: ClassVar[str] = "include_recipe"

    recipe_name: str

    @property
    def name(self) -> str:
        return self.recipe_name

    def describe(self) -> str:
        return f"{self.resource_type}[{self.name}]"


@dataclass(frozen=True)
class LogResource:
    """
    Write a message to the log.

    Attributes:
        name: Resource name shown in reports
        message: Message text
        level: logging level (default INFO)
    """

    resource_type: ClassVar[str] = "log"

    name: str
    message: str
    level: int = field(default=logging.INFO)

    def describe(self) -> str:
        return f"{self.resource_type}[{self.name}]"


Resource = Union[
    FileResource,
    ExecuteResource,
    PackageResource,
    EnvResource,
    IncludeRecipe,
    LogResource,
]


__all__ = [
    "FileResource",
    "ExecuteResource",
    "PackageResource",
    "EnvResource",
    "IncludeRecipe",
    "LogResource",
    "Resource",
]
