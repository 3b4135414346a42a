"""Convergence engine and the providers it drives."""

from delivery_rust.converge.engine import ConvergenceEngine
from delivery_rust.converge.environment import (
    EnvironmentStore,
    ProcessEnvironment,
    WindowsMachineEnvironment,
    default_environment_store,
)
from delivery_rust.converge.packages import (
    AptBackend,
    DnfBackend,
    PackageBackend,
    YumBackend,
    package_backend_for,
)
from delivery_rust.converge.report import (
    SKIPPED,
    UP_TO_DATE,
    UPDATED,
    WOULD_UPDATE,
    ResourceResult,
    RunReport,
)
from delivery_rust.converge.runner import CommandRunner

__all__ = [
    "ConvergenceEngine",
    "EnvironmentStore",
    "ProcessEnvironment",
    "WindowsMachineEnvironment",
    "default_environment_store",
    "AptBackend",
    "DnfBackend",
    "PackageBackend",
    "YumBackend",
    "package_backend_for",
    "SKIPPED",
    "UP_TO_DATE",
    "UPDATED",
    "WOULD_UPDATE",
    "ResourceResult",
    "RunReport",
    "CommandRunner",
]
