"""
Core functionality for delivery-rust.

This package contains the foundational modules that other components depend on.
"""

from .platform import (
    PlatformFamily,
    UnsupportedPlatform,
    UnsupportedPolicy,
    parse_platform_family,
    detect_platform_family,
    clear_platform_cache,
)

from .locking import provisioning_lock

from .exceptions import (
    DeliveryRustError,
    ConfigError,
    UnsupportedPlatformError,
    ResourceError,
    CommandFailedError,
    FileResourceError,
    EnvironmentUpdateError,
    PackageManagerError,
    PackageManagerNotFoundError,
    PackageInstallError,
    RecipeError,
    RecipeNotFoundError,
    ProvisioningLockTimeout,
)

__all__ = [
    "PlatformFamily",
    "UnsupportedPlatform",
    "UnsupportedPolicy",
    "parse_platform_family",
    "detect_platform_family",
    "clear_platform_cache",
    "provisioning_lock",
    "DeliveryRustError",
    "ConfigError",
    "UnsupportedPlatformError",
    "ResourceError",
    "CommandFailedError",
    "FileResourceError",
    "EnvironmentUpdateError",
    "PackageManagerError",
    "PackageManagerNotFoundError",
    "PackageInstallError",
    "RecipeError",
    "RecipeNotFoundError",
    "ProvisioningLockTimeout",
]
