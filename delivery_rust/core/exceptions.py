"""
Centralized exception hierarchy for delivery-rust.

This module defines all custom exceptions raised while planning and
converging a build host, so callers can catch a single base class.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class DeliveryRustError(Exception):
    """Base exception for all delivery-rust errors."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(DeliveryRustError):
    """Configuration parsing or validation error."""

    pass


class UnsupportedPlatformError(DeliveryRustError):
    """Raised when the platform family is unsupported and the policy rejects it."""

    def __init__(self, platform_family: str):
        self.platform_family = platform_family
        super().__init__(f"Unsupported platform_family '{platform_family}'")


# ============================================================================
# Resource Exceptions
# ============================================================================


class ResourceError(DeliveryRustError):
    """Base exception for failures while converging a resource."""

    pass


class CommandFailedError(ResourceError):
    """Raised when an external command cannot be run or exits non-zero."""

    def __init__(self, command, returncode: int, output: str = ""):
        self.command = list(command)
        self.returncode = returncode
        self.output = output
        msg = f"Command {' '.join(self.command)!r} failed with exit code {returncode}"
        if output:
            msg += f": {output.strip()}"
        super().__init__(msg)


class FileResourceError(ResourceError):
    """Raised when a managed file cannot be written or its mode set."""

    pass


class EnvironmentUpdateError(ResourceError):
    """Raised when an environment variable cannot be updated."""

    pass


# ============================================================================
# Package Manager Exceptions
# ============================================================================


class PackageManagerError(DeliveryRustError):
    """Base exception for package manager errors."""

    pass


class PackageManagerNotFoundError(PackageManagerError):
    """No package manager backend is available for the platform family."""

    pass


class PackageInstallError(PackageManagerError, ResourceError):
    """Error occurred while installing a package."""

    def __init__(self, package_name: str, reason: str):
        self.package_name = package_name
        super().__init__(f"Failed to install package '{package_name}': {reason}")


# ============================================================================
# Recipe Exceptions
# ============================================================================


class RecipeError(DeliveryRustError):
    """Base exception for recipe registry errors."""

    pass


class RecipeNotFoundError(RecipeError):
    """Raised when an included recipe has no registered handler."""

    def __init__(self, recipe_name: str):
        self.recipe_name = recipe_name
        super().__init__(f"No recipe registered with name: {recipe_name}")


# ============================================================================
# Locking Exceptions
# ============================================================================


class ProvisioningLockTimeout(DeliveryRustError):
    """Raised when the provisioning run lock cannot be acquired within timeout."""

    pass
