"""
Shared utilities for CLI commands.

Provides common functionality used across multiple CLI commands to
eliminate duplication and ensure consistent behavior.
"""

import logging
from pathlib import Path
from typing import Optional

from delivery_rust.config.parser import (
    DEFAULT_CONFIG_FILE,
    PrepConfig,
    apply_overrides,
    parse_config,
    parse_config_data,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration Management
# ============================================================================


def resolve_config_path(args) -> Optional[Path]:
    """
    Determine which configuration file to use.

    Args:
        args: Parsed arguments with config and project_root

    Returns:
        Explicit --config path, the default file in the project root if it
        exists, or None
    """
    if getattr(args, "config", None):
        return Path(args.config)

    project_root = Path(getattr(args, "project_root", None) or Path.cwd())
    default_config = project_root / DEFAULT_CONFIG_FILE
    if default_config.exists():
        return default_config

    return None


def load_run_config(args) -> PrepConfig:
    """
    Load configuration for a command and apply command-line overrides.

    Args:
        args: Parsed arguments (config, project_root, and optionally
            platform_family and ruby_version)

    Returns:
        PrepConfig for the run

    Raises:
        ConfigError: If an explicit --config file is missing or invalid
    """
    config_file = resolve_config_path(args)

    if config_file is None:
        logger.debug("No config file found, using defaults")
        config = parse_config_data({})
    else:
        logger.debug(f"Loading configuration from {config_file}")
        config = parse_config(config_file)

    return apply_overrides(
        config,
        platform_family=getattr(args, "platform_family", None),
        ruby_version=getattr(args, "ruby_version", None),
    )


# ============================================================================
# Output Formatting
# ============================================================================


def format_resource(resource) -> str:
    """
    Format a resource descriptor as a single plan line.

    Args:
        resource: Resource descriptor

    Returns:
        Line such as "package[git]" or "execute[reload ldconfig] (ldconfig)"
    """
    line = resource.describe()

    if resource.resource_type == "file":
        mode = f" mode {resource.mode:04o}" if resource.mode is not None else ""
        line += f"{mode} content {resource.content!r}"
    elif resource.resource_type == "execute":
        line += f" ({' '.join(resource.command)})"
    elif resource.resource_type == "env":
        line += f" {resource.action} {resource.key_name}"
        if resource.value:
            line += f" += {resource.value!r}" if resource.delim else f" = {resource.value!r}"
    elif resource.resource_type == "log":
        line += f" {resource.message!r}"

    return line
