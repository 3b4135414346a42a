"""YAML configuration parser for delivery-rust.

This module turns a ``delivery_rust.yaml`` node-attribute file into the
explicit ``PrepConfig`` value that the preparation recipe consumes.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from delivery_rust.core.exceptions import ConfigError
from delivery_rust.core.platform import UnsupportedPolicy, detect_platform_family

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "delivery_rust.yaml"
DEFAULT_LD_SO_CONF_PATH = "/etc/ld.so.conf.d/rust-x86_64.conf"
DEFAULT_LIBRARY_DIR = "/usr/local/lib"
DEFAULT_RUBIES_ROOT = "C:/rubies"


@dataclass
class OmnibusConfig:
    """Omnibus attributes used by the preparation recipe."""

    ruby_version: Optional[str] = None


@dataclass
class PrepConfig:
    """Complete configuration for one preparation run."""

    platform_family: str
    omnibus: OmnibusConfig = field(default_factory=OmnibusConfig)
    ld_so_conf_path: str = DEFAULT_LD_SO_CONF_PATH
    library_dir: str = DEFAULT_LIBRARY_DIR
    rubies_root: str = DEFAULT_RUBIES_ROOT
    unsupported_policy: UnsupportedPolicy = UnsupportedPolicy.LOG
    strict_includes: bool = True
    # Included recipe name -> commands (argv lists) run in order
    recipes: Dict[str, List[List[str]]] = field(default_factory=dict)
    lock_file: Optional[str] = None


def parse_config(config_path: Path) -> PrepConfig:
    """
    Parse delivery_rust.yaml configuration file.

    Args:
        config_path: Path to delivery_rust.yaml

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigError: If configuration is invalid
    """
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}") from e

    if data is None:
        data = {}

    return parse_config_data(data)


def parse_config_data(data: dict) -> PrepConfig:
    """
    Parse and validate configuration data.

    When ``platform_family`` is absent it is detected from the running host.

    Args:
        data: Mapping loaded from YAML

    Returns:
        PrepConfig instance

    Raises:
        ConfigError: If a field has the wrong type or an unknown value
    """
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")

    platform_family = data.get("platform_family")
    if platform_family is None:
        platform_family = detect_platform_family()
        logger.debug(f"Detected platform family: {platform_family}")
    elif not isinstance(platform_family, str) or not platform_family:
        raise ConfigError("platform_family must be a non-empty string")

    return PrepConfig(
        platform_family=platform_family,
        omnibus=_parse_omnibus(data.get("omnibus", {})),
        ld_so_conf_path=_parse_str(data, "ld_so_conf_path", DEFAULT_LD_SO_CONF_PATH),
        library_dir=_parse_str(data, "library_dir", DEFAULT_LIBRARY_DIR),
        rubies_root=_parse_str(data, "rubies_root", DEFAULT_RUBIES_ROOT),
        unsupported_policy=_parse_policy(data.get("unsupported_policy", "log")),
        strict_includes=_parse_bool(data, "strict_includes", True),
        recipes=_parse_recipes(data.get("recipes", {})),
        lock_file=_parse_optional_str(data, "lock_file"),
    )


def apply_overrides(
    config: PrepConfig,
    platform_family: Optional[str] = None,
    ruby_version: Optional[str] = None,
) -> PrepConfig:
    """
    Apply command-line overrides to a parsed configuration.

    Args:
        config: Configuration to update in place
        platform_family: Overrides platform_family when given
        ruby_version: Overrides omnibus.ruby_version when given

    Returns:
        The updated configuration
    """
    if platform_family:
        config.platform_family = platform_family
    if ruby_version:
        config.omnibus.ruby_version = ruby_version
    return config


def _parse_omnibus(data) -> OmnibusConfig:
    """Parse the omnibus attribute section."""
    if data is None:
        return OmnibusConfig()
    if not isinstance(data, dict):
        raise ConfigError("omnibus must be a mapping")

    ruby_version = data.get("ruby_version")
    if ruby_version is not None and not isinstance(ruby_version, str):
        raise ConfigError("omnibus.ruby_version must be a string")

    return OmnibusConfig(ruby_version=ruby_version)


def _parse_str(data: dict, key: str, default: str) -> str:
    value = data.get(key, default)
    if not isinstance(value, str) or not value:
        raise ConfigError(f"{key} must be a non-empty string")
    return value


def _parse_optional_str(data: dict, key: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and (not isinstance(value, str) or not value):
        raise ConfigError(f"{key} must be a non-empty string")
    return value


def _parse_bool(data: dict, key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be true or false")
    return value


def _parse_policy(value) -> UnsupportedPolicy:
    """Parse the unsupported platform policy."""
    try:
        return UnsupportedPolicy(value)
    except ValueError:
        valid = [p.value for p in UnsupportedPolicy]
        raise ConfigError(
            f"Invalid unsupported_policy: {value} (expected one of {valid})"
        )


def _parse_recipes(data) -> Dict[str, List[List[str]]]:
    """
    Parse included recipe command definitions.

    Each recipe maps to a list of commands; a command is either an argv
    list or a single string, which is split on whitespace.
    """
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("recipes must be a mapping of recipe name to commands")

    recipes = {}
    for name, commands in data.items():
        if not isinstance(commands, list):
            raise ConfigError(f"recipes.{name} must be a list of commands")

        parsed = []
        for command in commands:
            if isinstance(command, str):
                command = command.split()
            if (
                not isinstance(command, list)
                or not command
                or not all(isinstance(part, str) for part in command)
            ):
                raise ConfigError(
                    f"recipes.{name} commands must be strings or lists of strings"
                )
            parsed.append(command)

        recipes[str(name)] = parsed

    return recipes
