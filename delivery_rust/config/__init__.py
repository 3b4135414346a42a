"""Configuration loading for delivery-rust."""

from delivery_rust.config.parser import (
    DEFAULT_CONFIG_FILE,
    OmnibusConfig,
    PrepConfig,
    apply_overrides,
    parse_config,
    parse_config_data,
)

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "OmnibusConfig",
    "PrepConfig",
    "apply_overrides",
    "parse_config",
    "parse_config_data",
]
