"""
Build host preparation recipe.

Prepares a host for installing a Rust toolchain. The recipe is a pure
function of ``PrepConfig``: it returns the ordered resources for the
host's platform family and never touches the host itself.

Usage:
    from delivery_rust.recipes.prep_builder import build_prep_plan

    resources = build_prep_plan(config)
    report = ConvergenceEngine(...).converge(resources)
"""

import logging
from typing import List

from delivery_rust.config.parser import PrepConfig
from delivery_rust.core.exceptions import ConfigError, UnsupportedPlatformError
from delivery_rust.core.platform import (
    PlatformFamily,
    UnsupportedPlatform,
    UnsupportedPolicy,
    parse_platform_family,
)
from delivery_rust.recipes.resources import (
    EnvResource,
    ExecuteResource,
    FileResource,
    IncludeRecipe,
    LogResource,
    PackageResource,
    Resource,
)

logger = logging.getLogger(__name__)

RECIPE_NAME = "delivery_rust::_prep_builder"
APT_DEFAULT_RECIPE = "apt::default"
OMNIBUS_RECIPE = "delivery_rust::_omnibus"

LD_SO_CONF_MODE = 0o644


def build_prep_plan(config: PrepConfig) -> List[Resource]:
    """
    Build the ordered resources that prepare this host.

    Args:
        config: Preparation configuration

    Returns:
        Resources in converge order (empty for mac_os_x)

    Raises:
        UnsupportedPlatformError: If the platform family is unsupported and
            the policy is 'reject'
        ConfigError: If the Windows branch has no omnibus.ruby_version
    """
    family = parse_platform_family(config.platform_family)

    if isinstance(family, UnsupportedPlatform):
        return _unsupported_plan(family, config.unsupported_policy)

    logger.debug(f"Building preparation plan for {family}")

    if family in (PlatformFamily.RHEL, PlatformFamily.FEDORA):
        return _rhel_plan(config)
    elif family == PlatformFamily.DEBIAN:
        return _debian_plan()
    elif family == PlatformFamily.WINDOWS:
        return _windows_plan(config)
    else:
        return []


def _rhel_plan(config: PrepConfig) -> List[Resource]:
    # The default rust install prefix is not on the linker path here
    return [
        FileResource(
            path=config.ld_so_conf_path,
            content=f"{config.library_dir}\n",
            mode=LD_SO_CONF_MODE,
        ),
        ExecuteResource(name="reload ldconfig", command=("ldconfig",)),
        PackageResource("git"),
        IncludeRecipe(OMNIBUS_RECIPE),
    ]


def _debian_plan() -> List[Resource]:
    return [
        IncludeRecipe(APT_DEFAULT_RECIPE),
        PackageResource("curl"),
        PackageResource("git"),
        IncludeRecipe(OMNIBUS_RECIPE),
    ]


def _windows_plan(config: PrepConfig) -> List[Resource]:
    ruby_version = config.omnibus.ruby_version
    if not ruby_version:
        raise ConfigError("omnibus.ruby_version is required on windows")

    ruby_root = f"{config.rubies_root.rstrip('/')}/{ruby_version}"

    return [
        EnvResource(
            name="Add Omnibus ruby to PATH",
            key_name="PATH",
            value=f"{ruby_root}/bin",
            delim=";",
            action="modify",
        ),
        EnvResource(
            name="Add Omnibus ruby's MinGW to PATH",
            key_name="PATH",
            value=f"{ruby_root}/mingw/bin",
            delim=";",
            action="modify",
        ),
    ]


def _unsupported_plan(
    family: UnsupportedPlatform, policy: UnsupportedPolicy
) -> List[Resource]:
    if policy == UnsupportedPolicy.REJECT:
        raise UnsupportedPlatformError(family.value)

    level = logging.WARNING if policy == UnsupportedPolicy.WARN else logging.INFO
    return [
        LogResource(
            name="unrecognized platform_family",
            message=f"Unrecognized platform_family '{family.value}'",
            level=level,
        )
    ]
