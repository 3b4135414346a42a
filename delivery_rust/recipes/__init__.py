"""Recipes and the declarative resources they produce."""

from delivery_rust.recipes.prep_builder import (
    APT_DEFAULT_RECIPE,
    OMNIBUS_RECIPE,
    RECIPE_NAME,
    build_prep_plan,
)
from delivery_rust.recipes.registry import RecipeRegistry, create_default_registry
from delivery_rust.recipes.resources import (
    EnvResource,
    ExecuteResource,
    FileResource,
    IncludeRecipe,
    LogResource,
    PackageResource,
    Resource,
)

__all__ = [
    "APT_DEFAULT_RECIPE",
    "OMNIBUS_RECIPE",
    "RECIPE_NAME",
    "build_prep_plan",
    "RecipeRegistry",
    "create_default_registry",
    "EnvResource",
    "ExecuteResource",
    "FileResource",
    "IncludeRecipe",
    "LogResource",
    "PackageResource",
    "Resource",
]
