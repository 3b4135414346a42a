"""
Recipe registry for resolving included recipes.

Included recipes are opaque to the recipe that includes them. The registry
maps a qualified recipe name (e.g., 'apt::default') to a factory that
returns the resources that recipe contributes.
"""

import logging
from typing import Callable, Dict, List, Sequence

from delivery_rust.config.parser import PrepConfig
from delivery_rust.core.exceptions import RecipeNotFoundError
from delivery_rust.recipes.prep_builder import (
    APT_DEFAULT_RECIPE,
    RECIPE_NAME,
    build_prep_plan,
)
from delivery_rust.recipes.resources import ExecuteResource, Resource

logger = logging.getLogger(__name__)

RecipeFactory = Callable[[PrepConfig], List[Resource]]


class RecipeRegistry:
    """
    Registry of recipes that can be included by name.

    Each recipe is stored as a factory taking the run's ``PrepConfig`` and
    returning a list of resources.
    """

    def __init__(self):
        """Initialize empty registry."""
        self._recipes: Dict[str, RecipeFactory] = {}

    def register(self, name: str, factory: RecipeFactory, replace: bool = False):
        """
        Register a recipe factory.

        Args:
            name: Qualified recipe name (e.g., 'delivery_rust::_omnibus')
            factory: Callable returning the recipe's resources
            replace: Allow replacing an existing registration

        Raises:
            ValueError: If a recipe with the same name is already registered

        Example:
            registry.register('apt::default', lambda config: [...])
        """
        if name in self._recipes and not replace:
            raise ValueError(f"Recipe '{name}' is already registered")
        self._recipes[name] = factory

    def register_commands(
        self, name: str, commands: Sequence[Sequence[str]], replace: bool = False
    ):
        """
        Register a recipe that runs a fixed list of commands.

        Args:
            name: Qualified recipe name
            commands: argv lists, run in order
            replace: Allow replacing an existing registration
        """
        resources = [
            ExecuteResource(name=f"{name} step {index}", command=tuple(command))
            for index, command in enumerate(commands, start=1)
        ]
        self.register(name, lambda config: list(resources), replace=replace)

    def has_recipe(self, name: str) -> bool:
        return name in self._recipes

    def resolve(self, name: str, config: PrepConfig) -> List[Resource]:
        """
        Resolve an included recipe to its resources.

        Args:
            name: Qualified recipe name
            config: Configuration of the current run

        Returns:
            Resources contributed by the recipe

        Raises:
            RecipeNotFoundError: If no recipe is registered under the name
        """
        if name not in self._recipes:
            raise RecipeNotFoundError(name)
        logger.debug(f"Resolving included recipe: {name}")
        return list(self._recipes[name](config))

    def list_recipes(self) -> List[str]:
        return sorted(self._recipes)


def create_default_registry(config: PrepConfig) -> RecipeRegistry:
    """
    Create a registry with the built-in recipes and those from configuration.

    Built-in recipes:
        delivery_rust::_prep_builder: this package's preparation recipe
        apt::default: refresh the apt package index

    Recipes declared under ``recipes`` in the configuration replace
    built-ins of the same name.

    Args:
        config: Configuration with optional recipe command definitions

    Returns:
        Populated RecipeRegistry
    """
    registry = RecipeRegistry()
    registry.register(RECIPE_NAME, build_prep_plan)
    registry.register_commands(APT_DEFAULT_RECIPE, [["apt-get", "update"]])

    for name, commands in config.recipes.items():
        registry.register_commands(name, commands, replace=True)
        logger.debug(f"Registered recipe from configuration: {name}")

    return registry
