"""
Tests for the recipe registry.
"""

import pytest

from delivery_rust.core.exceptions import RecipeNotFoundError
from delivery_rust.recipes.registry import RecipeRegistry, create_default_registry
from delivery_rust.recipes.resources import ExecuteResource, PackageResource


class TestRecipeRegistry:
    """Tests for RecipeRegistry."""

    def test_register_and_resolve(self, make_config):
        registry = RecipeRegistry()
        registry.register("x::y", lambda config: [PackageResource("make")])

        assert registry.has_recipe("x::y")
        assert registry.resolve("x::y", make_config()) == [PackageResource("make")]

    def test_duplicate_registration(self):
        registry = RecipeRegistry()
        registry.register("x::y", lambda config: [])

        with pytest.raises(ValueError, match="already registered"):
            registry.register("x::y", lambda config: [])

    def test_replace(self, make_config):
        registry = RecipeRegistry()
        registry.register("x::y", lambda config: [])
        registry.register("x::y", lambda config: [PackageResource("gcc")], replace=True)

        assert registry.resolve("x::y", make_config()) == [PackageResource("gcc")]

    def test_unknown_recipe(self, make_config):
        with pytest.raises(RecipeNotFoundError) as exc_info:
            RecipeRegistry().resolve("nope::default", make_config())

        assert exc_info.value.recipe_name == "nope::default"

    def test_register_commands(self, make_config):
        registry = RecipeRegistry()
        registry.register_commands("x::y", [["a", "1"], ["b"]])

        assert registry.resolve("x::y", make_config()) == [
            ExecuteResource(name="x::y step 1", command=("a", "1")),
            ExecuteResource(name="x::y step 2", command=("b",)),
        ]

    def test_resolve_returns_fresh_list(self, make_config):
        registry = RecipeRegistry()
        registry.register_commands("x::y", [["a"]])

        registry.resolve("x::y", make_config()).clear()

        assert len(registry.resolve("x::y", make_config())) == 1


class TestDefaultRegistry:
    def test_builtins(self, make_config):
        registry = create_default_registry(make_config(recipes={}))

        assert registry.list_recipes() == ["apt::default", "delivery_rust::_prep_builder"]
        assert registry.resolve("apt::default", make_config()) == [
            ExecuteResource(name="apt::default step 1", command=("apt-get", "update"))
        ]

    def test_prep_builder_is_includable(self, make_config):
        config = make_config("debian", recipes={})
        registry = create_default_registry(config)

        resources = registry.resolve("delivery_rust::_prep_builder", config)

        assert PackageResource("curl") in resources

    def test_configured_recipes_replace_builtins(self, make_config):
        config = make_config(recipes={"apt::default": [["apt-get", "-q", "update"]]})

        registry = create_default_registry(config)

        assert registry.resolve("apt::default", config)[0].command == (
            "apt-get",
            "-q",
            "update",
        )
