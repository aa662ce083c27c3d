"""Tests for the generator registry."""

import pytest

from companion_gen.codegen.core.config import GeneratorConfig
from companion_gen.codegen.generators.factory import FactoryGenerator
from companion_gen.codegen.generators.observable import ObservableGenerator
from companion_gen.codegen.registry import (
    GeneratorRegistry,
    RegistryError,
    _auto_register_generators,
    get_registry,
    is_generator_supported,
    list_supported_generators,
)


@pytest.fixture
def registry():
    registry = GeneratorRegistry()
    _auto_register_generators(registry)
    return registry


class TestGeneratorRegistry:
    def test_builtin_generators(self, registry):
        assert registry.list_generators() == ["factory", "observable"]
        assert registry.list_all_names()["observable"] == [
            "observable",
            "observable-model",
            "observablemodel",
        ]

    def test_resolve_aliases(self, registry):
        assert registry.resolve("Factories") == "factory"
        assert registry.resolve("ObservableModel") == "observable"
        assert registry.get_generator_class("observable-model") is ObservableGenerator

    def test_unknown_name(self, registry):
        with pytest.raises(RegistryError, match="Available: factory, observable"):
            registry.resolve("builder")

    def test_create_with_overrides(self, registry):
        generator = registry.create_generator("factory", {"indent_width": 2})

        assert isinstance(generator, FactoryGenerator)
        assert generator.config.indent_width == 2
        assert generator.options["default_method_modifiers"] == ["public"]

    def test_create_with_config_object(self, registry):
        config = GeneratorConfig(add_comments=False)

        assert registry.create_generator("observable", config).config is config

    def test_create_with_missing_file(self, registry, tmp_path):
        with pytest.raises(RegistryError, match="Failed to configure factory"):
            registry.create_generator("factory", str(tmp_path / "missing.json"))

    def test_create_with_bad_config_type(self, registry):
        with pytest.raises(RegistryError, match="Invalid config type"):
            registry.create_generator("factory", 42)

    def test_create_all(self, registry):
        generators = registry.create_all({"add_comments": False})

        assert [g.name for g in generators] == ["factory", "observable"]
        assert not any(g.config.add_comments for g in generators)

    def test_generator_info(self, registry):
        info = registry.get_generator_info("factories")

        assert info["name"] == "factory"
        assert info["class"] == "FactoryGenerator"
        assert info["annotation_key"] == "factory"
        assert info["provenance"] == "companion_gen.factory"
        assert info["aliases"] == ["factories"]

    def test_register_rejects_non_generators(self, registry):
        with pytest.raises(RegistryError):
            registry.register("thing", dict)

    def test_alias_conflict(self, registry):
        with pytest.raises(RegistryError, match="conflicts"):
            registry.register("other", FactoryGenerator, aliases=["observable"])

    def test_existing_name_kept_without_replace(self, registry):
        registry.register("factory", ObservableGenerator)

        assert registry.get_generator_class("factory") is FactoryGenerator

    def test_replace(self, registry):
        registry.register("factory", ObservableGenerator, replace=True)

        assert registry.get_generator_class("factory") is ObservableGenerator

    def test_unregister_removes_aliases(self, registry):
        registry.unregister("factory")

        assert not registry.is_supported("factory")
        assert not registry.is_supported("factories")
        assert registry.list_generators() == ["observable"]


class TestGlobalRegistry:
    def test_singleton(self):
        assert get_registry() is get_registry()

    def test_module_functions(self):
        assert list_supported_generators() == ["factory", "observable"]
        assert is_generator_supported("FACTORIES")
        assert not is_generator_supported("builder")
