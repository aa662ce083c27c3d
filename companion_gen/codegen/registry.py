"""
Generator registry system for managing available companion generators.

Provides registration by name and alias, instantiation with merged
configuration, and lookup by the annotation key a generator handles.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Type, Union

from ..logging_config import get_logger
from .core.config import ConfigError, GeneratorConfig, load_config
from .core.generator import CodeGenerator

logger = get_logger(__name__)

ConfigLike = Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]]


class RegistryError(Exception):
    """Exception raised for registry-related errors."""

    pass


class GeneratorRegistry:
    """Registry for managing available code generators."""

    def __init__(self):
        """Initialize empty registry."""
        self._generators: Dict[str, Type[CodeGenerator]] = {}
        self._aliases: Dict[str, str] = {}

    def register(
        self,
        name: str,
        generator_class: Type[CodeGenerator],
        aliases: Optional[List[str]] = None,
        replace: bool = False,
    ):
        """
        Register a generator.

        Args:
            name: Primary generator name (e.g. 'factory')
            generator_class: Generator class implementing CodeGenerator
            aliases: Alternative names for this generator
            replace: If True, replace an existing registration. If False,
                skip silently when the name is taken.

        Raises:
            RegistryError: If the class is invalid or an alias conflicts
        """
        if not (isinstance(generator_class, type) and issubclass(generator_class, CodeGenerator)):
            raise RegistryError("Generator class must inherit from CodeGenerator")

        key = name.lower()

        if key in self._generators and not replace:
            return

        self._generators[key] = generator_class

        for alias in aliases or []:
            alias_key = alias.lower()
            if alias_key == key:
                continue

            if not replace:
                if alias_key in self._generators:
                    raise RegistryError(
                        f"Alias '{alias}' conflicts with existing generator name"
                    )
                if alias_key in self._aliases and self._aliases[alias_key] != key:
                    raise RegistryError(
                        f"Alias '{alias}' already points to '{self._aliases[alias_key]}'"
                    )

            self._aliases[alias_key] = key

        logger.debug("Registered generator %s (%s)", key, generator_class.__name__)

    def unregister(self, name: str):
        """Unregister a generator and its aliases."""
        key = name.lower()
        self._generators.pop(key, None)

        for alias in [a for a, target in self._aliases.items() if target == key]:
            del self._aliases[alias]

    def resolve(self, name: str) -> str:
        """
        Resolve a name or alias to the primary generator name.

        Raises:
            RegistryError: If nothing is registered under ``name``
        """
        key = name.lower()
        if key in self._generators:
            return key
        if key in self._aliases:
            return self._aliases[key]

        raise RegistryError(
            f"No generator registered as: {name}. "
            f"Available: {', '.join(self.list_generators())}"
        )

    def get_generator_class(self, name: str) -> Type[CodeGenerator]:
        return self._generators[self.resolve(name)]

    def create_generator(self, name: str, config: ConfigLike = None) -> CodeGenerator:
        """
        Create a generator instance.

        Args:
            name: Generator name or alias
            config: GeneratorConfig, dict of overrides, or JSON file path

        Returns:
            Configured generator instance

        Raises:
            RegistryError: If the name is unknown or the configuration is invalid
        """
        key = self.resolve(name)
        generator_class = self._generators[key]

        try:
            if isinstance(config, GeneratorConfig):
                final_config = config
            elif isinstance(config, (str, Path)):
                final_config = load_config(key, config_file=config)
            elif isinstance(config, dict):
                final_config = load_config(key, custom_config=config)
            elif config is None:
                final_config = load_config(key)
            else:
                raise RegistryError(f"Invalid config type: {type(config)}")
        except ConfigError as e:
            raise RegistryError(f"Failed to configure {key} generator: {e}") from e

        return generator_class(final_config)

    def create_all(self, config: ConfigLike = None) -> List[CodeGenerator]:
        """Instantiate every registered generator, in name order."""
        return [self.create_generator(name, config) for name in self.list_generators()]

    def list_generators(self) -> List[str]:
        """Get list of registered primary generator names."""
        return sorted(self._generators.keys())

    def get_aliases(self, name: str) -> List[str]:
        key = name.lower()
        return sorted(alias for alias, target in self._aliases.items() if target == key)

    def list_all_names(self) -> Dict[str, List[str]]:
        """
        Get all registered names including aliases.

        Returns:
            Dict mapping primary name to all names that select it
        """
        return {name: [name] + self.get_aliases(name) for name in self._generators}

    def is_supported(self, name: str) -> bool:
        key = name.lower()
        return key in self._generators or key in self._aliases

    def get_generator_info(self, name: str) -> Dict[str, Any]:
        """
        Get information about a registered generator.

        Raises:
            RegistryError: If the generator is not found
        """
        key = self.resolve(name)
        generator = self.create_generator(key)

        return {
            "name": generator.name,
            "class": type(generator).__name__,
            "description": generator.description,
            "annotation_key": generator.annotation_key,
            "file_extension": generator.file_extension,
            "provenance": generator.provenance,
            "aliases": self.get_aliases(key),
            "module": type(generator).__module__,
        }


# Global registry instance, created on first use
_global_registry: Optional[GeneratorRegistry] = None


def get_registry() -> GeneratorRegistry:
    """Get the global generator registry, initializing if needed."""
    global _global_registry
    if _global_registry is None:
        _global_registry = GeneratorRegistry()
        _auto_register_generators(_global_registry)
    return _global_registry


def _auto_register_generators(registry: GeneratorRegistry):
    """Register the built-in generators with their aliases."""
    from .generators.factory import FactoryGenerator
    from .generators.observable import ObservableGenerator

    registry.register("factory", FactoryGenerator, aliases=["factories"])
    registry.register(
        "observable", ObservableGenerator, aliases=["observable-model", "observablemodel"]
    )


# Public API functions using the global registry


def register_generator(
    name: str,
    generator_class: Type[CodeGenerator],
    aliases: Optional[List[str]] = None,
):
    """Register a generator in the global registry."""
    get_registry().register(name, generator_class, aliases)


def get_generator(name: str, config: ConfigLike = None) -> CodeGenerator:
    """Get a generator instance from the global registry."""
    return get_registry().create_generator(name, config)


def list_supported_generators() -> List[str]:
    """List all generator names in the global registry."""
    return get_registry().list_generators()


def is_generator_supported(name: str) -> bool:
    return get_registry().is_supported(name)


def get_generator_info(name: str) -> Dict[str, Any]:
    """Get information about a registered generator."""
    return get_registry().get_generator_info(name)


def list_all_generator_info() -> Dict[str, Dict[str, Any]]:
    """Get information about all registered generators."""
    return {name: get_generator_info(name) for name in list_supported_generators()}
