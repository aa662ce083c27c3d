"""
Factory generator module.

Generates factories that bind shared constructor parameters once and take
the rest per call.
"""

from .config import FactoryConfig
from .generator import (
    BoundParameter,
    CreationMethod,
    FactoryGenerator,
    FactoryModel,
    compute_bound_parameters,
    creation_parameters,
    is_provider_type,
    wrap_provider,
)

__all__ = [
    "FactoryGenerator",
    "FactoryConfig",
    "FactoryModel",
    "BoundParameter",
    "CreationMethod",
    "compute_bound_parameters",
    "creation_parameters",
    "is_provider_type",
    "wrap_provider",
    # Factory functions
    "create_generator",
    "create_injectable_generator",
]


def create_generator(config=None):
    """
    Create a factory generator.

    Args:
        config: GeneratorConfig instance, or None for defaults

    Returns:
        FactoryGenerator instance
    """
    return FactoryGenerator(config)


def create_injectable_generator(**overrides):
    """
    Create a factory generator whose output follows jakarta.inject.

    Keyword arguments override the resulting GeneratorConfig fields.
    """
    from ...core.config import load_config

    custom = {
        "inject_annotation": "@jakarta.inject.Inject",
        "singleton_annotation": "@jakarta.inject.Singleton",
        "provider_type": "jakarta.inject.Provider",
    }
    custom.update(overrides)
    return FactoryGenerator(load_config("factory", custom))
