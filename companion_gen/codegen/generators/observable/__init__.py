"""
Observable generator module.

Generates subclasses that fire typed listener callbacks whenever a matched
mutator changes a value.
"""

from .config import ObservableConfig
from .generator import ObservableGenerator, ObservableModel, ObservedMutator, observe

__all__ = [
    "ObservableGenerator",
    "ObservableConfig",
    "ObservableModel",
    "ObservedMutator",
    "observe",
    "create_generator",
]


def create_generator(config=None):
    """
    Create an observable generator.

    Args:
        config: GeneratorConfig instance, or None for defaults

    Returns:
        ObservableGenerator instance
    """
    return ObservableGenerator(config)
