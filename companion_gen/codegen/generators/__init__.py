"""
Companion source generators.

Each subpackage turns one kind of annotated type into one generated class.
"""

from .factory import FactoryGenerator
from .observable import ObservableGenerator

__all__ = ["FactoryGenerator", "ObservableGenerator"]
