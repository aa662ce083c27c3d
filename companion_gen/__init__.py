"""
companion_gen: companion source generation for annotated types.

Generates bound-parameter factories and observable model subclasses from
type descriptors exported by a host compiler.
"""

__version__ = "0.1.0"

from .codegen import (
    CompanionProcessor,
    GenerationResult,
    GeneratorConfig,
    generate_for_element,
    generate_sources,
    get_generator,
    load_config,
)
from .logging_config import get_logger, setup_logging

__all__ = [
    "__version__",
    "CompanionProcessor",
    "GenerationResult",
    "GeneratorConfig",
    "generate_for_element",
    "generate_sources",
    "get_generator",
    "load_config",
    "get_logger",
    "setup_logging",
]
