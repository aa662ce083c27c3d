"""
Core code generation components.

Provides the structural model, its extraction from host elements, the
source emitter, and the base classes used by every generator.
"""

from .config import ConfigError, ConfigManager, GeneratorConfig, load_config
from .elements import (
    AnnotationMirror,
    DescriptorError,
    ElementKind,
    ExecutableElement,
    TypeElement,
    VariableElement,
    parse_type_element,
    parse_type_elements,
)
from .extraction import (
    ExtractionError,
    PrefixMatch,
    extract_constructors,
    extract_methods,
    extract_mutators,
)
from .generator import (
    CodeGenerator,
    GenerationModel,
    GenerationResult,
    GeneratorError,
    generate_code,
)
from .model import Constructor, Method, Modifier, Mutator, Parameter
from .naming import NameSanitizer, create_java_sanitizer
from .templates import TemplateEngine, TemplateError, create_template_engine
from .writer import Context, EmitterProtocolError, SourceFileWriter

__all__ = [
    # Structural model
    "Parameter",
    "Method",
    "Constructor",
    "Mutator",
    "Modifier",
    # Host elements
    "AnnotationMirror",
    "DescriptorError",
    "ElementKind",
    "ExecutableElement",
    "TypeElement",
    "VariableElement",
    "parse_type_element",
    "parse_type_elements",
    # Extraction
    "ExtractionError",
    "PrefixMatch",
    "extract_constructors",
    "extract_methods",
    "extract_mutators",
    # Base generator interface
    "CodeGenerator",
    "GenerationModel",
    "GeneratorError",
    "GenerationResult",
    "generate_code",
    # Emitter
    "SourceFileWriter",
    "EmitterProtocolError",
    "Context",
    # Naming
    "NameSanitizer",
    "create_java_sanitizer",
    # Configuration
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Templates
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
