"""
Companion source generation.

Generates factory and observable companion classes for annotated types.
"""

from typing import Any, Dict, List, Optional

from .core.config import ConfigManager, GeneratorConfig, load_config
from .core.elements import TypeElement, parse_type_element, parse_type_elements
from .core.generator import CodeGenerator, GenerationResult, GeneratorError, generate_code
from .processor import (
    CompanionProcessor,
    Filer,
    FilerError,
    MemoryFiler,
    Messager,
    ProcessingEnvironment,
    ProcessingReport,
    RoundEnvironment,
)
from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_generator_info,
    get_registry,
    list_all_generator_info,
    list_supported_generators,
)


def generate_for_element(
    element: TypeElement, generator: str = "factory", config=None
) -> GenerationResult:
    """
    Generate one companion file for one type.

    Args:
        element: Annotated type
        generator: Generator name or alias
        config: GeneratorConfig, dict of overrides, or JSON file path

    Returns:
        GenerationResult with generated code
    """
    return generate_code(get_generator(generator, config), element)


def generate_sources(
    document: Any,
    generators: Optional[List[str]] = None,
    config=None,
) -> Dict[str, str]:
    """
    Run the processor over a descriptor document and keep the output in memory.

    Args:
        document: Parsed descriptor document
        generators: Generator names to run; all registered when omitted
        config: GeneratorConfig, dict of overrides, or JSON file path

    Returns:
        Mapping of generated qualified name to source text

    Raises:
        GeneratorError: If any unit failed; the message lists every failure
    """
    registry = get_registry()
    names = generators or registry.list_generators()
    environment = ProcessingEnvironment(filer=MemoryFiler())
    processor = CompanionProcessor(
        environment, [registry.create_generator(n, config) for n in names]
    )

    report = processor.process(RoundEnvironment(parse_type_elements(document)))
    if not report.success:
        raise GeneratorError("; ".join(u.message for u in report.failed))
    return dict(environment.filer.sources)


__all__ = [
    "CodeGenerator",
    "GenerationResult",
    "GeneratorError",
    "GeneratorConfig",
    "ConfigManager",
    "load_config",
    "TypeElement",
    "parse_type_element",
    "parse_type_elements",
    "CompanionProcessor",
    "Filer",
    "FilerError",
    "MemoryFiler",
    "Messager",
    "ProcessingEnvironment",
    "ProcessingReport",
    "RoundEnvironment",
    "GeneratorRegistry",
    "RegistryError",
    "get_registry",
    "get_generator",
    "get_generator_info",
    "list_all_generator_info",
    "list_supported_generators",
    "generate_code",
    "generate_for_element",
    "generate_sources",
]
