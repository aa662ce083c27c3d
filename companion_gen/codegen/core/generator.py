"""
Base generator interface for all companion source generators.

A generator turns one annotated TypeElement into one generated source file
in two steps: ``build_model`` makes every code-shape decision and returns a
plain model, and ``render`` drives a SourceFileWriter over that model.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ...logging_config import get_logger
from .config import ConfigError, GeneratorConfig
from .elements import TypeElement
from .templates import TemplateEngine, TemplateError, create_template_engine
from .writer import SourceFileWriter

logger = get_logger(__name__)


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


@dataclass
class GenerationModel:
    """Code-shape decisions common to every generated file."""

    package: str
    class_name: str
    source: str
    provenance: str
    warnings: List[str] = field(default_factory=list)

    @property
    def qualified_name(self) -> str:
        if self.package:
            return f"{self.package}.{self.class_name}"
        return self.class_name


class CodeGenerator(ABC):
    """Abstract base class for all companion generators."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize generator with optional configuration."""
        self.config = config or GeneratorConfig()
        self._template_engine = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry name of this generator (e.g. 'factory')."""
        pass

    @property
    @abstractmethod
    def annotation_key(self) -> str:
        """Descriptor annotation key that selects types for this generator."""
        pass

    @property
    def description(self) -> str:
        return ""

    @property
    def file_extension(self) -> str:
        return ".java"

    @property
    def provenance(self) -> str:
        """Identity recorded in the @Generated marker of every output."""
        return f"companion_gen.{self.name}"

    @property
    def options(self) -> Dict[str, Any]:
        return self.config.generator_options

    @property
    def template_engine(self) -> TemplateEngine:
        if self._template_engine is None:
            self._template_engine = create_template_engine(self.config.header_template)
        return self._template_engine

    @abstractmethod
    def build_model(self, element: TypeElement) -> GenerationModel:
        """
        Extract the structural model of ``element`` and decide what to emit.

        Raises:
            GeneratorError: If the type cannot be generated
            ConfigError: If the type's annotation values are invalid
        """
        pass

    @abstractmethod
    def render(self, model: GenerationModel, writer: SourceFileWriter) -> None:
        """Issue the writer calls for ``model``."""
        pass

    def generate(self, element: TypeElement) -> str:
        """Build the model for ``element`` and return the formatted source."""
        return self.generate_model(self.build_model(element))

    def generate_model(self, model: GenerationModel) -> str:
        writer = self.create_writer()
        self.write_preamble(writer, model)
        self.render(model, writer)
        return self.format_code(writer.getvalue())

    def create_writer(self) -> SourceFileWriter:
        return SourceFileWriter(
            indent_width=self.config.indent_width,
            line_ending=self.config.line_ending,
            generated_annotation=self.config.generated_annotation,
        )

    def write_preamble(self, writer: SourceFileWriter, model: GenerationModel) -> None:
        """Header comment and package declaration."""
        if self.config.add_comments:
            writer.write_header_comment(self.render_header(model))
            writer.write(writer.eol)
        writer.write_package_declaration(model.package)

    def render_header(self, model: GenerationModel) -> str:
        context = {
            "generator": self.provenance,
            "source": model.source,
            "class_name": model.class_name,
            "package": model.package,
        }
        return self.template_engine.render_template("header", context).strip()

    def format_code(self, code: str) -> str:
        """
        Remove trailing whitespace and collapse runs of blank lines.

        Args:
            code: Raw generated code

        Returns:
            Formatted code ending with exactly one line terminator
        """
        eol = self.config.line_ending
        formatted_lines = []
        blank_count = 0

        for line in code.split(eol):
            stripped = line.rstrip(" \t")
            if not stripped:
                blank_count += 1
                if blank_count <= 1:
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        while formatted_lines and not formatted_lines[-1]:
            formatted_lines.pop()

        return eol.join(formatted_lines) + eol

    def output_path(self, model: GenerationModel) -> str:
        """Relative path of the generated file."""
        return model.qualified_name.replace(".", "/") + self.file_extension


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        code: str,
        qualified_name: str = "",
        warnings: List[str] = None,
        metadata: Dict[str, Any] = None,
    ):
        """
        Initialize generation result.

        Args:
            code: Generated code
            qualified_name: Fully-qualified name of the generated type
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.code = code
        self.qualified_name = qualified_name
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message = None
        self.exception = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(code="")
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(generator: CodeGenerator, element: TypeElement) -> GenerationResult:
    """
    Generate one unit with error handling.

    Generation errors become a failed result; emitter protocol errors are
    programming errors and propagate.

    Args:
        generator: Code generator instance
        element: Annotated type to generate for

    Returns:
        GenerationResult with code, warnings, and metadata
    """
    try:
        model = generator.build_model(element)
        code = generator.generate_model(model)
    except (GeneratorError, ConfigError, TemplateError) as e:
        logger.debug("Generation of %s by %s failed: %s", element, generator.name, e)
        return GenerationResult.error(str(e), exception=e)

    metadata = {
        "generator": generator.name,
        "source": element.qualified_name,
        "output": generator.output_path(model),
        "provenance": model.provenance,
        "line_count": code.count(generator.config.line_ending),
    }
    return GenerationResult(code, model.qualified_name, model.warnings, metadata)
