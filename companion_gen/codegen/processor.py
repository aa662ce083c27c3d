"""
Processing host for the companion generators.

Models the collaborators a compiler-hosted processor talks to: the round
environment listing annotated types, the Filer that creates output files,
and the Messager that reports diagnostics. CompanionProcessor dispatches
every annotated type to each generator that handles its annotation, and
isolates failures so one bad unit never stops the rest of the round.
"""

import io
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, TextIO, Tuple, Union

from ..logging_config import get_logger
from .core.config import GeneratorConfig
from .core.elements import TypeElement
from .core.generator import CodeGenerator, generate_code
from .core.naming import is_qualified_name

logger = get_logger(__name__)


class DiagnosticKind(Enum):
    """Severity of a reported diagnostic."""

    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"


_LOG_LEVELS = {
    DiagnosticKind.ERROR: logging.ERROR,
    DiagnosticKind.WARNING: logging.WARNING,
    DiagnosticKind.NOTE: logging.INFO,
}


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    message: str
    element: Optional[str] = None

    def __str__(self) -> str:
        where = f"{self.element}: " if self.element else ""
        return f"{self.kind.value}: {where}{self.message}"


class Messager:
    """Records diagnostics and forwards them to the log."""

    def __init__(self):
        self._diagnostics: List[Diagnostic] = []

    def print_message(
        self,
        kind: DiagnosticKind,
        message: str,
        element: Optional[Union[TypeElement, str]] = None,
    ) -> Diagnostic:
        """
        Report a diagnostic, optionally tied to the element that caused it.

        Returns:
            The recorded Diagnostic
        """
        diagnostic = Diagnostic(
            kind=kind,
            message=message,
            element=str(element) if element is not None else None,
        )
        self._diagnostics.append(diagnostic)
        logger.log(_LOG_LEVELS[kind], "%s", diagnostic)
        return diagnostic

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return list(self._diagnostics)

    def of_kind(self, kind: DiagnosticKind) -> List[Diagnostic]:
        return [d for d in self._diagnostics if d.kind == kind]

    @property
    def errors(self) -> List[Diagnostic]:
        return self.of_kind(DiagnosticKind.ERROR)

    @property
    def warnings(self) -> List[Diagnostic]:
        return self.of_kind(DiagnosticKind.WARNING)

    def has_errors(self) -> bool:
        return bool(self.errors)


class FilerError(OSError):
    """Raised when a source file cannot be created."""

    pass


class Filer:
    """
    Creates generated source files under an output directory.

    Each qualified name may be created once per run; a second request is a
    collision. Files left by earlier runs are overwritten.
    """

    def __init__(
        self,
        output_dir: Union[str, Path],
        file_extension: str = ".java",
        encoding: str = "utf-8",
    ):
        self.output_dir = Path(output_dir)
        self.file_extension = file_extension
        self.encoding = encoding
        self._created: Dict[str, Tuple[str, ...]] = {}

    @property
    def created(self) -> Dict[str, Tuple[str, ...]]:
        """Qualified names created this run, with their originating types."""
        return dict(self._created)

    def path_for(self, qualified_name: str) -> Path:
        return self.output_dir.joinpath(*qualified_name.split(".")).with_suffix(
            self.file_extension
        )

    def _claim(self, qualified_name: str, origins: Iterable[object]) -> None:
        if not is_qualified_name(qualified_name):
            raise FilerError(f"Invalid type name for a source file: {qualified_name!r}")
        if qualified_name in self._created:
            raise FilerError(f"Attempt to recreate a file for type {qualified_name}")
        self._created[qualified_name] = tuple(str(o) for o in origins)

    @contextmanager
    def create_source_file(self, qualified_name: str, *origins: object) -> Iterator[TextIO]:
        """
        Open a text stream for the source file of ``qualified_name``.

        Args:
            qualified_name: Fully-qualified name of the generated type
            *origins: Types the file was generated from

        Yields:
            Writable text stream, closed on every exit path

        Raises:
            FilerError: On a name collision or when the file cannot be opened
        """
        self._claim(qualified_name, origins)
        path = self.path_for(qualified_name)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            stream = open(path, "w", encoding=self.encoding, newline="")
        except OSError as e:
            raise FilerError(f"Cannot create {path}: {e.strerror or e}") from e

        with stream:
            yield stream
        logger.debug("Wrote %s", path)


class MemoryFiler(Filer):
    """A Filer that keeps generated sources in memory instead of on disk."""

    def __init__(self, file_extension: str = ".java"):
        super().__init__(Path("."), file_extension)
        self.sources: Dict[str, str] = {}

    @contextmanager
    def create_source_file(self, qualified_name: str, *origins: object) -> Iterator[TextIO]:
        self._claim(qualified_name, origins)
        buffer = io.StringIO()
        try:
            yield buffer
            self.sources[qualified_name] = buffer.getvalue()
        finally:
            buffer.close()


class RoundEnvironment:
    """The types presented to the processor in one round."""

    def __init__(self, elements: Iterable[TypeElement], processing_over: bool = False):
        self._elements = list(elements)
        self._processing_over = processing_over

    @property
    def root_elements(self) -> List[TypeElement]:
        return list(self._elements)

    def elements_annotated_with(self, key: str) -> List[TypeElement]:
        """Types carrying annotation ``key``, in round order."""
        return [e for e in self._elements if e.has_annotation(key)]

    def processing_over(self) -> bool:
        return self._processing_over


@dataclass
class ProcessingEnvironment:
    """Services available to the processor for the whole run."""

    filer: Filer
    messager: Messager = field(default_factory=Messager)
    config: GeneratorConfig = field(default_factory=GeneratorConfig)


@dataclass
class UnitResult:
    """Outcome of one generator applied to one type."""

    generator: str
    source: str
    qualified_name: str = ""
    success: bool = True
    message: Optional[str] = None


@dataclass
class ProcessingReport:
    units: List[UnitResult] = field(default_factory=list)

    @property
    def generated(self) -> List[UnitResult]:
        return [u for u in self.units if u.success]

    @property
    def failed(self) -> List[UnitResult]:
        return [u for u in self.units if not u.success]

    @property
    def success(self) -> bool:
        return not self.failed


class CompanionProcessor:
    """Dispatches annotated types to generators, one unit at a time."""

    def __init__(
        self,
        environment: ProcessingEnvironment,
        generators: Optional[List[CodeGenerator]] = None,
    ):
        """
        Initialize the processor.

        Args:
            environment: Filer, Messager and configuration for the run
            generators: Generators to run; every registered generator when
                omitted, configured from ``environment.config``
        """
        self.environment = environment
        if generators is None:
            from .registry import get_registry

            generators = get_registry().create_all(environment.config)
        self.generators = generators

    @property
    def supported_annotation_keys(self) -> List[str]:
        return [g.annotation_key for g in self.generators]

    def process(self, round_env: RoundEnvironment) -> ProcessingReport:
        """
        Generate every companion file for one round.

        Failures of a single unit are reported through the Messager and do
        not stop other units. Emitter protocol errors are not caught.

        Returns:
            ProcessingReport listing each unit's outcome
        """
        report = ProcessingReport()
        if round_env.processing_over():
            return report

        for generator in self.generators:
            for element in round_env.elements_annotated_with(generator.annotation_key):
                report.units.append(self._process_unit(generator, element))

        logger.info(
            "Round complete: %d generated, %d failed",
            len(report.generated),
            len(report.failed),
        )
        return report

    def _process_unit(self, generator: CodeGenerator, element: TypeElement) -> UnitResult:
        messager = self.environment.messager
        unit = UnitResult(generator=generator.name, source=element.qualified_name)

        result = generate_code(generator, element)
        if not result.success:
            message = f"Unable to generate {generator.name} file: {result.error_message}"
            messager.print_message(DiagnosticKind.ERROR, message, element)
            unit.success = False
            unit.message = message
            return unit

        for warning in result.warnings:
            messager.print_message(DiagnosticKind.WARNING, warning, element)

        unit.qualified_name = result.qualified_name
        try:
            with self.environment.filer.create_source_file(
                result.qualified_name, element
            ) as stream:
                stream.write(result.code)
        except OSError as e:
            message = f"Unable to write {generator.name} file: {e}"
            messager.print_message(DiagnosticKind.ERROR, message, element)
            unit.success = False
            unit.message = message

        return unit
