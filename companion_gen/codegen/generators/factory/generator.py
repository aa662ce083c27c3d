"""
Factory generator implementation.

Generates a ``<Type>Factory`` class for an annotated type. Constructor
parameters shared across the type's constructors are bound once, when the
factory itself is constructed, and kept in fields; every remaining
parameter is supplied per call to a ``get<Type>`` creation method.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from ....logging_config import get_logger
from ...core.elements import TypeElement
from ...core.extraction import extract_constructors, validate_type_element
from ...core.generator import CodeGenerator, GenerationModel
from ...core.model import Constructor, Modifier, Parameter
from ...core.naming import box_type, create_java_sanitizer, raw_type
from ...core.writer import SourceFileWriter
from .config import FactoryConfig

logger = get_logger(__name__)

PROVIDER_TYPES = {
    "Provider",
    "javax.inject.Provider",
    "jakarta.inject.Provider",
    "com.google.inject.Provider",
}


def compute_bound_parameters(constructors: Iterable[Constructor]) -> List[Parameter]:
    """
    Parameters bound at factory construction time.

    Scans every constructor in order; a parameter joins the list the first
    time it is seen unless it is flagged unbound or a structurally equal
    parameter is already present.
    """
    bound: List[Parameter] = []
    for constructor in constructors:
        for parameter in constructor.parameters:
            if parameter.unbound or parameter in bound:
                continue
            bound.append(parameter)
    return bound


def creation_parameters(
    constructor: Constructor, bound: Sequence[Parameter]
) -> List[Parameter]:
    """The constructor's parameters minus the bound set, order preserved."""
    return [p for p in constructor.parameters if p not in bound]


def is_provider_type(type_name: str, provider_type: Optional[str] = None) -> bool:
    """Whether ``type_name`` already denotes a provider."""
    raw = raw_type(type_name)
    return raw in PROVIDER_TYPES or (provider_type is not None and raw == provider_type)


def wrap_provider(type_name: str, provider_type: str = "javax.inject.Provider") -> str:
    """
    Wrap ``type_name`` in ``provider_type``; provider types are returned as-is.

    Primitive types are boxed, since a provider needs a reference type.
    """
    if is_provider_type(type_name, provider_type):
        return type_name
    return f"{provider_type}<{box_type(type_name)}>"


@dataclass(frozen=True)
class BoundParameter:
    """A bound parameter together with the field that stores it."""

    parameter: Parameter
    field_name: str
    field_type: str
    dereference: bool = False

    @property
    def reference(self) -> str:
        """Expression that yields the bound value inside a creation method."""
        if self.dereference:
            return f"this.{self.field_name}.get()"
        return f"this.{self.field_name}"


@dataclass(frozen=True)
class CreationMethod:
    """One ``get<Type>`` method, mirroring one source constructor."""

    parameters: Tuple[Parameter, ...]
    arguments: Tuple[str, ...]
    thrown_types: Tuple[str, ...] = ()


@dataclass
class FactoryModel(GenerationModel):
    """Everything the factory renderer needs to know."""

    target: str = ""
    method_name: str = ""
    settings: FactoryConfig = field(default_factory=FactoryConfig)
    bound: List[BoundParameter] = field(default_factory=list)
    creation_methods: List[CreationMethod] = field(default_factory=list)


class FactoryGenerator(CodeGenerator):
    """Code generator for bound-parameter factories."""

    @property
    def name(self) -> str:
        return "factory"

    @property
    def annotation_key(self) -> str:
        return "factory"

    @property
    def description(self) -> str:
        return "Factory classes that bind shared constructor parameters"

    def build_model(self, element: TypeElement) -> FactoryModel:
        validate_type_element(element)
        settings = FactoryConfig.from_annotation(
            element.get_annotation(self.annotation_key), self.options
        )

        constructors = extract_constructors(
            element,
            self.config.control_namespace,
            self.config.unbound_annotation,
        )
        bound_parameters = compute_bound_parameters(constructors)

        model = FactoryModel(
            package=element.package,
            class_name=settings.name or f"{element.simple_name}Factory",
            source=element.qualified_name,
            provenance=self.provenance,
            target=element.simple_name,
            method_name=f"get{element.simple_name}",
            settings=settings,
        )
        model.bound = self._bind(bound_parameters, settings, model.warnings)

        for constructor in constructors:
            model.creation_methods.append(
                self._creation_method(constructor, model.bound)
            )

        if not constructors:
            logger.debug("%s declares no constructors", element)

        logger.debug(
            "Factory %s: %d bound parameter(s), %d creation method(s)",
            model.qualified_name,
            len(model.bound),
            len(model.creation_methods),
        )
        return model

    def _bind(
        self,
        parameters: Sequence[Parameter],
        settings: FactoryConfig,
        warnings: List[str],
    ) -> List[BoundParameter]:
        """Allocate one field per bound parameter."""
        sanitizer = create_java_sanitizer()
        bound = []

        for parameter in parameters:
            field_name = sanitizer.sanitize_name(parameter.name, suffix_on_conflict="")
            if field_name != parameter.name:
                warnings.append(
                    f"Bound parameter '{parameter}' is stored in field '{field_name}'"
                )

            field_type = parameter.type
            dereference = False
            if settings.providers and not is_provider_type(
                parameter.type, self.config.provider_type
            ):
                field_type = wrap_provider(parameter.type, self.config.provider_type)
                dereference = True

            bound.append(BoundParameter(parameter, field_name, field_type, dereference))

        return bound

    @staticmethod
    def _creation_method(
        constructor: Constructor, bound: Sequence[BoundParameter]
    ) -> CreationMethod:
        by_parameter = {b.parameter: b for b in bound}
        arguments = []
        for parameter in constructor.parameters:
            binding = by_parameter.get(parameter)
            arguments.append(binding.reference if binding else parameter.name)

        return CreationMethod(
            parameters=tuple(
                creation_parameters(constructor, [b.parameter for b in bound])
            ),
            arguments=tuple(arguments),
            thrown_types=constructor.thrown_types,
        )

    def render(self, model: FactoryModel, writer: SourceFileWriter) -> None:
        settings = model.settings

        writer.write_annotation_if(self.config.singleton_annotation, settings.singleton)
        writer.write_class_declaration(
            model.class_name, model.provenance, settings.modifiers
        )

        for binding in model.bound:
            writer.write_field(
                binding.field_type,
                binding.field_name,
                (Modifier.PRIVATE, Modifier.FINAL),
            )

        writer.write_annotation_if(self.config.inject_annotation, settings.inject)
        writer.write_constructor_declaration_start(model.class_name, (Modifier.PUBLIC,))
        for binding in model.bound:
            writer.write_method_parameter(
                binding.parameter.annotations,
                binding.field_type,
                binding.field_name,
                (Modifier.FINAL,),
            )
        writer.write_method_declaration_end()
        for binding in model.bound:
            writer.write_field_assignment(binding.field_name, binding.field_name)
        writer.write_block_end()

        for method in model.creation_methods:
            writer.write_method_declaration_start(
                model.target, model.method_name, settings.method_modifiers
            )
            for parameter in method.parameters:
                writer.write_method_parameter(
                    parameter.annotations,
                    parameter.type,
                    parameter.name,
                    (Modifier.FINAL,),
                )
            writer.write_method_declaration_end(*method.thrown_types)
            writer.write_return_start()
            writer.write_new_instance(model.target, *method.arguments)
            writer.write_statement_end()
            writer.write_block_end()

        writer.write_block_end()
