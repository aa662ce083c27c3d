"""
Observable generator implementation.

Generates an ``Observable<Type>`` subclass that wraps every matched
mutator: the current value is read through the paired accessor before and
after delegating to the superclass, and the change is passed to the
listeners registered for that subject.
"""

from dataclasses import dataclass, field
from itertools import groupby
from typing import List, Optional, Tuple

from ....logging_config import get_logger
from ...core.elements import TypeElement
from ...core.extraction import (
    extract_constructors,
    extract_mutators,
    validate_type_element,
)
from ...core.generator import CodeGenerator, GenerationModel
from ...core.model import Constructor, Method, Modifier, Mutator
from ...core.naming import (
    NameSanitizer,
    capitalize,
    create_java_sanitizer,
    fire_method_name,
    listener_callback_name,
    listener_field_name,
    listener_interface_name,
)
from ...core.writer import SourceFileWriter
from .config import ObservableConfig

logger = get_logger(__name__)

# Modifiers of a source mutator that an overriding method must not repeat
_NOT_INHERITED = {Modifier.ABSTRACT, Modifier.NATIVE}


@dataclass(frozen=True)
class ObservedMutator:
    """A mutator together with every name generated for its subject."""

    mutator: Mutator
    listener_type: str
    field_name: str
    callback_name: str
    fire_name: str
    old_value_name: str
    new_value_name: str
    result_name: str

    @property
    def value_type(self) -> str:
        return self.mutator.state_type

    @property
    def accessor_call(self) -> str:
        return f"{self.mutator.accessor.name}()"


@dataclass
class ObservableModel(GenerationModel):
    """Everything the observable renderer needs to know."""

    parent: str = ""
    settings: ObservableConfig = field(default_factory=ObservableConfig)
    constructors: List[Constructor] = field(default_factory=list)
    observed: List[ObservedMutator] = field(default_factory=list)

    @property
    def wrapped_methods(self) -> List[Tuple[Method, List[ObservedMutator]]]:
        """Each observed method once, with the subjects it fires."""
        return [
            (method, list(group))
            for method, group in groupby(self.observed, key=lambda o: o.mutator.method)
        ]


def observe(mutator: Mutator, sanitizer: Optional[NameSanitizer] = None) -> ObservedMutator:
    """
    Derive the generated names for one mutator.

    Mutators sharing a method must share ``sanitizer`` so their locals in
    the common override stay distinct.
    """
    # Locals in the wrapper must not shadow the mutator's own parameter
    if sanitizer is None:
        sanitizer = create_java_sanitizer([mutator.parameter.name])
    return ObservedMutator(
        mutator=mutator,
        listener_type=listener_interface_name(mutator.subject),
        field_name=listener_field_name(mutator.subject),
        callback_name=listener_callback_name(mutator.subject),
        fire_name=fire_method_name(mutator.subject),
        old_value_name=sanitizer.sanitize_name("oldValue"),
        new_value_name=sanitizer.sanitize_name("newValue"),
        result_name=sanitizer.sanitize_name("result"),
    )


class ObservableGenerator(CodeGenerator):
    """Code generator for observable model subclasses."""

    @property
    def name(self) -> str:
        return "observable"

    @property
    def annotation_key(self) -> str:
        return "observable"

    @property
    def description(self) -> str:
        return "Subclasses that notify listeners when mutators change a value"

    @property
    def listener_list_type(self) -> str:
        return self.options.get("listener_list_impl", "java.util.ArrayList")

    def build_model(self, element: TypeElement) -> ObservableModel:
        validate_type_element(element)
        settings = ObservableConfig.from_annotation(
            element.get_annotation(self.annotation_key), self.options
        )

        constructors = extract_constructors(element, self.config.control_namespace)
        mutators, warnings = extract_mutators(
            element,
            settings.method_prefixes,
            settings.prefix_match,
            self.config.control_namespace,
        )
        model = ObservableModel(
            package=element.package,
            class_name=settings.name or f"Observable{element.simple_name}",
            source=element.qualified_name,
            provenance=self.provenance,
            warnings=warnings,
            parent=element.qualified_name,
            settings=settings,
            constructors=constructors,
        )
        for method, group in groupby(mutators, key=lambda m: m.method):
            sanitizer = create_java_sanitizer([p.name for p in method.parameters])
            model.observed.extend(observe(m, sanitizer) for m in group)

        if not model.observed:
            model.warnings.append(
                f"{element} has no methods starting with "
                f"{', '.join(settings.method_prefixes)}; nothing is observed"
            )

        logger.debug(
            "Observable %s: %d constructor(s), %d mutator(s)",
            model.qualified_name,
            len(constructors),
            len(model.observed),
        )
        return model

    def render(self, model: ObservableModel, writer: SourceFileWriter) -> None:
        writer.write_class_declaration_start(
            model.class_name, model.provenance, (Modifier.PUBLIC,)
        )
        writer.write_class_extends_declaration(model.parent)
        writer.write_class_declaration_end()

        for observed in model.observed:
            writer.write_field(
                f"java.util.List<{observed.listener_type}>",
                observed.field_name,
                (Modifier.PRIVATE, Modifier.FINAL),
            )

        self._write_constructors(model, writer)

        for method, group in model.wrapped_methods:
            self._write_wrapped_mutator(method, group, model.settings, writer)

        for observed in model.observed:
            self._write_listener_management(observed, "add", writer)
            self._write_listener_management(observed, "remove", writer)
            self._write_fire_method(observed, model.settings, writer)

        for observed in model.observed:
            self._write_interface(observed, model, writer)

        writer.write_block_end()

    def _write_constructors(
        self, model: ObservableModel, writer: SourceFileWriter
    ) -> None:
        # A type without declared constructors still has the implicit one
        constructors = model.constructors or [Constructor()]
        new_list = f"new {self.listener_list_type}<>()"

        for constructor in constructors:
            writer.write_constructor_declaration_start(
                model.class_name, (Modifier.PUBLIC,)
            )
            for parameter in constructor.parameters:
                writer.write_method_parameter(
                    parameter.annotations,
                    parameter.type,
                    parameter.name,
                    (Modifier.FINAL,),
                )
            writer.write_method_declaration_end(*constructor.thrown_types)

            writer.write_super_constructor_start()
            for parameter in constructor.parameters:
                writer.write_method_call_parameter(parameter.name)
            writer.write_method_call_end()

            for observed in model.observed:
                writer.write_field_assignment(observed.field_name, new_list)
            writer.write_block_end()

    @staticmethod
    def _write_wrapped_mutator(
        method: Method,
        group: List[ObservedMutator],
        settings: ObservableConfig,
        writer: SourceFileWriter,
    ) -> None:
        """One override per method, firing every subject it was matched for."""
        writer.write_method_declaration_start(
            method.return_type,
            method.name,
            method.modifiers - _NOT_INHERITED,
        )
        for parameter in method.parameters:
            writer.write_method_parameter(
                parameter.annotations, parameter.type, parameter.name, (Modifier.FINAL,)
            )
        writer.write_method_declaration_end(*method.thrown_types)

        if settings.old_value:
            for observed in group:
                writer.write_declaration_and_assignment(
                    observed.value_type, observed.old_value_name, observed.accessor_call
                )

        result_name = group[0].result_name
        if method.is_void:
            writer.write_super_method_start(method.name)
        else:
            writer.write_declaration_start(method.return_type, result_name)
            writer.write_super_method_start(method.name)
        for parameter in method.parameters:
            writer.write_method_call_parameter(parameter.name)
        writer.write_method_call_end()
        if not method.is_void:
            writer.write_statement_end()

        for observed in group:
            writer.write_declaration_and_assignment(
                observed.value_type, observed.new_value_name, observed.accessor_call
            )

        for observed in group:
            writer.write_method_call_start(observed.fire_name)
            if settings.old_value:
                writer.write_method_call_parameter(observed.old_value_name)
            writer.write_method_call_parameter(observed.new_value_name)
            writer.write_method_call_end()

        if not method.is_void:
            writer.write_return(result_name)
        writer.write_block_end()

    @staticmethod
    def _write_listener_management(
        observed: ObservedMutator, action: str, writer: SourceFileWriter
    ) -> None:
        subject = capitalize(observed.mutator.subject)
        writer.write_method_declaration_start(
            "void", f"{action}{subject}Listener", (Modifier.PUBLIC,)
        )
        writer.write_method_parameter((), observed.listener_type, "listener", (Modifier.FINAL,))
        writer.write_method_declaration_end()
        writer.write_method_call_start(f"{observed.field_name}.{action}")
        writer.write_method_call_parameter("listener")
        writer.write_method_call_end()
        writer.write_block_end()

    @staticmethod
    def _write_fire_method(
        observed: ObservedMutator,
        settings: ObservableConfig,
        writer: SourceFileWriter,
    ) -> None:
        writer.write_method_declaration_start(
            "void", observed.fire_name, (Modifier.PRIVATE,)
        )
        if settings.old_value:
            writer.write_method_parameter(
                (), observed.value_type, "oldValue", (Modifier.FINAL,)
            )
        writer.write_method_parameter((), observed.value_type, "newValue", (Modifier.FINAL,))
        writer.write_method_declaration_end()

        writer.write_new_for_loop_start(
            observed.listener_type, "listener", observed.field_name
        )
        writer.write_method_call_start(f"listener.{observed.callback_name}")
        if settings.old_value:
            writer.write_method_call_parameter("oldValue")
        writer.write_method_call_parameter("newValue")
        writer.write_method_call_end()
        writer.write_for_loop_end()
        writer.write_block_end()

    @staticmethod
    def _write_interface(
        observed: ObservedMutator, model: ObservableModel, writer: SourceFileWriter
    ) -> None:
        writer.write_interface_declaration(
            observed.listener_type, model.provenance, (Modifier.PUBLIC,)
        )
        writer.write_method_declaration_start("void", observed.callback_name)
        if model.settings.old_value:
            writer.write_method_parameter((), observed.value_type, "oldValue")
        writer.write_method_parameter((), observed.value_type, "newValue")
        writer.write_interface_method_declaration_end()
        writer.write_interface_block_end()
