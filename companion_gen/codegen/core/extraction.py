"""
Structural model extraction.

Reads constructors, methods and mutators from a TypeElement and converts
them into the immutable model the generators consume. Annotations in the
control namespace are configuration, not payload, and are never copied into
a Parameter.
"""

from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ...logging_config import get_logger
from .config import DEFAULT_CONTROL_NAMESPACE
from .elements import ElementKind, ExecutableElement, TypeElement, VariableElement
from .generator import GeneratorError
from .model import Constructor, Method, Modifier, Mutator, Parameter
from .naming import BOOLEAN_TYPES, is_java_identifier, is_qualified_name, strip_prefix

logger = get_logger(__name__)


class ExtractionError(GeneratorError):
    """Raised when a type has a shape the generators cannot support."""

    pass


class PrefixMatch(Enum):
    """How a method name that matches several prefixes is treated."""

    FIRST = "first"  # only the first configured prefix that matches
    ALL = "all"  # one mutator per matching prefix


def get_annotations(
    variable: VariableElement, namespace: str = DEFAULT_CONTROL_NAMESPACE
) -> Tuple[str, ...]:
    """Annotation texts of ``variable`` outside the control namespace."""
    return tuple(
        mirror.text
        for mirror in variable.annotations
        if not mirror.in_namespace(namespace)
    )


def is_unbound(variable: VariableElement, unbound_annotation: Optional[str]) -> bool:
    if not unbound_annotation:
        return False
    return any(m.type_name == unbound_annotation for m in variable.annotations)


def to_parameter(
    variable: VariableElement,
    namespace: str = DEFAULT_CONTROL_NAMESPACE,
    unbound_annotation: Optional[str] = None,
) -> Parameter:
    return Parameter(
        type=variable.type,
        name=variable.name,
        annotations=get_annotations(variable, namespace),
        unbound=is_unbound(variable, unbound_annotation),
    )


def validate_type_element(element: TypeElement) -> None:
    """
    Check that every name in ``element`` is a usable Java identifier.

    Raises:
        ExtractionError: On the first invalid name
    """
    if not is_java_identifier(element.simple_name):
        raise ExtractionError(f"Invalid type name: {element.simple_name!r}")
    if element.package and not is_qualified_name(element.package):
        raise ExtractionError(f"Invalid package name for {element.simple_name}: {element.package!r}")

    for member in element.enclosed_elements:
        if member.kind == ElementKind.METHOD and not is_java_identifier(member.name):
            raise ExtractionError(f"Invalid method name in {element}: {member.name!r}")
        for variable in member.parameters:
            if not is_java_identifier(variable.name):
                raise ExtractionError(
                    f"Invalid parameter name in {element}.{member.name}: {variable.name!r}"
                )


def extract_constructors(
    element: TypeElement,
    namespace: str = DEFAULT_CONTROL_NAMESPACE,
    unbound_annotation: Optional[str] = None,
) -> List[Constructor]:
    """
    Constructors of ``element`` in source order.

    Args:
        element: Type to read
        namespace: Control annotation namespace to strip
        unbound_annotation: Qualified name of the marker that flags a
            parameter as unbound, if the caller cares

    Returns:
        List of Constructor
    """
    constructors = []
    for member in element.elements_of_kind(ElementKind.CONSTRUCTOR):
        params = tuple(
            to_parameter(v, namespace, unbound_annotation) for v in member.parameters
        )
        constructors.append(Constructor(params, tuple(member.thrown_types)))
    return constructors


def to_method(
    member: ExecutableElement, namespace: str = DEFAULT_CONTROL_NAMESPACE
) -> Method:
    return Method(
        name=member.name,
        return_type=member.return_type,
        parameters=tuple(to_parameter(v, namespace) for v in member.parameters),
        thrown_types=tuple(member.thrown_types),
        modifiers=frozenset(member.modifiers),
    )


def extract_methods(
    element: TypeElement, namespace: str = DEFAULT_CONTROL_NAMESPACE
) -> List[Method]:
    """Every declared method of ``element`` in source order."""
    return [to_method(m, namespace) for m in element.elements_of_kind(ElementKind.METHOD)]


def match_prefixes(name: str, prefixes: Sequence[str]) -> List[Tuple[str, str]]:
    """
    Return ``(prefix, subject)`` for each prefix ``name`` matches, in order.

    A prefix matches when it is followed by a non-empty subject that does
    not start with a lower-case letter, so ``settle`` is not a ``set`` method.
    """
    matches = []
    for prefix in prefixes:
        subject = strip_prefix(name, prefix)
        if subject is None or subject[0].islower():
            continue
        matches.append((prefix, subject))
    return matches


def find_accessor(
    methods: Iterable[Method], subject: str, value_type: str
) -> Optional[Method]:
    """Find the zero-argument ``get<Subject>`` (or ``is<Subject>``) method."""
    candidates = [f"get{subject}"]
    if value_type in BOOLEAN_TYPES:
        candidates.append(f"is{subject}")

    by_name: Dict[str, Method] = {}
    for method in methods:
        if not method.parameters and method.name not in by_name:
            by_name[method.name] = method

    for candidate in candidates:
        if candidate in by_name:
            return by_name[candidate]
    return None


def extract_mutators(
    element: TypeElement,
    prefixes: Sequence[str] = ("set",),
    policy: PrefixMatch = PrefixMatch.FIRST,
    namespace: str = DEFAULT_CONTROL_NAMESPACE,
) -> Tuple[List[Mutator], List[str]]:
    """
    Prefix-matched mutators of ``element``, each paired with its accessor.

    Args:
        element: Type to read
        prefixes: Method name prefixes that mark a mutator, in priority order
        policy: Treatment of names that match several prefixes
        namespace: Control annotation namespace to strip

    Returns:
        Tuple of (mutators in source order, warnings)

    Raises:
        ExtractionError: If a matched mutator does not take exactly one
            parameter, has no usable accessor, or shares its subject with
            another mutator
    """
    methods = extract_methods(element, namespace)
    mutators: List[Mutator] = []
    warnings: List[str] = []
    subjects: Dict[str, Method] = {}

    for method in methods:
        matches = match_prefixes(method.name, prefixes)
        if not matches:
            continue

        if len(matches) > 1:
            matched = ", ".join(repr(prefix) for prefix, _ in matches)
            warnings.append(
                f"{element}.{method.name} matches several prefixes ({matched}); "
                f"using {'the first' if policy == PrefixMatch.FIRST else 'all of them'}"
            )
            if policy == PrefixMatch.FIRST:
                matches = matches[:1]

        if not method.is_overridable:
            warnings.append(
                f"{element}.{method.name} cannot be overridden and is not observed"
            )
            continue
        if Modifier.ABSTRACT in method.modifiers:
            warnings.append(
                f"{element}.{method.name} is abstract and is not observed"
            )
            continue

        if len(method.parameters) != 1:
            raise ExtractionError(
                f"Mutator {element}.{method.name} must take exactly one parameter, "
                f"found {len(method.parameters)}"
            )

        value_type = method.parameters[0].type
        for prefix, subject in matches:
            accessor = find_accessor(methods, subject, value_type)
            if accessor is None:
                raise ExtractionError(
                    f"Mutator {element}.{method.name} has no accessor "
                    f"get{subject}() to read its value"
                )
            if Modifier.PRIVATE in accessor.modifiers:
                raise ExtractionError(
                    f"Accessor {element}.{accessor.name} of {method.name} is private"
                )
            if accessor.return_type != value_type:
                warnings.append(
                    f"{element}.{accessor.name} returns {accessor.return_type} "
                    f"but {method.name} takes {value_type}"
                )

            if subject in subjects:
                raise ExtractionError(
                    f"Mutators {element}.{subjects[subject].name} and "
                    f"{method.name} both observe '{subject}'"
                )
            subjects[subject] = method
            mutators.append(Mutator(method, prefix, subject, accessor))

    logger.debug("Extracted %d mutator(s) from %s", len(mutators), element)
    return mutators, warnings
