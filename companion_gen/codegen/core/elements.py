"""
Host-side element descriptions.

These objects stand in for the compiler's reflection handles: a type,
its enclosed constructors and methods, their parameters and the annotation
mirrors applied to them. They are parsed from a JSON descriptor document
exported by the host toolchain.

A descriptor document looks like::

    {
      "types": [
        {
          "name": "Account",
          "package": "com.example",
          "annotations": {"factory": {"singleton": true}},
          "members": [
            {"kind": "constructor",
             "parameters": [{"type": "java.lang.String", "name": "id"}]},
            {"kind": "method", "name": "setOwner", "return_type": "void",
             "modifiers": ["public"],
             "parameters": [{"type": "java.lang.String", "name": "owner"}]}
          ]
        }
      ]
    }
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from .model import Modifier, to_modifier_set


class DescriptorError(Exception):
    """Exception raised for malformed type descriptor documents."""

    pass


class ElementKind(Enum):
    """Kinds of members enclosed by a type."""

    CONSTRUCTOR = "constructor"
    METHOD = "method"
    FIELD = "field"


_ANNOTATION_TYPE = re.compile(r"^@\s*([A-Za-z_$][\w$]*(?:\s*\.\s*[A-Za-z_$][\w$]*)*)")


@dataclass(frozen=True)
class AnnotationMirror:
    """An annotation as applied in source: its type and its full text."""

    type_name: str
    text: str

    @classmethod
    def from_text(cls, text: str) -> "AnnotationMirror":
        """Build a mirror from raw annotation text such as ``@Named("x")``."""
        match = _ANNOTATION_TYPE.match(text.strip())
        if not match:
            raise DescriptorError(f"Not an annotation: {text!r}")
        type_name = re.sub(r"\s+", "", match.group(1))
        return cls(type_name=type_name, text=text.strip())

    @property
    def simple_name(self) -> str:
        return self.type_name.rsplit(".", 1)[-1]

    def in_namespace(self, namespace: str) -> bool:
        """Whether this annotation's type lives under the given package."""
        if not namespace:
            return False
        return self.type_name == namespace or self.type_name.startswith(namespace + ".")


@dataclass(frozen=True)
class VariableElement:
    """A constructor or method parameter as seen by the host."""

    type: str
    name: str
    annotations: Tuple[AnnotationMirror, ...] = ()


@dataclass(frozen=True)
class ExecutableElement:
    """A constructor or method enclosed by a type."""

    kind: ElementKind
    name: str
    return_type: str = "void"
    parameters: Tuple[VariableElement, ...] = ()
    thrown_types: Tuple[str, ...] = ()
    modifiers: FrozenSet[Modifier] = field(default_factory=frozenset)


@dataclass
class TypeElement:
    """An annotated type and everything the generators may read from it."""

    simple_name: str
    package: str = ""
    enclosed_elements: List[ExecutableElement] = field(default_factory=list)
    annotations: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @property
    def qualified_name(self) -> str:
        if self.package:
            return f"{self.package}.{self.simple_name}"
        return self.simple_name

    def get_annotation(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the configuration values of annotation ``key``, if applied."""
        return self.annotations.get(key)

    def has_annotation(self, key: str) -> bool:
        return key in self.annotations

    def elements_of_kind(self, kind: ElementKind) -> List[ExecutableElement]:
        return [e for e in self.enclosed_elements if e.kind == kind]

    def __str__(self) -> str:
        return self.qualified_name


def parse_annotation(data: Any) -> AnnotationMirror:
    """Parse an annotation entry: raw text or ``{"type": ..., "text": ...}``."""
    if isinstance(data, str):
        return AnnotationMirror.from_text(data)
    if isinstance(data, dict):
        text = data.get("text")
        type_name = data.get("type")
        if text is None and type_name is None:
            raise DescriptorError(f"Annotation needs 'type' or 'text': {data!r}")
        if text is None:
            text = f"@{type_name}"
        if type_name is None:
            return AnnotationMirror.from_text(text)
        return AnnotationMirror(type_name=type_name, text=text)
    raise DescriptorError(f"Invalid annotation entry: {data!r}")


def parse_variable(data: Dict[str, Any]) -> VariableElement:
    """Parse one parameter entry."""
    try:
        type_name = data["type"]
        name = data["name"]
    except (KeyError, TypeError):
        raise DescriptorError(f"Parameter needs 'type' and 'name': {data!r}")

    annotations = [parse_annotation(a) for a in data.get("annotations", [])]
    return VariableElement(
        type=str(type_name), name=str(name), annotations=tuple(annotations)
    )


def parse_member(data: Dict[str, Any], owner: str) -> ExecutableElement:
    """Parse one enclosed member entry."""
    if not isinstance(data, dict):
        raise DescriptorError(f"Invalid member in {owner}: {data!r}")

    try:
        kind = ElementKind(data.get("kind", "method"))
    except ValueError:
        raise DescriptorError(f"Unknown member kind in {owner}: {data.get('kind')!r}")

    if kind == ElementKind.CONSTRUCTOR:
        name = "<init>"
    else:
        name = data.get("name")
        if not name:
            raise DescriptorError(f"Member of {owner} has no name: {data!r}")

    try:
        modifiers = to_modifier_set(data.get("modifiers", []))
    except ValueError as e:
        raise DescriptorError(f"{owner}.{name}: {e}") from e

    return ExecutableElement(
        kind=kind,
        name=name,
        return_type=str(data.get("return_type", "void")),
        parameters=tuple(parse_variable(p) for p in data.get("parameters", [])),
        thrown_types=tuple(str(t) for t in data.get("thrown", [])),
        modifiers=modifiers,
    )


def parse_type_element(data: Dict[str, Any]) -> TypeElement:
    """
    Convert one descriptor entry into a TypeElement.

    Args:
        data: Parsed JSON object describing a single type

    Returns:
        TypeElement

    Raises:
        DescriptorError: If the entry is malformed
    """
    if not isinstance(data, dict):
        raise DescriptorError(f"Type entry must be an object: {data!r}")

    name = data.get("name")
    if not name:
        raise DescriptorError(f"Type entry has no name: {data!r}")

    package = data.get("package", "") or ""
    annotations = data.get("annotations", {}) or {}
    if not isinstance(annotations, dict):
        raise DescriptorError(f"'annotations' of {name} must be an object")

    owner = f"{package}.{name}" if package else name
    members = [parse_member(m, owner) for m in data.get("members", [])]

    # An annotation applied without values is written as true or null.
    normalized = {
        key: (value if isinstance(value, dict) else {})
        for key, value in annotations.items()
        if value is not False
    }

    return TypeElement(
        simple_name=str(name),
        package=str(package),
        enclosed_elements=members,
        annotations=normalized,
    )


def parse_type_elements(document: Any) -> List[TypeElement]:
    """
    Parse a whole descriptor document.

    Accepts ``{"types": [...]}``, a bare list of type entries, or a single
    type entry.
    """
    if isinstance(document, dict) and "types" in document:
        entries = document["types"]
    elif isinstance(document, list):
        entries = document
    elif isinstance(document, dict):
        entries = [document]
    else:
        raise DescriptorError("Descriptor document must be an object or a list")

    if not isinstance(entries, list):
        raise DescriptorError("'types' must be a list")

    return [parse_type_element(entry) for entry in entries]
