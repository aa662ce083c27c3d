"""
Naming utilities for safe code generation.

Handles Java identifier rules, reserved words, bean-style capitalisation,
boxing of primitive types, and collision-free allocation of generated
local names.
"""

import re
from typing import Iterable, Optional, Set


JAVA_RESERVED_WORDS = {
    "abstract", "assert", "boolean", "break", "byte", "case", "catch",
    "char", "class", "const", "continue", "default", "do", "double",
    "else", "enum", "extends", "final", "finally", "float", "for", "goto",
    "if", "implements", "import", "instanceof", "int", "interface", "long",
    "native", "new", "package", "private", "protected", "public", "return",
    "short", "static", "strictfp", "super", "switch", "synchronized",
    "this", "throw", "throws", "transient", "try", "void", "volatile",
    "while", "true", "false", "null", "_",
}

JAVA_PRIMITIVE_BOXES = {
    "boolean": "java.lang.Boolean",
    "byte": "java.lang.Byte",
    "char": "java.lang.Character",
    "short": "java.lang.Short",
    "int": "java.lang.Integer",
    "long": "java.lang.Long",
    "float": "java.lang.Float",
    "double": "java.lang.Double",
}

BOOLEAN_TYPES = {"boolean", "java.lang.Boolean", "Boolean"}

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def is_java_identifier(name: str) -> bool:
    """Check whether ``name`` is a legal, non-reserved Java identifier."""
    return bool(name) and bool(_IDENTIFIER.match(name)) and name not in JAVA_RESERVED_WORDS


def is_qualified_name(name: str) -> bool:
    """Check a dotted name such as a package, each part an identifier."""
    return bool(name) and all(is_java_identifier(part) for part in name.split("."))


def capitalize(name: str) -> str:
    """Upper-case the first character only."""
    return name[:1].upper() + name[1:]


def decapitalize(name: str) -> str:
    """
    Lower-case the first character, bean style.

    Names that start with two upper-case characters (``URL``) are left
    alone, matching java.beans.Introspector.
    """
    if not name:
        return name
    if len(name) > 1 and name[0].isupper() and name[1].isupper():
        return name
    return name[0].lower() + name[1:]


def strip_prefix(name: str, prefix: str) -> Optional[str]:
    """
    Return what remains of ``name`` after ``prefix``.

    Returns None if the name does not start with the prefix or nothing
    remains after it.
    """
    if not name.startswith(prefix):
        return None
    remainder = name[len(prefix):]
    return remainder or None


def box_type(type_name: str) -> str:
    """Return the reference type for a primitive, or the type unchanged."""
    return JAVA_PRIMITIVE_BOXES.get(type_name, type_name)


def raw_type(type_name: str) -> str:
    """Strip generic arguments: ``java.util.List<String>`` -> ``java.util.List``."""
    return type_name.split("<", 1)[0].strip()


class NameSanitizer:
    """Allocates identifiers that avoid reserved words and names in use."""

    def __init__(
        self,
        reserved_words: Set[str] = None,
        used_names: Optional[Iterable[str]] = None,
    ):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            used_names: Names already taken in the current scope
        """
        self.reserved_words = (
            reserved_words if reserved_words is not None else JAVA_RESERVED_WORDS
        )
        self._used_names: Set[str] = set(used_names or ())

    def sanitize_name(self, name: str, suffix_on_conflict: str = "_") -> str:
        """
        Return a safe, unused variant of ``name`` and mark it as used.

        Args:
            name: Preferred name
            suffix_on_conflict: Separator placed before the disambiguating counter

        Returns:
            Name safe for use in the current scope
        """
        final_name = self._resolve_conflicts(name, suffix_on_conflict)
        self._used_names.add(final_name)
        return final_name

    def _resolve_conflicts(self, name: str, suffix: str) -> str:
        candidate = name
        if candidate in self.reserved_words:
            candidate = f"{candidate}{suffix}"

        base = candidate
        counter = 1
        while candidate in self._used_names:
            candidate = f"{base}{suffix}{counter}"
            counter += 1
        return candidate

    def reset_used_names(self):
        """Reset the tracking of used names."""
        self._used_names.clear()

    def add_used_name(self, name: str):
        """Manually mark a name as taken."""
        self._used_names.add(name)

    def is_used(self, name: str) -> bool:
        return name in self._used_names


def create_java_sanitizer(used_names: Optional[Iterable[str]] = None) -> NameSanitizer:
    """Create a name sanitizer configured for Java."""
    return NameSanitizer(JAVA_RESERVED_WORDS, used_names)


# Names derived from a mutator subject


def listener_interface_name(subject: str) -> str:
    return f"{capitalize(subject)}Listener"


def listener_field_name(subject: str) -> str:
    return f"{decapitalize(subject)}Listeners"


def listener_callback_name(subject: str) -> str:
    return f"{decapitalize(subject)}Changed"


def fire_method_name(subject: str) -> str:
    return f"fire{capitalize(subject)}Listener"
