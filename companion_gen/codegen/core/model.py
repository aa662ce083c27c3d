"""
Structural model consumed by the generators.

Immutable descriptions of callable signatures extracted from a type:
parameters, methods, constructors, and resolved mutator/accessor pairs.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional, Tuple, Union


class Modifier(Enum):
    """Java modifier keywords, declared in canonical source order."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"
    ABSTRACT = "abstract"
    DEFAULT = "default"
    STATIC = "static"
    FINAL = "final"
    TRANSIENT = "transient"
    VOLATILE = "volatile"
    SYNCHRONIZED = "synchronized"
    NATIVE = "native"
    STRICTFP = "strictfp"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Union[str, "Modifier"]) -> "Modifier":
        """Parse a modifier keyword (case-insensitive)."""
        if isinstance(value, Modifier):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown modifier: {value!r}") from None


_MODIFIER_ORDER = {modifier: index for index, modifier in enumerate(Modifier)}


def sort_modifiers(
    modifiers: Iterable[Union[str, Modifier]],
) -> List[Modifier]:
    """Return modifiers de-duplicated and in canonical Java order."""
    parsed = {Modifier.parse(m) for m in modifiers}
    return sorted(parsed, key=_MODIFIER_ORDER.__getitem__)


def to_modifier_set(
    modifiers: Optional[Iterable[Union[str, Modifier]]],
) -> FrozenSet[Modifier]:
    """Normalise any iterable of modifier names into a frozenset."""
    return frozenset(Modifier.parse(m) for m in (modifiers or ()))


@dataclass(frozen=True, eq=False)
class Parameter:
    """
    A single parameter of a constructor or method.

    Equality and hashing are structural on the rendered text, so two
    parameters declared on different constructors are the same parameter
    exactly when they render identically. The ``unbound`` flag records the
    control marker seen during extraction and takes no part in equality.
    """

    type: str
    name: str
    annotations: Tuple[str, ...] = ()
    unbound: bool = False

    @property
    def annotation_text(self) -> str:
        return " ".join(self.annotations)

    def __str__(self) -> str:
        prefix = self.annotation_text
        return f"{prefix} {self.type} {self.name}" if prefix else f"{self.type} {self.name}"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Parameter):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(str(self))


@dataclass(frozen=True)
class Method:
    """Signature of one source method."""

    name: str
    return_type: str = "void"
    parameters: Tuple[Parameter, ...] = ()
    thrown_types: Tuple[str, ...] = ()
    modifiers: FrozenSet[Modifier] = field(default_factory=frozenset)

    @property
    def is_void(self) -> bool:
        return self.return_type == "void"

    @property
    def is_overridable(self) -> bool:
        return not (
            {Modifier.PRIVATE, Modifier.STATIC, Modifier.FINAL} & self.modifiers
        )

    def __str__(self) -> str:
        mods = " ".join(str(m) for m in sort_modifiers(self.modifiers))
        params = ", ".join(str(p) for p in self.parameters)
        text = f"{self.return_type} {self.name}({params})"
        if mods:
            text = f"{mods} {text}"
        if self.thrown_types:
            text += " throws " + ", ".join(self.thrown_types)
        return text


@dataclass(frozen=True)
class Constructor:
    """Signature of one source constructor."""

    parameters: Tuple[Parameter, ...] = ()
    thrown_types: Tuple[str, ...] = ()

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        text = f"<init>({params})"
        if self.thrown_types:
            text += " throws " + ", ".join(self.thrown_types)
        return text


@dataclass(frozen=True)
class Mutator:
    """
    A state-changing method paired with the accessor that reads its state.

    The pairing is resolved once, at model construction, so generators never
    derive accessor names on their own.
    """

    method: Method
    prefix: str
    subject: str
    accessor: Method

    @property
    def value_type(self) -> str:
        return self.method.parameters[0].type

    @property
    def state_type(self) -> str:
        """Type of the value read back through the accessor."""
        return self.accessor.return_type

    @property
    def parameter(self) -> Parameter:
        return self.method.parameters[0]
