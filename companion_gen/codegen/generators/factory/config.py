"""
Factory-specific configuration and validation.

Reads the values of a type's ``factory`` annotation into a FactoryConfig,
filling gaps from the generator defaults.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional

from ...core.config import ConfigError, coerce_bool, coerce_string_list
from ...core.model import Modifier, to_modifier_set
from ...core.naming import is_java_identifier

ANNOTATION_KEYS = {
    "inject",
    "singleton",
    "providers",
    "name",
    "modifiers",
    "method_modifiers",
}


@dataclass(frozen=True)
class FactoryConfig:
    """Per-type factory settings."""

    inject: bool = False
    singleton: bool = False
    providers: bool = False
    name: Optional[str] = None
    modifiers: FrozenSet[Modifier] = field(
        default_factory=lambda: frozenset({Modifier.PUBLIC})
    )
    method_modifiers: FrozenSet[Modifier] = field(
        default_factory=lambda: frozenset({Modifier.PUBLIC})
    )

    @classmethod
    def from_annotation(
        cls,
        values: Optional[Dict[str, Any]],
        defaults: Optional[Dict[str, Any]] = None,
    ) -> "FactoryConfig":
        """
        Build a FactoryConfig from annotation values.

        Args:
            values: Values declared on the type's ``factory`` annotation
            defaults: Generator options; ``default_class_modifiers`` and
                ``default_method_modifiers`` apply when the annotation is silent

        Returns:
            FactoryConfig

        Raises:
            ConfigError: On unknown keys or values of the wrong shape
        """
        values = dict(values or {})
        defaults = defaults or {}

        unknown = set(values) - ANNOTATION_KEYS
        if unknown:
            raise ConfigError(
                f"Unknown factory option(s): {', '.join(sorted(unknown))}"
            )

        name = values.get("name") or None
        if name is not None and not is_java_identifier(str(name)):
            raise ConfigError(f"Invalid factory name: {name!r}")

        modifiers = _modifiers(
            values.get("modifiers", defaults.get("default_class_modifiers", ["public"])),
            "modifiers",
        )
        method_modifiers = _modifiers(
            values.get(
                "method_modifiers",
                defaults.get("default_method_modifiers", ["public"]),
            ),
            "method_modifiers",
        )

        return cls(
            inject=coerce_bool(values.get("inject", False), "inject"),
            singleton=coerce_bool(values.get("singleton", False), "singleton"),
            providers=coerce_bool(values.get("providers", False), "providers"),
            name=name,
            modifiers=modifiers,
            method_modifiers=method_modifiers,
        )


def _modifiers(value: Any, key: str) -> FrozenSet[Modifier]:
    try:
        return to_modifier_set(coerce_string_list(value, key))
    except ValueError as e:
        raise ConfigError(f"'{key}': {e}") from e
