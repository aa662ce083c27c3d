"""
Observable-specific configuration and validation.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ...core.config import ConfigError, coerce_bool, coerce_string_list
from ...core.extraction import PrefixMatch
from ...core.naming import is_java_identifier

ANNOTATION_KEYS = {"name", "method_prefixes", "old_value", "prefix_match"}


@dataclass(frozen=True)
class ObservableConfig:
    """Per-type observable settings."""

    name: Optional[str] = None
    method_prefixes: Tuple[str, ...] = ("set",)
    old_value: bool = True
    prefix_match: PrefixMatch = PrefixMatch.FIRST

    @classmethod
    def from_annotation(
        cls,
        values: Optional[Dict[str, Any]],
        defaults: Optional[Dict[str, Any]] = None,
    ) -> "ObservableConfig":
        """
        Build an ObservableConfig from annotation values.

        Args:
            values: Values declared on the type's ``observable`` annotation
            defaults: Generator options; ``default_method_prefixes`` and
                ``default_prefix_match`` apply when the annotation is silent

        Raises:
            ConfigError: On unknown keys or invalid values
        """
        values = dict(values or {})
        defaults = defaults or {}

        unknown = set(values) - ANNOTATION_KEYS
        if unknown:
            raise ConfigError(
                f"Unknown observable option(s): {', '.join(sorted(unknown))}"
            )

        name = values.get("name") or None
        if name is not None and not is_java_identifier(str(name)):
            raise ConfigError(f"Invalid observable name: {name!r}")

        prefixes = coerce_string_list(
            values.get("method_prefixes", defaults.get("default_method_prefixes", ["set"])),
            "method_prefixes",
        )
        if not prefixes:
            raise ConfigError("'method_prefixes' must name at least one prefix")
        for prefix in prefixes:
            if not is_java_identifier(prefix):
                raise ConfigError(f"Invalid method prefix: {prefix!r}")

        prefix_match = values.get(
            "prefix_match", defaults.get("default_prefix_match", "first")
        )
        try:
            policy = PrefixMatch(str(prefix_match).lower())
        except ValueError:
            raise ConfigError(
                f"'prefix_match' must be 'first' or 'all', got {prefix_match!r}"
            ) from None

        return cls(
            name=name,
            method_prefixes=tuple(dict.fromkeys(prefixes)),
            old_value=coerce_bool(values.get("old_value", True), "old_value"),
            prefix_match=policy,
        )
