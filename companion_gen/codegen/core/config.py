"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files, providing
defaults and validation for generator settings.
"""

import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ...logging_config import get_logger

logger = get_logger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


LINE_ENDINGS = {"lf": "\n", "crlf": "\r\n"}

DEFAULT_CONTROL_NAMESPACE = "com.companion.annotations"


@dataclass
class GeneratorConfig:
    """Run-wide configuration shared by all generators."""

    # Code style settings
    indent_width: int = 4
    line_ending: str = "\n"

    # Annotations written into generated code
    generated_annotation: Optional[str] = "javax.annotation.Generated"
    inject_annotation: str = "@javax.inject.Inject"
    singleton_annotation: str = "@javax.inject.Singleton"
    provider_type: str = "javax.inject.Provider"

    # Annotations under this package are control data, never echoed
    control_namespace: str = DEFAULT_CONTROL_NAMESPACE

    # Header comment
    add_comments: bool = True
    header_template: Optional[str] = None

    # Generator-specific extras
    generator_options: Dict[str, Any] = field(default_factory=dict)

    @property
    def unbound_annotation(self) -> str:
        return f"{self.control_namespace}.factory.Unbound"


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._load_defaults()

    def _load_defaults(self):
        """Load default configurations for the built-in generators."""
        self._configs["factory"] = {
            "add_comments": True,
            "generator_options": {
                "default_class_modifiers": ["public"],
                "default_method_modifiers": ["public"],
            },
        }

        self._configs["observable"] = {
            "add_comments": True,
            "generator_options": {
                "default_method_prefixes": ["set"],
                "default_prefix_match": "first",
            },
        }

    def get_config(
        self,
        generator: Optional[str] = None,
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Get complete configuration, optionally for one generator.

        Args:
            generator: Generator name whose defaults to start from
            custom_config: Explicit overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration
        """
        base_config = json.loads(json.dumps(self._configs.get(generator or "", {})))

        if config_file:
            file_config = self._load_config_file(config_file)
            self._merge(base_config, file_config)

        if custom_config:
            self._merge(base_config, custom_config)

        config = self._dict_to_config(base_config)
        for warning in self.validate_config(config):
            logger.warning("Configuration: %s", warning)
        return config

    @staticmethod
    def _merge(target: Dict[str, Any], overrides: Dict[str, Any]) -> None:
        for key, value in overrides.items():
            if key == "generator_options" and isinstance(value, dict):
                target.setdefault("generator_options", {}).update(value)
            else:
                target[key] = value

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        logger.debug("Loaded configuration file %s", path)
        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig, collecting unknown keys as options."""
        known_fields = {f.name for f in fields(GeneratorConfig)}

        config_args = {}
        extra_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                extra_args[key] = value

        if extra_args:
            options = dict(config_args.get("generator_options", {}))
            options.update(extra_args)
            config_args["generator_options"] = options

        line_ending = config_args.get("line_ending")
        if isinstance(line_ending, str) and line_ending.lower() in LINE_ENDINGS:
            config_args["line_ending"] = LINE_ENDINGS[line_ending.lower()]

        return GeneratorConfig(**config_args)

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Save configuration to JSON file."""
        path = Path(output_path)
        config_dict = asdict(config)

        for name, ending in LINE_ENDINGS.items():
            if config_dict["line_ending"] == ending:
                config_dict["line_ending"] = name

        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(config_dict, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {e}") from e

    def list_generators(self) -> List[str]:
        """Get names of generators with registered defaults."""
        return list(self._configs.keys())

    def validate_config(self, config: GeneratorConfig) -> List[str]:
        """
        Validate a configuration.

        Returns:
            List of validation warnings
        """
        warnings = []

        if not isinstance(config.indent_width, int) or config.indent_width < 0:
            warnings.append(f"Invalid indent_width: {config.indent_width}")

        if config.line_ending not in LINE_ENDINGS.values():
            warnings.append(f"Unusual line_ending: {config.line_ending!r}")

        if not config.control_namespace:
            warnings.append(
                "Empty control_namespace: control annotations will be echoed"
            )

        if not config.inject_annotation.startswith("@"):
            warnings.append(f"inject_annotation should start with '@': {config.inject_annotation}")

        if not config.singleton_annotation.startswith("@"):
            warnings.append(
                f"singleton_annotation should start with '@': {config.singleton_annotation}"
            )

        return warnings


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    generator: Optional[str] = None,
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        generator: Generator name whose defaults to start from
        custom_config: Explicit overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration
    """
    manager = get_config_manager()
    return manager.get_config(generator, custom_config, config_file)


def coerce_bool(value: Any, key: str) -> bool:
    """Read a boolean annotation value, rejecting anything else."""
    if isinstance(value, bool):
        return value
    raise ConfigError(f"'{key}' must be true or false, got {value!r}")


def coerce_string_list(value: Any, key: str) -> List[str]:
    """Read an array-of-strings annotation value (a bare string is one item)."""
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value):
        return list(value)
    raise ConfigError(f"'{key}' must be a string or a list of strings, got {value!r}")

