"""
Template engine wrapper for code generation.

Provides a small Jinja2 wrapper used to render the header comment placed at
the top of every generated file, with filters useful for Java naming.
"""

from typing import Any, Dict, Optional

from jinja2 import DictLoader, Environment, StrictUndefined, TemplateError as JinjaError

from .naming import capitalize, decapitalize


class TemplateError(Exception):
    """Exception raised for template-related errors."""

    pass


DEFAULT_HEADER_TEMPLATE = (
    "Generated by {{ generator }} from {{ source }}.\n"
    "Do not edit: changes are overwritten the next time sources are generated."
)


class TemplateEngine:
    """Wrapper for the Jinja2 environment with code generation filters."""

    def __init__(self, templates: Optional[Dict[str, str]] = None):
        """
        Initialize template engine.

        Args:
            templates: In-memory templates keyed by name
        """
        self._env = Environment(
            loader=DictLoader(dict(templates or {})),
            autoescape=False,
            keep_trailing_newline=False,
            undefined=StrictUndefined,
        )

        self._env.filters["capitalize_first"] = capitalize
        self._env.filters["decapitalize"] = decapitalize
        self._env.filters["simple_name"] = self._simple_name_filter

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a named template with the given context.

        Args:
            template_name: Name of a registered template
            context: Variables to pass to template

        Returns:
            Rendered template content
        """
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except JinjaError as e:
            raise TemplateError(f"Failed to render template {template_name}: {e}") from e

    def render_string(self, template_string: str, context: Dict[str, Any]) -> str:
        """
        Render a template string with the given context.

        Args:
            template_string: Template content as string
            context: Variables to pass to template

        Returns:
            Rendered content
        """
        try:
            template = self._env.from_string(template_string)
            return template.render(**context)
        except JinjaError as e:
            raise TemplateError(f"Failed to render template string: {e}") from e

    def add_template(self, name: str, content: str):
        """Register an in-memory template."""
        self._env.loader.mapping[name] = content

    def template_exists(self, name: str) -> bool:
        return name in self._env.loader.mapping

    @staticmethod
    def _simple_name_filter(value: str) -> str:
        """``com.example.Account`` -> ``Account``."""
        return str(value).rsplit(".", 1)[-1]


def create_template_engine(header_template: Optional[str] = None) -> TemplateEngine:
    """Create an engine with the ``header`` template registered."""
    return TemplateEngine({"header": header_template or DEFAULT_HEADER_TEMPLATE})
