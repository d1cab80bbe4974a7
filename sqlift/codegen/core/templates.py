"""
Template engine wrapper for code generation.

Each generator owns one engine, built when the generator is constructed, so
several generators can coexist without sharing template state.
"""

from pathlib import Path
from typing import Any, Dict, List

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
)
from jinja2 import TemplateError as JinjaTemplateError


class TemplateError(Exception):
    """Exception raised for template-related errors."""

    pass


class TemplateEngine:
    """Wrapper for a Jinja2 environment used by one generator."""

    def __init__(self, template_dir: Path):
        """
        Initialize template engine.

        Args:
            template_dir: Directory containing template files
        """
        if not template_dir.is_dir():
            raise TemplateError(f"Template directory not found: {template_dir}")

        self.template_dir = template_dir
        self._env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )


    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with the given context.

        Args:
            template_name: Name of template file
            context: Variables to pass to template

        Returns:
            Rendered template content

        Raises:
            TemplateError: If the template is missing or fails to render
        """
        try:
            template = self._env.get_template(template_name)
        except TemplateNotFound as e:
            raise TemplateError(f"Template not found: {template_name}") from e
        except JinjaTemplateError as e:
            raise TemplateError(f"Failed to load template {template_name}: {e}") from e

        try:
            return template.render(**context)
        except JinjaTemplateError as e:
            raise TemplateError(f"Failed to render template {template_name}: {e}") from e

    def template_exists(self, template_name: str) -> bool:
        return template_name in self.list_templates()

    def list_templates(self) -> List[str]:
        return self._env.list_templates()
