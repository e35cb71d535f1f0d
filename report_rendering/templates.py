"""
Template Engine module.

Wraps a Jinja2 environment over the bundled template tree. Templates are
addressed by extension-less paths such as ``statement/html`` or
``statement/pdf_header``; the first existing file among TEMPLATE_SUFFIXES wins.
"""

import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Mapping

import jinja2
from jinja2 import Environment, FileSystemLoader, select_autoescape

from .config import TEMPLATES_DIR, TEMPLATE_SUFFIXES
from .errors import TemplateNotFound

logger = logging.getLogger(__name__)

_CSV_SPECIAL_CHARS = (",", '"', "\n", "\r")


# =============================================================================
# FILTERS
# =============================================================================

def format_money(value: Any) -> str:
    """Format an amount with thousands separators and two decimals."""
    if value is None or value == "":
        return ""
    return f"{Decimal(value):,.2f}"


def csv_field(value: Any) -> str:
    """Quote a value for CSV output when it contains separators or quotes."""
    if value is None:
        return ""
    text = str(value)
    if any(char in text for char in _CSV_SPECIAL_CHARS):
        return '"' + text.replace('"', '""') + '"'
    return text


# =============================================================================
# ENGINE
# =============================================================================

class TemplateEngine:
    """Renders templates from a template tree into text."""

    def __init__(self, templates_dir: Path = TEMPLATES_DIR):
        self.templates_dir = Path(templates_dir)
        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(enabled_extensions=("html",), default_for_string=False),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._env.filters["money"] = format_money
        self._env.filters["csv"] = csv_field

    def render(self, template_path: str, variables: Mapping[str, Any]) -> str:
        """
        Render a template with the given variables.

        Args:
            template_path: Extension-less path relative to the template tree
            variables: Names exposed to the template

        Returns:
            Rendered text

        Raises:
            TemplateNotFound: If no file exists for the path
        """
        candidates = [f"{template_path}{suffix}" for suffix in TEMPLATE_SUFFIXES]
        try:
            template = self._env.select_template(candidates)
        except jinja2.TemplateNotFound as e:
            raise TemplateNotFound(template_path) from e

        logger.debug(f"Rendering template: {template.name}")
        return template.render(**variables)
