"""
Rendering Dispatcher and PDF Compositor.

Turns a parsed model into HTML text, CSV text or a PDF document. Template
paths follow ``<template_name>/<variant>``: html, csv, pdf, pdf_header and
pdf_footer. Nothing here holds state, so concurrent calls are safe.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from .config import PDF_PAGE_SIZE
from .errors import TemplateNotFound, UnsupportedFormat
from .handler import ReportEnvironment
from .models import OutputFormat, ReportOutput
from .templates import TemplateEngine

logger = logging.getLogger(__name__)


def render_report(
    model: Any,
    template_name: str,
    output_format: OutputFormat,
    labels: Dict[str, str],
    environment: ReportEnvironment
) -> ReportOutput:
    """
    Render a model in the requested format.

    Args:
        model: Parsed report model
        template_name: Template directory name
        output_format: HTML, CSV or PDF
        labels: Localized labels
        environment: Template engine and PDF converter

    Returns:
        ReportOutput with text content for HTML/CSV, binary content for PDF

    Raises:
        UnsupportedFormat: For anything that is not an OutputFormat member
    """
    variables = {"model": model, "labels": labels}

    if output_format is OutputFormat.HTML:
        content = environment.engine.render(f"{template_name}/html", variables)
        return ReportOutput.text(OutputFormat.HTML, content)

    if output_format is OutputFormat.CSV:
        content = environment.engine.render(f"{template_name}/csv", variables)
        return ReportOutput.text(OutputFormat.CSV, content)

    if output_format is OutputFormat.PDF:
        pdf_bytes = render_pdf(variables, template_name, environment)
        return ReportOutput.binary(OutputFormat.PDF, pdf_bytes)

    raise UnsupportedFormat(output_format)


# =============================================================================
# PDF COMPOSITION
# =============================================================================

def render_optional(
    engine: TemplateEngine,
    template_path: str,
    variables: Mapping[str, Any]
) -> Optional[str]:
    """Render a template, or return None if it does not exist."""
    try:
        return engine.render(template_path, variables)
    except TemplateNotFound:
        logger.debug(f"No optional template found: {template_path}")
        return None


def render_pdf(
    variables: Mapping[str, Any],
    template_name: str,
    environment: ReportEnvironment
) -> bytes:
    """
    Render body, header and footer fragments and convert them to one PDF.

    The body template is required; header and footer are optional and the
    matching page margin boxes stay empty when they are missing.

    Raises:
        TemplateNotFound: If the body template does not exist
        PdfGenerationFailure: If the conversion engine fails
    """
    engine = environment.engine

    body_html = engine.render(f"{template_name}/pdf", variables)
    header_html = render_optional(engine, f"{template_name}/pdf_header", variables)
    footer_html = render_optional(engine, f"{template_name}/pdf_footer", variables)

    logger.info(
        f"Converting {template_name} to PDF "
        f"(header: {header_html is not None}, footer: {footer_html is not None})"
    )

    return environment.pdf_converter(
        body_html,
        header_html,
        footer_html,
        page_size=PDF_PAGE_SIZE,
        url_fetcher=environment.resource_resolver,
    )
