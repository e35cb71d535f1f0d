"""
Report Handler contract.

A report handler binds one template name to a model type: it knows how to
parse raw input into that model and how to render the model. Handlers do not
share a base class; the common pipeline lives in ``process_report`` and the
common rendering in ``renderer.render_report``, and handlers delegate to them.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Protocol, runtime_checkable

from .config import TEMPLATES_DIR, RESOURCES_DIR_NAME
from .errors import InvalidRequest, ProcessingFailure
from .labels import LabelLoader
from .models import OutputFormat, ReportOutput
from .pdf_converter import ResourceResolver, html_to_pdf
from .templates import TemplateEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportEnvironment:
    """Collaborators shared by every handler: templates, labels and PDF conversion."""
    engine: TemplateEngine
    labels: LabelLoader
    resource_resolver: ResourceResolver
    pdf_converter: Callable[..., bytes] = field(default=html_to_pdf)


def create_environment(templates_dir: Path = TEMPLATES_DIR) -> ReportEnvironment:
    """Build the default environment over a template tree."""
    templates_dir = Path(templates_dir)
    return ReportEnvironment(
        engine=TemplateEngine(templates_dir),
        labels=LabelLoader(templates_dir),
        resource_resolver=ResourceResolver(templates_dir / RESOURCES_DIR_NAME),
    )


@runtime_checkable
class ReportHandler(Protocol):
    """Capabilities every registered report exposes."""

    name: str

    def parse(self, raw: bytes) -> Any:
        ...

    def render(
        self,
        model: Any,
        template_name: str,
        output_format: OutputFormat,
        labels: Dict[str, str]
    ) -> ReportOutput:
        ...

    def process(
        self,
        raw: bytes,
        template_name: str,
        output_format: OutputFormat,
        language: str
    ) -> ReportOutput:
        ...


def process_report(
    handler: ReportHandler,
    raw: bytes,
    template_name: str,
    output_format: OutputFormat,
    language: str,
    labels: LabelLoader
) -> ReportOutput:
    """
    Run the full pipeline for one request: parse, load labels, render.

    Args:
        handler: Handler owning the parse and render steps
        raw: Raw statement bytes
        template_name: Registered template name
        output_format: Requested output format
        language: Two-letter language code for labels
        labels: Label loader

    Returns:
        The complete rendered report

    Raises:
        InvalidRequest: Caller faults (malformed input, missing language file,
            unsupported format) propagate unchanged
        ProcessingFailure: Any other error, with the original cause chained
    """
    logger.info(
        f"Processing report with template: {template_name}, "
        f"format: {output_format.value} and language: {language}"
    )

    try:
        model = handler.parse(raw)
        logger.debug("Parsed model successfully")

        label_set = labels.load(template_name, language)
        logger.debug(f"Loaded language labels for language: {language}")

        output = handler.render(model, template_name, output_format, label_set)

    except InvalidRequest:
        raise
    except Exception as e:
        logger.error(f"Error processing report: {e}", exc_info=True)
        raise ProcessingFailure(f"Failed to process report: {e}") from e

    logger.info(f"Report processed successfully ({output.mime_type}, size {len(output):,})")
    return output
