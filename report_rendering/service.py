"""
Report Service module.

Entry point used by the transport layers (HTTP server and CLI). Validates the
request (format, language, template name) before any parsing or rendering
starts, then hands the request to the registered report handler.
"""

import logging
import re
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .config import DEFAULT_LANGUAGE, LANGUAGE_CODE_PATTERN
from .errors import InvalidLanguageCode, UnknownTemplate
from .handler import ReportEnvironment, create_environment
from .models import OutputFormat, ReportOutput
from .registry import ReportFactory, ReportRegistry
from .reports import REPORT_TABLE

logger = logging.getLogger(__name__)

_LANGUAGE_CODE = re.compile(LANGUAGE_CODE_PATTERN)


def sanitize_for_logging(value: Optional[str]) -> str:
    """Replace CR, LF and TAB so caller-supplied values cannot forge log lines."""
    if value is None:
        return "null"
    return str(value).replace('\r', '_').replace('\n', '_').replace('\t', '_')


def validate_language(language: Optional[str]) -> str:
    """
    Return the language code to use, defaulting to DEFAULT_LANGUAGE.

    Raises:
        InvalidLanguageCode: If the code is not two lowercase letters
    """
    if language is None or language == "":
        return DEFAULT_LANGUAGE
    if not isinstance(language, str) or not _LANGUAGE_CODE.fullmatch(language):
        logger.error(f"Invalid language code: {sanitize_for_logging(language)}")
        raise InvalidLanguageCode(language)
    return language


class ReportService:
    """Holds the report registry and serves report requests against it."""

    def __init__(
        self,
        environment: Optional[ReportEnvironment] = None,
        table: Iterable[Tuple[str, ReportFactory]] = REPORT_TABLE
    ):
        self.environment = environment or create_environment()
        self.table = tuple(table)
        self.registry = ReportRegistry()

    def initialize(self) -> int:
        """Build the registry; call once before serving requests."""
        return self.registry.initialize(self.table, self.environment)

    def generate_report(
        self,
        raw: bytes,
        template_name: str,
        output_format: Union[OutputFormat, str],
        language: Optional[str] = None
    ) -> ReportOutput:
        """
        Generate a report.

        Args:
            raw: Statement data bytes
            template_name: Registered template name, e.g. "statement"
            output_format: OutputFormat or its name
            language: Optional two-letter language code

        Returns:
            The rendered report

        Raises:
            UnsupportedFormat: Unknown output format
            InvalidLanguageCode: Malformed language code
            UnknownTemplate: No handler registered under template_name
            MalformedInput: Statement data cannot be parsed
            LanguageFileNotFound: No labels for the template/language pair
            ProcessingFailure: Any internal failure while parsing or rendering
        """
        fmt = OutputFormat.parse(output_format)
        lang = validate_language(language)

        logger.info(
            f"Generating report for template: {sanitize_for_logging(template_name)} "
            f"with format: {fmt.value} and language: {lang}"
        )

        handler = self.registry.lookup(template_name)
        if handler is None:
            logger.error(f"No report handler found for template: {sanitize_for_logging(template_name)}")
            raise UnknownTemplate(template_name)

        return handler.process(raw, template_name, fmt, lang)

    def available_templates(self) -> Dict[str, List[str]]:
        """Template names with the names of their supported output formats."""
        templates = {
            name: [fmt.value for fmt in OutputFormat if fmt in formats]
            for name, formats in self.registry.list_capabilities().items()
        }
        logger.debug(f"Available templates: {templates}")
        return templates
