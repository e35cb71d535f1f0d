"""
Error types for the Report Rendering Service.

Callers only need to tell three groups apart:
- InvalidRequest: the caller sent something we cannot serve (HTTP 400)
- UnknownTemplate: no report is registered under the requested name (HTTP 404)
- everything else: an internal failure (HTTP 500)
"""


class ReportRenderingError(Exception):
    """Base class for all report rendering errors."""


# =============================================================================
# CALLER FAULTS
# =============================================================================

class InvalidRequest(ReportRenderingError):
    """The request itself is invalid; retrying it unchanged will fail again."""


class MalformedInput(InvalidRequest):
    """Statement data is not well-formed JSON matching the report schema."""


class UnsupportedFormat(InvalidRequest):
    """The requested output format is not one of HTML, CSV or PDF."""

    def __init__(self, output_format):
        self.output_format = output_format
        super().__init__(f"Unsupported output format: {output_format!r}")


class InvalidLanguageCode(InvalidRequest):
    """Language code is not a two-letter lowercase ISO code."""

    def __init__(self, language):
        self.language = language
        super().__init__(
            "Invalid language code. Must be a two-letter ISO language code (e.g., en, fr)"
        )


class LanguageFileNotFound(InvalidRequest):
    """No label file exists for the template/language pair."""

    def __init__(self, template_name: str, language: str, path=None):
        self.template_name = template_name
        self.language = language
        self.path = path
        super().__init__(f"Language file not found for template '{template_name}': {language}")


class UnknownTemplate(ReportRenderingError):
    """No report handler is registered under the requested template name."""

    def __init__(self, template_name: str):
        self.template_name = template_name
        super().__init__(f"No report handler found for template: {template_name}")


# =============================================================================
# STARTUP
# =============================================================================

class DuplicateReportName(ReportRenderingError):
    """Two report handlers claim the same template name."""

    def __init__(self, template_name: str):
        self.template_name = template_name
        super().__init__(f"Report handler already registered for template: {template_name}")


# =============================================================================
# INTERNAL FAILURES
# =============================================================================

class TemplateNotFound(ReportRenderingError):
    """A template path does not resolve to a file in the template tree."""

    def __init__(self, template_path: str):
        self.template_path = template_path
        super().__init__(f"Template not found: {template_path}")


class ResourceNotFound(ReportRenderingError):
    """A resource requested during PDF conversion is not in the resource tree."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Resource not found: {url}")


class PdfGenerationFailure(ReportRenderingError):
    """The HTML to PDF conversion engine failed."""


class ProcessingFailure(ReportRenderingError):
    """Unexpected error while processing a report; the cause is chained."""


class ContentTypeMismatch(ReportRenderingError, TypeError):
    """Report content was read with the wrong accessor (text vs. binary)."""
