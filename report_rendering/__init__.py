"""
Report Rendering Service.

Renders structured statement data as HTML, CSV or PDF through named report
templates.

Modules:
- config: Settings and constants
- errors: Error taxonomy
- models: Output formats and the rendered report envelope
- templates: Jinja2 template engine
- labels: Localized label files
- pdf_converter: HTML to PDF conversion and resource resolution
- handler: Report handler contract and shared pipeline
- renderer: Format dispatch and PDF composition
- registry: Template name to handler index
- service: Request validation and dispatch
- reports: Report definitions and the registration table
"""

from .config import (
    TEMPLATES_DIR,
    RESOURCE_PREFIX,
    DEFAULT_LANGUAGE,
    PDF_PAGE_SIZE,
    PDF_MAX_CONCURRENCY,
    DEFAULT_OUTPUT_DIR,
    LOG_LEVEL,
    SERVER_HOST,
    SERVER_PORT,
    validate_config,
)

from .errors import (
    ReportRenderingError,
    InvalidRequest,
    MalformedInput,
    UnsupportedFormat,
    InvalidLanguageCode,
    LanguageFileNotFound,
    UnknownTemplate,
    DuplicateReportName,
    TemplateNotFound,
    ResourceNotFound,
    PdfGenerationFailure,
    ProcessingFailure,
    ContentTypeMismatch,
)

from .models import (
    OutputFormat,
    ReportOutput,
    TextContent,
    BinaryContent,
)

from .templates import TemplateEngine
from .labels import LabelLoader

from .pdf_converter import (
    ResourceResolver,
    html_to_pdf,
    get_pdf_page_count,
)

from .handler import (
    ReportEnvironment,
    ReportHandler,
    create_environment,
    process_report,
)

from .renderer import (
    render_report,
    render_pdf,
)

from .registry import ReportRegistry

from .service import (
    ReportService,
    sanitize_for_logging,
    validate_language,
)

from .reports import (
    REPORT_TABLE,
    StatementReport,
    StatementModel,
    parse_statement,
)

__all__ = [
    # Config
    'TEMPLATES_DIR',
    'RESOURCE_PREFIX',
    'DEFAULT_LANGUAGE',
    'PDF_PAGE_SIZE',
    'PDF_MAX_CONCURRENCY',
    'DEFAULT_OUTPUT_DIR',
    'LOG_LEVEL',
    'SERVER_HOST',
    'SERVER_PORT',
    'validate_config',
    # Errors
    'ReportRenderingError',
    'InvalidRequest',
    'MalformedInput',
    'UnsupportedFormat',
    'InvalidLanguageCode',
    'LanguageFileNotFound',
    'UnknownTemplate',
    'DuplicateReportName',
    'TemplateNotFound',
    'ResourceNotFound',
    'PdfGenerationFailure',
    'ProcessingFailure',
    'ContentTypeMismatch',
    # Models
    'OutputFormat',
    'ReportOutput',
    'TextContent',
    'BinaryContent',
    # Collaborators
    'TemplateEngine',
    'LabelLoader',
    'ResourceResolver',
    'html_to_pdf',
    'get_pdf_page_count',
    # Pipeline
    'ReportEnvironment',
    'ReportHandler',
    'create_environment',
    'process_report',
    'render_report',
    'render_pdf',
    'ReportRegistry',
    'ReportService',
    'sanitize_for_logging',
    'validate_language',
    # Reports
    'REPORT_TABLE',
    'StatementReport',
    'StatementModel',
    'parse_statement',
]
