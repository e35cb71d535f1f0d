#!/usr/bin/env python3
"""
PDF Converter Module.

Converts HTML reports to PDF format using weasyprint.
Header and footer fragments become CSS running elements placed in the page
margin boxes, and relative resource URLs are served from the bundled
template resource tree.
"""

import logging
import re
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Optional

try:
    from weasyprint import HTML, CSS, default_url_fetcher
    from weasyprint.text.fonts import FontConfiguration
    WEASYPRINT_AVAILABLE = True
except (ImportError, OSError):
    WEASYPRINT_AVAILABLE = False

import fitz  # PyMuPDF

from .config import (
    TEMPLATES_DIR,
    RESOURCES_DIR_NAME,
    RESOURCE_PREFIX,
    PDF_BASE_URL,
    PDF_PAGE_SIZE,
    PDF_MAX_CONCURRENCY,
)
from .errors import PdfGenerationFailure, ResourceNotFound

logger = logging.getLogger(__name__)

UrlFetcher = Callable[[str], dict]

CONTENT_TYPES = {
    '.png': 'image/png',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.gif': 'image/gif',
    '.svg': 'image/svg+xml',
    '.css': 'text/css',
    '.js': 'application/javascript',
}
DEFAULT_CONTENT_TYPE = 'application/octet-stream'

HEADER_ELEMENT = "report-page-header"
FOOTER_ELEMENT = "report-page-footer"

_BODY_TAG = re.compile(r"<body\b[^>]*>", re.IGNORECASE)

# One slot per concurrent conversion
_conversion_slots = threading.BoundedSemaphore(PDF_MAX_CONCURRENCY)


# =============================================================================
# RESOURCE RESOLUTION
# =============================================================================

def get_content_type(resource_path: str) -> str:
    """Infer a content type from the file extension."""
    return CONTENT_TYPES.get(Path(resource_path).suffix.lower(), DEFAULT_CONTENT_TYPE)


class ResourceResolver:
    """
    URL fetcher serving template resources during PDF conversion.

    URLs containing the resource prefix are mapped onto the resource tree;
    everything else is handed to the fallback fetcher unchanged.
    """

    def __init__(
        self,
        resources_dir: Path = TEMPLATES_DIR / RESOURCES_DIR_NAME,
        prefix: str = RESOURCE_PREFIX,
        fallback: Optional[UrlFetcher] = None,
    ):
        self.resources_dir = Path(resources_dir).resolve()
        self.prefix = prefix
        self.fallback = fallback

    def resolve_path(self, url: str) -> Optional[Path]:
        """
        Map a URL onto a file in the resource tree.

        Returns:
            The file path, or None if the URL is not a resource URL

        Raises:
            ResourceNotFound: If the URL is a resource URL but no file backs it
        """
        index = url.find(self.prefix)
        if index < 0:
            return None

        relative = url[index + len(self.prefix):].split('?', 1)[0].split('#', 1)[0]
        path = (self.resources_dir / relative).resolve()

        if path != self.resources_dir and self.resources_dir not in path.parents:
            logger.warning(f"Resource path escapes resource tree: {url}")
            raise ResourceNotFound(url)
        if not path.is_file():
            logger.warning(f"Resource not found: {url}")
            raise ResourceNotFound(url)
        return path

    def __call__(self, url: str) -> dict:
        logger.debug(f"PDF resource request: {url}")

        path = self.resolve_path(url)
        if path is None:
            fallback = self.fallback or default_url_fetcher
            return fallback(url)

        data = path.read_bytes()
        logger.info(f"Served resource: {path.name} ({len(data):,} bytes)")
        return {
            'string': data,
            'mime_type': get_content_type(path.name),
            'redirected_url': url,
        }


# =============================================================================
# DOCUMENT COMPOSITION
# =============================================================================

def build_page_css(page_size: str, has_header: bool, has_footer: bool) -> str:
    """Build the page stylesheet: paper size plus optional margin boxes."""
    rules = [f"@page {{ size: {page_size} !important; }}"]

    if has_header:
        rules.append(f"@page {{ @top-center {{ content: element({HEADER_ELEMENT}); width: 100%; }} }}")
        rules.append(f".{HEADER_ELEMENT} {{ position: running({HEADER_ELEMENT}); }}")

    if has_footer:
        rules.append(f"@page {{ @bottom-center {{ content: element({FOOTER_ELEMENT}); width: 100%; }} }}")
        rules.append(f".{FOOTER_ELEMENT} {{ position: running({FOOTER_ELEMENT}); }}")

    return "\n".join(rules)


def compose_document(
    html_content: str,
    header_html: Optional[str] = None,
    footer_html: Optional[str] = None
) -> str:
    """
    Insert header/footer fragments at the start of the document body.

    Running elements must precede the content of the first page, so both
    fragments go directly after the opening <body> tag.
    """
    fragments = []
    if header_html is not None:
        fragments.append(f'<div class="{HEADER_ELEMENT}">{header_html}</div>')
    if footer_html is not None:
        fragments.append(f'<div class="{FOOTER_ELEMENT}">{footer_html}</div>')

    if not fragments:
        return html_content

    injected = "\n".join(fragments)
    match = _BODY_TAG.search(html_content)
    if match is None:
        return injected + html_content
    return html_content[:match.end()] + injected + html_content[match.end():]


@contextmanager
def conversion_slot():
    """Hold one of the PDF_MAX_CONCURRENCY conversion slots."""
    _conversion_slots.acquire()
    try:
        yield
    finally:
        _conversion_slots.release()


# =============================================================================
# CONVERSION
# =============================================================================

def html_to_pdf(
    html_content: str,
    header_html: Optional[str] = None,
    footer_html: Optional[str] = None,
    page_size: str = PDF_PAGE_SIZE,
    url_fetcher: Optional[UrlFetcher] = None,
    base_url: str = PDF_BASE_URL
) -> bytes:
    """
    Convert HTML string to PDF bytes.

    Args:
        html_content: Complete HTML document string
        header_html: Optional fragment repeated at the top of every page
        footer_html: Optional fragment repeated at the bottom of every page
        page_size: CSS page size, e.g. "A4"
        url_fetcher: Fetcher for linked resources (images, css)
        base_url: Base URL relative resource links resolve against

    Returns:
        PDF as bytes

    Raises:
        PdfGenerationFailure: If weasyprint is missing or conversion fails
    """
    if not WEASYPRINT_AVAILABLE:
        logger.error("weasyprint is not installed. Run: pip install weasyprint")
        raise PdfGenerationFailure("weasyprint is not available")

    document_html = compose_document(html_content, header_html, footer_html)
    page_css = build_page_css(page_size, header_html is not None, footer_html is not None)

    try:
        with conversion_slot():
            font_config = FontConfiguration()

            # Create HTML document from string
            html_doc = HTML(
                string=document_html,
                base_url=base_url,
                url_fetcher=url_fetcher or default_url_fetcher,
            )

            # Render to PDF bytes
            pdf_bytes = html_doc.write_pdf(
                stylesheets=[CSS(string=page_css, font_config=font_config)],
                font_config=font_config,
            )

    except Exception as e:
        logger.error(f"PDF conversion failed: {e}")
        raise PdfGenerationFailure(f"Failed to generate PDF: {e}") from e

    logger.info(f"PDF generated successfully ({len(pdf_bytes):,} bytes)")
    return pdf_bytes


def get_pdf_page_count(pdf_bytes: bytes) -> int:
    """
    Get the total page count of a PDF from bytes.

    Args:
        pdf_bytes: PDF file content as bytes

    Returns:
        Number of pages in the PDF, or 0 if error
    """
    try:
        with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
            return doc.page_count
    except Exception as e:
        logger.error(f"Error getting page count: {e}")
        return 0
