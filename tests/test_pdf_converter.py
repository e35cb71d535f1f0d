from __future__ import annotations

import fitz
import pytest

from report_rendering import (
    OutputFormat,
    PdfGenerationFailure,
    ResourceNotFound,
    ResourceResolver,
    TEMPLATES_DIR,
    create_environment,
    get_pdf_page_count,
    html_to_pdf,
    parse_statement,
    render_report,
    LabelLoader,
)
from report_rendering import pdf_converter
from report_rendering.pdf_converter import (
    build_page_css,
    compose_document,
    get_content_type,
)

requires_weasyprint = pytest.mark.skipif(
    not pdf_converter.WEASYPRINT_AVAILABLE,
    reason="weasyprint or its native libraries are not installed",
)

RESOURCES_DIR = TEMPLATES_DIR / "resources"


def _pdf_text(pdf_bytes: bytes) -> str:
    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        return "\n".join(page.get_text() for page in doc)


# =============================================================================
# RESOURCE RESOLUTION
# =============================================================================

@pytest.mark.parametrize("path, expected", [
    ("logo.png", "image/png"),
    ("photo.JPG", "image/jpeg"),
    ("photo.jpeg", "image/jpeg"),
    ("anim.gif", "image/gif"),
    ("logo.svg", "image/svg+xml"),
    ("style.css", "text/css"),
    ("app.js", "application/javascript"),
    ("font.woff2", "application/octet-stream"),
    ("README", "application/octet-stream"),
])
def test_content_type_from_extension(path, expected):
    assert get_content_type(path) == expected


def test_resolver_serves_bundled_resource():
    resolver = ResourceResolver(RESOURCES_DIR)

    result = resolver("https://report-rendering.local/resources/css/statement.css?v=1")

    assert result["mime_type"] == "text/css"
    assert result["string"] == (RESOURCES_DIR / "css" / "statement.css").read_bytes()


def test_resolver_reports_missing_resource():
    resolver = ResourceResolver(RESOURCES_DIR)

    with pytest.raises(ResourceNotFound):
        resolver("https://report-rendering.local/resources/images/missing.png")


def test_resolver_rejects_paths_outside_resource_tree():
    resolver = ResourceResolver(RESOURCES_DIR)

    with pytest.raises(ResourceNotFound):
        resolver("https://report-rendering.local/resources/../statement/language_en.json")


def test_resolver_passes_other_urls_through():
    seen = []

    def fallback(url):
        seen.append(url)
        return {"string": b"external", "mime_type": "text/plain"}

    resolver = ResourceResolver(RESOURCES_DIR, fallback=fallback)

    result = resolver("https://cdn.example.com/fonts/font.css")

    assert seen == ["https://cdn.example.com/fonts/font.css"]
    assert result["string"] == b"external"


# =============================================================================
# DOCUMENT COMPOSITION
# =============================================================================

def test_compose_inserts_fragments_after_body_tag():
    html = '<html><body class="x"><p>content</p></body></html>'

    composed = compose_document(html, "<b>head</b>", "<i>foot</i>")

    assert composed.index('<body class="x">') < composed.index("<b>head</b>")
    assert composed.index("<i>foot</i>") < composed.index("<p>content</p>")


def test_compose_without_fragments_is_unchanged():
    html = "<html><body><p>content</p></body></html>"

    assert compose_document(html) == html


def test_compose_without_body_tag_prepends():
    composed = compose_document("<p>content</p>", header_html="<b>head</b>")

    assert composed.startswith('<div class="report-page-header"><b>head</b></div>')


def test_page_css_only_enables_present_margin_boxes():
    header_only = build_page_css("A4", has_header=True, has_footer=False)
    neither = build_page_css("A4", has_header=False, has_footer=False)

    assert "size: A4" in header_only
    assert "@top-center" in header_only
    assert "@bottom-center" not in header_only
    assert "@top-center" not in neither


# =============================================================================
# CONVERSION
# =============================================================================

def test_missing_weasyprint_raises_pdf_generation_failure(monkeypatch):
    monkeypatch.setattr(pdf_converter, "WEASYPRINT_AVAILABLE", False)

    with pytest.raises(PdfGenerationFailure):
        html_to_pdf("<html><body>hello</body></html>")


def test_page_count_of_invalid_bytes_is_zero():
    assert get_pdf_page_count(b"not a pdf") == 0


@requires_weasyprint
def test_html_to_pdf_produces_a4_document():
    pdf_bytes = html_to_pdf(
        "<html><body><p>Hello statement</p></body></html>",
        header_html="<span>Top of page</span>",
        footer_html="<span>Bottom of page</span>",
        url_fetcher=ResourceResolver(RESOURCES_DIR),
    )

    assert pdf_bytes.startswith(b"%PDF")
    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        width, height = doc[0].rect.width, doc[0].rect.height
    # A4 is 595 x 842 points
    assert round(width) == 595
    assert round(height) == 842

    text = _pdf_text(pdf_bytes)
    assert "Hello statement" in text
    assert "Top of page" in text
    assert "Bottom of page" in text


@requires_weasyprint
def test_missing_resource_does_not_abort_conversion():
    html = (
        '<html><body><img src="resources/images/missing.png">'
        '<p>Still rendered</p></body></html>'
    )

    pdf_bytes = html_to_pdf(html, url_fetcher=ResourceResolver(RESOURCES_DIR))

    assert "Still rendered" in _pdf_text(pdf_bytes)


@requires_weasyprint
def test_statement_pdf_end_to_end(statement_bytes):
    environment = create_environment()
    labels = LabelLoader().load("statement", "en")

    output = render_report(
        parse_statement(statement_bytes), "statement", OutputFormat.PDF, labels, environment
    )

    assert output.mime_type == "application/pdf"
    assert get_pdf_page_count(output.as_bytes()) >= 1
    text = _pdf_text(output.as_bytes())
    assert "Salary Deposit" in text
    assert "Generated by Report Rendering Service" in text


@requires_weasyprint
def test_statement_pdf_without_header_footer(statement_bytes, bare_pdf_templates):
    environment = create_environment(bare_pdf_templates)
    labels = LabelLoader(bare_pdf_templates).load("statement", "en")

    output = render_report(
        parse_statement(statement_bytes), "statement", OutputFormat.PDF, labels, environment
    )

    text = _pdf_text(output.as_bytes())
    assert "Salary Deposit" in text
    assert "Generated by Report Rendering Service" not in text


def test_conversion_failure_is_wrapped(monkeypatch):
    monkeypatch.setattr(pdf_converter, "WEASYPRINT_AVAILABLE", True)

    def broken_html(*args, **kwargs):
        raise RuntimeError("engine crashed")

    monkeypatch.setattr(pdf_converter, "HTML", broken_html, raising=False)
    monkeypatch.setattr(pdf_converter, "FontConfiguration", lambda: None, raising=False)
    monkeypatch.setattr(pdf_converter, "default_url_fetcher", lambda url: {}, raising=False)

    with pytest.raises(PdfGenerationFailure) as exc_info:
        html_to_pdf("<html><body>x</body></html>")

    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_conversion_slot_released_after_failure(monkeypatch):
    monkeypatch.setattr(pdf_converter, "WEASYPRINT_AVAILABLE", True)
    monkeypatch.setattr(pdf_converter, "FontConfiguration", lambda: None, raising=False)
    monkeypatch.setattr(pdf_converter, "default_url_fetcher", lambda url: {}, raising=False)

    def broken_html(*args, **kwargs):
        raise RuntimeError("engine crashed")

    monkeypatch.setattr(pdf_converter, "HTML", broken_html, raising=False)

    for _ in range(pdf_converter.PDF_MAX_CONCURRENCY + 1):
        with pytest.raises(PdfGenerationFailure):
            html_to_pdf("<html><body>x</body></html>")

    # Every slot is free again
    acquired = [pdf_converter._conversion_slots.acquire(blocking=False)
                for _ in range(pdf_converter.PDF_MAX_CONCURRENCY)]
    for _ in acquired:
        pdf_converter._conversion_slots.release()
    assert all(acquired)
