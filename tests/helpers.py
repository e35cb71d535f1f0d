"""Shared test doubles and statement builders."""

from __future__ import annotations


FAKE_PDF = b"%PDF-1.7\n% fake document for tests\n%%EOF\n"


class RecordingPdfConverter:
    """Stands in for html_to_pdf and remembers what it was asked to convert."""

    def __init__(self, result: bytes = FAKE_PDF):
        self.result = result
        self.calls: list[dict] = []

    def __call__(self, html_content, header_html=None, footer_html=None, **kwargs):
        self.calls.append({
            "html": html_content,
            "header": header_html,
            "footer": footer_html,
            **kwargs,
        })
        return self.result


def make_statement(accounts: list[dict] | None = None) -> dict:
    return {
        "startDate": "2024-01-01",
        "endDate": "2024-01-31",
        "accounts": accounts if accounts is not None else [],
    }
