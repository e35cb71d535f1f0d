from __future__ import annotations

import json
import shutil
from dataclasses import replace
from pathlib import Path

import pytest

from report_rendering import TEMPLATES_DIR, ReportService, create_environment

from tests.helpers import RecordingPdfConverter, make_statement


@pytest.fixture
def sample_statement() -> dict:
    return make_statement([
        {
            "accountName": "John Smith Chequing",
            "transitNumber": "00012",
            "accountNumber": "1234567890",
            "accountType": "CHQ",
            "transactions": [
                {
                    "actionDate": "2024-01-20",
                    "valueDate": "2024-01-20",
                    "transactionType": "WD",
                    "description": "Grocery Store",
                    "debitAmount": 45.50,
                    "balance": 1954.50,
                },
                {
                    "actionDate": "2024-01-05",
                    "valueDate": "2024-01-05",
                    "transactionType": "DEP",
                    "description": "Salary Deposit",
                    "creditAmount": 1500.00,
                    "balance": 2000.00,
                },
            ],
        },
        {
            "accountName": "John Smith Savings",
            "transitNumber": "00012",
            "accountNumber": "9876543210",
            "accountType": "SAV",
            "transactions": [
                {
                    "actionDate": "2024-01-31",
                    "valueDate": "2024-01-31",
                    "transactionType": "INT",
                    "description": "Interest, January",
                    "creditAmount": 0.10,
                    "balance": 1000.10,
                },
            ],
        },
    ])


@pytest.fixture
def statement_bytes(sample_statement) -> bytes:
    return json.dumps(sample_statement).encode("utf-8")


@pytest.fixture
def pdf_converter() -> RecordingPdfConverter:
    return RecordingPdfConverter()


@pytest.fixture
def environment(pdf_converter):
    return replace(create_environment(TEMPLATES_DIR), pdf_converter=pdf_converter)


@pytest.fixture
def service(environment) -> ReportService:
    report_service = ReportService(environment)
    report_service.initialize()
    return report_service


@pytest.fixture
def bare_pdf_templates(tmp_path) -> Path:
    """Template tree whose statement report has no pdf_header/pdf_footer."""
    templates_dir = tmp_path / "templates"
    shutil.copytree(TEMPLATES_DIR, templates_dir)
    (templates_dir / "statement" / "pdf_header.html").unlink()
    (templates_dir / "statement" / "pdf_footer.html").unlink()
    return templates_dir
