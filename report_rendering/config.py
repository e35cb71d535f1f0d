"""
Configuration module for the Report Rendering Service.

Loads environment variables and defines all constants used across the application.
Both CLI and Server can import settings from here.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

PACKAGE_DIR = Path(__file__).resolve().parent

# =============================================================================
# TEMPLATE CONFIGURATION
# =============================================================================

TEMPLATES_DIR = Path(os.getenv("REPORT_TEMPLATES_DIR", str(PACKAGE_DIR / "templates")))

# Template file extensions tried, in order, when resolving a template path
TEMPLATE_SUFFIXES = (".html", ".csv")

# Shared images/css/js referenced by PDF templates live under this prefix
RESOURCE_PREFIX = "/resources/"
RESOURCES_DIR_NAME = "resources"

# =============================================================================
# LANGUAGE CONFIGURATION
# =============================================================================

DEFAULT_LANGUAGE = os.getenv("DEFAULT_LANGUAGE", "en")
LANGUAGE_CODE_PATTERN = r"^[a-z]{2}$"
LANGUAGE_FILE_TEMPLATE = "language_{language}.json"

# =============================================================================
# PDF CONFIGURATION
# =============================================================================

PDF_PAGE_SIZE = "A4"
PDF_BASE_URL = os.getenv("PDF_BASE_URL", "https://report-rendering.local/")
PDF_MAX_CONCURRENCY = int(os.getenv("PDF_MAX_CONCURRENCY", "4"))

# =============================================================================
# DEFAULT PATHS (can be overridden via environment variables)
# =============================================================================

DEFAULT_OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", "./output"))

# =============================================================================
# SERVER / LOGGING
# =============================================================================

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
SERVER_HOST = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT = int(os.getenv("SERVER_PORT", "8000"))


def validate_config() -> tuple[bool, list[str]]:
    """
    Validate that required configuration is present.

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []

    if not TEMPLATES_DIR.is_dir():
        errors.append(f"Templates directory not found: {TEMPLATES_DIR}")

    if PDF_MAX_CONCURRENCY < 1:
        errors.append("PDF_MAX_CONCURRENCY must be at least 1")

    if not RESOURCE_PREFIX.startswith("/") or not RESOURCE_PREFIX.endswith("/"):
        errors.append(f"RESOURCE_PREFIX must start and end with '/': {RESOURCE_PREFIX}")

    return len(errors) == 0, errors
