#!/usr/bin/env python3
"""
CLI Runner for the Report Rendering Service.

Handles all file system operations:
- Reading statement JSON files from disk
- Calling the report service for each requested format
- Saving rendered reports to disk

Usage:
    python cli_runner.py statement.json [--template statement] [--format PDF] [--language en] [--output-dir DIR]

Examples:
    python cli_runner.py data/statement.json                  # All formats, English
    python cli_runner.py data/statement.json --format CSV     # CSV only
    python cli_runner.py data/statement.json -l fr -o output  # All formats, French
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

# Import all report rendering functionality
from report_rendering import (
    DEFAULT_OUTPUT_DIR,
    DEFAULT_LANGUAGE,
    LOG_LEVEL,
    validate_config,
    ReportService,
    OutputFormat,
    ReportOutput,
    ReportRenderingError,
    get_pdf_page_count,
)

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


# =============================================================================
# FILE SYSTEM OPERATIONS (CLI-SPECIFIC)
# =============================================================================

def read_input_bytes(input_path: Path) -> Optional[bytes]:
    """
    Read a statement file and return its contents as bytes.

    Args:
        input_path: Path to the JSON file

    Returns:
        File content as bytes, or None if error
    """
    try:
        with open(input_path, 'rb') as f:
            return f.read()
    except OSError as e:
        logger.error(f"Error reading input {input_path.name}: {e}")
        return None


def save_report(report: ReportOutput, output_path: Path) -> bool:
    """
    Save a rendered report to disk.

    Args:
        report: The rendered report
        output_path: Path where to save the file

    Returns:
        True if successful, False otherwise
    """
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        if report.is_binary:
            output_path.write_bytes(report.as_bytes())
        else:
            output_path.write_text(report.as_text(), encoding='utf-8')
        return True
    except OSError as e:
        logger.error(f"Error saving report to {output_path}: {e}")
        return False


def report_path(output_dir: Path, input_path: Path, template: str, fmt: OutputFormat) -> Path:
    return output_dir / f"{input_path.stem}-{template}-report.{fmt.extension}"


# =============================================================================
# ORCHESTRATION
# =============================================================================

def render_formats(
    service: ReportService,
    raw: bytes,
    input_path: Path,
    template: str,
    formats: list[OutputFormat],
    language: str,
    output_dir: Path
) -> list[OutputFormat]:
    """
    Render the statement in each format and save the results.

    Returns:
        List of formats that failed
    """
    failed = []

    for fmt in formats:
        logger.info(f"Rendering {fmt.value}...")
        try:
            report = service.generate_report(raw, template, fmt, language)
        except ReportRenderingError as e:
            logger.error(f"❌ {fmt.value} failed: {e}")
            failed.append(fmt)
            continue

        output_path = report_path(output_dir, input_path, template, fmt)
        if not save_report(report, output_path):
            failed.append(fmt)
            continue

        if fmt is OutputFormat.PDF:
            pages = get_pdf_page_count(report.as_bytes())
            logger.info(f"✅ PDF saved to: {output_path} ({pages} pages)")
        else:
            logger.info(f"✅ {fmt.value} saved to: {output_path}")

    return failed


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render a statement JSON file into reports")
    parser.add_argument("input", type=Path, help="Statement JSON file")
    parser.add_argument("-t", "--template", default="statement", help="Report template name")
    parser.add_argument(
        "-f", "--format",
        default="ALL",
        help="Output format: HTML, CSV, PDF or ALL (default: ALL)"
    )
    parser.add_argument("-l", "--language", default=DEFAULT_LANGUAGE, help="Two-letter language code")
    parser.add_argument("-o", "--output-dir", type=Path, default=DEFAULT_OUTPUT_DIR, help="Output directory")
    return parser.parse_args(argv)


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for rendering a statement file."""
    args = parse_args(argv)

    logger.info("=" * 60)
    logger.info("Starting Report Rendering")
    logger.info(f"Input: {args.input} | Template: {args.template} | Language: {args.language}")
    logger.info("=" * 60)

    is_valid, errors = validate_config()
    if not is_valid:
        for error in errors:
            logger.error(error)
        return 2

    if args.format.upper() == "ALL":
        formats = list(OutputFormat)
    else:
        try:
            formats = [OutputFormat.parse(args.format)]
        except ReportRenderingError as e:
            logger.error(str(e))
            return 2

    raw = read_input_bytes(args.input)
    if raw is None:
        return 1

    service = ReportService()
    service.initialize()

    available = service.available_templates()
    if args.template not in available:
        logger.error(f"Unknown template '{args.template}'. Available: {', '.join(sorted(available))}")
        return 2

    failed = render_formats(
        service, raw, args.input, args.template, formats, args.language, args.output_dir
    )

    # Summary
    logger.info("=" * 60)
    logger.info("RENDERING COMPLETE")
    logger.info("=" * 60)
    logger.info(f"Succeeded: {len(formats) - len(failed)}/{len(formats)}")
    logger.info(f"Reports saved to: {args.output_dir}")

    if failed:
        logger.error(f"⚠️  Failed formats: {', '.join(fmt.value for fmt in failed)}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
