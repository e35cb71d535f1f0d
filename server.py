#!/usr/bin/env python3
"""
Server for the Report Rendering Service.

Accepts statement JSON uploads and returns the rendered report (HTML, CSV or
PDF) in the response body.

Flow:
1. Client POSTs a multipart form: file + template + output + language
2. Service validates format, language and template name
3. Report handler parses the statement and renders the requested format
4. Response carries the report with its MIME type

Usage:
    uvicorn server:app --reload --port 8000
"""

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel
from typing import Dict, List, Optional
import logging

# Import all report rendering functionality
from report_rendering import (
    LOG_LEVEL,
    SERVER_HOST,
    SERVER_PORT,
    validate_config,
    ReportService,
    OutputFormat,
    TextContent,
    BinaryContent,
    InvalidRequest,
    UnknownTemplate,
    ReportRenderingError,
    sanitize_for_logging,
)

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

# =============================================================================
# FASTAPI APP
# =============================================================================

app = FastAPI(
    title="Report Rendering Service",
    description="API for rendering financial statements as HTML, CSV or PDF",
    version="1.0.0"
)

# Global service instance
_service: Optional[ReportService] = None


# =============================================================================
# PYDANTIC MODELS
# =============================================================================

class HealthResponse(BaseModel):
    status: str
    reports: int


class ErrorResponse(BaseModel):
    error: str
    message: str


# =============================================================================
# HELPERS
# =============================================================================

def error_response(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, message=message).model_dump()
    )


def get_service() -> ReportService:
    if _service is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return _service


# =============================================================================
# STARTUP
# =============================================================================

@app.on_event("startup")
async def startup_event():
    """Initialize on startup."""
    global _service

    is_valid, errors = validate_config()
    if not is_valid:
        logger.error("Configuration validation failed:")
        for error in errors:
            logger.error(f"  - {error}")
        raise RuntimeError("Invalid configuration")

    service = ReportService()
    service.initialize()
    _service = service
    logger.info("Server started successfully")


# =============================================================================
# API ENDPOINTS
# =============================================================================

@app.get("/api/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy" if _service else "unhealthy",
        reports=len(_service.registry) if _service else 0
    )


@app.get("/api/templates")
def list_templates() -> Dict[str, List[str]]:
    """List available report templates and their output formats."""
    logger.info("Received request for available templates")
    return get_service().available_templates()


@app.post("/api/reports")
def generate_report(
    file: UploadFile = File(..., description="JSON file containing statement data"),
    template: str = Form(..., description="Template name for the report"),
    output: str = Form(..., description="Output format: HTML, CSV or PDF"),
    language: Optional[str] = Form(None, description="Two-letter ISO language code")
):
    """
    Generate a report synchronously (runs on the worker thread pool).
    """
    service = get_service()

    logger.info(
        f"Received report generation request: template={sanitize_for_logging(template)}, "
        f"output={sanitize_for_logging(output)}, language={sanitize_for_logging(language)}, "
        f"file={sanitize_for_logging(file.filename)}"
    )

    try:
        raw = file.file.read()
        result = service.generate_report(raw, template, output, language)

    except InvalidRequest as e:
        logger.error(f"Invalid request parameters: {e}")
        return error_response(400, "Invalid request parameters", str(e))
    except UnknownTemplate as e:
        logger.error(f"Unknown template: {e}")
        return error_response(404, "Template not found", str(e))
    except ReportRenderingError as e:
        logger.error(f"Error generating report: {e}")
        return error_response(500, "Report generation failed", str(e))
    except OSError as e:
        logger.error(f"Error reading uploaded file: {e}")
        return error_response(400, "Failed to read uploaded file", str(e))

    headers = {}
    fmt = OutputFormat.parse(output)
    if fmt is not OutputFormat.HTML:
        headers["Content-Disposition"] = f'attachment; filename="{template}-report.{fmt.extension}"'

    if isinstance(result.content, TextContent):
        body = result.content.text.encode("utf-8")
    elif isinstance(result.content, BinaryContent):
        body = result.content.data
    else:
        raise TypeError(f"Unexpected report content: {type(result.content).__name__}")

    return Response(content=body, media_type=result.mime_type, headers=headers)


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "service": "Report Rendering Service",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/health",
        "templates": "/api/templates",
        "usage": {
            "endpoint": "POST /api/reports (multipart/form-data)",
            "fields": {
                "file": "statement.json",
                "template": "statement",
                "output": "HTML | CSV | PDF",
                "language": "en (optional)"
            }
        }
    }


# =============================================================================
# MAIN
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=SERVER_HOST, port=SERVER_PORT)
