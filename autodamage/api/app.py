"""FastAPI application for vehicle damage assessment."""

import sys
from fastapi import BackgroundTasks, Depends, FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from typing import List, Optional
from loguru import logger

from .. import __version__
from .schemas import (
    AnalyzeRequest,
    ErrorResponse,
    HealthResponse,
    ImageListResponse,
    UploadResponse,
)
from ..analysis.schemas import AnalysisResult, ImageAnalysis
from ..pipeline.client import DamageAnalysisClient
from ..pipeline.intake import encode_image
from ..pipeline.orchestrator import AnalysisOrchestrator
from ..pipeline.session import AssessmentSession
from ..visualization.report_generator import ReportGenerator
from ..utils.config_loader import get_config

# Load configuration
config = get_config()

# Configure logging
logger.remove()
logger.add(sys.stderr, level=config.log_level)
if config.log_file is not None:
    logger.add(
        str(config.log_file),
        rotation=config.get('logging.rotation', '500 MB'),
        level="DEBUG"
    )

# Initialize FastAPI app
app = FastAPI(
    title="AutoDamage Pro API",
    description="AI-powered vehicle damage assessment from photos",
    version=__version__
)

# Add CORS middleware
if config.get('api.cors_enabled', True):
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.get('api.cors_origins', ["*"]),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.state.session = AssessmentSession()

# Global instances (lazy loading)
analysis_client: Optional[DamageAnalysisClient] = None
report_generator: Optional[ReportGenerator] = None


def get_analysis_client() -> DamageAnalysisClient:
    """Get or create the vision model client."""
    global analysis_client
    if analysis_client is None:
        analysis_client = DamageAnalysisClient.from_config(config)
    return analysis_client


def get_report_generator() -> ReportGenerator:
    """Get or create report generator."""
    global report_generator
    if report_generator is None:
        report_generator = ReportGenerator()
    return report_generator


def get_session(request: Request) -> AssessmentSession:
    return request.app.state.session


def error_response(status_code: int, error: str, message: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(error=error, message=message)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
    return error_response(400, "Invalid request", str(exc))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}: {exc}")
    return error_response(500, "Internal server error", str(exc) or "An unexpected error occurred")


@app.on_event("startup")
async def startup_event():
    """Initialize on startup."""
    logger.info("Starting AutoDamage Pro API...")
    logger.info(f"Vision model: {config.model_name} at {config.model_endpoint}")

    try:
        get_analysis_client()
        get_report_generator()
        logger.info("API ready to accept requests")
    except Exception as e:
        logger.error(f"Failed to initialize analysis client: {e}")


@app.get("/", response_model=dict)
async def root():
    """Root endpoint."""
    return {
        "name": "AutoDamage Pro API",
        "version": __version__,
        "status": "running",
        "endpoints": {
            "analyze": "/api/analyze",
            "images": "/api/images",
            "report": "/api/report",
            "health": "/health",
            "docs": "/docs"
        }
    }


@app.get("/health", response_model=HealthResponse)
async def health_check(client: DamageAnalysisClient = Depends(get_analysis_client)):
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        model_configured=client.is_configured,
    )


@app.post(
    "/api/analyze",
    response_model=AnalysisResult,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
async def analyze_image(
    body: AnalyzeRequest,
    client: DamageAnalysisClient = Depends(get_analysis_client)
):
    """
    Assess the damage visible in one vehicle image.

    Args:
        body: Base64 data URI of the image and its file name

    Returns:
        Damages and overall condition as reported by the vision model
    """
    if not body.image_base64:
        return error_response(400, "No image provided")

    try:
        return await client.analyze(body.image_base64, body.image_name)
    except Exception as e:
        logger.error(f"Analysis error for {body.image_name}: {e}")
        return error_response(
            500,
            "Failed to analyze image",
            str(e) or "An unexpected error occurred"
        )


@app.post(
    "/api/images",
    response_model=UploadResponse,
    status_code=202,
    responses={400: {"model": ErrorResponse}}
)
async def upload_images(
    background_tasks: BackgroundTasks,
    files: Optional[List[UploadFile]] = File(None, description="Vehicle images"),
    session: AssessmentSession = Depends(get_session),
    client: DamageAnalysisClient = Depends(get_analysis_client)
):
    """
    Add images to the session and analyze them in the background.

    Each accepted image appears immediately in a loading state and is
    updated once its analysis completes.
    """
    if not files:
        return error_response(400, "No images provided")

    accepted = []
    rejected = []

    for file in files:
        content = await file.read()
        image = encode_image(content, file.filename or "image")
        if image is None:
            rejected.append(file.filename)
        else:
            accepted.append(image)

    logger.info(f"Received {len(files)} upload(s): {len(accepted)} accepted, {len(rejected)} rejected")

    orchestrator = AnalysisOrchestrator(client, session)
    placeholders = orchestrator.submit(accepted)
    background_tasks.add_task(orchestrator.run, accepted)

    return UploadResponse(images=placeholders, rejected=rejected)


@app.get("/api/images", response_model=ImageListResponse)
async def list_images(session: AssessmentSession = Depends(get_session)):
    """List all images of the session in upload order."""
    return ImageListResponse(images=session.analyses)


@app.get(
    "/api/images/{image_id}",
    response_model=ImageAnalysis,
    responses={404: {"model": ErrorResponse}}
)
async def get_image(image_id: str, session: AssessmentSession = Depends(get_session)):
    analysis = session.get(image_id)
    if analysis is None:
        return error_response(404, "Image not found")
    return analysis


@app.delete(
    "/api/images/{image_id}",
    status_code=204,
    responses={404: {"model": ErrorResponse}}
)
async def remove_image(image_id: str, session: AssessmentSession = Depends(get_session)):
    """Remove an image and its damages from the assessment."""
    if not session.remove(image_id):
        return error_response(404, "Image not found")
    return Response(status_code=204)


@app.get("/api/report")
async def get_report(
    session: AssessmentSession = Depends(get_session),
    generator: ReportGenerator = Depends(get_report_generator)
):
    """Combined and per-image damage report for the session."""
    return generator.generate_report(session.analyses)


@app.get("/api/report/summary", response_class=PlainTextResponse)
async def get_report_summary(
    session: AssessmentSession = Depends(get_session),
    generator: ReportGenerator = Depends(get_report_generator)
):
    """Human-readable text version of the report."""
    return generator.generate_text_summary(session.analyses)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=config.get('api.host', '0.0.0.0'),
        port=config.get('api.port', 8000),
        reload=config.get('api.reload', False)
    )
