"""FastAPI application for the YouTube video analyzer.

Exposes the question answering pipeline over HTTP and a health check.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from httpx import AsyncClient

from src.analyzer.config import AnalyzerConfig, get_config
from src.analyzer.errors import AnalysisError
from src.analyzer.pipeline import VideoAnalysisPipeline
from src.analyzer.schemas import AnalyzeRequest, AnalyzeResponse, ErrorResponse
from src.inference.config import get_model
from src.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

# Global state initialized in lifespan
config: AnalyzerConfig | None = None
http_client: AsyncClient | None = None
pipeline: VideoAnalysisPipeline | None = None


# ==============================================================================
# Lifespan Management
# ==============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for the FastAPI application.

    Builds the configuration once, opens the shared HTTP client and wires
    the pipeline; closes the client on shutdown.
    """
    global config, http_client, pipeline

    config = get_config()
    configure_logging(config.log_level)

    logger.info("application_startup_started")

    try:
        model = get_model(config)
        http_client = AsyncClient()
        pipeline = VideoAnalysisPipeline.create(config, http_client, model)

        logger.info("application_startup_completed", model=model.model_name)

    except Exception:
        logger.exception("application_startup_failed")
        raise

    yield  # Application runs here

    logger.info("application_shutdown_started")

    if http_client:
        await http_client.aclose()

    logger.info("application_shutdown_completed")


# ==============================================================================
# FastAPI Application Setup
# ==============================================================================

app = FastAPI(
    title="YouTube Video Analyzer API",
    description="Answers questions about YouTube videos from their captions",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==============================================================================
# Helper Functions
# ==============================================================================


def error_response(error: AnalysisError) -> JSONResponse:
    """Map a pipeline error to its JSON response.

    Client errors carry only the user-facing message; server errors also
    carry the underlying detail in ``message``.
    """
    if error.status_code < 500:
        body = ErrorResponse(error=error.user_message)
    else:
        body = ErrorResponse(error=error.user_message, message=error.detail)
    return JSONResponse(
        status_code=error.status_code,
        content=body.model_dump(exclude_none=True),
    )


@app.exception_handler(RequestValidationError)
async def invalid_body_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer a missing, non-JSON or mistyped body as missing input."""
    logger.warning("analyze_request_rejected", stage="parse_input", reason="invalid_body")
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error="Input is required").model_dump(exclude_none=True),
    )


# ==============================================================================
# API Endpoints
# ==============================================================================


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


@app.post(
    "/api/analyze",
    response_model=AnalyzeResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def analyze_endpoint(request: AnalyzeRequest):
    """Answer a question about a YouTube video.

    Args:
        request: Body with ``input``, a URL optionally followed by a question.

    Returns:
        AnalyzeResponse on success, or an error JSON body with 400/500 status.
    """
    if pipeline is None:
        logger.error("analyze_request_failed", reason="pipeline_not_initialized")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Failed to analyze video",
                "message": "Pipeline not initialized",
            },
        )

    try:
        result = await pipeline.analyze(request.input)

    except AnalysisError as e:
        logger.warning(
            "analyze_request_rejected",
            video_id=e.video_id,
            stage=e.stage,
            status_code=e.status_code,
            error_type=type(e).__name__,
        )
        return error_response(e)

    except Exception as e:
        logger.exception("analyze_request_failed", error_type=type(e).__name__)
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to analyze video", "message": str(e)},
        )

    return AnalyzeResponse.from_result(result)
