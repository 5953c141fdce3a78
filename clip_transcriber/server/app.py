"""FastAPI application exposing the clip transcription endpoint.

WHY: Captioning and indexing pipelines need a plain HTTP call that turns
(video id, start, end) into word-level timestamps in the video's own
time coordinates.

HOW: create_app() builds a FastAPI app around an explicitly supplied
TranscriptionPipeline (nothing is registered globally at import time).
POST /transcribe delegates to a RequestHandler; GET /health answers
without touching any dependency. Body parsing errors (malformed JSON,
missing fields, wrong types) are turned into 400 {"error": ...} by a
RequestValidationError handler so every client error has the same shape.

RULES:
- One pipeline run per request; requests share no mutable state
- 200 -> {"words": [...]}, 400/500 -> {"error": "..."}
- /health has no side effects and checks no dependencies
- run_api() is the console entry point; it configures logging and uvicorn
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from clip_transcriber import __version__
from clip_transcriber.api.transcriber import WhisperTranscriber
from clip_transcriber.config import HOST, LOG_LEVEL, PORT
from clip_transcriber.core.pipeline import TranscriptionPipeline
from clip_transcriber.extract.ytdlp import YtDlpExtractor
from clip_transcriber.server.handler import RequestHandler
from clip_transcriber.server.models import (
    ErrorResponse,
    HealthResponse,
    TranscribeRequest,
    TranscribeResponse,
)

logger = logging.getLogger(__name__)


def build_default_pipeline() -> TranscriptionPipeline:
    """Wire the production collaborators: yt-dlp + Whisper API."""
    return TranscriptionPipeline(
        extractor=YtDlpExtractor(),
        transcriber=WhisperTranscriber(),
    )


def create_app(pipeline: TranscriptionPipeline | None = None) -> FastAPI:
    """Build the FastAPI app around a pipeline.

    Args:
        pipeline: The pipeline to serve. Defaults to build_default_pipeline().

    Returns:
        A configured FastAPI application.
    """
    if pipeline is None:
        pipeline = build_default_pipeline()
    handler = RequestHandler(pipeline)

    app = FastAPI(
        title="Clip Transcriber API",
        description=(
            "Extracts a time window of a remote video's audio and returns "
            "word-level transcription timestamps in the video's own time "
            "coordinates."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.handler = handler

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        message = describe_validation_error(exc)
        logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
        return JSONResponse(status_code=400, content={"error": message})

    @app.post(
        "/transcribe",
        response_model=TranscribeResponse,
        tags=["transcription"],
        summary="Transcribe a time window of a video",
        description=(
            "Downloads the audio for [start, end) of the given video, "
            "transcribes it, and returns each word with start/end times "
            "measured from the start of the video. One attempt, no partial "
            "results."
        ),
        responses={
            400: {"model": ErrorResponse, "description": "Missing or invalid fields"},
            500: {"model": ErrorResponse, "description": "Extraction, configuration, or transcription failure"},
        },
    )
    async def transcribe(body: TranscribeRequest) -> JSONResponse:
        result = await handler.handle(body)
        return JSONResponse(
            status_code=result.status_code,
            content=result.body.model_dump(),
        )

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["health"],
        summary="Health check",
        description="Liveness check for load balancers and orchestrators.",
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    return app


def describe_validation_error(exc: RequestValidationError) -> str:
    """Flatten pydantic/FastAPI validation errors into one readable line."""
    parts = []
    for err in exc.errors():
        if err.get("type") == "json_invalid":
            parts.append("malformed JSON")
            continue
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        msg = err.get("msg", "invalid value")
        parts.append("{}: {}".format(".".join(loc), msg) if loc else msg)
    return "Invalid request body: {}".format("; ".join(parts) or "unreadable")


def run_api(
    host: str = HOST,
    port: int = PORT,
    log_level: str = LOG_LEVEL,
) -> None:
    """Entry point for the clip-transcriber-api console script."""
    import uvicorn

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    logger.info("Server starting on %s:%d", host, port)
    uvicorn.run(create_app(), host=host, port=port, log_level=log_level.lower())
