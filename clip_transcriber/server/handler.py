"""Request validation and error mapping for POST /transcribe.

WHY: The HTTP layer should stay a thin shell. Validation order, the
fail-fast rule (no external work for bad input), and the collapse of
every pipeline failure into one error shape are behavior, so they live
here where they can be tested without a server.

HOW: RequestHandler.handle() validates the parsed request, builds a
TimeWindow, runs the pipeline, and returns a HandlerResult (status code
plus response model). The FastAPI endpoint only serializes it.

RULES:
- Validation order: empty video_id, then end <= start, then the
  TimeWindow checks (negative / non-finite)
- Invalid input -> 400 with a message, the pipeline is never called
- Any pipeline failure -> 500 with the failure's message; the failure
  kind and cause are logged, not returned
- Unexpected exceptions -> 500 with a fixed message
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic import BaseModel

from clip_transcriber.core.pipeline import TranscriptionPipeline
from clip_transcriber.core.window import TimeWindow
from clip_transcriber.errors import ClipTranscriberError, InvalidRequest
from clip_transcriber.server.models import (
    ErrorResponse,
    TranscribeRequest,
    TranscribeResponse,
    WordTimingModel,
)

logger = logging.getLogger(__name__)


@dataclass
class HandlerResult:
    """Status code and body for one handled request."""

    status_code: int
    body: BaseModel


def validate_request(request: TranscribeRequest) -> TimeWindow:
    """Check request fields and return the validated window.

    Raises:
        InvalidRequest: On an empty id or an invalid window.
    """
    if not request.video_id.strip():
        raise InvalidRequest("video_id must not be empty")
    if request.end <= request.start:
        raise InvalidRequest("end must be greater than start")
    return TimeWindow(request.start, request.end)


class RequestHandler:
    """Validates transcription requests and maps pipeline outcomes."""

    def __init__(self, pipeline: TranscriptionPipeline) -> None:
        self._pipeline = pipeline

    async def handle(self, request: TranscribeRequest) -> HandlerResult:
        try:
            window = validate_request(request)
        except InvalidRequest as exc:
            logger.info("Rejected transcription request: %s", exc.message)
            return HandlerResult(400, ErrorResponse(error=exc.message))

        try:
            words = await self._pipeline.run(request.video_id, window)
        except InvalidRequest as exc:
            return HandlerResult(400, ErrorResponse(error=exc.message))
        except ClipTranscriberError as exc:
            logger.error(
                "Transcription error for %s (%s): %s",
                request.video_id, type(exc).__name__, exc,
                exc_info=True,
            )
            return HandlerResult(500, ErrorResponse(error=exc.message))
        except Exception:
            logger.exception("Unexpected error transcribing %s", request.video_id)
            return HandlerResult(500, ErrorResponse(error="Internal server error"))

        return HandlerResult(
            200,
            TranscribeResponse(
                words=[WordTimingModel(word=w.word, start=w.start, end=w.end) for w in words]
            ),
        )
