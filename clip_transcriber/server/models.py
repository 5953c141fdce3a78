"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request parsing,
response serialization, and automatic OpenAPI documentation.

HOW: One model per JSON body. Field descriptions feed the /docs UI.
Type errors and missing fields are rejected by pydantic before the
handler runs; semantic checks (empty id, end <= start) happen in the
RequestHandler.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- start/end are strict: JSON booleans and numeric strings are rejected,
  JSON integers are accepted
- Error bodies always have the shape {"error": "<message>"}
- Python 3.9+ compatible (no PEP 604 unions, use typing generics)
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class TranscribeRequest(BaseModel):
    """Body of POST /transcribe."""

    video_id: str = Field(description="Identifier of the source video (e.g. a YouTube id).")
    start: float = Field(strict=True, description="Window start, in seconds into the source video.")
    end: float = Field(strict=True, description="Window end, in seconds into the source video.")

    model_config = {"json_schema_extra": {
        "examples": [
            {"video_id": "abc123", "start": 10.0, "end": 15.0},
        ]
    }}


class WordTimingModel(BaseModel):
    """One transcribed word with absolute timing."""

    word: str = Field(description="The transcribed word.")
    start: float = Field(description="Word start, in seconds into the source video.")
    end: float = Field(description="Word end, in seconds into the source video.")


class TranscribeResponse(BaseModel):
    """Successful transcription result."""

    words: List[WordTimingModel] = Field(
        description="Words in spoken order, timed in the source video's coordinates.",
    )

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "words": [
                    {"word": "hello", "start": 10.5, "end": 10.9},
                    {"word": "world", "start": 11.0, "end": 11.4},
                ]
            }
        ]
    }}


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
