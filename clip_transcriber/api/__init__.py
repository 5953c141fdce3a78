"""Whisper API client package: async HTTP interface to speech-to-text.

WHY: Transcription is delegated to the OpenAI audio API. This package
encapsulates that communication behind an async client class and a
Transcriber adapter the pipeline can use.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. WhisperClient performs
the upload; response data is parsed into typed dataclasses defined in
models.py; WhisperTranscriber maps the result onto ClipWord.

RULES:
- All HTTP calls go through WhisperClient (no direct httpx usage elsewhere)
- Authentication is via Bearer token from config, resolved lazily
"""

from clip_transcriber.api.client import WhisperAPIError, WhisperClient
from clip_transcriber.api.models import WhisperTranscription, WhisperWord
from clip_transcriber.api.transcriber import WhisperTranscriber

__all__ = [
    "WhisperAPIError",
    "WhisperClient",
    "WhisperTranscriber",
    "WhisperTranscription",
    "WhisperWord",
]
