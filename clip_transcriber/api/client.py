"""Async HTTP client for the OpenAI Whisper transcription API.

WHY: The service needs word-level timestamps for a short audio clip.
This module encapsulates the single HTTP call (multipart upload with
verbose_json + word granularity) behind a client class, so the
transcriber adapter and tests never deal with HTTP details.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. WhisperClient is an
async context manager: enter it to get an authenticated client, exit to
close the connection pool. create_transcription() uploads the file and
parses the response into a WhisperTranscription.

RULES:
- Always use the async context manager (async with WhisperClient(...) as client:)
- api_key defaults to load_api_key(), which raises ConfigurationError when unset
- Network failures and unreadable files raise TranscriptionFailed
- Non-200 responses raise WhisperAPIError (a TranscriptionFailed) with the status code
- The response body is kept in the error cause (for logs), not in the message
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from clip_transcriber.api.models import WhisperTranscription
from clip_transcriber.config import (
    OPENAI_BASE_URL,
    TRANSCRIBE_TIMEOUT_S,
    WHISPER_MODEL,
    load_api_key,
)
from clip_transcriber.errors import TranscriptionFailed

logger = logging.getLogger(__name__)

_ERROR_BODY_CHARS = 500


class WhisperAPIError(TranscriptionFailed):
    """Raised when the Whisper API returns an error response.

    WHY: Callers (and logs) need the HTTP status to tell an auth problem
    from a rate limit from a server error.

    RULES:
    - status_code is always set
    - message is a short summary safe to return to API callers
    - cause holds the (truncated) response body
    """

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        super().__init__(
            f"Whisper API error {status_code}",
            cause=body[:_ERROR_BODY_CHARS] or None,
        )


class WhisperClient:
    """Async client for the OpenAI audio transcription endpoint.

    Args:
        api_key: Bearer token. Defaults to load_api_key().
        base_url: API base URL. Defaults to OPENAI_BASE_URL.
        model: Transcription model. Defaults to WHISPER_MODEL.
        timeout: Total request timeout in seconds.
        transport: Optional httpx transport (tests use httpx.MockTransport).
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        timeout: float = TRANSCRIBE_TIMEOUT_S,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key or load_api_key()
        self._base_url = (base_url or OPENAI_BASE_URL).rstrip("/")
        self._model = model or WHISPER_MODEL
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> WhisperClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Authorization": f"Bearer {self._api_key}"},
            timeout=httpx.Timeout(self._timeout, connect=30.0),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "WhisperClient must be used as an async context manager: "
                "async with WhisperClient() as client: ..."
            )
        return self._client

    async def create_transcription(
        self,
        file_path: Path,
        language: str | None = None,
    ) -> WhisperTranscription:
        """Upload an audio file and return its word-level transcription.

        HOW: Sends a multipart/form-data POST to /audio/transcriptions with
        response_format=verbose_json and timestamp_granularities[]=word.

        Args:
            file_path: Path to the audio file to transcribe.
            language: Optional ISO 639-1 hint for the spoken language.

        Returns:
            The parsed transcription, words in file-relative seconds.
        """
        client = self._ensure_client()
        file_path = Path(file_path)

        data: dict = {
            "model": self._model,
            "response_format": "verbose_json",
            "timestamp_granularities[]": ["word"],
        }
        if language:
            data["language"] = language

        try:
            with open(file_path, "rb") as f:
                resp = await client.post(
                    "/audio/transcriptions",
                    files={"file": (file_path.name, f)},
                    data=data,
                )
        except OSError as exc:
            raise TranscriptionFailed(
                "Failed to read audio file", cause=str(exc)
            ) from exc
        except httpx.HTTPError as exc:
            raise TranscriptionFailed(
                "Whisper API request failed", cause=repr(exc)
            ) from exc

        if resp.status_code != 200:
            raise WhisperAPIError(resp.status_code, resp.text)

        try:
            payload = resp.json()
            transcription = WhisperTranscription.from_dict(payload)
        except (ValueError, KeyError, TypeError) as exc:
            raise TranscriptionFailed(
                "Whisper API returned an unexpected response", cause=repr(exc)
            ) from exc

        logger.info(
            "Whisper returned %d words (%s)",
            len(transcription.words), transcription.language or "unknown language",
        )
        return transcription
