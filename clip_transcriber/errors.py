"""Exception taxonomy for the clip transcription service.

WHY: The HTTP boundary, the CLI, and the pipeline all need to tell a
caller's mistake (bad input) apart from a failure in one of the external
collaborators (yt-dlp, the speech-to-text API, missing configuration).
Typed exceptions make that distinction explicit without string matching.

HOW: Every error inherits from ClipTranscriberError, which carries a
human-readable message and an optional cause string describing the
underlying failure. The boundary maps InvalidRequest to a 400-class
response and everything else to a single 500-class response.

RULES:
- message is safe to show to callers (no stack traces, no temp paths)
- cause holds the underlying detail and is only logged
- InvalidWindow is a kind of InvalidRequest
"""

from __future__ import annotations


class ClipTranscriberError(Exception):
    """Base class for all errors raised by the service."""

    def __init__(self, message: str, cause: str | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message


class InvalidRequest(ClipTranscriberError):
    """Raised when request fields are missing or invalid.

    The caller's fault. Raised before any resource is allocated.
    """


class InvalidWindow(InvalidRequest):
    """Raised when a time window is empty, negative, or non-finite."""


class ExtractionFailed(ClipTranscriberError):
    """Raised when the audio extraction tool fails, times out, or
    produces no artifact."""


class ConfigurationError(ClipTranscriberError):
    """Raised when a required credential or setting is absent.

    Detected lazily, at the first use of the collaborator that needs it.
    """


class TranscriptionFailed(ClipTranscriberError):
    """Raised when the speech-to-text capability returns an error."""
