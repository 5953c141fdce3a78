"""Configuration constants and .env loading.

WHY: Centralizes every tunable value (listen address, timeouts, the
yt-dlp binary, the Whisper model, the source URL template) so they are
easy to find and override from the environment without touching code.

HOW: python-dotenv loads the .env file on import. Constants are module
level and read with os.getenv defaults. The API key is NOT read at import
time: load_api_key() is called by the transcriber at first use, so a
missing key surfaces as a ConfigurationError on the request that needs it
rather than at startup.

RULES:
- All defaults can be overridden via environment variables
- Numeric settings are parsed once, at import
- The API key is never hardcoded and never given a placeholder default
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

from clip_transcriber.errors import ConfigurationError

# Load .env from the working directory (where the server is started)
load_dotenv()

# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8080"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# ---------------------------------------------------------------------------
# Audio extraction (yt-dlp)
# ---------------------------------------------------------------------------

YT_DLP_BINARY = os.getenv("YT_DLP_BINARY", "yt-dlp")
AUDIO_FORMAT = os.getenv("AUDIO_FORMAT", "mp3")
SOURCE_URL_TEMPLATE = os.getenv(
    "SOURCE_URL_TEMPLATE", "https://www.youtube.com/watch?v={video_id}"
)
EXTRACT_TIMEOUT_S = float(os.getenv("EXTRACT_TIMEOUT_S", "120"))
"""Wall-clock budget for one extraction attempt (no retries)."""

CLIP_TEMP_DIR = os.getenv("CLIP_TEMP_DIR") or None
"""Parent directory for per-request scratch directories (None = system temp)."""

# ---------------------------------------------------------------------------
# Speech-to-text (OpenAI Whisper API)
# ---------------------------------------------------------------------------

OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
WHISPER_MODEL = os.getenv("WHISPER_MODEL", "whisper-1")
WHISPER_LANGUAGE = os.getenv("WHISPER_LANGUAGE") or None
TRANSCRIBE_TIMEOUT_S = float(os.getenv("TRANSCRIBE_TIMEOUT_S", "300"))


def load_api_key() -> str:
    """Load the OpenAI API key from the environment.

    WHY: The key is required for every transcription call. Reading it at
    call time (not import time) keeps the server bootable without it and
    turns its absence into a per-request ConfigurationError.

    RULES:
    - Raises ConfigurationError if the key is missing or blank
    - Never returns a default/placeholder value
    """
    key = os.getenv("OPENAI_API_KEY", "").strip()
    if not key:
        raise ConfigurationError(
            "Transcription service is not configured",
            cause="OPENAI_API_KEY not set",
        )
    return key
