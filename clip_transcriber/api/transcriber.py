"""Transcriber adapter backed by the Whisper API client.

WHY: The pipeline speaks the Transcriber interface (ScopedAudioFile in,
ClipWord list out). This adapter maps that contract onto WhisperClient.

HOW: A fresh WhisperClient is created per call, inside transcribe(). The
API key is therefore resolved at first use: a missing key raises
ConfigurationError on the request that needs it (after extraction has
already run), not when the server starts.
"""

from __future__ import annotations

from collections.abc import Callable

from clip_transcriber.api.client import WhisperClient
from clip_transcriber.config import WHISPER_LANGUAGE
from clip_transcriber.core.audio import ScopedAudioFile
from clip_transcriber.core.interfaces import Transcriber
from clip_transcriber.core.models import ClipWord


class WhisperTranscriber(Transcriber):
    """Transcribe clips with the OpenAI Whisper API.

    Args:
        api_key: Optional explicit key; otherwise read from the environment
                 at call time.
        base_url: Optional API base URL override.
        model: Optional model override.
        language: Optional language hint passed with every request.
        client_factory: Builds the WhisperClient (tests inject a transport).
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        language: str | None = WHISPER_LANGUAGE,
        client_factory: Callable[..., WhisperClient] = WhisperClient,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._model = model
        self._language = language
        self._client_factory = client_factory

    async def transcribe(self, audio: ScopedAudioFile) -> list[ClipWord]:
        client = self._client_factory(
            api_key=self._api_key,
            base_url=self._base_url,
            model=self._model,
        )
        async with client:
            result = await client.create_transcription(audio.path, language=self._language)
        return [ClipWord(word=w.word, start=w.start, end=w.end) for w in result.words]
