"""Extraction -> transcription -> rebasing orchestrator.

WHY: The transcription capability only sees the extracted clip and knows
nothing about where that clip sits in the source video. The pipeline is
the one place that knows both, so it owns the timestamp rebasing as well
as the ordering and lifetime guarantees around the temp artifact.

HOW: TranscriptionPipeline.run() allocates a ScopedAudioFile, runs the
extractor under a wall-clock budget, checks the artifact exists, runs the
transcriber under its own budget, releases the artifact, and shifts every
clip-local timestamp by window.start.

RULES:
- Extraction strictly precedes transcription, which precedes rebasing
- One attempt per collaborator, bounded by asyncio.wait_for; no retries
- The artifact is released on every exit path (including cancellation),
  in a worker thread so rmtree never blocks the event loop
- All-or-nothing: any failure discards the whole request
- Collaborator failures surface as ExtractionFailed / TranscriptionFailed;
  ConfigurationError from the transcriber passes through unchanged
- The transcription credential is checked lazily by the transcriber,
  i.e. only after extraction has run
"""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path

from clip_transcriber.config import (
    CLIP_TEMP_DIR,
    EXTRACT_TIMEOUT_S,
    TRANSCRIBE_TIMEOUT_S,
)
from clip_transcriber.core.audio import ScopedAudioFile
from clip_transcriber.core.interfaces import AudioExtractor, Transcriber
from clip_transcriber.core.models import ClipWord, WordTiming
from clip_transcriber.core.window import TimeWindow
from clip_transcriber.errors import (
    ConfigurationError,
    ExtractionFailed,
    InvalidRequest,
    TranscriptionFailed,
)

logger = logging.getLogger(__name__)


def rebase_words(clip_words: list[ClipWord], window: TimeWindow) -> list[WordTiming]:
    """Shift clip-local word timings into the source's absolute time.

    Exact additive shift: ``absolute = window.start + local``. Order is
    preserved.
    """
    offset = window.start
    return [
        WordTiming(word=w.word, start=offset + w.start, end=offset + w.end)
        for w in clip_words
    ]


class TranscriptionPipeline:
    """Orchestrates one extract -> transcribe -> rebase run per request.

    Holds no per-request state, so a single instance is shared by all
    concurrent requests.

    Args:
        extractor: Produces the audio clip.
        transcriber: Produces clip-local word timings.
        extract_timeout_s: Wall-clock budget for extraction.
        transcribe_timeout_s: Wall-clock budget for transcription.
        temp_dir: Parent directory for per-request scratch directories.
    """

    def __init__(
        self,
        extractor: AudioExtractor,
        transcriber: Transcriber,
        extract_timeout_s: float = EXTRACT_TIMEOUT_S,
        transcribe_timeout_s: float = TRANSCRIBE_TIMEOUT_S,
        temp_dir: str | Path | None = CLIP_TEMP_DIR,
    ) -> None:
        self._extractor = extractor
        self._transcriber = transcriber
        self._extract_timeout_s = extract_timeout_s
        self._transcribe_timeout_s = transcribe_timeout_s
        self._temp_dir = temp_dir

    async def run(self, source_id: str, window: TimeWindow) -> list[WordTiming]:
        """Transcribe the window of the source and return absolute word timings.

        Raises:
            InvalidRequest: If source_id is empty.
            ExtractionFailed: If the temp artifact cannot be allocated, or
                extraction fails, times out, or writes nothing.
            ConfigurationError: If the transcriber is missing its credential.
            TranscriptionFailed: If transcription fails or times out.
        """
        if not source_id or not source_id.strip():
            raise InvalidRequest("video_id must not be empty")

        started = time.monotonic()
        try:
            audio = ScopedAudioFile.allocate(
                source_id,
                suffix=self._extractor.file_suffix,
                parent=self._temp_dir,
            )
        except OSError as exc:
            raise ExtractionFailed(
                "Could not allocate temporary audio file", cause=str(exc)
            ) from exc

        try:
            await self._extract(source_id, window, audio)
            clip_words = await self._transcribe(audio)
        finally:
            await asyncio.to_thread(audio.release)

        words = rebase_words(clip_words, window)
        logger.info(
            "Transcribed %d words for %s (%.2f - %.2f) in %.1fs",
            len(words), source_id, window.start, window.end,
            time.monotonic() - started,
        )
        return words

    async def _extract(
        self,
        source_id: str,
        window: TimeWindow,
        audio: ScopedAudioFile,
    ) -> None:
        logger.info(
            "Downloading audio for %s (%.2f - %.2f)...",
            source_id, window.start, window.end,
        )
        try:
            await asyncio.wait_for(
                self._extractor.extract(source_id, window, audio),
                timeout=self._extract_timeout_s,
            )
        except asyncio.TimeoutError as exc:
            raise ExtractionFailed(
                "Audio extraction timed out",
                cause=f"no result after {self._extract_timeout_s:g}s",
            ) from exc
        except ExtractionFailed:
            raise
        except Exception as exc:
            raise ExtractionFailed("Audio extraction failed", cause=repr(exc)) from exc

        if not audio.is_materialized():
            raise ExtractionFailed(
                "Audio extraction produced no file", cause="artifact missing"
            )

    async def _transcribe(self, audio: ScopedAudioFile) -> list[ClipWord]:
        logger.info("Transcribing %s...", audio.path.name)
        try:
            return await asyncio.wait_for(
                self._transcriber.transcribe(audio),
                timeout=self._transcribe_timeout_s,
            )
        except asyncio.TimeoutError as exc:
            raise TranscriptionFailed(
                "Transcription timed out",
                cause=f"no result after {self._transcribe_timeout_s:g}s",
            ) from exc
        except (TranscriptionFailed, ConfigurationError):
            raise
        except Exception as exc:
            raise TranscriptionFailed("Transcription failed", cause=repr(exc)) from exc
