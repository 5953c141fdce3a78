"""Shared test fixtures for the clip_transcriber test suite.

WHY: The pipeline, handler, HTTP, and CLI tests all need the same
deterministic stand-ins for yt-dlp and the Whisper API, plus the
reference scenario (abc123, 10.0-15.0, "hello world").

HOW: FakeExtractor writes a small file to the scoped path (or fails,
sleeps, or writes nothing, depending on its mode) and records its calls.
FakeTranscriber returns fixed clip-local words (or raises) and records
the artifact path it saw. Fixtures build a pipeline around them with a
per-test temp directory so leftover artifacts are easy to assert on.

RULES:
- No test touches the network or spawns yt-dlp unless it says so
- Every pipeline fixture uses tmp_path as its scratch parent
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List, Optional

import pytest

from clip_transcriber.core.audio import ScopedAudioFile
from clip_transcriber.core.interfaces import AudioExtractor, Transcriber
from clip_transcriber.core.models import ClipWord
from clip_transcriber.core.pipeline import TranscriptionPipeline
from clip_transcriber.core.window import TimeWindow
from clip_transcriber.errors import ExtractionFailed


# ---------------------------------------------------------------------------
# Reference scenario
# ---------------------------------------------------------------------------

HELLO_WORLD: List[ClipWord] = [
    ClipWord(word="hello", start=0.5, end=0.9),
    ClipWord(word="world", start=1.0, end=1.4),
]


class FakeExtractor(AudioExtractor):
    """Deterministic AudioExtractor.

    Modes:
        "ok": write a few bytes to audio.path
        "fail": raise ExtractionFailed
        "empty": succeed without writing anything
        "hang": sleep far longer than any test timeout
        "crash": raise an unexpected RuntimeError
    """

    def __init__(self, mode: str = "ok") -> None:
        self.mode = mode
        self.calls: List[tuple] = []
        self.paths: List[Path] = []
        self.cancelled = False

    async def extract(
        self,
        source_id: str,
        window: TimeWindow,
        audio: ScopedAudioFile,
    ) -> ScopedAudioFile:
        self.calls.append((source_id, window))
        self.paths.append(audio.path)

        if self.mode == "fail":
            raise ExtractionFailed("yt-dlp failed with exit status 1", cause="ERROR: video unavailable")
        if self.mode == "crash":
            raise RuntimeError("boom")
        if self.mode == "hang":
            # Leave a partial file behind to prove cleanup removes it
            audio.path.write_bytes(b"partial")
            try:
                await asyncio.sleep(3600)
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if self.mode == "ok":
            audio.path.write_bytes(b"ID3 fake mp3 data")
        return audio


class FakeTranscriber(Transcriber):
    """Deterministic Transcriber returning fixed clip-local words."""

    def __init__(
        self,
        words: Optional[List[ClipWord]] = None,
        error: Optional[BaseException] = None,
    ) -> None:
        self.words = list(HELLO_WORLD) if words is None else words
        self.error = error
        self.calls: List[Path] = []
        self.saw_file: List[bool] = []

    async def transcribe(self, audio: ScopedAudioFile) -> List[ClipWord]:
        self.calls.append(audio.path)
        self.saw_file.append(audio.path.is_file())
        if self.error is not None:
            raise self.error
        return [ClipWord(w.word, w.start, w.end) for w in self.words]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def extractor() -> FakeExtractor:
    return FakeExtractor()


@pytest.fixture
def transcriber() -> FakeTranscriber:
    return FakeTranscriber()


@pytest.fixture
def scratch_dir(tmp_path: Path) -> Path:
    """Parent directory for the pipeline's per-request scratch dirs."""
    path = tmp_path / "scratch"
    path.mkdir()
    return path


@pytest.fixture
def make_pipeline(scratch_dir: Path):
    """Factory building a pipeline around the given fakes."""

    def _make(
        extractor: AudioExtractor,
        transcriber: Transcriber,
        extract_timeout_s: float = 5.0,
        transcribe_timeout_s: float = 5.0,
    ) -> TranscriptionPipeline:
        return TranscriptionPipeline(
            extractor=extractor,
            transcriber=transcriber,
            extract_timeout_s=extract_timeout_s,
            transcribe_timeout_s=transcribe_timeout_s,
            temp_dir=scratch_dir,
        )

    return _make


@pytest.fixture
def pipeline(make_pipeline, extractor, transcriber) -> TranscriptionPipeline:
    return make_pipeline(extractor, transcriber)
