"""Core pipeline: time windows, word timings, and orchestration.

WHY: The core package holds the only real logic of the service: window
validation, extract -> transcribe ordering, scoped temp-file lifetime,
and rebasing clip-local timestamps into source time. Everything else
(HTTP, CLI, yt-dlp, the Whisper API) plugs into it.

HOW: window.py validates intervals, models.py defines the word types,
audio.py owns the temp artifact, interfaces.py declares the two
collaborator ABCs, pipeline.py orchestrates them, and sentences.py
groups results for captioning.
"""

from clip_transcriber.core.models import ClipWord, Sentence, WordTiming
from clip_transcriber.core.pipeline import TranscriptionPipeline, rebase_words
from clip_transcriber.core.window import TimeWindow

__all__ = [
    "ClipWord",
    "Sentence",
    "TimeWindow",
    "TranscriptionPipeline",
    "WordTiming",
    "rebase_words",
]
