"""Collaborator interfaces for audio extraction and transcription.

WHY: The pipeline's only real logic is orchestration and timestamp
arithmetic. Hiding yt-dlp and the speech-to-text API behind two small
ABCs lets the pipeline depend on contracts alone, and lets tests swap in
deterministic fakes.

To add a new extraction tool or speech-to-text provider:
1. Subclass AudioExtractor or Transcriber
2. Implement the single async method
3. Pass an instance to TranscriptionPipeline
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from clip_transcriber.core.audio import ScopedAudioFile
from clip_transcriber.core.models import ClipWord
from clip_transcriber.core.window import TimeWindow


class AudioExtractor(ABC):
    """Produces an audio clip for a source identifier and time window."""

    file_suffix: str = ".mp3"
    """Extension of the artifact this extractor writes."""

    @abstractmethod
    async def extract(
        self,
        source_id: str,
        window: TimeWindow,
        audio: ScopedAudioFile,
    ) -> ScopedAudioFile:
        """Write the [start, start + duration] clip of the source to audio.path.

        The pipeline allocates ``audio`` and owns its release; the extractor
        only fills it.

        Args:
            source_id: Opaque identifier of the remote video.
            window: The validated time window to extract.
            audio: Scoped artifact to write the clip to.

        Returns:
            The same ScopedAudioFile, now pointing at the written clip.

        Raises:
            ExtractionFailed: If the tool fails or cannot be started.
        """


class Transcriber(ABC):
    """Turns an audio file into word timings in clip-local time."""

    @abstractmethod
    async def transcribe(self, audio: ScopedAudioFile) -> list[ClipWord]:
        """Transcribe the audio file at audio.path.

        Returns:
            Words in temporal order; times are seconds from the clip start.

        Raises:
            ConfigurationError: If a required credential is missing.
            TranscriptionFailed: If the speech-to-text capability fails.
        """
