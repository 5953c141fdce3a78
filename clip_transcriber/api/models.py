"""Whisper transcription API response dataclasses.

WHY: The OpenAI audio transcription endpoint returns a verbose JSON
object with the full text, detected language, duration, and (when word
granularity is requested) a flat word array. Typed dataclasses make the
fields we rely on explicit and catch shape mismatches early.

HOW: Each dataclass maps 1:1 to a JSON object in the response. Factory
methods (from_dict) handle parsing from the raw response dict.

RULES:
- WhisperWord times are float seconds relative to the uploaded file
- words is empty (not None) when the response carries no word array,
  e.g. for silent audio
- Unknown response fields are ignored
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class WhisperWord:
    """A single word from a verbose_json transcription response."""

    word: str
    start: float
    end: float

    @classmethod
    def from_dict(cls, data: dict) -> WhisperWord:
        """Parse a WhisperWord from a raw response dict.

        RULES:
        - word, start and end are required
        - start/end are coerced to float (the API may send ints for 0)
        """
        return cls(
            word=data["word"],
            start=float(data["start"]),
            end=float(data["end"]),
        )


@dataclass
class WhisperTranscription:
    """Verbose transcription response from POST /audio/transcriptions."""

    text: str
    language: str | None = None
    duration: float | None = None
    words: list[WhisperWord] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> WhisperTranscription:
        """Parse the full response, including the optional word array."""
        duration = data.get("duration")
        return cls(
            text=data.get("text", ""),
            language=data.get("language"),
            duration=float(duration) if duration is not None else None,
            words=[WhisperWord.from_dict(w) for w in data.get("words") or []],
        )
