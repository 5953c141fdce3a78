"""Word timing dataclasses for clip-local and absolute time.

WHY: The speech-to-text capability only ever sees the extracted clip, so
its timestamps start at zero. Callers want timestamps into the original
video. Two distinct types keep the two coordinate systems from being
mixed up: ClipWord is what a Transcriber returns, WordTiming is what the
pipeline returns.

HOW: Plain dataclasses. The pipeline converts ClipWord -> WordTiming by
adding the window start (see core.pipeline.rebase_words).

RULES:
- ClipWord times are seconds from the start of the extracted clip
- WordTiming times are seconds from the start of the source video
- Order is the temporal order of speech, as reported by the transcriber
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field


@dataclass
class ClipWord:
    """A transcribed word with timing relative to the extracted clip."""

    word: str
    start: float
    end: float


@dataclass
class WordTiming:
    """A transcribed word with timing in the caller's absolute time."""

    word: str
    start: float
    end: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Sentence:
    """A display grouping of consecutive words.

    Attributes:
        start: Start of the first word (absolute seconds).
        end: End of the last word (absolute seconds).
        text: Words joined with single spaces.
        words: The grouped words, in order.
    """

    start: float
    end: float
    text: str
    words: list[WordTiming] = field(default_factory=list)
