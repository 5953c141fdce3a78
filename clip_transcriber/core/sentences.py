"""Group word timings into caption-sized sentences.

WHY: Captioning consumers rarely show one word at a time. They need short
lines with natural breaks, derived from the same absolute word timings
the service returns.

HOW: A single pass over the words. The current sentence is closed when
the word ends with sentence punctuation, when the silence before the next
word exceeds the pause threshold, when the sentence reaches the maximum
word count, or at the last word.

RULES:
- Input order is preserved; every word lands in exactly one sentence
- Sentence start/end come from its first/last word
- text joins the words with single spaces
- Empty input yields an empty list
"""

from __future__ import annotations

import re

from clip_transcriber.core.models import Sentence, WordTiming

DEFAULT_MAX_WORDS_PER_SENTENCE = 8
DEFAULT_PAUSE_THRESHOLD_S = 0.5

_SENTENCE_END = re.compile(r"[.!?]$")


def group_words_into_sentences(
    words: list[WordTiming],
    max_words_per_sentence: int = DEFAULT_MAX_WORDS_PER_SENTENCE,
    pause_threshold: float = DEFAULT_PAUSE_THRESHOLD_S,
) -> list[Sentence]:
    """Split an ordered word list into display sentences.

    Args:
        words: Absolute word timings in temporal order.
        max_words_per_sentence: Hard cap on words per sentence.
        pause_threshold: Gap in seconds that forces a break.

    Returns:
        Sentences in order.
    """
    if max_words_per_sentence < 1:
        raise ValueError("max_words_per_sentence must be at least 1")

    sentences: list[Sentence] = []
    current: list[WordTiming] = []

    for i, word in enumerate(words):
        next_word = words[i + 1] if i + 1 < len(words) else None
        current.append(word)

        ends_punctuation = bool(_SENTENCE_END.search(word.word))
        long_pause = next_word is not None and next_word.start - word.end > pause_threshold
        full = len(current) >= max_words_per_sentence

        if ends_punctuation or long_pause or full or next_word is None:
            sentences.append(
                Sentence(
                    start=current[0].start,
                    end=current[-1].end,
                    text=" ".join(w.word for w in current),
                    words=list(current),
                )
            )
            current = []

    return sentences
