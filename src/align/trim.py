"""Word-level trimming of a matched segment window."""

from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple

from src.align.text import normalize, tokenize
from src.transcription.base import TranscriptSegment


class TimedWord(NamedTuple):
    text: str
    start: float
    end: float


def flatten_words(segments: Sequence[TranscriptSegment]) -> list[TimedWord]:
    """Flatten word timestamps; a segment without words becomes one pseudo-word."""
    words: list[TimedWord] = []
    for seg in segments:
        if seg.words:
            words.extend(TimedWord(normalize(w.word), w.start, w.end) for w in seg.words)
        else:
            words.append(TimedWord(normalize(seg.text), seg.start, seg.end))
    return words


def _fuzzy_hit(word: str, token: str) -> bool:
    return token in word or word in token


def trim_to_words(script_line: str,
                  segments: Sequence[TranscriptSegment]) -> tuple[float, float]:
    """Narrow a window to the words where the script line starts and ends.

    The first word containing (or contained in) the line's first token sets
    the start; the last word matching the line's last token sets the end.
    Falls back to the window's own bounds when the result is not a positive
    range.
    """
    window_start = segments[0].start
    window_end = segments[-1].end

    tokens = tokenize(script_line)
    words = flatten_words(segments)
    if not tokens or not words:
        return window_start, window_end

    first, last = tokens[0], tokens[-1]
    start = next((w.start for w in words if _fuzzy_hit(w.text, first)), words[0].start)
    end = next((w.end for w in reversed(words) if _fuzzy_hit(w.text, last)), words[-1].end)

    if start >= end:
        return window_start, window_end
    return start, end
