"""Score table for every (script line, segment window) pair."""

from __future__ import annotations

from collections.abc import Sequence

from src.align.similarity import DEFAULT_WEIGHTS, combined_score
from src.align.text import tokenize
from src.transcription.base import TranscriptSegment
from src.utils.config import ScoringWeights


class SpanScoreTable:
    """Scores of script line ``s`` against segments ``[t, t+span)``.

    Window tokenizations are cached per table, so each window is tokenized
    once no matter how many script lines it is scored against. The table
    lives for a single ``align`` call.
    """

    def __init__(self, script_tokens: Sequence[Sequence[str]],
                 segments: Sequence[TranscriptSegment],
                 max_span: int = 3,
                 weights: ScoringWeights = DEFAULT_WEIGHTS):
        self.script_tokens = script_tokens
        self.segments = segments
        self.max_span = max_span
        self.weights = weights
        self._window_tokens: dict[tuple[int, int], list[str]] = {}
        self._scores = self._build()

    @property
    def n_lines(self) -> int:
        return len(self.script_tokens)

    @property
    def n_segments(self) -> int:
        return len(self.segments)

    def spans_at(self, t: int) -> range:
        """Valid span lengths for a window starting at segment ``t``."""
        return range(1, min(self.max_span, self.n_segments - t) + 1)

    def window_tokens(self, t: int, span: int) -> list[str]:
        key = (t, span)
        tokens = self._window_tokens.get(key)
        if tokens is None:
            text = " ".join(seg.text for seg in self.segments[t:t + span])
            tokens = tokenize(text)
            self._window_tokens[key] = tokens
        return tokens

    def score(self, s: int, t: int, span: int) -> float:
        return self._scores[s][t][span - 1]

    def _build(self) -> list[list[list[float]]]:
        table = []
        for line_tokens in self.script_tokens:
            row = []
            for t in range(self.n_segments):
                row.append([
                    combined_score(line_tokens, self.window_tokens(t, span), self.weights)
                    for span in self.spans_at(t)
                ])
            table.append(row)
        return table
