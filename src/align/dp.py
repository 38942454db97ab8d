"""Globally optimal, order-preserving assignment of script lines to segment windows.

``dp[s][t]`` is the best total score for script lines ``s..S-1`` using only
segments with index >= ``t``. Each line either is skipped or takes one
window ``[t2, t2+span)`` with ``t2 >= t``; the next line then starts at
``t2+span``, so windows never overlap or cross. Ties keep the first option
in scan order: skip, then ``t2`` ascending, then ``span`` ascending.
"""

from __future__ import annotations

import math

from src.align.errors import AlignmentInvariantError
from src.align.models import Assignment
from src.align.spans import SpanScoreTable
from src.utils.logging import debug

SKIP = (-1, 0)

Choice = tuple[int, int]


def _best_span_at(table: SpanScoreTable, s: int, t2: int,
                  next_row: list[float], min_score: float) -> tuple[float, int]:
    """Best (total, span) for windows starting exactly at ``t2``; span 0 if none qualify."""
    best_total = -math.inf
    best_span = 0
    for span in table.spans_at(t2):
        sc = table.score(s, t2, span)
        if sc < min_score:
            continue
        total = sc + next_row[t2 + span]
        if total > best_total:
            best_total = total
            best_span = span
    return best_total, best_span


def _fill_row_global(table: SpanScoreTable, s: int, next_row: list[float],
                     row: list[float], choices: list[Choice | None], min_score: float) -> None:
    # Running best over every t2 >= t, so the row costs O(T * span).
    n = table.n_segments
    best_match_total = -math.inf
    best_match: Choice | None = None
    for t in range(n, -1, -1):
        if t < n:
            total, span = _best_span_at(table, s, t, next_row, min_score)
            # >= so an earlier t2 wins a tie against a later one
            if span and total >= best_match_total:
                best_match_total = total
                best_match = (t, span)
        skip_total = next_row[t]
        if best_match is not None and best_match_total > skip_total:
            row[t] = best_match_total
            choices[t] = best_match
        else:
            row[t] = skip_total
            choices[t] = SKIP


def _fill_row_windowed(table: SpanScoreTable, s: int, next_row: list[float],
                       row: list[float], choices: list[Choice | None],
                       min_score: float, lookahead: int) -> None:
    n = table.n_segments
    for t in range(n, -1, -1):
        best = next_row[t]
        choice: Choice = SKIP
        for t2 in range(t, min(n, t + lookahead)):
            total, span = _best_span_at(table, s, t2, next_row, min_score)
            if span and total > best:
                best = total
                choice = (t2, span)
        row[t] = best
        choices[t] = choice


def dp_align(table: SpanScoreTable, min_score: float = 0.15,
             max_lookahead: int | None = None) -> list[Assignment]:
    """Return exactly one ``Assignment`` per script line, in script order.

    ``max_lookahead`` bounds how far past the current position a window may
    start; this trades global optimality for speed on very long transcripts.
    """
    n_lines = table.n_lines
    n_segs = table.n_segments

    dp = [[0.0] * (n_segs + 1) for _ in range(n_lines + 1)]
    choice: list[list[Choice | None]] = [[None] * (n_segs + 1) for _ in range(n_lines + 1)]

    for s in range(n_lines - 1, -1, -1):
        if max_lookahead is None:
            _fill_row_global(table, s, dp[s + 1], dp[s], choice[s], min_score)
        else:
            _fill_row_windowed(table, s, dp[s + 1], dp[s], choice[s], min_score, max_lookahead)

    debug(f"DP fill: {n_lines} lines x {n_segs} segments, best total {dp[0][0]:.3f}")

    assignments: list[Assignment] = []
    t = 0
    for s in range(n_lines):
        c = choice[s][t]
        if c is None:
            raise AlignmentInvariantError(f"No recorded choice at state (line={s}, segment={t})")
        if c == SKIP:
            assignments.append(Assignment(script_index=s))
            continue
        t2, span = c
        if t2 < t or span < 1 or span > table.max_span or t2 + span > n_segs:
            raise AlignmentInvariantError(
                f"Invalid window [{t2}, {t2 + span}) recorded at state (line={s}, segment={t})"
            )
        assignments.append(Assignment(
            script_index=s, seg_start=t2, seg_end=t2 + span, score=table.score(s, t2, span),
        ))
        t = t2 + span

    return assignments
