"""Tests for the span score table and the DP aligner."""

from __future__ import annotations

import pytest

from src.align.dp import dp_align
from src.align.models import Assignment
from src.align.similarity import combined_score
from src.align.spans import SpanScoreTable
from src.align.text import tokenize
from src.transcription.base import TranscriptSegment


class FakeTable:
    """Score table with hand-picked scores; anything unset scores 0."""

    def __init__(self, n_lines: int, n_segments: int, scores: dict | None = None, max_span: int = 3):
        self.n_lines = n_lines
        self.n_segments = n_segments
        self.max_span = max_span
        self.scores = scores or {}

    def spans_at(self, t):
        return range(1, min(self.max_span, self.n_segments - t) + 1)

    def score(self, s, t, span):
        return self.scores.get((s, t, span), 0.0)


def _windows(assignments):
    return [(a.seg_start, a.seg_end) for a in assignments]


# ── SpanScoreTable ───────────────────────────────────────────────────────────

def _segs(*texts):
    return [TranscriptSegment(start=float(i), end=float(i + 1), text=t, id=i) for i, t in enumerate(texts)]


def test_span_table_scores_match_combined_score():
    lines = [tokenize("hello world again")]
    segs = _segs("hello world", "again", "bye")
    table = SpanScoreTable(lines, segs)
    assert table.score(0, 0, 2) == pytest.approx(
        combined_score(lines[0], tokenize("hello world again"))
    )
    assert table.score(0, 2, 1) == 0.0


def test_span_table_spans_bounded_by_remaining_segments():
    table = SpanScoreTable([["a"]], _segs("a", "b", "c", "d"))
    assert list(table.spans_at(0)) == [1, 2, 3]
    assert list(table.spans_at(2)) == [1, 2]
    assert list(table.spans_at(3)) == [1]


def test_span_table_respects_max_span():
    table = SpanScoreTable([["a"]], _segs("a", "b", "c"), max_span=1)
    assert list(table.spans_at(0)) == [1]


def test_span_table_tokenizes_each_window_once(monkeypatch):
    import src.align.spans as spans_mod

    calls = []
    real_tokenize = spans_mod.tokenize

    def counting_tokenize(text):
        calls.append(text)
        return real_tokenize(text)

    monkeypatch.setattr(spans_mod, "tokenize", counting_tokenize)
    lines = [tokenize("a b"), tokenize("b c"), tokenize("c a")]
    SpanScoreTable(lines, _segs("a", "b", "c"))
    # windows: (0,1) (0,2) (0,3) (1,1) (1,2) (2,1)
    assert len(calls) == 6


def test_span_table_window_tokens_cached():
    table = SpanScoreTable([["a"]], _segs("Hello there", "friend"))
    assert table.window_tokens(0, 2) is table.window_tokens(0, 2)
    assert table.window_tokens(0, 2) == ["hello", "there", "friend"]


# ── DP aligner ───────────────────────────────────────────────────────────────

def test_single_best_window():
    table = FakeTable(1, 3, {(0, 1, 1): 0.9, (0, 0, 2): 0.5})
    assignments = dp_align(table)
    assert assignments == [Assignment(script_index=0, seg_start=1, seg_end=2, score=0.9)]


def test_global_optimum_beats_greedy():
    # greedy would give line 0 segment 1 (0.9) and leave line 1 with nothing
    table = FakeTable(2, 2, {
        (0, 0, 1): 0.6, (0, 1, 1): 0.9,
        (1, 1, 1): 0.8,
    })
    assert _windows(dp_align(table)) == [(0, 1), (1, 2)]


def test_no_crossing():
    table = FakeTable(2, 2, {(0, 1, 1): 0.9, (1, 0, 1): 0.8})
    assignments = dp_align(table)
    assert _windows(assignments) == [(1, 2), (None, None)]
    assert assignments[1].skipped


def test_multi_segment_window():
    table = FakeTable(1, 3, {(0, 0, 1): 0.4, (0, 0, 3): 0.95})
    assert _windows(dp_align(table)) == [(0, 3)]


def test_tie_prefers_earlier_then_shorter():
    table = FakeTable(1, 3, {(0, 0, 2): 0.5, (0, 0, 1): 0.5, (0, 1, 1): 0.5})
    assert _windows(dp_align(table)) == [(0, 1)]


def test_floor_rejects_weak_matches():
    table = FakeTable(1, 1, {(0, 0, 1): 0.14})
    assert dp_align(table)[0].skipped


def test_floor_is_inclusive():
    table = FakeTable(1, 1, {(0, 0, 1): 0.15})
    assert _windows(dp_align(table)) == [(0, 1)]


def test_custom_floor():
    table = FakeTable(1, 1, {(0, 0, 1): 0.5})
    assert dp_align(table, min_score=0.6)[0].skipped


def test_one_assignment_per_line_in_order():
    table = FakeTable(4, 2, {(0, 0, 1): 0.9, (3, 1, 1): 0.9})
    assignments = dp_align(table)
    assert [a.script_index for a in assignments] == [0, 1, 2, 3]
    assert _windows(assignments) == [(0, 1), (None, None), (None, None), (1, 2)]


def test_no_segments_skips_everything():
    assignments = dp_align(FakeTable(3, 0))
    assert len(assignments) == 3
    assert all(a.skipped for a in assignments)


def test_no_lines():
    assert dp_align(FakeTable(0, 5)) == []


def test_skipped_assignment_has_zero_score():
    assignment = dp_align(FakeTable(1, 1))[0]
    assert assignment.skipped
    assert assignment.score == 0.0
    assert list(assignment.segment_indices) == []


# ── Lookahead knob ───────────────────────────────────────────────────────────

def test_lookahead_limits_search():
    table = FakeTable(1, 3, {(0, 2, 1): 0.9})
    assert _windows(dp_align(table)) == [(2, 3)]
    assert dp_align(table, max_lookahead=1)[0].skipped


def test_wide_lookahead_matches_global():
    scores = {}
    for s in range(5):
        for t in range(7):
            for span in (1, 2, 3):
                scores[(s, t, span)] = ((s * 7 + t * 3 + span * 5) % 10) / 10
    table = FakeTable(5, 7, scores)
    assert dp_align(table) == dp_align(table, max_lookahead=100)
