"""Script-to-transcript alignment ("paper edit").

Maps each line of a written script onto the transcript segments where it
was spoken:

1. Split the script into lines and tokenize lines and segment windows
2. Score every (line, 1-3 segment window) pair
3. Pick the order-preserving, non-overlapping assignment with the best total score
4. Trim each matched window to the words where the line starts and ends
5. Classify every line by confidence and collect unused segments

The result is a pure function of the script text, the transcript and the
alignment parameters.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from src.align.dp import dp_align
from src.align.errors import AlignmentInvariantError, InvalidInputError
from src.align.models import (
    AlignmentEntry,
    AlignmentResult,
    AlignmentStats,
    Assignment,
    MatchStatus,
)
from src.align.spans import SpanScoreTable
from src.align.text import split_script_into_lines, tokenize
from src.align.trim import trim_to_words
from src.transcription.base import TranscriptResult, TranscriptSegment
from src.utils.config import AlignmentConfig
from src.utils.logging import debug


def classify(score: float, params: AlignmentConfig) -> MatchStatus:
    """Status for a raw window score (before rounding to a confidence)."""
    if score >= params.matched_threshold:
        return MatchStatus.matched
    if score >= params.approximate_threshold:
        return MatchStatus.approximate
    return MatchStatus.unmatched


def load_transcript(transcript: TranscriptResult | Mapping[str, Any] | list | None) -> TranscriptResult:
    """Validate a transcript given as a ``TranscriptResult``, a dict or a bare segment list.

    Raises:
        InvalidInputError: missing transcript, empty segment list or a malformed segment
    """
    if transcript is None:
        raise InvalidInputError("A transcript is required")
    if isinstance(transcript, (Mapping, list)):
        raw = transcript if isinstance(transcript, list) else transcript.get("segments")
        if not raw:
            raise InvalidInputError("Transcript has no segments")
        try:
            transcript = TranscriptResult.from_dict(
                transcript if isinstance(transcript, list) else dict(transcript)
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise InvalidInputError(f"Malformed transcript segment: {e}") from e
    if not getattr(transcript, "segments", None):
        raise InvalidInputError("Transcript has no segments")
    return transcript


def _build_entry(assignment: Assignment, line: str,
                 segments: Sequence[TranscriptSegment],
                 params: AlignmentConfig) -> AlignmentEntry:
    if assignment.skipped:
        return AlignmentEntry(
            script_index=assignment.script_index,
            script_line=line,
            matched_segments=(),
            matched_text="",
            trimmed_start=None,
            trimmed_end=None,
            confidence=0.0,
            status=MatchStatus.unmatched,
        )

    window = segments[assignment.seg_start:assignment.seg_end]
    trimmed_start, trimmed_end = trim_to_words(line, window)
    return AlignmentEntry(
        script_index=assignment.script_index,
        script_line=line,
        matched_segments=tuple(assignment.segment_indices),
        matched_text=" ".join(seg.text for seg in window),
        trimmed_start=trimmed_start,
        trimmed_end=trimmed_end,
        confidence=round(assignment.score, 3),
        status=classify(assignment.score, params),
    )


def compute_stats(entries: Sequence[AlignmentEntry]) -> AlignmentStats:
    confidences = [e.confidence for e in entries if e.confidence > 0]
    avg = round(sum(confidences) / len(confidences), 3) if confidences else 0.0
    return AlignmentStats(
        total_lines=len(entries),
        matched=sum(1 for e in entries if e.status == MatchStatus.matched),
        approximate=sum(1 for e in entries if e.status == MatchStatus.approximate),
        unmatched=sum(1 for e in entries if e.status == MatchStatus.unmatched),
        avg_confidence=avg,
    )


def assemble_result(assignments: Sequence[Assignment], lines: Sequence[str],
                    segments: Sequence[TranscriptSegment],
                    params: AlignmentConfig) -> AlignmentResult:
    if len(assignments) != len(lines):
        raise AlignmentInvariantError(
            f"{len(assignments)} assignments for {len(lines)} script lines"
        )

    entries: list[AlignmentEntry] = []
    claimed: set[int] = set()
    last_claimed = -1
    for expected_index, assignment in enumerate(assignments):
        if assignment.script_index != expected_index:
            raise AlignmentInvariantError(
                f"Assignment for line {assignment.script_index} found at position {expected_index}"
            )
        if not assignment.skipped and assignment.seg_start <= last_claimed:
            raise AlignmentInvariantError(
                f"Line {expected_index} claims segment {assignment.seg_start} "
                f"at or before already claimed segment {last_claimed}"
            )
        entry = _build_entry(assignment, lines[expected_index], segments, params)
        if entry.matched_segments:
            claimed.update(entry.matched_segments)
            last_claimed = entry.matched_segments[-1]
        entries.append(entry)

    unused = tuple(i for i in range(len(segments)) if i not in claimed)
    return AlignmentResult(entries=tuple(entries), unused_segments=unused, stats=compute_stats(entries))


def align(script_text: str,
          transcript: TranscriptResult | Mapping[str, Any] | list | None,
          params: AlignmentConfig | None = None) -> AlignmentResult:
    """Align a written script against a time-stamped transcript.

    Args:
        script_text: Plain script text, one logical utterance per line
        transcript: ``TranscriptResult``, its dict form or a bare segment list
        params: Scoring weights and thresholds (defaults when omitted)

    Returns:
        One entry per script line, unused segment indices and summary stats

    Raises:
        InvalidInputError: empty script, missing/empty transcript, or no usable lines
    """
    if not isinstance(script_text, str) or not script_text.strip():
        raise InvalidInputError("Script text is required")
    segments = load_transcript(transcript).segments
    params = params or AlignmentConfig()

    lines = split_script_into_lines(script_text, params.max_line_chars)
    if not lines:
        raise InvalidInputError("Script text produced no usable lines after splitting")

    script_tokens = [tokenize(line) for line in lines]
    table = SpanScoreTable(script_tokens, segments, max_span=params.max_span, weights=params.weights)
    debug(f"Score table: {len(lines)} lines x {len(segments)} segments x span<={params.max_span}")

    assignments = dp_align(table, min_score=params.min_match_score, max_lookahead=params.max_lookahead)
    result = assemble_result(assignments, lines, segments, params)

    stats = result.stats
    debug(f"Alignment: {stats.matched} matched, {stats.approximate} approximate, "
         f"{stats.unmatched} unmatched of {stats.total_lines} lines "
         f"(avg conf {stats.avg_confidence:.2f}, {len(result.unused_segments)} unused segments)")
    return result
