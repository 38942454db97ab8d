"""Alignment value objects, computed fresh per call and never mutated."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class MatchStatus(str, Enum):
    matched = "matched"
    approximate = "approximate"
    unmatched = "unmatched"


@dataclass(frozen=True)
class Assignment:
    """One DP decision: script line -> half-open segment window, or skipped."""
    script_index: int
    seg_start: int | None = None
    seg_end: int | None = None
    score: float = 0.0

    @property
    def skipped(self) -> bool:
        return self.seg_start is None

    @property
    def segment_indices(self) -> range:
        if self.seg_start is None or self.seg_end is None:
            return range(0)
        return range(self.seg_start, self.seg_end)


@dataclass(frozen=True)
class AlignmentEntry:
    script_index: int
    script_line: str
    matched_segments: tuple[int, ...]
    matched_text: str
    trimmed_start: float | None
    trimmed_end: float | None
    confidence: float
    status: MatchStatus

    def to_dict(self) -> dict[str, Any]:
        return {
            "script_index": self.script_index,
            "script_line": self.script_line,
            "matched_segments": list(self.matched_segments),
            "matched_text": self.matched_text,
            "trimmed_start": self.trimmed_start,
            "trimmed_end": self.trimmed_end,
            "confidence": self.confidence,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class AlignmentStats:
    total_lines: int
    matched: int
    approximate: int
    unmatched: int
    avg_confidence: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_lines": self.total_lines,
            "matched": self.matched,
            "approximate": self.approximate,
            "unmatched": self.unmatched,
            "avg_confidence": self.avg_confidence,
        }


@dataclass(frozen=True)
class AlignmentResult:
    entries: tuple[AlignmentEntry, ...]
    unused_segments: tuple[int, ...]
    stats: AlignmentStats

    def to_dict(self) -> dict[str, Any]:
        return {
            "entries": [e.to_dict() for e in self.entries],
            "unused_segments": list(self.unused_segments),
            "stats": self.stats.to_dict(),
        }
