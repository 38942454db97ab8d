"""Transcript data model delivered by every speech-to-text source."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class WordInfo:
    start: float
    end: float
    word: str
    confidence: float = 1.0

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start, "end": self.end, "word": self.word, "confidence": self.confidence}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> WordInfo:
        # whisper-style engines emit {text, start, end}
        word = d.get("word") or d.get("text") or ""
        return cls(
            start=float(d["start"]),
            end=float(d["end"]),
            word=str(word),
            confidence=float(d.get("confidence", 1.0)),
        )


@dataclass(frozen=True)
class TranscriptSegment:
    start: float
    end: float
    text: str
    words: tuple[WordInfo, ...] = ()
    id: int | str | None = None
    confidence: float = 1.0

    @property
    def has_word_timestamps(self) -> bool:
        return bool(self.words)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "start": self.start,
            "end": self.end,
            "text": self.text,
            "confidence": self.confidence,
            "words": [w.to_dict() for w in self.words],
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> TranscriptSegment:
        words = tuple(WordInfo.from_dict(w) for w in d.get("words") or [])
        return cls(
            start=float(d["start"]),
            end=float(d["end"]),
            text=str(d.get("text") or ""),
            words=words,
            id=d.get("id"),
            confidence=float(d.get("confidence", 1.0)),
        )


@dataclass(frozen=True)
class TranscriptResult:
    segments: tuple[TranscriptSegment, ...]
    language: str = "unknown"
    backend: str = "unknown"
    duration: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "backend": self.backend,
            "language": self.language,
            "duration": self.duration,
            "segments": [s.to_dict() for s in self.segments],
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any] | list[dict[str, Any]]) -> TranscriptResult:
        """Build a transcript from ``{"segments": [...]}`` or a bare segment list.

        Segments without an ``id`` get their list position as id.
        """
        if isinstance(d, list):
            d = {"segments": d}
        segments = []
        for i, raw in enumerate(d.get("segments") or []):
            seg = TranscriptSegment.from_dict(raw)
            if seg.id is None:
                seg = TranscriptSegment(
                    start=seg.start, end=seg.end, text=seg.text,
                    words=seg.words, id=i, confidence=seg.confidence,
                )
            segments.append(seg)
        return cls(
            segments=tuple(segments),
            backend=d.get("backend", "unknown"),
            language=d.get("language", "unknown"),
            duration=float(d.get("duration", 0.0) or 0.0),
        )
