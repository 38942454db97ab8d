"""Script text normalization and line splitting."""

from __future__ import annotations

import re
import unicodedata

_NON_WORD = re.compile(r"[^\w\s']")  # apostrophes stay for contractions
_WHITESPACE = re.compile(r"\s+")
_SEPARATOR_LINE = re.compile(r"^[-=*_]{3,}$")
_SENTENCE_END = re.compile(r"(?<=[.!?])\s+")

DEFAULT_MAX_LINE_CHARS = 200


def normalize(text: str) -> str:
    """Lowercase, replace punctuation with spaces, collapse whitespace."""
    text = unicodedata.normalize("NFC", text.lower())
    text = _NON_WORD.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def tokenize(text: str) -> list[str]:
    normalized = normalize(text)
    return normalized.split(" ") if normalized else []


def split_script_into_lines(script_text: str,
                            max_line_chars: int = DEFAULT_MAX_LINE_CHARS) -> list[str]:
    """Split a script into alignable lines.

    - One line per newline-separated piece, trimmed
    - Empty pieces and separator rules (``---``, ``===``, ``***``, ``___``) are dropped
    - Pieces longer than ``max_line_chars`` are split further on sentence ends
    """
    lines: list[str] = []
    for raw_line in script_text.split("\n"):
        line = raw_line.strip()
        if not line or _SEPARATOR_LINE.match(line):
            continue
        if len(line) > max_line_chars:
            for sentence in _SENTENCE_END.split(line):
                sentence = sentence.strip()
                if sentence:
                    lines.append(sentence)
        else:
            lines.append(line)
    return lines
