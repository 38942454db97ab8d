"""Token-sequence similarity: Jaccard overlap, LCS ratio and word order.

All scores are bounded to [0, 1]. ``combined_score`` blends the three
signals with ``ScoringWeights``; LCS has the largest default weight.
"""

from __future__ import annotations

from collections.abc import Sequence

from src.utils.config import ScoringWeights

DEFAULT_WEIGHTS = ScoringWeights()


def jaccard(a: Sequence[str], b: Sequence[str]) -> float:
    set_a, set_b = set(a), set(b)
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def lcs_length(a: Sequence[str], b: Sequence[str]) -> int:
    """Longest common subsequence length, two rolling rows over the shorter input."""
    if len(b) > len(a):
        a, b = b, a
    if not b:
        return 0

    prev = [0] * (len(b) + 1)
    curr = [0] * (len(b) + 1)
    for token_a in a:
        for j, token_b in enumerate(b, start=1):
            if token_a == token_b:
                curr[j] = prev[j - 1] + 1
            else:
                curr[j] = max(prev[j], curr[j - 1])
        prev, curr = curr, prev
    return prev[len(b)]


def lcs_ratio(a: Sequence[str], b: Sequence[str]) -> float:
    longest = max(len(a), len(b))
    if longest == 0:
        return 0.0
    return lcs_length(a, b) / longest


def _first_positions(tokens: Sequence[str]) -> dict[str, float]:
    denom = max(len(tokens) - 1, 1)
    positions: dict[str, float] = {}
    for i, token in enumerate(tokens):
        if token not in positions:
            positions[token] = i / denom
    return positions


def word_order_score(a: Sequence[str], b: Sequence[str]) -> float:
    """Agreement of relative first-occurrence positions of shared tokens.

    No shared token scores 0; a single shared token scores 0.5 since order
    cannot be measured from one point.
    """
    pos_a = _first_positions(a)
    pos_b = _first_positions(b)
    shared = [t for t in pos_a if t in pos_b]
    if not shared:
        return 0.0
    if len(shared) == 1:
        return 0.5

    mean_diff = sum(abs(pos_a[t] - pos_b[t]) for t in shared) / len(shared)
    return max(0.0, 1.0 - mean_diff)


def combined_score(a: Sequence[str], b: Sequence[str],
                   weights: ScoringWeights = DEFAULT_WEIGHTS) -> float:
    if not a or not b:
        return 0.0
    return (
        weights.jaccard * jaccard(a, b)
        + weights.lcs * lcs_ratio(a, b)
        + weights.word_order * word_order_score(a, b)
    )
