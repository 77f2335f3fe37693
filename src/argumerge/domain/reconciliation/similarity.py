"""Levenshtein-based similarity between normalized strings."""

from __future__ import annotations

from .normalize import normalize_text


def levenshtein(a: str, b: str) -> int:
    """Edit distance with unit cost insertions, deletions and substitutions.

    Operates on code points and keeps two rows of the DP matrix, sized by the
    shorter string.
    """

    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    shorter, longer = (a, b) if len(a) <= len(b) else (b, a)
    previous = list(range(len(shorter) + 1))
    current = [0] * (len(shorter) + 1)
    for i, long_ch in enumerate(longer, start=1):
        current[0] = i
        for j, short_ch in enumerate(shorter, start=1):
            cost = 0 if long_ch == short_ch else 1
            current[j] = min(
                current[j - 1] + 1,
                previous[j] + 1,
                previous[j - 1] + cost,
            )
        previous, current = current, previous
    return previous[len(shorter)]


def similarity_ratio(normalized_a: str, normalized_b: str) -> float:
    """Similarity of two already-normalized strings."""

    longest = max(len(normalized_a), len(normalized_b))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein(normalized_a, normalized_b) / longest


def similarity(a: str, b: str) -> float:
    """Return ``1 - levenshtein / max_len`` over the normalized forms, in [0, 1]."""

    return similarity_ratio(normalize_text(a), normalize_text(b))


def are_similar(a: str, b: str, threshold: float = 0.90) -> bool:
    return similarity(a, b) >= threshold


def max_similarity_bound(length_a: int, length_b: int) -> float:
    """Best ratio two strings of these lengths can reach.

    The edit distance is at least the length difference, so the ratio is at
    most ``min / max``.
    """

    longest = max(length_a, length_b)
    if longest == 0:
        return 1.0
    return min(length_a, length_b) / longest
