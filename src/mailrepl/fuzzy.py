"""Subsequence fuzzy matching for command names.

Matches if all query characters appear in order (not necessarily consecutive).
Higher score = better match.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

_WORD_BOUNDARY_RE = re.compile(r"[\s\-_./:]")


@dataclass(frozen=True)
class FuzzyMatch:
    matches: bool
    score: float


NO_MATCH = FuzzyMatch(matches=False, score=0)


def fuzzy_match(query: str, text: str) -> FuzzyMatch:
    """Score *query* against *text*, ignoring case.

    Contiguous runs and word-boundary hits raise the score; gaps between
    matched characters and a late first match lower it.
    """
    query_lower = query.lower()
    text_lower = text.lower()

    if len(query_lower) == 0:
        return FuzzyMatch(matches=True, score=0)

    if len(query_lower) > len(text_lower):
        return NO_MATCH

    query_index = 0
    score: float = 0
    last_match_index = -1
    consecutive_matches = 0

    for i, ch in enumerate(text_lower):
        if query_index >= len(query_lower):
            break
        if ch != query_lower[query_index]:
            continue

        is_word_boundary = i == 0 or bool(_WORD_BOUNDARY_RE.match(text_lower[i - 1]))

        if last_match_index == i - 1:
            consecutive_matches += 1
            score += consecutive_matches * 5
        else:
            consecutive_matches = 0
            if last_match_index >= 0:
                score -= (i - last_match_index - 1) * 2

        if is_word_boundary:
            score += 10

        score -= i * 0.1
        score += 1

        last_match_index = i
        query_index += 1

    if query_index < len(query_lower):
        return NO_MATCH

    return FuzzyMatch(matches=True, score=score)


def fuzzy_rank(query: str, names: Iterable[str]) -> list[tuple[str, float]]:
    """Return ``(name, score)`` for every matching name, best first.

    Ties on score are broken by ascending name, so the order is total and
    reproducible.
    """
    results: list[tuple[str, float]] = []
    for name in names:
        match = fuzzy_match(query, name)
        if match.matches:
            results.append((name, match.score))

    results.sort(key=lambda r: (-r[1], r[0]))
    return results
