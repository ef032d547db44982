"""Subsequence matching, highlight spans, and candidate filtering."""

from __future__ import annotations

from collections.abc import Callable, Iterable

MIN_HIGHLIGHT_QUERY = 2


def fuzzy_positions(text: str, query: str) -> list[int] | None:
    """Return the column of each query character matched in order.

    Matching is case-insensitive and greedy left-to-right. ``None`` means some
    query character has no occurrence after the previous match.
    """
    if not query:
        return []
    text_folded = text.casefold()
    positions: list[int] = []
    prev_idx = -1
    for needle in query.casefold():
        idx = text_folded.find(needle, prev_idx + 1)
        if idx < 0:
            return None
        positions.append(idx)
        prev_idx = idx
    return positions


def coalesce_positions(positions: Iterable[int]) -> list[tuple[int, int]]:
    """Merge sorted column positions into half-open ``(start, end)`` runs."""
    spans: list[tuple[int, int]] = []
    for pos in positions:
        if spans and spans[-1][1] == pos:
            spans[-1] = (spans[-1][0], pos + 1)
        else:
            spans.append((pos, pos + 1))
    return spans


def match_spans(text: str, query: str) -> list[tuple[int, int]]:
    """Return highlight spans for ``query`` inside ``text``.

    Queries shorter than two characters are not highlighted.
    """
    if len(query) < MIN_HIGHLIGHT_QUERY:
        return []
    positions = fuzzy_positions(text, query)
    if positions is None:
        return []
    return coalesce_positions(positions)


def matches(text: str, query: str) -> bool:
    return fuzzy_positions(text, query) is not None


def fuzzy_score(query: str, candidate: str) -> int | None:
    """Score a subsequence match; higher is better, ``None`` means no match.

    Contiguous runs and word-boundary hits are rewarded, gaps are penalized.
    """
    if not query:
        return 0
    query_folded = query.casefold()
    candidate_folded = candidate.casefold()

    score = 0
    prev_idx = -1
    run = 0
    for needle in query_folded:
        idx = candidate_folded.find(needle, prev_idx + 1)
        if idx < 0:
            return None
        if idx == prev_idx + 1:
            run += 1
            score += 20 + min(16, run * 4)
        else:
            gap = idx - prev_idx - 1
            run = 0
            score -= min(40, gap * 2)
        if idx == 0 or candidate_folded[idx - 1] in "/_- .":
            score += 35
        prev_idx = idx

    score -= len(candidate_folded) // 5
    return score


def filter_items(
    candidates: Iterable[str],
    query: str,
    scope: str | None = None,
    group_path_of: Callable[[str], tuple[str, ...] | None] | None = None,
    display_name_of: Callable[[str], str] | None = None,
) -> list[str]:
    """Keep candidates matching ``query`` (and ``scope``) in their given order.

    ``scope`` drops candidates whose group path does not contain that group
    name; without ``group_path_of`` every candidate is out of scope.
    ``display_name_of`` lets aliases match alongside the raw name.
    """
    kept: list[str] = []
    for name in candidates:
        if scope:
            path = group_path_of(name) if group_path_of is not None else None
            if not path or scope not in path:
                continue
        if query:
            if not matches(name, query):
                display = display_name_of(name) if display_name_of is not None else name
                if display == name or not matches(display, query):
                    continue
        kept.append(name)
    return kept


def best_match(candidates: Iterable[str], query: str) -> str | None:
    """Return the highest scoring candidate, earliest on ties."""
    best: tuple[int, str] | None = None
    for name in candidates:
        score = fuzzy_score(query, name)
        if score is None:
            continue
        if best is None or score > best[0]:
            best = (score, name)
    return best[1] if best is not None else None
