"""Search helpers for filtering and highlighting theme names."""

from .fuzzy import (
    MIN_HIGHLIGHT_QUERY,
    best_match,
    coalesce_positions,
    filter_items,
    fuzzy_positions,
    fuzzy_score,
    match_spans,
    matches,
)

__all__ = [
    "MIN_HIGHLIGHT_QUERY",
    "best_match",
    "coalesce_positions",
    "filter_items",
    "fuzzy_positions",
    "fuzzy_score",
    "match_spans",
    "matches",
]
