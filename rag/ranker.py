from typing import Iterable, List, Optional

import config
from knowledge.models import Match
from rag.scoring import ScoredEntry


def _sort_key(scored: ScoredEntry):
    # score desc, freshest first, then id asc: a total order
    return (
        -scored.score,
        -scored.entry.last_updated.timestamp(),
        scored.entry.id,
    )


def rank(scored_entries: Iterable[ScoredEntry], limit: Optional[int] = None) -> List[Match]:
    """
    Top-`limit` matches. Zero-score entries are dropped, never padded in.
    """
    limit = config.DEFAULT_LIMIT if limit is None else limit
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")

    ranked = sorted(
        (s for s in scored_entries if s.score > 0.0),
        key=_sort_key,
    )

    return [Match.from_entry(s.entry, s.score) for s in ranked[:limit]]
