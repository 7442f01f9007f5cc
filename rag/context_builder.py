"""
context_builder.py

Formatting-only component: ranked matches -> context block
injected into the generative prompt.

NO re-sorting (ranker order is authoritative).
NO I/O.
"""

from typing import List, Sequence

import config
from knowledge.models import Match


def build_context_text(matches: Sequence[Match]) -> str:
    if not matches:
        return config.NO_REFERENCES_TEXT

    return "\n\n".join(
        _format_match(i, m) for i, m in enumerate(matches, start=1)
    )


def _format_match(index: int, match: Match) -> str:
    lines: List[str] = [
        f"[{index}] {match.title}",
        f"Summary: {match.summary}",
    ]
    if match.details:
        lines.append(f"Details:\n{match.details}")

    lines += [
        f"Source: {match.source}",
        f"Updated: {match.last_updated.date().isoformat()}",
    ]
    if match.url:
        lines.append(f"URL: {match.url}")

    return "\n".join(lines)
