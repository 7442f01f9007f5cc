"""
scoring.py

Multi-signal relevance scoring for knowledge entries.

Signals (each in [0, 1]):
    lexical   = shared / sqrt(|query| * |entry|), capped at 1
                (shared: exact token matches, plus PARTIAL_MATCH_WEIGHT
                 for long query words found inside longer entry words)
    tag       = |query_tags ∩ entry_tags| / max(1, |query_tags|)
    region    = 1.0 if region_hint equals any entry region (case-insensitive)
    language  = 1 - index / len(preferred_languages), first hit
    recency   = 0.5 ** (age_days / half_life_days)

final_score = clamp(Σ weight * signal, 0, 1), rounded to 4 places

Recency only orders candidates: an entry needs at least one of the
engine's relevance signals (default: lexical, tag, region, language).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

import config
from knowledge.models import KnowledgeEntry, QueryContext
from knowledge.store import KnowledgeStore, tokenize_entry
from nlp.query_normalizer import TokenMultiset

logger = logging.getLogger(__name__)


RELEVANCE_SIGNALS = ("lexical", "tag", "region", "language")
SCORE_PRECISION = 4


# ---------------- CONFIG ----------------

class ScoringWeights(BaseModel):
    model_config = ConfigDict(frozen=True)

    lexical: float = Field(config.WEIGHT_LEXICAL, ge=0.0)
    tag: float = Field(config.WEIGHT_TAG, ge=0.0)
    region: float = Field(config.WEIGHT_REGION, ge=0.0)
    language: float = Field(config.WEIGHT_LANGUAGE, ge=0.0)
    recency: float = Field(config.WEIGHT_RECENCY, ge=0.0)


@dataclass(frozen=True)
class ScoredEntry:
    entry: KnowledgeEntry
    score: float
    signals: Dict[str, float]


# ---------------- SIGNALS ----------------

def lexical_overlap(
    query: TokenMultiset,
    entry_tokens: TokenMultiset,
    partial_weight: float = config.PARTIAL_MATCH_WEIGHT,
    partial_min_length: int = config.PARTIAL_MATCH_MIN_LENGTH,
) -> float:
    if not query or not entry_tokens:
        return 0.0

    shared = 0.0
    for token, count in query.counts.items():
        exact = entry_tokens.count(token)
        if exact:
            shared += min(count, exact)
        elif partial_weight > 0 and len(token) >= partial_min_length:
            # "irrigation" inside "microirrigation"
            containing = sum(
                c for candidate, c in entry_tokens.counts.items() if token in candidate
            )
            shared += partial_weight * min(count, containing)

    if shared == 0:
        return 0.0

    return min(1.0, shared / math.sqrt(query.total_tokens * entry_tokens.total_tokens))


def tag_match(entry: KnowledgeEntry, context: QueryContext) -> float:
    if not context.tags:
        return 0.0
    return len(context.tags & entry.tags) / max(1, len(context.tags))


def region_match(entry: KnowledgeEntry, context: QueryContext) -> float:
    if not context.region_hint or not entry.regions:
        return 0.0
    hint = context.region_hint.casefold()
    return 1.0 if any(hint == region.casefold() for region in entry.regions) else 0.0


def language_preference(entry: KnowledgeEntry, context: QueryContext) -> float:
    preferred = context.preferred_languages
    for index, code in enumerate(preferred):
        if code in entry.languages:
            return 1.0 - (index / len(preferred))
    return 0.0


def recency(entry: KnowledgeEntry, as_of: date, half_life_days: float) -> float:
    age_days = max(0, (as_of - entry.last_updated.date()).days)
    return 0.5 ** (age_days / half_life_days)


# ---------------- ENGINE ----------------

class ScoringEngine:
    """
    Stateless apart from configuration; safe to share across threads.
    """

    def __init__(
        self,
        weights: Optional[ScoringWeights] = None,
        recency_half_life_days: float = config.RECENCY_HALF_LIFE_DAYS,
        min_score: float = config.MIN_SCORE,
        relevance_signals: Sequence[str] = RELEVANCE_SIGNALS,
    ):
        if recency_half_life_days <= 0:
            raise ValueError("recency_half_life_days must be positive")

        relevance_signals = tuple(relevance_signals)
        unknown = set(relevance_signals) - set(RELEVANCE_SIGNALS)
        if not relevance_signals or unknown:
            raise ValueError(f"relevance_signals must be drawn from {RELEVANCE_SIGNALS}")

        self.weights = weights or ScoringWeights()
        self.recency_half_life_days = recency_half_life_days
        self.min_score = min_score
        self.relevance_signals = relevance_signals

    # ---------- SINGLE ENTRY ----------

    def signals(
        self,
        entry: KnowledgeEntry,
        query: TokenMultiset,
        context: QueryContext,
        entry_tokens: Optional[TokenMultiset] = None,
    ) -> Dict[str, float]:
        if entry_tokens is None:
            entry_tokens = tokenize_entry(entry)

        return {
            "lexical": lexical_overlap(query, entry_tokens),
            "tag": tag_match(entry, context),
            "region": region_match(entry, context),
            "language": language_preference(entry, context),
            "recency": recency(
                entry, context.reference_date(), self.recency_half_life_days
            ),
        }

    def is_relevant(self, signals: Dict[str, float]) -> bool:
        return any(signals.get(name, 0.0) > 0.0 for name in self.relevance_signals)

    def combine(self, signals: Dict[str, float]) -> float:
        if not self.is_relevant(signals):
            return 0.0

        w = self.weights
        total = (
            w.lexical * signals["lexical"]
            + w.tag * signals["tag"]
            + w.region * signals["region"]
            + w.language * signals["language"]
            + w.recency * signals["recency"]
        )
        return round(min(1.0, max(0.0, total)), SCORE_PRECISION)

    def score(
        self,
        entry: KnowledgeEntry,
        query: TokenMultiset,
        context: QueryContext,
        entry_tokens: Optional[TokenMultiset] = None,
    ) -> float:
        return self.combine(self.signals(entry, query, context, entry_tokens))

    # ---------- WHOLE STORE ----------

    def score_store(
        self,
        store: KnowledgeStore,
        query: TokenMultiset,
        context: QueryContext,
    ) -> List[ScoredEntry]:
        """
        Score every entry; return only candidates worth ranking.

        O(entries x query tokens); long query words that miss exactly
        are also checked against every word of the entry.
        """
        candidates: List[ScoredEntry] = []

        for entry in store:
            signals = self.signals(entry, query, context, store.tokens_for(entry))
            scored = ScoredEntry(entry=entry, score=self.combine(signals), signals=signals)

            if not self.is_relevant(signals) or scored.score <= self.min_score:
                continue

            candidates.append(scored)

        logger.debug(
            "Scored %d entries, %d candidates (query tokens=%d)",
            len(store),
            len(candidates),
            query.total_tokens,
        )
        return candidates
