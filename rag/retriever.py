from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional

from knowledge.models import Match, QueryContext
from knowledge.store import KnowledgeStore
from nlp.query_normalizer import normalize
from rag.ranker import rank
from rag.scoring import ScoringEngine

logger = logging.getLogger(__name__)


class KnowledgeRetriever:
    """
    Lexical + hint retriever over one KnowledgeStore snapshot.

    Guarantees:
    - len(result) <= limit
    - deterministic order (score, last_updated, id)
    - empty list, not an error, when nothing is relevant
    - a question with no usable tokens never matches
    """

    def __init__(self, store: KnowledgeStore, scoring_engine: Optional[ScoringEngine] = None):
        if store is None:
            raise TypeError("KnowledgeRetriever requires a KnowledgeStore")
        self.store = store
        self.scoring_engine = scoring_engine or ScoringEngine()

    # ---------- MAIN RETRIEVAL ----------

    def retrieve(
        self,
        question: str,
        limit: Optional[int] = None,
        region_hint: Optional[str] = None,
        preferred_languages: Iterable[str] = (),
        tags: Iterable[str] = (),
        as_of: Optional[date] = None,
    ) -> List[Match]:
        context = QueryContext(
            question=question,
            limit=limit,
            region_hint=region_hint,
            preferred_languages=preferred_languages,
            tags=tags,
            as_of=as_of,
        )
        return self.retrieve_context(context)["matches"]

    def retrieve_context(self, context: QueryContext) -> Dict:
        """
        Returns:
        {
            "matches": [Match, ...],
            "diagnostics": {"status": "ok" | "empty", "reason": ..., ...}
        }
        """
        if not context.question.strip():
            return self._empty("empty_question")

        if len(self.store) == 0:
            return self._empty("empty_corpus")

        query = normalize(context.question)
        if not query:
            # symbols, single letters or stopwords only: nothing to match on
            return self._empty("no_query_tokens")

        candidates = self.scoring_engine.score_store(self.store, query, context)

        if not candidates:
            return self._empty("no_relevant_entries", query_tokens=query.total_tokens)

        matches = rank(candidates, context.limit)

        if logger.isEnabledFor(logging.DEBUG):
            by_id = {c.entry.id: c.signals for c in candidates}
            for m in matches:
                logger.debug("match %s score=%.4f signals=%s", m.id, m.score, by_id[m.id])

        return {
            "matches": matches,
            "diagnostics": {
                "status": "ok",
                "query_tokens": query.total_tokens,
                "candidates": len(candidates),
                "returned": len(matches),
                "top_score": matches[0].score,
            },
        }

    # ---------- EMPTY ----------

    def _empty(self, reason: str, **extra) -> Dict:
        return {
            "matches": [],
            "diagnostics": {"status": "empty", "reason": reason, **extra},
        }


def retrieve_knowledge_context(
    store: KnowledgeStore,
    question: str,
    limit: Optional[int] = None,
    region_hint: Optional[str] = None,
    preferred_languages: Iterable[str] = (),
    tags: Iterable[str] = (),
    as_of: Optional[date] = None,
    scoring_engine: Optional[ScoringEngine] = None,
) -> List[Match]:
    return KnowledgeRetriever(store, scoring_engine).retrieve(
        question,
        limit=limit,
        region_hint=region_hint,
        preferred_languages=preferred_languages,
        tags=tags,
        as_of=as_of,
    )
