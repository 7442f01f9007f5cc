import logging
from typing import Dict, Iterable, List, Optional, Union

import config
from knowledge.models import QueryContext
from knowledge.store import KnowledgeStore, KnowledgeStoreRef
from nlp.language_detector import LanguageDetector, default_detector
from rag.context_builder import build_context_text
from rag.retriever import KnowledgeRetriever
from rag.scoring import ScoringEngine

logger = logging.getLogger(__name__)


# language and region preferences are always injected here: they order
# citations but never qualify an entry on their own
CITATION_SIGNALS = ("lexical", "tag")


# ---------------- USER-FACING MESSAGES ----------------

NO_REFERENCE_MESSAGES = {
    "empty_question": "Please type a question so we can look up references.",
    "no_query_tokens": "Please describe the problem in words so we can look up references.",
    "empty_corpus": "The reference library is not loaded yet.",
    "no_relevant_entries": "No government scheme or advisory in the library matches this question.",
}


class KnowledgePipeline:
    """
    Assist-request front door for the retrieval engine.

    Resolves the reply language, retrieves once, and derives both the
    prompt context and the client references from that single list.
    """

    def __init__(
        self,
        store: Union[KnowledgeStore, KnowledgeStoreRef],
        scoring_engine: Optional[ScoringEngine] = None,
        detector: Optional[LanguageDetector] = None,
        default_region_hint: Optional[str] = config.DEFAULT_REGION_HINT,
    ):
        if store is None:
            raise TypeError("KnowledgePipeline requires a KnowledgeStore")

        self.store_ref = store if isinstance(store, KnowledgeStoreRef) else KnowledgeStoreRef(store)
        self.scoring_engine = scoring_engine or ScoringEngine(relevance_signals=CITATION_SIGNALS)
        self.detector = detector or default_detector()
        self.default_region_hint = default_region_hint or None

    # ---------------- LANGUAGE ----------------

    def resolve_language(self, question: str, language: Optional[str] = None) -> Dict:
        explicit = (language or "").strip().lower() or None

        if explicit and explicit in self.detector.supported_languages:
            return {"language": explicit, "explicit": explicit, "reason": "explicit"}

        if explicit:
            logger.warning("Unsupported language %r requested; detecting from text", explicit)

        details = self.detector.detect_details(question)
        return {
            "language": details["language"],
            "explicit": explicit,
            "reason": details["reason"],
            "matched_hint": details["matched_hint"],
        }

    def preferred_languages(self, resolved: str, explicit: Optional[str]) -> List[str]:
        ordered: List[str] = []
        for code in (resolved, explicit, *config.FALLBACK_LANGUAGE_ORDER):
            if code and code not in ordered:
                ordered.append(code)
        return ordered

    # ---------------- MAIN ----------------

    def run(
        self,
        question: str,
        language: Optional[str] = None,
        region: Optional[str] = None,
        tags: Iterable[str] = (),
        limit: Optional[int] = None,
    ) -> Dict:
        lang = self.resolve_language(question or "", language)

        context = QueryContext(
            question=question,
            limit=limit,
            region_hint=region or self.default_region_hint,
            preferred_languages=self.preferred_languages(lang["language"], lang["explicit"]),
            tags=tags,
        )

        # one snapshot per call
        retriever = KnowledgeRetriever(self.store_ref.current, self.scoring_engine)
        retrieval = retriever.retrieve_context(context)

        matches = retrieval["matches"]
        diagnostics = {
            "language": lang,
            "retrieval": retrieval["diagnostics"],
        }

        result = {
            "status": "ok" if matches else "no_references",
            "language": lang["language"],
            "matches": matches,
            "context_text": build_context_text(matches),
            "references": [m.to_reference() for m in matches],
            "diagnostics": diagnostics,
        }

        if not matches:
            reason = retrieval["diagnostics"].get("reason", "no_relevant_entries")
            result["reason"] = reason
            result["message"] = NO_REFERENCE_MESSAGES.get(
                reason, NO_REFERENCE_MESSAGES["no_relevant_entries"]
            )

        logger.info(
            "Knowledge lookup: language=%s references=%d status=%s",
            result["language"],
            len(matches),
            result["status"],
        )
        return result
