"""
Retrieval-Augmented Generation (RAG) package.

Implements multi-signal scoring, ranking, context
serialization, and the assist pipeline.
"""

from rag.context_builder import build_context_text
from rag.pipeline import KnowledgePipeline
from rag.ranker import rank
from rag.retriever import KnowledgeRetriever, retrieve_knowledge_context
from rag.scoring import ScoredEntry, ScoringEngine, ScoringWeights

__all__ = [
    "KnowledgePipeline",
    "KnowledgeRetriever",
    "ScoredEntry",
    "ScoringEngine",
    "ScoringWeights",
    "build_context_text",
    "rank",
    "retrieve_knowledge_context",
]
