"""
Knowledge package.

Corpus entries, the immutable knowledge store, and
the validating loader that builds it.
"""

from knowledge.errors import KnowledgeLoadError, KnowledgeStoreError
from knowledge.loader import load_entries, load_knowledge_store
from knowledge.models import KnowledgeEntry, Match, QueryContext
from knowledge.store import KnowledgeStore, KnowledgeStoreRef

__all__ = [
    "KnowledgeEntry",
    "KnowledgeLoadError",
    "KnowledgeStore",
    "KnowledgeStoreError",
    "KnowledgeStoreRef",
    "Match",
    "QueryContext",
    "load_entries",
    "load_knowledge_store",
]
