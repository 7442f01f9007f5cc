"""
store.py

Read-only knowledge corpus.

- KnowledgeStore    : immutable snapshot; entry tokens precomputed once
- KnowledgeStoreRef : current snapshot holder; reload = whole-store swap

Nothing here is mutated after construction, so any number of
retrieval calls may read a snapshot concurrently without locks.
"""

from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import Iterable, Iterator, Optional, Tuple

from knowledge.errors import KnowledgeStoreError
from knowledge.models import KnowledgeEntry
from nlp.query_normalizer import TokenMultiset, tokenize

logger = logging.getLogger(__name__)


def tokenize_entry(entry: KnowledgeEntry) -> TokenMultiset:
    """
    Token multiset of title + summary + body, plus tag words.

    Tag words only add vocabulary ("interest waiver", "nabard");
    a tag word already present in the text is not counted twice.
    """
    tokens = tokenize(entry.searchable_text)
    present = set(tokens)
    for tag in sorted(entry.tags):
        for word in tokenize(tag):
            if word not in present:
                tokens.append(word)
                present.add(word)
    return TokenMultiset.from_tokens(tokens)


class KnowledgeStore:
    """
    Immutable collection of KnowledgeEntry, in load order.
    """

    def __init__(self, entries: Iterable[KnowledgeEntry] = ()):
        entries = tuple(entries)

        seen = set()
        duplicates = []
        for entry in entries:
            if entry.id in seen:
                duplicates.append(entry.id)
            seen.add(entry.id)

        if duplicates:
            raise KnowledgeStoreError(
                f"duplicate knowledge entry ids: {sorted(set(duplicates))}"
            )

        self._entries: Tuple[KnowledgeEntry, ...] = entries
        self._by_id = MappingProxyType({e.id: e for e in entries})
        self._tokens = MappingProxyType({
            e.id: tokenize_entry(e) for e in entries
        })

    @classmethod
    def empty(cls) -> "KnowledgeStore":
        return cls(())

    # ---------------- ACCESS ----------------

    @property
    def entries(self) -> Tuple[KnowledgeEntry, ...]:
        return self._entries

    def get(self, entry_id: str) -> Optional[KnowledgeEntry]:
        return self._by_id.get(entry_id)

    def tokens_for(self, entry: KnowledgeEntry) -> TokenMultiset:
        """
        Precomputed tokenize_entry(entry).
        """
        tokens = self._tokens.get(entry.id)
        if tokens is None or self._by_id.get(entry.id) is not entry:
            return tokenize_entry(entry)
        return tokens

    def __iter__(self) -> Iterator[KnowledgeEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._by_id

    def __repr__(self) -> str:
        return f"KnowledgeStore(entries={len(self._entries)})"


class KnowledgeStoreRef:
    """
    Holds the current KnowledgeStore snapshot.

    Readers take `current` once per call; `replace` swaps the whole
    snapshot so in-flight calls keep the corpus they started with.
    """

    def __init__(self, store: KnowledgeStore):
        if store is None:
            raise TypeError("KnowledgeStoreRef requires a KnowledgeStore")
        self._store = store
        self._swap_lock = threading.Lock()

    @property
    def current(self) -> KnowledgeStore:
        return self._store

    def replace(self, store: KnowledgeStore) -> KnowledgeStore:
        """
        Install a new snapshot; returns the previous one.
        """
        if store is None:
            raise TypeError("cannot replace with an absent KnowledgeStore")

        with self._swap_lock:
            previous = self._store
            self._store = store

        logger.info(
            "Knowledge store replaced (%d -> %d entries)",
            len(previous),
            len(store),
        )
        return previous
