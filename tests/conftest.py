from datetime import date

import pytest

from knowledge.loader import load_knowledge_store
from knowledge.models import KnowledgeEntry
from knowledge.store import KnowledgeStore


AS_OF = date(2025, 3, 1)


@pytest.fixture
def as_of():
    return AS_OF


@pytest.fixture
def make_entry():
    def _make(entry_id: str, **overrides) -> KnowledgeEntry:
        data = {
            "id": entry_id,
            "title": "Crop advisory",
            "summary": "General guidance for farmers",
            "tags": [],
            "languages": ["en"],
            "source": "Test Authority",
            "last_updated": "2025-01-01",
        }
        data.update(overrides)
        return KnowledgeEntry(**data)

    return _make


@pytest.fixture
def make_store():
    def _make(*entries) -> KnowledgeStore:
        return KnowledgeStore(entries)

    return _make


@pytest.fixture(scope="session")
def bundled_store():
    return load_knowledge_store()
