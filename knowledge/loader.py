"""
loader.py

Corpus loading: raw records -> validated KnowledgeStore.

Malformed records (missing id, empty languages, bad dates, ...)
are SKIPPED with a warning; duplicate ids keep the first record.
The retrieval engine never re-validates entries per call.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, List, Mapping, Optional

from pydantic import ValidationError

import config
from knowledge.errors import KnowledgeLoadError
from knowledge.models import KnowledgeEntry
from knowledge.store import KnowledgeStore

logger = logging.getLogger(__name__)


def load_entries(records: Iterable[Mapping[str, Any]]) -> List[KnowledgeEntry]:
    entries: List[KnowledgeEntry] = []
    seen = set()

    for index, record in enumerate(records):
        if not isinstance(record, Mapping):
            logger.warning("Skipping knowledge record #%d: not an object", index)
            continue

        record_id = record.get("id")
        try:
            entry = KnowledgeEntry.model_validate(record)
        except ValidationError as e:
            logger.warning(
                "Skipping knowledge record #%d (id=%r): %d validation error(s): %s",
                index,
                record_id,
                e.error_count(),
                "; ".join(
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                    for err in e.errors()
                ),
            )
            continue

        if entry.id in seen:
            logger.warning(
                "Skipping knowledge record #%d: duplicate id %r", index, entry.id
            )
            continue

        seen.add(entry.id)
        entries.append(entry)

    return entries


def load_knowledge_store(path: Optional[str] = None) -> KnowledgeStore:
    """
    Read a JSON corpus file: either a list of records or
    {"entries": [...]}.
    """
    path = path or config.KNOWLEDGE_BASE_PATH

    try:
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise KnowledgeLoadError(f"cannot read knowledge base {path}: {e}") from e

    if isinstance(payload, Mapping):
        payload = payload.get("entries")

    if not isinstance(payload, list):
        raise KnowledgeLoadError(
            f"knowledge base {path} must be a list of entries or {{\"entries\": [...]}}"
        )

    entries = load_entries(payload)
    skipped = len(payload) - len(entries)

    logger.info(
        "Loaded %d knowledge entries from %s (%d skipped)",
        len(entries),
        path,
        skipped,
    )
    return KnowledgeStore(entries)
