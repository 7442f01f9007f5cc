"""
models.py

Immutable value types shared by the retrieval engine.

- KnowledgeEntry : one curated reference (scheme, advisory, guidance)
- QueryContext   : one retrieval call's question + hints
- Match          : one ranked, citable result

All models are frozen; lowercase normalization of tags and
languages happens here, once, at construction.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

import config

logger = logging.getLogger(__name__)


# ============================================================
# HELPERS
# ============================================================

def _clean_labels(values: Optional[Iterable[str]]) -> list:
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    return [v.strip().lower() for v in values if v and v.strip()]


def _coerce_timestamp(value):
    """
    Date-only values mean midnight UTC.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str) and len(value.strip()) == 10:
        return datetime.combine(date.fromisoformat(value.strip()), time.min)
    return value


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# ============================================================
# KNOWLEDGE ENTRY
# ============================================================

class KnowledgeEntry(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    title: str
    summary: str
    body: str = Field("", validation_alias=AliasChoices("body", "details"))
    tags: FrozenSet[str] = frozenset()
    languages: FrozenSet[str]
    regions: Tuple[str, ...] = Field((), validation_alias=AliasChoices("regions", "region"))
    source: str
    last_updated: datetime = Field(
        validation_alias=AliasChoices("last_updated", "lastUpdated", "updated"),
    )
    url: Optional[str] = None

    @field_validator("id")
    @classmethod
    def _strip_id(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("id must not be blank")
        return value

    @field_validator("body", mode="before")
    @classmethod
    def _join_body(cls, value):
        # corpus files may store details as a list of lines
        if isinstance(value, (list, tuple)):
            return "\n".join(str(line) for line in value)
        return value or ""

    @field_validator("tags", mode="before")
    @classmethod
    def _lower_tags(cls, value):
        return frozenset(_clean_labels(value))

    @field_validator("languages", mode="before")
    @classmethod
    def _lower_languages(cls, value):
        return frozenset(_clean_labels(value))

    @field_validator("languages")
    @classmethod
    def _languages_not_empty(cls, value: FrozenSet[str]) -> FrozenSet[str]:
        if not value:
            raise ValueError("languages must not be empty")
        return value

    @field_validator("regions", mode="before")
    @classmethod
    def _clean_regions(cls, value):
        if value is None:
            return ()
        if isinstance(value, str):
            value = [value]
        ordered = []
        for item in value:
            item = item.strip() if isinstance(item, str) else item
            if item and item not in ordered:
                ordered.append(item)
        return tuple(ordered)

    @field_validator("url", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value.strip() if isinstance(value, str) else value

    @field_validator("last_updated", mode="before")
    @classmethod
    def _parse_last_updated(cls, value):
        return _coerce_timestamp(value)

    @field_validator("last_updated")
    @classmethod
    def _last_updated_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @property
    def region(self) -> Optional[str]:
        """
        Primary region (first listed), for display.
        """
        return self.regions[0] if self.regions else None

    @property
    def searchable_text(self) -> str:
        return "\n".join(part for part in (self.title, self.summary, self.body) if part)


# ============================================================
# QUERY CONTEXT
# ============================================================

class QueryContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    question: str = ""
    limit: int = Field(config.DEFAULT_LIMIT, ge=1)
    region_hint: Optional[str] = None
    preferred_languages: Tuple[str, ...] = ()
    tags: FrozenSet[str] = frozenset()
    as_of: Optional[date] = None

    @field_validator("question", mode="before")
    @classmethod
    def _none_question(cls, value):
        return value or ""

    @field_validator("limit", mode="before")
    @classmethod
    def _default_limit(cls, value):
        return config.DEFAULT_LIMIT if value is None else value

    @field_validator("limit")
    @classmethod
    def _cap_limit(cls, value: int) -> int:
        if value > config.MAX_LIMIT:
            logger.warning("limit %d above MAX_LIMIT; using %d", value, config.MAX_LIMIT)
            return config.MAX_LIMIT
        return value

    @field_validator("region_hint", mode="before")
    @classmethod
    def _blank_region(cls, value):
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("preferred_languages", mode="before")
    @classmethod
    def _dedupe_languages(cls, value):
        ordered = []
        for code in _clean_labels(value):
            if code not in ordered:
                ordered.append(code)
        return tuple(ordered)

    @field_validator("tags", mode="before")
    @classmethod
    def _lower_tags(cls, value):
        return frozenset(_clean_labels(value))

    @field_validator("as_of", mode="before")
    @classmethod
    def _date_only(cls, value):
        if isinstance(value, datetime):
            return _as_utc(value).date()
        return value

    def reference_date(self) -> date:
        return self.as_of or datetime.now(timezone.utc).date()


# ============================================================
# MATCH
# ============================================================

class Match(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    score: float = Field(ge=0.0, le=1.0)
    title: str
    summary: str
    source: str
    last_updated: datetime
    url: Optional[str] = None
    # grounding text for the prompt; not part of the client reference
    details: str = ""

    @classmethod
    def from_entry(cls, entry: KnowledgeEntry, score: float) -> "Match":
        return cls(
            id=entry.id,
            score=score,
            title=entry.title,
            summary=entry.summary,
            source=entry.source,
            last_updated=entry.last_updated,
            url=entry.url,
            details=entry.body,
        )

    def to_reference(self) -> Dict[str, object]:
        """
        Citation shape returned to clients alongside the answer.
        """
        return {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "url": self.url,
            "updated": self.last_updated.date().isoformat(),
            "source": self.source,
            "score": self.score,
        }
