"""
language_detector.py

Language detection for USER QUESTIONS (farmer chat input).

Scope:
- English (Latin script) and Devanagari-script Indian languages
- Marathi vs Hindi decided by curated keyword hints
- Deterministic and LLM-free

Rules (in order):
1. No Devanagari code point       -> DEFAULT_LANGUAGE ("en")
2. First hint list with a hit     -> that list's language
   (keywords: whole words; characters: anywhere in the text)
3. Otherwise                      -> hint file default ("mr")

Hint lists are DATA (language_hints.json, versioned) so adding
a language never touches scoring / ranking code.
"""

from __future__ import annotations

import json
import logging
import unicodedata
from functools import lru_cache
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

import config
from nlp.query_normalizer import contains_devanagari, split_words

logger = logging.getLogger(__name__)


# ============================================================
# HINT FILE MODEL
# ============================================================

def _clean_hints(values) -> Tuple[str, ...]:
    return tuple(
        unicodedata.normalize("NFC", v.strip().lower())
        for v in values
        if v and v.strip()
    )


class LanguageHint(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str = Field(min_length=2)
    name: str
    script: str = "Devanagari"
    keywords: Tuple[str, ...] = Field(min_length=1)
    # script marks that only occur inside words, matched as substrings
    characters: Tuple[str, ...] = ()

    @field_validator("code")
    @classmethod
    def _lower_code(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("keywords")
    @classmethod
    def _normalize_keywords(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        cleaned = _clean_hints(value)
        if not cleaned:
            raise ValueError("keyword list is empty")
        if any(len(k.split()) > 1 for k in cleaned):
            raise ValueError("keywords are single words")
        return cleaned

    @field_validator("characters")
    @classmethod
    def _normalize_characters(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        return _clean_hints(value)


class LanguageHintSet(BaseModel):
    """
    Ordered keyword-hint lists. Order matters: first hit wins.
    """
    model_config = ConfigDict(frozen=True)

    version: str
    default_language: str = config.DEVANAGARI_DEFAULT_LANGUAGE
    languages: Tuple[LanguageHint, ...] = ()

    @model_validator(mode="after")
    def _default_is_declared(self) -> "LanguageHintSet":
        codes = {hint.code for hint in self.languages}
        if self.default_language not in codes | set(config.SUPPORTED_LANGUAGES):
            raise ValueError(
                f"default_language '{self.default_language}' is not a known language"
            )
        return self

    @property
    def supported_languages(self) -> frozenset:
        return frozenset(config.SUPPORTED_LANGUAGES) | {h.code for h in self.languages}

    def describe(self, code: str) -> Dict[str, Optional[str]]:
        for hint in self.languages:
            if hint.code == code:
                return {"language_name": hint.name, "script": hint.script}
        if code == config.DEFAULT_LANGUAGE:
            return {"language_name": config.SUPPORTED_LANGUAGES[code], "script": "Latin"}
        return {
            "language_name": config.SUPPORTED_LANGUAGES.get(code),
            "script": "Devanagari",
        }


@lru_cache(maxsize=8)
def load_language_hints(path: Optional[str] = None) -> LanguageHintSet:
    path = path or config.LANGUAGE_HINTS_PATH
    with open(path, "r", encoding="utf-8") as f:
        hints = LanguageHintSet.model_validate(json.load(f))

    logger.info(
        "Loaded language hints v%s (%s)",
        hints.version,
        ", ".join(h.code for h in hints.languages),
    )
    return hints


# ============================================================
# DETECTOR
# ============================================================

class LanguageDetector:
    """
    Pure keyword-hint classifier. Safe to share across threads.
    """

    def __init__(self, hints: Optional[LanguageHintSet] = None):
        self.hints = hints or load_language_hints()

    @property
    def supported_languages(self) -> frozenset:
        return self.hints.supported_languages

    def detect(self, text: str, fallback_language: Optional[str] = None) -> str:
        return self.detect_details(text, fallback_language)["language"]

    def detect_details(
        self,
        text: str,
        fallback_language: Optional[str] = None,
    ) -> Dict[str, object]:
        """
        Returns:
        {
            "language": "en" | "hi" | "mr" | ...,
            "language_name": "Marathi",
            "script": "Devanagari",
            "matched_hint": "शेत" | None,
            "hints_version": "2025.04",
            "reason": "no_devanagari" | "keyword_hint" | "devanagari_default"
        }
        """
        if not text or not contains_devanagari(text):
            return self._result(config.DEFAULT_LANGUAGE, None, "no_devanagari")

        words = set(split_words(text))
        haystack = unicodedata.normalize("NFC", text.lower())

        for hint in self.hints.languages:
            matched = self._match_hint(hint, words, haystack)
            if matched:
                return self._result(hint.code, matched, "keyword_hint")

        return self._result(
            self._devanagari_default(fallback_language),
            None,
            "devanagari_default",
        )

    # --------------------------------------------------------
    # INTERNAL
    # --------------------------------------------------------

    @staticmethod
    def _match_hint(hint: LanguageHint, words, haystack: str) -> Optional[str]:
        # whole words only: "खत" must not fire inside "खतरनाक"
        for keyword in hint.keywords:
            if keyword in words:
                return keyword
        for mark in hint.characters:
            if mark in haystack:
                return mark
        return None

    def _devanagari_default(self, fallback_language: Optional[str]) -> str:
        if fallback_language:
            code = fallback_language.strip().lower()
            if code in self.supported_languages and code != config.DEFAULT_LANGUAGE:
                return code
        return self.hints.default_language

    def _result(self, code: str, matched: Optional[str], reason: str) -> Dict[str, object]:
        return {
            "language": code,
            **self.hints.describe(code),
            "matched_hint": matched,
            "hints_version": self.hints.version,
            "reason": reason,
        }


# ============================================================
# PUBLIC API
# ============================================================

@lru_cache(maxsize=1)
def default_detector() -> LanguageDetector:
    return LanguageDetector()


def detect_language_from_text(text: str, fallback_language: Optional[str] = None) -> str:
    """
    Language code for a question ("en", "hi", "mr", ...).

    fallback_language replaces the Devanagari default when no
    keyword hint matches; it never overrides script or hints.
    """
    return default_detector().detect(text, fallback_language)


def detect_language(text: str) -> Dict[str, object]:
    return default_detector().detect_details(text)
