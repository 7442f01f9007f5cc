"""
query_normalizer.py

Purpose:
- Turn raw question / entry text into a token multiset for lexical scoring
- Handle code-mixed Latin + Devanagari farmer input
- Be SAFE for empty, symbol-only and noisy input

This module:
- DOES NOT translate or transliterate
- DOES NOT stem
- DOES NOT detect language
"""

from __future__ import annotations

import re
import unicodedata
from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping

import config


# ============================================================
# SCRIPT RANGES
# ============================================================

DEVANAGARI_FIRST = "\u0900"
DEVANAGARI_LAST = "\u097f"

DEVANAGARI_PATTERN = re.compile("[\u0900-\u097f]")

# danda, double danda and the abbreviation sign are punctuation
NON_TOKEN_PATTERN = re.compile(
    "[^a-z0-9\u0900-\u0963\u0966-\u096f\u0971-\u097f]+"
)

ZERO_WIDTH_PATTERN = re.compile("[\u200b\u200c\u200d\ufeff]")


# ============================================================
# STOPWORDS (CONSERVATIVE)
# ============================================================

STOPWORDS = frozenset([
    # --- ENGLISH ---
    "what", "is", "are", "the", "an", "of", "for", "to", "in", "on",
    "and", "or", "with", "by", "at", "it", "be", "do", "does",
    "how", "which", "my", "me", "we", "you", "can", "please", "tell",
    "give", "explain", "about", "this", "that",
    "sir", "bhai", "bhaiya",

    # --- HINDI ---
    "है", "हैं", "का", "की", "के", "को", "में", "से", "और", "क्या",

    # --- MARATHI ---
    "आहे", "आहेत", "आणि", "ची", "चा", "चे", "मध्ये", "काय",
])


# ============================================================
# TOKEN MULTISET
# ============================================================

@dataclass(frozen=True)
class TokenMultiset:
    """
    Token -> count map plus the total number of tokens.
    """
    counts: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    total_tokens: int = 0

    @classmethod
    def from_tokens(cls, tokens: List[str]) -> "TokenMultiset":
        counter = Counter(tokens)
        return cls(
            counts=MappingProxyType(dict(counter)),
            total_tokens=sum(counter.values()),
        )

    def __bool__(self) -> bool:
        return self.total_tokens > 0

    def __contains__(self, token: object) -> bool:
        return token in self.counts

    def count(self, token: str) -> int:
        return self.counts.get(token, 0)


EMPTY_MULTISET = TokenMultiset()


# ============================================================
# PUBLIC API
# ============================================================

def normalize(text: str) -> TokenMultiset:
    """
    Normalize text into a token multiset.

    Rules:
    - Lowercase
    - Latin diacritics folded ("Kharíf" == "kharif")
    - Devanagari kept literally, split on whitespace / punctuation
    - Tokens shorter than MIN_TOKEN_LENGTH and stopwords dropped

    Never raises for str input; empty or symbol-only text
    gives an empty multiset.
    """
    tokens = tokenize(text)
    if not tokens:
        return EMPTY_MULTISET
    return TokenMultiset.from_tokens(tokens)


def tokenize(text: str) -> List[str]:
    """
    Ordered token list (same rules as normalize).
    """
    return [
        tok for tok in split_words(text)
        if len(tok) >= config.MIN_TOKEN_LENGTH and tok not in STOPWORDS
    ]


def split_words(text: str) -> List[str]:
    """
    Cleaned words BEFORE the length / stopword filter.

    Language detection reads these: particles like "आहे" or "है"
    are stopwords for scoring but strong language hints.
    """
    if not text or not text.strip():
        return []
    return _basic_clean(text).split()


def contains_devanagari(text: str) -> bool:
    return bool(text) and DEVANAGARI_PATTERN.search(text) is not None


# ============================================================
# INTERNAL HELPERS
# ============================================================

def _is_devanagari(ch: str) -> bool:
    return DEVANAGARI_FIRST <= ch <= DEVANAGARI_LAST


def _fold_diacritics(text: str) -> str:
    """
    Drop combining marks, except Devanagari vowel signs / virama / nukta.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(
        ch for ch in decomposed
        if not unicodedata.combining(ch) or _is_devanagari(ch)
    )


def _basic_clean(text: str) -> str:
    text = ZERO_WIDTH_PATTERN.sub("", text.lower())
    text = _fold_diacritics(text)
    text = NON_TOKEN_PATTERN.sub(" ", text)
    # recompose so tokens compare equal to NFC keyword data
    return unicodedata.normalize("NFC", text).strip()
