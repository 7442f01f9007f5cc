"""
NLP package.

Script-aware query normalization and heuristic
language detection. No models, no network.
"""

from nlp.language_detector import LanguageDetector, detect_language_from_text
from nlp.query_normalizer import TokenMultiset, normalize

__all__ = [
    "LanguageDetector",
    "TokenMultiset",
    "detect_language_from_text",
    "normalize",
]
