# config.py

import os

from dotenv import load_dotenv
load_dotenv()


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value not in (None, "") else default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value not in (None, "") else default


PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))


# ---------------- PROJECT ----------------
PROJECT_NAME = "Krishi Knowledge Retrieval"
VERSION = "1.0.0"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


# ---------------- LANGUAGES ----------------
SUPPORTED_LANGUAGES = {
    "en": "English",
    "hi": "Hindi",
    "mr": "Marathi",
}

DEFAULT_LANGUAGE = "en"               # any text without Devanagari
DEVANAGARI_DEFAULT_LANGUAGE = "mr"    # Devanagari text with no keyword hint

LANGUAGE_HINTS_PATH = os.getenv(
    "LANGUAGE_HINTS_PATH",
    os.path.join(PROJECT_ROOT, "nlp", "language_hints.json"),
)

# appended after the resolved language when building preferences
FALLBACK_LANGUAGE_ORDER = ("mr", "hi", "en")


# ---------------- NORMALIZATION ----------------
MIN_TOKEN_LENGTH = _env_int("MIN_TOKEN_LENGTH", 2)


# ---------------- CORPUS ----------------
KNOWLEDGE_BASE_PATH = os.getenv(
    "KNOWLEDGE_BASE_PATH",
    os.path.join(PROJECT_ROOT, "knowledge", "data", "knowledge_base.json"),
)


# ---------------- RETRIEVAL ----------------
DEFAULT_LIMIT = _env_int("RAG_DEFAULT_LIMIT", 4)
MAX_LIMIT = _env_int("RAG_MAX_LIMIT", 20)

# exclusive floor on the final score
MIN_SCORE = _env_float("RAG_MIN_SCORE", 0.0)

# blank disables the region bias
DEFAULT_REGION_HINT = os.getenv("DEFAULT_REGION_HINT", "Maharashtra")


# ---------------- SCORING WEIGHTS ----------------
WEIGHT_LEXICAL = _env_float("RAG_WEIGHT_LEXICAL", 0.50)
WEIGHT_TAG = _env_float("RAG_WEIGHT_TAG", 0.25)
WEIGHT_REGION = _env_float("RAG_WEIGHT_REGION", 0.10)
WEIGHT_LANGUAGE = _env_float("RAG_WEIGHT_LANGUAGE", 0.10)
WEIGHT_RECENCY = _env_float("RAG_WEIGHT_RECENCY", 0.05)

RECENCY_HALF_LIFE_DAYS = _env_float("RAG_RECENCY_HALF_LIFE_DAYS", 365.0)

# query words of at least this length also match inside longer entry words
PARTIAL_MATCH_MIN_LENGTH = _env_int("RAG_PARTIAL_MATCH_MIN_LENGTH", 5)
# credit for such a match, relative to an exact match (1.0)
PARTIAL_MATCH_WEIGHT = _env_float("RAG_PARTIAL_MATCH_WEIGHT", 0.5)


# ---------------- CONTEXT ----------------
NO_REFERENCES_TEXT = "No references retrieved."
