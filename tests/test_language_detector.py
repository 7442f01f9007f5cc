"""
Language Detector Test

Intent:
- No Devanagari -> English, always
- Ordered hint lists: first list with a hit wins
- Devanagari with no hint -> Marathi (policy default)
- Word hints match whole words; script marks match anywhere
- Hint lists are data: new languages need no code change
"""

import pytest
from pydantic import ValidationError

from nlp.language_detector import (
    LanguageDetector,
    LanguageHint,
    LanguageHintSet,
    detect_language,
    detect_language_from_text,
)


def test_latin_text_is_english():
    detector = LanguageDetector()

    assert detector.detect("How do I apply for crop insurance?") == "en"
    assert detector.detect("PMFBY premium kitna hai") == "en"
    assert detector.detect("") == "en"


def test_marathi_hint():
    assert detect_language_from_text("माझ्या शेतात कोणते खत वापरावे?") == "mr"


def test_hindi_hint():
    assert detect_language_from_text("पीएम किसान योजना की पात्रता क्या है?") == "hi"


def test_devanagari_without_hint_defaults_to_marathi():
    detector = LanguageDetector()

    assert detector.detect("ऊस लागवड") == "mr"
    assert detector.detect("ऊस लागवड", fallback_language="hi") == "hi"
    # English is never a Devanagari fallback
    assert detector.detect("ऊस लागवड", fallback_language="en") == "mr"


def test_fallback_never_overrides_hints_or_script():
    detector = LanguageDetector()

    assert detector.detect("crop loan", fallback_language="hi") == "en"
    assert detector.detect("पीएम किसान", fallback_language="mr") == "hi"


def test_details_report_reason_and_version():
    details = detect_language("माझ्या शेतात कोणते खत वापरावे?")

    assert details["language"] == "mr"
    assert details["language_name"] == "Marathi"
    assert details["script"] == "Devanagari"
    assert details["reason"] == "keyword_hint"
    assert details["matched_hint"]
    assert details["hints_version"]

    english = detect_language("crop loan")
    assert english["reason"] == "no_devanagari"
    assert english["script"] == "Latin"


def test_first_hint_list_wins():
    hints = LanguageHintSet(
        version="test",
        default_language="mr",
        languages=[
            LanguageHint(code="hi", name="Hindi", keywords=["योजना"]),
            LanguageHint(code="mr", name="Marathi", keywords=["योजना"]),
        ],
    )

    assert LanguageDetector(hints).detect("योजना माहिती") == "hi"


def test_new_language_from_hint_data():
    hints = LanguageHintSet(
        version="test",
        default_language="mr",
        languages=[
            LanguageHint(code="NE", name="Nepali", keywords=["हुन्छ"]),
        ],
    )
    detector = LanguageDetector(hints)

    assert detector.detect("के हुन्छ?") == "ne"
    assert "ne" in detector.supported_languages
    assert {"en", "hi", "mr"} <= detector.supported_languages


def test_detection_is_deterministic():
    text = "पीएम किसान योजना की पात्रता क्या है?"

    assert len({detect_language_from_text(text) for _ in range(20)}) == 1


def test_invalid_hint_file_is_rejected():
    with pytest.raises(ValidationError):
        LanguageHintSet(version="bad", default_language="fr", languages=[])

    with pytest.raises(ValidationError):
        LanguageHint(code="mr", name="Marathi", keywords=["  "])


def test_hints_match_whole_words_only():
    # "खत" is a Marathi hint but also starts the Hindi word "खतरनाक"
    details = detect_language("मेरी फसल में खतरनाक कीट लगे हैं")

    assert details["language"] == "hi"
    assert details["matched_hint"] == "फसल"


def test_marathi_marks_match_inside_words():
    detector = LanguageDetector()

    assert detector.detect_details("ऊस तोडणी कळवा")["matched_hint"] == "ळ"
    assert detector.detect_details("शेतकऱ्यांना मदत")["matched_hint"] == "ऱ्"


def test_particles_count_as_hints_despite_stopwords():
    # "आहे" and "है" are dropped for scoring, kept for detection
    assert detect_language_from_text("ऊस लागवड आहे") == "mr"
    assert detect_language_from_text("ऊस लागवड है") == "hi"


def test_keyword_hints_are_single_words():
    with pytest.raises(ValidationError):
        LanguageHint(code="mr", name="Marathi", keywords=["पीक कर्ज"])

    hint = LanguageHint(code="mr", name="Marathi", keywords=["शेत"], characters=[" ळ ", ""])
    assert hint.characters == ("ळ",)
