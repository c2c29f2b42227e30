from dataclasses import replace

from app.nlu.transliterator import (
    TRANSLITERATION_RULES,
    cleanup_word,
    transliterate,
    transliterate_word,
)


def test_inherent_vowel_dropped_at_word_end():
    assert transliterate_word("राम") == "raam"
    assert transliterate_word("नीरज") == "neeraj"


def test_matras_and_inherent_vowel():
    assert transliterate_word("रितेश") == "ritesh"
    assert transliterate_word("कुमावत") == "kumaavat"


def test_halant_forms_conjunct():
    assert transliterate_word("अक्षत") == "akshat"


def test_nukta_shifts_consonant():
    # decomposed ज + nukta
    assert transliterate_word("ज़रा") == "zaraa"
    # precomposed फ़
    assert transliterate_word("फ़राज") == "faraaj"


def test_anusvara():
    assert transliterate_word("संजय") == "sanjay"


def test_cleanup_word():
    assert cleanup_word("varamaa") == "varama"
    assert cleanup_word("raaaaj") == "raaj"
    assert cleanup_word("bhaai") == "bhai"
    assert cleanup_word("sunee") == "suni"


def test_transliterate_mixed_text():
    assert transliterate("रितेश Verma") == "ritesh Verma"
    assert transliterate("वरमा") == "varama"
    assert transliterate("   ") == ""


def test_custom_rules():
    rules = replace(TRANSLITERATION_RULES, syllable_fixes=())
    assert transliterate("वरमा", rules) == "varamaa"
