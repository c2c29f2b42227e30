"""
Devanagari -> Roman transliteration for personal names.

The walk over a word is a small state machine:

    DEFAULT          nothing pending
    AFTER_CONSONANT  a consonant sound is pending; the next code point decides
                     its vowel (matra, halant, inherent "a", or none at the end)
    AFTER_HALANT     the previous consonant was closed by a halant, so a
                     following consonant forms a conjunct with no vowel between

Only names go through here, so the tables cover the letters that show up in
Indian names rather than the full Unicode block.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Tuple

from app.utils.script import contains_devanagari

HALANT = "्"
NUKTA = "़"
INHERENT_VOWEL = "a"

_CONSONANTS = {
    "क": "k", "ख": "kh", "ग": "g", "घ": "gh", "ङ": "ng",
    "च": "ch", "छ": "chh", "ज": "j", "झ": "jh", "ञ": "ny",
    "ट": "t", "ठ": "th", "ड": "d", "ढ": "dh", "ण": "n",
    "त": "t", "थ": "th", "द": "d", "ध": "dh", "न": "n",
    "प": "p", "फ": "ph", "ब": "b", "भ": "bh", "म": "m",
    "य": "y", "र": "r", "ल": "l", "व": "v", "ळ": "l",
    "श": "sh", "ष": "sh", "स": "s", "ह": "h",
    # precomposed nukta forms
    "\u0958": "q", "\u0959": "kh", "\u095a": "gh", "\u095b": "z",
    "\u095c": "r", "\u095d": "rh", "\u095e": "f", "\u095f": "y",
}

_VOWELS = {
    "अ": "a", "आ": "aa", "इ": "i", "ई": "ee",
    "उ": "u", "ऊ": "oo", "ऋ": "ri",
    "ए": "e", "ऐ": "ai", "ओ": "o", "औ": "au", "ऑ": "o",
}

_MATRAS = {
    "ा": "aa", "ि": "i", "ी": "ee", "ु": "u", "ू": "oo",
    "ृ": "ri", "े": "e", "ै": "ai", "ो": "o", "ौ": "au",
    "ॉ": "o", "ॅ": "e",
}

_MARKS = {
    "ं": "n",  # anusvara
    "ँ": "n",  # chandrabindu
    "ः": "h",  # visarga
}

# Consonant + combining nukta
_NUKTA_SHIFT = {"k": "q", "g": "gh", "j": "z", "d": "r", "dh": "rh", "ph": "f"}

# Ordered (pattern, replacement) fixes for systematic vowel lengthening
_SYLLABLE_FIXES = (
    (r"jny", "gy"),
    (r"aai", "ai"),
    (r"aau", "au"),
    (r"aa$", "a"),
    (r"ee$", "i"),
)

# Zero-width joiners and avagraha carry no sound
_SILENT = frozenset({"\u200c", "\u200d", "\u093d"})


@dataclass(frozen=True)
class TransliterationRules:
    consonants: Mapping[str, str] = field(default_factory=lambda: MappingProxyType(_CONSONANTS))
    vowels: Mapping[str, str] = field(default_factory=lambda: MappingProxyType(_VOWELS))
    matras: Mapping[str, str] = field(default_factory=lambda: MappingProxyType(_MATRAS))
    marks: Mapping[str, str] = field(default_factory=lambda: MappingProxyType(_MARKS))
    nukta_shift: Mapping[str, str] = field(default_factory=lambda: MappingProxyType(_NUKTA_SHIFT))
    syllable_fixes: Tuple[Tuple[str, str], ...] = _SYLLABLE_FIXES


TRANSLITERATION_RULES = TransliterationRules()


class State(Enum):
    DEFAULT = "default"
    AFTER_CONSONANT = "after_consonant"
    AFTER_HALANT = "after_halant"


def transliterate_word(word: str, rules: TransliterationRules = TRANSLITERATION_RULES) -> str:
    """Walk one word and emit its Roman spelling (no cleanup applied)."""
    out = []
    state = State.DEFAULT
    pending = ""

    for ch in word:
        if ch in _SILENT:
            continue

        if state is State.AFTER_CONSONANT:
            if ch == NUKTA:
                pending = rules.nukta_shift.get(pending, pending)
                continue
            if ch in rules.matras:
                out.append(pending + rules.matras[ch])
                state = State.DEFAULT
                continue
            if ch == HALANT:
                out.append(pending)
                state = State.AFTER_HALANT
                continue
            # Anything else follows a bare consonant: it keeps its inherent vowel
            out.append(pending + INHERENT_VOWEL)
            state = State.DEFAULT

        elif state is State.AFTER_HALANT:
            if ch in rules.consonants:
                pending = rules.consonants[ch]
                state = State.AFTER_CONSONANT
                continue
            state = State.DEFAULT

        # DEFAULT
        if ch in rules.consonants:
            pending = rules.consonants[ch]
            state = State.AFTER_CONSONANT
        elif ch in rules.vowels:
            out.append(rules.vowels[ch])
        elif ch in rules.marks:
            out.append(rules.marks[ch])
        elif ch in rules.matras:
            # stray vowel sign with no consonant
            out.append(rules.matras[ch])
        elif ch in (HALANT, NUKTA):
            continue
        elif ch.isalpha():
            out.append(ch)

    # Last consonant of the word: no inherent vowel
    if state is State.AFTER_CONSONANT:
        out.append(pending)

    return "".join(out)


def cleanup_word(word: str, rules: TransliterationRules = TRANSLITERATION_RULES) -> str:
    """Collapse 3+ repeated vowels to 2, then apply the syllable fix table."""
    word = re.sub(r"([aeiou])\1{2,}", r"\1\1", word)
    for pattern, replacement in rules.syllable_fixes:
        word = re.sub(pattern, replacement, word)
    return word


def transliterate(text: str, rules: TransliterationRules = TRANSLITERATION_RULES) -> str:
    """
    Transliterate every Devanagari word of `text`; Latin words pass through.

    Transliterated words come out lower-case; words are joined by single spaces.
    """
    if not text or not text.strip():
        return ""

    words = []
    for word in text.split():
        if contains_devanagari(word):
            word = cleanup_word(transliterate_word(word, rules), rules)
        if word:
            words.append(word)
    return " ".join(words)
