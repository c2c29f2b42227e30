"""
Script detection helpers used to pick the name-resolution path.
"""

import re

DEVANAGARI_RE = re.compile(r"[\u0900-\u097F]")
PURE_LATIN_RE = re.compile(r"[A-Za-z ]+")

# Devanagari digits ० - ९
DEVANAGARI_DIGITS = str.maketrans("०१२३४५६७८९", "0123456789")


def contains_devanagari(text: str) -> bool:
    """True if the text has at least one Devanagari code point."""
    if not text:
        return False
    return bool(DEVANAGARI_RE.search(text))


def is_pure_latin(text: str) -> bool:
    """True if the text is only Latin letters and spaces (and not blank)."""
    if not text or not text.strip():
        return False
    return bool(PURE_LATIN_RE.fullmatch(text))


def to_ascii_digits(text: str) -> str:
    return text.translate(DEVANAGARI_DIGITS) if text else ""
