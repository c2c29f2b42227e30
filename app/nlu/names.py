"""
Client name resolution.

clean -> transliterate (Devanagari words only) -> spelling correction -> capitalize

Correction tables map phonetic variants (as produced by transliteration or by
speech-to-text) to the canonical spelling. Fuzzy matching only runs when the
utterance itself contained Devanagari: a name typed in Latin script is taken
as written apart from exact-table corrections, so a valid name like "Akshat"
is never rewritten into a different valid name.
"""

import re
import string
import unicodedata
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

from app.nlu.transliterator import transliterate
from app.utils.script import contains_devanagari

_HONORIFICS = (
    "mr", "mrs", "ms", "miss", "dr", "prof", "shri", "sri", "smt", "kumari",
    "श्रीमती", "श्री", "सुश्री", "डॉ", "डा",
)

_FIRST_NAMES = {
    # male
    "Neeraj": ("naraj", "niraj", "neraj", "nirraj"),
    "Rakesh": ("rakaesha", "raakesh", "raakaesha", "rakesha", "raakesha"),
    "Vikram": ("vikraam", "vikrama"),
    "Vikrant": ("vikran", "vikraan", "vikraant", "vikranta"),
    "Nilesh": ("neelesh", "neilesh", "nilesha", "neelesha"),
    "Rajesh": ("raajesh", "rajesha", "raajaesha", "raajesha"),
    "Sunil": ("sunail", "sunaila", "suneel", "sunila"),
    "Deepak": ("dipak", "deepaka", "dipaka"),
    "Amit": ("amita", "ameet"),
    "Rahul": ("raahul", "rahuul", "rahula"),
    "Rohit": ("roohit", "rohita"),
    "Vishal": ("vishaal", "vishala"),
    "Ajay": ("ajaya", "ajai"),
    "Vijay": ("vijaya", "vijai"),
    "Sanjay": ("sanjaya", "sanjai"),
    "Anil": ("anila", "aneel"),
    "Manoj": ("manoja", "manooj"),
    "Ashok": ("ashoka", "asok"),
    "Ritesh": ("reetesh", "ritesha"),
    "Hitesh": ("heetesh", "hitesha"),
    "Nitesh": ("neetesh", "nitesha"),
    "Mukesh": ("mukesha",),
    "Suresh": ("suresha",),
    "Ramesh": ("ramesha",),
    "Dinesh": ("dinesha",),
    "Mahesh": ("mahesha",),
    "Akash": ("aakash", "akaash", "aakaash"),
    "Akshat": (),
    "Ram": ("raam",),
    "Raj": ("raaj",),
    "Ravi": ("raavi",),
    "Hari": ("haari",),
    # female
    "Priya": ("priyaa", "preeya"),
    "Pooja": ("puja", "poojaa"),
    "Nandini": ("nandinii", "nandani", "nandinee"),
    "Anushka": ("anushkaa", "anuska"),
    "Shreya": ("shreyaa", "shrayaa"),
    "Divya": ("divyaa", "diviya"),
    "Neha": ("nehaa", "naeha"),
    "Asha": ("aashaa", "aasha"),
    "Kavita": ("kavitaa", "kaavita"),
    "Sunita": ("sunitaa", "suneeta"),
    "Bhumika": ("bhoomika", "bhuumikaa", "bhaoomika", "bhoomikaa"),
    "Gauri": ("gaaurii", "gowri", "gaauree", "gauree"),
    "Rani": ("raani",),
    "Nidhi": ("nidhee",),
}

_SURNAMES = {
    "Sharma": ("shaarmaa", "sharman", "sharmaa", "sarma"),
    "Verma": ("varma", "varmaa", "vermaa", "warma"),
    "Kumar": ("kumara", "kumaara", "kumaar"),
    "Singh": ("singha", "simha"),
    "Gupta": ("guptaa", "gupt"),
    "Patel": ("patela", "paatel"),
    "Shah": ("shaha", "shaah"),
    "Jain": ("jaina", "jaain"),
    "Mehta": ("mehtaa", "maehta"),
    "Agarwal": ("agarwaal", "agrawaal", "agrawal", "aggarwal"),
    "Chowdhury": ("chaudhuri", "choudhary", "chaudhary", "chowdhary"),
    "Reddy": ("reddii", "readdy"),
    "Rao": ("raao", "raav"),
    "Kumawat": ("kamawat", "kumaavat", "kumaawat"),
    "Tekam": ("tekaama", "tekaam"),
    "Hada": ("haadaa", "hadaa"),
    "Dhara": ("dharaa", "dhaara"),
    "Danot": ("danotya", "danota"),
    "Patidar": ("paatidaar", "patidaar"),
    "Mandliya": ("mandaliya", "mandliyaa"),
    "Daima": ("daimaa",),
}

_CAPITALIZATION_OVERRIDES = (
    "Kumar", "Singh", "Sharma", "Verma", "Gupta", "Patel", "Shah", "Khan",
    "Reddy", "Rao", "Jain", "Mehta", "Agarwal", "Chowdhury",
)

_EDGE_JUNK = string.digits + string.punctuation + string.whitespace + "।॥"


def _correction_table(canonical_to_variants: Mapping[str, Iterable[str]]) -> Mapping[str, str]:
    """variant -> canonical, with every canonical spelling mapping to itself."""
    table: Dict[str, str] = {}
    for canonical in canonical_to_variants:
        table[canonical.lower()] = canonical
    for canonical, variants in canonical_to_variants.items():
        for variant in variants:
            table.setdefault(variant, canonical)
    return MappingProxyType(table)


@dataclass(frozen=True)
class NameRules:
    honorifics: Tuple[str, ...] = _HONORIFICS
    first_names: Mapping[str, str] = field(default_factory=lambda: _correction_table(_FIRST_NAMES))
    surnames: Mapping[str, str] = field(default_factory=lambda: _correction_table(_SURNAMES))
    capitalization: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({s.lower(): s for s in _CAPITALIZATION_OVERRIDES})
    )
    max_edit_distance: int = 2
    min_fuzzy_length: int = 3


NAME_RULES = NameRules()


# ---------------- Clean ---------------- #

def _honorific_pattern(honorifics: Tuple[str, ...]) -> "re.Pattern[str]":
    alternatives = "|".join(re.escape(h) for h in sorted(honorifics, key=len, reverse=True))
    return re.compile(rf"^(?:{alternatives})(?:\.\s*|\s+)", re.IGNORECASE)


def _is_letter(ch: str) -> bool:
    # Devanagari vowel signs are combining marks, not alphabetic
    return ch.isalpha() or unicodedata.category(ch).startswith("M")


def clean_name(name: Optional[str], rules: NameRules = NAME_RULES) -> str:
    if not name or not name.strip():
        return ""

    name = re.sub(r"\s+", " ", name).strip()

    honorific = _honorific_pattern(rules.honorifics)
    while True:
        stripped = honorific.sub("", name, count=1)
        if stripped == name:
            break
        name = stripped

    name = name.strip(_EDGE_JUNK)
    name = "".join(ch for ch in name if _is_letter(ch) or ch.isspace())
    return re.sub(r"\s+", " ", name).strip()


def is_valid_name(name: Optional[str]) -> bool:
    if not name or not name.strip():
        return False
    name = name.strip()
    if len(name) < 2:
        return False
    if not any(ch.isalpha() for ch in name):
        return False
    return not name.replace(" ", "").isdigit()


# ---------------- Correct ---------------- #

def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance with unit insert/delete/substitute costs."""
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def _fuzzy_match(word: str, rules: NameRules) -> str:
    if len(word) < rules.min_fuzzy_length:
        return ""

    best_value = ""
    best_distance = rules.max_edit_distance + 1
    for table in (rules.first_names, rules.surnames):
        for key, canonical in table.items():
            distance = edit_distance(word, key)
            if distance < best_distance:
                best_value, best_distance = canonical, distance
    return best_value


def correct_word(word: str, fuzzy: bool = True, rules: NameRules = NAME_RULES) -> str:
    lower = word.lower()
    if lower in rules.first_names:
        return rules.first_names[lower]
    if lower in rules.surnames:
        return rules.surnames[lower]
    if fuzzy:
        match = _fuzzy_match(lower, rules)
        if match:
            return match
    return word


def correct_name(name: str, fuzzy: bool = True, rules: NameRules = NAME_RULES) -> str:
    return " ".join(correct_word(word, fuzzy, rules) for word in name.split())


# ---------------- Capitalize ---------------- #

def capitalize_name(name: str, rules: NameRules = NAME_RULES) -> str:
    words = []
    for word in name.split():
        lower = word.lower()
        words.append(rules.capitalization.get(lower, lower[:1].upper() + lower[1:]))
    return " ".join(words)


# ---------------- Public API ---------------- #

def resolve_name(
    raw_name: Optional[str],
    utterance_has_devanagari: bool,
    *,
    rules: NameRules = NAME_RULES,
) -> str:
    """
    Turn an extracted name fragment into a clean, Roman, title-cased name.

    Never raises; blank or letterless input gives "".
    """
    name = clean_name(raw_name, rules)
    if not name:
        return ""

    if contains_devanagari(name):
        name = transliterate(name)

    name = correct_name(name, fuzzy=utterance_has_devanagari, rules=rules)
    return capitalize_name(name, rules)
