"""
Responsibilities:
- Resolve meeting date phrases (Hindi / English / Hinglish, two scripts) to dd-mm-yyyy
- Support relative and absolute date expressions
- Remain deterministic and side-effect free

Resolution order (first match wins):
    literal keyword -> "after N days" -> weekday -> "D Month [YYYY]" -> numeric date

Anything else resolves to "" rather than a guessed date.
"""

import logging
import re
import unicodedata
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from types import MappingProxyType
from typing import Mapping, Optional, Tuple
from zoneinfo import ZoneInfo

import dateparser

from app.config import settings
from app.utils.script import to_ascii_digits

logger = logging.getLogger(__name__)

DATE_FORMAT = "%d-%m-%Y"
CANONICAL_DATE_RE = re.compile(r"\d{2}-\d{2}-\d{4}")

# ---------------- Vocabulary ---------------- #

_MONTHS = {
    "jan": ("january", "janvari", "janwari", "जनवरी"),
    "feb": ("february", "febuary", "farvari", "farwari", "फरवरी"),
    "mar": ("march", "maarch", "मार्च"),
    "apr": ("april", "aprail", "अप्रैल", "अप्रेल"),
    "may": ("मई",),
    "jun": ("june", "जून"),
    "jul": ("july", "julai", "जुलाई"),
    "aug": ("august", "agast", "अगस्त"),
    "sep": ("september", "sept", "sitambar", "सितंबर", "सितम्बर"),
    "oct": ("october", "oktober", "aktubar", "अक्टूबर", "अक्तूबर"),
    "nov": ("november", "navambar", "नवंबर", "नवम्बर"),
    "dec": ("december", "disambar", "dasambar", "दिसंबर", "दिसम्बर", "दिसमबर"),
}

_WEEKDAYS = {
    "monday": ("somwar", "somvar", "सोमवार"),
    "tuesday": ("tusday", "tuesdy", "mangalwar", "mangalvar", "मंगलवार"),
    "wednesday": ("wednesdy", "wensday", "wedensday", "budhwar", "budhvar", "बुधवार"),
    "thursday": ("thrusday", "thurday", "guruwar", "guruvar", "brihaspativar", "गुरुवार", "बृहस्पतिवार"),
    "friday": ("firday", "fryday", "shukrawar", "shukravar", "शुक्रवार"),
    "saturday": ("saterday", "satarday", "shaniwar", "shanivar", "शनिवार"),
    "sunday": ("sundey", "raviwar", "ravivar", "itwar", "itvar", "रविवार", "इतवार"),
}

# "day after tomorrow" must be rewritten before "tomorrow"
_KEYWORDS = {
    "parso": ("day after tomorrow", "day after tommorow", "parson", "parsoon", "parsu", "परसों", "परसो"),
    "today": ("aaj", "आज"),
    "tomorrow": ("tommorow", "tomorow", "tmrw", "kal", "कल"),
    "next": ("agle", "agla", "agli", "अगले", "अगला", "अगली", "आगले"),
    "this": ("coming", "upcoming", "aane wale", "aanewale", "iss", "इस", "आने वाले"),
    "after": ("later", "baad", "बाद", "आफ्टर"),
    "days": ("day", "din", "dino", "दिन", "डेज"),
    "week": ("hafte", "hafta", "हफ्ते", "हफ्ता", "सप्ताह"),
}

_TIME_OF_DAY = (
    "morning", "afternoon", "evening", "night", "noon",
    "subah", "subha", "savere", "dopahar", "shaam", "sham", "raat", "baje", "bje", "ko",
    "सुबह", "सवेरे", "दोपहर", "शाम", "रात", "बजे", "को",
)

_NUMBER_WORDS = {
    "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
    "ek": 1, "do": 2, "teen": 3, "char": 4, "chaar": 4, "paanch": 5, "panch": 5,
    "chhe": 6, "chah": 6, "saat": 7, "aath": 8, "nau": 9, "das": 10,
    "एक": 1, "दो": 2, "तीन": 3, "चार": 4, "पांच": 5, "पाँच": 5,
    "छह": 6, "सात": 7, "आठ": 8, "नौ": 9, "दस": 10, "टू": 2,
}

WEEKDAY_INDEX = {name: i for i, name in enumerate(_WEEKDAYS)}
MONTH_INDEX = {name: i for i, name in enumerate(_MONTHS, start=1)}


@dataclass(frozen=True)
class DateRules:
    months: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: MappingProxyType(_MONTHS))
    weekdays: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: MappingProxyType(_WEEKDAYS))
    keywords: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: MappingProxyType(_KEYWORDS))
    time_of_day: Tuple[str, ...] = _TIME_OF_DAY
    number_words: Mapping[str, int] = field(default_factory=lambda: MappingProxyType(_NUMBER_WORDS))


DATE_RULES = DateRules()


# ---------------- Helpers ---------------- #

def term_pattern(term: str) -> str:
    """Whole-word regex for a vocabulary term in either script."""
    escaped = re.escape(term)
    if term.isascii():
        return rf"\b{escaped}\b"
    # \b is unreliable next to Devanagari vowel signs
    return rf"(?<![\u0900-\u097F]){escaped}(?![\u0900-\u097F])"


def _rewrite(text: str, table: Mapping[str, Tuple[str, ...]]) -> str:
    for canonical, variants in table.items():
        for variant in sorted(variants, key=len, reverse=True):
            text = re.sub(term_pattern(variant), f" {canonical} ", text)
    return text


def normalize_phrase(text: str, rules: DateRules = DATE_RULES) -> str:
    """Lower-case, canonicalize vocabulary and drop time-of-day words."""
    text = unicodedata.normalize("NFC", text).replace("\u093c", "")
    text = to_ascii_digits(text).lower()

    text = _rewrite(text, rules.keywords)
    text = _rewrite(text, rules.months)
    text = _rewrite(text, rules.weekdays)

    for word in rules.time_of_day:
        text = re.sub(term_pattern(word), " ", text)

    return re.sub(r"\s+", " ", text).strip()


def _today() -> date:
    return datetime.now(ZoneInfo(settings.TIMEZONE)).date()


def _as_date(value) -> date:
    return value.date() if isinstance(value, datetime) else value


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def _number(token: str, rules: DateRules) -> int:
    if token.isdigit():
        return int(token)
    return rules.number_words.get(token, 0)


def _patterns(rules: DateRules):
    numbers = "|".join(re.escape(w) for w in sorted(rules.number_words, key=len, reverse=True))
    months = "|".join(rules.months)
    weekdays = "|".join(rules.weekdays)
    return {
        "after_days": re.compile(rf"\b(?:after|in)\s+(\d{{1,3}}|{numbers})\s+days\b"),
        "days_after": re.compile(rf"(?<!\S)(\d{{1,3}}|{numbers})\s+days\s+(?:(?:ke|के)\s+)?after\b"),
        "weekday": re.compile(rf"(?:\b(next|this)\s+(?:week\s+(?:(?:ke|के)\s+)?)?)?\b({weekdays})\b"),
        "day_month": re.compile(
            rf"\b(\d{{1,2}})(?:st|nd|rd|th)?\s+(?:of\s+)?({months})\b(?:\s*,?\s*(\d{{4}})\b)?"
        ),
        "month_day": re.compile(
            rf"\b({months})\s+(\d{{1,2}})(?:st|nd|rd|th)?\b(?:\s*,?\s*(\d{{4}})\b)?"
        ),
        "numeric": re.compile(r"\b(\d{1,2})([/.\-])(\d{1,2})\2(\d{4}|\d{2})\b"),
    }


_DEFAULT_PATTERNS = _patterns(DATE_RULES)


def _compiled(rules: DateRules):
    return _DEFAULT_PATTERNS if rules is DATE_RULES else _patterns(rules)


def next_weekday(today: date, target: int, modifier: Optional[str]) -> date:
    """
    "friday" / "this friday" / "next friday" relative to `today`.

    Same weekday: this -> today, bare -> +7, next -> +14.
    Otherwise: bare/this -> upcoming occurrence, next -> one week after it.
    """
    offset = (target - today.weekday()) % 7
    if offset == 0:
        if modifier == "this":
            return today
        offset = 14 if modifier == "next" else 7
    elif modifier == "next":
        offset += 7
    return today + timedelta(days=offset)


def _build_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _absolute(day: str, month: str, year: Optional[str], today: date) -> Optional[date]:
    if year:
        return _build_date(int(year), MONTH_INDEX[month], int(day))

    resolved = _build_date(today.year, MONTH_INDEX[month], int(day))
    if resolved and resolved < today:
        resolved = _build_date(today.year + 1, MONTH_INDEX[month], int(day))
    return resolved


def _numeric(day: str, month: str, year: str) -> Optional[date]:
    if len(year) == 2:
        year = f"20{year}"

    token = f"{int(day):02d}/{int(month):02d}/{year}"
    parsed = dateparser.parse(
        token,
        date_formats=["%d/%m/%Y"],
        languages=["en"],
        settings={"DATE_ORDER": "DMY", "STRICT_PARSING": True},
    )
    if not parsed:
        return None

    # dateparser falls back to fuzzy parsing when the format fails; reject drift
    if (parsed.day, parsed.month, parsed.year) != (int(day), int(month), int(year)):
        return None
    return parsed.date()


# ---------------- Public API ---------------- #

def resolve_date(
    phrase: Optional[str],
    today: Optional[date] = None,
    *,
    rules: DateRules = DATE_RULES,
) -> str:
    """
    Resolve a date phrase to dd-mm-yyyy.

    Examples:
        "kal", "parso", "aaj"
        "next friday", "agle shukrawar"
        "2 din baad", "after two days"
        "22 december", "22 dec 2025", "दिसंबर 5"
        "22/12/2025", "5-1-26"

    Returns:
        canonical date string or "" if the phrase matches no rule
    """
    if not phrase or not phrase.strip():
        return ""

    today = _as_date(today) if today else _today()
    text = normalize_phrase(phrase, rules)
    patterns = _compiled(rules)

    logger.debug("[RESOLVE_DATE] '%s' normalized to '%s'", phrase, text)

    # 1. literal keywords
    if re.search(r"\btoday\b", text):
        return format_date(today)
    if re.search(r"\btomorrow\b", text):
        days = 2 if re.search(r"\bnext\b", text) else 1
        return format_date(today + timedelta(days=days))
    if re.search(r"\bparso\b", text):
        return format_date(today + timedelta(days=2))

    # 2. after N days
    match = patterns["after_days"].search(text) or patterns["days_after"].search(text)
    if match:
        days = _number(match.group(1), rules)
        if days > 0:
            return format_date(today + timedelta(days=days))

    # 3. weekday
    match = patterns["weekday"].search(text)
    if match:
        resolved = next_weekday(today, WEEKDAY_INDEX[match.group(2)], match.group(1))
        return format_date(resolved)

    # 4. absolute "22 dec [2025]" / "dec 22 [2025]"
    match = patterns["day_month"].search(text)
    if match:
        resolved = _absolute(match.group(1), match.group(2), match.group(3), today)
        return format_date(resolved) if resolved else ""

    match = patterns["month_day"].search(text)
    if match:
        resolved = _absolute(match.group(2), match.group(1), match.group(3), today)
        return format_date(resolved) if resolved else ""

    # 5. numeric
    match = patterns["numeric"].search(text)
    if match:
        resolved = _numeric(match.group(1), match.group(3), match.group(4))
        return format_date(resolved) if resolved else ""

    logger.debug("[RESOLVE_DATE] no rule matched '%s'", phrase)
    return ""


def find_date_phrase(text: Optional[str], *, rules: DateRules = DATE_RULES) -> str:
    """
    Locate the first date expression in a whole utterance.

    Returns the normalized phrase (which resolve_date accepts) or "".
    """
    if not text or not text.strip():
        return ""

    normalized = normalize_phrase(text, rules)
    patterns = _compiled(rules)

    for keyword in (r"\btoday\b", r"(?:\bnext\s+)?\btomorrow\b", r"\bparso\b"):
        match = re.search(keyword, normalized)
        if match:
            return match.group(0)

    for name in ("after_days", "days_after", "weekday", "day_month", "month_day", "numeric"):
        match = patterns[name].search(normalized)
        if match:
            return match.group(0)

    return ""


def is_valid_date(
    value: Optional[str],
    today: Optional[date] = None,
    horizon_days: int = 365,
) -> bool:
    """Canonical dd-mm-yyyy within [today, today + horizon_days]."""
    if not value or not CANONICAL_DATE_RE.fullmatch(value.strip()):
        return False

    try:
        parsed = datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        return False

    today = _as_date(today) if today else _today()
    return today <= parsed <= today + timedelta(days=horizon_days)
