"""
Responsibilities:
- Normalize an hour[:minute] token to "H:MM AM|PM"
- Infer a missing meridiem from the surrounding utterance
- Validate start/end time ranges

AM/PM inference is a best-effort policy, not a guarantee:

    1. meridiem written in the token ("5 pm", "5:30 पीएम")
    2. 24-hour values (13-23 -> PM, 0 -> 12 AM)
    3. first matching context band (keywords + hour range -> meridiem),
       searched in the token itself before the rest of the utterance
    4. default by hour
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import FrozenSet, Optional, Tuple

from app.utils.script import to_ascii_digits

logger = logging.getLogger(__name__)

MERIDIEM_RE = re.compile(
    r"(\d{1,2})(?:\s*[:.]\s*(\d{2}))?\s*(a\.?\s?m\.?|p\.?\s?m\.?|एएम|पीएम|ए\.एम\.?|पी\.एम\.?)",
    re.IGNORECASE,
)
HOUR_RE = re.compile(r"(\d{1,2})(?:\s*[:.]\s*(\d{2}))?")
# "5pm", "5 a.m.", "5 पीएम" anywhere in the utterance; "I am" is not a meridiem
CONTEXT_MERIDIEM_RE = re.compile(r"(\d)\s*(a\.?\s?m\b\.?|p\.?\s?m\b\.?|एएम|पीएम)")


def _hours(*ranges: Tuple[int, int]) -> FrozenSet[int]:
    return frozenset(h for start, end in ranges for h in range(start, end + 1))


@dataclass(frozen=True)
class TimeBand:
    keywords: Tuple[str, ...]
    hours: FrozenSet[int]
    meridiem: str


_MORNING = ("subah", "subha", "savere", "morning", "सुबह", "सवेरे")
_AFTERNOON = ("dopahar", "afternoon", "noon", "lunch", "दोपहर")
_EVENING = ("shaam", "sham", "evening", "शाम", "शामको")
_NIGHT = ("raat", "night", "midnight", "रात")
_BUSINESS = ("office", "meeting", "work", "ऑफिस", "मीटिंग")

_BANDS = (
    TimeBand(_MORNING, _hours((1, 11)), "AM"),
    TimeBand(_AFTERNOON, _hours((12, 12), (1, 5)), "PM"),
    TimeBand(_EVENING, _hours((4, 11)), "PM"),
    TimeBand(_NIGHT, _hours((12, 12), (1, 5)), "AM"),
    TimeBand(_NIGHT, _hours((6, 11)), "PM"),
    TimeBand(("<pm>",), _hours((1, 12)), "PM"),
    TimeBand(("<am>",), _hours((1, 12)), "AM"),
    TimeBand(_BUSINESS, _hours((12, 12), (1, 5)), "PM"),
    TimeBand(_BUSINESS, _hours((9, 11)), "AM"),
)


@dataclass(frozen=True)
class TimeRules:
    bands: Tuple[TimeBand, ...] = _BANDS
    late_words: Tuple[str, ...] = _NIGHT + ("late",)
    after_words: Tuple[str, ...] = ("after", "baad", "बाद", "office", "work", "evening", "शाम", "shaam")
    evening_words: Tuple[str, ...] = _EVENING + _NIGHT


TIME_RULES = TimeRules()


# ---------------- Helpers ---------------- #

def has_keyword(text: str, keywords: Tuple[str, ...]) -> bool:
    """Whole-word keyword test; Devanagari keywords match as substrings."""
    for keyword in keywords:
        if keyword.isascii():
            if re.search(rf"(?<![a-z]){re.escape(keyword)}(?![a-z])", text):
                return True
        elif keyword in text:
            return True
    return False


def mark_meridiems(text: str) -> str:
    """Tag explicit meridiems as <am>/<pm> so the context bands can see them."""

    def _tag(match: "re.Match[str]") -> str:
        marker = match.group(2)
        tag = "<pm>" if marker.startswith(("p", "प")) else "<am>"
        return f"{match.group(1)} {tag}"

    return CONTEXT_MERIDIEM_RE.sub(_tag, text)


def _format(hour: int, minutes: str, meridiem: str) -> str:
    return f"{hour}:{minutes} {meridiem}"


def _meridiem_from_token(token: str) -> Optional[str]:
    match = MERIDIEM_RE.search(token)
    if not match:
        return None

    hour = int(match.group(1))
    minutes = match.group(2) or "00"
    marker = match.group(3).lower()
    meridiem = "PM" if marker.startswith("p") or marker.startswith("पी") else "AM"

    if hour > 23 or int(minutes) > 59:
        return ""
    if hour >= 13:
        return _format(hour - 12, minutes, "PM")
    if hour == 0:
        return _format(12, minutes, "AM")
    return _format(hour, minutes, meridiem)


def _default_meridiem(hour: int, context: str, rules: TimeRules) -> str:
    if hour == 12:
        return "PM"
    if 1 <= hour <= 5:
        return "AM" if has_keyword(context, rules.late_words) else "PM"
    if 6 <= hour <= 8:
        return "PM" if has_keyword(context, rules.after_words) else "AM"
    return "PM" if has_keyword(context, rules.evening_words) else "AM"


# ---------------- Public API ---------------- #

def normalize_time(
    token: Optional[str],
    utterance: Optional[str] = "",
    *,
    rules: TimeRules = TIME_RULES,
) -> str:
    """
    Normalize a time token to "H:MM AM|PM" using the utterance as context.

    Examples:
        ("5 pm", ...)              -> "5:00 PM"
        ("17:30", ...)             -> "5:30 PM"
        ("5", "shaam 5 baje")      -> "5:00 PM"
        ("4", "subah 4 baje")      -> "4:00 AM"

    Returns "" when the token has no usable hour.
    """
    if not token or not token.strip():
        return ""

    token = to_ascii_digits(token.strip())
    context = mark_meridiems(to_ascii_digits(f"{token} {utterance or ''}").lower())

    # 1. explicit meridiem in the token
    explicit = _meridiem_from_token(token)
    if explicit is not None:
        return explicit

    match = HOUR_RE.search(token)
    if not match:
        return ""

    hour = int(match.group(1))
    minutes = match.group(2) or "00"
    if hour > 23 or int(minutes) > 59:
        return ""

    # 2. 24-hour clock
    if hour >= 13:
        return _format(hour - 12, minutes, "PM")
    if hour == 0:
        return _format(12, minutes, "AM")

    # 3. context bands, words inside the token ("shaam 5") before the utterance
    for scope in (token.lower(), context):
        for band in rules.bands:
            if hour in band.hours and has_keyword(scope, band.keywords):
                return _format(hour, minutes, band.meridiem)

    # 4. default by hour
    meridiem = _default_meridiem(hour, context, rules)
    logger.debug("[NORMALIZE_TIME] '%s' defaulted to %s", token, meridiem)
    return _format(hour, minutes, meridiem)


def parse_time(value: Optional[str]) -> Optional[datetime]:
    """Parse a canonical or near-canonical time ("5:00 PM", "5 pm", "17:00")."""
    if not value or not value.strip():
        return None

    text = value.strip().upper()
    text = re.sub(r"(\d)\s*[.:]\s*(\d)", r"\1:\2", text)
    text = re.sub(r"([AP])\.?\s?M\.?", r"\1M", text)
    text = re.sub(r"\s*(AM|PM)$", r" \1", text)
    text = re.sub(r"\s+", " ", text)

    for fmt in ("%I:%M %p", "%I %p", "%H:%M"):
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def get_duration(start: Optional[str], end: Optional[str]) -> Optional[timedelta]:
    """Meeting length; an end at or before the start crosses midnight."""
    start_dt = parse_time(start)
    end_dt = parse_time(end)
    if not start_dt or not end_dt:
        return None

    if end_dt <= start_dt:
        end_dt += timedelta(days=1)
    return end_dt - start_dt


def is_valid_time_range(
    start: Optional[str],
    end: Optional[str],
    min_minutes: int = 15,
    max_hours: int = 12,
) -> bool:
    duration = get_duration(start, end)
    if duration is None:
        return False
    return timedelta(minutes=min_minutes) <= duration <= timedelta(hours=max_hours)


def to_24_hour(value: Optional[str]) -> str:
    parsed = parse_time(value)
    return parsed.strftime("%H:%M") if parsed else ""
