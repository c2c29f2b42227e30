"""
Regex safety net over the raw utterance.

Fills only fields the upstream extractor left empty or implausible; a
plausible value is never overwritten.
"""

import logging
import re
from datetime import date
from typing import Optional

from app.nlu.names import is_valid_name
from app.nlu.schemas import ExtractionResult
from app.nlu.validators import is_valid_mobile
from app.utils.datetime_parser import find_date_phrase, normalize_phrase, resolve_date
from app.utils.script import to_ascii_digits

logger = logging.getLogger(__name__)

MOBILE_RE = re.compile(r"(?<!\d)(?:\+?91|0)?([6-9]\d{9})(?!\d)")
DIGIT_GAP_RE = re.compile(r"(?<=\d)[\s\-]+(?=\d)")
DIGIT_RE = re.compile(r"\d")

_MERIDIEM = r"(?:a\.?m\.?|p\.?m\.?|एएम|पीएम)"
_CLOCK = r"(?:baje|bje|बजे|o'?\s?clock)"
_CONNECTOR = r"(?:se|sa|say|to|till|until|tak|-|–|से|तक)"
_DAYPART = r"(?:subah|subha|savere|morning|dopahar|afternoon|shaam|sham|evening|raat|night|सुबह|सवेरे|दोपहर|शाम|रात)"
# [daypart] H[:MM] [meridiem]; the daypart travels with the token so each side keeps its own
_TIME = rf"(?:(?<!\w)({_DAYPART})\s+(?:ko\s+|को\s+)?)?(?<!\d)(\d{{1,2}})(?:[:.](\d{{2}}))?\s*({_MERIDIEM})?"
TIME_RANGE_RE = re.compile(
    rf"{_TIME}(?:\s*{_CLOCK})?\s*{_CONNECTOR}\s*{_TIME}(?!\d)",
    re.IGNORECASE,
)
SINGLE_TIME_RE = re.compile(
    rf"(?:(?<!\w)({_DAYPART})\s+(?:ko\s+|को\s+)?)?(?<!\d)(\d{{1,2}})(?:[:.](\d{{2}}))?\s*({_MERIDIEM}|{_CLOCK})",
    re.IGNORECASE,
)
# numeric dates and phone-length digit runs must not be read as times
TIME_MASK_RE = re.compile(r"\d{1,2}[/.\-]\d{1,2}[/.\-]\d{2,4}|\+?\d{2,5}[\s\-]?\d{3,5}[\s\-]?\d{2,5}")

HINDI_ORDER_NAME_RE = re.compile(
    r"((?:\S+\s+){0,3}?\S+)\s+(?:ke|ki|ka|के|की)\s+(?:saath|sath|साथ)",
    re.IGNORECASE,
)
ENGLISH_ORDER_NAME_RE = re.compile(
    r"\b(?:meeting|meet)\s+(?:with|wth)\s+((?:\S+\s*){1,4})",
    re.IGNORECASE,
)

# Words that end (or never belong to) a name candidate
_NAME_STOPWORDS = frozenset({
    "today", "tomorrow", "parso", "next", "this", "after", "days", "week", "on", "at", "from",
    "by", "for", "in", "and", "or", "to", "se", "tak", "via", "with", "is", "hai",
    "meeting", "meet", "schedule", "call", "phone", "mobile", "number", "no", "contact",
    "mr", "mrs", "ms", "dr", "jan", "feb", "mar", "apr", "may", "jun", "jul", "aug",
    "sep", "oct", "nov", "dec", "monday", "tuesday", "wednesday", "thursday", "friday",
    "saturday", "sunday", "ki", "ka", "ke", "mujhe", "meri", "mera", "karni",
    "karna", "fix", "set", "book", "please", "pls", "a", "an", "the",
    "मीटिंग", "मुझे", "मेरी", "है", "करनी",
})


# ---------------- Mobile ---------------- #

def extract_mobile(text: str) -> str:
    """
    First standalone 10-digit mobile. The text is searched as written before
    digit groups are joined, so a nearby hour never merges into the number.
    """
    if not text:
        return ""
    text = to_ascii_digits(text)
    for candidate in (text, DIGIT_GAP_RE.sub("", text)):
        match = MOBILE_RE.search(candidate)
        if match:
            return match.group(1)
    return ""


def normalize_mobile(value: Optional[str]) -> str:
    """Canonical 10-digit mobile or "" (prefixes +91 / 91 / 0 dropped)."""
    if not value:
        return ""
    digits = re.sub(r"\D", "", to_ascii_digits(value))
    if len(digits) == 12 and digits.startswith("91"):
        digits = digits[2:]
    elif len(digits) == 11 and digits.startswith("0"):
        digits = digits[1:]
    return digits if is_valid_mobile(digits) else ""


# ---------------- Name ---------------- #

def _is_stopword(word: str) -> bool:
    # normalize_phrase maps kal/aaj/shukrawar/... onto the stopword vocabulary
    canonical = normalize_phrase(word)
    return (
        not canonical
        or canonical in _NAME_STOPWORDS
        or word.lower() in _NAME_STOPWORDS
        or any(ch.isdigit() for ch in canonical)
    )


def _trim_candidate(words, from_end: bool) -> str:
    kept = []
    ordered = reversed(words) if from_end else words
    for word in ordered:
        word = word.strip(",.;:!?")
        if not word or _is_stopword(word):
            break
        kept.append(word)
    if from_end:
        kept.reverse()
    return " ".join(kept)


def extract_client_name(text: str) -> str:
    """
    "<name> ke saath meeting" (Hindi order) or "meeting with <name> ..."
    (English order); the first pattern that yields a name wins.
    """
    if not text:
        return ""

    match = HINDI_ORDER_NAME_RE.search(text)
    if match:
        name = _trim_candidate(match.group(1).split(), from_end=True)
        if is_valid_name(name):
            return name

    match = ENGLISH_ORDER_NAME_RE.search(text)
    if match:
        name = _trim_candidate(match.group(1).split(), from_end=False)
        if is_valid_name(name):
            return name

    return ""


# ---------------- Time ---------------- #

def _time_token(
    daypart: Optional[str],
    hour: str,
    minutes: Optional[str],
    meridiem: Optional[str],
) -> str:
    token = f"{hour}:{minutes}" if minutes else hour
    if meridiem:
        token = f"{token} {meridiem}"
    return f"{daypart.lower()} {token}" if daypart else token


def extract_time_range(text: str):
    """
    (start, end) tokens from "5 se 6", "4:30 to 5:30 pm",
    "subah 11 se shaam 5 baje", "5 baje", ... ("" if absent).

    A time-of-day word directly before an hour stays in that hour's token
    ("shaam 5"), so start and end can sit in different parts of the day.
    """
    if not text:
        return "", ""

    masked = TIME_MASK_RE.sub(" ", to_ascii_digits(text))

    match = TIME_RANGE_RE.search(masked)
    if match:
        start = _time_token(*match.group(1, 2, 3, 4))
        end = _time_token(*match.group(5, 6, 7, 8))
        return start, end

    match = SINGLE_TIME_RE.search(masked)
    if match:
        daypart, hour, minutes, marker = match.group(1, 2, 3, 4)
        meridiem = marker if re.fullmatch(_MERIDIEM, marker, re.IGNORECASE) else None
        return _time_token(daypart, hour, minutes, meridiem), ""

    return "", ""


# ---------------- Public API ---------------- #

def _is_time_token(value: str) -> bool:
    return bool(DIGIT_RE.search(to_ascii_digits(value)))


def apply_fallback(
    utterance: str,
    result: ExtractionResult,
    trace: Optional[logging.LoggerAdapter] = None,
    today: Optional[date] = None,
) -> ExtractionResult:
    """
    Fill empty or implausible fields of `result` from the raw utterance.

    Implausible means: a malformed mobile, a name failing is_valid_name, a
    date phrase no rule resolves, a time token without digits, or a start
    time textually equal to the end time.
    """
    log = trace or logger

    if not is_valid_mobile(result.mobile_number):
        mobile = extract_mobile(utterance)
        if mobile:
            log.info("[FALLBACK] mobile: '%s' -> '%s'", result.mobile_number, mobile)
            result.mobile_number = mobile

    if not is_valid_name(result.client_name):
        name = extract_client_name(utterance)
        if name:
            log.info("[FALLBACK] client name: '%s' -> '%s'", result.client_name, name)
            result.client_name = name

    if not result.meeting_date or not resolve_date(result.meeting_date, today=today):
        phrase = find_date_phrase(utterance)
        if phrase:
            log.info("[FALLBACK] meeting date: '%s' -> '%s'", result.meeting_date, phrase)
            result.meeting_date = phrase

    same_time = bool(result.start_time) and result.start_time == result.end_time
    bad_start = same_time or not _is_time_token(result.start_time)
    bad_end = same_time or not _is_time_token(result.end_time)
    if bad_start or bad_end:
        start, end = extract_time_range(utterance)
        if start and bad_start:
            log.info("[FALLBACK] start time: '%s' -> '%s'", result.start_time, start)
            result.start_time = start
        if end and bad_end:
            log.info("[FALLBACK] end time: '%s' -> '%s'", result.end_time, end)
            result.end_time = end

    return result
