from datetime import date
from typing import List, Optional
import re

from app.nlu.names import is_valid_name
from app.nlu.schemas import ExtractionResult, ValidationOutcome
from app.utils.datetime_parser import is_valid_date
from app.utils.time_parser import is_valid_time_range

MOBILE_RE = re.compile(r"[6-9]\d{9}")


# ---------------- Field Validation ---------------- #

def is_valid_mobile(mobile: Optional[str]) -> bool:
    return bool(mobile) and bool(MOBILE_RE.fullmatch(mobile))


# ---------------- Record Validation ---------------- #

def validate(
    result: ExtractionResult,
    *,
    require_mobile: bool = False,
    date_horizon_days: int = 365,
    min_duration_minutes: int = 15,
    max_duration_hours: int = 12,
    today: Optional[date] = None,
) -> ValidationOutcome:
    """
    Field and cross-field checks. Errors are itemized so the caller can
    re-prompt for just the missing pieces; the record itself is untouched.
    """
    errors: List[str] = []

    if not result.client_name:
        errors.append("Client name missing")
    elif not is_valid_name(result.client_name):
        errors.append("Invalid client name format")

    # Mobile is optional unless the profile requires it, but must be well formed if present
    if not result.mobile_number:
        if require_mobile:
            errors.append("Mobile number missing")
    elif not is_valid_mobile(result.mobile_number):
        errors.append("Invalid mobile number")

    if not result.meeting_date:
        errors.append("Meeting date missing")
    elif not is_valid_date(result.meeting_date, today=today, horizon_days=date_horizon_days):
        errors.append("Invalid meeting date")

    if not result.start_time:
        errors.append("Start time missing")

    if not result.end_time:
        errors.append("End time missing")

    if (
        result.start_time
        and result.end_time
        and not is_valid_time_range(
            result.start_time,
            result.end_time,
            min_minutes=min_duration_minutes,
            max_hours=max_duration_hours,
        )
    ):
        errors.append("Invalid time range")

    return ValidationOutcome(is_valid=not errors, errors=errors)
