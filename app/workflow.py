# workflow.py

import asyncio
import logging
from datetime import date
from typing import Awaitable, Callable, Optional

from app.config import settings
from app.nlu.extractor import extract_fields
from app.nlu.fallback import apply_fallback, normalize_mobile
from app.nlu.names import resolve_name
from app.nlu.schemas import ExtractionResult, ParseResponse
from app.nlu.validators import validate
from app.utils.datetime_parser import resolve_date
from app.utils.logger import RequestTrace
from app.utils.script import contains_devanagari
from app.utils.time_parser import normalize_time

logger = logging.getLogger(__name__)

Extractor = Callable[[str], Awaitable[ExtractionResult]]


# Extraction ---------------------------------------------------------------------------


async def _extract(text: str, extractor: Extractor, trace: RequestTrace) -> ExtractionResult:
    """Upstream extraction; a timeout or failure degrades to an empty record."""
    try:
        result = await asyncio.wait_for(extractor(text), timeout=settings.EXTRACTION_TIMEOUT)
    except asyncio.TimeoutError:
        trace.warning("Upstream extraction timed out after %ss", settings.EXTRACTION_TIMEOUT)
        result = ExtractionResult()
    except Exception:
        trace.exception("Upstream extraction failed")
        result = ExtractionResult()

    trace.event("extract", **result.model_dump(by_alias=True))
    return result


# Normalization ---------------------------------------------------------------------------


def _normalize(
    text: str,
    result: ExtractionResult,
    trace: RequestTrace,
    today: Optional[date],
) -> ExtractionResult:
    raw_mobile = result.mobile_number
    result.mobile_number = normalize_mobile(raw_mobile)
    trace.event("mobile", raw=raw_mobile, value=result.mobile_number)

    raw_name = result.client_name
    result.client_name = resolve_name(raw_name, contains_devanagari(text))
    trace.event("name", raw=raw_name, value=result.client_name)

    raw_date = result.meeting_date
    result.meeting_date = resolve_date(raw_date, today=today)
    if raw_date and not result.meeting_date:
        trace.event("date", raw=raw_date, value="", note="unresolved")
    else:
        trace.event("date", raw=raw_date, value=result.meeting_date)

    raw_start, raw_end = result.start_time, result.end_time
    result.start_time = normalize_time(raw_start, text)
    result.end_time = normalize_time(raw_end, text)
    trace.event("start_time", raw=raw_start, value=result.start_time)
    trace.event("end_time", raw=raw_end, value=result.end_time)

    return result


# Public Runner ---------------------------------------------------------------------------


async def parse_meeting(
    text: str,
    *,
    today: Optional[date] = None,
    extractor: Extractor = extract_fields,
    trace: Optional[RequestTrace] = None,
) -> ParseResponse:
    """
    Turn one utterance into a normalized, validated meeting record.

    extraction -> regex fallback -> mobile -> name -> date -> times -> validation
    """
    trace = trace or RequestTrace(logger)
    text = (text or "").strip()
    trace.info("Parsing utterance: %s", text)

    result = await _extract(text, extractor, trace)

    result = apply_fallback(text, result, trace, today)
    trace.event("fallback", **result.model_dump(by_alias=True))

    result = _normalize(text, result, trace, today)

    outcome = validate(
        result,
        require_mobile=settings.REQUIRE_MOBILE,
        date_horizon_days=settings.DATE_HORIZON_DAYS,
        min_duration_minutes=settings.MIN_MEETING_MINUTES,
        max_duration_hours=settings.MAX_MEETING_HOURS,
        today=today,
    )
    trace.event("validate", is_valid=outcome.is_valid, errors=outcome.errors)

    return ParseResponse(
        success=outcome.is_valid,
        data=result,
        errors=outcome.errors,
        confidence=settings.RESPONSE_CONFIDENCE,
    )
