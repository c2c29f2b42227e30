import asyncio
from datetime import date

import pytest

from app.config import settings
from app.nlu.schemas import ExtractionResult
from app.utils.logger import RequestTrace
from app.workflow import parse_meeting, logger

TODAY = date(2025, 1, 10)


@pytest.mark.asyncio
async def test_parse_meeting_normalizes_extracted_fields():
    async def extractor(text):
        return ExtractionResult(
            client_name="रितेश वरमा",
            mobile_number="98765 43210",
            meeting_date="kal",
            start_time="5",
            end_time="6",
        )

    text = "रितेश वरमा के साथ कल शाम 5 से 6 बजे मीटिंग, नंबर 98765 43210"
    response = await parse_meeting(text, today=TODAY, extractor=extractor)

    assert response.success
    assert response.errors == []
    assert response.data.client_name == "Ritesh Verma"
    assert response.data.mobile_number == "9876543210"
    assert response.data.meeting_date == "11-01-2025"
    assert response.data.start_time == "5:00 PM"
    assert response.data.end_time == "6:00 PM"


@pytest.mark.asyncio
async def test_parse_meeting_falls_back_when_extractor_times_out(mocker):
    mocker.patch.object(settings, "EXTRACTION_TIMEOUT", 0.01)

    async def slow_extractor(text):
        await asyncio.sleep(1)
        return ExtractionResult(client_name="Somebody Else")

    text = "Schedule meeting with Rani Verma next friday from 5 pm to 6 pm, mobile number 6267304521"
    response = await parse_meeting(text, today=TODAY, extractor=slow_extractor)

    assert response.success
    assert response.data.client_name == "Rani Verma"
    assert response.data.mobile_number == "6267304521"
    assert response.data.meeting_date == "24-01-2025"
    assert response.data.start_time == "5:00 PM"
    assert response.data.end_time == "6:00 PM"


@pytest.mark.asyncio
async def test_parse_meeting_survives_extractor_error():
    async def broken_extractor(text):
        raise RuntimeError("upstream down")

    response = await parse_meeting("kal meeting", today=TODAY, extractor=broken_extractor)

    assert not response.success
    assert response.data.meeting_date == "11-01-2025"
    assert response.errors == ["Client name missing", "Start time missing", "End time missing"]


@pytest.mark.asyncio
async def test_parse_meeting_keeps_unresolvable_date_empty():
    async def extractor(text):
        return ExtractionResult(client_name="Akshat Jain", meeting_date="someday", start_time="4 pm", end_time="5 pm")

    trace = RequestTrace(logger, request_id="test1234")
    response = await parse_meeting("Akshat Jain someday 4 pm to 5 pm", today=TODAY, extractor=extractor, trace=trace)

    assert response.data.client_name == "Akshat Jain"
    assert response.data.meeting_date == ""
    assert response.errors == ["Meeting date missing"]

    date_event = next(e for e in trace.events if e["stage"] == "date")
    assert date_event == {"stage": "date", "raw": "someday", "value": "", "note": "unresolved"}
    assert [e["stage"] for e in trace.events] == [
        "extract", "fallback", "mobile", "name", "date", "start_time", "end_time", "validate",
    ]


@pytest.mark.asyncio
async def test_response_wire_format_uses_camel_case():
    async def extractor(text):
        return ExtractionResult(client_name="Rahul", meeting_date="aaj", start_time="4 pm", end_time="5 pm")

    response = await parse_meeting("Rahul aaj 4 pm to 5 pm", today=TODAY, extractor=extractor)
    wire = response.to_wire()

    assert wire["success"] is True
    assert wire["confidence"] == 0.95
    assert wire["data"] == {
        "clientName": "Rahul",
        "mobileNumber": "",
        "meetingDate": "10-01-2025",
        "startTime": "4:00 PM",
        "endTime": "5:00 PM",
    }


@pytest.mark.asyncio
async def test_parse_meeting_recovers_date_given_as_time_of_day():
    async def extractor(text):
        return ExtractionResult(client_name="Rahul", meeting_date="shaam", start_time="5", end_time="6")

    response = await parse_meeting(
        "Rahul ke saath kal shaam 5 se 6 baje meeting", today=TODAY, extractor=extractor
    )

    assert response.success
    assert response.data.meeting_date == "11-01-2025"
    assert response.data.start_time == "5:00 PM"
    assert response.data.end_time == "6:00 PM"


@pytest.mark.asyncio
async def test_parse_meeting_recovers_start_time_without_hour():
    async def extractor(text):
        return ExtractionResult(client_name="Rahul", meeting_date="kal", start_time="shaam", end_time="6")

    response = await parse_meeting(
        "Rahul ke saath kal shaam 5 se 6 baje meeting", today=TODAY, extractor=extractor
    )

    assert response.success
    assert response.data.start_time == "5:00 PM"
    assert response.data.end_time == "6:00 PM"


@pytest.mark.asyncio
async def test_parse_meeting_keeps_separate_time_of_day_per_side():
    async def empty_extractor(text):
        return ExtractionResult()

    response = await parse_meeting(
        "Rahul ke saath kal subah 11 se shaam 5 baje meeting", today=TODAY, extractor=empty_extractor
    )

    assert response.success
    assert response.data.client_name == "Rahul"
    assert response.data.meeting_date == "11-01-2025"
    assert response.data.start_time == "11:00 AM"
    assert response.data.end_time == "5:00 PM"
