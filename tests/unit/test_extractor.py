import pytest

import app.nlu.extractor as extractor
from app.config import settings
from app.nlu.extractor import _safe_json_parse, extract_fields


def test_safe_json_parse_plain_and_fenced():
    assert _safe_json_parse('{"clientName": "Rahul"}') == {"clientName": "Rahul"}
    assert _safe_json_parse('```json\n{"clientName": "Rahul"}\n```') == {"clientName": "Rahul"}


def test_safe_json_parse_recovers_embedded_object():
    reply = 'Sure! Here it is: {"meetingDate": "kal"} hope that helps'
    assert _safe_json_parse(reply) == {"meetingDate": "kal"}


def test_safe_json_parse_gives_up_quietly():
    assert _safe_json_parse("") == {}
    assert _safe_json_parse("no json here") == {}
    assert _safe_json_parse("[1, 2, 3]") == {}


@pytest.mark.asyncio
async def test_extract_fields_without_api_key(mocker):
    mocker.patch.object(settings, "GROQ_API_KEY", "")
    call = mocker.patch.object(extractor, "_run_with_retries")

    result = await extract_fields("kal Rahul ke saath meeting")

    assert result.model_dump() == {
        "client_name": "",
        "mobile_number": "",
        "meeting_date": "",
        "start_time": "",
        "end_time": "",
    }
    call.assert_not_called()


@pytest.mark.asyncio
async def test_extract_fields_maps_camel_case_reply(mocker):
    mocker.patch.object(settings, "GROQ_API_KEY", "test-key")
    mocker.patch.object(
        extractor,
        "_run_with_retries",
        return_value={
            "clientName": "Neeraj Kumawat",
            "mobileNumber": None,
            "meetingDate": "kal",
            "startTime": " 4 ",
            "endTime": "",
            "clientNameSpanStart": 0,
        },
    )

    result = await extract_fields("नीरज कुमावत कल शामको चार बजे")

    assert result.client_name == "Neeraj Kumawat"
    assert result.mobile_number == ""
    assert result.meeting_date == "kal"
    assert result.start_time == "4"


@pytest.mark.asyncio
async def test_run_with_retries_swallows_failures(mocker):
    mocker.patch.object(extractor, "MAX_RETRIES", 2)
    call = mocker.patch.object(extractor, "_call_groq", side_effect=Exception("rate limited"))

    assert await extractor._run_with_retries("kal meeting") == {}
    assert call.call_count == 2
