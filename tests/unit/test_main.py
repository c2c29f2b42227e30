import pytest
from fastapi.testclient import TestClient

import app.main as main
from app.nlu.schemas import ExtractionResult, ParseResponse
from app.stt.whisper import STTError, WhisperSTTService


@pytest.fixture
def client():
    return TestClient(main.app)


def test_parse_meeting_route(client, mocker):
    response_model = ParseResponse(
        success=True,
        data=ExtractionResult(
            client_name="Ritesh Verma",
            mobile_number="9876543210",
            meeting_date="11-01-2025",
            start_time="5:00 PM",
            end_time="6:00 PM",
        ),
        errors=[],
    )
    parse = mocker.patch.object(main, "parse_meeting", return_value=response_model)

    res = client.post("/api/parse-meeting", json={"text": "रितेश वरमा के साथ कल शाम 5 से 6 बजे"})

    assert res.status_code == 200
    assert res.json() == {
        "success": True,
        "data": {
            "clientName": "Ritesh Verma",
            "mobileNumber": "9876543210",
            "meetingDate": "11-01-2025",
            "startTime": "5:00 PM",
            "endTime": "6:00 PM",
        },
        "errors": [],
        "confidence": 0.95,
    }
    parse.assert_awaited_once_with("रितेश वरमा के साथ कल शाम 5 से 6 बजे")


@pytest.mark.parametrize("body", [{"text": "   "}, {}])
def test_parse_meeting_route_rejects_blank_text(client, body):
    res = client.post("/api/parse-meeting", json=body)

    assert res.status_code == 400
    assert res.json() == {"success": False, "message": "Input text missing"}


def test_speech_to_text_route(client, mocker):
    mocker.patch.object(WhisperSTTService, "transcribe", return_value="kal Rahul ke saath meeting")

    res = client.post("/api/speech-to-text", files={"audio": ("clip.webm", b"\x1a\x45\xdf\xa3", "audio/webm")})

    assert res.status_code == 200
    assert res.json() == {"success": True, "text": "kal Rahul ke saath meeting"}


def test_speech_to_text_route_missing_audio(client):
    res = client.post("/api/speech-to-text")
    assert res.status_code == 400

    res = client.post("/api/speech-to-text", files={"audio": ("clip.webm", b"", "audio/webm")})
    assert res.status_code == 400


def test_speech_to_text_route_stt_failure(client, mocker):
    mocker.patch.object(WhisperSTTService, "transcribe", side_effect=STTError("Audio conversion failed"))

    res = client.post("/api/speech-to-text", files={"audio": ("clip.webm", b"\x00\x01", "audio/webm")})

    assert res.status_code == 500
    assert res.json() == {"success": False, "error": "Audio conversion failed"}
