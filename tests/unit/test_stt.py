import pytest
from app.config import settings
from app.stt.whisper import WhisperSTTService, STTError, strip_fillers

@pytest.mark.asyncio
async def test_transcribe_success(mocker):
    dummy_audio = b"\x00" * 32000  # simulate 1 second of 16-bit silence @16kHz
    mocker.patch.object(WhisperSTTService, "_sync_transcribe", return_value="kal Rahul ke saath meeting")
    text = await WhisperSTTService.transcribe(dummy_audio)
    assert text == "kal Rahul ke saath meeting"

@pytest.mark.asyncio
async def test_transcribe_empty_audio():
    with pytest.raises(STTError):
        await WhisperSTTService.transcribe(b"")

@pytest.mark.asyncio
async def test_transcribe_internal_error(mocker):
    mocker.patch.object(WhisperSTTService, "_sync_transcribe", side_effect=Exception("oops"))
    with pytest.raises(STTError):
        await WhisperSTTService.transcribe(b"\x00" * 32000)

@pytest.mark.asyncio
async def test_transcribe_keeps_stt_error_message(mocker):
    mocker.patch.object(
        WhisperSTTService, "_sync_transcribe", side_effect=STTError("Empty transcription result")
    )
    with pytest.raises(STTError, match="Empty transcription result"):
        await WhisperSTTService.transcribe(b"\x00" * 32000)

def test_strip_fillers():
    assert strip_fillers("um mujhe kal uh Rahul se milna hai") == "mujhe kal Rahul se milna hai"
    assert strip_fillers("hmm, kal shaam") == "kal shaam"
    assert strip_fillers("अं कल मीटिंग") == "कल मीटिंग"

def test_strip_fillers_keeps_real_words():
    assert strip_fillers("umbrella hermit") == "umbrella hermit"

def test_language_auto_detect(mocker):
    mocker.patch.object(settings, "WHISPER_LANGUAGE", "auto")
    assert WhisperSTTService._language() is None
    mocker.patch.object(settings, "WHISPER_LANGUAGE", "hi")
    assert WhisperSTTService._language() == "hi"
