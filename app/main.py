"""
main.py

FastAPI entry point for the Meeting Request Parser.
Exposes the parse and speech-to-text endpoints and applies middleware.
"""

import logging
from typing import Optional

from fastapi import FastAPI, File, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.nlu.schemas import ParseRequest
from app.stt.whisper import STTError, WhisperSTTService
from app.utils.logger import setup_logging
from app.workflow import parse_meeting

# Logging
setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Meeting Request Parser")


# Startup: Preload Models
@app.on_event("startup")
async def startup_event():
    """Preload the Whisper model so the first dictation is not slow."""
    if not settings.STT_PRELOAD:
        logger.info("STT preload disabled")
        return

    logger.info("Preloading STT model (Whisper)...")
    try:
        WhisperSTTService._load_model()
    except Exception:
        # the model is loaded lazily on first use instead
        logger.exception("Whisper preload failed")
        return
    logger.info("Whisper model preloaded successfully")


# Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# Routes
@app.post("/api/parse-meeting")
async def parse_meeting_route(request: ParseRequest):
    """Parse one typed or transcribed utterance into a meeting record."""
    if not request.text or not request.text.strip():
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": "Input text missing"},
        )

    response = await parse_meeting(request.text)
    return response.to_wire()


@app.post("/api/speech-to-text")
async def speech_to_text_route(audio: Optional[UploadFile] = File(None)):
    if audio is None:
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": "Audio file missing"},
        )

    audio_bytes = await audio.read()
    if not audio_bytes:
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": "Audio file missing"},
        )

    try:
        text = await WhisperSTTService.transcribe(audio_bytes)
    except STTError as e:
        logger.warning("Speech-to-text failed for %s: %s", audio.filename, e)
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": str(e)},
        )

    return {"success": True, "text": text}
