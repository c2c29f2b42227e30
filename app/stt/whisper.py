"""
whisper.py

Speech-to-Text service for dictated meeting requests, using FasterWhisper.

- Any audio format (webm, mp3, wav, ogg, ...) is converted to mono WAV at
  STT_SAMPLE_RATE before transcription.
- Transcription runs in a small thread pool so the event loop stays free.
- Hesitation fillers ("um", "uh", "hmm", "अं") are removed from the text.

Usage:
    from app.stt.whisper import WhisperSTTService

    text = await WhisperSTTService.transcribe(audio_bytes)
"""

import asyncio
import io
import logging
import re
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import numpy as np
import soundfile as sf
from pydub import AudioSegment
from faster_whisper import WhisperModel

from app.config import settings

logger = logging.getLogger(__name__)

FILLER_WORDS = ("um", "umm", "uh", "uhh", "hmm", "er", "ah", "अं", "हम्म")
FILLER_RE = re.compile(
    r"(?<!\w)(?:" + "|".join(FILLER_WORDS) + r")(?!\w)[,.]?",
    re.IGNORECASE,
)


class STTError(Exception):
    """Raised when audio cannot be decoded or transcribed."""


def strip_fillers(text: str) -> str:
    """Drop hesitation words and collapse the leftover whitespace."""
    return re.sub(r"\s+", " ", FILLER_RE.sub(" ", text)).strip()


class WhisperSTTService:
    """
    Asynchronous STT service built on FasterWhisper.

    The model is loaded once, on first use or at startup when STT_PRELOAD is
    set, and shared across requests.
    """

    _model: Optional[WhisperModel] = None
    _executor = ThreadPoolExecutor(max_workers=2)

    # ---------------- Model Loading ----------------
    @classmethod
    def _load_model(cls) -> WhisperModel:
        if cls._model is None:
            logger.info("Loading Whisper model: %s", settings.WHISPER_MODEL)
            cls._model = WhisperModel(
                settings.WHISPER_MODEL,
                device="cpu",
                compute_type=settings.WHISPER_COMPUTE_TYPE,
            )
        return cls._model

    @staticmethod
    def _language() -> Optional[str]:
        # "auto" lets Whisper detect the language per clip
        language = (settings.WHISPER_LANGUAGE or "").strip().lower()
        return None if language in ("", "auto") else language

    # Public Async Method
    @classmethod
    async def transcribe(cls, audio_bytes: bytes) -> str:
        if not audio_bytes:
            raise STTError("Empty audio input")

        loop = asyncio.get_running_loop()

        try:
            return await loop.run_in_executor(
                cls._executor,
                cls._sync_transcribe,
                audio_bytes,
            )
        except STTError:
            raise
        except Exception as e:
            logger.warning("STT failed: %s", e)
            raise STTError(str(e)) from e

    # Blocking Transcription
    @classmethod
    def _sync_transcribe(cls, audio_bytes: bytes) -> str:
        model = cls._load_model()
        sample_rate = settings.STT_SAMPLE_RATE

        audio_wav = cls._convert_to_wav(audio_bytes, sample_rate)

        try:
            audio_np, sr = sf.read(io.BytesIO(audio_wav), dtype="float32")
        except Exception as e:
            raise STTError(f"Failed to read WAV: {e}") from e

        if sr != sample_rate:
            raise STTError(f"Expected {sample_rate}Hz audio, got {sr}")

        audio_np = np.asarray(audio_np, dtype=np.float32)

        try:
            segments, info = model.transcribe(
                audio_np,
                language=cls._language(),
                vad_filter=True,
            )
            text = " ".join(seg.text.strip() for seg in segments)
        except Exception as e:
            raise STTError(f"Whisper transcription failed: {e}") from e

        text = strip_fillers(text)
        if not text:
            raise STTError("Empty transcription result")

        logger.info("Transcribed %.1fs of audio (language=%s)", info.duration, info.language)
        return text

    # Audio Conversion
    @staticmethod
    def _convert_to_wav(audio_bytes: bytes, sample_rate: int) -> bytes:
        try:
            audio = AudioSegment.from_file(io.BytesIO(audio_bytes))
            audio = audio.set_channels(1).set_frame_rate(sample_rate)
            buf = io.BytesIO()
            audio.export(buf, format="wav")
            return buf.getvalue()
        except Exception as e:
            raise STTError(f"Audio conversion failed: {e}") from e
