import re
import json
import asyncio
import logging
from typing import Dict, Any, Optional

from groq import Groq
from pydantic import ValidationError

from app.config import settings
from app.nlu.prompts import SYSTEM_PROMPT, USER_PROMPT
from app.nlu.schemas import ExtractionResult


# Logging ------------------------------------

logger = logging.getLogger(__name__)

# Groq Client ------------------------------------

MODEL_NAME = settings.GROQ_MODEL_NAME
REQUEST_TIMEOUT = settings.LLM_REQUEST_TIMEOUT
MAX_RETRIES = settings.LLM_MAX_RETRIES
GROQ_TEMPERATURE = settings.GROQ_TEMPERATURE
GROQ_MAX_TOKENS = settings.GROQ_MAX_TOKENS
GROQ_TOP_P = settings.GROQ_TOP_P

CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)

_client: Optional[Groq] = None


def _get_client() -> Optional[Groq]:
    """Lazily build the Groq client; None when no API key is configured."""
    global _client
    if _client is None and settings.GROQ_API_KEY:
        _client = Groq(api_key=settings.GROQ_API_KEY)
    return _client


# Helpers ---------------------------------------------


def _json_candidates(text: str):
    """The cleaned reply itself, then the outermost {...} block inside it."""
    yield text
    first, last = text.find("{"), text.rfind("}")
    if 0 <= first < last:
        yield text[first : last + 1]


def _safe_json_parse(text: Optional[str]) -> Dict[str, Any]:
    """
    Lenient JSON recovery for model replies (```json fences, chatter
    around the object). Returns {} when nothing parses to an object.
    """
    if not text:
        return {}

    cleaned = CODE_FENCE_RE.sub("", text.strip())
    for candidate in _json_candidates(cleaned):
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed

    logger.warning("Unparseable LLM reply: %s", text)
    return {}


def _call_groq(user_message: str) -> Dict[str, Any]:
    """
    Blocking Groq call. Must run in executor.
    """
    client = _get_client()
    if client is None:
        return {}

    completion = client.chat.completions.create(
        model=MODEL_NAME,
        messages=[
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": USER_PROMPT.format(user_message=user_message)},
        ],
        temperature=GROQ_TEMPERATURE,
        max_completion_tokens=GROQ_MAX_TOKENS,
        top_p=GROQ_TOP_P,
        response_format={"type": "json_object"},
    )

    content = completion.choices[0].message.content
    return _safe_json_parse(content)


async def _run_with_retries(user_message: str) -> Dict[str, Any]:
    """
    Async wrapper with retries and timeout protection.
    """
    loop = asyncio.get_running_loop()
    for attempt in range(1, MAX_RETRIES + 1):
        try:
            return await asyncio.wait_for(
                loop.run_in_executor(None, _call_groq, user_message),
                timeout=REQUEST_TIMEOUT,
            )
        except asyncio.TimeoutError:
            logger.warning("Groq timeout on attempt %s", attempt)
        except Exception as e:
            logger.exception("Groq call failed on attempt %s: %s", attempt, e)
    return {}


# Main Extraction ------------------------------------


async def extract_fields(user_message: str) -> ExtractionResult:
    """
    Extract the raw meeting fields from an utterance using the LLM.

    Values are returned as spoken ("kal", "5 pm"); normalization happens
    downstream. Any failure yields an empty result.
    """
    if not settings.GROQ_API_KEY:
        logger.info("[EXTRACT_FIELDS] GROQ_API_KEY not set, skipping LLM extraction")
        return ExtractionResult()

    logger.info("[EXTRACT_FIELDS] Called with user_message: %s", user_message)

    raw_output = await _run_with_retries(user_message)
    logger.info("[EXTRACT_FIELDS] LLM raw output: %s", raw_output)
    if not raw_output:
        return ExtractionResult()

    # ---------------- Pydantic schema enforcement ---------------- #
    try:
        return ExtractionResult.model_validate(raw_output)
    except ValidationError as e:
        logger.warning(
            "Schema validation failed. Raw output: %s | Error: %s",
            raw_output,
            e,
        )
        return ExtractionResult()
