import logging

import httpx

from ayu.config import settings
from ayu.utils.errors import ChatUnavailable

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = (
    "You are a helpful assistant and an expert on Ayurveda. Provide answers to user questions, "
    "always staying within the context of Ayurvedic principles and knowledge. "
    "Use clear, simple language to explain concepts."
)

GENERATION_CONFIG = {"temperature": 0.9, "topK": 1, "topP": 1}


def build_payload(message: str, history: list[dict] | None = None) -> dict:
    contents = [
        {"role": turn["role"], "parts": [{"text": turn["text"]}]}
        for turn in (history or [])
    ]
    contents.append({"role": "user", "parts": [{"text": message}]})
    return {
        "systemInstruction": {"parts": [{"text": SYSTEM_INSTRUCTION}]},
        "contents": contents,
        "generationConfig": GENERATION_CONFIG,
    }


def extract_reply(payload: dict) -> str | None:
    candidates = payload.get("candidates") or []
    if not candidates:
        return None
    parts = (candidates[0].get("content") or {}).get("parts") or []
    text = "".join(part.get("text", "") for part in parts).strip()
    return text or None


async def generate_reply(message: str, history: list[dict] | None = None) -> str:
    if not settings.GEMINI_API_KEY:
        logger.error("GEMINI_API_KEY is not configured; chat is unavailable")
        raise ChatUnavailable()

    url = settings.GEMINI_API_URL.format(model=settings.GEMINI_MODEL)
    headers = {"x-goog-api-key": settings.GEMINI_API_KEY, "Content-Type": "application/json"}
    try:
        async with httpx.AsyncClient(timeout=settings.GEMINI_TIMEOUT_SECONDS) as client:
            response = await client.post(url, headers=headers, json=build_payload(message, history))
            response.raise_for_status()
            payload = response.json()
    except httpx.HTTPError as exc:
        logger.warning("Gemini request failed: %s", exc)
        raise ChatUnavailable() from exc

    reply = extract_reply(payload)
    if reply is None:
        logger.warning("Gemini returned no usable candidate")
        raise ChatUnavailable()
    return reply
