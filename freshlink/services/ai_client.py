# File: freshlink/services/ai_client.py

"""
Thin wrapper around a hosted chat-completion model.

The default endpoint is Gemini's OpenAI-compatible API, reached through the
``openai`` SDK. Nothing here raises to callers: a missing key, a network
error or an empty reply all come back as ``None`` so the insight layer can
fall back to heuristics.
"""

import logging
from typing import Any, Optional, Protocol

from openai import OpenAI, OpenAIError

from freshlink.core.config import Settings

logger = logging.getLogger(__name__)


class CompletionClient(Protocol):
    def complete(self, prompt: str) -> Optional[str]: ...


def _get(obj: Any, key: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(key)
    return getattr(obj, key, None)


def _join_parts(parts: Any) -> str:
    if not isinstance(parts, (list, tuple)):
        return ""
    chunks = []
    for part in parts:
        if isinstance(part, str):
            chunks.append(part)
            continue
        text = _get(part, "text")
        if isinstance(text, str):
            chunks.append(text)
    return "".join(chunks).strip()


def extract_response_text(response: Any) -> Optional[str]:
    """
    Pull the model's text out of whatever the SDK handed back.

    Understands OpenAI chat completions (``choices[].message.content`` as a
    string or list of parts), Gemini ``candidates[].content.parts[].text``
    (optionally nested under ``response``), objects exposing ``text`` as an
    attribute or method, and bare strings.
    """
    if response is None:
        return None

    if isinstance(response, str):
        return response.strip() or None

    text = _get(response, "text")
    if callable(text):
        try:
            text = text()
        except Exception as e:  # SDK accessors raise on blocked/empty replies
            logger.debug("[ai] text() accessor failed: %s", e)
            text = None
    if isinstance(text, str) and text.strip():
        return text.strip()

    for choice in _get(response, "choices") or []:
        content = _get(_get(choice, "message"), "content")
        if isinstance(content, str) and content.strip():
            return content.strip()
        combined = _join_parts(content)
        if combined:
            return combined

    nested = _get(response, "response")
    for source in (_get(nested, "candidates") if nested is not None else None, _get(response, "candidates")):
        if not isinstance(source, (list, tuple)):
            continue
        for candidate in source:
            combined = _join_parts(_get(_get(candidate, "content"), "parts"))
            if combined:
                return combined

    return None


class AiClient:
    def __init__(self, settings: Settings, client: Optional[OpenAI] = None):
        self.model = settings.ai_model
        self.temperature = settings.ai_temperature
        self.top_p = settings.ai_top_p
        self.max_tokens = settings.ai_max_tokens
        self._client = client or OpenAI(
            api_key=settings.ai_api_key,
            base_url=settings.ai_base_url,
            timeout=settings.ai_timeout_seconds,
            max_retries=1,
        )

    def complete(self, prompt: str) -> Optional[str]:
        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
                top_p=self.top_p,
                max_tokens=self.max_tokens,
            )
        except OpenAIError as e:
            logger.warning("[ai] Model request failed, using heuristics instead: %s", e)
            return None

        output = extract_response_text(response)
        if not output:
            logger.warning("[ai] Model returned no text, using heuristics instead")
        return output


def build_ai_client(settings: Settings) -> Optional[AiClient]:
    if not settings.ai_enabled:
        logger.warning(
            "[ai] LLM client unavailable. Set GEMINI_API_KEY or AI_API_KEY to enable live insights."
        )
        return None
    return AiClient(settings)
