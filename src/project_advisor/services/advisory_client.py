"""
Advisory service client: the single integration point with the external text-generation endpoint.

Any failure (missing credential, transport error, timeout, non-success status, empty or
malformed completion) surfaces as AdvisoryUnavailable. Callers never distinguish between
them; they switch to their local fallback rules.
"""

import json
import logging
import math
import re
from typing import Any, Optional, Protocol

from openai import AsyncOpenAI, OpenAIError

from project_advisor.config import get_settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an experienced project manager assisting with risk analysis, scheduling "
    "and task planning. Be concise and concrete."
)


class AdvisoryUnavailable(Exception):
    """The advisory service could not produce a usable reply."""


class AdvisoryService(Protocol):
    async def generate(self, prompt: str) -> str:
        """Return completion text for ``prompt``; raise AdvisoryUnavailable on any failure."""
        ...


class OpenAIAdvisoryClient:
    """AdvisoryService backed by an OpenAI-compatible chat completions endpoint."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gpt-4",
        base_url: Optional[str] = None,
        max_tokens: int = 2000,
        temperature: float = 0.3,
        timeout: float = 30.0,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._client: Optional[AsyncOpenAI] = None
        if api_key:
            # Single attempt: a failed call goes straight to the caller's fallback.
            self._client = AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0)

    def build_messages(self, prompt: str) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]

    async def generate(self, prompt: str) -> str:
        if self._client is None:
            raise AdvisoryUnavailable("advisory service not configured")
        logger.info("advisory_client: Calling model=%s (prompt %d chars)", self.model, len(prompt))
        try:
            resp = await self._client.chat.completions.create(
                model=self.model,
                messages=self.build_messages(prompt),
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except OpenAIError as e:
            raise AdvisoryUnavailable(f"{type(e).__name__}: {e}") from e
        return extract_completion_text(resp)


def extract_completion_text(resp: Any) -> str:
    """First choice's message content; absent content reads as empty and is rejected."""
    try:
        choices = resp.choices or []
        text = (choices[0].message.content or "").strip() if choices else ""
    except (AttributeError, TypeError) as e:
        raise AdvisoryUnavailable("malformed completion body") from e
    if not text:
        raise AdvisoryUnavailable("empty completion")
    return text


def strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = re.sub(r"^```\w*\n?", "", text)
        text = re.sub(r"\n?```$", "", text)
    return text.strip()


def parse_json_reply(text: str) -> Any:
    """Parse a JSON reply, tolerating a markdown code block around it."""
    try:
        return json.loads(strip_code_fence(text))
    except (json.JSONDecodeError, TypeError) as e:
        raise AdvisoryUnavailable("unparseable structured reply") from e


def parse_confidence(value: Any, default: float) -> float:
    """Confidence from a structured reply, clamped to [0, 1]. NaN, inf and non-numbers are rejected."""
    if value is None:
        return default
    try:
        confidence = float(value)
    except (TypeError, ValueError) as e:
        raise AdvisoryUnavailable(f"bad confidence {value!r}") from e
    if not math.isfinite(confidence):
        raise AdvisoryUnavailable(f"non-finite confidence {value!r}")
    return min(max(confidence, 0.0), 1.0)


_advisory_client: Optional[OpenAIAdvisoryClient] = None


def get_advisory_client() -> Optional[OpenAIAdvisoryClient]:
    """Client singleton built from settings, or None when no credential is configured."""
    global _advisory_client
    if _advisory_client is not None:
        return _advisory_client
    settings = get_settings()
    if not settings.advisory_configured:
        logger.info("advisory_client: skipped, no ADVISORY_API_KEY or OPENAI_API_KEY set")
        return None
    _advisory_client = OpenAIAdvisoryClient(
        api_key=settings.advisory_api_key,
        model=settings.advisory_model,
        base_url=settings.advisory_base_url,
        max_tokens=settings.advisory_max_tokens,
        temperature=settings.advisory_temperature,
        timeout=settings.advisory_timeout_seconds,
    )
    return _advisory_client
