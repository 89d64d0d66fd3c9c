from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import Any, Literal, Protocol, runtime_checkable

from pydantic import BaseModel, Field, ValidationError

from ..core.config import Settings
from ..schemas.entries import Mood
from .openai_client import OpenAIClient

logger = logging.getLogger(__name__)

_JSON_OBJECT_RE = re.compile(r"\{.*\}", flags=re.DOTALL)
_NUMBER_RE = re.compile(r"\d+")


@runtime_checkable
class TextEnhancer(Protocol):
    """Optional text-generation collaborator; every call may return None."""

    async def analyze_sentiment(self, text: str) -> dict[str, Any] | None: ...

    async def get_advice(self, question: str, context: str = "") -> str | None: ...

    async def summarize_entry(self, text: str) -> str | None: ...

    async def suggest_improvements(self, text: str) -> str | None: ...

    async def enhance_stress_analysis(self, text: str) -> int | None: ...


class SentimentPayload(BaseModel):
    sentiment: Literal["positive", "negative", "neutral"] = "neutral"
    score: int = Field(default=0, ge=-100, le=100)
    stress_level: int = Field(default=0, ge=0, le=100, alias="stressLevel")
    mood: Mood


def extract_json_object(reply: str) -> dict[str, Any] | None:
    match = _JSON_OBJECT_RE.search(reply)
    if not match:
        return None
    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    return payload if isinstance(payload, dict) else None


def _sentiment_prompt(text: str) -> str:
    return (
        "Analyze this mental health journal entry and return ONLY a valid JSON object "
        "with these exact fields:\n"
        '{"sentiment": "positive" | "negative" | "neutral", '
        '"score": number between -100 and 100, '
        '"stressLevel": number between 0 and 100, '
        '"mood": "very-happy" | "happy" | "neutral" | "sad" | "very-sad"}\n\n'
        f'Text: "{text[:1000]}"'
    )


def _advice_prompt(question: str, context: str) -> str:
    prompt = (
        "You are a supportive mental health advisor. Provide empathetic, practical advice "
        "for this question or concern. Be encouraging and non-judgmental, suggest "
        "actionable steps when appropriate and stay under 300 words.\n\n"
        f'Question/Concern: "{question}"'
    )
    if context:
        prompt += f'\nContext: "{context}"'
    return prompt


class OpenAIEnhancer:
    """TextEnhancer backed by an OpenAI chat model."""

    def __init__(
        self,
        client: OpenAIClient,
        *,
        model: str,
        max_tokens: int = 400,
        timeout: float = 10.0,
    ) -> None:
        self._client = client
        self._model = model
        self._max_tokens = max_tokens
        self._timeout = timeout

    async def _complete(self, prompt: str, operation: str) -> str | None:
        try:
            reply = await asyncio.wait_for(
                self._client.complete(
                    model=self._model,
                    prompt=prompt,
                    max_tokens=self._max_tokens,
                ),
                timeout=self._timeout,
            )
        except Exception as exc:
            logger.warning(
                "enhancer %s failed: %s",
                operation,
                exc,
                extra={"kind": operation},
            )
            return None
        return reply or None

    async def analyze_sentiment(self, text: str) -> dict[str, Any] | None:
        reply = await self._complete(_sentiment_prompt(text), "analyze_sentiment")
        if reply is None:
            return None
        payload = extract_json_object(reply)
        if payload is None:
            logger.warning("enhancer sentiment reply is not JSON", extra={"kind": "analyze_sentiment"})
            return None
        try:
            parsed = SentimentPayload.model_validate(payload)
        except ValidationError as exc:
            logger.warning("enhancer sentiment reply rejected: %s", exc.error_count())
            return None
        return parsed.model_dump(mode="json", by_alias=True)

    async def get_advice(self, question: str, context: str = "") -> str | None:
        return await self._complete(_advice_prompt(question, context), "get_advice")

    async def summarize_entry(self, text: str) -> str | None:
        prompt = f'Summarize this journal entry in two gentle sentences. Text: "{text[:2000]}"'
        return await self._complete(prompt, "summarize_entry")

    async def suggest_improvements(self, text: str) -> str | None:
        prompt = (
            "As a supportive mental health assistant, suggest 2-3 brief, empathetic "
            "reflections for this journal entry. Keep it encouraging and under 100 words. "
            f'Text: "{text[:500]}"'
        )
        return await self._complete(prompt, "suggest_improvements")

    async def enhance_stress_analysis(self, text: str) -> int | None:
        prompt = (
            "Analyze the stress level in this text and return ONLY a number between 0 "
            f'and 100. Text: "{text[:500]}"'
        )
        reply = await self._complete(prompt, "enhance_stress_analysis")
        if reply is None:
            return None
        match = _NUMBER_RE.search(reply)
        if not match:
            return None
        return min(100, max(0, int(match.group(0))))


def build_enhancer(settings: Settings) -> OpenAIEnhancer | None:
    """Resolve the enhancer once at startup; None when AI is not configured."""

    if not settings.ai_available:
        logger.info("text enhancer disabled, using local heuristics only")
        return None
    client = OpenAIClient(settings.openai_api_key, timeout=settings.ai_timeout_seconds)
    return OpenAIEnhancer(
        client,
        model=settings.openai_model,
        max_tokens=settings.ai_max_tokens,
        timeout=settings.ai_timeout_seconds,
    )


__all__ = [
    "OpenAIEnhancer",
    "SentimentPayload",
    "TextEnhancer",
    "build_enhancer",
    "extract_json_object",
]
