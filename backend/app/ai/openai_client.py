from __future__ import annotations

from openai import AsyncOpenAI

SYSTEM_PROMPT = "You are a supportive, non-judgmental mental health journaling assistant."


class OpenAIClient:
    """Thin wrapper above the OpenAI async SDK."""

    def __init__(self, api_key: str | None, *, timeout: float = 10.0) -> None:
        self._api_key = api_key
        self._client = AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0) if api_key else None

    @property
    def available(self) -> bool:
        return self._client is not None

    async def complete(
        self,
        *,
        model: str,
        prompt: str,
        max_tokens: int,
    ) -> str | None:
        """Return the completion text, or None when no client is configured."""

        if not self._client:
            return None

        completion = await self._client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            max_tokens=max_tokens,
        )
        message = completion.choices[0].message.content or ""
        return message.strip()
