from __future__ import annotations

from pydantic import Field

from .entries import CamelModel


class AdviceRequest(CamelModel):
    question: str = Field(..., min_length=1, max_length=2000)


class AdviceResponse(CamelModel):
    text: str | None = None
    source: str
    crisis: bool = False
    resources: list[str] = Field(default_factory=list)


class ReflectionResponse(CamelModel):
    entry_id: int
    summary: str | None = None
    suggestions: str
    stress_level: int | None = None
    source: str
