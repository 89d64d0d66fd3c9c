"""Optional text-generation enhancer and local fallbacks."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

__all__ = [
    "OpenAIEnhancer",
    "TextEnhancer",
    "build_enhancer",
    "generate_local_response",
]


if TYPE_CHECKING:  # pragma: no cover - import-time helpers for type checkers only
    from .enhancer import OpenAIEnhancer, TextEnhancer, build_enhancer
    from .local_llm import generate_local_response


def __getattr__(name: str) -> Any:  # pragma: no cover - thin import shim
    if name in {"OpenAIEnhancer", "TextEnhancer", "build_enhancer"}:
        from . import enhancer

        return getattr(enhancer, name)
    if name == "generate_local_response":
        from .local_llm import generate_local_response as attr

        return attr
    raise AttributeError(name)


def __dir__() -> list[str]:  # pragma: no cover - module introspection helper
    return sorted(__all__)
