"""Crisis phrase detection for journal text and advice questions.

This is a keyword heuristic: it matches lowercase substrings from a fixed list
and will miss distress expressed in other words. Integrators must not treat a
``False`` result as a safety assessment; it only gates showing emergency
resources.
"""

from __future__ import annotations

EXTREME_DISTRESS_PHRASES: tuple[str, ...] = (
    "suicide",
    "kill myself",
    "end my life",
    "want to die",
    "don't want to live",
    "harm myself",
    "self harm",
    "cutting",
    "overdose",
    "no way out",
    "hopeless",
    "desperate",
    "cannot go on",
    "nothing matters",
    "give up",
)

CRISIS_RESOURCES: tuple[str, ...] = (
    "If you are in immediate danger, call your local emergency number (911 in the US, 112 in the EU).",
    "US: call or text 988 to reach the Suicide & Crisis Lifeline.",
    "UK and Ireland: call Samaritans on 116 123.",
    "Elsewhere: find a local helpline at https://findahelpline.com.",
)


def detect_extreme_distress(text: str | None) -> bool:
    """Return True when ``text`` contains any crisis phrase."""

    return matched_phrase(text) is not None


def matched_phrase(text: str | None) -> str | None:
    if not text:
        return None
    lowered = text.lower()
    return next((phrase for phrase in EXTREME_DISTRESS_PHRASES if phrase in lowered), None)


__all__ = [
    "CRISIS_RESOURCES",
    "EXTREME_DISTRESS_PHRASES",
    "detect_extreme_distress",
    "matched_phrase",
]
