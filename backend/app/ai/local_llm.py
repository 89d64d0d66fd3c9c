from __future__ import annotations

FALLBACK_SUGGESTIONS: tuple[str, ...] = (
    "Consider speaking with a mental health professional.",
    "Reach out to trusted friends or family members.",
    "Practice self-care activities that you enjoy.",
    "Consider journaling your thoughts and feelings.",
    "Remember that seeking help is a sign of strength.",
)


def generate_local_response(kind: str, prompt: str = "") -> str:
    """Return a deterministic response when no enhancer answered."""

    if kind == "advice":
        lines = [
            "Thank you for sharing.",
            "While AI advice isn't available right now, here are some general supportive suggestions:",
        ]
        lines.extend(f"- {item}" for item in FALLBACK_SUGGESTIONS)
        lines.append("For immediate support, use the emergency resources.")
        return "\n".join(lines)
    if kind == "reflection":
        return "Take a slow breath and notice one thing that went a little better than expected today."
    return "I'm here. Start with an exhale, then a single gentle step forward."
