from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "moodjournal_requests_total",
    "Total HTTP requests processed by MoodJournal",
    ("method", "path", "status"),
)

REQUEST_LATENCY = Histogram(
    "moodjournal_request_latency_seconds",
    "HTTP request latency in seconds",
    ("method", "path"),
)

REQUEST_ERRORS = Counter(
    "moodjournal_request_errors_total",
    "HTTP requests resulting in server errors",
    ("method", "path", "status"),
)

ENTRIES_SAVED = Counter(
    "moodjournal_entries_saved_total",
    "Journal entries persisted",
    ("kind",),
)

ENHANCER_FALLBACKS = Counter(
    "moodjournal_enhancer_fallbacks_total",
    "Enhancer calls that fell back to local heuristics",
    ("operation",),
)

DISTRESS_DETECTIONS = Counter(
    "moodjournal_distress_detections_total",
    "Texts that matched a crisis phrase",
    ("origin",),
)

__all__ = [
    "DISTRESS_DETECTIONS",
    "ENHANCER_FALLBACKS",
    "ENTRIES_SAVED",
    "REQUEST_COUNT",
    "REQUEST_ERRORS",
    "REQUEST_LATENCY",
]
