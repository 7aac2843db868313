from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "mindmate_requests_total",
    "Total HTTP requests processed by MindMate",
    ("method", "path", "status"),
)

REQUEST_LATENCY = Histogram(
    "mindmate_request_latency_seconds",
    "HTTP request latency in seconds",
    ("method", "path"),
)

REQUEST_ERRORS = Counter(
    "mindmate_request_errors_total",
    "HTTP requests resulting in server errors",
    ("method", "path", "status"),
)

USER_API_COUNTER = Counter(
    "mindmate_user_api_hits_total",
    "Authenticated API hits per endpoint",
    ("endpoint",),
)

MOOD_CLASSIFICATIONS = Counter(
    "mindmate_mood_classifications_total",
    "Messages classified by the mood engine",
    ("method", "mood"),
)

MOOD_UPDATES = Counter(
    "mindmate_mood_updates_total",
    "Classified messages by whether they changed the current mood",
    ("result",),
)

DAILY_RESETS = Counter(
    "mindmate_daily_resets_total",
    "Daily reset checks by outcome",
    ("result",),
)

__all__ = [
    "DAILY_RESETS",
    "MOOD_CLASSIFICATIONS",
    "MOOD_UPDATES",
    "REQUEST_COUNT",
    "REQUEST_ERRORS",
    "REQUEST_LATENCY",
    "USER_API_COUNTER",
]
