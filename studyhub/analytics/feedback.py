from __future__ import annotations

import time
from typing import Any

from ..recommendations.models import FeedbackKind

# Keyed by (username, recommendation_id); a new value replaces the old one
_feedback: dict[tuple[str, str], dict[str, Any]] = {}


def record_feedback(
    username: str,
    recommendation_id: str,
    feedback: FeedbackKind | str,
) -> dict[str, Any]:
    entry = {
        "username": username,
        "recommendation_id": recommendation_id,
        "feedback": FeedbackKind(feedback),
        "timestamp": time.time(),
    }
    _feedback[(username, recommendation_id)] = entry
    return entry


def get_feedback(username: str, recommendation_id: str) -> FeedbackKind | None:
    entry = _feedback.get((username, recommendation_id))
    return entry["feedback"] if entry else None


def get_all_feedback() -> list[dict[str, Any]]:
    return list(_feedback.values())


def clear_feedback() -> None:
    _feedback.clear()
