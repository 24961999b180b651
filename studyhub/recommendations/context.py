from __future__ import annotations

from datetime import datetime
from typing import Any

from .config import DEFAULT_RECOMMENDATION_CONFIG, RecommendationConfig
from .models import RankingContext, TimeOfDay


def time_of_day(hour: int) -> TimeOfDay:
    if hour < 12:
        return TimeOfDay.morning
    if hour < 17:
        return TimeOfDay.afternoon
    return TimeOfDay.evening


def _activity_type(activity: Any) -> str | None:
    if isinstance(activity, dict):
        value = activity.get("type")
    else:
        value = getattr(activity, "type", None)
    if value is None:
        return None
    return getattr(value, "value", str(value))


def build_context(
    semester: int | None,
    department: str | None,
    recent_activity: list[Any] | None = None,
    current_course: str | None = None,
    username: str | None = None,
    now: datetime | None = None,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> RankingContext:
    """Snapshot the user's state for one ranking request.

    Missing or non-positive semester and missing department fall back to the
    configured defaults; ``time_of_day`` comes from the local wall-clock hour.
    """
    activities = recent_activity or []
    moment = now or datetime.now()
    types = [t for t in (_activity_type(a) for a in activities) if t]

    return RankingContext(
        recent_activity_count=len(activities),
        recent_activity_types=types,
        time_of_day=time_of_day(moment.hour),
        semester=semester if semester and semester >= 1 else config.default_semester,
        department=department or config.default_department,
        current_course=current_course,
        username=username,
    )
