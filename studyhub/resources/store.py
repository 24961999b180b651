from __future__ import annotations

import uuid
from datetime import datetime
from pathlib import Path

import pandas as pd

from .models import Activity, ActivityType, Resource, ResourceType

_DATA_DIR = Path(__file__).resolve().parent.parent / "data"
_RESOURCES_CSV = _DATA_DIR / "resources.csv"

_ACTIVITY_COLUMNS = ["id", "user", "type", "resource_id", "timestamp"]

_resources: dict[str, Resource] | None = None
_activities: list[Activity] = []


def _load() -> dict[str, Resource]:
    df = pd.read_csv(_RESOURCES_CSV, dtype=str).fillna("")

    resources: dict[str, Resource] = {}
    for _, row in df.iterrows():
        resources[row["id"]] = Resource(
            id=row["id"],
            title=row["title"],
            description=row["description"],
            type=ResourceType(row["type"] or "document"),
            subject=row["subject"],
            semester=int(row["semester"] or 1),
            department=row["department"],
            tags=[t.strip() for t in row["tags"].split(";") if t.strip()],
            url=row["url"] or None,
            uploaded_by=row["uploaded_by"] or None,
        )
    return resources


def get_resources() -> dict[str, Resource]:
    """Return the in-memory resource catalogue, loading the seed CSV on first call."""
    global _resources
    if _resources is None:
        _resources = _load()
    return _resources


def get_resource(resource_id: str) -> Resource | None:
    return get_resources().get(resource_id)


def add_resource(resource: Resource) -> Resource:
    get_resources()[resource.id] = resource
    return resource


def new_id() -> str:
    return uuid.uuid4().hex[:12]


def record_activity(
    user: str,
    activity_type: ActivityType,
    resource_id: str | None = None,
    message: str = "",
    timestamp: datetime | None = None,
) -> Activity:
    activity = Activity(
        id=new_id(),
        user=user,
        type=activity_type,
        resource_id=resource_id,
        message=message,
        timestamp=timestamp or datetime.now(),
    )
    _activities.append(activity)
    return activity


def get_activities(user: str | None = None, limit: int | None = None) -> list[Activity]:
    """Return activities newest first, optionally for a single user."""
    items = [a for a in _activities if user is None or a.user == user]
    items.sort(key=lambda a: a.timestamp, reverse=True)
    return items[:limit] if limit is not None else items


def activities_frame() -> pd.DataFrame:
    """Return the activity log as a DataFrame for aggregation."""
    if not _activities:
        return pd.DataFrame(columns=_ACTIVITY_COLUMNS)
    return pd.DataFrame(
        [
            {
                "id": a.id,
                "user": a.user,
                "type": a.type.value,
                "resource_id": a.resource_id,
                "timestamp": a.timestamp,
            }
            for a in _activities
        ],
        columns=_ACTIVITY_COLUMNS,
    )


def clear_store() -> None:
    """Drop all activity and reload the seed catalogue on next access."""
    global _resources
    _resources = None
    _activities.clear()
