from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timedelta
from typing import Any

from .models import (
    ActivityType,
    DailyViews,
    Resource,
    ResourceCreateRequest,
    ResourceStats,
    ResourceType,
    StatsAction,
)
from .store import add_resource, get_activities, get_resource, get_resources, new_id, record_activity

logger = logging.getLogger(__name__)

_DAILY_ACTIVITY_TYPES = {ActivityType.view, ActivityType.download, ActivityType.upload}


def _require(resource_id: str) -> Resource:
    resource = get_resource(resource_id)
    if resource is None:
        raise LookupError(f"Resource not found: {resource_id}")
    return resource


def record_view(resource_id: str, user: str | None = None, now: datetime | None = None) -> Resource:
    """Count a view and bump today's bucket. Anonymous views are counted but not logged."""
    resource = _require(resource_id)
    moment = now or datetime.now()
    today = moment.date()

    stats = resource.stats
    stats.views += 1
    stats.last_viewed = moment

    bucket = next((d for d in stats.daily_views if d.day == today), None)
    if bucket is None:
        stats.daily_views.append(DailyViews(day=today, count=1))
    else:
        bucket.count += 1

    if user:
        record_activity(
            user, ActivityType.view, resource.id,
            message=f"Viewed resource: {resource.title}", timestamp=moment,
        )
    logger.debug("View recorded for %s (total=%d)", resource.id, stats.views)
    return resource


def record_action(
    resource_id: str,
    action: StatsAction,
    user: str | None = None,
    now: datetime | None = None,
) -> ResourceStats:
    """Apply a view/download/like/comment to a resource's counters."""
    if action == StatsAction.view:
        return record_view(resource_id, user, now).stats

    resource = _require(resource_id)
    stats = resource.stats

    if action == StatsAction.download:
        stats.downloads += 1
    elif action == StatsAction.comment:
        stats.comments += 1
    elif action == StatsAction.like:
        stats.likes += 1
        # Only the first like by a user is logged
        if not user or user in resource.liked_by:
            return stats
        resource.liked_by.append(user)

    if user:
        record_activity(user, ActivityType(action.value), resource.id, timestamp=now)
    return stats


def create_resource(body: ResourceCreateRequest, uploader: str) -> Resource:
    resource = Resource(id=new_id(), uploaded_by=uploader, **body.model_dump())
    add_resource(resource)
    record_activity(
        uploader, ActivityType.upload, resource.id,
        message=f"Uploaded resource: {resource.title}",
    )
    logger.info("Resource %s uploaded by %s", resource.id, uploader)
    return resource


def compute_resource_stats(now: datetime | None = None) -> dict[str, Any]:
    resources = get_resources()
    moment = now or datetime.now()

    type_counter: Counter[str] = Counter(r.type.value for r in resources.values())
    type_distribution = [
        {"name": t.value.capitalize(), "value": type_counter.get(t.value, 0)}
        for t in ResourceType
    ]

    # Last seven days, oldest first
    days = [(moment - timedelta(days=i)).date() for i in range(6, -1, -1)]
    daily = {
        d: {"name": d.strftime("%a"), "date": d.isoformat(), "uploads": 0, "downloads": 0, "views": 0}
        for d in days
    }
    for activity in get_activities():
        if activity.type not in _DAILY_ACTIVITY_TYPES:
            continue
        entry = daily.get(activity.timestamp.date())
        if entry is not None:
            entry[f"{activity.type.value}s"] += 1

    daily_activity = list(daily.values())
    today = daily[moment.date()]

    return {
        "total_resources": len(resources),
        "type_distribution": type_distribution,
        "daily_activity": daily_activity,
        "today_stats": {
            "uploads": today["uploads"],
            "downloads": today["downloads"],
            "views": today["views"],
        },
    }
