from __future__ import annotations

from datetime import datetime, timedelta

import numpy as np
import pandas as pd

from ..auth.users import list_users
from .models import PeerRecommendation, TrendingMetrics, TrendingResource
from .store import activities_frame, get_resource

INTERACTION_TYPES = ["view", "download", "like"]

# Trending score: views*1 + downloads*3 + likes*2 + unique_users*1.5
TRENDING_WEIGHTS = {"view": 1.0, "download": 3.0, "like": 2.0}
UNIQUE_USER_WEIGHT = 1.5


def _recent_interactions(since: datetime, users: list[str] | None = None) -> pd.DataFrame:
    df = activities_frame()
    if df.empty:
        return df
    mask = (
        (df["timestamp"] >= since)
        & df["type"].isin(INTERACTION_TYPES)
        & df["resource_id"].notna()
    )
    if users is not None:
        mask = mask & df["user"].isin(users)
    return df.loc[mask]


def trending_resources(
    semester: int | None = None,
    department: str | None = None,
    limit: int = 8,
    timeframe_days: int = 7,
    min_score: float = 2.0,
    now: datetime | None = None,
) -> list[TrendingResource]:
    """Resources with the most weighted interaction in the recent window."""
    cutoff = (now or datetime.now()) - timedelta(days=timeframe_days)
    recent = _recent_interactions(cutoff)
    if recent.empty:
        return []

    recent = recent.assign(
        is_view=np.where(recent["type"] == "view", 1, 0),
        is_download=np.where(recent["type"] == "download", 1, 0),
        is_like=np.where(recent["type"] == "like", 1, 0),
    )
    grouped = recent.groupby("resource_id").agg(
        views=("is_view", "sum"),
        downloads=("is_download", "sum"),
        likes=("is_like", "sum"),
        unique_users=("user", "nunique"),
        last_activity=("timestamp", "max"),
    )
    grouped["trending_score"] = (
        grouped["views"] * TRENDING_WEIGHTS["view"]
        + grouped["downloads"] * TRENDING_WEIGHTS["download"]
        + grouped["likes"] * TRENDING_WEIGHTS["like"]
        + grouped["unique_users"] * UNIQUE_USER_WEIGHT
    )
    grouped = grouped[grouped["trending_score"] >= min_score]
    # Over-fetch since the semester/department filter runs afterwards
    grouped = grouped.sort_values("trending_score", ascending=False, kind="mergesort").head(limit * 2)

    results: list[TrendingResource] = []
    for resource_id, row in grouped.iterrows():
        resource = get_resource(str(resource_id))
        if resource is None:
            continue
        if semester is not None and resource.semester != semester:
            continue
        if department and resource.department != department:
            continue
        results.append(TrendingResource(
            resource=resource,
            trending=TrendingMetrics(
                score=float(row["trending_score"]),
                views=int(row["views"]),
                downloads=int(row["downloads"]),
                likes=int(row["likes"]),
                unique_users=int(row["unique_users"]),
                last_activity=row["last_activity"].to_pydatetime(),
            ),
        ))
    return results[:limit]


def peer_based_resources(
    semester: int,
    department: str,
    exclude_user: str | None = None,
    limit: int = 5,
    max_similar_users: int = 20,
    window_days: int = 30,
    min_interactions: int = 2,
    now: datetime | None = None,
) -> list[PeerRecommendation]:
    """Resources popular among other users in the same semester and department."""
    similar_users = [
        u["username"]
        for u in list_users()
        if u.get("semester") == semester
        and u.get("department") == department
        and u["username"] != exclude_user
    ][:max_similar_users]
    if not similar_users:
        return []

    cutoff = (now or datetime.now()) - timedelta(days=window_days)
    recent = _recent_interactions(cutoff, users=similar_users)
    if recent.empty:
        return []

    grouped = recent.groupby("resource_id").agg(
        count=("id", "size"),
        peer_count=("user", "nunique"),
        last_activity=("timestamp", "max"),
    )
    grouped = grouped[grouped["count"] >= min_interactions]
    grouped = grouped.sort_values("count", ascending=False, kind="mergesort").head(10)

    recs: list[PeerRecommendation] = []
    for resource_id, row in grouped.iterrows():
        resource = get_resource(str(resource_id))
        if resource is None:
            continue
        peer_count = int(row["peer_count"])
        recs.append(PeerRecommendation(
            resource_id=resource.id,
            title=resource.title,
            description=resource.description,
            type=resource.type,
            subject=resource.subject,
            resource=resource,
            peer_count=peer_count,
            total_interactions=int(row["count"]),
            similarity=min(peer_count / 10, 1.0),
            last_activity=row["last_activity"].to_pydatetime(),
            tags=[resource.subject, resource.type.value, f"semester-{resource.semester}"],
        ))

    recs.sort(key=lambda r: r.peer_count * r.similarity, reverse=True)
    return recs[:limit]
