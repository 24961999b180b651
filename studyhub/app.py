from __future__ import annotations

import logging
import os
from datetime import datetime, timedelta

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from starlette.middleware.sessions import SessionMiddleware

from .analytics.aggregator import compute_analytics, summarize_feedback
from .analytics.feedback import get_all_feedback, get_feedback, record_feedback
from .analytics.store import get_events
from .auth.dependencies import require_admin, require_faculty, require_user
from .auth.users import authenticate
from .recommendations.cache import get_cache_stats
from .recommendations.config import DEFAULT_RECOMMENDATION_CONFIG
from .recommendations.context import build_context
from .recommendations.models import (
    FeedbackRequest,
    FeedbackResponse,
    LoginRequest,
    RecommendationKind,
    RecommendationResponse,
)
from .recommendations.pipeline import get_personalized_recommendations
from .resources.models import (
    ActivityCreateRequest,
    Resource,
    ResourceCreateRequest,
    StatsActionRequest,
)
from .resources.store import get_activities, get_resource, record_activity
from .resources.tracking import compute_resource_stats, create_resource, record_action, record_view
from .resources.trending import peer_based_resources, trending_resources

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)

RECENT_ACTIVITY_WINDOW = timedelta(days=7)
RECENT_ACTIVITY_LIMIT = 20

app = FastAPI(title="StudyHub Academic Resources API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "studyhub-secret-change-in-production"),
)


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    logger.info("User %s logged in as %s", user["username"], user["role"])
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return user


# ── Recommendation endpoints ─────────────────────────────────────────────


@app.get("/recommendations", response_model=RecommendationResponse)
async def recommendations(
    kind: RecommendationKind | None = None,
    limit: int = Query(default=DEFAULT_RECOMMENDATION_CONFIG.limit, ge=1, le=20),
    current_course: str | None = None,
    user: dict = Depends(require_user),
) -> RecommendationResponse:
    cutoff = datetime.now() - RECENT_ACTIVITY_WINDOW
    recent = [
        a for a in get_activities(user=user["username"], limit=RECENT_ACTIVITY_LIMIT)
        if a.timestamp >= cutoff
    ]
    context = build_context(
        user.get("semester"),
        user.get("department"),
        recent,
        current_course=current_course,
        username=user["username"],
    )

    items = await get_personalized_recommendations(context, limit=limit, kind=kind)
    return RecommendationResponse(recommendations=items, context=context)


@app.post("/recommendations/feedback", response_model=FeedbackResponse)
def recommendation_feedback(
    body: FeedbackRequest,
    user: dict = Depends(require_user),
) -> FeedbackResponse:
    entry = record_feedback(user["username"], body.recommendation_id, body.feedback)
    return FeedbackResponse(
        status="recorded",
        recommendation_id=entry["recommendation_id"],
        feedback=entry["feedback"],
    )


@app.get("/recommendations/feedback/{recommendation_id}")
def recommendation_feedback_lookup(
    recommendation_id: str,
    user: dict = Depends(require_user),
) -> dict:
    feedback = get_feedback(user["username"], recommendation_id)
    if feedback is None:
        raise HTTPException(status_code=404, detail="No feedback recorded")
    return {"recommendation_id": recommendation_id, "feedback": feedback}


@app.get("/recommendations/peer-based")
def peer_based(
    semester: int = Query(..., ge=1),
    department: str = Query(..., min_length=1),
    user: dict = Depends(require_user),
) -> dict:
    config = DEFAULT_RECOMMENDATION_CONFIG
    recs = peer_based_resources(
        semester,
        department,
        exclude_user=user["username"],
        limit=config.peer_limit,
        max_similar_users=config.peer_max_similar_users,
        window_days=config.peer_window_days,
        min_interactions=config.peer_min_interactions,
    )
    return {"recommendations": recs, "timestamp": datetime.now()}


# ── Resource endpoints ───────────────────────────────────────────────────


@app.get("/resources/trending")
def resources_trending(
    semester: int | None = Query(default=None, ge=1),
    department: str | None = None,
    limit: int = Query(default=8, ge=1, le=50),
    timeframe: int = Query(default=7, ge=1, le=365),
    user: dict = Depends(require_user),
) -> dict:
    items = trending_resources(
        semester=semester,
        department=department,
        limit=limit,
        timeframe_days=timeframe,
        min_score=DEFAULT_RECOMMENDATION_CONFIG.trending_min_score,
    )
    return {
        "resources": items,
        "trending": True,
        "timeframe": f"{timeframe} days",
        "timestamp": datetime.now(),
    }


@app.get("/resources/stats")
def resources_stats(user: dict = Depends(require_user)) -> dict:
    return compute_resource_stats()


@app.post("/resources/stats")
def resources_stats_update(
    body: StatsActionRequest,
    user: dict = Depends(require_user),
) -> dict:
    try:
        stats = record_action(body.resource_id, body.action, user["username"])
    except LookupError:
        raise HTTPException(status_code=404, detail="Resource not found")
    return {"success": True, "stats": stats}


@app.post("/resources", response_model=Resource, status_code=201)
def resources_create(
    body: ResourceCreateRequest,
    user: dict = Depends(require_faculty),
) -> Resource:
    return create_resource(body, user["username"])


@app.get("/resources/{resource_id}", response_model=Resource)
def resources_get(resource_id: str, user: dict = Depends(require_user)) -> Resource:
    resource = get_resource(resource_id)
    if resource is None:
        raise HTTPException(status_code=404, detail="Resource not found")
    return resource


@app.post("/resources/{resource_id}/view")
def resources_view(resource_id: str, user: dict = Depends(require_user)) -> dict:
    try:
        resource = record_view(resource_id, user["username"])
    except LookupError:
        raise HTTPException(status_code=404, detail="Resource not found")
    return {
        "success": True,
        "views": resource.stats.views,
        "resource_title": resource.title,
        "resource_id": resource.id,
    }


# ── User activity endpoints ──────────────────────────────────────────────


@app.get("/user/activity")
def user_activity(
    limit: int = Query(default=10, ge=1, le=100),
    user: dict = Depends(require_user),
) -> dict:
    return {"activities": get_activities(user=user["username"], limit=limit)}


@app.post("/user/activity", status_code=201)
def user_activity_create(
    body: ActivityCreateRequest,
    user: dict = Depends(require_user),
) -> dict:
    if body.resource_id and get_resource(body.resource_id) is None:
        raise HTTPException(status_code=404, detail="Resource not found")
    activity = record_activity(user["username"], body.type, body.resource_id, body.message)
    return {"success": True, "activity": activity}


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/analytics")
def analytics(user: dict = Depends(require_admin)) -> dict:
    return compute_analytics(get_events())


@app.get("/feedback/stats")
def feedback_stats(user: dict = Depends(require_admin)) -> dict:
    return summarize_feedback(get_all_feedback())


@app.get("/cache/stats")
def cache_stats(user: dict = Depends(require_admin)) -> dict:
    return get_cache_stats()
