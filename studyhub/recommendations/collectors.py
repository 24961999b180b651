from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from ..llm.groq_client import generate_text
from ..resources.models import PeerRecommendation, TrendingResource
from ..resources.trending import peer_based_resources, trending_resources
from ..search.serper_client import find_external_resource
from .config import DEFAULT_RECOMMENDATION_CONFIG, RecommendationConfig
from .models import RankingContext, Recommendation, RecommendationKind
from .suggestions import build_ai_prompt, parse_ai_recommendations

logger = logging.getLogger(__name__)

Collector = Callable[[RankingContext], Awaitable[list[Recommendation]]]


@dataclass(frozen=True)
class CollectorResult:
    name: str
    candidates: list[Recommendation] = field(default_factory=list)
    ok: bool = True


async def run_collector(
    name: str,
    collector: Collector,
    context: RankingContext,
    timeout: float = DEFAULT_RECOMMENDATION_CONFIG.collector_timeout,
) -> CollectorResult:
    """Run one collector, turning any failure or timeout into an empty result."""
    try:
        candidates = await asyncio.wait_for(collector(context), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("Collector %s timed out after %.1fs", name, timeout)
        return CollectorResult(name=name, ok=False)
    except Exception:
        logger.warning("Collector %s failed, continuing without it", name, exc_info=True)
        return CollectorResult(name=name, ok=False)
    return CollectorResult(name=name, candidates=list(candidates or []))


# ---------------------------------------------------------------------------
# Trending
# ---------------------------------------------------------------------------


def estimate_reading_time(title: str, description: str) -> str:
    length = len(description or "") + len(title or "")
    return f"{max(5, math.ceil(length / 200))} minutes"


def infer_difficulty(title: str) -> str:
    lower = (title or "").lower()
    if any(word in lower for word in ("intro", "basic", "beginner")):
        return "beginner"
    if any(word in lower for word in ("advanced", "expert", "complex")):
        return "advanced"
    return "intermediate"


def _trending_candidate(
    item: TrendingResource,
    context: RankingContext,
    config: RecommendationConfig,
) -> Recommendation:
    resource = item.resource
    return Recommendation(
        id=f"trending-{resource.id}",
        title=resource.title,
        description=resource.description or "Popular resource among your peers",
        kind=RecommendationKind.trending,
        confidence=config.trending_confidence,
        reasoning=(
            f"This resource is trending among {context.department} students "
            f"in semester {context.semester}"
        ),
        popularity=resource.stats.views,
        estimated_time=estimate_reading_time(resource.title, resource.description),
        difficulty=infer_difficulty(resource.title),
        tags=resource.tags or [resource.subject],
        url=resource.url,
        source_payload=resource,
    )


async def collect_trending(
    context: RankingContext,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> list[Recommendation]:
    items = await asyncio.to_thread(
        trending_resources,
        semester=context.semester,
        department=context.department,
        limit=config.trending_limit,
        timeframe_days=config.trending_timeframe_days,
        min_score=config.trending_min_score,
    )
    return [_trending_candidate(item, context, config) for item in items]


# ---------------------------------------------------------------------------
# AI suggestions
# ---------------------------------------------------------------------------


async def _enrich(suggestions: list[Recommendation]) -> list[Recommendation]:
    lookups = await asyncio.gather(
        *(find_external_resource(s.title) for s in suggestions),
        return_exceptions=True,
    )
    enriched: list[Recommendation] = []
    for suggestion, extra in zip(suggestions, lookups):
        if isinstance(extra, BaseException):
            logger.warning("Search enrichment failed for %r: %s", suggestion.title, extra)
            extra = {}
        enriched.append(suggestion.model_copy(update=extra) if extra else suggestion)
    return enriched


async def collect_ai_suggestions(
    context: RankingContext,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> list[Recommendation]:
    result = await generate_text(build_ai_prompt(context))
    if not result.success:
        logger.info("AI suggestions unavailable: %s", result.error)
        return []

    suggestions = parse_ai_recommendations(
        result.text,
        context,
        max_items=config.ai_max_suggestions,
        confidence=config.ai_confidence,
    )
    if not suggestions:
        logger.warning("AI response contained no parsable suggestions (%d chars)", len(result.text))
        return []
    return await _enrich(suggestions)


# ---------------------------------------------------------------------------
# Peer-based
# ---------------------------------------------------------------------------


def _peer_candidate(item: PeerRecommendation, config: RecommendationConfig) -> Recommendation:
    return Recommendation(
        id=f"peer-{item.resource_id}",
        title=item.title,
        description="Recommended by students with similar interests",
        kind=RecommendationKind.trending,
        confidence=item.similarity or config.peer_default_similarity,
        reasoning="Students with similar study patterns found this helpful",
        popularity=item.peer_count,
        tags=item.tags,
        url=item.resource.url,
        source_payload=item.resource,
    )


async def collect_peer_based(
    context: RankingContext,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> list[Recommendation]:
    items = await asyncio.to_thread(
        peer_based_resources,
        semester=context.semester,
        department=context.department,
        exclude_user=context.username,
        limit=config.peer_limit,
        max_similar_users=config.peer_max_similar_users,
        window_days=config.peer_window_days,
        min_interactions=config.peer_min_interactions,
    )
    return [_peer_candidate(item, config) for item in items]


# ---------------------------------------------------------------------------
# Study path
# ---------------------------------------------------------------------------


def study_path_suggestions(
    context: RankingContext,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> list[Recommendation]:
    """Rule-based next steps; depends only on the context."""
    items: list[dict] = []

    if context.recent_activity_count < config.study_path_activity_threshold:
        items.append({
            "title": "Getting Started with Your Course Materials",
            "description": "Begin with fundamental concepts in your current semester",
            "confidence": 0.9,
            "reasoning": "Building strong foundations is crucial for academic success",
            "estimated_time": "30-45 minutes",
            "difficulty": "beginner",
            "tags": ["foundation", context.department.lower()],
        })

    items.append({
        "title": "Practice Problems and Exercises",
        "description": "Reinforce your learning with hands-on practice",
        "confidence": 0.8,
        "reasoning": "Active practice helps consolidate theoretical knowledge",
        "estimated_time": "45-60 minutes",
        "difficulty": "intermediate",
        "tags": ["practice", "exercises"],
    })

    return [
        Recommendation(
            id=f"study-path-{i}",
            kind=RecommendationKind.study_path,
            popularity=0,
            ai_generated=True,
            **item,
        )
        for i, item in enumerate(items)
    ]


async def collect_study_path(
    context: RankingContext,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> list[Recommendation]:
    return study_path_suggestions(context, config)
