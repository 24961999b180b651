from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from studyhub.analytics.store import get_events
from studyhub.llm.groq_client import GenerationResult
from studyhub.recommendations.cache import get_cache_stats
from studyhub.recommendations.config import RecommendationConfig
from studyhub.recommendations.models import (
    RankingContext,
    Recommendation,
    RecommendationKind,
    TimeOfDay,
)
from studyhub.recommendations.pipeline import collect_candidates, get_personalized_recommendations
from studyhub.resources.models import ActivityType
from studyhub.resources.store import record_activity

AI_TEXT = (
    "Title: Dynamic Programming Patterns\nDescription: Memoization drills\n"
    "Difficulty: advanced\nEstimated Time: 30 minutes\n"
)


def _ctx(**overrides) -> RankingContext:
    fields = {
        "recent_activity_count": 0,
        "time_of_day": TimeOfDay.afternoon,
        "semester": 3,
        "department": "CSE",
        "username": "student",
    }
    fields.update(overrides)
    return RankingContext(**fields)


def _seed_activity() -> None:
    # r1 trends, r3 is popular with peers of the student
    for user in ("priya", "arjun"):
        record_activity(user, ActivityType.download, "r1")
        record_activity(user, ActivityType.view, "r3")


def _ai_online():
    return patch(
        "studyhub.recommendations.collectors.generate_text",
        new=AsyncMock(return_value=GenerationResult(success=True, text=AI_TEXT)),
    )


@pytest.mark.asyncio
async def test_all_collectors_contribute():
    _seed_activity()
    with _ai_online():
        candidates, failed = await collect_candidates(_ctx())

    ids = {c.id for c in candidates}
    assert failed == []
    assert "trending-r1" in ids
    assert "peer-r3" in ids
    assert "study-path-0" in ids
    assert any(i.startswith("ai-") for i in ids)


@pytest.mark.asyncio
async def test_pipeline_ranks_and_limits():
    _seed_activity()
    with _ai_online():
        recs = await get_personalized_recommendations(_ctx(), limit=3, use_cache=False)

    assert len(recs) == 3
    scores = [r.score for r in recs]
    assert scores == sorted(scores, reverse=True)


@pytest.mark.asyncio
async def test_pipeline_uses_configured_limit():
    config = RecommendationConfig(limit=2)
    recs = await get_personalized_recommendations(_ctx(), config=config, use_cache=False)
    assert len(recs) == 2


@pytest.mark.asyncio
async def test_pipeline_survives_a_failing_collector():
    _seed_activity()
    with _ai_online(), patch(
        "studyhub.recommendations.collectors.trending_resources",
        side_effect=RuntimeError("database unavailable"),
    ):
        candidates, failed = await collect_candidates(_ctx())
        recs = await get_personalized_recommendations(_ctx(), limit=20, use_cache=False)

    assert failed == ["trending"]
    ids = {c.id for c in candidates}
    assert not any(i.startswith("trending-") for i in ids)
    assert "peer-r3" in ids
    assert "study-path-0" in ids
    assert any(i.startswith("ai-") for i in ids)
    assert len(recs) == len(candidates)
    assert not any(r.kind == RecommendationKind.trending and r.id.startswith("trending-") for r in recs)


@pytest.mark.asyncio
async def test_pipeline_returns_empty_list_when_everything_fails():
    broken = AsyncMock(side_effect=RuntimeError("boom"))
    with patch("studyhub.recommendations.collectors.collect_trending", new=broken), \
            patch("studyhub.recommendations.collectors.collect_ai_suggestions", new=broken), \
            patch("studyhub.recommendations.collectors.collect_peer_based", new=broken), \
            patch("studyhub.recommendations.collectors.collect_study_path", new=broken):
        recs = await get_personalized_recommendations(_ctx(), use_cache=False)

    assert recs == []
    event = get_events("recommendations")[-1]
    assert sorted(event["failed_collectors"]) == [
        "ai_suggestions", "peer_based", "study_path", "trending",
    ]


@pytest.mark.asyncio
async def test_pipeline_caches_per_semester_and_department():
    first = await get_personalized_recommendations(_ctx())
    with patch("studyhub.recommendations.collectors.collect_study_path") as study_path:
        second = await get_personalized_recommendations(_ctx(), limit=1)
        study_path.assert_not_called()

    assert [r.id for r in second] == [r.id for r in first][:1]
    stats = get_cache_stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1

    await get_personalized_recommendations(_ctx(department="ECE"))
    assert get_cache_stats()["misses"] == 2


@pytest.mark.asyncio
async def test_pipeline_records_event():
    await get_personalized_recommendations(_ctx(), use_cache=False)
    event = get_events("recommendations")[-1]
    assert event["semester"] == 3
    assert event["department"] == "CSE"
    assert event["cache_hit"] is False
    assert event["kinds"] == {RecommendationKind.study_path.value: 2}


def _many_trending(n: int) -> list[Recommendation]:
    return [
        Recommendation(
            id=f"trending-x{i}", title=f"Resource {i}", description="",
            kind=RecommendationKind.trending, confidence=0.8, popularity=i,
        )
        for i in range(n)
    ]


@pytest.mark.asyncio
async def test_kind_filter_is_applied_before_limit():
    with patch(
        "studyhub.recommendations.collectors.collect_trending",
        new=AsyncMock(return_value=_many_trending(12)),
    ):
        unfiltered = await get_personalized_recommendations(_ctx(), limit=12)
        filtered = await get_personalized_recommendations(
            _ctx(), limit=12, kind=RecommendationKind.trending,
        )

    assert len(unfiltered) == 12
    assert len(filtered) == 12
    assert all(r.kind == RecommendationKind.trending for r in filtered)
    assert get_cache_stats()["hits"] == 1
