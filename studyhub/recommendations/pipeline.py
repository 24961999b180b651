from __future__ import annotations

import asyncio
import logging
import time
from collections import Counter
from functools import partial
from typing import Sequence

from ..analytics.store import record_event
from . import collectors
from .cache import cache_get, cache_set, make_key
from .config import DEFAULT_RECOMMENDATION_CONFIG, RecommendationConfig
from .models import RankingContext, Recommendation, RecommendationKind
from .scoring import rank_recommendations

logger = logging.getLogger(__name__)


async def collect_candidates(
    context: RankingContext,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
) -> tuple[list[Recommendation], list[str]]:
    """Run all collectors concurrently and merge their output.

    Returns the merged candidates (in collector order) and the names of the
    collectors that failed.
    """
    sources = [
        ("trending", collectors.collect_trending),
        ("ai_suggestions", collectors.collect_ai_suggestions),
        ("peer_based", collectors.collect_peer_based),
        ("study_path", collectors.collect_study_path),
    ]
    results = await asyncio.gather(*(
        collectors.run_collector(
            name, partial(fn, config=config), context, timeout=config.collector_timeout,
        )
        for name, fn in sources
    ))

    merged: list[Recommendation] = []
    for result in results:
        merged.extend(result.candidates)
    failed = [r.name for r in results if not r.ok]
    return merged, failed


async def get_personalized_recommendations(
    context: RankingContext,
    limit: int | None = None,
    config: RecommendationConfig = DEFAULT_RECOMMENDATION_CONFIG,
    use_cache: bool = True,
    kind: RecommendationKind | None = None,
) -> list[Recommendation]:
    """Ranked recommendations for ``context``; never raises.

    The full ranking is cached per semester and department, so requests
    with a different ``limit`` or ``kind`` share one entry. ``kind`` filters
    the full ranking before it is cut to ``limit``.
    """
    start_time = time.time()
    limit = config.limit if limit is None else max(limit, 0)
    key = make_key(context.semester, context.department)

    if use_cache:
        cached = cache_get(key, ttl=config.cache_ttl)
        if cached is not None:
            items = _select(cached, kind, limit)
            _record(context, items, len(cached), [], start_time, cache_hit=True)
            return items

    try:
        candidates, failed = await collect_candidates(context, config)
        ranked = rank_recommendations(candidates, context, limit=len(candidates), weights=config.weights)
    except Exception:
        logger.exception("Recommendation pipeline failed")
        return []

    if use_cache:
        cache_set(key, tuple(ranked))

    items = _select(ranked, kind, limit)
    _record(context, items, len(candidates), failed, start_time, cache_hit=False)
    return items


def _select(
    ranked: Sequence[Recommendation],
    kind: RecommendationKind | None,
    limit: int,
) -> list[Recommendation]:
    if kind is not None:
        ranked = [r for r in ranked if r.kind == kind]
    return list(ranked[:limit])


def _record(
    context: RankingContext,
    items: list[Recommendation],
    total_candidates: int,
    failed: list[str],
    start_time: float,
    cache_hit: bool,
) -> None:
    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    kinds = Counter(r.kind.value for r in items)
    record_event("recommendations", {
        "semester": context.semester,
        "department": context.department,
        "time_of_day": context.time_of_day.value,
        "total_candidates": total_candidates,
        "results_returned": len(items),
        "kinds": dict(kinds),
        "failed_collectors": failed,
        "response_time_ms": elapsed_ms,
        "cache_hit": cache_hit,
    })
    if failed:
        logger.info("Served %d recommendations without %s", len(items), ", ".join(failed))
