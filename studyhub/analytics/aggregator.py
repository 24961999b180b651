from __future__ import annotations

from collections import Counter
from typing import Any

from ..recommendations.models import FeedbackKind
from .feedback import get_all_feedback

_POSITIVE = {FeedbackKind.like, FeedbackKind.helpful}


def summarize_feedback(feedback: list[dict[str, Any]]) -> dict[str, Any]:
    by_kind = Counter(f["feedback"].value for f in feedback)
    positive = sum(1 for f in feedback if f["feedback"] in _POSITIVE)
    return {
        "total": len(feedback),
        "positive": positive,
        "negative": len(feedback) - positive,
        "by_kind": {k.value: by_kind.get(k.value, 0) for k in FeedbackKind},
        "satisfaction_rate": round(positive / len(feedback) * 100, 1) if feedback else 0.0,
    }


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    requests = [e for e in events if e["type"] == "recommendations"]
    total = len(requests)

    # Average response time
    times = [r["response_time_ms"] for r in requests if "response_time_ms" in r]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Top semester/department cohorts
    cohort_counter: Counter[str] = Counter()
    for r in requests:
        cohort_counter[f"{r.get('department', 'unknown')} / semester {r.get('semester', '?')}"] += 1
    top_cohorts = [{"name": n, "count": c} for n, c in cohort_counter.most_common(10)]

    # Kinds actually served
    kind_counter: Counter[str] = Counter()
    for r in requests:
        kind_counter.update(r.get("kinds", {}) or {})

    # Collector health
    failure_counter: Counter[str] = Counter()
    for r in requests:
        for name in r.get("failed_collectors", []) or []:
            failure_counter[name] += 1

    time_of_day = Counter(r.get("time_of_day", "unknown") for r in requests)

    cache_hits = sum(1 for r in requests if r.get("cache_hit"))
    cache_misses = total - cache_hits

    return {
        "total_requests": total,
        "avg_response_time_ms": avg_time,
        "top_cohorts": top_cohorts,
        "kind_distribution": dict(kind_counter),
        "time_of_day_usage": dict(time_of_day),
        "collector_failures": dict(failure_counter),
        "cache_stats": {
            "hits": cache_hits,
            "misses": cache_misses,
            "hit_rate": round(cache_hits / total * 100, 1) if total else 0.0,
        },
        "feedback_summary": summarize_feedback(get_all_feedback()),
    }
