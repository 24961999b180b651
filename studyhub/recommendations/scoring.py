from __future__ import annotations

import math

from .config import DEFAULT_RECOMMENDATION_CONFIG, ScoringWeights
from .models import RankingContext, Recommendation, RecommendationKind, TimeOfDay


def score_recommendation(
    rec: Recommendation,
    context: RankingContext,
    weights: ScoringWeights = DEFAULT_RECOMMENDATION_CONFIG.weights,
) -> float:
    """Compute the heuristic relevance score for a single candidate."""
    score = rec.confidence * weights.confidence_scale

    if rec.kind == RecommendationKind.trending:
        score += weights.trending_boost

    if rec.ai_generated:
        score += weights.ai_generated_boost

    # Logarithmic so one very popular item cannot drown out the rest
    score += math.log(rec.popularity + 1) * weights.popularity_log_scale

    if context.time_of_day == TimeOfDay.morning and rec.difficulty == "advanced":
        score += weights.morning_advanced_boost
    if context.time_of_day == TimeOfDay.evening and rec.estimated_time == "short":
        score += weights.evening_short_boost

    return score


def rank_recommendations(
    candidates: list[Recommendation],
    context: RankingContext,
    limit: int = DEFAULT_RECOMMENDATION_CONFIG.limit,
    weights: ScoringWeights = DEFAULT_RECOMMENDATION_CONFIG.weights,
) -> list[Recommendation]:
    """Return the top ``limit`` candidates by descending score.

    ``sorted`` is stable, so candidates with equal scores keep their input
    order. Inputs are never mutated; each output is a copy carrying its score.
    """
    scored = [(score_recommendation(c, context, weights), c) for c in candidates]
    ranked = sorted(scored, key=lambda pair: pair[0], reverse=True)
    return [c.model_copy(update={"score": round(s, 4)}) for s, c in ranked[:max(limit, 0)]]
