from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class ScoringWeights:
    """Product-tuning knobs for the ranking heuristic."""

    confidence_scale: float = 100.0
    trending_boost: float = 20.0
    ai_generated_boost: float = 15.0
    popularity_log_scale: float = 5.0
    morning_advanced_boost: float = 10.0
    evening_short_boost: float = 10.0


@dataclass(frozen=True)
class RecommendationConfig:
    limit: int = 8
    cache_ttl: float = float(os.getenv("RECOMMENDATION_CACHE_TTL", "300"))
    collector_timeout: float = float(os.getenv("RECOMMENDATION_COLLECTOR_TIMEOUT", "10"))
    default_semester: int = 1
    default_department: str = "CSE"

    # Trending lookup
    trending_limit: int = 8
    trending_timeframe_days: int = 7
    trending_min_score: float = 2.0
    trending_confidence: float = 0.8

    # Peer lookup
    peer_limit: int = 5
    peer_max_similar_users: int = 20
    peer_window_days: int = 30
    peer_min_interactions: int = 2
    peer_default_similarity: float = 0.7

    ai_confidence: float = 0.75
    ai_max_suggestions: int = 5
    study_path_activity_threshold: int = 3

    weights: ScoringWeights = field(default_factory=ScoringWeights)


DEFAULT_RECOMMENDATION_CONFIG = RecommendationConfig()
