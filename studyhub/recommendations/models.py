from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class RecommendationKind(str, Enum):
    trending = "trending"
    ai_suggested = "ai_suggested"
    study_path = "study_path"


class TimeOfDay(str, Enum):
    morning = "morning"
    afternoon = "afternoon"
    evening = "evening"


class FeedbackKind(str, Enum):
    like = "like"
    dislike = "dislike"
    helpful = "helpful"
    not_helpful = "not_helpful"


class RankingContext(BaseModel):
    recent_activity_count: int = Field(default=0, ge=0)
    recent_activity_types: list[str] = Field(default_factory=list)
    time_of_day: TimeOfDay
    semester: int = Field(default=1, ge=1)
    department: str
    current_course: str | None = None
    username: str | None = None


class Recommendation(BaseModel):
    id: str
    title: str
    description: str
    kind: RecommendationKind
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: str = ""
    popularity: int = Field(default=0, ge=0)
    estimated_time: str | None = None
    difficulty: str | None = None
    tags: list[str] = Field(default_factory=list)
    ai_generated: bool = False
    url: str | None = None
    thumbnail_url: str | None = None
    source_payload: Any = Field(default=None, exclude=True)
    score: float | None = None


class RecommendationResponse(BaseModel):
    recommendations: list[Recommendation]
    context: RankingContext


class FeedbackRequest(BaseModel):
    recommendation_id: str = Field(..., min_length=1)
    feedback: FeedbackKind


class FeedbackResponse(BaseModel):
    status: str
    recommendation_id: str
    feedback: FeedbackKind


class LoginRequest(BaseModel):
    username: str
    password: str
