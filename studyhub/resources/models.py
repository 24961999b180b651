from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ResourceType(str, Enum):
    document = "document"
    video = "video"
    note = "note"
    link = "link"


class ActivityType(str, Enum):
    view = "view"
    download = "download"
    like = "like"
    comment = "comment"
    upload = "upload"
    share = "share"


class StatsAction(str, Enum):
    view = "view"
    download = "download"
    like = "like"
    comment = "comment"


class DailyViews(BaseModel):
    day: date
    count: int = 0


class ResourceStats(BaseModel):
    views: int = 0
    downloads: int = 0
    likes: int = 0
    comments: int = 0
    last_viewed: datetime | None = None
    daily_views: list[DailyViews] = Field(default_factory=list)


class Resource(BaseModel):
    id: str
    title: str
    description: str = ""
    type: ResourceType = ResourceType.document
    subject: str = ""
    semester: int = Field(default=1, ge=1)
    department: str = ""
    tags: list[str] = Field(default_factory=list)
    url: str | None = None
    uploaded_by: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)
    stats: ResourceStats = Field(default_factory=ResourceStats)
    liked_by: list[str] = Field(default_factory=list)


class ResourceCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=300)
    description: str = ""
    type: ResourceType = ResourceType.document
    subject: str = Field(..., min_length=1)
    semester: int = Field(..., ge=1, le=12)
    department: str = Field(..., min_length=1)
    tags: list[str] = Field(default_factory=list)
    url: str | None = None


class Activity(BaseModel):
    id: str
    user: str
    type: ActivityType
    resource_id: str | None = None
    message: str = ""
    details: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=datetime.now)


class ActivityCreateRequest(BaseModel):
    type: ActivityType
    resource_id: str | None = None
    message: str = Field(..., min_length=1, max_length=500)


class StatsActionRequest(BaseModel):
    resource_id: str = Field(..., min_length=1)
    action: StatsAction


class TrendingMetrics(BaseModel):
    score: float
    views: int
    downloads: int
    likes: int
    unique_users: int
    last_activity: datetime | None = None


class TrendingResource(BaseModel):
    resource: Resource
    trending: TrendingMetrics


class PeerRecommendation(BaseModel):
    resource_id: str
    title: str
    description: str
    type: ResourceType
    subject: str
    resource: Resource
    peer_count: int
    total_interactions: int
    similarity: float = Field(..., ge=0.0, le=1.0)
    last_activity: datetime | None = None
    tags: list[str] = Field(default_factory=list)
