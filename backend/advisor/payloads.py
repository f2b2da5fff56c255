"""Wire payloads returned by the REST surface."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; every stored timestamp is UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class WirePayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OwnedRowPayload(WirePayload):
    id: int
    user_id: str
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def timestamps_in_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class UserProfilePayload(OwnedRowPayload):
    name: Optional[str] = None
    language: str = "en"
    skills: Dict[str, Any] = Field(default_factory=dict)
    interests: List[Any] = Field(default_factory=list)
    profile: Dict[str, Any] = Field(default_factory=dict)


class AssessmentPayload(OwnedRowPayload):
    answers: Union[Dict[str, Any], List[Any]]
    result: Dict[str, Any]


class StreakPayload(BaseModel):
    current_streak: int = 0
    last_active_date: Optional[date] = None


class TaskPayload(OwnedRowPayload):
    label: str
    skill: Optional[str] = None
    done: bool = False
    due_date: Optional[date] = None


class ResourcePayload(WirePayload):
    id: int
    title: str
    url: str
    type: str
    tags: List[str] = Field(default_factory=list)
    locale: str = "en"
    created_at: Optional[datetime] = None

    @field_validator("created_at")
    @classmethod
    def created_in_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class ResourceSummaryPayload(WirePayload):
    id: int
    title: str
    url: str
    type: str
    tags: List[str] = Field(default_factory=list)
    locale: Optional[str] = None


class ProgressPayload(OwnedRowPayload):
    resource_id: int
    completion: int
    resource: Optional[ResourceSummaryPayload] = None


class RatingPayload(OwnedRowPayload):
    resource_id: int
    rating: int
    comment: Optional[str] = None
    resource: Optional[ResourceSummaryPayload] = None


class RecommendationPayload(OwnedRowPayload):
    careers: List[Dict[str, Any]] = Field(default_factory=list)
    resources: List[Dict[str, Any]] = Field(default_factory=list)


__all__ = [
    "AssessmentPayload",
    "OwnedRowPayload",
    "ProgressPayload",
    "RatingPayload",
    "RecommendationPayload",
    "ResourcePayload",
    "ResourceSummaryPayload",
    "StreakPayload",
    "TaskPayload",
    "UserProfilePayload",
    "WirePayload",
    "as_utc",
]
