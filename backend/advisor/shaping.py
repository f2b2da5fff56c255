"""Maps stored rows onto wire payloads and the ``{"data": ...}`` envelope."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel

from .db.models import (
    AssessmentModel,
    ProgressModel,
    RatingModel,
    RecommendationModel,
    ResourceModel,
    StreakModel,
    TaskModel,
    UserProfileModel,
)
from .payloads import (
    AssessmentPayload,
    ProgressPayload,
    RatingPayload,
    RecommendationPayload,
    ResourcePayload,
    ResourceSummaryPayload,
    StreakPayload,
    TaskPayload,
    UserProfilePayload,
)

logger = logging.getLogger(__name__)


def decode_json_field(value: Any, default: Any) -> Any:
    """Decode a column that may hold JSON-encoded text."""
    if value is None:
        return default
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            logger.warning("Stored JSON column could not be decoded; returning default")
            return default
    return value


def encode_json_field(value: Any) -> str:
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json")
    elif isinstance(value, list):
        value = [item.model_dump(mode="json") if isinstance(item, BaseModel) else item for item in value]
    return json.dumps(value)


def _owned(model: Any) -> Dict[str, Any]:
    return {
        "id": model.id,
        "user_id": model.user_id,
        "created_at": model.created_at,
        "updated_at": model.updated_at,
    }


def shape_profile(model: UserProfileModel) -> UserProfilePayload:
    return UserProfilePayload(
        **_owned(model),
        name=model.name,
        language=model.language or "en",
        skills=decode_json_field(model.skills, {}),
        interests=decode_json_field(model.interests, []),
        profile=decode_json_field(model.profile, {}),
    )


def shape_assessment(model: AssessmentModel) -> AssessmentPayload:
    return AssessmentPayload(
        **_owned(model),
        answers=decode_json_field(model.answers, {}),
        result=decode_json_field(model.result, {}),
    )


def shape_streak(model: Optional[StreakModel]) -> StreakPayload:
    if model is None:
        return StreakPayload()
    return StreakPayload(current_streak=model.current_streak or 0, last_active_date=model.last_active_date)


def shape_task(model: TaskModel) -> TaskPayload:
    return TaskPayload(
        **_owned(model),
        label=model.label,
        skill=model.skill,
        done=bool(model.done),
        due_date=model.due_date,
    )


def shape_resource(model: ResourceModel) -> ResourcePayload:
    return ResourcePayload(
        id=model.id,
        title=model.title,
        url=model.url,
        type=model.type,
        tags=decode_json_field(model.tags, []),
        locale=model.locale,
        created_at=model.created_at,
    )


def _resource_summary(model: Optional[ResourceModel], *, with_locale: bool) -> Optional[ResourceSummaryPayload]:
    if model is None:
        return None
    return ResourceSummaryPayload(
        id=model.id,
        title=model.title,
        url=model.url,
        type=model.type,
        tags=decode_json_field(model.tags, []),
        locale=model.locale if with_locale else None,
    )


def shape_progress(model: ProgressModel, resource: Optional[ResourceModel] = None) -> ProgressPayload:
    return ProgressPayload(
        **_owned(model),
        resource_id=model.resource_id,
        completion=model.completion,
        resource=_resource_summary(resource, with_locale=True),
    )


def shape_rating(model: RatingModel, resource: Optional[ResourceModel] = None) -> RatingPayload:
    return RatingPayload(
        **_owned(model),
        resource_id=model.resource_id,
        rating=model.rating,
        comment=model.comment,
        resource=_resource_summary(resource, with_locale=False),
    )


def shape_recommendation(model: RecommendationModel) -> RecommendationPayload:
    return RecommendationPayload(
        **_owned(model),
        careers=decode_json_field(model.careers, []),
        resources=decode_json_field(model.resources, []),
    )


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=False)
    if isinstance(value, (list, tuple)):
        return [_dump(item) for item in value]
    return value


def envelope(data: Any) -> Dict[str, Any]:
    return {"data": _dump(data)}


def envelope_many(items: Iterable[BaseModel]) -> Dict[str, List[Any]]:
    return {"data": [_dump(item) for item in items]}


__all__ = [
    "decode_json_field",
    "encode_json_field",
    "envelope",
    "envelope_many",
    "shape_assessment",
    "shape_profile",
    "shape_progress",
    "shape_rating",
    "shape_recommendation",
    "shape_resource",
    "shape_streak",
    "shape_task",
]
