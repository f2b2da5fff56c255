"""Per-resource request validators.

Each validator takes the raw decoded JSON body and either returns a typed input
model or raises :class:`ValidationFailed` for the first rule it finds violated.
Owner-identifying keys are rejected before any field is inspected, since the
owner of every row comes from the verified session.
"""

from __future__ import annotations

import json
import math
import re
from datetime import date
from typing import Any, Dict, Iterable, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, Field

from .errors import ValidationFailed

OWNER_KEYS = ("userId", "user_id")
RESOURCE_TYPES = ("course", "video", "article", "book")
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100
MAX_ROW_ID = 2**31 - 1

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class AssessmentInput(BaseModel):
    answers: Union[Dict[str, Any], List[Any]]
    result: Dict[str, Any]


class ProgressInput(BaseModel):
    resource_id: int
    completion: int = Field(ge=0, le=100)


class RatingInput(BaseModel):
    resource_id: int
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = None


class CareerSuggestion(BaseModel):
    id: str
    title: str
    summary: str
    match: str


class ResourceSuggestion(BaseModel):
    id: str
    title: str
    url: str
    type: str


class RecommendationInput(BaseModel):
    careers: List[CareerSuggestion]
    resources: List[ResourceSuggestion]


class TaskInput(BaseModel):
    label: str
    skill: Optional[str] = None
    done: bool = False
    due_date: Optional[date] = None


class TaskBatch(BaseModel):
    tasks: List[TaskInput]
    many: bool


class PageQuery(BaseModel):
    limit: int = DEFAULT_PAGE_SIZE
    offset: int = 0


class ResourceQuery(PageQuery):
    tag: Optional[str] = None
    locale: Optional[str] = None
    type: Optional[Literal["course", "video", "article", "book"]] = None


class TaskQuery(PageQuery):
    due_date: Optional[Union[Literal["today"], date]] = None

    def due_on(self, today: date) -> Optional[date]:
        if self.due_date == "today":
            return today
        return self.due_date  # type: ignore[return-value]


def coerce_leading_int(value: Any) -> Optional[int]:
    """Integer coercion that accepts a leading integer prefix ("4", "4.5", "4 stars")."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return int(match.group(1))
    return None


def is_json_serializable(value: Any) -> bool:
    """True when ``value`` survives a JSON round trip unchanged."""
    try:
        return json.loads(json.dumps(value, allow_nan=False)) == value
    except (TypeError, ValueError):
        return False


def parse_iso_date(value: Any) -> Optional[date]:
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def reject_owner_keys(body: Mapping[str, Any], extra: Iterable[str] = ()) -> None:
    keys = set(OWNER_KEYS) | set(extra)
    if any(key in keys for key in body):
        raise ValidationFailed("USER_ID_NOT_ALLOWED", "User ID cannot be provided in request body")


def _require_object(body: Any) -> Dict[str, Any]:
    if not isinstance(body, dict):
        raise ValidationFailed("INVALID_BODY", "Request body must be a JSON object")
    return body


def validate_assessment(body: Any) -> AssessmentInput:
    payload = _require_object(body)
    reject_owner_keys(payload)

    answers = payload.get("answers")
    if not isinstance(answers, (dict, list)):
        raise ValidationFailed("MISSING_ANSWERS", "Valid answers are required")

    result = payload.get("result")
    if not isinstance(result, dict):
        raise ValidationFailed("MISSING_RESULT", "Valid result object is required")
    if not (
        isinstance(result.get("strengths"), list)
        and isinstance(result.get("weaknesses"), list)
        and isinstance(result.get("scores"), dict)
    ):
        raise ValidationFailed(
            "INVALID_RESULT_STRUCTURE",
            "Result must contain strengths array, weaknesses array, and scores object",
        )

    if not (is_json_serializable(answers) and is_json_serializable(result)):
        raise ValidationFailed("INVALID_JSON", "Invalid JSON data provided")
    return AssessmentInput(answers=answers, result=result)


def validate_profile_update(body: Any) -> Dict[str, Any]:
    """Return only the profile fields present in ``body``."""
    payload = _require_object(body)
    reject_owner_keys(payload)
    updates: Dict[str, Any] = {}

    for field in ("name", "language"):
        if field in payload:
            value = payload[field]
            if not isinstance(value, str):
                raise ValidationFailed(f"INVALID_{field.upper()}", f"{field.capitalize()} must be a string")
            updates[field] = value.strip()

    composite = (("skills", dict, "an object"), ("interests", list, "an array"), ("profile", dict, "an object"))
    for field, expected, label in composite:
        if field not in payload:
            continue
        value = payload[field]
        if not isinstance(value, expected):
            raise ValidationFailed(f"INVALID_{field.upper()}", f"{field.capitalize()} must be {label}")
        if not is_json_serializable(value):
            raise ValidationFailed("INVALID_JSON", f"{field.capitalize()} must be JSON serializable")
        updates[field] = value

    if not updates:
        raise ValidationFailed("NO_UPDATES", "No valid fields to update")
    return updates


def validate_progress(body: Any) -> ProgressInput:
    payload = _require_object(body)
    reject_owner_keys(payload)

    resource_id = payload.get("resourceId")
    if isinstance(resource_id, bool) or not isinstance(resource_id, int) or not 0 < resource_id <= MAX_ROW_ID:
        raise ValidationFailed("MISSING_RESOURCE_ID", "Valid resourceId is required")

    completion = payload.get("completion")
    if (
        isinstance(completion, bool)
        or not isinstance(completion, (int, float))
        or not math.isfinite(completion)
        or not 0 <= completion <= 100
    ):
        raise ValidationFailed("INVALID_COMPLETION", "Completion must be a number between 0 and 100")
    return ProgressInput(resource_id=resource_id, completion=round(completion))


def validate_rating(body: Any) -> RatingInput:
    payload = _require_object(body)
    reject_owner_keys(payload, extra=("authorId",))

    resource_id = coerce_leading_int(payload.get("resourceId"))
    if not resource_id or not 0 < resource_id <= MAX_ROW_ID:
        raise ValidationFailed("MISSING_RESOURCE_ID", "Valid resourceId is required")

    if payload.get("rating") is None:
        raise ValidationFailed("MISSING_RATING", "Rating is required")
    rating = coerce_leading_int(payload["rating"])
    if rating is None or not 1 <= rating <= 5:
        raise ValidationFailed("INVALID_RATING", "Rating must be an integer between 1 and 5")

    comment = payload.get("comment")
    return RatingInput(
        resource_id=resource_id,
        rating=rating,
        comment=comment.strip() if isinstance(comment, str) else None,
    )


def _all_string_fields(entry: Any, fields: Iterable[str]) -> bool:
    return isinstance(entry, dict) and all(isinstance(entry.get(field), str) for field in fields)


def validate_recommendation(body: Any) -> RecommendationInput:
    payload = _require_object(body)
    reject_owner_keys(payload, extra=("userID",))

    careers = payload.get("careers")
    if not isinstance(careers, list):
        raise ValidationFailed("INVALID_CAREERS", "Careers must be an array")
    career_fields = ("id", "title", "summary", "match")
    if not all(_all_string_fields(career, career_fields) for career in careers):
        raise ValidationFailed(
            "INVALID_CAREER_FORMAT",
            "Each career must have valid id, title, summary, and match fields",
        )

    resources = payload.get("resources")
    if not isinstance(resources, list):
        raise ValidationFailed("INVALID_RESOURCES", "Resources must be an array")
    resource_fields = ("id", "title", "url", "type")
    if not all(_all_string_fields(resource, resource_fields) for resource in resources):
        raise ValidationFailed(
            "INVALID_RESOURCE_FORMAT",
            "Each resource must have valid id, title, url, and type fields",
        )

    return RecommendationInput(
        careers=[CareerSuggestion(**{key: career[key] for key in career_fields}) for career in careers],
        resources=[ResourceSuggestion(**{key: entry[key] for key in resource_fields}) for entry in resources],
    )


def _task_fields(payload: Dict[str, Any], *, partial: bool) -> Dict[str, Any]:
    fields: Dict[str, Any] = {}

    if "label" in payload or not partial:
        label = payload.get("label")
        if not isinstance(label, str) or not label.strip():
            raise ValidationFailed("MISSING_LABEL", "Label is required and must be a non-empty string")
        fields["label"] = label.strip()

    if "skill" in payload:
        skill = payload["skill"]
        if not isinstance(skill, str):
            raise ValidationFailed("INVALID_SKILL", "Skill must be a string if provided")
        # Creation stores a blank skill as null; an update keeps it as given.
        fields["skill"] = skill.strip() if partial else skill.strip() or None

    if "done" in payload:
        done = payload["done"]
        if not isinstance(done, bool):
            raise ValidationFailed("INVALID_DONE", "Done must be a boolean if provided")
        fields["done"] = done

    if "dueDate" in payload:
        due_date = parse_iso_date(payload["dueDate"])
        if due_date is None:
            raise ValidationFailed("INVALID_DUE_DATE", "Due date must be a valid ISO date string (YYYY-MM-DD)")
        fields["due_date"] = due_date

    return fields


def validate_task_create(body: Any) -> TaskBatch:
    if isinstance(body, list):
        entries, many = body, True
    elif isinstance(body, dict):
        entries, many = [body], False
    else:
        raise ValidationFailed("INVALID_BODY", "Request body must be a task object or an array of tasks")

    if not entries:
        raise ValidationFailed("NO_TASKS", "No tasks provided")

    tasks: List[TaskInput] = []
    for entry in entries:
        payload = _require_object(entry)
        reject_owner_keys(payload)
        tasks.append(TaskInput(**_task_fields(payload, partial=False)))
    return TaskBatch(tasks=tasks, many=many)


def validate_task_update(body: Any) -> Dict[str, Any]:
    payload = _require_object(body)
    reject_owner_keys(payload)
    updates = _task_fields(payload, partial=True)
    if not updates:
        raise ValidationFailed("NO_UPDATES", "No valid fields to update")
    return updates


def parse_task_id(raw: Optional[str]) -> int:
    task_id = coerce_leading_int(raw)
    if task_id is None or abs(task_id) > MAX_ROW_ID:
        raise ValidationFailed("INVALID_TASK_ID", "Valid task ID is required in query params")
    return task_id


def _page(limit: Optional[str], offset: Optional[str]) -> PageQuery:
    page_size = DEFAULT_PAGE_SIZE
    if limit is not None:
        parsed = coerce_leading_int(limit)
        if parsed is None or parsed < 1:
            raise ValidationFailed("INVALID_LIMIT", "Invalid limit parameter")
        page_size = min(parsed, MAX_PAGE_SIZE)

    start = 0
    if offset is not None:
        parsed = coerce_leading_int(offset)
        if parsed is None or not 0 <= parsed <= MAX_ROW_ID:
            raise ValidationFailed("INVALID_OFFSET", "Invalid offset parameter")
        start = parsed
    return PageQuery(limit=page_size, offset=start)


def validate_resource_query(
    *,
    tag: Optional[str] = None,
    locale: Optional[str] = None,
    type: Optional[str] = None,
    limit: Optional[str] = None,
    offset: Optional[str] = None,
) -> ResourceQuery:
    page = _page(limit, offset)
    if type and type not in RESOURCE_TYPES:
        raise ValidationFailed("INVALID_TYPE", "Invalid type parameter")
    return ResourceQuery(
        tag=tag or None,
        locale=locale or None,
        type=type or None,
        limit=page.limit,
        offset=page.offset,
    )


def validate_task_query(
    *,
    due_date: Optional[str] = None,
    limit: Optional[str] = None,
    offset: Optional[str] = None,
) -> TaskQuery:
    page = _page(limit, offset)
    due: Optional[Union[str, date]] = None
    if due_date:
        due = "today" if due_date == "today" else parse_iso_date(due_date)
        if due is None:
            raise ValidationFailed("INVALID_DUE_DATE", "due_date must be 'today' or a YYYY-MM-DD date")
    return TaskQuery(due_date=due, limit=page.limit, offset=page.offset)  # type: ignore[arg-type]


__all__ = [
    "AssessmentInput",
    "CareerSuggestion",
    "ProgressInput",
    "RatingInput",
    "RecommendationInput",
    "ResourceQuery",
    "ResourceSuggestion",
    "TaskBatch",
    "TaskInput",
    "TaskQuery",
    "coerce_leading_int",
    "is_json_serializable",
    "parse_iso_date",
    "parse_task_id",
    "reject_owner_keys",
    "validate_assessment",
    "validate_profile_update",
    "validate_progress",
    "validate_rating",
    "validate_recommendation",
    "validate_resource_query",
    "validate_task_create",
    "validate_task_query",
    "validate_task_update",
]
