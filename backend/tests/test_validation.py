from __future__ import annotations

from datetime import date

import pytest

from advisor.errors import ValidationFailed
from advisor.validation import (
    coerce_leading_int,
    is_json_serializable,
    parse_task_id,
    validate_assessment,
    validate_profile_update,
    validate_progress,
    validate_rating,
    validate_recommendation,
    validate_resource_query,
    validate_task_create,
    validate_task_query,
    validate_task_update,
)

VALID_RESULT = {"strengths": ["tech"], "weaknesses": ["analysis"], "scores": {"tech": 4}}


def _code(exc_info: pytest.ExceptionInfo[ValidationFailed]) -> str | None:
    return exc_info.value.code


@pytest.mark.parametrize(
    "validator, body",
    [
        (validate_assessment, {"userId": "x", "answers": {}, "result": VALID_RESULT}),
        (validate_profile_update, {"user_id": "x", "name": "Ada"}),
        (validate_progress, {"userId": "x", "resourceId": 1, "completion": 10}),
        (validate_rating, {"authorId": "x", "resourceId": 1, "rating": 3}),
        (validate_recommendation, {"userID": "x", "careers": [], "resources": []}),
        (validate_task_create, [{"label": "ok"}, {"label": "bad", "userId": "x"}]),
        (validate_task_update, {"user_id": "x", "done": True}),
    ],
)
def test_owner_keys_rejected_before_other_checks(validator, body) -> None:
    with pytest.raises(ValidationFailed) as exc_info:
        validator(body)
    assert _code(exc_info) == "USER_ID_NOT_ALLOWED"


def test_owner_key_wins_over_invalid_fields() -> None:
    with pytest.raises(ValidationFailed) as exc_info:
        validate_rating({"userId": "x", "rating": "nope"})
    assert _code(exc_info) == "USER_ID_NOT_ALLOWED"


@pytest.mark.parametrize(
    "value, expected",
    [("4", 4), ("4.9", 4), ("3 stars", 3), (2.7, 2), (5, 5), ("abc", None), (True, None), (None, None)],
)
def test_coerce_leading_int(value, expected) -> None:
    assert coerce_leading_int(value) == expected


def test_json_serializable_rejects_non_finite_and_objects() -> None:
    assert is_json_serializable({"a": [1, "two", None]})
    assert not is_json_serializable({"a": float("nan")})
    assert not is_json_serializable({"a": object()})


def test_assessment_requires_result_structure() -> None:
    with pytest.raises(ValidationFailed) as exc_info:
        validate_assessment({"answers": {}, "result": {"strengths": []}})
    assert _code(exc_info) == "INVALID_RESULT_STRUCTURE"

    with pytest.raises(ValidationFailed) as exc_info:
        validate_assessment({"answers": "nope", "result": VALID_RESULT})
    assert _code(exc_info) == "MISSING_ANSWERS"

    parsed = validate_assessment({"answers": [], "result": VALID_RESULT})
    assert parsed.result["scores"] == {"tech": 4}


def test_profile_update_only_returns_present_fields() -> None:
    updates = validate_profile_update({"name": "  Ada  ", "interests": ["ml"]})
    assert updates == {"name": "Ada", "interests": ["ml"]}

    with pytest.raises(ValidationFailed) as exc_info:
        validate_profile_update({})
    assert _code(exc_info) == "NO_UPDATES"

    with pytest.raises(ValidationFailed) as exc_info:
        validate_profile_update({"skills": ["not", "a", "map"]})
    assert _code(exc_info) == "INVALID_SKILLS"


@pytest.mark.parametrize(
    "body, code",
    [
        ({"completion": 10}, "MISSING_RESOURCE_ID"),
        ({"resourceId": "1", "completion": 10}, "MISSING_RESOURCE_ID"),
        ({"resourceId": 10**20, "completion": 10}, "MISSING_RESOURCE_ID"),
        ({"resourceId": 2**31, "completion": 10}, "MISSING_RESOURCE_ID"),
        ({"resourceId": 1, "completion": 101}, "INVALID_COMPLETION"),
        ({"resourceId": 1, "completion": -1}, "INVALID_COMPLETION"),
        ({"resourceId": 1, "completion": "50"}, "INVALID_COMPLETION"),
    ],
)
def test_progress_rules(body, code) -> None:
    with pytest.raises(ValidationFailed) as exc_info:
        validate_progress(body)
    assert _code(exc_info) == code


def test_progress_rounds_completion() -> None:
    assert validate_progress({"resourceId": 2, "completion": 49.6}).completion == 50


@pytest.mark.parametrize("rating", [0, 6, "0", "9 stars", "great", 10.5])
def test_rating_out_of_range(rating) -> None:
    with pytest.raises(ValidationFailed) as exc_info:
        validate_rating({"resourceId": 1, "rating": rating})
    assert _code(exc_info) == "INVALID_RATING"


def test_rating_coerces_and_trims_comment() -> None:
    parsed = validate_rating({"resourceId": "3", "rating": "4.5", "comment": "  useful  "})
    assert (parsed.resource_id, parsed.rating, parsed.comment) == (3, 4, "useful")

    parsed = validate_rating({"resourceId": 3, "rating": 5, "comment": 42})
    assert parsed.comment is None

    with pytest.raises(ValidationFailed) as exc_info:
        validate_rating({"resourceId": 3})
    assert _code(exc_info) == "MISSING_RATING"


@pytest.mark.parametrize("resource_id", [10**20, "99999999999999999999", 0, -4])
def test_rating_resource_id_bounds(resource_id) -> None:
    with pytest.raises(ValidationFailed) as exc_info:
        validate_rating({"resourceId": resource_id, "rating": 3})
    assert _code(exc_info) == "MISSING_RESOURCE_ID"


def test_recommendation_requires_subfields() -> None:
    with pytest.raises(ValidationFailed) as exc_info:
        validate_recommendation({"careers": [{"id": "1", "title": "Dev"}], "resources": []})
    assert _code(exc_info) == "INVALID_CAREER_FORMAT"

    with pytest.raises(ValidationFailed) as exc_info:
        validate_recommendation({"careers": [], "resources": "none"})
    assert _code(exc_info) == "INVALID_RESOURCES"


def test_task_create_single_and_batch() -> None:
    single = validate_task_create({"label": " Read ", "dueDate": "2025-03-14"})
    assert not single.many
    assert single.tasks[0].label == "Read"
    assert single.tasks[0].due_date == date(2025, 3, 14)

    batch = validate_task_create([{"label": "a"}, {"label": "b", "done": True}])
    assert batch.many and len(batch.tasks) == 2

    with pytest.raises(ValidationFailed) as exc_info:
        validate_task_create([])
    assert _code(exc_info) == "NO_TASKS"


@pytest.mark.parametrize(
    "body, code",
    [
        ({"label": ""}, "MISSING_LABEL"),
        ({"label": "x", "skill": 3}, "INVALID_SKILL"),
        ({"label": "x", "done": "yes"}, "INVALID_DONE"),
        ({"label": "x", "dueDate": "2025-02-30"}, "INVALID_DUE_DATE"),
        ({"label": "x", "dueDate": "14/03/2025"}, "INVALID_DUE_DATE"),
    ],
)
def test_task_field_rules(body, code) -> None:
    with pytest.raises(ValidationFailed) as exc_info:
        validate_task_create(body)
    assert _code(exc_info) == code


def test_task_update_requires_a_field() -> None:
    assert validate_task_update({"done": True}) == {"done": True}
    with pytest.raises(ValidationFailed) as exc_info:
        validate_task_update({"unknown": 1})
    assert _code(exc_info) == "NO_UPDATES"


def test_parse_task_id() -> None:
    assert parse_task_id("12") == 12
    with pytest.raises(ValidationFailed) as exc_info:
        parse_task_id(None)
    assert _code(exc_info) == "INVALID_TASK_ID"
    with pytest.raises(ValidationFailed) as exc_info:
        parse_task_id("99999999999999999999")
    assert _code(exc_info) == "INVALID_TASK_ID"


def test_resource_query_limits_and_type() -> None:
    query = validate_resource_query(limit="500")
    assert query.limit == 100
    assert validate_resource_query().limit == 50

    with pytest.raises(ValidationFailed) as exc_info:
        validate_resource_query(type="podcast")
    assert _code(exc_info) == "INVALID_TYPE"

    with pytest.raises(ValidationFailed) as exc_info:
        validate_resource_query(limit="0")
    assert _code(exc_info) == "INVALID_LIMIT"

    with pytest.raises(ValidationFailed) as exc_info:
        validate_resource_query(offset="-1")
    assert _code(exc_info) == "INVALID_OFFSET"


def test_task_query_due_date() -> None:
    today = date(2025, 3, 14)
    assert validate_task_query(due_date="today").due_on(today) == today
    assert validate_task_query(due_date="2025-01-02").due_on(today) == date(2025, 1, 2)
    assert validate_task_query().due_on(today) is None
    with pytest.raises(ValidationFailed):
        validate_task_query(due_date="tomorrow")
