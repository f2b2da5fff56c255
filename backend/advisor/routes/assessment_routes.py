"""Assessment submissions and history."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from ..auth import UserIdentity, current_user
from ..db.session import session_scope
from ..pipeline import validated_body
from ..repositories import assessments, profiles
from ..shaping import envelope, envelope_many, shape_assessment
from .. import telemetry
from ..validation import AssessmentInput, validate_assessment

router = APIRouter(prefix="/api/assessments", tags=["assessments"])
logger = logging.getLogger(__name__)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_assessment(
    payload: AssessmentInput = Depends(validated_body(validate_assessment)),
    user: UserIdentity = Depends(current_user),
) -> Dict[str, Any]:
    with session_scope() as session:
        model = assessments.create(session, user.id, {"answers": payload.answers, "result": payload.result})
        profiles.apply_assessment_result(session, user.id, payload.result, name=user.name)
        shaped = shape_assessment(model)

    telemetry.assessment_recorded(user.id, shaped.id, payload.result.get("strengths", []))
    return envelope(shaped)


@router.get("")
def list_assessments(user: UserIdentity = Depends(current_user)) -> Dict[str, Any]:
    with session_scope(commit=False) as session:
        rows = assessments.list(session, user.id)
        return envelope_many(shape_assessment(row) for row in rows)
