"""Latest career and resource recommendations."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..auth import UserIdentity, current_user
from ..db.session import session_scope
from ..pipeline import validated_body
from ..repositories import recommendations
from ..shaping import encode_json_field, envelope, shape_recommendation
from ..validation import RecommendationInput, validate_recommendation

router = APIRouter(prefix="/api/recommendations", tags=["recommendations"])


@router.get("")
def get_recommendation(user: UserIdentity = Depends(current_user)) -> Dict[str, Any]:
    with session_scope(commit=False) as session:
        model = recommendations.get(session, user.id)
        return envelope(shape_recommendation(model) if model is not None else None)


@router.post("")
def save_recommendation(
    payload: RecommendationInput = Depends(validated_body(validate_recommendation)),
    user: UserIdentity = Depends(current_user),
) -> Dict[str, Any]:
    fields = {
        "careers": encode_json_field(payload.careers),
        "resources": encode_json_field(payload.resources),
    }
    with session_scope() as session:
        model = recommendations.upsert(session, user.id, fields)
        return envelope(shape_recommendation(model))
