"""Resource ratings."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..auth import UserIdentity, current_user
from ..db.session import session_scope
from ..pipeline import validated_body
from ..repositories import ratings
from ..repositories.catalog import ratings_with_resources, require_resource
from ..shaping import envelope, envelope_many, shape_rating
from ..validation import RatingInput, validate_rating

router = APIRouter(prefix="/api/ratings", tags=["ratings"])


@router.get("")
def list_ratings(user: UserIdentity = Depends(current_user)) -> Dict[str, Any]:
    with session_scope(commit=False) as session:
        rows = ratings_with_resources(session, user.id)
        return envelope_many(shape_rating(entry, resource) for entry, resource in rows)


@router.post("")
def record_rating(
    payload: RatingInput = Depends(validated_body(validate_rating)),
    user: UserIdentity = Depends(current_user),
) -> Dict[str, Any]:
    with session_scope() as session:
        resource = require_resource(session, payload.resource_id)
        model = ratings.upsert(
            session,
            user.id,
            {"rating": payload.rating, "comment": payload.comment},
            secondary_key=payload.resource_id,
        )
        return envelope(shape_rating(model, resource))
