"""Profile read and partial update."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..auth import UserIdentity, current_user
from ..db.session import session_scope
from ..errors import NotFoundOrNotOwned
from ..pipeline import validated_body
from ..repositories import profiles
from ..shaping import envelope, shape_profile
from ..validation import validate_profile_update

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("")
def get_profile(user: UserIdentity = Depends(current_user)) -> Dict[str, Any]:
    with session_scope() as session:
        model = profiles.fetch_or_create(session, user.id, name=user.name)
        return envelope(shape_profile(model))


@router.put("")
def update_profile(
    updates: Dict[str, Any] = Depends(validated_body(validate_profile_update)),
    user: UserIdentity = Depends(current_user),
) -> Dict[str, Any]:
    with session_scope() as session:
        model = profiles.apply_updates(session, user.id, updates)
        if model is None:
            raise NotFoundOrNotOwned("Profile not found", code="PROFILE_NOT_FOUND")
        return envelope(shape_profile(model))
