"""Profile persistence on top of the owned-resource store."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from sqlalchemy.orm import Session

from ..db.models import UserProfileModel
from .owned_resources import OwnedResourceStore

DEFAULT_LANGUAGE = "en"


def default_profile(name: Optional[str] = None) -> Dict[str, Any]:
    return {
        "name": name,
        "language": DEFAULT_LANGUAGE,
        "skills": {},
        "interests": [],
        "profile": {},
    }


class ProfileStore(OwnedResourceStore[UserProfileModel]):
    def __init__(self) -> None:
        super().__init__(UserProfileModel)

    def fetch_or_create(self, session: Session, user_id: str, name: Optional[str] = None) -> UserProfileModel:
        return self.get_or_create(session, user_id, default_profile(name))

    def apply_updates(
        self, session: Session, user_id: str, updates: Mapping[str, Any]
    ) -> Optional[UserProfileModel]:
        """Partial update of an existing profile; ``None`` when none exists yet."""
        model = self.get(session, user_id)
        if model is None:
            return None
        for name, value in updates.items():
            setattr(model, name, value)
        model.updated_at = self.clock()
        session.flush()
        return model

    def apply_assessment_result(
        self, session: Session, user_id: str, result: Mapping[str, Any], name: Optional[str] = None
    ) -> UserProfileModel:
        """Mirror the latest assessment result into the profile."""
        fields = {"profile": dict(result), "skills": dict(result.get("scores") or {})}
        defaults = default_profile(name)
        return self.upsert(session, user_id, fields, insert_defaults=defaults)


profiles = ProfileStore()

__all__ = ["DEFAULT_LANGUAGE", "ProfileStore", "default_profile", "profiles"]
