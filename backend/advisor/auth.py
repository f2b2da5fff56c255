"""Bearer-token session resolution.

Token issuance belongs to the identity provider; this module only exchanges a
presented token for the user it was issued to.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Protocol

from fastapi import Depends, Header
from sqlalchemy import select

from .db.models import AuthSessionModel, UserModel
from .db.session import session_scope
from .errors import AuthenticationRequired

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class UserIdentity:
    id: str
    name: Optional[str] = None
    email: Optional[str] = None


class IdentityProvider(Protocol):
    def resolve(self, token: str) -> Optional[UserIdentity]:  # pragma: no cover - protocol definition
        ...


class DatabaseIdentityProvider:
    """Resolves tokens against the identity provider's session table."""

    def resolve(self, token: str) -> Optional[UserIdentity]:
        if not token:
            return None
        try:
            with session_scope(commit=False) as session:
                stmt = (
                    select(AuthSessionModel, UserModel)
                    .join(UserModel, AuthSessionModel.user_id == UserModel.id)
                    .where(AuthSessionModel.token == token)
                    .limit(1)
                )
                row = session.execute(stmt).first()
                if row is None:
                    return None
                auth_session, user = row
                if _is_expired(auth_session.expires_at):
                    return None
                return UserIdentity(id=user.id, name=user.name, email=user.email)
        except Exception:  # noqa: BLE001
            logger.exception("Session validation failed")
            return None


def _is_expired(expires_at: Optional[datetime]) -> bool:
    if expires_at is None:
        return False
    if expires_at.tzinfo is None:
        # SQLite drops tzinfo; values are written in UTC.
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    return expires_at <= datetime.now(timezone.utc)


def parse_bearer(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


_provider: IdentityProvider = DatabaseIdentityProvider()


def get_identity_provider() -> IdentityProvider:
    return _provider


def resolve(authorization: Optional[str], provider: Optional[IdentityProvider] = None) -> Optional[UserIdentity]:
    token = parse_bearer(authorization)
    if token is None:
        return None
    return (provider or _provider).resolve(token)


def current_user(
    authorization: Optional[str] = Header(default=None),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> UserIdentity:
    identity = resolve(authorization, provider)
    if identity is None:
        raise AuthenticationRequired()
    return identity


__all__ = [
    "DatabaseIdentityProvider",
    "IdentityProvider",
    "UserIdentity",
    "current_user",
    "get_identity_provider",
    "parse_bearer",
    "resolve",
]
