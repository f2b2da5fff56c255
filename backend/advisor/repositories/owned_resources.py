"""Generic per-user persistence for rows owned by a single account."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Generic, Iterable, List, Mapping, Optional, Sequence, Type, TypeVar

from sqlalchemy import ColumnElement, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from ..db.base import Base, utcnow
from ..db.models import (
    AssessmentModel,
    ProgressModel,
    RatingModel,
    RecommendationModel,
)

ModelT = TypeVar("ModelT", bound=Base)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class OwnedResourceStore(Generic[ModelT]):
    """Upsert/read/update/delete helpers for one owned table.

    ``key_fields`` names the unique key of the table: ``("user_id",)`` for
    singleton-per-user rows, ``("user_id", "<secondary>")`` for per-entry rows.
    Tables whose rows are only identified by their primary key (tasks,
    assessments) use ``key_fields=()`` and never upsert.
    """

    def __init__(
        self,
        model: Type[ModelT],
        *,
        key_fields: Sequence[str] = ("user_id",),
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.model = model
        self.key_fields = tuple(key_fields)
        self.clock = clock

    def _key_values(self, user_id: str, secondary_key: Any = None) -> dict[str, Any]:
        if not self.key_fields:
            raise TypeError(f"{self.model.__name__} rows are not keyed by owner")
        values: dict[str, Any] = {"user_id": user_id}
        secondary = self.key_fields[1:]
        if secondary:
            if secondary_key is None:
                raise ValueError(f"{self.model.__name__} requires a {secondary[0]} key")
            values[secondary[0]] = secondary_key
        return values

    def _key_filter(self, user_id: str, secondary_key: Any = None) -> List[ColumnElement[bool]]:
        return [
            getattr(self.model, name) == value
            for name, value in self._key_values(user_id, secondary_key).items()
        ]

    def _dialect_insert(self, session: Session) -> Optional[Callable[..., Any]]:
        return _UPSERT_DIALECTS.get(session.get_bind().dialect.name)

    def get(self, session: Session, user_id: str, secondary_key: Any = None) -> Optional[ModelT]:
        stmt = select(self.model).where(*self._key_filter(user_id, secondary_key)).limit(1)
        return session.execute(stmt).scalar_one_or_none()

    def get_or_create(
        self,
        session: Session,
        user_id: str,
        defaults: Mapping[str, Any],
        secondary_key: Any = None,
    ) -> ModelT:
        existing = self.get(session, user_id, secondary_key)
        if existing is not None:
            return existing

        now = self.clock()
        values = {**defaults, **self._key_values(user_id, secondary_key), "created_at": now, "updated_at": now}
        insert = self._dialect_insert(session)
        if insert is None:
            model = self.model(**values)
            session.add(model)
            session.flush()
            return model

        stmt = insert(self.model).values(**values).on_conflict_do_nothing(index_elements=list(self.key_fields))
        session.execute(stmt)
        created = self.get(session, user_id, secondary_key)
        if created is None:
            raise RuntimeError(f"{self.model.__name__} row for {user_id} vanished after insert")
        return created

    def upsert(
        self,
        session: Session,
        user_id: str,
        fields: Mapping[str, Any],
        secondary_key: Any = None,
        *,
        insert_defaults: Mapping[str, Any] | None = None,
    ) -> ModelT:
        """Insert the row for the key, or update ``fields`` on the existing one.

        ``insert_defaults`` only apply when the row is created. ``created_at``
        is never touched by the update branch.
        """
        now = self.clock()
        key = self._key_values(user_id, secondary_key)
        insert = self._dialect_insert(session)
        if insert is None:
            return self._upsert_by_select(session, key, fields, insert_defaults or {}, now)

        values = {**(insert_defaults or {}), **fields, **key, "created_at": now, "updated_at": now}
        stmt = insert(self.model).values(**values)
        assignments = {name: stmt.excluded[name] for name in fields}
        assignments["updated_at"] = now
        stmt = stmt.on_conflict_do_update(index_elements=list(self.key_fields), set_=assignments)
        return session.scalars(
            stmt.returning(self.model),
            execution_options={"populate_existing": True},
        ).one()

    def _upsert_by_select(
        self,
        session: Session,
        key: Mapping[str, Any],
        fields: Mapping[str, Any],
        insert_defaults: Mapping[str, Any],
        now: datetime,
    ) -> ModelT:
        stmt = select(self.model).filter_by(**key).limit(1)
        model = session.execute(stmt).scalar_one_or_none()
        if model is None:
            model = self.model(**{**insert_defaults, **fields, **key, "created_at": now, "updated_at": now})
            session.add(model)
        else:
            for name, value in fields.items():
                setattr(model, name, value)
            model.updated_at = now  # type: ignore[attr-defined]
        session.flush()
        return model

    def create(self, session: Session, user_id: str, fields: Mapping[str, Any]) -> ModelT:
        created = self.create_many(session, user_id, [fields])
        return created[0]

    def create_many(self, session: Session, user_id: str, entries: Iterable[Mapping[str, Any]]) -> List[ModelT]:
        now = self.clock()
        models = [
            self.model(**{**entry, "user_id": user_id, "created_at": now, "updated_at": now})
            for entry in entries
        ]
        session.add_all(models)
        session.flush()
        return models

    def list(
        self,
        session: Session,
        user_id: str,
        *,
        where: Iterable[ColumnElement[bool]] = (),
        order_by: Iterable[Any] = (),
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[ModelT]:
        stmt = select(self.model).where(self.model.user_id == user_id, *where)  # type: ignore[attr-defined]
        order = list(order_by) or [self.model.created_at.desc(), self.model.id.desc()]  # type: ignore[attr-defined]
        stmt = stmt.order_by(*order)
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)
        return list(session.execute(stmt).scalars().all())

    def _owned(self, session: Session, user_id: str, row_id: int) -> Optional[ModelT]:
        stmt = select(self.model).where(
            self.model.id == row_id,  # type: ignore[attr-defined]
            self.model.user_id == user_id,  # type: ignore[attr-defined]
        )
        return session.execute(stmt).scalar_one_or_none()

    def update(self, session: Session, user_id: str, row_id: int, fields: Mapping[str, Any]) -> Optional[ModelT]:
        """Owner-scoped update by id; ``None`` when missing or owned by someone else."""
        model = self._owned(session, user_id, row_id)
        if model is None:
            return None
        for name, value in fields.items():
            setattr(model, name, value)
        model.updated_at = self.clock()  # type: ignore[attr-defined]
        session.flush()
        return model

    def delete(self, session: Session, user_id: str, row_id: int) -> Optional[ModelT]:
        model = self._owned(session, user_id, row_id)
        if model is None:
            return None
        session.delete(model)
        session.flush()
        return model


assessments: OwnedResourceStore[AssessmentModel] = OwnedResourceStore(AssessmentModel, key_fields=())
progress_entries: OwnedResourceStore[ProgressModel] = OwnedResourceStore(
    ProgressModel, key_fields=("user_id", "resource_id")
)
ratings: OwnedResourceStore[RatingModel] = OwnedResourceStore(RatingModel, key_fields=("user_id", "resource_id"))
recommendations: OwnedResourceStore[RecommendationModel] = OwnedResourceStore(RecommendationModel)

__all__ = [
    "OwnedResourceStore",
    "assessments",
    "progress_entries",
    "ratings",
    "recommendations",
]
