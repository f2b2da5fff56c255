"""Demo data: a small resource catalog and one fully populated demo account."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .db.models import AuthSessionModel, ResourceModel, UserModel
from .repositories import profiles, progress_entries, ratings, streaks, tasks

logger = logging.getLogger(__name__)

DEMO_USER_ID = "demo-user-123"
DEMO_USER_NAME = "Alex Johnson"
DEMO_USER_EMAIL = "alex.johnson@example.com"
DEMO_TOKEN = "demo-token"


@dataclass(frozen=True)
class CatalogEntry:
    title: str
    url: str
    type: str
    tags: tuple[str, ...]
    locale: str = "en"


CATALOG: tuple[CatalogEntry, ...] = (
    CatalogEntry("Complete Web Developer Course", "https://cs50.harvard.edu/web/", "course", ("tech", "web-development")),
    CatalogEntry("React Documentation", "https://react.dev/learn", "article", ("tech", "frontend")),
    CatalogEntry("Clean Code", "https://www.oreilly.com/library/view/clean-code/9780136083238/", "book", ("tech",)),
    CatalogEntry("SQL Tutorial", "https://www.sqltutorial.org/", "article", ("analysis", "sql")),
    CatalogEntry("Data Visualization", "https://www.tableau.com/learn/training", "video", ("analysis", "data")),
    CatalogEntry(
        "Design Basics",
        "https://www.coursera.org/specializations/graphic-design",
        "course",
        ("creativity", "design"),
    ),
    CatalogEntry(
        "Situational Leadership",
        "https://www.coursera.org/learn/leadership-skills",
        "course",
        ("leadership",),
    ),
    CatalogEntry("Crucial Conversations", "https://www.vitalsmarts.com/", "book", ("communication", "leadership")),
)

DEMO_SKILLS = {"tech": 8, "analysis": 6, "communication": 7, "leadership": 5, "creativity": 7}
DEMO_INTERESTS = ["web-development", "data-science", "project-management", "entrepreneurship", "machine-learning"]
DEMO_PROFILE = {
    "strengths": ["technical skills", "problem solving", "analytical thinking"],
    "weaknesses": ["public speaking", "time management"],
    "career_match": "Software Developer",
}
DEMO_TASKS = (
    ("Complete Advanced JavaScript Tutorial", "tech", True),
    ("Practice System Design", "analysis", True),
    ("Update Resume on LinkedIn", "communication", False),
    ("Write Technical Blog Post", "communication", False),
    ("Prepare for Mock Interview", "analysis", False),
)
DEMO_PROGRESS = ((0, 75), (1, 100), (2, 30))
DEMO_RATINGS = (
    (0, 5, "Excellent course with hands-on projects. Really helped me understand modern web development."),
    (1, 4, "Great documentation, comprehensive but sometimes overwhelming for beginners."),
    (2, 5, "Timeless principles that every developer should know. Changed my approach to coding."),
)
DEMO_STREAK_DAYS = 15


def seed_catalog(session: Session) -> List[ResourceModel]:
    """Insert the catalog when the resources table is empty."""
    existing = session.execute(select(func.count()).select_from(ResourceModel)).scalar_one()
    if existing:
        logger.info("Resource catalog already holds %d entries; skipping", existing)
        return list(session.execute(select(ResourceModel).order_by(ResourceModel.id)).scalars().all())

    models = [
        ResourceModel(
            title=entry.title,
            url=entry.url,
            type=entry.type,
            tags=json.dumps(list(entry.tags)),
            locale=entry.locale,
        )
        for entry in CATALOG
    ]
    session.add_all(models)
    session.flush()
    logger.info("Seeded %d catalog resources", len(models))
    return models


def seed_demo_user(
    session: Session,
    *,
    token: str = DEMO_TOKEN,
    today: Optional[date] = None,
    token_ttl: Optional[timedelta] = None,
) -> UserModel:
    """Create the demo account with a session token and sample owned rows.

    Re-running only refreshes the session token.
    """
    today = today or datetime.now(timezone.utc).date()
    user = session.get(UserModel, DEMO_USER_ID)
    created = user is None
    if user is None:
        user = UserModel(id=DEMO_USER_ID, name=DEMO_USER_NAME, email=DEMO_USER_EMAIL)
        session.add(user)
        session.flush()

    expires_at = datetime.now(timezone.utc) + token_ttl if token_ttl else None
    auth_session = session.execute(
        select(AuthSessionModel).where(AuthSessionModel.token == token)
    ).scalar_one_or_none()
    if auth_session is None:
        session.add(AuthSessionModel(token=token, user_id=user.id, expires_at=expires_at))
    else:
        auth_session.user_id = user.id
        auth_session.expires_at = expires_at

    if not created:
        logger.info("Demo user %s already present; refreshed session token", DEMO_USER_ID)
        session.flush()
        return user

    catalog = seed_catalog(session)
    profile = profiles.fetch_or_create(session, user.id, name=DEMO_USER_NAME)
    profiles.apply_updates(
        session,
        user.id,
        {"skills": DEMO_SKILLS, "interests": DEMO_INTERESTS, "profile": DEMO_PROFILE, "language": "en"},
    )
    streak = streaks.fetch_or_create(session, user.id)
    streak.current_streak = DEMO_STREAK_DAYS
    streak.last_active_date = today - timedelta(days=1)

    tasks.create_many(
        session,
        user.id,
        [
            {"label": label, "skill": skill, "done": done, "due_date": today + timedelta(days=index)}
            for index, (label, skill, done) in enumerate(DEMO_TASKS)
        ],
    )
    for index, completion in DEMO_PROGRESS:
        if index < len(catalog):
            progress_entries.upsert(session, user.id, {"completion": completion}, secondary_key=catalog[index].id)
    for index, score, comment in DEMO_RATINGS:
        if index < len(catalog):
            ratings.upsert(session, user.id, {"rating": score, "comment": comment}, secondary_key=catalog[index].id)

    session.flush()
    logger.info("Seeded demo user %s (profile id %s)", user.id, profile.id)
    return user


__all__ = [
    "CATALOG",
    "DEMO_TOKEN",
    "DEMO_USER_ID",
    "seed_catalog",
    "seed_demo_user",
]
