"""REST routers mounted by :mod:`advisor.main`."""

from .assessment_routes import router as assessment_router
from .career_routes import router as career_router
from .chat_routes import router as chat_router
from .profile_routes import router as profile_router
from .progress_routes import router as progress_router
from .quiz_routes import router as quiz_router
from .rating_routes import router as rating_router
from .recommendation_routes import router as recommendation_router
from .resource_routes import router as resource_router
from .streak_routes import router as streak_router
from .task_routes import router as task_router

ROUTERS = (
    assessment_router,
    profile_router,
    progress_router,
    rating_router,
    recommendation_router,
    resource_router,
    streak_router,
    task_router,
    quiz_router,
    career_router,
    chat_router,
)

__all__ = ["ROUTERS"]
