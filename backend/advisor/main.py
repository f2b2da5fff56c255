import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from .config import Settings, get_settings
from .db.base import Base
from .db.monitoring import get_pool_snapshot
from .db.session import dispose_engine, get_engine
from .errors import install_error_handlers
from .logging_config import configure_logging
from .routes import ROUTERS


configure_logging()
logger = logging.getLogger(__name__)

settings_snapshot = get_settings()
logger.info("Backend starting with database configured: %s", bool(settings_snapshot.database_url))
logger.info("Calendar days resolved in timezone: %s", settings_snapshot.timezone)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    if settings.auto_create_schema:
        logger.info("Creating database schema (ADVISOR_AUTO_CREATE_SCHEMA=1)")
        Base.metadata.create_all(get_engine())
    try:
        yield
    finally:
        dispose_engine()


app = FastAPI(title="Skills & Career Advisor Backend", version="0.1.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings_snapshot.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
install_error_handlers(app)
for router in ROUTERS:
    app.include_router(router)


@app.get("/healthz")
def health(settings: Settings = Depends(get_settings)) -> Dict[str, str]:
    return {"status": "ok", "timezone": settings.timezone}


@app.get("/healthz/database")
def database_health() -> Dict[str, Any]:
    try:
        engine = get_engine()
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except Exception as exc:  # noqa: BLE001
        logger.warning("Database health check failed: %s", exc)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return {
        "status": "ok",
        "pool": get_pool_snapshot(engine),
        "persistence_mode": "database",
    }
