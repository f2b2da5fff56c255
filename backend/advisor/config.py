import os
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: Optional[str] = Field(None, alias="ADVISOR_DATABASE_URL")
    database_pool_size: int = Field(10, alias="ADVISOR_DATABASE_POOL_SIZE")
    database_max_overflow: int = Field(10, alias="ADVISOR_DATABASE_MAX_OVERFLOW")
    database_echo: bool = Field(False, alias="ADVISOR_DATABASE_ECHO")
    auto_create_schema: bool = Field(False, alias="ADVISOR_AUTO_CREATE_SCHEMA")
    timezone: str = Field("UTC", alias="ADVISOR_TIMEZONE")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"], alias="ADVISOR_CORS_ORIGINS")

    class Config:
        env_file = os.getenv("ENV_FILE", ".env")
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache
def get_settings() -> Settings:
    try:
        return Settings()  # type: ignore[arg-type]
    except ValidationError as exc:
        raise RuntimeError(f"Invalid backend configuration: {exc}") from exc
