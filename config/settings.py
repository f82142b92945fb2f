# config/settings.py
import os
import sys
from dotenv import load_dotenv
from pydantic import ValidationError, Field
from pydantic_settings import BaseSettings
from util.enums import Environment
import logging


if os.getenv("APP_ENV", Environment.DEV) == Environment.DEV:
    load_dotenv()

_log = logging.getLogger("config.settings")


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field(..., validation_alias="APP_ENV")
    REDIS_URL: str = Field(..., validation_alias="REDIS_URL")
    PUBLIC_BASE_URL: str = Field(
        default="http://127.0.0.1:8000", validation_alias="PUBLIC_BASE_URL"
    )

    # CORS & Limits
    ALLOWED_ORIGIN: str = Field(..., validation_alias="ALLOWED_ORIGIN")
    RATE_LIMIT_TIMES: int = Field(..., validation_alias="RATE_LIMIT_TIMES")
    RATE_LIMIT_SECONDS: int = Field(..., validation_alias="RATE_LIMIT_SECONDS")
    MAX_FILE_MB: int = Field(..., validation_alias="MAX_FILE_MB")
    TRUST_PROXY: bool = Field(..., validation_alias="TRUST_PROXY")

    # Admin auth
    ADMIN_EMAIL: str = Field(..., validation_alias="ADMIN_EMAIL")
    ADMIN_PASSWORD: str = Field(..., validation_alias="ADMIN_PASSWORD")
    SESSION_TTL_SECONDS: int = Field(
        default=60 * 60 * 8, validation_alias="SESSION_TTL_SECONDS"
    )

    # Private area
    PRIVATE_ACCESS_PASSWORD: str = Field(
        ..., validation_alias="PRIVATE_ACCESS_PASSWORD"
    )

    # Storage
    MEDIA_BUCKET: str = "portfolio"

    # Gallery knobs
    STAR_LIMIT: int = Field(default=12, validation_alias="STAR_LIMIT")
    POPULAR_ITEMS_LIMIT: int = Field(default=12, validation_alias="POPULAR_ITEMS_LIMIT")
    ITEM_SEARCH_THRESHOLD: float = 0.4
    TAG_MATCH_THRESHOLD: float = 0.6
    TAG_SUGGEST_THRESHOLD: float = 0.5
    TOP_CLICKED_ITEMS: int = 10

    # Achievements
    MILLION_VIEWS_LABEL: str = "Views Generated"

    # Logging knobs
    LOGGER_NAME: str = "portfolio-cms"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_TO_FILE: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    LOG_DIR: str = Field(default="logs", validation_alias="LOG_DIR")
    LOG_FILE_NAME: str = Field(default="app.log", validation_alias="LOG_FILE_NAME")
    LOG_MAX_BYTES: int = Field(
        default=50 * 1024 * 1024, validation_alias="LOG_MAX_BYTES"
    )
    LOG_BACKUP_COUNT: int = Field(default=5, validation_alias="LOG_BACKUP_COUNT")


try:
    settings = Settings()
except ValidationError as e:
    print("❌ Missing/invalid environment variables:", file=sys.stderr)
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", []))
        msg = err.get("msg", "")
        print(f" - {loc}: {msg}", file=sys.stderr)
    sys.exit(1)
except Exception as e:
    print(f"❌ Settings initialization failed: {e}", file=sys.stderr)
    sys.exit(1)
