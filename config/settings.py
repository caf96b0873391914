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
    APP_ENV: str = Field(default=Environment.DEV.value, validation_alias="APP_ENV")

    # Durable + session stores
    REDIS_URL: str = Field(
        default="redis://localhost:6379/0", validation_alias="REDIS_URL"
    )
    SESSION_REDIS_URL: str = Field(
        default="redis://localhost:6379/1", validation_alias="SESSION_REDIS_URL"
    )
    SESSION_TTL_SECONDS: int = Field(
        default=2 * 60 * 60, validation_alias="SESSION_TTL_SECONDS"
    )
    UPLOAD_EXPIRY_SECONDS: int = Field(
        default=24 * 60 * 60, validation_alias="UPLOAD_EXPIRY_SECONDS"
    )

    # Remote collaborator (PostgREST style project database)
    REMOTE_API_URL: str = Field(
        default="http://localhost:54321", validation_alias="REMOTE_API_URL"
    )
    REMOTE_API_KEY: str = Field(default="", validation_alias="REMOTE_API_KEY")
    REMOTE_TIMEOUT_SECONDS: float = Field(
        default=10.0, validation_alias="REMOTE_TIMEOUT_SECONDS"
    )

    # Sandbox runtime databases
    SANDBOX_DB_DIR: str = Field(
        default=".sandbox/databases", validation_alias="SANDBOX_DB_DIR"
    )

    # Logging knobs
    LOGGER_NAME: str = "vibecoder-workspace"
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
