"""
Settings for the venue menu service, read from the environment and `.env`.
"""
from typing import List
import secrets

from pydantic import Field
from pydantic_settings import BaseSettings

SQLITE_PREFIX = "sqlite:///"


class Settings(BaseSettings):
    APP_NAME: str = "Venue Menu Service"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # Auth. A random key means tokens die with the process; set one in .env.
    SECRET_KEY: str = secrets.token_urlsafe(32)
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(15, gt=0)
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(7, gt=0)

    # SQLite only; the path part of the URL is handed to sqlite3.connect.
    DATABASE_URL: str = SQLITE_PREFIX + "./venue_menu/venue_menu.db"
    DB_BUSY_TIMEOUT_SECONDS: float = Field(5.0, gt=0)

    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    LOG_LEVEL: str = "INFO"
    LOG_LEVELS: str = "TRACE,ERROR,WARNING,INFO"
    # Empty string: console logging only.
    LOG_FILE_PATH: str = "./venue_menu/logs/app.log"

    # Extra attempts when a concurrent append takes the same display order.
    ORDER_CONFLICT_RETRIES: int = Field(3, ge=0)
    # Reject reorder lists that are not exactly one persisted sibling group.
    STRICT_REORDER: bool = False

    SEED_DEMO_DATA: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True

    @property
    def database_path(self) -> str:
        if not self.DATABASE_URL.startswith(SQLITE_PREFIX):
            raise ValueError(f"Unsupported DATABASE_URL {self.DATABASE_URL!r}")
        return self.DATABASE_URL[len(SQLITE_PREFIX):]


settings = Settings()
