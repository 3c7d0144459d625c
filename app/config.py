# app/config.py
from pydantic_settings import BaseSettings
from typing import List
from pydantic import Field

class Settings(BaseSettings):
    APP_NAME: str = Field("Planner API")
    APP_VERSION: str = Field("1.0")
    LOG_LEVEL: str = Field("INFO")

    SECRET_KEY: str = Field("change-me-in-production")
    ALGORITHM: str = Field("HS256")

    # Server-side sessions, referenced by a signed HTTP-only cookie
    SESSION_COOKIE_NAME: str = Field("planner_session")
    SESSION_EXPIRE_DAYS: int = Field(1)
    SESSION_COOKIE_SECURE: bool = Field(False)

    DATABASE_URL: str = Field("sqlite+aiosqlite:///./planner.db")
    DATABASE_ECHO: bool = Field(False)

    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])

    model_config = {
        "env_file": ".env",
        "extra": "allow",
    }

    @property
    def effective_database_url(self) -> str:
        url = self.DATABASE_URL
        # Ensure asyncpg is used
        if url.startswith("postgresql://") and "+asyncpg" not in url:
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    @property
    def is_sqlite(self) -> bool:
        return self.effective_database_url.startswith("sqlite")

settings = Settings()
