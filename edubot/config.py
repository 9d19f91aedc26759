from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    DB_BACKEND: str = "firebase"  # firebase / sqlite
    FIREBASE_DATABASE_URL: str = "https://edubot-49076-default-rtdb.asia-southeast1.firebasedatabase.app"
    FIREBASE_AUTH_TOKEN: str | None = None  # database secret or ID token, sent as ?auth=
    SQLITE_PATH: str = "./data/schools.db"

    GROQ_API_KEY: str | None = None
    GROQ_BASE_URL: str = "https://api.groq.com/openai/v1"
    GROQ_MODEL: str = "llama-3.1-8b-instant"
    HTTP_TIMEOUT_SECONDS: float = 30.0

    # Recommendation policy
    RECOMMEND_MIN_SCORE: int = 30
    SCORE_WEIGHTS: str = ""  # e.g. "class:30,location:20", empty = built-in weights

    UPLOAD_DIR: str = "./uploads"
    UPLOAD_MAX_BYTES: int = 10 * 1024 * 1024
    STATIC_DIR: str = "./static"

    CORS_ORIGINS: str = "*"  # Comma-separated origins, empty = same-origin only
    PORT: int = 4000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()
