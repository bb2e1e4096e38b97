from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from the environment or a local .env file."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    PROJECT_NAME: str = "Quizboard"
    API_VERSION: str = "1.0.0"
    ENV: str = "development"
    FRONTEND_URL: str = "http://localhost:8081"
    LOG_LEVEL: str = "INFO"

    # database
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "quizboard"
    DATABASE_URL: Optional[str] = Field(default=None, description="Overrides the POSTGRES_* settings when set")

    # identity provider tokens
    SECRET_KEY: str = Field(..., description="Shared secret used to verify identity tokens")
    ALGORITHM: str = "HS256"

    # admin allow-lists, JSON encoded in the environment
    ADMIN_USER_IDS: List[str] = Field(default_factory=list)
    ADMIN_EMAILS: List[str] = Field(default_factory=list)


settings = Settings()
