"""Application configuration."""
from pydantic_settings import BaseSettings
from typing import List
import os


class Settings(BaseSettings):
    """Application settings.

    Non-sensitive configuration is defined here with sensible defaults.
    Secrets (passwords, keys) are loaded from environment variables.

    Priority: Environment variables > .env file > defaults defined here
    """

    # App Configuration
    APP_NAME: str = "ClusterDeck"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True  # Default to True for development
    LOG_LEVEL: str = "info"

    # Database Configuration
    # "sqlite" for local/bootstrap use, "postgres" for deployments
    DB_DRIVER: str = "sqlite"
    SQLITE_PATH: str = "clusterdeck.db"
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "clusterdeck"
    DB_USER: str = "clusterdeck"
    DB_PASSWORD: str = ""  # MUST be set via POSTGRES_PASSWORD env var for postgres

    @property
    def DATABASE_URL(self) -> str:
        """Construct database URL from components."""
        if self.DB_DRIVER == "postgres":
            password = os.getenv("POSTGRES_PASSWORD", self.DB_PASSWORD)
            return f"postgresql+asyncpg://{self.DB_USER}:{password}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        return f"sqlite+aiosqlite:///{self.SQLITE_PATH}"

    # Auth Configuration
    # When disabled every request acts as the system user
    AUTH_ENABLED: bool = False
    JWT_SECRET: str = ""  # MUST be set via env var when AUTH_ENABLED
    JWT_ALGORITHM: str = "HS256"
    SYSTEM_USER_ID: int = 1

    # CORS Configuration
    CORS_ORIGINS: List[str] = [
        "http://localhost:3001",
        "http://localhost:3000",
    ]

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
