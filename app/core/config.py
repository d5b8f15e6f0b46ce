from typing import List, Optional
from urllib.parse import urlparse

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # FastAPI Configuration
    PROJECT_NAME: str = "Exercise Tracker API"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # Server Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # MongoDB Configuration
    MONGO_URI: str = Field(
        default="mongodb://localhost:27017/exercise-tracker",
        description="MongoDB connection string",
    )
    MONGO_DB_NAME: Optional[str] = Field(
        default=None,
        description="Database name (defaults to the database named in MONGO_URI)",
    )
    MONGO_SERVER_SELECTION_TIMEOUT_MS: int = Field(
        default=5000,
        description="How long the driver waits to find a usable server",
    )
    MONGO_ENSURE_INDEXES: bool = Field(
        default=True, description="Create collection indexes on startup"
    )

    # Static page
    STATIC_DIR: Optional[str] = None

    # CORS Settings
    CORS_ORIGINS: List[str] = ["*"]
    CORS_METHODS: List[str] = ["GET", "POST", "OPTIONS"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from comma-separated string or JSON array."""
        if isinstance(v, str) and not v.startswith("["):
            return [x.strip() for x in v.split(",") if x.strip()]
        return v

    # Logging Configuration
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # json or text

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def mongo_database_name(self) -> str:
        """Resolve the database name from settings or the connection string."""
        if self.MONGO_DB_NAME:
            return self.MONGO_DB_NAME

        path = urlparse(self.MONGO_URI).path.lstrip("/")
        return path or "exercise-tracker"

    @property
    def is_development(self) -> bool:
        """Check if the application is running in development mode."""
        return self.ENVIRONMENT.lower() in ["development", "dev", "local"]

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production mode."""
        return self.ENVIRONMENT.lower() in ["production", "prod"]


# Global settings instance
settings = Settings()
