"""Application settings and configuration."""

from typing import Literal

from pydantic import Field, model_validator  # type: ignore
from pydantic_settings import BaseSettings, SettingsConfigDict  # type: ignore

DEFAULT_DATABASE_URL = "sqlite:///./quizbank.db"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    ENV: Literal["dev", "staging", "prod", "test"] = Field(default="dev")
    PROJECT_NAME: str = Field(default="Quiz Bank API")

    # API
    API_PREFIX: str = Field(default="/v1")

    # Database
    DATABASE_URL: str = Field(default=DEFAULT_DATABASE_URL)

    # CORS - Accept string or list, will be normalized to list
    CORS_ORIGINS: str | list[str] = Field(default="http://localhost:3000,http://localhost:5173")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")

    # Categories
    CATEGORY_ALIASES: dict[str, str] = Field(
        default={
            "Koalatest": "Hundeführerschein",
            "Hundetrainer Testfragen": "Trainerprüfung",
        }
    )  # Legacy label -> canonical label, applied on import

    # CSV import
    IMPORT_MAX_UPLOAD_BYTES: int = Field(default=5 * 1024 * 1024)  # 5 MB
    IMPORT_ENCODING: str = Field(default="utf-8-sig")  # Tolerates a BOM from spreadsheet exports

    # Quiz sessions
    QUIZ_DEFAULT_TIME_LIMIT_SECONDS: int = Field(default=0, ge=0)  # 0 = untimed
    QUIZ_TICK_SECONDS: float = Field(default=1.0, gt=0)
    QUIZ_LOW_TIME_THRESHOLD_SECONDS: int = Field(default=300)  # 5 minutes
    QUIZ_MAX_QUESTIONS: int = Field(default=200)
    QUIZ_RESULT_RETENTION_SECONDS: int = Field(default=900, gt=0)  # Unread results are dropped after this
    QUIZ_IDLE_TIMEOUT_SECONDS: int = Field(default=3600, gt=0)  # Unfinished sessions idle this long (plus their time limit) are dropped

    @model_validator(mode="before")
    @classmethod
    def parse_cors_origins(cls, data):
        """Parse CORS_ORIGINS from comma-separated string or list."""
        if isinstance(data, dict) and "CORS_ORIGINS" in data:
            cors_origins = data["CORS_ORIGINS"]
            if isinstance(cors_origins, str):
                data["CORS_ORIGINS"] = [
                    origin.strip() for origin in cors_origins.split(",") if origin.strip()
                ]
        return data

    def __init__(self, **kwargs):
        """Validate settings on initialization."""
        super().__init__(**kwargs)
        # Ensure CORS_ORIGINS is a list after initialization (env values bypass the validator)
        if isinstance(self.CORS_ORIGINS, str):
            object.__setattr__(
                self,
                "CORS_ORIGINS",
                [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()],
            )
        # Fail fast in production if critical vars are missing
        if self.ENV == "prod":
            if not self.DATABASE_URL or self.DATABASE_URL == DEFAULT_DATABASE_URL:
                raise ValueError("DATABASE_URL must be set in production")


# Global settings instance
settings = Settings()
