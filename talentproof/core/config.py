"""
Application configuration settings.
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal, Self


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Talent Proof API"
    APP_VERSION: str = "3.0.0"
    ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # API
    API_V1_PREFIX: str = "/v1"

    # CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8080",
    ]

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # Session Store
    # Sessions idle longer than this are expired (0 = never expire)
    SESSION_TTL_SECONDS: int = Field(
        default=3600,
        description="Idle lifetime of a quiz session in seconds (0 disables expiry)",
    )
    # Maximum sessions held in memory (0 = unlimited)
    # When the limit is reached the least recently used session is evicted
    SESSION_MAX_ACTIVE: int = Field(
        default=10000,
        description="Maximum number of quiz sessions held in memory (0 = unlimited)",
    )
    SESSION_CLEANUP_INTERVAL_SECONDS: int = 60

    # Question Generation
    # When enabled, question content for a session is drawn from a generator
    # seeded from the user id, so the same user receives the same questions.
    SEEDED_QUESTION_GENERATION: bool = False

    # Evaluation
    ANSWER_VERIFIER: Literal["length_heuristic", "option_match"] = "length_heuristic"
    CHEATING_FLAG_THRESHOLD: float = Field(
        default=0.6,
        ge=0.0,
        le=1.0,
        description="Cheating likelihood above which a submission is flagged",
    )

    # Sentry Error Tracking
    SENTRY_DSN: str = Field(
        default="",
        description="Sentry DSN for error tracking (leave empty to disable)",
    )
    SENTRY_TRACES_SAMPLE_RATE: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Sentry traces sample rate (0.0-1.0, 0.1 = 10% of transactions)",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra fields from .env not defined in Settings
    )

    @model_validator(mode="after")
    def validate_session_limits(self) -> Self:
        """Validate session store limits at startup."""
        if self.SESSION_TTL_SECONDS < 0:
            raise ValueError(
                f"SESSION_TTL_SECONDS must be >= 0, got {self.SESSION_TTL_SECONDS}"
            )
        if self.SESSION_MAX_ACTIVE < 0:
            raise ValueError(
                f"SESSION_MAX_ACTIVE must be >= 0, got {self.SESSION_MAX_ACTIVE}"
            )
        if self.SESSION_CLEANUP_INTERVAL_SECONDS < 1:
            raise ValueError(
                "SESSION_CLEANUP_INTERVAL_SECONDS must be >= 1, "
                f"got {self.SESSION_CLEANUP_INTERVAL_SECONDS}"
            )
        return self


settings = Settings()
