import logging
import sys
from functools import lru_cache

from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App config
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]
    DEBUG: bool = False

    # AI config
    AI_TIME_BUDGET_MS: int = 230

    # Match registry config
    MATCH_MAX_AGE_SECONDS: int = 18000
    MATCH_CLEANUP_INTERVAL_SECONDS: int = 300
    DEFAULT_SEED: int | None = None

    @field_validator("AI_TIME_BUDGET_MS")
    @classmethod
    def validate_ai_budget(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("AI_TIME_BUDGET_MS must be positive")
        return v

    @field_validator("MATCH_MAX_AGE_SECONDS", "MATCH_CLEANUP_INTERVAL_SECONDS")
    @classmethod
    def validate_positive_seconds(cls, v: int, info: ValidationInfo) -> int:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be positive")
        return v


def configure_logging(debug: bool = False) -> None:
    """Configure logging for the application."""
    log_level = logging.DEBUG if debug else logging.INFO
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    configure_logging(settings.DEBUG)
    logger.info("Settings loaded successfully")
    logger.debug("AI time budget: %dms", settings.AI_TIME_BUDGET_MS)
    logger.debug("Match max age: %ds", settings.MATCH_MAX_AGE_SECONDS)
    logger.debug("Match cleanup interval: %ds", settings.MATCH_CLEANUP_INTERVAL_SECONDS)
    return settings
