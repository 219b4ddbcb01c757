import os
from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_database_url() -> str:
    """Get database URL, using an absolute path for the local SQLite fallback.

    SQLite is for local development only. Set DATABASE_URL to a PostgreSQL
    connection string in any shared environment.
    """
    db_url = os.getenv("DATABASE_URL", "")
    if db_url:
        logger.info(f"Using DATABASE_URL from environment: {db_url}")
        return db_url

    db_path = Path(__file__).parent.parent.parent / "mentor.db"
    db_url = f"sqlite:///{db_path.resolve()}"
    logger.warning(f"Using SQLite database (LOCAL DEV ONLY): {db_url}")
    return db_url


class Settings(BaseSettings):
    database_url: str = Field(
        default_factory=get_database_url,
        validation_alias="DATABASE_URL",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="LOG_FILE")
    log_module_levels: dict[str, str] = Field(
        default_factory=dict,
        validation_alias="LOG_MODULE_LEVELS",
        description='Per-module log levels as JSON, e.g. {"mentor.plans": "DEBUG"}',
    )
    preview_completion_threshold: int = Field(
        default=80,
        ge=0,
        le=100,
        validation_alias="PREVIEW_COMPLETION_THRESHOLD",
        description="Collected-profile percentage at which the plan preview is generated",
    )

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(sorted(valid_levels))}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("log_module_levels")
    @classmethod
    def validate_log_module_levels(cls, value: dict[str, str]) -> dict[str, str]:
        """Drop per-module overrides with an unknown level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        levels = {}
        for module, level in value.items():
            if level.upper() not in valid_levels:
                logger.warning(f"Ignoring LOG_MODULE_LEVELS entry {module}={level}: unknown level")
                continue
            levels[module] = level.upper()
        return levels


settings = Settings()
