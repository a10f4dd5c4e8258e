"""Error handling and logging configuration."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ErrorHandlingSettings(BaseSettings):
    """Settings read from ``ERRORCORE_*`` environment variables.

    Attributes:
        include_error_id: Expose the correlation id in failure responses.
        log_level: Logging level for the structured logger.
        service_name: Service name stamped on every log entry.
        json_logs: Render logs as JSON instead of the console format.
    """

    model_config = SettingsConfigDict(env_prefix="ERRORCORE_", extra="ignore")

    include_error_id: bool = Field(
        default=True,
        description="Include the error id in responses for log correlation",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    service_name: str = Field(
        default="errorcore",
        description="Service name added to structured log entries",
        min_length=1,
    )
    json_logs: bool = Field(
        default=True,
        description="Render log entries as JSON",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalizes the log level and rejects unknown names.

        Raises:
            ValueError: If the level is not a standard logging level name.
        """
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level


@lru_cache(maxsize=None)
def get_settings() -> ErrorHandlingSettings:
    """Returns the cached settings instance."""
    return ErrorHandlingSettings()
