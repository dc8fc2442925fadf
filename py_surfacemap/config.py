"""Configuration management."""

import logging
from typing import Optional

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SURFACEMAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(
        default="json", description="Logging format (json or console)"
    )

    # Map generation
    default_resolution: int = Field(
        default=180, ge=1, description="Default vertical resolution of weather maps"
    )
    max_resolution: int = Field(
        default=4096, ge=1, description="Max allowed vertical resolution"
    )
    strict_projection_check: bool = Field(
        default=True,
        description="Reject source rasters projected with different parameters",
    )


settings = Settings()


def configure_logging(config: Optional[Settings] = None) -> None:
    """Install the structlog pipeline used by the library."""
    config = config or settings

    level = getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger().setLevel(level)

    if config.log_format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
