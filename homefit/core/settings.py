"""Application settings with environment variable support.

Uses pydantic-settings for typed configuration validation.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """Application configuration loaded from environment variables."""

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    json_logs: bool = Field(default=False, description="Render logs as JSON lines")
    log_file: str | None = Field(default=None, description="Optional rotating log file")

    # Affordability solver
    solver_iterations: int = Field(default=50, ge=1, le=200, description="Binary search iterations")
    solver_max_price: float = Field(default=5_000_000.0, gt=0, description="Upper price bracket")
    optimizer_max_price: float = Field(
        default=10_000_000.0, gt=0, description="Upper price bracket for the down-payment sweep"
    )

    # Metrics
    projection_years: int = Field(default=10, ge=1, le=40)
    max_back_end_dti: float = Field(default=0.43, gt=0, lt=1)

    # Persistence
    state_file: str = Field(default="homefit_state.json", description="Session state JSON path")

    model_config = {
        "env_prefix": "HOMEFIT_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> AppSettings:
    """Get cached application settings."""
    return AppSettings()
