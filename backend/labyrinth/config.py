"""Application configuration using Pydantic settings."""

import os
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root directory (backend/)
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Labyrinth Engine"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # CORS - comma-separated list of allowed origins
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:5173"

    # Rate limiting
    rate_limit_requests: int = 60  # generation/solve requests per minute

    # Maze dimensions
    min_dimension: int = 3
    max_dimension: int = 101

    # Default algorithms
    default_generation_algorithm: str = "recursive"
    default_pathfinding_algorithm: str = "astar"

    # Wilson's algorithm iteration caps, multiplied by width * height
    wilson_walk_factor: int = 100
    wilson_iteration_factor: int = 10

    # Trace responses
    max_trace_steps: int = 5000

    @field_validator("min_dimension")
    @classmethod
    def validate_min_dimension(cls, v: int) -> int:
        """A maze needs at least one interior cell."""
        if v < 3:
            raise ValueError("MIN_DIMENSION must be at least 3")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid LOG_LEVEL '{v}'")
        return level

    @model_validator(mode="after")
    def validate_dimension_range(self) -> "Settings":
        """Ensure the dimension range is not empty."""
        if self.max_dimension < self.min_dimension:
            raise ValueError("MAX_DIMENSION must not be below MIN_DIMENSION")
        return self

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        if self.debug:
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
