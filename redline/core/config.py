"""
Redline Configuration
Pydantic Settings for environment-based configuration.
Single source of truth for all app settings.
"""

from functools import lru_cache
from typing import Any, Dict

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Use .env file for local development, env vars for production.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # App Identity
    # ==========================================================================
    app_name: str = "Redline"
    app_version: str = "1.0.0"
    app_description: str = """
## Redline - Legal Document Comparison

Compares two versions of a contract paragraph by paragraph, classifies every
change by type and legal risk, and produces clause-level and document-level
risk summaries together with an HTML redline.
"""
    debug: bool = False
    enable_docs: bool = True

    # ==========================================================================
    # Server
    # ==========================================================================
    host: str = "0.0.0.0"
    port: int = 8000

    # ==========================================================================
    # Comparison Engine
    # ==========================================================================
    match_threshold: float = 0.6  # Minimum similarity for a "modified" pair
    near_identical_threshold: float = 0.95  # Minimum similarity for a "formatting" pair
    detect_moves: bool = False  # Reclassify out-of-order near-identical pairs as "moved"

    # Request limits (the engine itself never aborts)
    max_document_chars: int = 500_000
    max_batch_size: int = 20
    comparison_timeout_seconds: float = 30.0

    @field_validator("match_threshold", "near_identical_threshold")
    @classmethod
    def check_threshold_range(cls, v: float) -> float:
        """Similarity thresholds live in (0, 1]."""
        if not 0.0 < v <= 1.0:
            raise ValueError("similarity thresholds must be in (0, 1]")
        return v

    @model_validator(mode="after")
    def check_threshold_order(self) -> "Settings":
        if self.near_identical_threshold < self.match_threshold:
            raise ValueError("near_identical_threshold must be >= match_threshold")
        return self

    # ==========================================================================
    # Observability
    # ==========================================================================
    log_level: str = "INFO"
    log_json_format: bool = False
    log_file: str = ""  # Empty = console only

    # ==========================================================================
    # Deployment
    # ==========================================================================
    cors_origins: str = ""  # Comma-separated list of allowed origins. Leave empty for secure defaults.

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS origins into a list with secure defaults.
        - If explicit origins set: use those
        - If empty: restrict to localhost only
        """
        if self.cors_origins:
            if self.cors_origins == "*":
                return ["*"]
            return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

        return [
            "http://localhost:8000",
            "http://127.0.0.1:8000",
            "http://localhost:3000",  # Common frontend dev port
            "http://127.0.0.1:3000",
        ]

    def engine_config(self) -> Dict[str, Any]:
        """Configuration dict consumed by RedlineEngine."""
        return {
            "match_threshold": self.match_threshold,
            "near_identical_threshold": self.near_identical_threshold,
            "detect_moves": self.detect_moves,
        }


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Use dependency injection: Depends(get_settings)
    """
    return Settings()
