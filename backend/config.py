"""
Question Visualization Engine - Configuration

Pipeline tunables and server settings using Pydantic Settings.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PipelineSettings(BaseSettings):
    """Question-to-visualization pipeline configuration."""

    model_config = SettingsConfigDict(env_prefix="PIPELINE_")

    # Chart selection
    network_min_rows: int = Field(
        default=20,
        description="Row count above which a network chart is preferred"
    )

    # Network builder
    network_edge_threshold: float = Field(
        default=5.0,
        description="Minimum relationship strength (0-10) for an edge"
    )
    network_edge_window: int = Field(
        default=3,
        description="Number of following nodes each node may connect to"
    )
    network_seed: Optional[int] = Field(
        default=None,
        description="Seed for the edge strength generator (None = random)"
    )

    # Chart insights
    concentration_threshold: float = Field(
        default=80.0,
        description="Top-3 share (percent) reported as high concentration"
    )
    volatility_ratio: float = Field(
        default=0.1,
        description="Mean step size, as a fraction of the range, flagged as volatile"
    )
    outlier_std_multiplier: float = Field(
        default=2.0,
        description="Standard deviations from the mean for scatter outliers"
    )

    # Business impact
    financial_impact_coefficient: float = Field(
        default=0.1,
        description="Multiplier applied to points x average for the impact estimate"
    )
    high_priority_confidence: float = Field(
        default=0.7,
        description="Confidence above which any intent is high priority"
    )


class CacheSettings(BaseSettings):
    """Caching configuration."""

    model_config = SettingsConfigDict(env_prefix="CACHE_")

    enabled: bool = Field(default=True, description="Enable caching")
    max_size: int = Field(default=128, description="LRU cache max size")
    ttl_seconds: int = Field(default=3600, description="Cache TTL in seconds")


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Application
    app_name: str = "Question Visualization Engine"
    app_version: str = "1.0.0"
    debug: bool = Field(default=False, description="Debug mode")

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")

    # Session
    session_ttl_hours: int = Field(
        default=24,
        description="Analytics session time-to-live in hours"
    )

    # Logging
    log_dir: str = Field(default="logs", description="Directory for log files")
    log_level: str = Field(default="DEBUG", description="Minimum log level")

    # Nested settings
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
