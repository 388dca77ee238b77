# krishi_trends/config/settings.py
#
# Centralized Application Configuration
# This file defines the entire application's configuration using Pydantic for
# validation and type safety. It loads settings from environment variables or
# a .env file, so thresholds can be tuned per deployment without code changes.

import logging
from pathlib import Path
from typing import List, Literal

from pydantic import BaseModel, Field, model_validator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Logger for Settings Module ---
settings_logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# 1. NESTED CONFIGURATION MODELS
# -----------------------------------------------------------------------------

class AppConfig(BaseModel):
    """Core application metadata and operational settings."""
    name: str = "Krishi Disease Trends"
    version: str = "1.0.0"
    organization_name: str = "Krishi Sahayak"

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: str = "%(asctime)s - %(name)s.%(funcName)s - %(levelname)s - %(message)s"
    log_date_format: str = "%Y-%m-%d %H:%M:%S"
    default_locale: Literal["en", "ne"] = "en"

class DirectoryConfig(BaseModel):
    """Key directory paths. Relative defaults resolve against the working directory."""
    data_sources: Path = Field(default_factory=lambda: Path.cwd() / "data_sources")

class ThresholdConfig(BaseModel):
    """
    Heuristic thresholds for disease trend classification and risk scoring.
    These are tunable operating points, not calibrated epidemiological values.
    """
    min_detections: int = Field(default=3, ge=1)
    min_weekly_buckets: int = Field(default=2, ge=2)
    trend_slope_threshold: float = Field(default=0.5, ge=0)   # cases/week
    recent_weeks: int = Field(default=2, ge=1)
    high_risk_recent_count: int = Field(default=5, ge=0)
    medium_risk_recent_count: int = Field(default=3, ge=0)
    severity_escalation_ratio: float = Field(default=0.5, ge=0, le=1)
    confidence_offset: float = Field(default=0.3, ge=0, le=1)
    confidence_floor: float = Field(default=0.6, ge=0, le=1)
    confidence_ceiling: float = Field(default=0.95, ge=0, le=1)
    projection_weeks: int = Field(default=2, ge=1)

    @model_validator(mode='after')
    def check_confidence_range(self) -> 'ThresholdConfig':
        if self.confidence_floor > self.confidence_ceiling:
            raise ValueError("confidence_floor must not exceed confidence_ceiling")
        return self

class ForecastConfig(BaseModel):
    """Window sizes for the aggregate detection-volume forecast."""
    history_days: int = Field(default=14, ge=2)
    min_history_days: int = Field(default=7, ge=2)
    horizon_days: int = Field(default=7, ge=1)

# -----------------------------------------------------------------------------
# 2. MAIN SETTINGS CLASS
# -----------------------------------------------------------------------------

class Settings(BaseSettings):
    """
    Main settings class for the disease trends application.
    Aggregates all configuration models and loads from environment variables.
    """
    model_config = SettingsConfigDict(
        env_prefix='KRISHI_',
        case_sensitive=False,
        env_nested_delimiter='__',
        env_file=".env",
        extra='ignore'
    )

    # --- Nested Configuration Models ---
    app: AppConfig = Field(default_factory=AppConfig)
    directories: DirectoryConfig = Field(default_factory=DirectoryConfig)
    thresholds: ThresholdConfig = Field(default_factory=ThresholdConfig)
    forecast: ForecastConfig = Field(default_factory=ForecastConfig)

    # --- Data Source Paths (relative to directories.data_sources) ---
    detections_path: Path = Path("disease_detections.csv")
    farmer_profiles_path: Path = Path("farmer_profiles.csv")

    # --- Analysis Window & Reporting ---
    lookback_options: List[int] = [30, 60, 90]
    default_lookback_days: int = 30
    frequency_top_n: int = 10
    district_top_n: int = 8

    @computed_field
    @property
    def report_title(self) -> str:
        """Title stamped on generated JSON reports."""
        return f"{self.app.name} v{self.app.version} ({self.app.organization_name})"

# -----------------------------------------------------------------------------
# 3. SINGLETON INSTANCE
# -----------------------------------------------------------------------------

try:
    settings = Settings()
    settings_logger.info(
        f"Settings loaded for '{settings.app.name}' v{settings.app.version}. "
        f"LOG_LEVEL={settings.app.log_level}. DATA_SOURCES='{settings.directories.data_sources}'"
    )
except Exception as e:
    settings_logger.critical(f"FATAL: Could not initialize application settings. Error: {e}", exc_info=True)
    raise
