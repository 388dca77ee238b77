"""Pydantic models shared by the data processing and analytics packages."""

from .detection import (
    SUPPORTED_LOCALES,
    DailyBucket,
    DetectionRecord,
    DetectionStatistics,
    ForecastPoint,
    Prediction,
    RegressionResult,
    TrendReport,
)

__all__ = [
    "SUPPORTED_LOCALES",
    "DailyBucket",
    "DetectionRecord",
    "DetectionStatistics",
    "ForecastPoint",
    "Prediction",
    "RegressionResult",
    "TrendReport",
]
