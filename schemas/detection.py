"""Detection inputs and trend analysis outputs."""

import datetime as dt
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from data_processing.helpers import normalize_label, normalize_severity

Severity = Literal["low", "medium", "high"]
Trend = Literal["rising", "falling", "stable"]
RiskLevel = Literal["high", "medium", "low"]
Locale = Literal["ne", "en"]

SUPPORTED_LOCALES = ("ne", "en")


class DetectionRecord(BaseModel):
    """One farmer-submitted disease observation."""

    model_config = ConfigDict(frozen=True)

    id: str
    disease_label: Optional[str] = None
    severity: Optional[Severity] = None
    observed_at: dt.datetime
    farmer_id: Optional[str] = None

    @field_validator("id", "farmer_id", mode="before")
    @classmethod
    def coerce_identifier(cls, value):
        return None if value is None else str(value)

    @field_validator("disease_label", mode="before")
    @classmethod
    def clean_label(cls, value):
        return normalize_label(value)

    @field_validator("severity", mode="before")
    @classmethod
    def clean_severity(cls, value):
        return normalize_severity(value)

    @field_validator("observed_at")
    @classmethod
    def as_utc(cls, value: dt.datetime) -> dt.datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=dt.timezone.utc)
        return value.astimezone(dt.timezone.utc)


class DailyBucket(BaseModel):
    """Detections observed on one calendar day."""

    date: dt.date
    total_count: int
    counts_by_disease: Dict[str, int] = Field(default_factory=dict)


class RegressionResult(BaseModel):
    slope: float
    intercept: float
    r2: float


class Prediction(BaseModel):
    """Risk outlook for one disease over the lookback window."""

    disease: str
    current_trend: Trend
    risk_level: RiskLevel
    confidence: float = Field(ge=0.0, le=1.0)
    predicted_increase: float
    reasoning: str


class ForecastPoint(BaseModel):
    """A historical daily total, or a projected one when `forecast` is set."""

    date: dt.date
    label: str
    total: int
    forecast: Optional[int] = None


class DetectionStatistics(BaseModel):
    total_detections: int = 0
    high_severity: int = 0
    medium_severity: int = 0
    low_severity: int = 0
    unique_farmers: int = 0


class TrendReport(BaseModel):
    """Ranked disease predictions plus the aggregate volume forecast."""

    lookback_days: int
    locale: Locale
    as_of: dt.datetime
    predictions: List[Prediction] = Field(default_factory=list)
    forecast: List[ForecastPoint] = Field(default_factory=list)
