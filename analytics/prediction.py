# krishi_trends/analytics/prediction.py
#
# Disease Trend & Risk Estimator
# Fits a weekly OLS trend per disease, classifies its direction, scores a risk
# tier and projects the change over the next few weeks. All thresholds come
# from `settings.thresholds` so deployments can tune them.

import logging
from typing import Any, List, Optional

import pandas as pd

try:
    from config.settings import settings, ThresholdConfig
    from data_processing.loaders import coerce_detection_frame
    from data_processing.helpers import round_half_up, to_utc_timestamp
    from schemas.detection import Prediction
    from .aggregation import validate_lookback, weekly_counts
    from .messages import build_reasoning, check_locale
    from .regression import linear_regression
except ImportError as e:
    logging.basicConfig(level="CRITICAL")
    logging.critical(f"FATAL ERROR in prediction.py: A core dependency is missing. {e}", exc_info=True)
    raise

logger = logging.getLogger(__name__)

RISK_ORDER = {'high': 0, 'medium': 1, 'low': 2}
_ESCALATION = {'low': 'medium', 'medium': 'high', 'high': 'high'}


def classify_trend(slope: float, thresholds: Optional[ThresholdConfig] = None) -> str:
    """'rising' above +threshold cases/week, 'falling' below -threshold, else 'stable'."""
    limit = (thresholds or settings.thresholds).trend_slope_threshold
    if slope > limit:
        return 'rising'
    if slope < -limit:
        return 'falling'
    return 'stable'


def base_risk_level(trend: str, recent_count: int, thresholds: Optional[ThresholdConfig] = None) -> str:
    t = thresholds or settings.thresholds
    if trend == 'rising' and recent_count > t.high_risk_recent_count:
        return 'high'
    if trend == 'rising' or recent_count > t.medium_risk_recent_count:
        return 'medium'
    return 'low'


def escalate_risk(risk_level: str) -> str:
    """One tier up, saturating at 'high'."""
    return _ESCALATION[risk_level]


def score_risk(
    trend: str,
    recent_count: int,
    high_severity_count: int,
    total_detections: int,
    thresholds: Optional[ThresholdConfig] = None,
) -> str:
    """
    Base tier from trend and recent volume, raised one tier when high-severity
    cases make up more than the escalation ratio of all detections.
    """
    t = thresholds or settings.thresholds
    risk_level = base_risk_level(trend, recent_count, t)
    if high_severity_count > total_detections * t.severity_escalation_ratio:
        risk_level = escalate_risk(risk_level)
    return risk_level


def fit_confidence(r2: float, thresholds: Optional[ThresholdConfig] = None) -> float:
    """Maps R² into the display confidence band."""
    t = thresholds or settings.thresholds
    return min(t.confidence_ceiling, max(t.confidence_floor, r2 + t.confidence_offset))


def rank_predictions(predictions: List[Prediction]) -> List[Prediction]:
    """Highest risk first; equal tiers keep their input order."""
    return sorted(predictions, key=lambda p: RISK_ORDER[p.risk_level])


def _predict_one(
    df: pd.DataFrame,
    disease: str,
    lookback_days: int,
    locale: str,
    as_of: pd.Timestamp,
    t: ThresholdConfig,
) -> Optional[Prediction]:
    disease_rows = df.loc[df['disease_label'] == disease]
    total = len(disease_rows)
    if total < t.min_detections:
        logger.debug(f"Skipping '{disease}': {total} detection(s), need {t.min_detections}.")
        return None

    weekly = weekly_counts(df, disease, lookback_days, as_of)
    if len(weekly) < t.min_weekly_buckets:
        logger.debug(f"Skipping '{disease}': {len(weekly)} weekly bucket(s), need {t.min_weekly_buckets}.")
        return None

    fit = linear_regression(weekly)
    trend = classify_trend(fit.slope, t)
    recent_count = sum(weekly[-t.recent_weeks:])
    high_severity_count = int((disease_rows['severity'] == 'high').sum())
    risk_level = score_risk(trend, recent_count, high_severity_count, total, t)

    return Prediction(
        disease=disease,
        current_trend=trend,
        risk_level=risk_level,
        confidence=fit_confidence(fit.r2, t),
        predicted_increase=round_half_up(fit.slope * t.projection_weeks, 1),
        reasoning=build_reasoning(trend, risk_level, lookback_days, locale),
    )


def predict_disease_risks(
    records: Any,
    lookback_days: int,
    locale: str = 'en',
    as_of: Any = None,
    thresholds: Optional[ThresholdConfig] = None,
) -> List[Prediction]:
    """
    Builds ranked risk predictions for every disease with enough history.

    Diseases with too few detections or too few weekly buckets are left out;
    insufficient data yields an empty list rather than an error.

    Args:
        records: Detections already filtered to the lookback window by the caller.
        lookback_days: Window length; drives the number of weekly buckets.
        locale: 'en' or 'ne', selects the reasoning language only.
        as_of: Anchor time for weekly windows; defaults to now (UTC).
        thresholds: Overrides `settings.thresholds`.

    Returns:
        Predictions sorted high -> medium -> low, stable within a tier.
    """
    lookback_days = validate_lookback(lookback_days)
    check_locale(locale)
    t = thresholds or settings.thresholds
    as_of = to_utc_timestamp(as_of)

    df = coerce_detection_frame(records)
    if df.empty:
        logger.info("No detections supplied; no disease predictions generated.")
        return []

    diseases = df['disease_label'].dropna().unique()
    predictions = [
        prediction for prediction in (
            _predict_one(df, disease, lookback_days, locale, as_of, t) for disease in diseases
        )
        if prediction is not None
    ]
    logger.info(f"Generated {len(predictions)} prediction(s) across {len(diseases)} disease(s).")
    return rank_predictions(predictions)
