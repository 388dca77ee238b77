# krishi_trends/analytics/report.py
#
# Entry points that combine disease predictions, the volume forecast and the
# descriptive statistics into a single result for the presentation layer.

import logging
from typing import Any, Dict, Mapping, Optional

try:
    from config.settings import settings
    from data_processing.loaders import coerce_detection_frame
    from data_processing.helpers import to_utc_timestamp
    from schemas.detection import TrendReport
    from .aggregation import (
        calculate_detection_statistics,
        disease_frequency,
        district_distribution,
        validate_lookback,
    )
    from .forecasting import forecast_detection_volume
    from .messages import check_locale
    from .prediction import predict_disease_risks
except ImportError as e:
    logging.basicConfig(level="CRITICAL")
    logging.critical(f"FATAL ERROR in report.py: A core dependency is missing. {e}", exc_info=True)
    raise

logger = logging.getLogger(__name__)


def predict(
    records: Any,
    lookback_days: int,
    locale: str = 'en',
    as_of: Any = None,
) -> TrendReport:
    """
    Ranked disease risk predictions plus the 7-day aggregate forecast.

    `records` must already be limited to the lookback window; they are not
    re-filtered here. `locale` only affects text, never the numbers. `as_of`
    anchors both weekly buckets and forecast dates and defaults to now (UTC).
    """
    lookback_days = validate_lookback(lookback_days)
    check_locale(locale)
    as_of = to_utc_timestamp(as_of)

    df = coerce_detection_frame(records)
    return TrendReport(
        lookback_days=lookback_days,
        locale=locale,
        as_of=as_of.to_pydatetime(),
        predictions=predict_disease_risks(df, lookback_days, locale, as_of),
        forecast=forecast_detection_volume(df, locale, as_of),
    )


def build_report(
    records: Any,
    lookback_days: int,
    locale: str = 'en',
    as_of: Any = None,
    farmer_districts: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """JSON-ready dashboard payload: statistics, frequencies and the trend report."""
    df = coerce_detection_frame(records)
    trend_report = predict(df, lookback_days, locale, as_of)

    payload: Dict[str, Any] = {
        "title": settings.report_title,
        "statistics": calculate_detection_statistics(df).model_dump(),
        "disease_frequency": [
            {"disease": label, "count": count} for label, count in disease_frequency(df)
        ],
    }
    if farmer_districts is not None:
        payload["districts"] = [
            {"district": name, "count": count}
            for name, count in district_distribution(df, farmer_districts)
        ]
    payload.update(trend_report.model_dump(mode="json"))
    logger.info(
        f"Report built: {len(df)} detection(s), {len(trend_report.predictions)} prediction(s), "
        f"{len(trend_report.forecast)} forecast point(s)."
    )
    return payload
