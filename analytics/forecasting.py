# krishi_trends/analytics/forecasting.py
#
# Detection Volume Forecasting
# Extends the recent daily detection totals a week into the future along an
# OLS trend line fitted to them.

import logging
from datetime import timedelta
from typing import Any, List, Optional

try:
    from config.settings import settings, ForecastConfig
    from data_processing.helpers import round_half_up, to_utc_timestamp
    from schemas.detection import ForecastPoint
    from .aggregation import bucket_by_day
    from .messages import check_locale, format_day_label
    from .regression import linear_regression
except ImportError as e:
    logging.basicConfig(level="CRITICAL")
    logging.critical(f"FATAL ERROR in forecasting.py: A core dependency is missing. {e}", exc_info=True)
    raise

logger = logging.getLogger(__name__)


def forecast_detection_volume(
    records: Any,
    locale: str = 'en',
    as_of: Any = None,
    config: Optional[ForecastConfig] = None,
) -> List[ForecastPoint]:
    """
    Forecasts aggregate daily detections for the days after `as_of`.

    The most recent `history_days` daily totals are returned unchanged
    (with `forecast=None`), followed by `horizon_days` future points with
    `total=0` and a non-negative, rounded `forecast`.

    Returns an empty list when fewer than `min_history_days` days have data.
    """
    check_locale(locale)
    cfg = config or settings.forecast
    today = to_utc_timestamp(as_of).date()

    daily = bucket_by_day(records)
    if len(daily) < cfg.min_history_days:
        logger.info(
            f"Insufficient data for forecast ({len(daily)} day(s)). "
            f"A minimum of {cfg.min_history_days} is required."
        )
        return []

    recent = daily[-cfg.history_days:]
    totals = [bucket.total_count for bucket in recent]
    fit = linear_regression(totals)

    points = [
        ForecastPoint(date=bucket.date, label=format_day_label(bucket.date, locale), total=bucket.total_count)
        for bucket in recent
    ]
    n = len(totals)
    for i in range(1, cfg.horizon_days + 1):
        future_day = today + timedelta(days=i)
        projected = max(0, int(round_half_up(fit.slope * (n + i - 1) + fit.intercept)))
        points.append(ForecastPoint(
            date=future_day, label=format_day_label(future_day, locale), total=0, forecast=projected,
        ))

    logger.debug(f"Forecast slope {fit.slope:.3f}/day over {n} day(s), R²={fit.r2:.2f}.")
    return points
