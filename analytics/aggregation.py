# krishi_trends/analytics/aggregation.py
#
# Time bucketing and descriptive statistics over disease detections.

import logging
import math
from numbers import Integral
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pandas as pd

try:
    from config.settings import settings
    from data_processing.loaders import coerce_detection_frame
    from data_processing.helpers import UNKNOWN_LABEL, to_utc_timestamp
    from schemas.detection import DailyBucket, DetectionStatistics
except ImportError as e:
    logging.basicConfig(level="CRITICAL")
    logging.critical(f"FATAL ERROR in aggregation.py: A core dependency is missing. {e}", exc_info=True)
    raise

logger = logging.getLogger(__name__)

WEEK = pd.Timedelta(days=7)


def validate_lookback(lookback_days: Any) -> int:
    """Returns the lookback as an int, raising ValueError unless it is a positive integer."""
    if isinstance(lookback_days, bool) or not isinstance(lookback_days, Integral) or lookback_days <= 0:
        raise ValueError(f"lookback_days must be a positive integer, got {lookback_days!r}.")
    return int(lookback_days)


def _observation_days(df: pd.DataFrame) -> pd.Series:
    return df['observed_at'].dt.date


def bucket_by_day(records: Any) -> List[DailyBucket]:
    """
    Groups detections by UTC calendar day, one bucket per day present,
    ascending. Unlabelled detections count toward the day's total only.
    """
    df = coerce_detection_frame(records)
    if df.empty:
        return []

    days = _observation_days(df)
    totals = df.groupby(days, sort=True).size()

    labelled = df.loc[df['disease_label'].notna()]
    per_disease: Dict[Any, Dict[str, int]] = {}
    if not labelled.empty:
        grouped = labelled.groupby([_observation_days(labelled), 'disease_label'], sort=True).size()
        for (day, label), count in grouped.items():
            per_disease.setdefault(day, {})[label] = int(count)

    return [
        DailyBucket(date=day, total_count=int(total), counts_by_disease=per_disease.get(day, {}))
        for day, total in totals.items()
    ]


def weekly_counts(
    df: pd.DataFrame, disease_label: Optional[str], lookback_days: int, as_of: Any = None
) -> List[int]:
    """
    Counts a prepared detection frame into `ceil(lookback_days / 7)` windows.
    The newest window is `[as_of - 7d, as_of)`; each earlier one starts
    seven days before the next. Oldest window first.
    """
    if df.empty:
        return []
    end = to_utc_timestamp(as_of)
    n_weeks = math.ceil(lookback_days / 7)

    observed = df['observed_at']
    if disease_label is not None:
        observed = observed.loc[df['disease_label'] == disease_label]

    counts = []
    for i in range(n_weeks):
        window_end = end - WEEK * (n_weeks - 1 - i)
        window_start = window_end - WEEK
        counts.append(int(((observed >= window_start) & (observed < window_end)).sum()))
    return counts


def bucket_by_week(
    records: Any, disease_label: Optional[str], lookback_days: int, as_of: Any = None
) -> List[int]:
    """
    Weekly detection counts for one disease, or for all detections when
    `disease_label` is None, walking back from `as_of` (default: now).
    """
    lookback_days = validate_lookback(lookback_days)
    return weekly_counts(coerce_detection_frame(records), disease_label, lookback_days, as_of)


def calculate_detection_statistics(records: Any) -> DetectionStatistics:
    """Headline counts: total detections, per-severity split and unique farmers."""
    df = coerce_detection_frame(records)
    if df.empty:
        return DetectionStatistics()
    severity_counts = df['severity'].value_counts()
    return DetectionStatistics(
        total_detections=len(df),
        high_severity=int(severity_counts.get('high', 0)),
        medium_severity=int(severity_counts.get('medium', 0)),
        low_severity=int(severity_counts.get('low', 0)),
        unique_farmers=int(df['farmer_id'].dropna().nunique()),
    )


def _ranked_counts(labels: pd.Series, top_n: Optional[int]) -> List[Tuple[str, int]]:
    # first-seen order, then a stable sort so ties keep it
    counts = labels.groupby(labels, sort=False).size().sort_values(ascending=False, kind='mergesort')
    if top_n is not None:
        counts = counts.head(top_n)
    return [(str(label), int(count)) for label, count in counts.items()]


def disease_frequency(records: Any, top_n: Optional[int] = None) -> List[Tuple[str, int]]:
    """Detections per disease, most frequent first; unlabelled ones are 'Unknown'."""
    df = coerce_detection_frame(records)
    if df.empty:
        return []
    labels = df['disease_label'].fillna(UNKNOWN_LABEL)
    return _ranked_counts(labels, top_n if top_n is not None else settings.frequency_top_n)


def daily_severity_series(records: Any) -> pd.DataFrame:
    """One row per day with the total count and the high/medium/low split."""
    columns = ['date', 'count', 'high', 'medium', 'low']
    df = coerce_detection_frame(records)
    if df.empty:
        return pd.DataFrame(columns=columns)

    df = df.assign(date=_observation_days(df))
    series = df.groupby('date', sort=True).agg(count=('id', 'size')).reset_index()
    for level in ('high', 'medium', 'low'):
        per_day = df.loc[df['severity'] == level].groupby('date').size()
        series[level] = series['date'].map(per_day).fillna(0).astype(int)
    return series[columns]


def district_distribution(
    records: Any, farmer_districts: Mapping[str, str], top_n: Optional[int] = None
) -> List[Tuple[str, int]]:
    """Detections per farmer district, largest first; unmapped farmers are 'Unknown'."""
    df = coerce_detection_frame(records)
    if df.empty:
        return []
    districts = df['farmer_id'].map(lambda farmer_id: farmer_districts.get(farmer_id) or UNKNOWN_LABEL)
    return _ranked_counts(districts, top_n if top_n is not None else settings.district_top_n)
