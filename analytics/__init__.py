# krishi_trends/analytics/__init__.py
#
# Analytics Package API
# Disease trend prediction, detection volume forecasting and the
# descriptive statistics behind the disease analytics dashboard.

"""
Initializes the analytics package, making key functions and classes
available at the top level for easier, cleaner imports in other modules.
"""

# --- Entry Points ---
from .report import predict, build_report

# --- Trend & Risk Prediction ---
from .prediction import (
    predict_disease_risks,
    classify_trend,
    score_risk,
    rank_predictions,
)

# --- Forecasting ---
from .forecasting import forecast_detection_volume

# --- Regression ---
from .regression import linear_regression

# --- Aggregation & Statistics ---
from .aggregation import (
    bucket_by_day,
    bucket_by_week,
    calculate_detection_statistics,
    daily_severity_series,
    disease_frequency,
    district_distribution,
)


__all__ = [
    # Entry points
    "predict",
    "build_report",

    # Prediction
    "predict_disease_risks",
    "classify_trend",
    "score_risk",
    "rank_predictions",

    # Forecasting
    "forecast_detection_volume",

    # Regression
    "linear_regression",

    # Aggregation & statistics
    "bucket_by_day",
    "bucket_by_week",
    "calculate_detection_statistics",
    "daily_severity_series",
    "disease_frequency",
    "district_distribution",
]
