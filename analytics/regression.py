# krishi_trends/analytics/regression.py
#
# Ordinary least squares over an evenly spaced series, where x is the
# zero-based position in the series (week 0, week 1, ...).

import logging
from typing import Sequence

import numpy as np

from schemas.detection import RegressionResult

logger = logging.getLogger(__name__)


def linear_regression(data: Sequence[float]) -> RegressionResult:
    """
    Fits `y = slope * x + intercept` with closed-form OLS and reports R².

    Fewer than two points cannot define a trend: the result is a flat line
    through the single value (or zero) with R² of 0. A constant series has no
    variance to explain and also reports R² of 0 rather than NaN.

    Args:
        data: Ordered observations, oldest first.

    Returns:
        A RegressionResult with slope, intercept and r2.
    """
    y = np.asarray(list(data), dtype=float)
    n = y.size
    if n < 2:
        return RegressionResult(slope=0.0, intercept=float(y[0]) if n else 0.0, r2=0.0)

    x = np.arange(n, dtype=float)
    x_mean = (n - 1) / 2
    y_mean = y.mean()

    numerator = np.sum((x - x_mean) * (y - y_mean))
    denominator = np.sum((x - x_mean) ** 2)
    slope = numerator / denominator if denominator != 0 else 0.0
    intercept = y_mean - slope * x_mean

    predicted = slope * x + intercept
    ss_res = np.sum((y - predicted) ** 2)
    ss_tot = np.sum((y - y_mean) ** 2)
    r2 = 1 - ss_res / ss_tot if ss_tot != 0 else 0.0

    return RegressionResult(slope=float(slope), intercept=float(intercept), r2=float(r2))
