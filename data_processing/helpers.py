# krishi_trends/data_processing/helpers.py
#
# Core Data Utilities
# Small, dependency-light normalizers shared by the loaders, the pipeline and
# the pydantic schemas.

import math
import re
import logging
from typing import Any, Optional

import pandas as pd

logger = logging.getLogger(__name__)

# Pre-compiled regex for finding various "Not Available" strings.
_NA_REGEX_PATTERN = re.compile(
    r'(?i)^\s*(nan|none|n/a|#n/a|na|null|nil|<na>|undefined|-|)\s*$'
)

VALID_SEVERITIES = ('low', 'medium', 'high')
UNKNOWN_LABEL = "Unknown"


def is_missing(value: Any) -> bool:
    """True for None, NaN/NaT and the common "Not Available" strings."""
    if value is None:
        return True
    if isinstance(value, str):
        return bool(_NA_REGEX_PATTERN.match(value))
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def normalize_label(value: Any) -> Optional[str]:
    """Strips a disease label, mapping blank or NA-like values to None."""
    if is_missing(value):
        return None
    label = str(value).strip()
    return label or None


def normalize_severity(value: Any) -> Optional[str]:
    """
    Lower-cases a severity value. Anything outside low/medium/high becomes
    None rather than an error, since severity is advisory metadata.
    """
    if is_missing(value):
        return None
    severity = str(value).strip().lower()
    if severity not in VALID_SEVERITIES:
        logger.debug(f"Discarding unrecognized severity value {value!r}.")
        return None
    return severity


def to_utc_timestamp(value: Any = None) -> pd.Timestamp:
    """Coerces a datetime-like to a UTC pandas Timestamp; None means now."""
    if value is None:
        return pd.Timestamp.now(tz='UTC')
    ts = pd.Timestamp(value)
    if ts.tzinfo is None:
        return ts.tz_localize('UTC')
    return ts.tz_convert('UTC')


def round_half_up(value: float, ndigits: int = 0) -> float:
    """
    Rounds halves away from negative infinity (2.5 -> 3, -2.5 -> -2), the
    convention display clients use, unlike Python's banker's rounding.
    """
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor
