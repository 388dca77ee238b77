from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

from schemas.detection import DetectionRecord

AS_OF = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

_ids = count(1)


def make_record(disease_label="Leaf Blight", days_ago=1.0, severity=None, farmer_id=None, as_of=AS_OF):
    return DetectionRecord(
        id=f"det-{next(_ids)}",
        disease_label=disease_label,
        severity=severity,
        observed_at=as_of - timedelta(days=days_ago),
        farmer_id=farmer_id,
    )


def weekly_records(disease_label, weekly, lookback_days, severities=None, as_of=AS_OF):
    """
    Records laid out so that `bucket_by_week` over `lookback_days` yields
    `weekly` exactly (oldest week first). Each record sits one day into its
    window. `severities` is consumed in order, padding with None.
    """
    n_weeks = len(weekly)
    assert n_weeks == -(-lookback_days // 7)
    severities = list(severities or [])
    records = []
    for i, n in enumerate(weekly):
        window_start_days_ago = (n_weeks - i) * 7
        for j in range(n):
            severity = severities.pop(0) if severities else None
            records.append(make_record(
                disease_label, days_ago=window_start_days_ago - 1 - j * 0.1, severity=severity, as_of=as_of,
            ))
    return records


@pytest.fixture
def as_of():
    return AS_OF


@pytest.fixture
def leaf_blight_records():
    # weekly buckets [1, 2, 4, 6] over four weeks, one high-severity case
    return weekly_records("Leaf Blight", [1, 2, 4, 6], 28, severities=["high"])
