from datetime import timedelta

import pytest

from analytics.forecasting import forecast_detection_volume
from config.settings import ForecastConfig
from conftest import AS_OF, make_record


def daily_records(totals):
    """`totals[k]` detections on each of the last len(totals) days, oldest first."""
    records = []
    for k, total in enumerate(totals):
        days_ago = len(totals) - k
        records.extend(make_record("Rust", days_ago=days_ago) for _ in range(total))
    return records


def test_fewer_than_seven_days_gives_no_forecast():
    assert forecast_detection_volume(daily_records([3, 1, 4, 1, 5, 9]), as_of=AS_OF) == []


def test_no_records_gives_no_forecast():
    assert forecast_detection_volume([], as_of=AS_OF) == []


def test_seven_days_of_history():
    points = forecast_detection_volume(daily_records([1, 2, 3, 4, 5, 6, 7]), as_of=AS_OF)

    assert len(points) == 14
    history, future = points[:7], points[7:]
    assert [p.total for p in history] == [1, 2, 3, 4, 5, 6, 7]
    assert all(p.forecast is None for p in history)
    assert all(p.total == 0 for p in future)
    assert [p.forecast for p in future] == [8, 9, 10, 11, 12, 13, 14]


def test_history_is_capped_at_fourteen_days():
    points = forecast_detection_volume(daily_records(list(range(1, 21))), as_of=AS_OF)

    assert len(points) == 14 + 7
    assert [p.total for p in points[:14]] == list(range(7, 21))
    # fit on the 14 kept days: slope 1, intercept 7
    assert [p.forecast for p in points[14:]] == list(range(21, 28))


def test_future_points_are_dated_after_as_of():
    points = forecast_detection_volume(daily_records([2] * 7), as_of=AS_OF)
    future_dates = [p.date for p in points[7:]]
    assert future_dates == [(AS_OF + timedelta(days=i)).date() for i in range(1, 8)]
    assert [p.forecast for p in points[7:]] == [2] * 7


def test_declining_volume_is_floored_at_zero():
    points = forecast_detection_volume(daily_records([20, 15, 10, 6, 3, 1, 1]), as_of=AS_OF)
    forecasts = [p.forecast for p in points[7:]]
    assert all(value >= 0 for value in forecasts)
    assert forecasts[-1] == 0


def test_gaps_count_only_days_with_data():
    records = [make_record("Rust", days_ago=d) for d in (30, 25, 20, 15, 10, 5, 1)]
    points = forecast_detection_volume(records, as_of=AS_OF)
    assert [p.total for p in points[:7]] == [1] * 7


def test_labels_follow_locale():
    records = daily_records([1] * 7)
    en = forecast_detection_volume(records, locale="en", as_of=AS_OF)
    ne = forecast_detection_volume(records, locale="ne", as_of=AS_OF)
    assert en[-1].label == "Oct 26"
    assert ne[-1].label == "अक्टोबर २६"
    assert [p.forecast for p in en] == [p.forecast for p in ne]


def test_custom_window_sizes():
    config = ForecastConfig(history_days=5, min_history_days=3, horizon_days=2)
    points = forecast_detection_volume(daily_records([1, 2, 3]), as_of=AS_OF, config=config)
    assert [p.total for p in points] == [1, 2, 3, 0, 0]
    assert [p.forecast for p in points[3:]] == [4, 5]


def test_unsupported_locale():
    with pytest.raises(ValueError):
        forecast_detection_volume(daily_records([1] * 7), locale="hi", as_of=AS_OF)
