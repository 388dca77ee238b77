from datetime import date, timedelta

import pytest

from analytics.aggregation import (
    bucket_by_day,
    bucket_by_week,
    calculate_detection_statistics,
    daily_severity_series,
    disease_frequency,
    district_distribution,
)
from conftest import AS_OF, make_record, weekly_records


class TestBucketByDay:
    def test_empty(self):
        assert bucket_by_day([]) == []

    def test_groups_and_sorts_by_day(self):
        records = [
            make_record("Rust", days_ago=1),
            make_record("Leaf Blight", days_ago=3),
            make_record("Leaf Blight", days_ago=1),
            make_record(None, days_ago=1),
        ]
        buckets = bucket_by_day(records)

        assert [b.date for b in buckets] == [
            (AS_OF - timedelta(days=3)).date(),
            (AS_OF - timedelta(days=1)).date(),
        ]
        assert buckets[0].total_count == 1
        assert buckets[0].counts_by_disease == {"Leaf Blight": 1}
        # the unlabelled record counts toward the total only
        assert buckets[1].total_count == 3
        assert buckets[1].counts_by_disease == {"Leaf Blight": 1, "Rust": 1}

    def test_day_with_only_unlabelled_records(self):
        buckets = bucket_by_day([make_record(None, days_ago=2), make_record("null", days_ago=2)])
        assert len(buckets) == 1
        assert buckets[0].total_count == 2
        assert buckets[0].counts_by_disease == {}

    def test_accepts_backend_rows(self):
        rows = [
            {"id": "a", "detected_disease": "Rust", "severity": "HIGH", "analyzed_at": "2026-10-01T08:00:00Z"},
            {"id": "b", "detected_disease": "Rust", "severity": None, "analyzed_at": "2026-10-01T20:30:00+00:00"},
        ]
        buckets = bucket_by_day(rows)
        assert buckets[0].date == date(2026, 10, 1)
        assert buckets[0].counts_by_disease == {"Rust": 2}


class TestBucketByWeek:
    def test_empty(self):
        assert bucket_by_week([], None, 30, as_of=AS_OF) == []

    def test_counts_oldest_first(self, leaf_blight_records):
        assert bucket_by_week(leaf_blight_records, "Leaf Blight", 28, as_of=AS_OF) == [1, 2, 4, 6]

    def test_bucket_count_is_ceiling_of_weeks(self):
        records = [make_record(days_ago=1)]
        assert len(bucket_by_week(records, None, 30, as_of=AS_OF)) == 5
        assert len(bucket_by_week(records, None, 90, as_of=AS_OF)) == 13

    def test_short_lookback_still_has_one_bucket(self):
        records = [make_record(days_ago=1), make_record(days_ago=6.5), make_record(days_ago=8)]
        assert bucket_by_week(records, None, 3, as_of=AS_OF) == [2]

    def test_label_filter(self):
        records = [make_record("Rust", days_ago=2), make_record("Leaf Blight", days_ago=2), make_record(None, days_ago=2)]
        assert bucket_by_week(records, "Rust", 14, as_of=AS_OF) == [0, 1]
        assert bucket_by_week(records, None, 14, as_of=AS_OF) == [0, 3]
        assert bucket_by_week(records, "Mildew", 14, as_of=AS_OF) == [0, 0]

    def test_window_bounds_are_half_open(self):
        at_now = make_record(days_ago=0)
        at_week_edge = make_record(days_ago=7)
        # `as_of` itself is excluded; a window's start is included
        assert bucket_by_week([at_now, at_week_edge], None, 14, as_of=AS_OF) == [0, 1]

    def test_sum_never_exceeds_record_count(self):
        inside = [make_record(days_ago=d) for d in (0.5, 5, 12, 20, 29)]
        outside = [make_record(days_ago=d) for d in (40, 60)]
        weekly = bucket_by_week(inside + outside, None, 30, as_of=AS_OF)
        assert sum(weekly) <= len(inside + outside)
        assert sum(weekly) == len(inside)

    @pytest.mark.parametrize("lookback", [0, -7, 2.5, "30", True])
    def test_rejects_invalid_lookback(self, lookback):
        with pytest.raises(ValueError):
            bucket_by_week([make_record()], None, lookback, as_of=AS_OF)

    def test_naive_as_of_is_utc(self):
        records = weekly_records("Rust", [1, 3], 14)
        assert bucket_by_week(records, "Rust", 14, as_of=AS_OF.replace(tzinfo=None)) == [1, 3]


class TestStatistics:
    def test_detection_statistics(self):
        records = [
            make_record("Rust", severity="high", farmer_id="f1"),
            make_record("Rust", severity="medium", farmer_id="f1"),
            make_record(None, severity="low", farmer_id="f2"),
            make_record("Rust", severity=None),
        ]
        stats = calculate_detection_statistics(records)
        assert stats.total_detections == 4
        assert (stats.high_severity, stats.medium_severity, stats.low_severity) == (1, 1, 1)
        assert stats.unique_farmers == 2

    def test_statistics_of_nothing(self):
        assert calculate_detection_statistics([]).total_detections == 0

    def test_disease_frequency_ranks_and_labels_unknown(self):
        records = (
            [make_record("Rust", days_ago=5)]
            + [make_record(None, days_ago=4) for _ in range(2)]
            + [make_record("Leaf Blight", days_ago=3) for _ in range(3)]
            + [make_record("Mildew", days_ago=2)]
        )
        assert disease_frequency(records) == [
            ("Leaf Blight", 3), ("Unknown", 2), ("Rust", 1), ("Mildew", 1),
        ]
        assert disease_frequency(records, top_n=1) == [("Leaf Blight", 3)]

    def test_daily_severity_series(self):
        records = [
            make_record("Rust", days_ago=2, severity="high"),
            make_record("Rust", days_ago=2, severity="low"),
            make_record("Rust", days_ago=1, severity="medium"),
        ]
        series = daily_severity_series(records)
        assert list(series.columns) == ["date", "count", "high", "medium", "low"]
        assert series["count"].tolist() == [2, 1]
        assert series["high"].tolist() == [1, 0]
        assert series["medium"].tolist() == [0, 1]
        assert series["low"].tolist() == [1, 0]

    def test_daily_severity_series_empty(self):
        assert daily_severity_series([]).empty

    def test_district_distribution(self):
        records = [
            make_record(farmer_id="f1"),
            make_record(farmer_id="f2"),
            make_record(farmer_id="f2"),
            make_record(farmer_id="f9"),
            make_record(farmer_id=None),
        ]
        districts = {"f1": "Chitwan", "f2": "Kaski"}
        assert district_distribution(records, districts) == [("Kaski", 2), ("Unknown", 2), ("Chitwan", 1)]
