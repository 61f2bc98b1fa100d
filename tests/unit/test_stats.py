"""Unit tests for weekly aggregation, volume trend and streaks."""
from datetime import date

import pytest

from modules.models import Consistency, VolumeTrend
from modules.stats import aggregate, calculate_streak, classify_consistency, compare_volume


@pytest.mark.unit
class TestAggregate:

    def test_empty_week_is_sentinel(self):
        stats = aggregate([], prior_week_total=4)
        assert stats.no_data_this_week is True
        assert stats.total_workouts == 0
        assert stats.training_balance is None

    def test_counts_and_balance(self, make_cardio, make_strength):
        workouts = [make_cardio(12), make_cardio(13), make_cardio(15), make_strength(16)]
        stats = aggregate(workouts)

        assert stats.no_data_this_week is False
        assert stats.total_workouts == 4
        assert stats.cardio_count == 3
        assert stats.strength_count == 1
        assert stats.training_balance.cardio_percent == 75
        assert stats.training_balance.strength_percent == 25

    def test_balance_always_sums_to_100(self, make_cardio, make_strength):
        stats = aggregate([make_cardio(12), make_strength(13), make_strength(14)])
        balance = stats.training_balance
        assert balance.cardio_percent == 33
        assert balance.strength_percent == 67

    def test_half_rounds_up(self, make_cardio, make_strength):
        workouts = [make_cardio(12)] + [make_strength(d) for d in range(13, 20)]
        stats = aggregate(workouts)
        # 1 / 8 = 12.5%
        assert stats.training_balance.cardio_percent == 13
        assert stats.training_balance.strength_percent == 87

    def test_distance_and_duration_sums(self, make_cardio, make_strength):
        workouts = [
            make_cardio(12, distance=5, duration=27),
            make_cardio(14, distance=3.5),
            make_cardio(15, duration=40),
            make_strength(15),
        ]
        stats = aggregate(workouts)
        assert stats.total_distance == pytest.approx(8.5)
        assert stats.total_duration_minutes == 67

    def test_active_days_count_distinct_dates(self, make_cardio, make_strength):
        workouts = [make_cardio(12, hour=6), make_strength(12, hour=19), make_cardio(13)]
        stats = aggregate(workouts)
        assert stats.active_day_count == 2
        assert stats.consistency is Consistency.MODERATE

    def test_increasing_trend(self, make_cardio):
        stats = aggregate([make_cardio(d) for d in range(12, 17)], prior_week_total=4)
        assert stats.volume_trend is VolumeTrend.INCREASING
        assert stats.volume_change_percent == 25

    def test_zero_prior_week_is_unknown(self, make_cardio):
        stats = aggregate([make_cardio(12)], prior_week_total=0)
        assert stats.volume_trend is VolumeTrend.UNKNOWN
        assert stats.volume_change_percent is None

    def test_missing_prior_week_is_unknown(self, make_cardio):
        stats = aggregate([make_cardio(12)])
        assert stats.volume_trend is VolumeTrend.UNKNOWN
        assert stats.volume_change_percent is None

    def test_to_dict_uses_plain_values(self, make_cardio):
        record = aggregate([make_cardio(12)], prior_week_total=2).to_dict()
        assert record["volume_trend"] == "decreasing"
        assert record["volume_change_percent"] == 50
        assert record["consistency"] == "low"


@pytest.mark.unit
class TestCompareVolume:

    @pytest.mark.parametrize("current,prior,trend,change", [
        (5, 4, VolumeTrend.INCREASING, 25),
        (3, 4, VolumeTrend.DECREASING, 25),
        (4, 4, VolumeTrend.STABLE, 0),
        (1, 3, VolumeTrend.DECREASING, 67),
        (2, 3, VolumeTrend.DECREASING, 33),
        (3, 0, VolumeTrend.UNKNOWN, None),
        (3, None, VolumeTrend.UNKNOWN, None),
    ])
    def test_trend(self, current, prior, trend, change):
        assert compare_volume(current, prior) == (trend, change)


@pytest.mark.unit
@pytest.mark.parametrize("days,expected", [
    (0, Consistency.LOW),
    (1, Consistency.LOW),
    (2, Consistency.MODERATE),
    (3, Consistency.MODERATE),
    (4, Consistency.HIGH),
    (7, Consistency.HIGH),
])
def test_consistency_levels(days, expected):
    assert classify_consistency(days) is expected


@pytest.mark.unit
class TestStreak:

    def test_consecutive_days_ending_today(self, make_cardio, make_strength):
        workouts = [make_cardio(12), make_strength(13), make_cardio(14), make_cardio(14, hour=20)]
        assert calculate_streak(workouts, date(2026, 10, 14)) == 3

    def test_gap_breaks_streak(self, make_cardio):
        workouts = [make_cardio(10), make_cardio(13), make_cardio(14)]
        assert calculate_streak(workouts, date(2026, 10, 14)) == 2

    def test_no_workout_today(self, make_cardio):
        workouts = [make_cardio(12), make_cardio(13)]
        assert calculate_streak(workouts, date(2026, 10, 14)) == 0

    def test_no_workouts(self):
        assert calculate_streak([], date(2026, 10, 14)) == 0
