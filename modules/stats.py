"""
Weekly statistics over a user's parsed workout logs.
"""

from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from modules.models import (
    Consistency,
    TrainingBalance,
    VolumeTrend,
    WeeklyStats,
    WorkoutCategory,
    WorkoutLogEntry,
)
from utils.helpers import percent_of, round_half_up
from utils.logger import get_logger

logger = get_logger("stats")

HIGH_CONSISTENCY_DAYS = 4
MODERATE_CONSISTENCY_DAYS = 2


def classify_consistency(active_days: int) -> Consistency:
    if active_days >= HIGH_CONSISTENCY_DAYS:
        return Consistency.HIGH
    if active_days >= MODERATE_CONSISTENCY_DAYS:
        return Consistency.MODERATE
    return Consistency.LOW


def compare_volume(current: int, prior: Optional[int]):
    """
    Week-over-week trend of workout counts.

    Returns:
        (VolumeTrend, percent or None). A missing or zero prior week gives
        UNKNOWN with no percent, since there is nothing to divide by.
    """
    if prior is None:
        return VolumeTrend.UNKNOWN, None
    if prior == 0:
        logger.debug("Prior week total is 0; trend is unknown")
        return VolumeTrend.UNKNOWN, None
    if current > prior:
        return VolumeTrend.INCREASING, round_half_up(100 * (current - prior) / prior)
    if current < prior:
        return VolumeTrend.DECREASING, round_half_up(100 * (prior - current) / prior)
    return VolumeTrend.STABLE, 0


def aggregate(
    workouts: Sequence[WorkoutLogEntry],
    prior_week_total: Optional[int] = None,
) -> WeeklyStats:
    """
    Summarise one week of workouts.

    Args:
        workouts: The week's parsed log entries
        prior_week_total: Workout count of the previous week, if known

    Returns:
        WeeklyStats; the empty-week sentinel when there are no workouts
    """
    if not workouts:
        return WeeklyStats.empty_week()

    total = len(workouts)
    cardio_count = strength_count = 0
    total_distance = 0.0
    total_duration = 0
    active_days = set()

    for workout in workouts:
        active_days.add(workout.date.date())
        if workout.category is WorkoutCategory.CARDIO:
            cardio_count += 1
            if workout.cardio.distance:
                total_distance += workout.cardio.distance
            if workout.cardio.duration_minutes:
                total_duration += workout.cardio.duration_minutes
        else:
            strength_count += 1

    # Strength takes the remainder so the two always sum to 100. When both
    # shares end in .5 (1 of 8 is 12.5 / 87.5) this gives 13 / 87, where
    # rounding strength on its own would give 88.
    cardio_percent = percent_of(cardio_count, total)
    balance = TrainingBalance(
        cardio_percent=cardio_percent,
        strength_percent=100 - cardio_percent,
    )

    trend, change = compare_volume(total, prior_week_total)

    return WeeklyStats(
        total_workouts=total,
        cardio_count=cardio_count,
        strength_count=strength_count,
        total_distance=total_distance,
        total_duration_minutes=total_duration,
        active_day_count=len(active_days),
        training_balance=balance,
        consistency=classify_consistency(len(active_days)),
        volume_trend=trend,
        volume_change_percent=change,
    )


def calculate_streak(workouts: Iterable[WorkoutLogEntry], today: date) -> int:
    """
    Consecutive days with at least one workout, counting back from today.

    A streak that does not include today is 0.
    """
    days = {workout.date.date() for workout in workouts}
    streak = 0
    expected = today
    while expected in days:
        streak += 1
        expected -= timedelta(days=1)
    return streak
