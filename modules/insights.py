"""
Insight prompt builder - turns WeeklyStats into short directives for the
weekly summary writer.

Directive order is fixed and the writer consumes them in this order:
volume trend, training balance, consistency, goal.
"""

from typing import List, Optional

from modules.models import VolumeTrend, WeeklyStats

DOMINANT_SHARE = 80
PRAISE_DAYS = 5
ENCOURAGE_DAYS = 2


def trend_directive(stats: WeeklyStats) -> Optional[str]:
    if stats.volume_trend is VolumeTrend.INCREASING:
        return (f"Volume increased {stats.volume_change_percent}% from last week "
                "- acknowledge progress")
    if stats.volume_trend is VolumeTrend.DECREASING:
        return (f"Volume decreased {stats.volume_change_percent}% from last week "
                "- gentle reminder about consistency")
    return None


def balance_directive(stats: WeeklyStats) -> Optional[str]:
    balance = stats.training_balance
    if balance.cardio_percent > DOMINANT_SHARE:
        return f"Training is {balance.cardio_percent}% cardio - suggest adding strength work"
    if balance.strength_percent > DOMINANT_SHARE:
        return f"Training is {balance.strength_percent}% strength - suggest adding cardio for recovery"
    if stats.cardio_count > 0 and stats.strength_count > 0:
        return (f"Good balance: {stats.cardio_count} cardio + "
                f"{stats.strength_count} strength sessions")
    return None


def consistency_directive(stats: WeeklyStats) -> Optional[str]:
    days = stats.active_day_count
    if days >= PRAISE_DAYS:
        return f"Trained {days} days - excellent consistency"
    if days <= ENCOURAGE_DAYS:
        return f"Only {days} training days - encourage more consistency"
    return None


def build_prompts(stats: WeeklyStats, goal: Optional[str] = None) -> List[str]:
    """
    Derive the ordered directive list for a week.

    Args:
        stats: Aggregated week
        goal: The user's stated goal, if any

    Returns:
        Directive strings; only the goal directive for an empty week
    """
    prompts = []

    if not stats.no_data_this_week:
        for directive in (trend_directive, balance_directive, consistency_directive):
            text = directive(stats)
            if text:
                prompts.append(text)

    if goal and goal.strip():
        prompts.append(f"User goal: {goal.strip()} - relate insights to their goal")

    return prompts
