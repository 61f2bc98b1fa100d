"""
Workout Module - turns terse workout messages into stored logs.

Features:
- Cardio / strength classification of inbound messages
- Structured extraction (distance, duration, pace, sets)
- Confirmation text and current streak
- Log storage, weekly stats and archive tagging
"""

from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional

import pytz

from modules.base import BaseModule
from modules.classifier import MessageClassifier
from modules.extractor import WorkoutExtractor, render_confirmation
from modules.lexicon import Lexicon
from modules.models import Classification, WeeklyStats, WorkoutLogEntry
from modules.stats import aggregate, calculate_streak
from utils.helpers import truncate_text, week_window

STREAK_LOOKBACK_DAYS = 60


class WorkoutModule(BaseModule):
    """Workout logging and weekly stats"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.lexicon = Lexicon.from_config(self.settings)
        self.classifier = MessageClassifier(self.lexicon)
        self.extractor = WorkoutExtractor(
            self.lexicon,
            clock=self.get_now_in_timezone,
        )

    def get_name(self) -> str:
        return "workout"

    def setup_database(self):
        """Index workout logs by user and date"""
        self.db["workout_logs"].create_index([("user_id", 1), ("date", 1)])

    def handle_message(self, message: str, user_id: str) -> Optional[Dict]:
        """
        Classify and extract a workout log.

        Returns:
            {"entry", "confirmation", "streak"} for a stored log, None otherwise
        """
        classification, rule = self.classifier.explain(message)
        if classification is Classification.NOT_A_LOG:
            self.logger.debug(f"Not a log ({rule}) for user {user_id}: {truncate_text(message, 40)!r}")
            return None

        entry = self.extractor.extract(message, classification)
        if entry is None:
            self.logger.info(f"Rejected {classification.value} candidate for user {user_id}")
            return None

        self._store_entry(entry, user_id)
        streak = self.get_streak(user_id)

        confirmation = render_confirmation(entry)
        if streak > 1:
            confirmation += f"\n{streak}-day streak"

        return {"entry": entry, "confirmation": confirmation, "streak": streak}

    def _utc_range(self, start: date, end: date):
        """UTC bounds of local calendar days [start, end]."""
        start_at = self.timezone.localize(datetime.combine(start, time.min)).astimezone(pytz.utc)
        end_at = self.timezone.localize(datetime.combine(end + timedelta(days=1), time.min)).astimezone(pytz.utc)
        return start_at, end_at

    def _find_entries(self, query: Dict) -> List[WorkoutLogEntry]:
        entries = []
        for document in self.db["workout_logs"].find(query).sort("date", 1):
            document = dict(document, date=self.to_local(document["date"]))
            entries.append(WorkoutLogEntry.from_document(document))
        return entries

    def get_logs_between(self, user_id: str, start: date, end: date) -> List[WorkoutLogEntry]:
        """Stored logs for user with local calendar date in [start, end], archived or not."""
        start_at, end_at = self._utc_range(start, end)
        return self._find_entries({"user_id": user_id, "date": {"$gte": start_at, "$lt": end_at}})

    def get_unarchived_logs(self, user_id: str, since: datetime, until: datetime) -> List[WorkoutLogEntry]:
        """Logs in [since, until) not yet covered by a weekly report."""
        return self._find_entries({
            "user_id": user_id,
            "date": {"$gte": as_utc(since), "$lt": as_utc(until)},
            "archived_week": {"$exists": False},
        })

    def get_week_logs(self, user_id: str, day: Optional[date] = None) -> List[WorkoutLogEntry]:
        """Logs from the Monday-to-Sunday week containing day (default today)."""
        week_start, week_end = week_window(day or self.get_today_in_timezone())
        return self.get_logs_between(user_id, week_start, week_end)

    def get_weekly_stats(
        self,
        user_id: str,
        prior_week_total: Optional[int] = None,
        day: Optional[date] = None
    ) -> WeeklyStats:
        return aggregate(self.get_week_logs(user_id, day), prior_week_total)

    def get_streak(self, user_id: str) -> int:
        today = self.get_today_in_timezone()
        recent = self.get_logs_between(user_id, today - timedelta(days=STREAK_LOOKBACK_DAYS), today)
        return calculate_streak(recent, today)

    def archive_logs(self, user_id: str, since: datetime, until: datetime, week_start: date) -> int:
        """
        Tag a user's unarchived logs in [since, until) with the reported week.

        Logs stay in the collection so streaks keep counting across weeks.

        Returns:
            Number of logs tagged
        """
        result = self.db["workout_logs"].update_many(
            {
                "user_id": user_id,
                "date": {"$gte": as_utc(since), "$lt": as_utc(until)},
                "archived_week": {"$exists": False},
            },
            {"$set": {"archived_week": week_start.isoformat()}}
        )
        return result.modified_count

    # ---------------------------------------------------------------------
    # Helper methods
    # ---------------------------------------------------------------------
    def _store_entry(self, entry: WorkoutLogEntry, user_id: str) -> str:
        """Store a log entry and return its record ID."""
        result = self.db["workout_logs"].insert_one(entry.to_document(user_id))
        self.logger.info(f"Stored {entry.category.value} log for {user_id} (id: {result.inserted_id})")
        return str(result.inserted_id)


def as_utc(when: datetime) -> datetime:
    """Aware UTC datetime; naive values are taken as UTC, as MongoDB returns them."""
    if when.tzinfo is None:
        return pytz.utc.localize(when)
    return when.astimezone(pytz.utc)
