"""
Weekly progress report job.

For every eligible user: gather the logs not yet reported, look up last
week's total, aggregate, derive directives, write the summary, archive the
week and tag its logs as reported. One user's failure is logged and
counted; the run continues with the next user.

A report covers the logs from where the previous report stopped up to the
moment the job runs, so a log sent after a run lands in the next report.
Logs are tagged, not deleted, so streaks keep their history.
"""

from datetime import date, datetime, time
from typing import Callable, Dict, Optional

import pytz
from pymongo import DESCENDING

from modules.insights import build_prompts
from modules.stats import aggregate
from modules.workout import as_utc
from utils.helpers import parse_time, week_window
from utils.logger import get_logger

INACTIVE_STATUSES = ("cancelled", "inactive")


class WeeklyReportJob:
    """Builds and archives weekly summaries for all users"""

    def __init__(
        self,
        db,
        workout_module,
        openai_client,
        min_account_age_days: int = 5,
        deliver: Optional[Callable[[str, str], None]] = None,
    ):
        """
        Args:
            db: MongoDB database instance
            workout_module: WorkoutModule used to read and tag logs
            openai_client: OpenAIClient used to write the summary
            min_account_age_days: Users younger than this are skipped
            deliver: Callable(user_id, message) that sends the summary; the
                     message channel lives outside this service
        """
        self.db = db
        self.workout_module = workout_module
        self.openai_client = openai_client
        self.min_account_age_days = min_account_age_days
        self.deliver = deliver
        self.logger = get_logger("weekly_report")

    def get_last_archive(self, user_id: str) -> Optional[Dict]:
        """
        Most recent weekly_history record for user.

        Lookup failures are logged and treated as "no history".
        """
        try:
            return self.db["weekly_history"].find_one(
                {"user_id": user_id}, sort=[("week_start", DESCENDING)]
            )
        except Exception as e:
            self.logger.error(f"Prior-week lookup failed for {user_id}: {e}")
            return None

    def get_prior_week_total(self, user_id: str) -> Optional[int]:
        """Workout count of the most recent archived week."""
        record = self.get_last_archive(user_id)
        if not record or record.get("total_volume") is None:
            return None
        return int(record["total_volume"])

    def report_start(self, last_archive: Optional[Dict], week_start: date) -> datetime:
        """Where the previous report stopped, else the start of this week."""
        covered_until = (last_archive or {}).get("covered_until")
        if isinstance(covered_until, datetime):
            return as_utc(covered_until)
        local_start = self.workout_module.timezone.localize(datetime.combine(week_start, time.min))
        return local_start.astimezone(pytz.utc)

    def skip_reason(self, user: Dict, today: date) -> Optional[str]:
        if user.get("subscription_status") in INACTIVE_STATUSES:
            return "inactive subscription"

        created_at = user.get("created_at")
        if isinstance(created_at, str):
            created_at = parse_time(created_at)
        if isinstance(created_at, datetime):
            created_at = created_at.date()
        if isinstance(created_at, date):
            age = (today - created_at).days
            if age < self.min_account_age_days:
                return f"new user ({age} days old)"
        return None

    def build_report(self, user: Dict, now: datetime) -> Optional[Dict]:
        """
        Compute one user's week up to now.

        Returns:
            Report dict, or None when the user logged nothing since the last report
        """
        user_id = user["user_id"]
        week_start, week_end = week_window(now.date())

        last_archive = self.get_last_archive(user_id)
        since = self.report_start(last_archive, week_start)
        until = as_utc(now)

        workouts = self.workout_module.get_unarchived_logs(user_id, since, until)
        if not workouts:
            return None

        prior_total = None
        if last_archive and last_archive.get("total_volume") is not None:
            prior_total = int(last_archive["total_volume"])

        stats = aggregate(workouts, prior_total)
        goal = user.get("goal")
        prompts = build_prompts(stats, goal)
        insight = self.openai_client.generate_weekly_insight(
            stats, prompts, name=user.get("name"), goal=goal
        )

        return {
            "user_id": user_id,
            "week_start": week_start.isoformat(),
            "week_end": week_end.isoformat(),
            "covered_from": since,
            "covered_until": until,
            "total_volume": stats.total_workouts,
            "stats": stats.to_dict(),
            "prompts": prompts,
            "insight": insight,
        }

    def format_message(self, report: Dict) -> str:
        start = date.fromisoformat(report["week_start"])
        end = date.fromisoformat(report["week_end"])
        label = f"{start.strftime('%b')} {start.day}-{end.day}"
        return (f"Week of {label}\n\n{report['insight']}\n\n"
                "Keep up the momentum! What's your focus for next week?")

    def archive(self, report: Dict) -> None:
        """Store the week summary and tag the reported logs."""
        self.db["weekly_history"].insert_one(dict(report, created_at=datetime.now(pytz.utc)))
        tagged = self.workout_module.archive_logs(
            report["user_id"],
            report["covered_from"],
            report["covered_until"],
            date.fromisoformat(report["week_start"]),
        )
        self.logger.info(f"Archived week for {report['user_id']} ({tagged} logs tagged)")

    def run(self, now: Optional[datetime] = None) -> Dict[str, int]:
        """
        Process every user.

        Args:
            now: Run instant (default: now in the module timezone)

        Returns:
            Counts: {"sent", "skipped", "errors"}
        """
        now = now or self.workout_module.get_now_in_timezone()
        today = now.date()
        counts = {"sent": 0, "skipped": 0, "errors": 0}
        self.logger.info("Starting weekly progress check...")

        for user in self.db["users"].find({}):
            user_id = user.get("user_id", "<unknown>")
            try:
                reason = self.skip_reason(user, today)
                if reason:
                    self.logger.info(f"Skipping {user_id}: {reason}")
                    counts["skipped"] += 1
                    continue

                report = self.build_report(user, now)
                if report is None:
                    self.logger.info(f"Skipping {user_id}: no workouts this week")
                    counts["skipped"] += 1
                    continue

                if self.deliver:
                    self.deliver(user_id, self.format_message(report))
                self.archive(report)
                counts["sent"] += 1
                self.logger.info(f"Sent weekly report to {user_id}")
            except Exception as e:
                self.logger.error(f"Error processing user {user_id}: {e}", exc_info=True)
                counts["errors"] += 1

        self.logger.info(
            f"Weekly progress check complete. Sent: {counts['sent']}, "
            f"Skipped: {counts['skipped']}, Errors: {counts['errors']}"
        )
        return counts
