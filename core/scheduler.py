"""
Task scheduler for the weekly progress report.

Jobs run on the `schedule` library's clock; times are local to the
process, so run the service with TZ matching the configured timezone.
"""

import time
from typing import Callable, Dict, List

import schedule

from utils.logger import get_logger

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


class Scheduler:
    """Manages recurring jobs"""

    def __init__(self, scheduler: schedule.Scheduler = None):
        self.scheduler = scheduler or schedule.Scheduler()
        self.tasks = []
        self.logger = get_logger("scheduler")

    def add_weekly_task(self, day: str, time_str: str, function: Callable, name: str):
        """
        Add a task that runs once a week.

        Args:
            day: Weekday name (e.g. "sunday")
            time_str: Time in HH:MM format (24-hour)
            function: Callable taking no arguments
            name: Label used in logs
        """
        day = day.lower()
        if day not in WEEKDAYS:
            raise ValueError(f"Unknown weekday: {day}")

        job = getattr(self.scheduler.every(), day).at(time_str).do(self._run_task, function, name)
        self.tasks.append({"day": day, "time": time_str, "name": name, "job": job})
        self.logger.info(f"Scheduled: {name} every {day} at {time_str}")
        return job

    def _run_task(self, function: Callable, name: str):
        """Execute a scheduled task; a failure never stops the loop."""
        try:
            function()
            self.logger.info(f"Executed scheduled task: {name}")
        except Exception as e:
            self.logger.error(f"Scheduled task failed ({name}): {e}", exc_info=True)

    def run(self, interval_seconds: int = 60):
        """Start the scheduler loop (blocking)"""
        self.logger.info("Scheduler started")
        while True:
            self.scheduler.run_pending()
            time.sleep(interval_seconds)

    def get_next_run_times(self) -> List[Dict]:
        """Get next run times for all scheduled tasks"""
        return [
            {
                "task": task["name"],
                "next_run": task["job"].next_run.strftime("%Y-%m-%d %H:%M:%S") if task["job"].next_run else "Not scheduled"
            }
            for task in self.tasks
        ]
