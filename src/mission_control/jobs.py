"""Scheduled job helpers.

Jobs are scheduled by the agent itself; here they are only displayed and
overdue `next_run` values are rolled forward for presentation.
"""

from dataclasses import replace
from datetime import date, datetime, timedelta

from mission_control.models import JobRecord

LAST_RUN_OFFSET = timedelta(minutes=5)


def schedule_step(schedule: str) -> timedelta | None:
    """Guess a job's period from its human-readable schedule.

    "daily" wins over "hour", which wins over "min". Returns None when no
    keyword is present.
    """
    lowered = schedule.lower()
    if "daily" in lowered:
        return timedelta(days=1)
    if "hour" in lowered:
        return timedelta(hours=1)
    if "min" in lowered:
        return timedelta(minutes=10)
    return None


def roll_forward(jobs: list[JobRecord], now: datetime) -> list[JobRecord]:
    """Advance every overdue job by one schedule step.

    A job is overdue when next_run < now. Its next_run moves forward once
    (it may still be in the past) and last_run is set to five minutes before
    now. Jobs that are not overdue are returned unchanged.
    """
    rolled: list[JobRecord] = []
    for job in jobs:
        if job.next_run >= now:
            rolled.append(job)
            continue

        step = schedule_step(job.schedule)
        next_run = job.next_run + step if step else job.next_run
        rolled.append(replace(job, next_run=next_run, last_run=now - LAST_RUN_OFFSET))
    return rolled


def summarize_jobs(jobs: list[JobRecord], today: date) -> dict[str, int]:
    """Counts shown above the job list."""
    return {
        "total": len(jobs),
        "enabled": sum(1 for j in jobs if j.enabled),
        "disabled": sum(1 for j in jobs if not j.enabled),
        "today": sum(1 for j in jobs if j.next_run.date() == today),
    }


def format_next_run(next_run: datetime, now: datetime) -> str:
    """Relative label for the next run: Overdue, in 5m, in 3h 20m, or Mon, Jan 5."""
    diff = next_run - now
    if diff < timedelta(0):
        return "Overdue"

    total_minutes = int(diff.total_seconds() // 60)
    hours, minutes = divmod(total_minutes, 60)
    if hours < 1:
        return f"in {minutes}m"
    if hours < 24:
        return f"in {hours}h {minutes}m"
    return f"{next_run:%a}, {next_run:%b} {next_run.day}"
