"""Tests for the jobs module."""

from datetime import date, datetime, timedelta, timezone

from mission_control.jobs import format_next_run, roll_forward, schedule_step, summarize_jobs
from mission_control.models import JobRecord, JobType

NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def make_job(schedule: str, next_run: datetime, enabled: bool = True) -> JobRecord:
    return JobRecord(
        id="job",
        name="Job",
        schedule=schedule,
        next_run=next_run,
        enabled=enabled,
        type=JobType.CHECK,
    )


def test_schedule_step():
    assert schedule_step("daily at 9am") == timedelta(days=1)
    assert schedule_step("Daily digest") == timedelta(days=1)
    assert schedule_step("every hour") == timedelta(hours=1)
    assert schedule_step("hourly") == timedelta(hours=1)
    assert schedule_step("every 30 min") == timedelta(minutes=10)
    assert schedule_step("weekly on Sunday") is None


def test_roll_forward_daily():
    job = make_job("daily at 9am", datetime(2026, 1, 14, 9, 0, tzinfo=timezone.utc))

    [rolled] = roll_forward([job], NOW)

    assert rolled.next_run == datetime(2026, 1, 15, 9, 0, tzinfo=timezone.utc)
    assert rolled.last_run == NOW - timedelta(minutes=5)
    # The input is left untouched
    assert job.last_run is None


def test_roll_forward_single_step_only():
    """A long-overdue job moves one step, not up to now."""
    job = make_job("every hour", datetime(2026, 1, 15, 8, 0, tzinfo=timezone.utc))
    [rolled] = roll_forward([job], NOW)
    assert rolled.next_run == datetime(2026, 1, 15, 9, 0, tzinfo=timezone.utc)


def test_roll_forward_minutes():
    job = make_job("every 30 min", datetime(2026, 1, 15, 11, 55, tzinfo=timezone.utc))
    [rolled] = roll_forward([job], NOW)
    assert rolled.next_run == datetime(2026, 1, 15, 12, 5, tzinfo=timezone.utc)


def test_roll_forward_unknown_schedule():
    next_run = datetime(2026, 1, 11, 10, 0, tzinfo=timezone.utc)
    [rolled] = roll_forward([make_job("weekly on Sunday", next_run)], NOW)
    assert rolled.next_run == next_run
    assert rolled.last_run == NOW - timedelta(minutes=5)


def test_roll_forward_leaves_future_jobs():
    job = make_job("daily", NOW + timedelta(hours=2))
    assert roll_forward([job], NOW) == [job]


def test_summarize_jobs():
    jobs = [
        make_job("daily", NOW + timedelta(hours=1)),
        make_job("daily", NOW + timedelta(days=2)),
        make_job("weekly", NOW + timedelta(hours=3), enabled=False),
    ]
    assert summarize_jobs(jobs, date(2026, 1, 15)) == {
        "total": 3,
        "enabled": 2,
        "disabled": 1,
        "today": 2,
    }


def test_format_next_run():
    assert format_next_run(NOW - timedelta(minutes=1), NOW) == "Overdue"
    assert format_next_run(NOW + timedelta(minutes=30), NOW) == "in 30m"
    assert format_next_run(NOW + timedelta(hours=3, minutes=20), NOW) == "in 3h 20m"
    assert format_next_run(NOW + timedelta(days=2), NOW) == "Sat, Jan 17"
