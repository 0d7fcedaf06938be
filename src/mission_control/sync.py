"""Rebuild the dashboard snapshots from the workspace."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from loguru import logger
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from mission_control import config
from mission_control.classifier import collect_activities
from mission_control.indexer import build_search_index
from mission_control.jobs import roll_forward
from mission_control.models import ActivityRecord, ActivityStatus, ActivityType, DocumentRecord, JobRecord
from mission_control.storage import (
    SnapshotMissingError,
    activity_to_dict,
    document_to_dict,
    format_timestamp,
    job_to_dict,
    load_jobs,
    write_snapshot,
)

console = Console()


def sync_jobs(now: datetime, data_dir: Path | None = None) -> list[JobRecord]:
    """Load the published job list and roll overdue jobs forward.

    A missing job list is treated as empty.
    """
    try:
        jobs = load_jobs(data_dir)
    except SnapshotMissingError:
        logger.warning("No cron job list found, writing an empty one")
        return []
    return roll_forward(jobs, now)


def compute_stats(
    activities: list[ActivityRecord],
    jobs: list[JobRecord],
    index: list[DocumentRecord],
    now: datetime,
) -> dict[str, Any]:
    """Headline numbers for the dashboard, derived from the rebuilt datasets."""
    today = now.date()
    succeeded = sum(1 for a in activities if a.status == ActivityStatus.SUCCESS)
    success_rate = round(100 * succeeded / len(activities)) if activities else 100

    return {
        "lastSync": format_timestamp(now),
        "activeCronJobs": sum(1 for j in jobs if j.enabled),
        "totalCronJobs": len(jobs),
        "todayActivities": sum(1 for a in activities if a.timestamp.date() == today),
        "successRate": success_rate,
        "repliesSent": sum(1 for a in activities if a.type == ActivityType.REPLY),
        "tweetsPosted": sum(1 for a in activities if a.type == ActivityType.TWEET),
        "indexedDocuments": len(index),
    }


def run_sync(
    workspace: Path | None = None,
    data_dir: Path | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Rebuild and write all four snapshots.

    Args:
        workspace: Agent workspace to read from.
        data_dir: Directory the snapshots are written to.
        now: Reference time for job roll-forward and stats.

    Returns the stats snapshot.
    """
    workspace = workspace or config.WORKSPACE_DIR
    data_dir = data_dir or config.DATA_DIR
    now = now or datetime.now(tz=timezone.utc)

    console.print(f"Syncing from {workspace}")

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Classifying activities...", total=3)
        activities = collect_activities(workspace / "memory")
        progress.advance(task)

        progress.update(task, description="Rolling jobs forward...")
        jobs = sync_jobs(now, data_dir)
        progress.advance(task)

        progress.update(task, description="Building search index...")
        index = build_search_index(workspace)
        progress.advance(task)

    stats = compute_stats(activities, jobs, index, now)

    write_snapshot(config.ACTIVITIES_FILE, [activity_to_dict(a) for a in activities], data_dir)
    write_snapshot(config.JOBS_FILE, [job_to_dict(j) for j in jobs], data_dir)
    write_snapshot(config.INDEX_FILE, [document_to_dict(d) for d in index], data_dir)
    write_snapshot(config.STATS_FILE, stats, data_dir)

    logger.debug(f"Snapshots written to {data_dir}")
    console.print(f"[green]Synced {len(activities)} activities[/green]")
    console.print(f"[green]Synced {len(jobs)} cron jobs[/green]")
    console.print(f"[green]Indexed {len(index)} files[/green]")
    return stats
