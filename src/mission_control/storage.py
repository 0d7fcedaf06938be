"""JSON snapshot storage for mission-control.

Each dataset lives in one JSON file under the data directory and is always
replaced wholesale.
"""

import json
import os
import tempfile
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

from mission_control import config
from mission_control.models import (
    ActivityRecord,
    ActivityStatus,
    ActivityType,
    DocumentRecord,
    DocumentType,
    JobRecord,
    JobType,
    SearchResult,
)


class SnapshotMissingError(FileNotFoundError):
    """Raised when a snapshot file has not been written yet."""


def get_data_dir() -> Path:
    return config.DATA_DIR


def snapshot_path(name: str, data_dir: Path | None = None) -> Path:
    return (data_dir or get_data_dir()) / name


def snapshot_exists(name: str, data_dir: Path | None = None) -> bool:
    return snapshot_path(name, data_dir).exists()


def read_snapshot(name: str, data_dir: Path | None = None) -> Any:
    """Load a snapshot.

    Raises SnapshotMissingError if the file is absent. Malformed JSON is not
    caught here; json.JSONDecodeError reaches the caller.
    """
    path = snapshot_path(name, data_dir)
    if not path.exists():
        raise SnapshotMissingError(f"Snapshot not found: {path}")
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def write_snapshot(name: str, data: Any, data_dir: Path | None = None) -> Path:
    """Write a snapshot atomically (temp file in the same directory + rename)."""
    path = snapshot_path(name, data_dir)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path


# Timestamps


def format_timestamp(dt: datetime) -> str:
    """Format an aware datetime as UTC ISO-8601 with millisecond precision and Z."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    utc = dt.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


# Records <-> JSON


def document_to_dict(doc: DocumentRecord) -> dict[str, Any]:
    return {
        "path": doc.path,
        "type": doc.type.value,
        "title": doc.title,
        "preview": doc.preview,
        "date": doc.date.isoformat(),
        "size": doc.size,
    }


def document_from_dict(data: dict[str, Any]) -> DocumentRecord:
    return DocumentRecord(
        path=data["path"],
        type=DocumentType(data["type"]),
        title=data["title"],
        preview=data["preview"],
        date=date.fromisoformat(data["date"]),
        size=int(data.get("size", 0)),
    )


def activity_to_dict(activity: ActivityRecord) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": activity.id,
        "timestamp": activity.timestamp.isoformat(),
        "type": activity.type.value,
        "title": activity.title,
        "description": activity.description,
        "status": activity.status.value,
    }
    if activity.metadata:
        data["metadata"] = dict(activity.metadata)
    return data


def parse_activity_timestamp(value: str) -> datetime:
    """Parse an activity timestamp as a naive datetime.

    Classified activities carry naive note-day times; offset-bearing values
    (e.g. "...Z") are converted to UTC and made naive so a feed can be sorted.
    """
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def activity_from_dict(data: dict[str, Any]) -> ActivityRecord:
    return ActivityRecord(
        id=data["id"],
        timestamp=parse_activity_timestamp(data["timestamp"]),
        type=ActivityType(data["type"]),
        title=data["title"],
        description=data.get("description", ""),
        status=ActivityStatus(data.get("status", ActivityStatus.SUCCESS.value)),
        metadata=data.get("metadata"),
    )


def job_to_dict(job: JobRecord) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": job.id,
        "name": job.name,
        "schedule": job.schedule,
        "nextRun": format_timestamp(job.next_run),
    }
    if job.last_run is not None:
        data["lastRun"] = format_timestamp(job.last_run)
    data["enabled"] = job.enabled
    data["type"] = job.type.value
    return data


def job_from_dict(data: dict[str, Any]) -> JobRecord:
    try:
        job_type = JobType(data.get("type", JobType.OTHER.value))
    except ValueError:
        job_type = JobType.OTHER

    last_run = data.get("lastRun")
    return JobRecord(
        id=data["id"],
        name=data["name"],
        schedule=data.get("schedule", ""),
        next_run=parse_timestamp(data["nextRun"]),
        enabled=bool(data.get("enabled", True)),
        type=job_type,
        last_run=parse_timestamp(last_run) if last_run else None,
    )


def result_to_dict(result: SearchResult) -> dict[str, Any]:
    return {
        "id": result.id,
        "type": result.type.value,
        "title": result.title,
        "content": result.content,
        "path": result.path,
        "date": result.date.isoformat(),
        "relevance": result.relevance,
    }


# Typed loaders


def load_documents(data_dir: Path | None = None) -> list[DocumentRecord]:
    return [document_from_dict(d) for d in read_snapshot(config.INDEX_FILE, data_dir)]


def load_activities(data_dir: Path | None = None) -> list[ActivityRecord]:
    return [activity_from_dict(a) for a in read_snapshot(config.ACTIVITIES_FILE, data_dir)]


def load_jobs(data_dir: Path | None = None) -> list[JobRecord]:
    return [job_from_dict(j) for j in read_snapshot(config.JOBS_FILE, data_dir)]


def get_snapshot_stats(data_dir: Path | None = None) -> dict[str, Any]:
    """Describe the snapshot files currently on disk."""
    data_dir = data_dir or get_data_dir()
    files = []
    for name in (config.ACTIVITIES_FILE, config.JOBS_FILE, config.INDEX_FILE, config.STATS_FILE):
        path = snapshot_path(name, data_dir)
        if path.exists():
            stat = path.stat()
            files.append(
                {
                    "name": name,
                    "exists": True,
                    "size_human": _format_size(stat.st_size),
                    "modified": datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat(),
                }
            )
        else:
            files.append({"name": name, "exists": False, "size_human": "-", "modified": None})

    last_sync = None
    if snapshot_exists(config.STATS_FILE, data_dir):
        stats = read_snapshot(config.STATS_FILE, data_dir)
        if isinstance(stats, dict):
            last_sync = stats.get("lastSync")

    return {"data_dir": str(data_dir), "files": files, "last_sync": last_sync}


def _format_size(size_bytes: int) -> str:
    """Format byte size as human-readable string."""
    size = float(size_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"
