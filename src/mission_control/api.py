"""Read-only JSON API for the dashboard."""

from datetime import datetime, timezone

from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse
from loguru import logger

from mission_control import __version__, config
from mission_control.jobs import summarize_jobs
from mission_control.models import ActivityType, DocumentType
from mission_control.searcher import search
from mission_control.storage import (
    SnapshotMissingError,
    job_to_dict,
    load_jobs,
    parse_activity_timestamp,
    read_snapshot,
    result_to_dict,
)

app = FastAPI(title="Mission Control API", version=__version__)


@app.get("/api/activities")
def list_activities(type: ActivityType | None = Query(None, description="Only this activity type")):
    """Activities, newest first. A missing snapshot is an empty feed."""
    try:
        activities = read_snapshot(config.ACTIVITIES_FILE)
    except SnapshotMissingError:
        return {"activities": []}
    except Exception as e:
        logger.error(f"Error reading activities: {e}")
        return JSONResponse(
            status_code=500,
            content={"activities": [], "error": "Failed to load activities"},
        )

    if type is not None:
        activities = [a for a in activities if a.get("type") == type.value]
    activities = sorted(activities, key=lambda a: parse_activity_timestamp(a["timestamp"]), reverse=True)
    return {"activities": activities}


@app.get("/api/cron")
def list_jobs():
    """Scheduled jobs plus the enabled/disabled/today counts."""
    try:
        jobs = load_jobs()
    except Exception as e:
        logger.error(f"Error reading cron jobs: {e}")
        return JSONResponse(
            status_code=500,
            content={"jobs": [], "error": "Failed to load cron jobs"},
        )

    today = datetime.now(tz=timezone.utc).date()
    return {"jobs": [job_to_dict(j) for j in jobs], "summary": summarize_jobs(jobs, today)}


@app.get("/api/search")
def search_endpoint(
    q: str = Query("", description="Search query"),
    source: str = Query("files", pattern="^(files|index)$", description="files or index"),
    type: DocumentType | None = Query(None, description="Only this document type"),
):
    """Top results by relevance. An empty query returns no results."""
    try:
        results = search(q, source=source, doc_type=type)
    except Exception as e:
        logger.error(f"Search error: {e}")
        return JSONResponse(status_code=500, content={"results": [], "error": "Search failed"})
    return {"results": [result_to_dict(r) for r in results]}


@app.get("/api/stats")
def get_stats():
    try:
        stats = read_snapshot(config.STATS_FILE)
    except SnapshotMissingError:
        return {"stats": None}
    except Exception as e:
        logger.error(f"Error reading stats: {e}")
        return JSONResponse(status_code=500, content={"stats": None, "error": "Failed to load stats"})
    return {"stats": stats}


@app.get("/health")
def health():
    return {"status": "ok", "version": __version__}
