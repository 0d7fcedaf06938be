"""Integration tests for the JSON API."""

import pytest
from fastapi.testclient import TestClient

from mission_control.api import app
from mission_control.storage import write_snapshot

client = TestClient(app)


@pytest.fixture
def activities_snapshot(patched_config):
    _, data_dir = patched_config
    write_snapshot(
        "activities.json",
        [
            {"id": "act-0", "timestamp": "2026-01-14T10:00:00", "type": "cron",
             "title": "Cron Job", "description": "Ran cron", "status": "success"},
            {"id": "act-1", "timestamp": "2026-01-15T14:00:00", "type": "memory",
             "title": "Research", "description": "Research on crypto", "status": "success"},
            {"id": "act-2", "timestamp": "2026-01-14T12:00:00", "type": "reply",
             "title": "Twitter Reply", "description": "Replied to @sama", "status": "success"},
        ],
        data_dir,
    )
    return data_dir


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_activities_missing_snapshot(patched_config):
    r = client.get("/api/activities")
    assert r.status_code == 200
    assert r.json() == {"activities": []}


def test_activities_newest_first(activities_snapshot):
    r = client.get("/api/activities")
    assert r.status_code == 200
    assert [a["id"] for a in r.json()["activities"]] == ["act-1", "act-2", "act-0"]


def test_activities_type_filter(activities_snapshot):
    r = client.get("/api/activities", params={"type": "reply"})
    assert [a["id"] for a in r.json()["activities"]] == ["act-2"]


def test_activities_malformed_snapshot(patched_config):
    _, data_dir = patched_config
    (data_dir / "activities.json").write_text("[{oops")

    r = client.get("/api/activities")

    assert r.status_code == 500
    assert r.json() == {"activities": [], "error": "Failed to load activities"}


def test_cron_missing_snapshot(patched_config):
    r = client.get("/api/cron")
    assert r.status_code == 500
    assert r.json() == {"jobs": [], "error": "Failed to load cron jobs"}


def test_cron_jobs(patched_config, sample_jobs):
    _, data_dir = patched_config
    write_snapshot("cron-jobs.json", sample_jobs, data_dir)

    r = client.get("/api/cron")

    assert r.status_code == 200
    body = r.json()
    assert body["jobs"] == sample_jobs
    assert body["summary"]["total"] == 3
    assert body["summary"]["enabled"] == 2
    assert body["summary"]["disabled"] == 1


def test_search_empty_query(patched_config):
    assert client.get("/api/search").json() == {"results": []}
    assert client.get("/api/search", params={"q": "   "}).json() == {"results": []}


def test_search_files(patched_config):
    r = client.get("/api/search", params={"q": "Crypto"})

    assert r.status_code == 200
    results = r.json()["results"]
    assert len(results) == 5
    assert results[0]["path"] == "research/crypto-narratives-2026.md"
    assert results[0]["relevance"] == 1.0
    assert set(results[0]) == {"id", "type", "title", "content", "path", "date", "relevance"}


def test_search_type_filter(patched_config):
    r = client.get("/api/search", params={"q": "crypto", "type": "task"})
    assert [res["path"] for res in r.json()["results"]] == ["content/tweet-stats.json"]


def test_search_index_without_snapshot(patched_config):
    r = client.get("/api/search", params={"q": "crypto", "source": "index"})
    assert r.status_code == 200
    assert r.json() == {"results": []}


def test_search_index(patched_config):
    from mission_control.sync import run_sync

    workspace, data_dir = patched_config
    run_sync(workspace=workspace, data_dir=data_dir)

    r = client.get("/api/search", params={"q": "crypto", "source": "index"})

    paths = [res["path"] for res in r.json()["results"]]
    assert paths[0] == "research/crypto-narratives-2026.md"
    assert "content/tweet-stats.json" not in paths


def test_search_bad_source(patched_config):
    r = client.get("/api/search", params={"q": "crypto", "source": "web"})
    assert r.status_code == 422


def test_stats(patched_config):
    assert client.get("/api/stats").json() == {"stats": None}

    _, data_dir = patched_config
    write_snapshot("stats.json", {"lastSync": "2026-01-15T12:00:00.000Z"}, data_dir)
    assert client.get("/api/stats").json() == {"stats": {"lastSync": "2026-01-15T12:00:00.000Z"}}


def test_activities_mixed_timestamps(patched_config):
    _, data_dir = patched_config
    write_snapshot(
        "activities.json",
        [
            {"id": "act-0", "timestamp": "2026-01-15T10:00:00", "type": "cron",
             "title": "Cron Job", "description": "Ran cron", "status": "success"},
            {"id": "act-live-1", "timestamp": "2026-01-15T12:00:00.000Z", "type": "cron",
             "title": "Reply Guy Check", "description": "Scanned", "status": "success"},
        ],
        data_dir,
    )

    r = client.get("/api/activities")

    assert r.status_code == 200
    assert [a["id"] for a in r.json()["activities"]] == ["act-live-1", "act-0"]


def test_search_keeps_query_case(patched_config):
    workspace, _ = patched_config
    (workspace / "TOOLS.md").write_text("# Tools\n\nTrip to İstanbul\n")

    r = client.get("/api/search", params={"q": "İstanbul"})

    assert [res["path"] for res in r.json()["results"]] == ["TOOLS.md"]
