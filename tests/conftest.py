"""Pytest fixtures for mission-control tests."""

import json
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def workspace(temp_dir):
    """A small agent workspace with documents and dated notes.

    TOOLS.md is intentionally absent and memory/notes.md is not a dated note.
    """
    root = temp_dir / "workspace"
    files = {
        "MEMORY.md": "# Long-term Memory\n\nCrypto narratives matter. Research daily.\n",
        "SOUL.md": "# Soul\n\nBe helpful and curious.\n",
        "USER.md": "The user likes crypto and coffee.\n",
        "research/crypto-narratives-2026.md": "# Crypto Narratives 2026\n\n" + "crypto " * 10,
        "content/tweet-queue.md": "# Tweet Queue\n\n- gm\n",
        "content/tweet-stats.json": json.dumps({"posted": 4, "topic": "crypto"}),
        "memory/2026-01-14.md": (
            "# Jan 14\n\n## Twitter\nReplied to @sama about GPT\n\n## Ops\nRan cron job for posting\n"
        ),
        "memory/2026-01-15.md": "# Jan 15\n\nResearch on crypto markets\n",
        "memory/notes.md": "# Scratch\n\ncrypto scratch\n",
    }
    for rel_path, content in files.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def data_dir(temp_dir):
    path = temp_dir / "data"
    path.mkdir()
    return path


@pytest.fixture
def patched_config(workspace, data_dir):
    """Point the config module at the temporary workspace and data directory."""
    with patch("mission_control.config.WORKSPACE_DIR", workspace):
        with patch("mission_control.config.MEMORY_DIR", workspace / "memory"):
            with patch("mission_control.config.DATA_DIR", data_dir):
                yield workspace, data_dir


@pytest.fixture
def sample_jobs():
    """Job list as published by the agent."""
    return [
        {
            "id": "job-1",
            "name": "Morning Tweet",
            "schedule": "daily at 9am",
            "nextRun": "2026-01-14T09:00:00.000Z",
            "enabled": True,
            "type": "tweet",
        },
        {
            "id": "job-2",
            "name": "Reply Guy Check",
            "schedule": "every 30 min",
            "nextRun": "2026-01-15T18:00:00.000Z",
            "lastRun": "2026-01-15T11:30:00.000Z",
            "enabled": True,
            "type": "check",
        },
        {
            "id": "job-3",
            "name": "Weekly Report",
            "schedule": "weekly on Sunday",
            "nextRun": "2026-01-18T10:00:00.000Z",
            "enabled": False,
            "type": "report",
        },
    ]
