"""Locations and fixed tables for mission-control.

Paths come from the environment when set:

- MISSION_CONTROL_WORKSPACE: the agent workspace (default: parent of cwd)
- MISSION_CONTROL_DATA: where snapshots are written (default: ./data)
"""

import os
from pathlib import Path

from mission_control.models import DocumentType

WORKSPACE_DIR = Path(os.environ.get("MISSION_CONTROL_WORKSPACE", Path.cwd().parent))
DATA_DIR = Path(os.environ.get("MISSION_CONTROL_DATA", Path.cwd() / "data"))
MEMORY_DIR = WORKSPACE_DIR / "memory"

# Snapshot filenames inside DATA_DIR
ACTIVITIES_FILE = "activities.json"
JOBS_FILE = "cron-jobs.json"
INDEX_FILE = "search-index.json"
STATS_FILE = "stats.json"

# Documents picked up by the index builder
INDEXED_FILES: list[tuple[str, DocumentType]] = [
    ("MEMORY.md", DocumentType.MEMORY),
    ("SOUL.md", DocumentType.DOCUMENT),
    ("USER.md", DocumentType.DOCUMENT),
    ("TOOLS.md", DocumentType.DOCUMENT),
    ("research/crypto-narratives-2026.md", DocumentType.MEMORY),
    ("content/tweet-queue.md", DocumentType.TASK),
]

# Live search also reads the tweet stats
SEARCHED_FILES: list[tuple[str, DocumentType]] = INDEXED_FILES + [
    ("content/tweet-stats.json", DocumentType.TASK),
]

PREVIEW_CHARS = 300
SNIPPET_BEFORE = 50
SNIPPET_AFTER = 150
SEARCH_LIMIT = 20

DESCRIPTION_CHARS = 150
ACTIVITY_DAYS = 7

# Accounts whose replies show up in the activity feed
REPLY_HANDLES = ("@sama", "@noahkagan", "@shaunmmaguire")
RESEARCH_KEYWORDS = ("research", "crypto")

API_HOST = os.environ.get("MISSION_CONTROL_HOST", "127.0.0.1")
API_PORT = int(os.environ.get("MISSION_CONTROL_PORT", "8000"))
