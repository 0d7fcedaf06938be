"""Data models for mission-control."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


class DocumentType(str, Enum):
    MEMORY = "memory"
    DOCUMENT = "document"
    TASK = "task"
    CONVERSATION = "conversation"


class ActivityType(str, Enum):
    TWEET = "tweet"
    REPLY = "reply"
    CRON = "cron"
    SEARCH = "search"
    MEMORY = "memory"
    TASK = "task"
    MESSAGE = "message"


class ActivityStatus(str, Enum):
    SUCCESS = "success"
    PENDING = "pending"
    FAILED = "failed"


class JobType(str, Enum):
    TWEET = "tweet"
    CHECK = "check"
    RESEARCH = "research"
    ENGAGEMENT = "engagement"
    REPORT = "report"
    OTHER = "other"


@dataclass
class DocumentRecord:
    """Indexed metadata about one workspace file."""

    path: str  # relative to the workspace, POSIX separators
    type: DocumentType
    title: str
    preview: str
    date: date
    size: int


@dataclass
class ActivityRecord:
    """One classified event derived from a line of a dated note."""

    id: str
    timestamp: datetime
    type: ActivityType
    title: str
    description: str
    status: ActivityStatus = ActivityStatus.SUCCESS
    metadata: dict[str, str] | None = None


@dataclass
class SearchResult:
    """A keyword search hit."""

    id: str
    type: DocumentType
    title: str
    content: str  # snippet (file search) or preview (index search)
    path: str
    date: date
    relevance: float


@dataclass
class JobRecord:
    """A scheduled job as published by the agent."""

    id: str
    name: str
    schedule: str
    next_run: datetime
    enabled: bool
    type: JobType = JobType.OTHER
    last_run: datetime | None = None
