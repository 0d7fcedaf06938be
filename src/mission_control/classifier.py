"""Line classifier turning dated notes into activity records.

Each rule is an independent predicate over a single line. A line may fire
several rules and yield several records; lines matching no rule yield none.
"""

import itertools
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from datetime import date, datetime, time
from pathlib import Path

from loguru import logger

from mission_control import config
from mission_control.indexer import discover_memory_notes
from mission_control.models import ActivityRecord, ActivityStatus, ActivityType

MARKUP_RE = re.compile(r"[|*#-]")
SECTION_RE = re.compile(r"^#{1,6}\s+(.+?)\s*$")
REPLY_WORD_RE = re.compile(r"\brepl(?:y|ied|ies)\b", re.IGNORECASE)


def is_reply(line: str) -> bool:
    lowered = line.lower()
    return bool(REPLY_WORD_RE.search(line)) and any(h in lowered for h in config.REPLY_HANDLES)


def is_cron(line: str) -> bool:
    return "cron" in line.lower()


def is_research(line: str) -> bool:
    lowered = line.lower()
    return any(keyword in lowered for keyword in config.RESEARCH_KEYWORDS)


@dataclass(frozen=True)
class Rule:
    """Maps a line predicate to a fixed activity type, title and time of day."""

    type: ActivityType
    title: str
    at: time  # synthetic time of day, not the real event time
    matches: Callable[[str], bool]


RULES: tuple[Rule, ...] = (
    Rule(ActivityType.REPLY, "Twitter Reply", time(12, 0), is_reply),
    Rule(ActivityType.CRON, "Cron Job", time(10, 0), is_cron),
    Rule(ActivityType.MEMORY, "Research", time(14, 0), is_research),
)


def clean_description(line: str) -> str:
    """Strip markdown table/emphasis/heading/list characters and truncate."""
    return MARKUP_RE.sub("", line).strip()[: config.DESCRIPTION_CHARS]


def classify_note(
    text: str,
    note_date: date,
    ids: Iterator[int] | None = None,
) -> list[ActivityRecord]:
    """Classify every line of one note, in line order.

    The heading a line falls under is recorded as the "section" annotation.
    It is informational only and does not affect which rules fire.
    """
    ids = ids if ids is not None else itertools.count()
    activities: list[ActivityRecord] = []
    section: str | None = None

    for line in text.split("\n"):
        heading = SECTION_RE.match(line)
        if heading:
            section = heading.group(1)

        for rule in RULES:
            if not rule.matches(line):
                continue
            activities.append(
                ActivityRecord(
                    id=f"act-{next(ids)}",
                    timestamp=datetime.combine(note_date, rule.at),
                    type=rule.type,
                    title=rule.title,
                    description=clean_description(line),
                    status=ActivityStatus.SUCCESS,
                    metadata={"section": section} if section else None,
                )
            )

    return activities


def collect_activities(memory_dir: Path | None = None, days: int | None = None) -> list[ActivityRecord]:
    """Classify the most recent dated notes, newest first.

    Ids are sequential across all notes of the run. Unreadable notes are skipped.
    """
    days = config.ACTIVITY_DAYS if days is None else days
    notes = list(reversed(discover_memory_notes(memory_dir)))[:days]

    ids = itertools.count()
    activities: list[ActivityRecord] = []
    for note in notes:
        try:
            note_date = date.fromisoformat(note.stem)
            text = note.read_text(encoding="utf-8")
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read note {note.name}: {e}")
            continue
        activities.extend(classify_note(text, note_date, ids))

    return activities
