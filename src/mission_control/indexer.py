"""Workspace document indexer."""

import re
from datetime import date, datetime, timezone
from pathlib import Path

from loguru import logger

from mission_control import config
from mission_control.models import DocumentRecord, DocumentType

HEADING_RE = re.compile(r"^#[ \t]+(.+)$", re.MULTILINE)
DATE_RE = re.compile(r"(\d{4}-\d{2}-\d{2})")
NOTE_NAME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}\.md$")


def extract_title(content: str, path: str) -> str:
    """Return the first top-level `# ` heading, else the filename without extension."""
    match = HEADING_RE.search(content)
    if match and match.group(1).strip():
        return match.group(1).strip()
    return Path(path).stem


def make_preview(content: str, length: int | None = None) -> str:
    """First `length` characters on one line.

    The trailing "..." is always appended, even for short documents;
    dashboard consumers expect it.
    """
    length = config.PREVIEW_CHARS if length is None else length
    return content[:length].replace("\n", " ").strip() + "..."


def document_date(path: str, mtime: float) -> date:
    """Date embedded in the path (YYYY-MM-DD), else the UTC modification date."""
    match = DATE_RE.search(path)
    if match:
        try:
            return date.fromisoformat(match.group(1))
        except ValueError:
            pass  # e.g. 2026-13-45, fall back to mtime
    return datetime.fromtimestamp(mtime, tz=timezone.utc).date()


def discover_memory_notes(memory_dir: Path | None = None) -> list[Path]:
    """Dated notes (YYYY-MM-DD.md) in the memory directory, oldest first."""
    memory_dir = memory_dir or config.MEMORY_DIR
    if not memory_dir.is_dir():
        return []
    return sorted(p for p in memory_dir.iterdir() if p.is_file() and NOTE_NAME_RE.match(p.name))


def list_sources(
    workspace: Path,
    files: list[tuple[str, DocumentType]],
    memory_dir: Path | None = None,
) -> list[tuple[str, DocumentType]]:
    """The fixed document list followed by every dated note, as relative paths."""
    memory_dir = memory_dir or workspace / "memory"
    sources = list(files)
    for note in discover_memory_notes(memory_dir):
        sources.append((note.relative_to(workspace).as_posix(), DocumentType.MEMORY))
    return sources


def read_document(workspace: Path, rel_path: str) -> tuple[str, float] | None:
    """Read a workspace file, returning (content, mtime) or None if missing/unreadable."""
    full_path = workspace / rel_path
    if not full_path.is_file():
        return None
    try:
        content = full_path.read_text(encoding="utf-8")
        mtime = full_path.stat().st_mtime
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read {rel_path}: {e}")
        return None
    return content, mtime


def index_document(workspace: Path, rel_path: str, doc_type: DocumentType) -> DocumentRecord | None:
    """Build the DocumentRecord for one file, or None if it cannot be read."""
    result = read_document(workspace, rel_path)
    if result is None:
        return None
    content, mtime = result

    return DocumentRecord(
        path=rel_path,
        type=doc_type,
        title=extract_title(content, rel_path),
        preview=make_preview(content),
        date=document_date(rel_path, mtime),
        size=len(content),
    )


def build_search_index(
    workspace: Path | None = None,
    files: list[tuple[str, DocumentType]] | None = None,
) -> list[DocumentRecord]:
    """Index the fixed document list plus the dated notes.

    Missing or unreadable files are skipped.
    """
    workspace = workspace or config.WORKSPACE_DIR
    files = config.INDEXED_FILES if files is None else files

    index: list[DocumentRecord] = []
    for rel_path, doc_type in list_sources(workspace, files):
        record = index_document(workspace, rel_path, doc_type)
        if record is not None:
            index.append(record)

    logger.debug(f"Indexed {len(index)} documents from {workspace}")
    return index
