"""Keyword search over workspace files or the content index."""

import re
from pathlib import Path

from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from mission_control import config
from mission_control.indexer import document_date, extract_title, list_sources, read_document
from mission_control.models import DocumentRecord, DocumentType, SearchResult
from mission_control.storage import SnapshotMissingError, load_documents, result_to_dict

console = Console()

SOURCES = ("files", "index")


def compile_query(query: str) -> re.Pattern[str]:
    """Literal, case-insensitive pattern for a query."""
    return re.compile(re.escape(query), re.IGNORECASE)


def count_matches(text: str, query: str) -> int:
    """Number of non-overlapping case-insensitive occurrences of query in text."""
    if not query:
        return 0
    return len(compile_query(query).findall(text))


def compute_relevance(match_count: int) -> float:
    """0.5 for the first match plus 0.1 per match, capped at 1.0."""
    if match_count <= 0:
        return 0.0
    return round(min(1.0, 0.5 + 0.1 * match_count), 2)


def extract_snippet(content: str, query: str) -> str:
    """Text around the first match: 50 chars before to 150 chars after, on one line."""
    match = compile_query(query).search(content)
    if match is None:
        return ""
    start = max(0, match.start() - config.SNIPPET_BEFORE)
    end = min(len(content), match.end() + config.SNIPPET_AFTER)
    return content[start:end].replace("\n", " ").strip() + "..."


def rank_results(results: list[SearchResult], limit: int | None = None) -> list[SearchResult]:
    """Sort by relevance descending (ties keep encounter order) and truncate.

    The limit can lower the cap of SEARCH_LIMIT results but never raise it.
    """
    limit = config.SEARCH_LIMIT if limit is None else min(limit, config.SEARCH_LIMIT)
    ranked = sorted(results, key=lambda r: r.relevance, reverse=True)
    return ranked[:limit]


def search_files(
    query: str,
    workspace: Path | None = None,
    files: list[tuple[str, DocumentType]] | None = None,
    doc_type: DocumentType | None = None,
    limit: int | None = None,
) -> list[SearchResult]:
    """Scan the full content of every source file.

    Finds matches anywhere in a document, at the cost of reading every file.
    """
    if not query.strip():
        return []

    workspace = workspace or config.WORKSPACE_DIR
    files = config.SEARCHED_FILES if files is None else files

    results: list[SearchResult] = []
    result_id = 0

    for rel_path, file_type in list_sources(workspace, files):
        if doc_type is not None and file_type != doc_type:
            continue

        loaded = read_document(workspace, rel_path)
        if loaded is None:
            continue
        content, mtime = loaded

        matches = count_matches(content, query)
        if matches == 0:
            continue

        results.append(
            SearchResult(
                id=f"search-{result_id}",
                type=file_type,
                title=extract_title(content, rel_path),
                content=extract_snippet(content, query),
                path=rel_path,
                date=document_date(rel_path, mtime),
                relevance=compute_relevance(matches),
            )
        )
        result_id += 1

    return rank_results(results, limit)


def search_index(
    query: str,
    documents: list[DocumentRecord],
    doc_type: DocumentType | None = None,
    limit: int | None = None,
) -> list[SearchResult]:
    """Scan title + preview of previously indexed documents.

    Faster than search_files but only sees the first part of each document.
    """
    if not query.strip():
        return []

    results: list[SearchResult] = []
    result_id = 0

    for doc in documents:
        if doc_type is not None and doc.type != doc_type:
            continue

        matches = count_matches(f"{doc.title} {doc.preview}", query)
        if matches == 0:
            continue

        results.append(
            SearchResult(
                id=f"search-{result_id}",
                type=doc.type,
                title=doc.title,
                content=doc.preview,
                path=doc.path,
                date=doc.date,
                relevance=compute_relevance(matches),
            )
        )
        result_id += 1

    return rank_results(results, limit)


def search(
    query: str,
    source: str = "files",
    doc_type: DocumentType | None = None,
    limit: int | None = None,
    workspace: Path | None = None,
    data_dir: Path | None = None,
) -> list[SearchResult]:
    """Search either the workspace files or the index snapshot.

    A missing index snapshot yields no results.
    """
    if source not in SOURCES:
        raise ValueError(f"Unknown search source: {source!r} (expected one of {SOURCES})")

    if source == "index":
        try:
            documents = load_documents(data_dir)
        except SnapshotMissingError:
            logger.info("No search index snapshot yet, returning no results")
            return []
        return search_index(query, documents, doc_type=doc_type, limit=limit)

    return search_files(query, workspace=workspace, doc_type=doc_type, limit=limit)


def highlight_matches(text: str, query: str) -> str:
    """Highlight the query in text using Rich markup."""
    if not query.strip():
        return text
    return compile_query(query).sub(lambda m: f"[bold yellow]{m.group()}[/bold yellow]", text)


def format_human_output(results: list[SearchResult], query: str) -> None:
    """Format results for human-readable output."""
    if not results:
        console.print("[yellow]No results found. Try a different query.[/yellow]")
        return

    for i, result in enumerate(results, 1):
        header = Text()
        header.append(f"[{i}] ", style="bold cyan")
        header.append(result.title, style="green")
        header.append(f" | {result.type.value}", style="dim")
        header.append(f" | {result.date.isoformat()}", style="dim")
        header.append(f" | {int(result.relevance * 100)}%", style="dim")

        panel = Panel(
            highlight_matches(escape(result.content), query),
            title=str(header),
            subtitle=f"→ {result.path}",
            subtitle_align="left",
        )
        console.print(panel)
        console.print()

    console.print("─" * 50)
    console.print(f"Found {len(results)} results")


def format_json_output(results: list[SearchResult], query: str) -> None:
    """Format results as JSON for programmatic use."""
    console.print_json(
        data={
            "query": query,
            "results": [result_to_dict(r) for r in results],
            "total_results": len(results),
        }
    )
