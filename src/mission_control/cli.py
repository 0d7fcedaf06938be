"""CLI for mission-control."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from mission_control import __version__, config
from mission_control.log import configure_logging
from mission_control.models import ActivityType, DocumentType

app = typer.Typer(
    name="mission-control",
    help="Activity feed, job status and keyword search over an agent workspace.",
    no_args_is_help=True,
)
console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"mission-control {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
    debug: Annotated[bool, typer.Option("--debug", help="Verbose logging")] = False,
) -> None:
    """Mission Control dashboard back end."""
    configure_logging(debug)


@app.command()
def sync(
    workspace: Annotated[
        Path | None, typer.Option("--workspace", "-w", help="Agent workspace directory")
    ] = None,
    data_dir: Annotated[
        Path | None, typer.Option("--data", "-d", help="Snapshot output directory")
    ] = None,
) -> None:
    """Rebuild the activity, job, index and stats snapshots."""
    from mission_control.sync import run_sync

    try:
        run_sync(workspace=workspace, data_dir=data_dir)
    except json.JSONDecodeError as e:
        console.print(f"[red]Malformed snapshot: {e}[/red]")
        raise typer.Exit(1) from e
    console.print("\n[bold green]Sync complete![/bold green]")


@app.command()
def search(
    query: Annotated[str, typer.Argument(help="Search query")],
    use_index: Annotated[
        bool, typer.Option("--index", "-i", help="Search the index snapshot instead of the files")
    ] = False,
    doc_type: Annotated[
        DocumentType | None, typer.Option("--type", "-t", help="Only this document type")
    ] = None,
    limit: Annotated[
        int, typer.Option("--limit", "-n", min=1, max=config.SEARCH_LIMIT, help="Number of results")
    ] = config.SEARCH_LIMIT,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Search workspace documents for a keyword."""
    if not query.strip():
        console.print("[red]Error: Query required[/red]")
        raise typer.Exit(1)

    from mission_control.searcher import format_human_output, format_json_output
    from mission_control.searcher import search as run_search

    try:
        results = run_search(
            query,
            source="index" if use_index else "files",
            doc_type=doc_type,
            limit=limit,
        )
    except json.JSONDecodeError as e:
        console.print(f"[red]Malformed index snapshot: {e}[/red]")
        raise typer.Exit(1) from e

    if json_output:
        format_json_output(results, query)
    else:
        format_human_output(results, query)


@app.command()
def activities(
    activity_type: Annotated[
        ActivityType | None, typer.Option("--type", "-t", help="Only this activity type")
    ] = None,
    limit: Annotated[int, typer.Option("--limit", "-n", help="Number of activities")] = 50,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show the activity feed, newest first."""
    from mission_control.storage import SnapshotMissingError, activity_to_dict, load_activities

    try:
        items = load_activities()
    except SnapshotMissingError:
        items = []
    except json.JSONDecodeError as e:
        console.print(f"[red]Malformed activities snapshot: {e}[/red]")
        raise typer.Exit(1) from e

    if activity_type is not None:
        items = [a for a in items if a.type == activity_type]
    items = sorted(items, key=lambda a: a.timestamp, reverse=True)[:limit]

    if json_output:
        console.print_json(data={"activities": [activity_to_dict(a) for a in items]})
        return

    if not items:
        console.print("[yellow]No activities. Run 'mission-control sync' first.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("When", style="dim")
    table.add_column("Type", style="cyan")
    table.add_column("Title")
    table.add_column("Description")
    for a in items:
        table.add_row(a.timestamp.strftime("%Y-%m-%d %H:%M"), a.type.value, a.title, escape(a.description))
    console.print(table)


@app.command()
def jobs(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """List scheduled jobs."""
    from mission_control.jobs import format_next_run, summarize_jobs
    from mission_control.storage import SnapshotMissingError, job_to_dict, load_jobs

    try:
        job_list = load_jobs()
    except SnapshotMissingError:
        console.print("[red]No cron job list found. Run 'mission-control sync' first.[/red]")
        raise typer.Exit(1)
    except json.JSONDecodeError as e:
        console.print(f"[red]Malformed cron job snapshot: {e}[/red]")
        raise typer.Exit(1) from e

    now = datetime.now(tz=timezone.utc)
    summary = summarize_jobs(job_list, now.date())

    if json_output:
        console.print_json(data={"jobs": [job_to_dict(j) for j in job_list], "summary": summary})
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("")
    table.add_column("Name")
    table.add_column("Type", style="cyan")
    table.add_column("Schedule", style="dim")
    table.add_column("Next run")
    for job in job_list:
        table.add_row(
            "[green]●[/green]" if job.enabled else "[dim]○[/dim]",
            job.name,
            job.type.value,
            job.schedule,
            format_next_run(job.next_run, now),
        )
    console.print(table)
    console.print(
        f"Active: {summary['enabled']} | Today: {summary['today']} | Disabled: {summary['disabled']}"
    )


@app.command()
def status() -> None:
    """Show snapshot files and the last sync time."""
    from mission_control.storage import get_snapshot_stats

    stats = get_snapshot_stats()
    console.print(f"Data path: {stats['data_dir']}")
    console.print(f"Workspace: {config.WORKSPACE_DIR}")
    for f in stats["files"]:
        if f["exists"]:
            console.print(f"  [cyan]{f['name']}[/cyan]: {f['size_human']}, modified {f['modified']}")
        else:
            console.print(f"  [cyan]{f['name']}[/cyan]: [yellow]missing[/yellow]")
    console.print(f"Last sync: {stats['last_sync'] or 'never'}")


@app.command()
def serve(
    host: Annotated[str, typer.Option("--host", help="Bind address")] = config.API_HOST,
    port: Annotated[int, typer.Option("--port", "-p", help="Port")] = config.API_PORT,
    reload: Annotated[bool, typer.Option("--reload", help="Reload on code changes")] = False,
) -> None:
    """Run the JSON API."""
    import uvicorn

    uvicorn.run("mission_control.api:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
