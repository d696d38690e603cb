"""info and priority commands — service-wide overview and file metadata."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from auditor_cli.runner import run_service
from auditor_core.errors import BackendError
from auditor_service.models import Priority

console = Console()

_PRIORITY_STYLE = {
    Priority.HIGH: "red",
    Priority.MEDIUM: "yellow",
    Priority.LOW: "blue",
    Priority.IGNORE: "dim",
}


def _line_count(ranges: list[tuple[int, int]]) -> int:
    return sum(end - start + 1 for start, end in ranges)


@click.command("info")
@click.option("--limit", default=50, show_default=True, help="Maximum number of files to show.")
@click.pass_context
def info_cmd(ctx, limit: int):
    """Show the latest audit progress of every file known to the service."""

    async def _list(service):
        return await service.list_files()

    try:
        records = run_service(ctx, _list)
    except BackendError as e:
        raise click.ClickException(f"Could not reach the audit service: {e}") from e

    if not records:
        console.print("[yellow]No audited files found.[/yellow]")
        return

    table = Table(title="Audit overview", show_header=True, header_style="bold cyan")
    table.add_column("File")
    table.add_column("Priority", width=9)
    table.add_column("Reviewed", justify="right", width=9)
    table.add_column("Modified", justify="right", width=9)
    table.add_column("Ignored", justify="right", width=8)
    table.add_column("Comments", justify="right", width=9)

    for r in sorted(records, key=lambda r: r.file_name)[:limit]:
        priority = ""
        if r.priority is not None:
            style = _PRIORITY_STYLE.get(r.priority, "white")
            priority = f"[{style}]{r.priority.value}[/{style}]"
        table.add_row(
            r.file_name,
            priority,
            str(_line_count(r.line_reviews.reviewed)),
            str(_line_count(r.line_reviews.modified)),
            str(_line_count(r.line_reviews.ignored)),
            str(sum(len(c) for c in r.comments.values())),
        )

    console.print(table)


@click.command("priority")
@click.argument("file_name")
@click.argument("level", type=click.Choice([p.value.lower() for p in Priority]))
@click.pass_context
def priority_cmd(ctx, file_name: str, level: str):
    """Set the audit priority of FILE_NAME (as known to the service)."""
    priority = Priority(level.capitalize())

    async def _update(service):
        await service.update_priority(file_name, priority)

    try:
        run_service(ctx, _update)
    except BackendError as e:
        raise click.ClickException(f"Could not update priority: {e}") from e
    console.print(f"[green]{file_name}: priority set to {priority.value}.[/green]")
