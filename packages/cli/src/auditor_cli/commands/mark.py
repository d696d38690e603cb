"""mark and transform commands — change a file's line classification."""

from __future__ import annotations

import click
from rich.console import Console

from auditor_cli.runner import run_session
from auditor_cli.surface import open_file
from auditor_core.intervals import ReviewState

console = Console()

_STATES = {
    "reviewed": ReviewState.REVIEWED,
    "modified": ReviewState.MODIFIED,
    "ignored": ReviewState.IGNORED,
    "cleared": ReviewState.CLEARED,
}


@click.command("mark")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.argument("start", type=click.IntRange(min=1))
@click.argument("end", type=click.IntRange(min=1), required=False)
@click.option(
    "--as",
    "state",
    type=click.Choice(sorted(_STATES)),
    default="reviewed",
    show_default=True,
    help="State to apply; 'cleared' removes any state from the lines.",
)
@click.pass_context
def mark_cmd(ctx, path: str, start: int, end: int | None, state: str):
    """Mark lines START..END of PATH (1-based, inclusive).

    END defaults to START. A reversed range is accepted as-is.
    """
    file_name, lines = open_file(path)
    end = start if end is None else end

    async def _mark(controller, surface):
        surface.open(file_name, lines)
        controller.context.activate(file_name)
        return await controller.mark_range(file_name, len(lines), start - 1, end - 1, _STATES[state])

    applied, surface = run_session(ctx, console, _mark)
    if not applied:
        console.print(f"[yellow]Could not mark lines of {path}; state unchanged. Run with -v for details.[/yellow]")
        ctx.exit(1)
    surface.print_state(file_name)


@click.command("transform")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def transform_cmd(ctx, path: str):
    """Ask the service to recompute PATH's review state against its baseline."""
    file_name, lines = open_file(path)

    async def _transform(controller, surface):
        surface.open(file_name, lines)
        controller.context.activate(file_name)
        controller.audited_file(file_name).total_line_count = len(lines)
        return await controller.transform(file_name)

    applied, surface = run_session(ctx, console, _transform)
    if not applied:
        console.print(f"[yellow]Could not transform {path}. Run with -v for details.[/yellow]")
        ctx.exit(1)
    surface.print_state(file_name)
