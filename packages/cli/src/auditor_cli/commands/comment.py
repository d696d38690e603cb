"""comment commands — add, list and delete line comments."""

from __future__ import annotations

import click
from rich.console import Console

from auditor_cli.runner import run_session
from auditor_cli.surface import open_file

console = Console()


async def _open(controller, surface, file_name: str, lines: list[str]) -> None:
    surface.open(file_name, lines)
    await controller.on_active_file_changed(file_name, len(lines))


@click.group("comment")
def comment_group():
    """Manage review comments anchored to lines (1-based)."""


@comment_group.command("list")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def list_cmd(ctx, path: str):
    """List every comment thread of PATH."""
    file_name, lines = open_file(path)

    async def _list(controller, surface):
        await _open(controller, surface, file_name, lines)

    _, surface = run_session(ctx, console, _list)
    surface.print_threads(file_name)


@comment_group.command("add")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.argument("line", type=click.IntRange(min=1))
@click.argument("body")
@click.pass_context
def add_cmd(ctx, path: str, line: int, body: str):
    """Add a comment with BODY on LINE of PATH."""
    file_name, lines = open_file(path)

    async def _add(controller, surface):
        await _open(controller, surface, file_name, lines)
        return await controller.add_comment(file_name, line - 1, body)

    comment, surface = run_session(ctx, console, _add)
    if comment is None:
        console.print(f"[yellow]Comment was not saved on line {line}. Run with -v for details.[/yellow]")
        ctx.exit(1)
    console.print(f"[green]Added comment #{comment.id} on line {line}.[/green]")
    surface.print_threads(file_name)


@comment_group.command("delete")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.argument("line", type=click.IntRange(min=1))
@click.argument("comment_id", required=False)
@click.pass_context
def delete_cmd(ctx, path: str, line: int, comment_id: str | None):
    """Delete COMMENT_ID from LINE of PATH, or the whole thread when no id is given."""
    file_name, lines = open_file(path)

    async def _delete(controller, surface):
        await _open(controller, surface, file_name, lines)
        if comment_id is None:
            return await controller.delete_thread(file_name, line - 1)
        thread = controller.audited_file(file_name).comment_threads.get(line - 1)
        # Ids arrive as text on the command line; match them against whatever the service issued.
        matches = [c.id for c in (thread.comments if thread else []) if str(c.id) == comment_id]
        if not matches:
            return False
        return await controller.delete_comment(file_name, line - 1, matches[0])

    deleted, surface = run_session(ctx, console, _delete)
    if not deleted:
        console.print(f"[yellow]Nothing to delete on line {line}.[/yellow]")
        ctx.exit(1)
    surface.print_threads(file_name)
