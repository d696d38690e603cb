"""show command — load and print a file's review state and comments."""

from __future__ import annotations

import click
from rich.console import Console

from auditor_cli.runner import run_session
from auditor_cli.surface import open_file

console = Console()


@click.command("show")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--source/--no-source", default=False, help="Print the file with each line coloured by state.")
@click.pass_context
def show_cmd(ctx, path: str, source: bool):
    """Show which lines of PATH are reviewed, modified or ignored, plus its comments."""
    file_name, lines = open_file(path)

    async def _show(controller, surface):
        surface.open(file_name, lines)
        await controller.on_active_file_changed(file_name, len(lines))

    _, surface = run_session(ctx, console, _show)
    surface.print_state(file_name, show_source=source)
    surface.print_threads(file_name)
