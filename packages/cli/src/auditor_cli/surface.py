"""Terminal editor surface.

Collects decoration batches and comment threads the session controller
emits, then prints the final view once the command's work is done. Line
numbers are shown 1-based, the way editors display them.
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from auditor_core.comments import CommentMode, CommentThread
from auditor_core.intervals import Label, classify
from auditor_core.projector import Projection
from auditor_core.surface import EditorSurface

_LABEL_STYLE = {
    Label.REVIEWED: "green",
    Label.MODIFIED: "yellow",
    Label.IGNORED: "dim",
}


def open_file(path: str) -> tuple[str, list[str]]:
    """Return the absolute file name used as the remote key, and the file's lines."""
    p = Path(path).resolve()
    return str(p), p.read_text(errors="replace").splitlines()


class ConsoleSurface(EditorSurface):
    def __init__(self, console: Console | None = None):
        self._console = console or Console()
        self._lines: dict[str, list[str]] = {}
        self.projections: dict[str, Projection] = {}
        self.threads: dict[str, dict[int, CommentThread]] = {}

    def open(self, file_name: str, lines: list[str]) -> None:
        self._lines[file_name] = lines

    def render_decorations(self, file_name: str, projection: Projection) -> None:
        self.projections[file_name] = projection

    def show_thread(self, file_name: str, thread: CommentThread) -> None:
        self.threads.setdefault(file_name, {})[thread.line_number] = thread

    def dispose_thread(self, file_name: str, line_number: int) -> None:
        self.threads.get(file_name, {}).pop(line_number, None)

    # ------------------------------------------------------------------ #
    # Output                                                               #
    # ------------------------------------------------------------------ #

    def print_state(self, file_name: str, show_source: bool = False) -> None:
        projection = self.projections.get(file_name)
        if projection is None:
            self._console.print(f"[yellow]No review state available for {file_name}.[/yellow]")
            return

        table = Table(title=f"Review state — {file_name}", show_header=True, header_style="bold cyan")
        table.add_column("State", style="bold", width=10)
        table.add_column("Lines")
        table.add_column("Count", justify="right", width=7)
        for label in (Label.REVIEWED, Label.MODIFIED, Label.IGNORED):
            ranges = projection.ranges(label)
            style = _LABEL_STYLE[label]
            table.add_row(
                f"[{style}]{label.value}[/{style}]",
                ", ".join(_format_range(r) for r in ranges) or "-",
                str(sum(end - start + 1 for start, end in ranges)),
            )
        self._console.print(table)

        lines = self._lines.get(file_name)
        if show_source and lines:
            self._print_source(lines, classify(projection.to_intervals(), len(lines)))

    def print_threads(self, file_name: str) -> None:
        threads = self.threads.get(file_name, {})
        if not threads:
            self._console.print("[dim]No comments.[/dim]")
            return
        for line_number in sorted(threads):
            self._console.print(f"[bold]Line {line_number + 1}[/bold]")
            for comment in threads[line_number].comments:
                editing = " [italic](editing)[/italic]" if comment.mode is CommentMode.EDITING else ""
                self._console.print(
                    f"  [cyan]{comment.author.name}[/cyan] [dim]#{comment.id}[/dim]{editing}: {escape(comment.body)}",
                    highlight=False,
                )

    def _print_source(self, lines: list[str], classification: dict[int, Label]) -> None:
        width = len(str(len(lines)))
        for number, line in enumerate(lines):
            style = _LABEL_STYLE.get(classification.get(number, Label.UNSET), "")
            text = Text(f"{number + 1:>{width}} ", style="dim")
            text.append(line, style=style)
            self._console.print(text)


def _format_range(line_range: tuple[int, int]) -> str:
    start, end = line_range
    if start == end:
        return str(start + 1)
    return f"{start + 1}-{end + 1}"
