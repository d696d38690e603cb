"""Editor surface interface.

The host that displays files implements EditorSurface. The session
controller only ever talks to this interface, so the same core drives an
IDE extension, the terminal CLI, or a test double.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from auditor_core.comments import CommentThread
    from auditor_core.projector import Projection


class EditorSurface(ABC):
    @abstractmethod
    def render_decorations(self, file_name: str, projection: Projection) -> None:
        """Replace every audit decoration of the file with the given batches."""

    @abstractmethod
    def show_thread(self, file_name: str, thread: CommentThread) -> None:
        """Create the visual thread for ``thread.line_number``, or refresh it if shown."""

    @abstractmethod
    def dispose_thread(self, file_name: str, line_number: int) -> None:
        """Remove the visual thread anchored at the given line."""
