"""Per-session state shared by the session controller and the comment sync client.

Holds what would otherwise be process-wide globals: the set of files whose
comments are already loaded, and the active-file token that lets a fetch
completion tell whether its file is still the one on screen.

The comment memo is never invalidated during a session. Comments another
client adds to an already-loaded file stay invisible until reset() (or a
restart). This is a known staleness window.
"""

from __future__ import annotations

from auditor_core.errors import StaleFileError


class SessionContext:
    def __init__(self):
        self.initialized: set[str] = set()
        self.loading: set[str] = set()
        self.active_file: str | None = None
        self.generation = 0

    def activate(self, file_name: str) -> int:
        """Record a new active file and return the token for work started now."""
        self.active_file = file_name
        self.generation += 1
        return self.generation

    def is_current(self, file_name: str, token: int) -> bool:
        return self.active_file == file_name and self.generation == token

    def ensure_current(self, file_name: str, token: int) -> None:
        if not self.is_current(file_name, token):
            raise StaleFileError(file_name, self.active_file)

    def reset(self) -> None:
        self.initialized.clear()
        self.loading.clear()
        self.active_file = None
        # Tokens stay unique so work started before the reset still reads as stale.
        self.generation += 1
