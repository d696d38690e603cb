"""Session controller: wires the audit clients to the editor surface.

Reacts to two kinds of events coming from the editor:
  - the active file changed      → fetch classification (every time) and
                                   comment threads (once per session)
  - a user action on a selection → mark / clear / transform / comment CRUD

Every handler is an error boundary. Backend failures are logged and the
display is left at its last known-good state; nothing propagates to the
editor. Decoration renders are guarded by the SessionContext token, so a
slow fetch for a file the user already switched away from is dropped
instead of being painted onto the new file.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable

from auditor_core.comment_client import CommentSyncClient
from auditor_core.comments import (
    Author,
    Comment,
    CommentMode,
    CommentThread,
    append_comment,
    cancel_comment,
    commenting_range,
    remove_comment,
    save_comment,
    set_mode,
    update_body,
)
from auditor_core.context import SessionContext
from auditor_core.errors import AuditorError, CommentNotFoundError, StaleFileError
from auditor_core.intervals import Label, LabeledInterval, ReviewState, classify, normalize
from auditor_core.projector import Projection, project
from auditor_core.state_client import AuditStateClient
from auditor_core.utils.files import AUDITED_EXTENSIONS, is_audited_file

if TYPE_CHECKING:
    from auditor_core.surface import EditorSurface
    from auditor_service.base import BaseAuditService
    from auditor_service.models import CommentId

logger = logging.getLogger(__name__)


class LoadState(str, Enum):
    UNLOADED = "Unloaded"
    LOADING = "Loading"
    LOADED = "Loaded"


@dataclass
class AuditedFile:
    """In-memory cache of one file's remote audit state.

    ``intervals`` are replaced wholesale on every successful fetch, never
    merged locally; ``comment_threads`` are seeded once and then changed
    incrementally.
    """

    file_name: str
    total_line_count: int = 0
    intervals: list[LabeledInterval] = field(default_factory=list)
    comment_threads: dict[int, CommentThread] = field(default_factory=dict)
    state: LoadState = LoadState.UNLOADED

    def classification(self) -> dict[int, Label]:
        return classify(self.intervals, self.total_line_count)

    def projection(self) -> Projection:
        return project(self.classification(), self.total_line_count)


class SessionController:
    def __init__(
        self,
        service: BaseAuditService,
        surface: EditorSurface,
        config: dict | None = None,
        context: SessionContext | None = None,
    ):
        config = config or {}
        self.context = context or SessionContext()
        self.files: dict[str, AuditedFile] = {}
        self._surface = surface
        self._states = AuditStateClient(service)
        self._comments = CommentSyncClient(service, self.context)
        self._author = Author(config.get("author") or "auditor")
        self._extensions = config.get("allowed_extensions", AUDITED_EXTENSIONS)
        self._exclude = config.get("exclude", [])

    def audited_file(self, file_name: str) -> AuditedFile:
        """Return the cached file, creating it on first use."""
        if file_name not in self.files:
            self.files[file_name] = AuditedFile(file_name=file_name)
        return self.files[file_name]

    # ------------------------------------------------------------------ #
    # Editor events                                                        #
    # ------------------------------------------------------------------ #

    async def on_active_file_changed(self, file_name: str, line_count: int) -> None:
        """Load everything the newly active file needs.

        Files outside the configured extensions (or excluded) are ignored.
        """
        token = self.context.activate(file_name)
        if not is_audited_file(file_name, self._extensions, self._exclude):
            logger.debug("Skipping %s: not an audited file", file_name)
            return

        audited = self.audited_file(file_name)
        audited.total_line_count = line_count
        audited.state = LoadState.LOADING
        await self._apply_intervals(audited, token, self._states.fetch_state(file_name))
        await self._load_comments(audited)

    async def mark_range(
        self,
        file_name: str,
        line_count: int,
        selection_start: int,
        selection_end: int,
        state: ReviewState,
    ) -> bool:
        """Label the selected lines (REVIEWED, MODIFIED, IGNORED or CLEARED).

        Returns True once the re-fetched state is applied.
        """
        state = ReviewState(state)
        audited = self.audited_file(file_name)
        audited.total_line_count = line_count
        token = self.context.generation
        return await self._apply_intervals(
            audited,
            token,
            self._states.submit_range(file_name, selection_start, selection_end, state, line_count),
        )

    async def transform(self, file_name: str) -> bool:
        audited = self.audited_file(file_name)
        token = self.context.generation
        return await self._apply_intervals(audited, token, self._states.submit_transform(file_name))

    # ------------------------------------------------------------------ #
    # Comment actions                                                      #
    # ------------------------------------------------------------------ #

    async def add_comment(self, file_name: str, line_number: int, body: str) -> Comment | None:
        """Create a comment remotely, then show it. Returns None if nothing was added."""
        audited = self.audited_file(file_name)
        bounds = commenting_range(audited.total_line_count)
        if line_number < 0 or (audited.total_line_count and not (bounds and bounds[0] <= line_number <= bounds[1])):
            logger.warning("Line %d is outside %s (%d lines)", line_number, file_name, audited.total_line_count)
            return None

        try:
            comment = await self._comments.create_comment(file_name, line_number, body, self._author)
            thread = audited.comment_threads.get(line_number) or CommentThread(line_number=line_number)
            append_comment(thread, comment)
        except AuditorError as e:
            logger.warning("Could not add comment on %s:%d (%s): %s", file_name, line_number, type(e).__name__, e)
            return None

        audited.comment_threads[line_number] = thread
        self._surface.show_thread(file_name, thread)
        return comment

    async def delete_comment(self, file_name: str, line_number: int, comment_id: CommentId) -> bool:
        """Delete a comment. Local removal does not wait for the service to agree."""
        thread = self.audited_file(file_name).comment_threads.get(line_number)
        if thread is None or comment_id not in thread:
            logger.warning("No comment %r on %s:%d", comment_id, file_name, line_number)
            return False

        await self._comments.delete_comment(file_name, line_number, comment_id)
        self._remove_local(file_name, thread, comment_id)
        return True

    async def delete_thread(self, file_name: str, line_number: int) -> bool:
        """Delete every comment on a line and dispose its thread."""
        thread = self.audited_file(file_name).comment_threads.get(line_number)
        if thread is None:
            return False
        for comment in list(thread.comments):
            await self._comments.delete_comment(file_name, line_number, comment.id)
            self._remove_local(file_name, thread, comment.id)
        return True

    def edit_comment(self, file_name: str, line_number: int, comment_id: CommentId) -> bool:
        return self._mutate(file_name, line_number, lambda t: set_mode(t, comment_id, CommentMode.EDITING))

    def update_comment_body(self, file_name: str, line_number: int, comment_id: CommentId, body: str) -> bool:
        return self._mutate(file_name, line_number, lambda t: update_body(t, comment_id, body))

    def save_comment(self, file_name: str, line_number: int, comment_id: CommentId) -> bool:
        # The service has no update endpoint; saved edits live for the session only.
        return self._mutate(file_name, line_number, lambda t: save_comment(t, comment_id))

    def cancel_comment(self, file_name: str, line_number: int, comment_id: CommentId) -> bool:
        return self._mutate(file_name, line_number, lambda t: cancel_comment(t, comment_id))

    # ------------------------------------------------------------------ #
    # Internals                                                            #
    # ------------------------------------------------------------------ #

    async def _apply_intervals(
        self,
        audited: AuditedFile,
        token: int,
        fetch: Awaitable[list[LabeledInterval]],
    ) -> bool:
        """Await a fetch, cache its intervals, and render them if the file is still active."""
        file_name = audited.file_name
        try:
            intervals = await fetch
        except AuditorError as e:
            logger.warning("Could not sync review state for %s (%s): %s", file_name, type(e).__name__, e)
            if audited.state is LoadState.LOADING:
                audited.state = LoadState.UNLOADED
            return False

        audited.intervals = normalize(intervals)
        audited.state = LoadState.LOADED
        try:
            self.context.ensure_current(file_name, token)
        except StaleFileError as e:
            logger.debug("Not rendering: %s", e)
            return False

        self._surface.render_decorations(file_name, audited.projection())
        return True

    async def _load_comments(self, audited: AuditedFile) -> None:
        try:
            threads = await self._comments.fetch_comments(audited.file_name)
        except AuditorError as e:
            logger.warning("Could not load comments for %s (%s): %s", audited.file_name, type(e).__name__, e)
            return
        if threads is None:
            return

        # Comments confirmed while the fetch was in flight may be missing from the snapshot.
        for line_number, thread in threads.items():
            local = audited.comment_threads.get(line_number)
            if local is not None:
                for comment in local.comments:
                    if comment.id not in thread:
                        append_comment(thread, comment)
            audited.comment_threads[line_number] = thread
        # Threads are keyed by file, so they render even if another file became active meanwhile.
        for thread in audited.comment_threads.values():
            self._surface.show_thread(audited.file_name, thread)

    def _remove_local(self, file_name: str, thread: CommentThread, comment_id: CommentId) -> None:
        if remove_comment(thread, comment_id):
            self.audited_file(file_name).comment_threads.pop(thread.line_number, None)
            self._surface.dispose_thread(file_name, thread.line_number)
        else:
            self._surface.show_thread(file_name, thread)

    def _mutate(self, file_name: str, line_number: int, action: Callable[[CommentThread], Comment]) -> bool:
        thread = self.audited_file(file_name).comment_threads.get(line_number)
        if thread is None:
            logger.warning("No comment thread on %s:%d", file_name, line_number)
            return False
        try:
            action(thread)
        except CommentNotFoundError as e:
            logger.warning("%s", e)
            return False
        self._surface.show_thread(file_name, thread)
        return True
