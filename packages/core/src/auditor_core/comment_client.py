"""Comment sync client: comment threads against the Audit State Service.

Threads are fetched once per file per session (memoized in the
SessionContext) and afterwards changed incrementally. A created comment is
only ever built from the id the service returned, so nothing is displayed
under an identity the service does not hold.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from auditor_core.comments import Author, Comment, CommentThread, append_comment
from auditor_core.errors import BackendError

if TYPE_CHECKING:
    from auditor_core.context import SessionContext
    from auditor_service.base import BaseAuditService
    from auditor_service.models import CommentId, CommentRecord

logger = logging.getLogger(__name__)


def threads_from_records(records: dict[int, list[CommentRecord]]) -> dict[int, CommentThread]:
    """Build local threads from the service mapping, skipping lines with no comments.

    A record repeating an id already seen on its line is dropped.
    """
    threads: dict[int, CommentThread] = {}
    for line_number in sorted(records):
        thread = CommentThread(line_number=line_number)
        for record in records[line_number]:
            if record.id in thread:
                logger.warning("Skipping duplicate comment %r on line %d", record.id, line_number)
                continue
            append_comment(thread, Comment(id=record.id, body=record.body, author=Author(record.author)))
        if thread.comments:
            threads[line_number] = thread
    return threads


class CommentSyncClient:
    def __init__(self, service: BaseAuditService, context: SessionContext):
        self._service = service
        self._context = context

    def is_loaded(self, file_name: str) -> bool:
        return file_name in self._context.initialized

    async def fetch_comments(self, file_name: str) -> dict[int, CommentThread] | None:
        """Return the file's threads, or None when they are already loaded or loading.

        A failed fetch leaves the file unloaded so the next activation retries.
        """
        if file_name in self._context.initialized or file_name in self._context.loading:
            return None

        self._context.loading.add(file_name)
        try:
            records = await self._service.fetch_comments(file_name)
            threads = threads_from_records(records)
        finally:
            self._context.loading.discard(file_name)

        self._context.initialized.add(file_name)
        logger.debug("Loaded %d comment thread(s) for %s", len(threads), file_name)
        return threads

    async def create_comment(self, file_name: str, line_number: int, body: str, author: Author) -> Comment:
        """Persist a comment and return it with the service-assigned id.

        Raises BackendError when the service does not confirm the comment.
        """
        comment_id = await self._service.create_comment(file_name, line_number, body, author.name)
        return Comment(id=comment_id, body=body, author=author)

    async def delete_comment(self, file_name: str, line_number: int, comment_id: CommentId) -> bool:
        """Ask the service to delete a comment; return whether it confirmed.

        Callers remove the comment locally either way.
        """
        try:
            await self._service.delete_comment(file_name, line_number, comment_id)
        except BackendError as e:
            logger.warning(
                "Could not delete comment %r on %s:%d (%s): %s",
                comment_id,
                file_name,
                line_number,
                type(e).__name__,
                e,
            )
            return False
        return True
