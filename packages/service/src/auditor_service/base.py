"""Abstract Audit State Service interface.

The core depends on BaseAuditService, not on a concrete transport, so the
HTTP client can be swapped (or faked in tests) without touching the
session controller.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from auditor_service.models import CommentId, CommentRecord, FileInfoRecord, Priority, ReviewStateRecord


class BaseAuditService(ABC):
    """Async request/response contract of the remote authority.

    Every method may suspend on network I/O. Implementations raise
    ``NetworkError`` or ``ServiceError`` on failure and never retry: a
    failed write is re-issued by the user repeating the action.
    """

    @abstractmethod
    async def fetch_state(self, file_name: str) -> ReviewStateRecord:
        """Return the current line classification for a file."""

    @abstractmethod
    async def submit_range(
        self,
        file_name: str,
        start_line: int,
        end_line: int,
        review_state: str,
        total_lines: int,
    ) -> None:
        """Label an inclusive line range. The response body is not authoritative."""

    @abstractmethod
    async def submit_transform(self, file_name: str) -> None:
        """Ask the service to recompute the file's classification."""

    @abstractmethod
    async def fetch_comments(self, file_name: str) -> dict[int, list[CommentRecord]]:
        """Return every comment thread of a file keyed by zero-based line."""

    @abstractmethod
    async def create_comment(self, file_name: str, line_number: int, body: str, author: str) -> CommentId:
        """Persist a new comment and return the id the service assigned to it."""

    @abstractmethod
    async def delete_comment(self, file_name: str, line_number: int, comment_id: CommentId) -> None:
        """Remove one comment from a thread."""

    @abstractmethod
    async def update_priority(self, file_name: str, priority: Priority) -> None:
        """Attach an audit priority to a file."""

    @abstractmethod
    async def list_files(self) -> list[FileInfoRecord]:
        """Return the latest audit information for every file the service knows."""

    async def close(self) -> None:
        """Release any resources held by the service client (connection pools).

        Optional — subclasses that need cleanup should override this.
        Default is a no-op so callers can always await close() safely.
        """
