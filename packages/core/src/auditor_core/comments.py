"""Comment thread model.

A thread is the ordered list of comments anchored to one zero-based line.
Order is arrival order and doubles as display order. A thread that loses
its last comment is disposed: an empty thread has nothing to show.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from auditor_core.errors import CommentNotFoundError, DuplicateCommentError

if TYPE_CHECKING:
    from auditor_service.models import CommentId


class CommentMode(str, Enum):
    PREVIEW = "Preview"
    EDITING = "Editing"


@dataclass(frozen=True)
class Author:
    name: str


@dataclass
class Comment:
    """One comment. ``id`` always comes from the service, never from the client."""

    id: CommentId
    body: str
    author: Author
    mode: CommentMode = CommentMode.PREVIEW
    saved_body: str | None = None  # last committed body; defaults to body

    def __post_init__(self):
        if self.saved_body is None:
            self.saved_body = self.body


@dataclass
class CommentThread:
    line_number: int
    comments: list[Comment] = field(default_factory=list)
    disposed: bool = False

    def __contains__(self, comment_id: CommentId) -> bool:
        return any(c.id == comment_id for c in self.comments)

    def __len__(self) -> int:
        return len(self.comments)

    def get(self, comment_id: CommentId) -> Comment:
        for comment in self.comments:
            if comment.id == comment_id:
                return comment
        raise CommentNotFoundError(f"No comment {comment_id!r} on line {self.line_number}")


def append_comment(thread: CommentThread, comment: Comment) -> None:
    """Add a comment at the end of the thread."""
    if comment.id in thread:
        raise DuplicateCommentError(f"Comment {comment.id!r} already exists on line {thread.line_number}")
    thread.comments = [*thread.comments, comment]
    thread.disposed = False


def remove_comment(thread: CommentThread, comment_id: CommentId) -> bool:
    """Drop a comment; return True when the thread became empty and was disposed."""
    thread.get(comment_id)
    thread.comments = [c for c in thread.comments if c.id != comment_id]
    if not thread.comments:
        thread.disposed = True
    return thread.disposed


def set_mode(thread: CommentThread, comment_id: CommentId, mode: CommentMode) -> Comment:
    comment = thread.get(comment_id)
    comment.mode = CommentMode(mode)
    return comment


def update_body(thread: CommentThread, comment_id: CommentId, body: str) -> Comment:
    """Replace the working body; committed by save_comment, undone by cancel_comment."""
    comment = thread.get(comment_id)
    comment.body = body
    return comment


def save_comment(thread: CommentThread, comment_id: CommentId) -> Comment:
    comment = thread.get(comment_id)
    comment.saved_body = comment.body
    comment.mode = CommentMode.PREVIEW
    return comment


def cancel_comment(thread: CommentThread, comment_id: CommentId) -> Comment:
    comment = thread.get(comment_id)
    comment.body = comment.saved_body
    comment.mode = CommentMode.PREVIEW
    return comment


def commenting_range(line_count: int) -> tuple[int, int] | None:
    """Lines on which a new thread may be started, or None for an empty file."""
    if line_count <= 0:
        return None
    return 0, line_count - 1
