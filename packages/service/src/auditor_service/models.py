"""Wire-level records exchanged with the Audit State Service.

Decoupled from auditor_core so the transport can be used on its own (e.g.
by scripts that only dump review state) without pulling in the session
machinery.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

# Inclusive [start_line, end_line], zero-based.
LineRange = tuple[int, int]

# The contract promises a positive integer; the reference service hands out
# UUID strings. Either way the client never makes one up.
CommentId = Union[int, str]


@dataclass
class ReviewStateRecord:
    """Line classification for one file as returned by ``GET reviews``."""

    reviewed: list[LineRange] = field(default_factory=list)
    modified: list[LineRange] = field(default_factory=list)
    ignored: list[LineRange] = field(default_factory=list)


@dataclass
class CommentRecord:
    """A single comment as stored by the service."""

    id: CommentId
    body: str
    author: str


class Priority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    IGNORE = "Ignore"


@dataclass
class FileInfoRecord:
    """Latest known audit information for one file (``GET info``)."""

    file_name: str
    line_reviews: ReviewStateRecord
    comments: dict[int, list[CommentRecord]] = field(default_factory=dict)
    priority: Priority | None = None
