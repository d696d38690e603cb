"""Errors raised by the core. Transport errors are re-exported from auditor_service."""

from __future__ import annotations

from auditor_service.errors import AuditorError, BackendError, NetworkError, ServiceError

__all__ = [
    "AuditorError",
    "BackendError",
    "NetworkError",
    "ServiceError",
    "StaleFileError",
    "CommentNotFoundError",
    "DuplicateCommentError",
    "ConfigError",
]


class StaleFileError(AuditorError):
    """A fetch resolved after the file it was issued for stopped being active."""

    def __init__(self, file_name: str, active_file: str | None):
        super().__init__(f"Result for {file_name!r} arrived after switching to {active_file!r}")
        self.file_name = file_name
        self.active_file = active_file


class CommentNotFoundError(AuditorError, KeyError):
    """A thread mutation referenced a comment id the thread does not hold."""


class DuplicateCommentError(AuditorError):
    """A comment id is already present in the thread."""


class ConfigError(AuditorError):
    """Raised when the config file is malformed or unreadable."""
