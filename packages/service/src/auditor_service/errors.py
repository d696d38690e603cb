"""Error taxonomy shared by the service transport and the core sync layer."""

from __future__ import annotations


class AuditorError(Exception):
    """Base class for every error raised by the auditor packages."""


class BackendError(AuditorError):
    """The Audit State Service could not complete a request."""


class NetworkError(BackendError):
    """Transport-level failure: unreachable host, DNS, timeout, reset connection."""


class ServiceError(BackendError):
    """The service answered, but with a non-2xx status or an unusable body."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
