"""HttpAuditService — the Audit State Service over plain JSON/HTTP.

Resources hang off a single base URL:

  GET    reviews?file_name=…    line classification
  POST   reviews                label a line range
  POST   transform              recompute a file's classification
  GET    comments?file_name=…   comment threads
  POST   comments               create a comment, returns its id
  DELETE comments               delete a comment
  POST   metadata               set a file's priority
  GET    info                   latest state of every known file

The service answers successful reads with 201 as well as 200, so any 2xx
counts as success.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from auditor_service.base import BaseAuditService
from auditor_service.errors import NetworkError, ServiceError
from auditor_service.models import CommentId, CommentRecord, FileInfoRecord, LineRange, Priority, ReviewStateRecord

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "http://localhost:3000/"
DEFAULT_TIMEOUT = 10.0


class HttpAuditService(BaseAuditService):
    """Talks to the Audit State Service with a shared ``httpx.AsyncClient``.

    Pass ``transport`` to route requests somewhere other than the network
    (``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._endpoint = endpoint
        self._client = httpx.AsyncClient(
            base_url=endpoint,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    # ------------------------------------------------------------------ #
    # Line reviews                                                         #
    # ------------------------------------------------------------------ #

    async def fetch_state(self, file_name: str) -> ReviewStateRecord:
        response = await self._request("GET", "reviews", params={"file_name": file_name})
        return self._state_from_dict(self._json(response))

    async def submit_range(
        self,
        file_name: str,
        start_line: int,
        end_line: int,
        review_state: str,
        total_lines: int,
    ) -> None:
        await self._request(
            "POST",
            "reviews",
            json={
                "file_name": file_name,
                "start_line": start_line,
                "end_line": end_line,
                "review_state": review_state,
                "total_lines": total_lines,
            },
        )

    async def submit_transform(self, file_name: str) -> None:
        await self._request("POST", "transform", json={"file_name": file_name})

    # ------------------------------------------------------------------ #
    # Comments                                                             #
    # ------------------------------------------------------------------ #

    async def fetch_comments(self, file_name: str) -> dict[int, list[CommentRecord]]:
        response = await self._request("GET", "comments", params={"file_name": file_name})
        return self._comments_from_dict(self._json(response))

    async def create_comment(self, file_name: str, line_number: int, body: str, author: str) -> CommentId:
        response = await self._request(
            "POST",
            "comments",
            json={"file_name": file_name, "line_number": line_number, "body": body, "author": author},
        )
        comment_id = self._json(response)
        # bool is an int subclass; neither it nor an empty id identifies anything.
        if isinstance(comment_id, bool) or not isinstance(comment_id, (int, str)) or comment_id == "":
            raise ServiceError(f"Service returned no usable comment id: {comment_id!r}", response.status_code)
        return comment_id

    async def delete_comment(self, file_name: str, line_number: int, comment_id: CommentId) -> None:
        await self._request(
            "DELETE",
            "comments",
            json={"file_name": file_name, "line_number": line_number, "comment_id": comment_id},
        )

    # ------------------------------------------------------------------ #
    # File metadata                                                        #
    # ------------------------------------------------------------------ #

    async def update_priority(self, file_name: str, priority: Priority) -> None:
        await self._request(
            "POST",
            "metadata",
            json={"file_name": file_name, "metadata": {"priority": Priority(priority).value}},
        )

    async def list_files(self) -> list[FileInfoRecord]:
        response = await self._request("GET", "info")
        data = self._json(response)
        if not isinstance(data, list):
            raise ServiceError("Expected a list of file records from info", response.status_code)
        return [self._file_info_from_dict(d) for d in data]

    async def close(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------ #
    # Plumbing                                                             #
    # ------------------------------------------------------------------ #

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send one request; map transport failures and non-2xx answers to BackendErrors."""
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            raise NetworkError(f"{method} {self._endpoint}{path} failed ({type(e).__name__}): {e}") from e

        if not response.is_success:
            raise ServiceError(
                f"{method} {path} returned {response.status_code}: {response.text[:200]}",
                response.status_code,
            )
        logger.debug("%s %s -> %d", method, path, response.status_code)
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ServiceError(f"Malformed JSON from service: {e}", response.status_code) from e

    @staticmethod
    def _ranges(raw: Any) -> list[LineRange]:
        """Parse ``[[s, e], ...]``; ``[{"start": s, "end": e}, ...]`` is also accepted."""
        ranges = []
        try:
            for item in raw or []:
                if isinstance(item, dict):
                    ranges.append((int(item["start"]), int(item["end"])))
                else:
                    start, end = item
                    ranges.append((int(start), int(end)))
        except (KeyError, TypeError, ValueError) as e:
            raise ServiceError(f"Malformed line range list: {raw!r}") from e
        return ranges

    @classmethod
    def _state_from_dict(cls, d: Any) -> ReviewStateRecord:
        if not isinstance(d, dict):
            raise ServiceError(f"Expected a review state object, got {type(d).__name__}")
        return ReviewStateRecord(
            reviewed=cls._ranges(d.get("reviewed")),
            modified=cls._ranges(d.get("modified")),
            ignored=cls._ranges(d.get("ignored")),
        )

    @staticmethod
    def _comments_from_dict(d: Any) -> dict[int, list[CommentRecord]]:
        if not isinstance(d, dict):
            raise ServiceError(f"Expected a comment mapping, got {type(d).__name__}")
        threads: dict[int, list[CommentRecord]] = {}
        try:
            for line, comments in d.items():
                threads[int(line)] = [
                    CommentRecord(id=c["id"], body=c.get("body", ""), author=c.get("author", "")) for c in comments
                ]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ServiceError(f"Malformed comment mapping: {e}") from e
        return threads

    @classmethod
    def _file_info_from_dict(cls, d: Any) -> FileInfoRecord:
        if not isinstance(d, dict) or "file_name" not in d:
            raise ServiceError(f"Malformed file record: {d!r}")
        priority = d.get("priority")
        try:
            priority = Priority(priority) if priority else None
        except ValueError as e:
            raise ServiceError(f"Unknown priority {priority!r}") from e
        return FileInfoRecord(
            file_name=d["file_name"],
            line_reviews=cls._state_from_dict(d.get("line_reviews") or {}),
            comments=cls._comments_from_dict(d.get("comments") or {}),
            priority=priority,
        )
