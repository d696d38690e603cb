"""Audit state client: line classification reads and writes.

Writes are never trusted on their own. Every successful mutation is followed
by a fresh fetch, and the fetched state is what the caller renders.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from auditor_core.errors import ServiceError
from auditor_core.intervals import Label, LabeledInterval, ReviewState, intervals_from_ranges, ordered_selection

if TYPE_CHECKING:
    from auditor_service.base import BaseAuditService
    from auditor_service.models import ReviewStateRecord

logger = logging.getLogger(__name__)


def intervals_from_record(record: ReviewStateRecord) -> list[LabeledInterval]:
    """Convert the wire record into intervals; raise ServiceError on impossible ranges."""
    try:
        return intervals_from_ranges(
            {
                Label.REVIEWED: record.reviewed,
                Label.MODIFIED: record.modified,
                Label.IGNORED: record.ignored,
            }
        )
    except ValueError as e:
        raise ServiceError(f"Service returned an invalid range: {e}") from e


class AuditStateClient:
    def __init__(self, service: BaseAuditService):
        self._service = service

    async def fetch_state(self, file_name: str) -> list[LabeledInterval]:
        record = await self._service.fetch_state(file_name)
        intervals = intervals_from_record(record)
        logger.debug("Fetched %d interval(s) for %s", len(intervals), file_name)
        return intervals

    async def submit_range(
        self,
        file_name: str,
        start_line: int,
        end_line: int,
        state: ReviewState,
        total_line_count: int,
    ) -> list[LabeledInterval]:
        """Label a selection and return the canonical state fetched afterwards.

        The selection may be reversed (the cursor above the anchor); it is put
        in ascending order before anything is sent.
        """
        start_line, end_line = ordered_selection(start_line, end_line)
        await self._service.submit_range(
            file_name,
            start_line,
            end_line,
            ReviewState(state).value,
            total_line_count,
        )
        return await self.fetch_state(file_name)

    async def submit_transform(self, file_name: str) -> list[LabeledInterval]:
        """Trigger a service-side recomputation and return the state fetched afterwards."""
        await self._service.submit_transform(file_name)
        return await self.fetch_state(file_name)
