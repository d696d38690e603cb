from unittest.mock import MagicMock

import pytest

from auditor_core.surface import EditorSurface
from auditor_service.base import BaseAuditService
from auditor_service.models import ReviewStateRecord


@pytest.fixture
def service():
    """Audit service double; async methods are AsyncMocks via the spec."""
    mock = MagicMock(spec=BaseAuditService)
    mock.fetch_state.return_value = ReviewStateRecord()
    mock.fetch_comments.return_value = {}
    return mock


@pytest.fixture
def surface():
    return MagicMock(spec=EditorSurface)
