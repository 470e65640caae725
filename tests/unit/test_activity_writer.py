"""Unit tests for ActivityLogWriter."""

from decimal import Decimal
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from src.marketplace.models import ActivityAction, ActivityLog, ProjectStatus
from src.marketplace.services.activity_service import ActivityLogWriter

pytestmark = pytest.mark.unit


@pytest.fixture
def mock_activity_repo() -> MagicMock:
    repo = MagicMock()
    repo.add = MagicMock()
    return repo


@pytest.fixture
def writer(mock_activity_repo) -> ActivityLogWriter:
    return ActivityLogWriter(MagicMock(), activity_repo=mock_activity_repo)


class TestRecord:
    """Tests for the record method."""

    def test_stages_entry(self, writer, mock_activity_repo):
        project_id = uuid4()
        user_id = uuid4()

        entry = writer.record(project_id, user_id, ActivityAction.PROJECT_CREATED, {"title": "x"})

        assert isinstance(entry, ActivityLog)
        assert entry.project_id == project_id
        assert entry.user_id == user_id
        assert entry.action == "project_created"
        assert entry.detail == {"title": "x"}
        mock_activity_repo.add.assert_called_once_with(entry)

    def test_coerces_detail_values(self, writer):
        """UUIDs, enums and decimals become JSON-safe values."""
        proposal_id = uuid4()

        entry = writer.record(
            uuid4(),
            None,
            ActivityAction.STATUS_CHANGED,
            {
                "from": ProjectStatus.DRAFT,
                "to": ProjectStatus.SEEKING_DESIGNER,
                "proposal_id": proposal_id,
                "cost_estimate": Decimal("1500.50"),
            },
        )

        assert entry is not None
        assert entry.detail == {
            "from": "draft",
            "to": "seeking_designer",
            "proposal_id": str(proposal_id),
            "cost_estimate": "1500.50",
        }

    def test_system_entry_has_no_user(self, writer):
        entry = writer.record(uuid4(), None, ActivityAction.PROPOSAL_AUTO_REJECTED)
        assert entry is not None
        assert entry.user_id is None
        assert entry.detail == {}

    def test_unserializable_detail_is_dropped(self, writer, mock_activity_repo):
        """A broken payload never fails the caller."""
        entry = writer.record(uuid4(), uuid4(), ActivityAction.TASK_CREATED, {"bad": object()})

        assert entry is None
        mock_activity_repo.add.assert_not_called()

    def test_repository_failure_is_swallowed(self, writer, mock_activity_repo):
        mock_activity_repo.add.side_effect = RuntimeError("session closed")

        entry = writer.record(uuid4(), uuid4(), ActivityAction.TASK_CREATED, {"title": "x"})

        assert entry is None
