"""Integration tests for designer verification and search re-indexing."""

import json
from uuid import uuid4

import httpx
import pytest

from src.marketplace.core.background import background_tasks
from src.marketplace.core.exceptions import NotFoundError
from src.marketplace.core.search import SearchIndexer
from src.marketplace.models import DesignerProfile
from src.marketplace.services import DesignerService, NegotiationService

pytestmark = pytest.mark.integration


@pytest.fixture
def indexed_documents() -> list[dict]:
    return []


@pytest.fixture
def indexer(indexed_documents) -> SearchIndexer:
    def handler(request: httpx.Request) -> httpx.Response:
        indexed_documents.append(json.loads(request.content))
        return httpx.Response(200, json={"success": True})

    return SearchIndexer(
        base_url="http://search.test",
        api_key="test-key",
        transport=httpx.MockTransport(handler),
    )


async def test_verify_marks_designer_and_reindexes(
    workflow, unverified_designer, indexer, indexed_documents
):
    verified = await workflow.run(
        lambda s: DesignerService(s, indexer=indexer).verify_designer(unverified_designer.id)
    )
    assert verified.is_verified is True

    stored = await workflow.load(DesignerProfile, unverified_designer.id)
    assert stored.is_verified is True
    assert stored.verified_at is not None

    assert await background_tasks.wait_for_drain(timeout=1)
    assert indexed_documents == [
        {
            "id": str(unverified_designer.id),
            "name": unverified_designer.name,
            "firm_name": unverified_designer.firm_name,
            "city": unverified_designer.city,
            "is_verified": True,
        }
    ]


async def test_index_failure_does_not_undo_verification(workflow, unverified_designer):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    failing = SearchIndexer(base_url="http://search.test", transport=httpx.MockTransport(handler))

    await workflow.run(
        lambda s: DesignerService(s, indexer=failing).verify_designer(unverified_designer.id)
    )
    assert await background_tasks.wait_for_drain(timeout=1)

    stored = await workflow.load(DesignerProfile, unverified_designer.id)
    assert stored.is_verified is True


async def test_verified_designer_can_be_solicited(
    workflow, homeowner, unverified_designer, draft_project, indexer
):
    await workflow.run(
        lambda s: DesignerService(s, indexer=indexer).verify_designer(unverified_designer.id)
    )

    request = await workflow.run(
        lambda s: NegotiationService(s).send_request(
            homeowner.user_id, draft_project.id, unverified_designer.id
        )
    )
    assert request.designer_id == unverified_designer.id


async def test_unknown_designer(workflow, indexer):
    with pytest.raises(NotFoundError):
        await workflow.run(lambda s: DesignerService(s, indexer=indexer).verify_designer(uuid4()))
