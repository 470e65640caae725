"""Search index client.

Re-index requests are fire-and-forget: callers schedule them after their
transaction commits and never wait on or fail because of the index.
"""

from typing import Any

import httpx

from src.marketplace.core.config import get_settings
from src.marketplace.core.logging import get_logger
from src.marketplace.models.profile import DesignerProfile

logger = get_logger(__name__)

DESIGNERS_COLLECTION = "designers"


def designer_document(designer: DesignerProfile) -> dict[str, Any]:
    """Build the search document for a designer profile."""
    return {
        "id": str(designer.id),
        "name": designer.name,
        "firm_name": designer.firm_name or "",
        "city": designer.city or "",
        "is_verified": designer.is_verified,
    }


class SearchIndexer:
    """Pushes designer documents to the search service over HTTP."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.base_url = base_url if base_url is not None else settings.search_index_url
        self.api_key = api_key if api_key is not None else settings.search_index_api_key
        self.timeout = settings.search_index_timeout_seconds
        self.transport = transport

    async def index_designer(self, designer: DesignerProfile) -> bool:
        """Upsert a designer document. Returns False if skipped or failed."""
        if not self.base_url:
            logger.warning(
                "SEARCH_INDEX_URL not set - designer not indexed",
                designer_id=str(designer.id),
            )
            return False

        headers = {"X-API-KEY": self.api_key} if self.api_key else {}
        url = f"{self.base_url.rstrip('/')}/collections/{DESIGNERS_COLLECTION}/documents"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    url,
                    params={"action": "upsert"},
                    json=designer_document(designer),
                    headers=headers,
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(
                "Failed to index designer",
                designer_id=str(designer.id),
                error=str(e),
            )
            return False

        logger.info("Designer indexed", designer_id=str(designer.id))
        return True
