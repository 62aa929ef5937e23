"""Vector search dialog — queries the site's /api/vector-store endpoint."""

import logging
from typing import Any

import httpx

from docsearch.dialog.base import SearchDialog
from docsearch.orchestrator.schemas import VECTOR_PROVIDER

logger = logging.getLogger(__name__)


class VectorSearchDialog(SearchDialog):
    """Server-logged dialog; the site records every request itself."""

    provider = VECTOR_PROVIDER

    def __init__(self, site: httpx.AsyncClient, api_path: str = "/api/vector-store"):
        super().__init__()
        self.site = site
        self.api_path = api_path

    async def _fetch(self, query: str) -> list[dict[str, Any]] | None:
        if not query:
            return None
        try:
            resp = await self.site.get(self.api_path, params={"query": query})
        except httpx.HTTPError as e:
            logger.warning("Vector search request failed | %s", str(e)[:200])
            return []

        if resp.status_code != 200:
            logger.warning("Vector search | status=%d | %s", resp.status_code, resp.text[:200])
            return []
        return resp.json()
