"""Algolia search integration (lexical provider).

Docs: https://www.algolia.com/doc/rest-api/search/#search-index-post

Records follow the documentation-search layout: one record per page section,
carrying `page_id`, `title`, `url`, `section`, `section_id` and `content`.
"""

import logging
import time
from typing import Any

import httpx

from docsearch.config import Settings
from docsearch.errors import ConfigurationError, ProviderError
from docsearch.orchestrator.schemas import DialogEntry

logger = logging.getLogger(__name__)

QUERY_URL = "https://{app_id}-dsn.algolia.net/1/indexes/{index}/query"


class AlgoliaClient:
    """Async client for the Algolia index query endpoint."""

    def __init__(self, settings: Settings, hits_per_page: int = 10, distinct: int = 5):
        self.app_id = settings.algolia_app_id
        self.api_key = settings.algolia_api_key
        self.index_name = settings.algolia_index
        self.hits_per_page = hits_per_page
        self.distinct = distinct

    @property
    def is_configured(self) -> bool:
        return bool(self.app_id and self.api_key and self.index_name)

    async def search(self, query: str) -> list[dict[str, Any]] | None:
        """Search the index and return dialog entries.

        Returns None (the dialog's "empty" state) for an empty query without
        calling Algolia.
        """
        if not query:
            return None
        if not self.is_configured:
            raise ConfigurationError("Algolia app id, API key and index are required")

        hits = await self._query(query)
        return [entry.model_dump() for entry in group_hits(hits)]

    async def _query(self, query: str) -> list[dict[str, Any]]:
        url = QUERY_URL.format(app_id=self.app_id.lower(), index=self.index_name)
        headers = {
            "X-Algolia-Application-Id": self.app_id,
            "X-Algolia-API-Key": self.api_key,
        }
        payload = {"query": query, "hitsPerPage": self.hits_per_page, "distinct": self.distinct}

        start = time.monotonic()
        try:
            async with httpx.AsyncClient() as client:
                resp = await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            elapsed_ms = int((time.monotonic() - start) * 1000)
            logger.error("Algolia error | %dms | %s", elapsed_ms, str(e)[:200])
            raise ProviderError(f"Algolia request failed: {e}") from e

        elapsed_ms = int((time.monotonic() - start) * 1000)
        if resp.status_code != 200:
            logger.warning("Algolia | status=%d | %dms | query=%s", resp.status_code, elapsed_ms, query[:80])
            raise ProviderError(f"Algolia returned status {resp.status_code}")

        hits = resp.json().get("hits", [])
        logger.info("Algolia OK | hits=%d | %dms | query=%s", len(hits), elapsed_ms, query[:80])
        return hits


def group_hits(hits: list[dict[str, Any]]) -> list[DialogEntry]:
    """Group section hits under their page, in hit order.

    The first hit of each page contributes a `page` entry; every hit then
    contributes a `heading` entry (content is the section title itself) or a
    `text` entry, linked to its section anchor when it has one.
    """
    entries: list[DialogEntry] = []
    seen_pages: set[str] = set()

    for hit in hits:
        page_id = str(hit.get("page_id") or hit.get("url") or hit.get("objectID", ""))
        url = hit.get("url") or ""

        if page_id not in seen_pages:
            seen_pages.add(page_id)
            entries.append(DialogEntry(
                id=page_id,
                type="page",
                url=url,
                content=hit.get("title") or "",
            ))

        content = hit.get("content") or ""
        section_id = hit.get("section_id")
        entries.append(DialogEntry(
            id=str(hit.get("objectID", "")),
            type="heading" if content and content == hit.get("section") else "text",
            url=f"{url}#{section_id}" if section_id else url,
            content=content,
        ))

    return entries
