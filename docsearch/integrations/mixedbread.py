"""Mixedbread vector store integration (vector provider).

Docs: https://www.mixedbread.com/api-reference/endpoints/vector-stores/search

The store returns scored chunks; several chunks can come from the same source
file, so results are collapsed by `file_id` before they reach the dialog.
"""

import logging
import time
from typing import Any

import httpx

from docsearch.config import Settings
from docsearch.errors import ConfigurationError, ProviderError
from docsearch.orchestrator.schemas import DialogEntry

logger = logging.getLogger(__name__)

SEARCH_PATH = "/v1/vector_stores/search"
TOP_K = 10


class MixedbreadClient:
    """Async client for Mixedbread vector store search."""

    def __init__(self, settings: Settings, top_k: int = TOP_K):
        self.api_key = settings.mxbai_api_key
        self.vector_store_id = settings.vector_store_id
        self.base_url = settings.mxbai_base_url.rstrip("/")
        self.top_k = top_k

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.vector_store_id)

    async def search(self, query: str) -> list[dict[str, Any]]:
        """Return the raw scored chunks for a query, best match first."""
        if not self.is_configured:
            raise ConfigurationError("MXBAI_API_KEY and VECTOR_STORE_ID are required")

        payload = {
            "query": query,
            "vector_store_identifiers": [self.vector_store_id],
            "top_k": self.top_k,
            "search_options": {
                "return_metadata": True,
                "rerank": True,
            },
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        start = time.monotonic()
        try:
            async with httpx.AsyncClient() as client:
                resp = await client.post(f"{self.base_url}{SEARCH_PATH}", json=payload, headers=headers)
        except httpx.HTTPError as e:
            elapsed_ms = int((time.monotonic() - start) * 1000)
            logger.error("Mixedbread error | %dms | %s", elapsed_ms, str(e)[:200])
            raise ProviderError(f"Mixedbread request failed: {e}") from e

        elapsed_ms = int((time.monotonic() - start) * 1000)
        if resp.status_code != 200:
            logger.warning("Mixedbread | status=%d | %dms | query=%s", resp.status_code, elapsed_ms, query[:80])
            raise ProviderError(f"Mixedbread returned status {resp.status_code}")

        data = resp.json().get("data", [])
        logger.info("Mixedbread OK | chunks=%d | %dms | query=%s", len(data), elapsed_ms, query[:80])
        return data


def dedupe_by_file_id(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Keep the first chunk of each source file, preserving order.

    Chunks without a `file_id` share a single key, so only the first of them
    survives.
    """
    seen: set[Any] = set()
    unique = []
    for item in items:
        file_id = item.get("file_id")
        if file_id in seen:
            continue
        seen.add(file_id)
        unique.append(item)
    return unique


def to_dialog_entries(items: list[dict[str, Any]]) -> list[DialogEntry]:
    """Expand each result into a `page` entry followed by a `text` entry."""
    entries = []
    for index, item in enumerate(items):
        metadata = item.get("generated_metadata") or item.get("metadata") or {}
        url = metadata.get("source_url") or ""
        entries.append(DialogEntry(
            id=f"result-{index}-page",
            type="page",
            url=url,
            content=metadata.get("title") or "Untitled",
        ))
        entries.append(DialogEntry(
            id=f"result-{index}-text",
            type="text",
            url=url,
            content=metadata.get("path") or "",
        ))
    return entries
