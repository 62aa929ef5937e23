"""Lexical search dialog — queries Algolia directly and reports to /api/log."""

import logging
import time
from typing import Any

import httpx

from docsearch.dialog.base import SearchDialog
from docsearch.integrations.algolia import AlgoliaClient
from docsearch.orchestrator.schemas import LEXICAL_PROVIDER
from docsearch.services.background import BackgroundWriter

logger = logging.getLogger(__name__)

LOG_PATH = "/api/log"


class LexicalSearchDialog(SearchDialog):
    """Algolia-backed dialog. Each distinct (query, result count) is logged once."""

    provider = LEXICAL_PROVIDER

    def __init__(self, client: AlgoliaClient, site: httpx.AsyncClient, writer: BackgroundWriter | None = None):
        super().__init__()
        self.client = client
        self.site = site
        self.writer = writer or BackgroundWriter()
        self._last_logged_key = ""

    async def _fetch(self, query: str) -> list[dict[str, Any]] | None:
        start = time.monotonic()
        results = await self.client.search(query)
        duration_ms = int((time.monotonic() - start) * 1000)
        self.observe(query, results, duration_ms)
        return results

    def observe(self, query: str, results: list[dict[str, Any]] | None, duration_ms: int) -> bool:
        """Report a finished search unless the same pair was just reported.

        Returns True when a log request was submitted.
        """
        result_count = len(results) if isinstance(results, list) else 0
        key = f"{query}|{result_count}"
        if not query or key == self._last_logged_key:
            return False

        self._last_logged_key = key
        self.writer.submit(self._post_log(query, result_count, duration_ms), label="dialog_log")
        return True

    async def _post_log(self, query: str, result_count: int, duration_ms: int) -> None:
        try:
            await self.site.post(LOG_PATH, json={
                "provider": self.provider,
                "query": query,
                "result_count": result_count,
                "duration_ms": duration_ms,
            })
        except httpx.HTTPError as e:
            logger.debug("Search log request failed | %s", str(e)[:100])
