"""Shared search dialog interface."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any

ResultsCallback = Callable[[list[dict[str, Any]] | None], Awaitable[None] | None]


class SearchDialog(ABC):
    """State of one search dialog: the current query, loading flag and results.

    `results` is None while the dialog is in its "empty" state (no query yet).
    """

    provider: str = ""

    def __init__(self):
        self.search_text = ""
        self.is_loading = False
        self.results: list[dict[str, Any]] | None = None

    async def search(self, query: str, on_results: ResultsCallback | None = None) -> list[dict[str, Any]] | None:
        """Run a search and hand the results to `on_results` for display."""
        self.search_text = query
        self.is_loading = True
        try:
            self.results = await self._fetch(query)
        finally:
            self.is_loading = False

        if on_results is not None:
            maybe = on_results(self.results)
            if maybe is not None:
                await maybe
        return self.results

    @abstractmethod
    async def _fetch(self, query: str) -> list[dict[str, Any]] | None:
        ...
