"""Orchestrator — runs one search request end to end.

Responsibilities:
  - Validate configuration and input
  - Time the request from receipt to response readiness
  - Delegate to the provider adapter (Algolia or Mixedbread)
  - Write exactly one search log event per request (database or session file)
  - Return the dialog-ready payload

Log writes on search paths are submitted to the background writer and never
affect the response. Client-observed events (/api/log) are awaited, since
storing them is the whole point of that request.
"""

import logging
import time
from typing import Any

from docsearch.config import Settings
from docsearch.errors import ConfigurationError, SearchIntegrationError, ValidationError
from docsearch.integrations.algolia import AlgoliaClient
from docsearch.integrations.mixedbread import MixedbreadClient, dedupe_by_file_id, to_dialog_entries
from docsearch.orchestrator.schemas import (
    LEXICAL_PROVIDER,
    UNKNOWN_PROVIDER,
    VECTOR_PROVIDER,
    ClientSearchLog,
    SearchLogEvent,
    SearchOutcome,
)
from docsearch.services.background import BackgroundWriter
from docsearch.services.log_store import MISSING_DATABASE, SearchLogStore
from docsearch.services.session_log import SessionFileLog

logger = logging.getLogger(__name__)

ENV_FAILED = "Environment setup failed"
QUERY_REQUIRED = "Query is required"
SEARCH_FAILED = "Search failed"


class SearchOrchestrator:
    """Main dispatcher — one instance per process, shared by all requests."""

    def __init__(
        self,
        settings: Settings,
        lexical: AlgoliaClient,
        vector: MixedbreadClient,
        log_store: SearchLogStore,
        session_log: SessionFileLog,
        writer: BackgroundWriter,
    ):
        self.settings = settings
        self.lexical = lexical
        self.vector = vector
        self.log_store = log_store
        self.session_log = session_log
        self.writer = writer

    # ═══════════════ VECTOR SEARCH (/api/vector-store) ═══════════════

    async def vector_search(self, query: str | None, session_id: str) -> SearchOutcome:
        start = time.monotonic()

        try:
            if not self.settings.has_vector_store:
                raise ConfigurationError("MXBAI_API_KEY or VECTOR_STORE_ID missing")
            if not query:
                raise ValidationError("query parameter missing or empty")
        except ConfigurationError as e:
            self._log_vector(session_id, query, start, status="error", reason=e.reason)
            return SearchOutcome(status_code=500, body={"error": ENV_FAILED})
        except ValidationError as e:
            self._log_vector(session_id, query, start, status="error", reason=e.reason)
            return SearchOutcome(status_code=400, body={"error": QUERY_REQUIRED})

        try:
            chunks = await self.vector.search(query)
            unique = dedupe_by_file_id(chunks)
            entries = [e.model_dump() for e in to_dialog_entries(unique)]
        except Exception as e:
            reason = e.reason if isinstance(e, SearchIntegrationError) else "exception"
            self._log_vector(session_id, query, start, status="error", reason=reason, error=str(e))
            return SearchOutcome(status_code=500, body={"error": SEARCH_FAILED})

        self._log_vector(session_id, query, start, status="ok", result_count=len(unique),
                         returned_items=len(entries))
        return SearchOutcome(status_code=200, body=entries)

    def _log_vector(
        self,
        session_id: str,
        query: str | None,
        start: float,
        status: str,
        reason: str | None = None,
        error: str | None = None,
        result_count: int = 0,
        returned_items: int = 0,
    ) -> None:
        event = SearchLogEvent(
            status=status,
            provider=VECTOR_PROVIDER,
            session_id=session_id,
            query=query or "",
            result_count=result_count,
            duration_ms=_elapsed_ms(start),
            error=error,
            reason=reason,
        )
        _log_event(event, returned_items=returned_items)
        self.writer.submit(self.log_store.record(event), label="search_log_db")

    # ═══════════════ LEXICAL SEARCH (/api/search) ═══════════════

    async def lexical_search(self, query: str, session_id: str) -> list[dict[str, Any]]:
        """Search Algolia and log to the session file. Provider errors are re-raised."""
        start = time.monotonic()
        try:
            results = await self.lexical.search(query)
        except Exception as e:
            self._log_lexical(SearchLogEvent(
                status="error",
                provider=LEXICAL_PROVIDER,
                session_id=session_id,
                query=query,
                duration_ms=_elapsed_ms(start),
                error=str(e),
                reason=e.reason if isinstance(e, SearchIntegrationError) else "exception",
            ))
            raise

        entries = results or []
        self._log_lexical(SearchLogEvent(
            status="ok",
            provider=LEXICAL_PROVIDER,
            session_id=session_id,
            query=query,
            result_count=len(entries),
            duration_ms=_elapsed_ms(start),
        ))
        return entries

    def _log_lexical(self, event: SearchLogEvent) -> None:
        _log_event(event)
        self.writer.submit(self.session_log.append(event), label="search_log_file")

    # ═══════════════ CLIENT-OBSERVED EVENTS (/api/log) ═══════════════

    async def record_client_event(self, payload: Any, session_id: str) -> SearchOutcome:
        """Store an event reported by a search dialog. The insert is awaited."""
        start = time.monotonic()

        if not self.log_store.is_configured:
            return SearchOutcome(status_code=500, body={"ok": False, "error": MISSING_DATABASE})

        try:
            body = ClientSearchLog.model_validate(payload)
            event = SearchLogEvent(
                status="ok",
                provider=body.provider,
                session_id=session_id,
                query=body.query,
                result_count=body.result_count,
                duration_ms=body.duration_ms,
            )
            await self.log_store.insert(event)
        except Exception as e:
            logger.error("/api/log error | session=%s | %s", session_id, str(e)[:300])
            await self.log_store.record(SearchLogEvent(
                status="error",
                provider=UNKNOWN_PROVIDER,
                session_id=session_id,
                duration_ms=_elapsed_ms(start),
                error=str(e)[:500],
                reason="exception",
            ))
            return SearchOutcome(status_code=500, body={"ok": False, "error": str(e)})

        _log_event(event)
        return SearchOutcome(status_code=200, body={"ok": True})


# ═══════════════ HELPERS ═══════════════

def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


def _log_event(event: SearchLogEvent, returned_items: int = 0) -> None:
    logger.info(
        "Search request | provider=%s | status=%s | reason=%s | results=%d | items=%d | %dms | session=%s",
        event.provider, event.status, event.reason or "-", event.result_count,
        returned_items, event.duration_ms, event.session_id,
    )
