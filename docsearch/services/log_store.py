"""Database log sink and the logs query behind /api/logs.

Writes one `search_logs` row per search request and reads them back for the
comparison view. `insert` raises; `record` is the best-effort variant used on
search paths, where a storage failure must never reach the caller.
"""

import json
import logging
import math
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docsearch.errors import ConfigurationError, StorageError
from docsearch.models.search_log import SearchLog
from docsearch.orchestrator.schemas import SearchLogEvent

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 500
MAX_LIMIT = 2000

MISSING_DATABASE = "DATABASE_URL missing"


def clamp_limit(raw: str | None) -> int:
    """Parse the `limit` query parameter.

    Absent, non-numeric, NaN or zero → 500; anything else is clamped to
    [1, 2000] and truncated to an integer.
    """
    try:
        value = float(raw) if raw is not None and raw.strip() else 0.0
    except ValueError:
        value = 0.0
    if math.isnan(value) or value == 0:
        value = DEFAULT_LIMIT
    return int(min(max(value, 1), MAX_LIMIT))


class SearchLogStore:
    """Relational sink for search events."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None):
        self._session_factory = session_factory

    @property
    def is_configured(self) -> bool:
        return self._session_factory is not None

    def _factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            raise ConfigurationError(MISSING_DATABASE)
        return self._session_factory

    async def insert(self, event: SearchLogEvent) -> SearchLogEvent:
        """Persist one event in its own transaction. Returns the stored event."""
        factory = self._factory()
        stored = event.model_copy(update={"timestamp": datetime.now(timezone.utc)})
        row = SearchLog(
            event=event.event,
            status=event.status,
            provider=event.provider,
            session_id=event.session_id,
            query=event.query,
            result_count=event.result_count,
            duration_ms=event.duration_ms,
            error=event.error,
            reason=event.reason,
            timestamp=stored.timestamp,
        )
        try:
            async with factory() as session:
                async with session.begin():
                    session.add(row)
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(str(e)) from e
        return stored

    async def record(self, event: SearchLogEvent) -> bool:
        """Best-effort insert. Never raises; returns True when the row was stored."""
        if not self.is_configured:
            logger.debug("Search log skipped (no database) | session=%s", event.session_id)
            return False
        try:
            await self.insert(event)
            return True
        except Exception as e:
            logger.error(json.dumps({
                "event": "search_log_write_error",
                "session_id": event.session_id,
                "error": str(e)[:300],
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }))
            return False

    async def query(self, provider: str | None = None, limit: int = DEFAULT_LIMIT) -> list[SearchLogEvent]:
        """Most recent events first, optionally for a single provider."""
        factory = self._factory()
        stmt = select(SearchLog)
        if provider:
            stmt = stmt.where(SearchLog.provider == provider)
        stmt = stmt.order_by(SearchLog.timestamp.desc(), SearchLog.id.desc()).limit(limit)

        try:
            async with factory() as session:
                result = await session.execute(stmt)
                events = [SearchLogEvent.from_row(r) for r in result.scalars().all()]
        except (OperationalError, InterfaceError, OSError) as e:
            raise ConfigurationError(f"Search log store unreachable: {str(e)[:200]}") from e
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

        return events
