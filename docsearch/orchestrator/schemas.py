"""Pydantic models for API input/output — shared by the endpoints, sinks and dialogs."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

LEXICAL_PROVIDER = "algolia"
VECTOR_PROVIDER = "mixedbread"
UNKNOWN_PROVIDER = "unknown"


# ═══════════════ SEARCH LOG ═══════════════

class SearchLogEvent(BaseModel):
    """One record per search request attempt."""

    event: Literal["search_request"] = "search_request"
    status: Literal["ok", "error"]
    provider: str
    session_id: str
    query: str = ""
    result_count: int = Field(default=0, ge=0)
    duration_ms: int = Field(default=0, ge=0)
    error: str | None = None
    reason: str | None = None
    timestamp: datetime | None = None

    @classmethod
    def from_row(cls, row: Any) -> SearchLogEvent:
        return cls(
            event=row.event,
            status=row.status,
            provider=row.provider,
            session_id=row.session_id,
            query=row.query,
            result_count=row.result_count,
            duration_ms=row.duration_ms,
            error=row.error,
            reason=row.reason,
            timestamp=row.timestamp,
        )


# ═══════════════ CLIENT-OBSERVED EVENTS (POST /api/log) ═══════════════

class ClientSearchLog(BaseModel):
    """Body sent by the lexical search dialog. Lenient: bad numbers become 0."""

    provider: str = UNKNOWN_PROVIDER
    query: str = ""
    result_count: int = 0
    duration_ms: int = 0

    @field_validator("provider", "query", mode="before")
    @classmethod
    def _none_to_default(cls, value: Any, info) -> Any:
        if value is None:
            return UNKNOWN_PROVIDER if info.field_name == "provider" else ""
        return value

    @field_validator("result_count", "duration_ms", mode="before")
    @classmethod
    def _coerce_number(cls, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return 0
        if not math.isfinite(value) or value < 0:
            return 0
        return int(value)


# ═══════════════ SEARCH DIALOG ENTRIES ═══════════════

class DialogEntry(BaseModel):
    """Single result entry in the shape the search dialog renders."""

    id: str
    type: Literal["page", "heading", "text"]
    url: str = ""
    content: str = ""


class SearchOutcome(BaseModel):
    """Status code plus JSON body produced by the orchestrator for one request."""

    status_code: int = 200
    body: Any = None
