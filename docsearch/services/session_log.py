"""File log sink — one append-only JSONL file per search session.

Used by the lexical /api/search route. Each event is a single line written
with one `os.write` on an O_APPEND descriptor, so concurrent requests of the
same session never interleave or truncate each other's lines.
"""

import asyncio
import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path

from docsearch.orchestrator.schemas import SearchLogEvent

logger = logging.getLogger(__name__)


class SessionFileLog:
    """Appends search events to `<log_dir>/<session_id>.jsonl`."""

    def __init__(self, log_dir: str | Path):
        self.log_dir = Path(log_dir)

    def path_for(self, session_id: str) -> Path:
        return self.log_dir / f"{session_id}.jsonl"

    async def append(self, event: SearchLogEvent) -> bool:
        """Write one line for the event. Never raises; returns True on success."""
        record = event.model_copy(update={"timestamp": datetime.now(timezone.utc)})
        line = json.dumps(record.model_dump(mode="json", exclude_none=True), ensure_ascii=False) + "\n"
        try:
            await asyncio.to_thread(self._write_line, event.session_id, line.encode("utf-8"))
            return True
        except OSError as e:
            logger.debug("Session log write skipped | session=%s | %s", event.session_id, str(e)[:100])
            return False

    def _write_line(self, session_id: str, data: bytes) -> None:
        self.log_dir.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path_for(session_id), os.O_WRONLY | os.O_APPEND | os.O_CREAT, 0o644)
        try:
            os.write(fd, data)
        finally:
            os.close(fd)

    def read(self, session_id: str) -> list[SearchLogEvent]:
        """Load every event logged for a session (oldest first)."""
        path = self.path_for(session_id)
        if not path.exists():
            return []
        events = []
        for line in path.read_text(encoding="utf-8").splitlines():
            if line.strip():
                events.append(SearchLogEvent.model_validate_json(line))
        return events
