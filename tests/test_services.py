"""Tests for shared services — session identity, log sinks, background writer."""

import asyncio
import json
import logging
import uuid

import pytest
from starlette.requests import Request
from starlette.responses import JSONResponse

from docsearch.errors import ConfigurationError, StorageError
from docsearch.orchestrator.schemas import SearchLogEvent
from docsearch.services.background import BackgroundWriter
from docsearch.services.log_store import SearchLogStore, clamp_limit
from docsearch.services.session import (
    SESSION_COOKIE,
    attach_session_cookie,
    is_valid_session_id,
    resolve_session,
)
from docsearch.services.session_log import SessionFileLog


def make_request(cookie: str | None = None) -> Request:
    headers = []
    if cookie is not None:
        headers.append((b"cookie", cookie.encode()))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


def event(**overrides) -> SearchLogEvent:
    data = {"status": "ok", "provider": "mixedbread", "session_id": str(uuid.uuid4()), "query": "install"}
    data.update(overrides)
    return SearchLogEvent(**data)


# ═══════════════ Session ═══════════════


class TestSession:
    def test_valid_ids(self):
        assert is_valid_session_id(str(uuid.uuid4()))
        assert not is_valid_session_id("")
        assert not is_valid_session_id(None)
        assert not is_valid_session_id("../../etc/passwd")

    def test_existing_cookie_reused(self):
        sid = str(uuid.uuid4())
        identity = resolve_session(make_request(f"{SESSION_COOKIE}={sid}"))
        assert identity.has_cookie is True
        assert identity.session_id == sid

    def test_missing_cookie_mints_uuid(self):
        identity = resolve_session(make_request())
        assert identity.has_cookie is False
        uuid.UUID(identity.session_id)

    def test_malformed_cookie_replaced(self):
        identity = resolve_session(make_request(f"{SESSION_COOKIE}=garbage"))
        assert identity.has_cookie is False
        assert identity.session_id != "garbage"

    def test_attach_only_for_new_sessions(self):
        fresh = resolve_session(make_request())
        response = attach_session_cookie(JSONResponse({}), fresh)
        header = response.headers["set-cookie"]
        assert header.startswith(f"{SESSION_COOKIE}={fresh.session_id}")
        assert "Path=/" in header
        assert "SameSite=lax" in header

        sid = str(uuid.uuid4())
        known = resolve_session(make_request(f"{SESSION_COOKIE}={sid}"))
        response = attach_session_cookie(JSONResponse({}), known)
        assert "set-cookie" not in response.headers


# ═══════════════ Logs limit ═══════════════


class TestClampLimit:
    @pytest.mark.parametrize("raw, expected", [
        (None, 500),
        ("", 500),
        ("abc", 500),
        ("0", 500),
        ("nan", 500),
        ("25", 25),
        ("-3", 1),
        ("2.9", 2),
        ("5000", 2000),
        ("2000", 2000),
    ])
    def test_clamp(self, raw, expected):
        assert clamp_limit(raw) == expected


# ═══════════════ Database sink ═══════════════


class TestSearchLogStore:
    @pytest.mark.asyncio
    async def test_insert_sets_timestamp(self, log_store):
        stored = await log_store.insert(event())
        assert stored.timestamp is not None

        rows = await log_store.query()
        assert len(rows) == 1
        assert rows[0].query == "install"
        assert rows[0].event == "search_request"

    @pytest.mark.asyncio
    async def test_query_order_and_filter(self, log_store):
        await log_store.insert(event(provider="algolia", query="first"))
        await log_store.insert(event(provider="mixedbread", query="second"))
        await log_store.insert(event(provider="algolia", query="third"))

        assert [r.query for r in await log_store.query()] == ["third", "second", "first"]
        assert [r.query for r in await log_store.query(provider="algolia")] == ["third", "first"]
        assert [r.query for r in await log_store.query(limit=1)] == ["third"]

    @pytest.mark.asyncio
    async def test_error_fields_persisted(self, log_store):
        await log_store.insert(event(status="error", error="boom", reason="exception"))
        row = (await log_store.query())[0]
        assert row.status == "error"
        assert row.error == "boom"
        assert row.reason == "exception"

    @pytest.mark.asyncio
    async def test_unconfigured(self):
        store = SearchLogStore(None)
        assert store.is_configured is False
        with pytest.raises(ConfigurationError):
            await store.insert(event())
        with pytest.raises(ConfigurationError):
            await store.query()
        assert await store.record(event()) is False

    @pytest.mark.asyncio
    async def test_record_swallows_failures(self, log_store, caplog):
        async def broken_insert(ev):
            raise StorageError("disk full")

        log_store.insert = broken_insert
        with caplog.at_level(logging.ERROR, logger="docsearch.services.log_store"):
            assert await log_store.record(event()) is False

        payload = json.loads(caplog.records[-1].getMessage())
        assert payload["event"] == "search_log_write_error"
        assert payload["error"] == "disk full"

    @pytest.mark.asyncio
    async def test_record_success(self, log_store):
        assert await log_store.record(event()) is True
        assert len(await log_store.query()) == 1


# ═══════════════ File sink ═══════════════


class TestSessionFileLog:
    @pytest.mark.asyncio
    async def test_append_and_read(self, session_log):
        sid = str(uuid.uuid4())
        assert await session_log.append(event(session_id=sid, provider="algolia", result_count=3))
        assert await session_log.append(event(session_id=sid, provider="algolia", query="config"))

        events = session_log.read(sid)
        assert [e.query for e in events] == ["install", "config"]
        assert events[0].result_count == 3
        assert events[0].timestamp is not None

    @pytest.mark.asyncio
    async def test_one_json_object_per_line(self, session_log):
        sid = str(uuid.uuid4())
        await session_log.append(event(session_id=sid))
        lines = session_log.path_for(sid).read_text().splitlines()
        assert len(lines) == 1
        record = json.loads(lines[0])
        assert record["provider"] == "mixedbread"
        assert "error" not in record

    @pytest.mark.asyncio
    async def test_concurrent_appends_do_not_interleave(self, session_log):
        sid = str(uuid.uuid4())
        await asyncio.gather(*[
            session_log.append(event(session_id=sid, query=f"query-{i}" * 20))
            for i in range(50)
        ])

        lines = session_log.path_for(sid).read_text().splitlines()
        assert len(lines) == 50
        queries = {json.loads(line)["query"] for line in lines}
        assert queries == {f"query-{i}" * 20 for i in range(50)}

    @pytest.mark.asyncio
    async def test_sessions_use_separate_files(self, session_log):
        a, b = str(uuid.uuid4()), str(uuid.uuid4())
        await session_log.append(event(session_id=a))
        await session_log.append(event(session_id=b))
        assert len(session_log.read(a)) == 1
        assert len(session_log.read(b)) == 1

    @pytest.mark.asyncio
    async def test_unwritable_directory(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        sink = SessionFileLog(blocker / "log")
        assert await sink.append(event()) is False

    def test_read_missing_session(self, session_log):
        assert session_log.read(str(uuid.uuid4())) == []


# ═══════════════ Background writer ═══════════════


class TestBackgroundWriter:
    @pytest.mark.asyncio
    async def test_drain_waits_for_writes(self):
        writer = BackgroundWriter()
        done = []

        async def write():
            await asyncio.sleep(0.01)
            done.append(True)

        writer.submit(write())
        writer.submit(write())
        assert writer.pending == 2
        await writer.drain()
        assert done == [True, True]
        assert writer.pending == 0

    @pytest.mark.asyncio
    async def test_failures_are_logged(self, caplog):
        writer = BackgroundWriter()

        async def fail():
            raise RuntimeError("sink offline")

        with caplog.at_level(logging.ERROR, logger="docsearch.services.background"):
            writer.submit(fail(), label="search_log_db")
            await writer.drain()

        assert "search_log_db" in caplog.text
        assert "sink offline" in caplog.text
