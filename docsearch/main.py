"""docsearch — FastAPI application entry point.

Search endpoints for the documentation site's search dialog, the search log
API, and the provider comparison page.
"""

import json
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from docsearch.comparison import build_comparison
from docsearch.config import Settings, settings
from docsearch.dependencies import background_writer, get_log_store, get_orchestrator, get_settings
from docsearch.orchestrator.router import SearchOrchestrator
from docsearch.services.log_store import DEFAULT_LIMIT, SearchLogStore, clamp_limit
from docsearch.services.session import attach_session_cookie, resolve_session

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)
logger = logging.getLogger("docsearch")

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

Orchestrator = Annotated[SearchOrchestrator, Depends(get_orchestrator)]
LogStore = Annotated[SearchLogStore, Depends(get_log_store)]
AppSettings = Annotated[Settings, Depends(get_settings)]


# ═══════════════ LIFESPAN ═══════════════

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "docsearch starting | provider=%s | algolia=%s | vector_store=%s",
        settings.search_provider.value, settings.has_algolia, settings.has_vector_store,
    )

    # Initialize database (graceful degradation if unavailable)
    from docsearch.database import close_db, init_db
    db_ok = await init_db()
    logger.info("Database: %s", "connected" if db_ok else "unavailable (continuing without)")

    yield

    await background_writer.drain()
    await close_db()
    logger.info("docsearch shutting down")


# ═══════════════ APP ═══════════════

app = FastAPI(
    title="docsearch API",
    description="Dual-provider documentation search with session-scoped logging",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["POST", "OPTIONS", "GET"],
    allow_headers=["Content-Type"],
    allow_credentials=settings.cors_origins != ["*"],
)


# ═══════════════ ENDPOINTS ═══════════════

@app.get("/health")
async def health(config: AppSettings):
    return {
        "status": "ok",
        "search_provider": config.search_provider.value,
        "database": config.has_database,
        "lexical": config.has_algolia,
        "vector": config.has_vector_store,
    }


@app.get("/api/vector-store")
async def vector_store_search(
    request: Request,
    orchestrator: Orchestrator,
    config: AppSettings,
    query: str | None = None,
):
    """Vector search — deduplicated by source file, two dialog entries per file."""
    identity = resolve_session(request, config.session_cookie_name)
    outcome = await orchestrator.vector_search(query, identity.session_id)
    response = JSONResponse(status_code=outcome.status_code, content=outcome.body)
    return attach_session_cookie(response, identity, config.session_cookie_name)


@app.get("/api/search")
async def lexical_search(
    request: Request,
    orchestrator: Orchestrator,
    config: AppSettings,
    q: str = "",
):
    """Lexical search — logged to the session's JSONL file.

    Provider errors propagate after logging; the framework answers with 500.
    """
    identity = resolve_session(request, config.session_cookie_name)
    results = await orchestrator.lexical_search(q, identity.session_id)
    response = JSONResponse(content=results)
    return attach_session_cookie(response, identity, config.session_cookie_name)


@app.post("/api/log")
async def log_client_search(request: Request, orchestrator: Orchestrator, config: AppSettings):
    """Record a search observed by the client-side lexical dialog."""
    identity = resolve_session(request, config.session_cookie_name)
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        payload = None

    outcome = await orchestrator.record_client_event(payload, identity.session_id)
    response = JSONResponse(status_code=outcome.status_code, content=outcome.body)
    return attach_session_cookie(response, identity, config.session_cookie_name)


@app.get("/api/logs")
async def list_search_logs(
    store: LogStore,
    provider: str | None = None,
    limit: str | None = None,
):
    """Logged search events, most recent first."""
    try:
        events = await store.query(provider=provider or None, limit=clamp_limit(limit))
    except Exception as e:
        logger.error("/api/logs error | %s", str(e)[:300])
        return JSONResponse(status_code=500, content={"error": str(e)})
    return JSONResponse(content=[e.model_dump(mode="json", exclude={"error", "reason"}) for e in events])


@app.get("/logs", response_class=HTMLResponse)
async def compare_providers(
    request: Request,
    store: LogStore,
    left: str | None = None,
    right: str | None = None,
):
    """Side-by-side provider comparison of recent search logs."""
    rows = None
    error = None
    try:
        rows = await store.query(limit=DEFAULT_LIMIT)
    except Exception as e:
        logger.error("/logs error | %s", str(e)[:300])
        error = str(e) or "Failed to load logs"

    columns = build_comparison(rows, left=left, right=right) if rows else []
    return templates.TemplateResponse(
        request,
        "logs.html",
        {"rows": rows, "error": error, "columns": columns},
    )
