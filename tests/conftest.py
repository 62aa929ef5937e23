"""Shared test fixtures and configuration."""

import os

import pytest
from httpx import ASGITransport, AsyncClient

# No real providers or database during tests
for _var in ("DATABASE_URL", "ALGOLIA_APP_ID", "ALGOLIA_API_KEY", "ALGOLIA_INDEX",
             "MXBAI_API_KEY", "VECTOR_STORE_ID"):
    os.environ[_var] = ""

from docsearch.config import Settings  # noqa: E402
from docsearch.database import build_engine, build_session_factory, init_db  # noqa: E402
from docsearch.dependencies import get_log_store, get_orchestrator, get_settings  # noqa: E402
from docsearch.integrations.algolia import AlgoliaClient  # noqa: E402
from docsearch.integrations.mixedbread import MixedbreadClient  # noqa: E402
from docsearch.main import app  # noqa: E402
from docsearch.orchestrator.router import SearchOrchestrator  # noqa: E402
from docsearch.services.background import BackgroundWriter  # noqa: E402
from docsearch.services.log_store import SearchLogStore  # noqa: E402
from docsearch.services.session_log import SessionFileLog  # noqa: E402

ALGOLIA_URL = "https://testapp-dsn.algolia.net/1/indexes/docs/query"
MIXEDBREAD_URL = "https://api.mixedbread.test/v1/vector_stores/search"


@pytest.fixture
def settings(tmp_path):
    """Fully configured settings backed by a throwaway SQLite file."""
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'logs.db'}",
        algolia_app_id="TESTAPP",
        algolia_api_key="algolia-key",
        algolia_index="docs",
        mxbai_api_key="mxbai-key",
        vector_store_id="docs-store",
        mxbai_base_url="https://api.mixedbread.test",
        log_dir=str(tmp_path / "log"),
    )


@pytest.fixture
def bare_settings(tmp_path):
    """Settings with no provider credentials and no database."""
    return Settings(_env_file=None, log_dir=str(tmp_path / "log"))


@pytest.fixture
async def session_factory(settings):
    engine = build_engine(settings.database_url)
    assert await init_db(engine)
    yield build_session_factory(engine)
    await engine.dispose()


@pytest.fixture
def log_store(session_factory):
    return SearchLogStore(session_factory)


@pytest.fixture
def writer():
    return BackgroundWriter()


@pytest.fixture
def session_log(settings):
    return SessionFileLog(settings.log_dir)


def make_orchestrator(config, log_store, session_log, writer):
    return SearchOrchestrator(
        settings=config,
        lexical=AlgoliaClient(config),
        vector=MixedbreadClient(config),
        log_store=log_store,
        session_log=session_log,
        writer=writer,
    )


@pytest.fixture
def orchestrator(settings, log_store, session_log, writer):
    return make_orchestrator(settings, log_store, session_log, writer)


@pytest.fixture
async def client(settings, orchestrator, log_store):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_log_store] = lambda: log_store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def sample_chunks():
    """Mixedbread search response chunks; file ids a, b, a, c, b."""
    def chunk(file_id, title, path, url, score):
        return {
            "file_id": file_id,
            "score": score,
            "type": "text",
            "text": f"chunk of {title}",
            "generated_metadata": {"title": title, "path": path, "source_url": url},
        }

    return [
        chunk("a", "Installation", "docs/install.mdx", "https://docs.test/install", 0.91),
        chunk("b", "Configuration", "docs/config.mdx", "https://docs.test/config", 0.88),
        chunk("a", "Installation", "docs/install.mdx", "https://docs.test/install", 0.80),
        chunk("c", "Deploying", "docs/deploy.mdx", "https://docs.test/deploy", 0.74),
        chunk("b", "Configuration", "docs/config.mdx", "https://docs.test/config", 0.70),
    ]


@pytest.fixture
def sample_algolia_hits():
    """Algolia documentation records — two sections of one page, one of another."""
    return {
        "hits": [
            {
                "objectID": "install-0",
                "page_id": "install",
                "title": "Installation",
                "url": "/docs/install",
                "section": "Requirements",
                "section_id": "requirements",
                "content": "Requirements",
            },
            {
                "objectID": "install-1",
                "page_id": "install",
                "title": "Installation",
                "url": "/docs/install",
                "section": "Requirements",
                "section_id": "requirements",
                "content": "Python 3.10 or newer is required.",
            },
            {
                "objectID": "config-0",
                "page_id": "config",
                "title": "Configuration",
                "url": "/docs/config",
                "content": "All settings are read from the environment.",
            },
        ],
        "nbHits": 3,
    }
