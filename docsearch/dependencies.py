"""FastAPI dependencies — process-wide components built once from Settings.

Tests swap these out through `app.dependency_overrides`.
"""

from functools import lru_cache

from docsearch.config import Settings, settings
from docsearch.integrations.algolia import AlgoliaClient
from docsearch.integrations.mixedbread import MixedbreadClient
from docsearch.orchestrator.router import SearchOrchestrator
from docsearch.services.background import BackgroundWriter
from docsearch.services.log_store import SearchLogStore
from docsearch.services.session_log import SessionFileLog

background_writer = BackgroundWriter()


def get_settings() -> Settings:
    return settings


@lru_cache
def get_log_store() -> SearchLogStore:
    from docsearch.database import async_session_factory

    return SearchLogStore(async_session_factory)


@lru_cache
def get_orchestrator() -> SearchOrchestrator:
    return SearchOrchestrator(
        settings=settings,
        lexical=AlgoliaClient(settings),
        vector=MixedbreadClient(settings),
        log_store=get_log_store(),
        session_log=SessionFileLog(settings.log_dir),
        writer=background_writer,
    )
