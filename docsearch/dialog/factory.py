"""Mount-time selection of the search dialog implementation."""

import httpx

from docsearch.config import SearchProviderKind, Settings
from docsearch.dialog.base import SearchDialog
from docsearch.dialog.lexical import LexicalSearchDialog
from docsearch.dialog.vector import VectorSearchDialog
from docsearch.integrations.algolia import AlgoliaClient
from docsearch.services.background import BackgroundWriter


def create_search_dialog(
    settings: Settings,
    site: httpx.AsyncClient | None = None,
    writer: BackgroundWriter | None = None,
) -> SearchDialog:
    """Return the dialog for `settings.search_provider`.

    `site` is the client for the documentation site's endpoints; by default
    one is built on `settings.site_url`. Reuse the same client across searches
    so the dialog keeps the site's session cookie.
    """
    if site is None:
        site = httpx.AsyncClient(base_url=settings.site_url)
    if settings.search_provider == SearchProviderKind.LEXICAL:
        return LexicalSearchDialog(AlgoliaClient(settings), site, writer)
    return VectorSearchDialog(site, settings.vector_search_path)
