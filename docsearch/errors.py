"""Error taxonomy for the search integration layer.

Each error carries the reason tag written to the search log when it ends a
request.
"""


class SearchIntegrationError(Exception):
    """Base class for all errors raised by docsearch."""

    reason = "exception"


class ConfigurationError(SearchIntegrationError):
    """Required credentials or identifiers are absent."""

    reason = "env_missing"


class ValidationError(SearchIntegrationError):
    """A required request parameter is missing or empty."""

    reason = "missing_query"


class ProviderError(SearchIntegrationError):
    """The external search service call failed."""


class StorageError(SearchIntegrationError):
    """Reading or writing the search log failed."""
