"""SQLAlchemy ORM models."""

from docsearch.models.base import Base
from docsearch.models.search_log import SearchLog

__all__ = ["Base", "SearchLog"]
