"""Application configuration loaded from environment variables."""

from enum import Enum

from pydantic_settings import BaseSettings


class SearchProviderKind(str, Enum):
    """Which search dialog the site mounts."""

    LEXICAL = "lexical"
    VECTOR = "vector"


class Settings(BaseSettings):
    """Central configuration — reads from environment / .env file."""

    # Database (empty = logging to the database is unavailable)
    database_url: str = ""

    # Algolia (lexical search)
    algolia_app_id: str = ""
    algolia_api_key: str = ""
    algolia_index: str = ""

    # Mixedbread (vector search)
    mxbai_api_key: str = ""
    vector_store_id: str = ""
    mxbai_base_url: str = "https://api.mixedbread.com"

    # Search dialog
    search_provider: SearchProviderKind = SearchProviderKind.VECTOR
    site_url: str = "http://localhost:8000"
    vector_search_path: str = "/api/vector-store"

    # Search logging
    log_dir: str = "log"
    session_cookie_name: str = "search_session_id"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    allowed_origins: str = "*"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def has_database(self) -> bool:
        return bool(self.database_url)

    @property
    def has_algolia(self) -> bool:
        return bool(self.algolia_app_id and self.algolia_api_key and self.algolia_index)

    @property
    def has_vector_store(self) -> bool:
        return bool(self.mxbai_api_key and self.vector_store_id)

    @property
    def cors_origins(self) -> list[str]:
        if self.allowed_origins == "*":
            return ["*"]
        return [o.strip() for o in self.allowed_origins.split(",")]


settings = Settings()
