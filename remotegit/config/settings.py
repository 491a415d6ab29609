from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Provider settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # GitHub endpoints
    github_api_url: str = "https://api.github.com"
    github_graphql_url: str = "https://api.github.com/graphql"
    github_api_version: str = "2022-11-28"

    # HTTP transport
    request_timeout: float = 30.0
    connect_timeout: float = 5.0
    max_connections: int = 20
    max_keepalive_connections: int = 10

    # Paging - the GitHub API never returns more than 100 items per page
    max_list_items: int = 200
    max_search_items: int = 200
    graph_default_item_limit: int = 5000

    # Branch dates; graph and search ordering
    commit_ordering: Literal["committer-date", "author-date"] = "committer-date"
    graph_commit_ordering: Literal["date", "author-date", "topo"] = "date"

    # Caching
    tracked_documents_max: int = 500

    # Seconds between checks for repositories waiting on a workspace provider
    pending_discovery_interval: float = 0.25


settings = Settings()
