"""Unit tests for environment-driven provider settings."""

from remotegit.config import Settings


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.github_api_url == "https://api.github.com"
        assert settings.max_list_items == 200
        assert settings.graph_commit_ordering == "date"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("MAX_SEARCH_ITEMS", "50")
        monkeypatch.setenv("COMMIT_ORDERING", "author-date")

        settings = Settings(_env_file=None)

        assert settings.max_search_items == 50
        assert settings.commit_ordering == "author-date"
