"""Unit tests for commit search query parsing and GitHub qualifiers."""

from __future__ import annotations

from remotegit.git.models import GitUser, SearchQuery
from remotegit.git.search import (
    get_query_args,
    get_search_query_comparison_key,
    parse_search_query,
)


def _parse(query: str) -> dict[str, list[str]]:
    return parse_search_query(SearchQuery(query=query))


class TestParseSearchQuery:
    def test_long_and_short_operators(self):
        ops = _parse("message:fix @:ada #:abc1234 file:src/a.py ~:foo type:stash")

        assert ops["message:"] == ["fix"]
        assert ops["author:"] == ["ada"]
        assert ops["commit:"] == ["abc1234"]
        assert ops["file:"] == ["src/a.py"]
        assert ops["change:"] == ["foo"]
        assert ops["type:"] == ["stash"]

    def test_quoted_values(self):
        ops = _parse('message:"fix crash" author:"Ada Lovelace"')

        assert ops["message:"] == ['"fix crash"']
        assert ops["author:"] == ['"Ada Lovelace"']

    def test_bare_words(self):
        ops = _parse("crash @octo deadbeef1")

        assert ops["message:"] == ["crash"]
        assert ops["author:"] == ["@octo"]
        assert ops["commit:"] == ["deadbeef1"]

    def test_unknown_operators_dropped(self):
        assert _parse("foo:bar") == {}

    def test_duplicates_collapse(self):
        assert _parse("fix fix")["message:"] == ["fix"]


class TestGetQueryArgs:
    def test_message_spaces_become_plus(self):
        assert get_query_args({"message:": ["fix crash"]}) == ["fix+crash"]

    def test_author_forms(self):
        args = get_query_args({"author:": ["@octo", "ada@example.com", "Ada Lovelace"]})

        assert args == ["author:octo", "author-email:ada@example.com", "author-name:Ada+Lovelace"]

    def test_me_uses_current_user(self):
        user = GitUser(name="Octo", email=None, username="octocat")
        assert get_query_args({"author:": ["@me"]}, user) == ["author:octocat"]

    def test_me_dropped_without_user(self):
        assert get_query_args({"author:": ["@me"]}, None) == []

    def test_other_operators_produce_nothing(self):
        assert get_query_args({"file:": ["a.py"], "type:": ["stash"]}) == []

    def test_quoted_author_with_regex_uses_word_boundaries(self):
        args = get_query_args({"author:": ['"Ada Lovelace"']}, match_regex=True)

        assert args == ["author-name:\\bAda+Lovelace\\b"]


class TestComparisonKey:
    def test_includes_flags(self):
        key = get_search_query_comparison_key(SearchQuery(query=" fix ", match_case=True, match_regex=True))
        assert key == "fix|CR"
