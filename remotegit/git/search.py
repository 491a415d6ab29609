"""
Commit search query parsing.

Turns a free-form query such as `author:@me message:"fix crash" 1a2b3c4` into
operator buckets, and the buckets into GitHub commit-search qualifiers.
Only `message:`, `author:` and `commit:` can be served by the remote search
API; the other operators are parsed but produce no qualifiers.
"""

import re

from remotegit.git.models import GitUser, SearchQuery

SEARCH_OPERATORS: dict[str, str] = {
    "=:": "message:",
    "message:": "message:",
    "@:": "author:",
    "author:": "author:",
    "#:": "commit:",
    "commit:": "commit:",
    "?:": "file:",
    "file:": "file:",
    "~:": "change:",
    "change:": "change:",
    "is:": "type:",
    "type:": "type:",
}

_OPERATOR_PATTERN = "|".join(re.escape(op) for op in sorted(SEARCH_OPERATORS, key=len, reverse=True))
_TOKEN_RE = re.compile(
    rf"(?:(?P<op>{_OPERATOR_PATTERN})\s?(?P<value>\"[^\"]*\"|\S+))|(?P<text>\"[^\"]*\"|\S+)",
    re.IGNORECASE,
)
_UNKNOWN_OPERATOR_RE = re.compile(r"^[a-zA-Z][\w-]*:")
_SHA_TOKEN_RE = re.compile(r"^[0-9a-f]{7,40}$")


def get_search_query_comparison_key(search: SearchQuery) -> str:
    flags = f"{'A' if search.match_all else ''}{'C' if search.match_case else ''}{'R' if search.match_regex else ''}"
    return f"{search.query.strip()}|{flags}"


def parse_search_query(search: SearchQuery) -> dict[str, list[str]]:
    """
    Split a query into operator buckets, preserving first-seen order.

    Bare sha-looking words are treated as `commit:`, bare `@handle` words as
    `author:`, other bare words as `message:`. Tokens shaped like an unknown
    `name:value` operator are dropped.
    """
    operations: dict[str, list[str]] = {}

    for match in _TOKEN_RE.finditer(search.query):
        op = match.group("op")
        if op is not None:
            operator = SEARCH_OPERATORS[op.lower()]
            value = match.group("value")
        else:
            value = match.group("text")
            if _UNKNOWN_OPERATOR_RE.match(value):
                continue
            if _SHA_TOKEN_RE.match(value):
                operator = "commit:"
            elif value.startswith("@") and len(value) > 1:
                operator = "author:"
            else:
                operator = "message:"

        if not value or value == '""':
            continue

        values = operations.setdefault(operator, [])
        if value not in values:
            values.append(value)

    return operations


def get_query_args(
    operations: dict[str, list[str]],
    current_user: GitUser | None = None,
    match_regex: bool = False,
) -> list[str]:
    """
    Translate `message:` and `author:` buckets into GitHub search qualifiers.

    With `match_regex`, quotes around author values become word boundaries.
    """
    args: list[str] = []

    for value in operations.get("message:", []):
        args.append(value.replace(" ", "+"))

    for value in operations.get("author:", []):
        value = value.replace('"', "\\b" if match_regex else "")
        if not value:
            continue
        if "@me" in value:
            if current_user is None or not current_user.username:
                continue
            value = value.replace("@me", f"@{current_user.username}")
        value = value.replace(" ", "+")

        if value.startswith("@"):
            args.append(f"author:{value[1:]}")
        elif "@" in value:
            args.append(f"author-email:{value}")
        else:
            args.append(f"author-name:{value}")

    return args
