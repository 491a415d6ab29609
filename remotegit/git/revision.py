"""Revision syntax helpers: sentinel shas, sha detection and revision ranges."""

import re
from typing import Literal

UNCOMMITTED = "0" * 40
UNCOMMITTED_STAGED = f"{UNCOMMITTED}:"
DELETED_OR_MISSING = f"{UNCOMMITTED}-"

_SHA_RE = re.compile(r"(^[0-9a-f]{40}$)|(^[0]{40}(:|-)$)")
_SHA_LIKE_RE = re.compile(r"(^[0-9a-f]{40}([\^@~:]\S*)?$)|(^[0]{40}(:|-)$)")
_UNCOMMITTED_RE = re.compile(r"^[0]{40}(?:[\^@~:]\S*)?:?$")
_ORIGIN_RE = re.compile(r"(?:^|(?<=\.\.))origin/")
_RANGE_RE = re.compile(
    r"^(?P<left>(?:[^.]|\.(?!\.))*?)(?P<notation>\.\.\.?)(?P<right>(?:[^.]|\.(?!\.))*)$"
)

RangeNotation = Literal["..", "..."]


def is_sha(ref: str) -> bool:
    return bool(_SHA_RE.match(ref))


def is_sha_like(ref: str) -> bool:
    return bool(_SHA_LIKE_RE.match(ref))


def is_uncommitted(ref: str | None, exact: bool = False) -> bool:
    if not ref:
        return False
    return ref == UNCOMMITTED or (not exact and bool(_UNCOMMITTED_RE.match(ref)))


def strip_origin(ref: str) -> str:
    """Drop a leading `origin/` from a ref, including each side of a range."""
    return _ORIGIN_RE.sub("", ref)


def is_revision_range(
    ref: str | None,
    notation: Literal["any", "qualified", "qualified-double-dot", "qualified-triple-dot"] = "any",
) -> bool:
    """
    Detect `a..b` / `a...b` range syntax.

    `qualified*` notations require both sides of the range to be present.
    """
    if not ref:
        return False

    match = _RANGE_RE.match(ref)
    if match is None:
        return False
    if notation == "any":
        return True

    left, right, dots = match.group("left"), match.group("right"), match.group("notation")
    if not left or not right:
        return False
    if notation == "qualified-double-dot":
        return dots == ".."
    if notation == "qualified-triple-dot":
        return dots == "..."
    return True


def get_revision_range_parts(ref: str) -> tuple[str | None, str | None, RangeNotation] | None:
    """Split a range into `(left, right, notation)`; empty sides become None."""
    match = _RANGE_RE.match(ref)
    if match is None:
        return None
    notation: RangeNotation = "..." if match.group("notation") == "..." else ".."
    return match.group("left") or None, match.group("right") or None, notation


def create_revision_range(
    left: str | None,
    right: str | None,
    notation: RangeNotation = "...",
) -> str:
    return f"{left or ''}{notation}{right or ''}"
