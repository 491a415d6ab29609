"""Unit tests for revision syntax helpers."""

from __future__ import annotations

from remotegit.git.revision import (
    DELETED_OR_MISSING,
    UNCOMMITTED,
    UNCOMMITTED_STAGED,
    create_revision_range,
    get_revision_range_parts,
    is_revision_range,
    is_sha,
    is_sha_like,
    is_uncommitted,
    strip_origin,
)

SHA = "0123456789abcdef0123456789abcdef01234567"


class TestShaDetection:
    def test_full_sha(self):
        assert is_sha(SHA) is True
        assert is_sha("main") is False
        assert is_sha(SHA[:7]) is False

    def test_sentinels_count_as_shas(self):
        assert is_sha(UNCOMMITTED) is True
        assert is_sha(UNCOMMITTED_STAGED) is True
        assert is_sha(DELETED_OR_MISSING) is True

    def test_sha_like_accepts_suffixes(self):
        assert is_sha_like(f"{SHA}^") is True
        assert is_sha_like(f"{SHA}~2") is True
        assert is_sha_like("main^") is False

    def test_uncommitted(self):
        assert is_uncommitted(UNCOMMITTED) is True
        assert is_uncommitted(UNCOMMITTED_STAGED) is True
        assert is_uncommitted(UNCOMMITTED_STAGED, exact=True) is False
        assert is_uncommitted(SHA) is False
        assert is_uncommitted(None) is False


class TestStripOrigin:
    def test_strips_leading_origin(self):
        assert strip_origin("origin/main") == "main"

    def test_leaves_other_refs(self):
        assert strip_origin("main") == "main"
        assert strip_origin("feature/origin/x") == "feature/origin/x"

    def test_strips_both_sides_of_range(self):
        assert strip_origin("origin/main..origin/feature") == "main..feature"
        assert strip_origin("origin/main...origin/feature") == "main...feature"


class TestRevisionRanges:
    def test_detects_ranges(self):
        assert is_revision_range("main..feature") is True
        assert is_revision_range("main...feature") is True
        assert is_revision_range("main") is False
        assert is_revision_range("v1.0") is False
        assert is_revision_range(None) is False

    def test_qualified_requires_both_sides(self):
        assert is_revision_range("main..", "qualified") is False
        assert is_revision_range("main..feature", "qualified") is True

    def test_notation_specific(self):
        assert is_revision_range("a..b", "qualified-double-dot") is True
        assert is_revision_range("a...b", "qualified-double-dot") is False
        assert is_revision_range("a...b", "qualified-triple-dot") is True

    def test_parts(self):
        assert get_revision_range_parts("v1.0..v2.0") == ("v1.0", "v2.0", "..")
        assert get_revision_range_parts("main...") == ("main", None, "...")
        assert get_revision_range_parts("main") is None

    def test_create(self):
        assert create_revision_range("a", "b") == "a...b"
        assert create_revision_range("a", None, "..") == "a.."
