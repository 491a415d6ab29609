"""Root conftest: test infrastructure for all tests.

Provides:
- anyio backend selection for async tests
- Autouse guard so no test reaches the real GitHub API
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

# ─────────────────────────────────────────────────────────────────────────────
# Async backend
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


# ─────────────────────────────────────────────────────────────────────────────
# External Service Mocks
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def mock_github_transport():
    """SAFETY: Never send real requests to GitHub from tests.

    Tests that exercise the transport patch `get_github_client` themselves;
    their patch wins over this one. Anything else that reaches the client
    gets a MagicMock whose calls fail loudly when awaited.
    """
    with patch("remotegit.services.github.read_operations.get_github_client") as mock_get_client:
        mock_get_client.return_value = MagicMock(name="github_client")
        yield mock_get_client
