"""Pytest configuration and fixtures."""

import os
import tempfile

# Keep test logs out of the working tree; must run before logger is imported
os.environ.setdefault("DIGEST_LOG_DIR", os.path.join(tempfile.gettempdir(), "community-digest-tests"))

import pytest
from unittest.mock import AsyncMock, Mock, patch

from digest.links.registry import reset_link_registry
from digest.types import NormalizedMessage


@pytest.fixture(autouse=True)
def clean_link_registry():
    """Every test starts with an empty process-wide link registry."""
    reset_link_registry()
    yield
    reset_link_registry()


@pytest.fixture
def mock_httpx_client():
    """Create a mock httpx client."""
    with patch('httpx.AsyncClient') as mock:
        client = AsyncMock()
        mock.return_value.__aenter__.return_value = client
        yield client


@pytest.fixture
def slack_response():
    """Build a mock chat.postMessage response."""
    def _build(data=None, status_code=200, headers=None):
        response = Mock()
        response.status_code = status_code
        response.headers = headers or {}
        response.json = Mock(return_value=data if data is not None else {"ok": True, "ts": "1.0"})
        return response
    return _build


@pytest.fixture
def make_message():
    """Factory for NormalizedMessage with sensible defaults."""
    def _make(content="A reasonably long message", author="alice", created_at="2025-09-29T10:00:00Z",
              channel_id="c1", **kwargs):
        return NormalizedMessage(
            id=kwargs.pop("id", f"{channel_id}-{created_at}"),
            source=kwargs.pop("source", "discord"),
            author=author,
            content=content,
            created_at=created_at,
            channel_id=channel_id,
            **kwargs,
        )
    return _make
