"""Shared fixtures: settings, a scripted completion client and a test app."""
from __future__ import annotations

from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from relay_service.app.config import Settings, get_settings
from relay_service.app.main import create_app


class FakeCompleter:
    """Stands in for the upstream API; replays scripted replies or errors."""

    def __init__(self, replies: Optional[List[object]] = None) -> None:
        self.replies = list(replies or [])
        self.calls: List[Dict[str, object]] = []

    async def complete(self, messages, api_key):  # noqa: D401
        self.calls.append({"messages": [dict(m) for m in messages], "api_key": api_key})
        reply = self.replies.pop(0) if self.replies else "ok"
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    get_settings.cache_clear()
    try:
        yield
    finally:
        get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(upstream_api_key="test-token")


@pytest.fixture
def completer() -> FakeCompleter:
    return FakeCompleter()


@pytest.fixture
def app(settings, completer):
    return create_app(settings=settings, completion_client=completer)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
