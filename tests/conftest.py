"""Shared fixtures: a stub completion client and an app wired to it."""

import dataclasses
import json
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from coldmail.config import Settings
from coldmail.main import create_app


class StubCompletionClient:
    """Stands in for the OpenAI client; replays queued replies and records calls."""

    def __init__(self, replies: list[Any] | None = None) -> None:
        self.replies = list(replies or [])
        self.calls: list[dict[str, Any]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def queue(self, reply: Any) -> None:
        self.replies.append(reply)

    async def complete(self, **kwargs: Any) -> str:
        self.calls.append(kwargs)
        if not self.replies:
            raise AssertionError("StubCompletionClient called with no queued reply")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, dict):
            return json.dumps(reply)
        return reply


@pytest.fixture
def stub_client() -> StubCompletionClient:
    return StubCompletionClient()


@pytest.fixture
def log_path(tmp_path: Path) -> Path:
    return tmp_path / "logs" / "requests.ndjson"


@pytest.fixture
def settings(log_path: Path) -> Settings:
    return Settings(
        openai_api_key="test-key",
        environment="test",
        log_path=log_path,
        rate_limit_max_requests=100,
    )


@pytest.fixture
def make_client(stub_client, settings):
    def _make(**overrides: Any) -> TestClient:
        app_settings = dataclasses.replace(settings, **overrides)
        return TestClient(create_app(app_settings, client=stub_client))

    return _make


@pytest.fixture
def api(make_client) -> TestClient:
    return make_client()


@pytest.fixture
def generation_payload() -> dict[str, Any]:
    return {
        "prospect": {"name": "Jane", "company": "Acme", "role": "Manager"},
        "product": {"description": "X", "painPoint": "Y", "solution": "Z"},
        "strategy": {"ctaType": "direct"},
    }


@pytest.fixture
def read_log(log_path: Path):
    def _read() -> list[dict[str, Any]]:
        lines = log_path.read_text(encoding="utf-8").splitlines()
        return [json.loads(line) for line in lines if line]

    return _read
