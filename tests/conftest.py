"""Shared test fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from layr.config.settings import LayrSettings
from layr.logging.events import EventLog, RunDir

# Keys that must be cleared to isolate tests from the user's environment
_ENV_KEYS = (
    "LAYR_PROVIDER",
    "LAYR_MODEL",
    "LAYR_MAX_TOKENS",
    "LAYR_GEMINI_API_KEY",
    "LAYR_OPENAI_API_KEY",
    "LAYR_OPENAI_ORGANIZATION",
    "LAYR_CLAUDE_API_KEY",
    "LAYR_PROXY_URL",
    "LAYR_RUNS_DIR",
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
    "OPENAI_ORG_ID",
    "ANTHROPIC_API_KEY",
    "ANTHROPIC_BASE_URL",
)

SAMPLE_PLAN = {
    "title": "Todo App",
    "overview": "A small todo application.",
    "requirements": ["Add tasks", "Complete tasks"],
    "fileStructure": [
        {
            "name": "src",
            "type": "directory",
            "path": "src/",
            "description": "Source code",
            "children": [{"name": "main.py", "type": "file", "path": "src/main.py"}],
        },
        {"name": "README.md", "type": "file", "path": "README.md"},
    ],
    "nextSteps": [
        {
            "id": "setup",
            "description": "Set up the project",
            "completed": False,
            "priority": "high",
            "estimatedTime": "30 minutes",
            "dependencies": [],
        },
        {
            "id": "tasks",
            "description": "Implement tasks",
            "priority": "medium",
            "estimatedTime": "2 hours",
            "dependencies": ["setup"],
        },
    ],
}


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate every test from real credentials and any local .env file."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings(tmp_path: Path) -> LayrSettings:
    """Settings with no credentials at all (offline mode)."""
    return LayrSettings(_env_file=None, runs_dir=tmp_path / "runs")  # type: ignore[call-arg]


@pytest.fixture
def run_dir(tmp_path: Path) -> RunDir:
    """Create a temporary run directory."""
    return RunDir(base=tmp_path / "runs")


@pytest.fixture
def event_log(run_dir: RunDir) -> EventLog:
    """Create an event log in a temporary run directory."""
    log = EventLog(run_dir)
    yield log
    log.close()


@pytest.fixture
def sample_plan_json() -> str:
    return json.dumps(SAMPLE_PLAN)


Handler = Callable[[httpx.Request], httpx.Response]


def mock_client(handler: Handler) -> httpx.AsyncClient:
    """An AsyncClient whose requests are answered by ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class RecordingHandler:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, status: int = 200, body: Any = None, text: str | None = None) -> None:
        self.status = status
        self.body = body
        self.text = text
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status, text=self.text)
        return httpx.Response(self.status, json=self.body)

    @property
    def last_json(self) -> Any:
        return json.loads(self.requests[-1].content)
