"""Shared test fixtures for apicaller.

Provides isolated config environments, a quiet global output manager,
mock HTTP transports that count their calls, and a CLI runner.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from apicaller.output import OutputFormat, OutputManager, reset_output, set_output

BASE_URL = "https://exampleURL.com/api"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    CliRunner swaps sys.stdout/sys.stderr for the duration of an invocation,
    so a manager created inside one test must not leak into the next.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG config/cache dirs at tmp_path and clear APICALLER_* variables."""
    monkeypatch.setattr("apicaller.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    for var in ["APICALLER_BASE_URL", "APICALLER_CACHE_BACKEND"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True, no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# HTTP fakes
# ---------------------------------------------------------------------------


class RecordingTransport(httpx.MockTransport):
    """MockTransport that records every request it answers."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    @property
    def call_count(self) -> int:
        return len(self.requests)


@pytest.fixture
def recording_transport() -> Callable[..., RecordingTransport]:
    """Factory wrapping a handler (sync or async) in a RecordingTransport."""
    return RecordingTransport


@pytest.fixture
def json_transport() -> Callable[..., RecordingTransport]:
    """Factory for a transport answering every request with *payload* as JSON."""

    def _factory(payload: Any, status_code: int = 200) -> RecordingTransport:
        body = json.dumps(payload).encode()

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                status_code,
                content=body,
                headers={"content-type": "application/json"},
            )

        return RecordingTransport(handler)

    return _factory


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
