"""Shared test fixtures for restbase.

Provides isolated config directories, a sample profile, a controllable
clock for the response cache, a probe that counts its calls, and a
recording ``httpx.MockTransport`` factory. Fixtures are discovered by
pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Optional

import httpx
import pytest

from restbase.cache import ResponseCache
from restbase.models import CacheConfig, ConnectivityConfig, ServiceProfile
from restbase.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The manager holds Rich consoles bound to the streams that were current
    when it was built. CliRunner swaps those streams per invocation, so a
    manager left over from one test would write to a closed file in the next.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every XDG directory at tmp_path and chdir there.

    Also clears ``RESTBASE_*`` environment variables so a developer's shell
    cannot leak into the tests.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("restbase.config._is_xdg_platform", lambda: True)

    for var in ("RESTBASE_PROFILE", "RESTBASE_BASE_URL"):
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------


@pytest.fixture
def profile() -> ServiceProfile:
    """Profile for ``https://api.example.com/`` with a static API-version header."""
    return ServiceProfile(
        name="test-api",
        base_url="https://api.example.com/",
        headers={"X-Api-Version": "2"},
        connectivity=ConnectivityConfig(assume_online=True),
    )


# ---------------------------------------------------------------------------
# Cache, clock and probe doubles
# ---------------------------------------------------------------------------


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, *, hours: float = 0, seconds: float = 0) -> None:
        self.now += hours * 3600 + seconds


class CountingProbe:
    """Connectivity probe with a settable answer that counts how often it is asked."""

    def __init__(self, online: bool = True) -> None:
        self.online = online
        self.calls = 0

    def has_internet(self) -> bool:
        self.calls += 1
        return self.online


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def probe() -> CountingProbe:
    return CountingProbe(online=True)


@pytest.fixture
def cache(tmp_path: Path, clock: FakeClock) -> ResponseCache:
    """Enabled ResponseCache under tmp_path driven by the fake clock."""
    c = ResponseCache(tmp_path / "cache", CacheConfig(), clock=clock)
    yield c
    c.close()


# ---------------------------------------------------------------------------
# HTTP doubles
# ---------------------------------------------------------------------------


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it handled in ``requests``."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


def json_handler(
    data: Any, status_code: int = 200
) -> Callable[[httpx.Request], httpx.Response]:
    """Handler that answers every request with *data* as JSON."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            status_code,
            headers={"content-type": "application/json"},
            content=json.dumps(data).encode(),
        )

    return handler


@pytest.fixture
def recording_transport() -> Callable[..., RecordingTransport]:
    """Factory: ``recording_transport(data, status_code=200)``."""

    def _make(data: Any = None, status_code: int = 200, handler: Optional[Callable] = None):
        return RecordingTransport(handler or json_handler(data, status_code))

    return _make


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def verbose_output() -> OutputManager:
    """Install a PLAIN, verbose OutputManager so debug lines reach stderr."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def cli_runner():
    from typer.testing import CliRunner

    return CliRunner()
