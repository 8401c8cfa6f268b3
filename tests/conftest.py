"""Shared test fixtures for fetchkit.

Provides reusable fixtures for schemas, mock HTTP transports, isolated
config environments, output state and CLI invocation. These fixtures are
automatically discovered by pytest and available to all test modules
without explicit imports.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from fetchkit.models import Profile
from fetchkit.output import OutputFormat, OutputManager, reset_output, set_output
from fetchkit.transport import HttpxTransport


FIXTURES_DIR = Path(__file__).parent / "fixtures"

BASE_URL = "https://api.example.com"


# ---------------------------------------------------------------------------
# Auto-reset global output and logging state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager and the ``fetchkit`` logger after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time, and the CLI attaches a RichHandler bound to those
    streams. When Typer's CliRunner redirects the streams and the test
    finishes, the cached references become stale.
    """
    yield
    reset_output()
    package_logger = logging.getLogger("fetchkit")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------


@pytest.fixture
def users_schema() -> dict[str, list[str]]:
    """Two endpoints with two methods each."""
    return {
        "/users": ["get", "post"],
        "/users/:id": ["get", "delete"],
    }


@pytest.fixture
def schema_file() -> Path:
    """Path of the YAML petstore schema fixture."""
    return FIXTURES_DIR / "petstore.yaml"


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_transport() -> Callable[[Callable[[httpx.Request], Any]], HttpxTransport]:
    """Factory turning an httpx handler function into an :class:`HttpxTransport`.

    The handler may be sync or async and must return an
    :class:`httpx.Response`. Every request seen is appended to the
    returned transport's ``requests`` list.
    """

    def factory(handler: Callable[[httpx.Request], Any]) -> HttpxTransport:
        seen: list[httpx.Request] = []

        async def recording(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            response = handler(request)
            if not isinstance(response, httpx.Response):
                response = await response
            return response

        client = httpx.AsyncClient(transport=httpx.MockTransport(recording))
        transport = HttpxTransport(client=client)
        transport.requests = seen  # type: ignore[attr-defined]
        return transport

    return factory


# ---------------------------------------------------------------------------
# Profile fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_profile(schema_file: Path) -> Profile:
    """A profile pointing at the petstore schema fixture."""
    return Profile(
        name="petstore",
        schema_source=str(schema_file),
        base_url="http://localhost:8080",
    )


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME, XDG_CACHE_HOME, and XDG_DATA_HOME to
    subdirectories of tmp_path so that tests never touch real user
    config. Clears all FETCHKIT_* environment variables and changes
    the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("fetchkit.config._is_xdg_platform", lambda: True)

    for var in ["FETCHKIT_PROFILE", "FETCHKIT_BASE_URL", "FETCHKIT_SCHEMA"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet, PLAIN-format output manager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
