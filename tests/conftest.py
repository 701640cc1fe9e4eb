"""Shared test fixtures for apicomplete.

Provides reusable fixtures for loading the spec fixture, creating isolated
storage locations, managing output state, mocking spec downloads, and
running CLI commands. These fixtures are automatically discovered by pytest
and available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from unittest.mock import patch

import httpx
import pytest

from apicomplete.config import StoragePaths
from apicomplete.models import ApiEntry, CachedSpec
from apicomplete.output import OutputFormat, OutputManager, reset_output, set_output
from apicomplete.parser import extract_cached_spec
from apicomplete.store import SpecStore


FIXTURES_DIR = Path(__file__).parent / "fixtures"

PETSTORE_SPEC_URL = "https://petstore3.swagger.io/api/v3/openapi.json"
PETSTORE_BASE_URL = "https://petstore3.swagger.io/api/v3"
FETCHED_AT = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_response(
    body: Any,
    url: str = PETSTORE_SPEC_URL,
    status_code: int = 200,
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    """Build an ``httpx.Response`` bound to a GET request for *url*."""
    request = httpx.Request("GET", url)
    if isinstance(body, (dict, list)):
        return httpx.Response(status_code, json=body, headers=headers, request=request)
    return httpx.Response(status_code, text=body, headers=headers, request=request)


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Spec fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_raw() -> dict[str, Any]:
    """Load the raw petstore 3.0 spec dict."""
    with open(FIXTURES_DIR / "petstore.json") as f:
        return json.load(f)


@pytest.fixture
def petstore_cached(petstore_raw: dict[str, Any]) -> CachedSpec:
    """The petstore spec reduced to its cache form."""
    return extract_cached_spec(
        "petstore", PETSTORE_SPEC_URL, petstore_raw, petstore_raw["openapi"], FETCHED_AT
    )


@pytest.fixture
def petstore_entry() -> ApiEntry:
    return ApiEntry(name="petstore", spec_url=PETSTORE_SPEC_URL, base_url=PETSTORE_BASE_URL)


# ---------------------------------------------------------------------------
# Storage isolation fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def storage_paths(tmp_path: Path) -> StoragePaths:
    """Storage locations under tmp_path, so tests never touch real user data."""
    return StoragePaths.under(tmp_path / "home")


@pytest.fixture
def store(storage_paths: StoragePaths) -> SpecStore:
    return SpecStore(storage_paths)


@pytest.fixture
def petstore_store(
    store: SpecStore, petstore_entry: ApiEntry, petstore_cached: CachedSpec
) -> SpecStore:
    """A store with the petstore entry registered and cached."""
    store.upsert(petstore_entry)
    store.save_cache(petstore_entry.name, petstore_cached)
    return store


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every environment-resolved location into tmp_path.

    Sets XDG_CONFIG_HOME, XDG_CACHE_HOME, and XDG_DATA_HOME to
    subdirectories of tmp_path and clears APICOMPLETE_HOME.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg-cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    monkeypatch.delenv("APICOMPLETE_HOME", raising=False)
    return tmp_path


# ---------------------------------------------------------------------------
# Network fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_get(petstore_raw: dict[str, Any]):
    """Patch ``httpx.get`` in the loader to serve the petstore document.

    The response carries a fixed ``Date`` header so cache files are
    reproducible.
    """
    response = make_response(petstore_raw, headers={"Date": "Wed, 01 May 2024 12:00:00 GMT"})
    with patch("apicomplete.parser.loader.httpx.get", return_value=response) as mocked:
        yield mocked


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Set up a quiet output manager for tests that don't care about output.

    Installs a PLAIN-format, quiet OutputManager as the global output
    and resets it after the test completes.
    """
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout/stderr and
    provides a consistent interface for invoking Typer apps in tests.
    """
    from typer.testing import CliRunner

    return CliRunner()


@pytest.fixture
def respond():
    """Factory fixture exposing :func:`make_response` to test modules."""
    return make_response
