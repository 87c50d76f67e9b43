"""Shared test fixtures for swagfluence.

Provides reusable fixtures for loading spec fixtures, isolating the
configuration environment, managing output state, and running CLI commands.
These fixtures are automatically discovered by pytest and available to all
test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from swagfluence.config import ENV_VARS
from swagfluence.models import Spec
from swagfluence.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    Resetting forces a fresh manager to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Raw spec fixtures (plain dicts loaded from JSON files)
# ---------------------------------------------------------------------------


@pytest.fixture
def swagger2_raw() -> dict[str, Any]:
    """Load the raw Swagger 2.0 petstore dict."""
    with open(FIXTURES_DIR / "petstore_swagger2.json") as f:
        return json.load(f)


@pytest.fixture
def openapi3_raw() -> dict[str, Any]:
    """Load the raw OpenAPI 3.0 user-service dict."""
    with open(FIXTURES_DIR / "users_openapi3.json") as f:
        return json.load(f)


# ---------------------------------------------------------------------------
# Parsed spec fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def swagger2_spec(swagger2_raw: dict[str, Any]) -> Spec:
    """Parsed Swagger 2.0 petstore."""
    return Spec.model_validate(swagger2_raw)


@pytest.fixture
def openapi3_spec(openapi3_raw: dict[str, Any]) -> Spec:
    """Parsed OpenAPI 3.0 user service (includes cyclic definitions)."""
    return Spec.model_validate(openapi3_raw)


@pytest.fixture
def swagger2_path() -> Path:
    return FIXTURES_DIR / "petstore_swagger2.json"


@pytest.fixture
def openapi3_path() -> Path:
    return FIXTURES_DIR / "users_openapi3.json"


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_DATA_HOME at tmp_path, clears every CONFLUENCE_* variable,
    and changes the working directory to tmp_path so that no project file
    leaks in.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ENV_VARS.values():
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a PLAIN-format, colourless OutputManager that keeps diagnostics."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True)
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
