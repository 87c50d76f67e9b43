"""Configuration management with XDG paths and precedence resolution.

Two concerns live here:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.swagfluence/`` on macOS and Windows. Only the data directory is used
  today, for crash logs (see :func:`get_data_dir`).
* **Confluence settings** -- :func:`load_confluence_config` merges CLI
  overrides, ``CONFLUENCE_*`` environment variables, and the project-local
  ``./swagfluence.json`` file into one
  :class:`~swagfluence.models.ConfluenceConfig`.

A project file looks like::

    {
      "confluence": {
        "base_url": "https://example.atlassian.net/wiki",
        "space_key": "API",
        "parent_page_id": "12345"
      }
    }

Secrets (``api_token``) are better left to the environment.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from swagfluence.exceptions import ConfigError
from swagfluence.models import ConfluenceConfig

_APP_NAME = "swagfluence"
_PROJECT_CONFIG_FILENAME = "swagfluence.json"

ENV_VARS: dict[str, str] = {
    "base_url": "CONFLUENCE_BASE_URL",
    "username": "CONFLUENCE_USERNAME",
    "api_token": "CONFLUENCE_API_TOKEN",
    "space_key": "CONFLUENCE_SPACE_KEY",
    "parent_page_id": "CONFLUENCE_PARENT_PAGE_ID",
    "timeout": "CONFLUENCE_TIMEOUT",
}
"""Mapping of :class:`ConfluenceConfig` field names to environment variables."""


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/swagfluence/`` (default
    ``~/.local/share/swagfluence/``). On macOS/Windows: ``~/.swagfluence/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load the ``confluence`` section of ``./swagfluence.json``.

    Returns:
        The section as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file contains invalid JSON or the section is not
            an object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    section = data.get("confluence", {})
    if not isinstance(section, dict):
        raise ConfigError(f"Invalid project config at {path}: 'confluence' must be an object")
    return section


def _env_values() -> dict[str, str]:
    values: dict[str, str] = {}
    for field_name, env_var in ENV_VARS.items():
        value = os.environ.get(env_var)
        if value:
            values[field_name] = value
    return values


# --- Precedence resolution ---


def load_confluence_config(**overrides: Any) -> ConfluenceConfig:
    """Resolve the Confluence settings for this run.

    Precedence (high to low):
        1. Keyword overrides (CLI flags). ``None`` values are ignored.
        2. Environment variables (see :data:`ENV_VARS`).
        3. Project config (``./swagfluence.json``, ``confluence`` object).
        4. Defaults.

    Args:
        **overrides: Field values of
            :class:`~swagfluence.models.ConfluenceConfig`.

    Returns:
        The merged configuration.

    Raises:
        ConfigError: On an unreadable project file, an unknown override, or
            a value that fails validation (a non-numeric timeout, say).
    """
    unknown = set(overrides) - set(ENV_VARS)
    if unknown:
        raise ConfigError(f"Unknown Confluence setting(s): {', '.join(sorted(unknown))}")

    merged: dict[str, Any] = {}
    # 3. Project-local config
    project = load_project_config()
    if project:
        merged.update({k: v for k, v in project.items() if k in ENV_VARS})
    # 2. Environment
    merged.update(_env_values())
    # 1. CLI overrides
    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return ConfluenceConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid Confluence configuration: {exc}") from exc
