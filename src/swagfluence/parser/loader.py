"""Load Swagger/OpenAPI specifications from a URL, local file, or stdin.

This module handles all I/O for fetching raw API documents and converting
them into a :class:`~swagfluence.models.Spec`. It supports both JSON and YAML
with automatic format detection, and accepts Swagger 2.0 as well as OpenAPI
3.0.x / 3.1.x documents.

The public functions are:

* :func:`load_spec` -- Load and parse a document from any supported source.
* :func:`validate_spec_version` -- Check and return the declared version.
* :func:`parse_spec` -- Validate the raw dict into a frozen :class:`Spec`.
* :func:`load_and_parse` -- All three in sequence.

``$ref`` pointers are left untouched here; they are resolved on demand by
:class:`~swagfluence.parser.resolver.Resolver`.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml
from pydantic import ValidationError

from swagfluence.exceptions import SpecParseError
from swagfluence.models import Spec


def load_spec(source: str, timeout: float = 30.0) -> dict[str, Any]:
    """Load an API spec from URL, file path, or stdin ('-').

    Supports JSON and YAML formats.
    Auto-detects format from content/extension.

    Args:
        source: A URL (http/https), file path, or '-' for stdin.
        timeout: Timeout in seconds for URL sources.

    Returns:
        The parsed spec as a dictionary.

    Raises:
        SpecParseError: If the source cannot be loaded or parsed.
    """
    if source == "-":
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source, timeout)
    else:
        return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    """Read spec from stdin.

    Raises:
        SpecParseError: If stdin is empty or content cannot be parsed.
    """
    try:
        content = sys.stdin.read()
    except Exception as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SpecParseError("No input received from stdin")

    return _parse_content(content, hint="stdin")


def _load_from_url(url: str, timeout: float = 30.0) -> dict[str, Any]:
    """Fetch spec from URL. Supports JSON and YAML responses.

    Raises:
        SpecParseError: If the URL cannot be fetched or content cannot be parsed.
    """
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch spec from {url}: {exc}") from exc

    content = response.text
    content_type = response.headers.get("content-type", "")
    hint = ""
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load spec from local file.

    Supports .json, .yaml, and .yml extensions. Falls back to content-based
    detection if the extension is not recognized.

    Raises:
        SpecParseError: If the file cannot be read or content cannot be parsed.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"Spec file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read spec file {path}: {exc}") from exc

    if not content.strip():
        raise SpecParseError(f"Spec file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is 'yaml'), then falls back to YAML.
    Valid JSON is also valid YAML, but JSON parsing is stricter and faster.

    Raises:
        SpecParseError: If the content cannot be parsed as either format.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
            if not isinstance(result, dict):
                raise SpecParseError(
                    "Spec must be a JSON/YAML object (got "
                    f"{type(result).__name__})"
                )
            return result
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise SpecParseError(f"Invalid JSON: {exc}") from exc

    try:
        result = yaml.safe_load(content)
        if not isinstance(result, dict):
            raise SpecParseError(
                "Spec must be a JSON/YAML object (got "
                f"{type(result).__name__ if result is not None else 'empty document'})"
            )
        return result
    except yaml.YAMLError as exc:
        yaml_error = exc

    msg = "Failed to parse spec as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise SpecParseError(msg)


def validate_spec_version(spec: dict[str, Any]) -> str:
    """Validate and return the Swagger/OpenAPI version string.

    Accepts Swagger 2.0 and OpenAPI 3.x.

    Args:
        spec: The parsed spec dictionary.

    Returns:
        The version string (e.g. ``'2.0'``, ``'3.0.3'``, ``'3.1.0'``).

    Raises:
        SpecParseError: If the version is missing or unsupported.
    """
    if "swagger" in spec:
        swagger_ver = str(spec["swagger"])
        if swagger_ver.startswith("2."):
            return swagger_ver
        raise SpecParseError(
            f"Unsupported Swagger version: {swagger_ver}. Only Swagger 2.0 is supported."
        )

    openapi_version = spec.get("openapi")
    if openapi_version is None:
        raise SpecParseError(
            "Missing 'swagger' or 'openapi' field. Is this a Swagger/OpenAPI document?"
        )

    version_str = str(openapi_version)
    if version_str.startswith("3."):
        return version_str

    raise SpecParseError(
        f"Unsupported OpenAPI version: {version_str}. "
        "Only Swagger 2.0 and OpenAPI 3.x are supported."
    )


def parse_spec(raw: dict[str, Any]) -> Spec:
    """Validate a raw spec dict into a frozen :class:`~swagfluence.models.Spec`.

    Raises:
        SpecParseError: If the document does not match the expected shape
            (e.g. ``paths`` is not an object).
    """
    try:
        return Spec.model_validate(raw)
    except ValidationError as exc:
        raise SpecParseError(f"Invalid spec document: {exc}") from exc


def load_and_parse(source: str, timeout: float = 30.0) -> Spec:
    """Load, version-check, and validate a spec in one call."""
    raw = load_spec(source, timeout=timeout)
    validate_spec_version(raw)
    return parse_spec(raw)
