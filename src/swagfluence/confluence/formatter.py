"""Render endpoint pages in Confluence storage format.

Pages are rendered from Jinja2 templates in ``confluence/templates/``. This
module only assembles the template context; all markup lives in the
templates and the shared ``_macros.xml.j2`` file.

An endpoint page contains, in order:

1. The method status badge and path.
2. Description, operation ID, tag badges, consumes/produces.
3. The request body (OpenAPI ``requestBody`` or a Swagger ``in: body``
   parameter) as a property table followed by an example JSON code macro.
4. The parameters table.
5. The responses table.

A request body whose schema cannot be resolved is rendered as
``Schema unavailable: <reason>``; the rest of the page is unaffected.

Example::

    formatter = PageFormatter(spec)
    for endpoint in extract_endpoints(spec):
        markup = formatter.format_endpoint_page(endpoint)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from swagfluence.example import ExampleSynthesizer
from swagfluence.exceptions import ResolutionError
from swagfluence.models import Endpoint, Parameter, Schema, Spec
from swagfluence.parser.resolver import Resolver, ref_name

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``confluence/templates/``)."""

METHOD_COLOURS: dict[str, str] = {
    "GET": "Blue",
    "POST": "Green",
    "PUT": "Yellow",
    "DELETE": "Red",
    "PATCH": "Purple",
}
DEFAULT_COLOUR = "Grey"


def _create_jinja_env() -> Environment:
    """Create the Jinja2 environment for page templates.

    ``.xml.j2`` templates are autoescaped; descriptions from the spec are
    treated as text, not markup.
    """
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(enabled_extensions=("xml.j2",)),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["method_colour"] = method_colour
    env.filters["cdata"] = _cdata_safe
    return env


_ENV: Optional[Environment] = None


def _get_env() -> Environment:
    global _ENV
    if _ENV is None:
        _ENV = _create_jinja_env()
    return _ENV


def render_parent_page(api_title: str) -> str:
    """Render the index page that lists every endpoint page as a child."""
    return _get_env().get_template("parent.xml.j2").render(title=api_title)


class PageFormatter:
    """Renders Confluence storage markup for the endpoints of one spec.

    Each request-body schema is resolved once per page. The resolved tree
    feeds the property table; the example is synthesised from the original
    schema, following references lazily, and is omitted when resolution
    failed.

    Args:
        spec: The loaded spec.
        resolver: Resolver to use for property tables and examples. Defaults
            to a :class:`~swagfluence.parser.resolver.Resolver` over *spec*.
    """

    def __init__(self, spec: Spec, resolver: Optional[Resolver] = None) -> None:
        self._resolver = resolver or Resolver(spec)
        self._synthesizer = ExampleSynthesizer(self._resolver)
        self._env = _get_env()

    def format_endpoint_page(self, endpoint: Endpoint) -> str:
        """Return the storage-format body of *endpoint*'s page."""
        op = endpoint.operation
        context = {
            "method": endpoint.method.value.upper(),
            "path": endpoint.path,
            "operation": op,
            "request_body": self._request_body_context(endpoint),
            "parameters": [
                self._parameter_context(p) for p in op.parameters if not p.is_body
            ],
            "responses": [
                {
                    "status": status,
                    "description": response.description or "-",
                    "schema": type_label(response.primary_schema()),
                }
                for status, response in op.responses.items()
            ],
        }
        return self._env.get_template("endpoint.xml.j2").render(**context)

    def format_parent_page(self, api_title: str) -> str:
        """Return the storage-format body of the API index page."""
        return render_parent_page(api_title)

    # ------------------------------------------------------------------ #
    # Context builders
    # ------------------------------------------------------------------ #

    def _request_body_context(self, endpoint: Endpoint) -> Optional[dict[str, Any]]:
        op = endpoint.operation
        body_param = op.body_parameter()

        if op.request_body is not None:
            rb = op.request_body
            sources = [(ct, m.schema_) for ct, m in rb.content.items()]
            description, required = rb.description, rb.required
        elif body_param is not None:
            sources = [(None, body_param.schema_)] if body_param.schema_ is not None else []
            description, required = body_param.description, body_param.required
        else:
            return None

        media = []
        example: Optional[str] = None
        example_taken = False
        for content_type, schema in sources:
            resolved, error = self._resolve(schema)
            media.append(
                {"content_type": content_type, "schema": _schema_context(schema, resolved, error)}
            )
            # Only the first schema-bearing media type supplies the example.
            if schema is not None and not example_taken:
                example_taken = True
                if error is None:
                    example = self._synthesizer.generate_json(schema)

        return {
            "description": description,
            "required": required,
            "media": media,
            "example": example,
        }

    def _resolve(self, schema: Optional[Schema]) -> tuple[Optional[Schema], Optional[str]]:
        """Resolve one media schema; returns ``(resolved, None)`` or ``(None, reason)``."""
        try:
            return self._resolver.resolve(schema), None
        except ResolutionError as exc:
            logger.debug("Schema table skipped: %s", exc)
            return None, str(exc)

    @staticmethod
    def _parameter_context(param: Parameter) -> dict[str, Any]:
        return {
            "name": param.name,
            "required": param.required,
            "description": param.description or "No description provided",
            "type": parameter_type(param),
            "location": param.location,
        }


# ------------------------------------------------------------------ #
# Labels and helpers
# ------------------------------------------------------------------ #


def method_colour(method: str) -> str:
    """Return the status-macro colour for an HTTP method."""
    return METHOD_COLOURS.get(method.upper(), DEFAULT_COLOUR)


def type_label(schema: Optional[Schema]) -> str:
    """Describe a schema in one short phrase for a table cell.

    References show the definition name, expanded definitions their title,
    scalars their type and format, and arrays their element type in brackets
    (``array[Tag]``). Returns ``"-"`` when nothing is known.
    """
    if schema is None:
        return "-"
    if schema.is_reference:
        return ref_name(schema.ref)
    if schema.type in (None, "object") and schema.title:
        return schema.title

    label = schema.type or ""
    if schema.format:
        label += f" ({schema.format})"
    if schema.type == "array" and schema.items is not None:
        item = type_label(schema.items)
        if item != "-":
            label += f"[{item}]"
    return label or "-"


def parameter_type(param: Parameter) -> str:
    """Return the type label of a non-body parameter (inline or via ``schema``)."""
    if param.type:
        return f"{param.type} ({param.format})" if param.format else param.type
    if param.schema_ is not None:
        label = type_label(param.schema_)
        return "" if label == "-" else label
    return ""


def constraints(schema: Schema, required: bool) -> list[str]:
    """Return the constraint lines shown for one property.

    Lines are plain text; the template decides how to emphasise them.
    """
    lines: list[str] = []
    if required:
        lines.append("Required")
    if schema.min_length and schema.max_length:
        lines.append(f"Length: {schema.min_length}-{schema.max_length}")
    elif schema.min_length:
        lines.append(f"Min length: {schema.min_length}")
    elif schema.max_length:
        lines.append(f"Max length: {schema.max_length}")
    if schema.minimum is not None:
        lines.append(f"Minimum: {_number(schema.minimum)}")
    if schema.maximum is not None:
        lines.append(f"Maximum: {_number(schema.maximum)}")
    return lines


def _schema_context(
    schema: Optional[Schema], resolved: Optional[Schema], error: Optional[str]
) -> dict[str, Any]:
    """Build the property-table context from an already resolved media schema."""
    if error is not None:
        return {"error": error}

    context: dict[str, Any] = {"error": None, "array_items": None}
    table_schema = resolved
    if resolved is not None and resolved.type == "array":
        context["array_items"] = type_label(schema.items if schema and schema.items else resolved.items)
        table_schema = resolved.items

    context["rows"] = _property_rows(table_schema)
    context["has_required"] = bool(table_schema and table_schema.required)
    return context


def _property_rows(schema: Optional[Schema]) -> list[dict[str, Any]]:
    if schema is None:
        return []
    rows = []
    for name, prop in schema.properties.items():
        is_required = schema.is_required(name)
        rows.append(
            {
                "name": name,
                "required": is_required,
                "type": type_label(prop),
                "description": prop.description or "-",
                "constraints": constraints(prop, is_required),
                "pattern": prop.pattern,
                "example": _example_cell(prop),
            }
        )
    return rows


def _example_cell(prop: Schema) -> Optional[str]:
    if not prop.has_example:
        return None
    if isinstance(prop.example, str):
        return prop.example
    return json.dumps(prop.example, ensure_ascii=False, default=str)


def _number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _cdata_safe(text: str) -> str:
    """Split any ``]]>`` so *text* can sit inside a CDATA section."""
    return text.replace("]]>", "]]]]><![CDATA[>")
