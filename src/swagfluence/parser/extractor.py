"""Flatten a spec's ``paths`` object into documentable endpoints.

Each path + HTTP method pair becomes one :class:`~swagfluence.models.Endpoint`
and therefore one documentation page. Endpoints keep the order in which the
document declares them.

Page titles are derived by :func:`generate_page_title` with this precedence:

1. The operation ``summary``, verbatim.
2. The ``operationId`` split into words (``getAllUsers`` -> ``Get All Users``).
3. The upper-cased method followed by the title-cased path segments
   (``GET /users/{id}/posts`` -> ``GET Users Id Posts``).
"""

from __future__ import annotations

import re

from swagfluence.models import Endpoint, HTTPMethod, Operation, Spec

_HTTP_METHODS = frozenset(m.value for m in HTTPMethod)
_WORD_START = re.compile(r"\b[a-z]")
_CAMEL_BOUNDARY = re.compile(r"(?<=.)(?=[A-Z])")


def extract_endpoints(spec: Spec) -> list[Endpoint]:
    """Return every documentable endpoint declared in *spec*.

    Keys of a path item that are not HTTP methods (vendor extensions, for
    instance) are skipped. Method keys are matched case-insensitively.

    Args:
        spec: The loaded spec.

    Returns:
        Endpoints in document order.
    """
    endpoints: list[Endpoint] = []
    for path, path_item in spec.paths.items():
        for method, operation in path_item.items():
            method_lower = method.lower()
            if method_lower not in _HTTP_METHODS:
                continue
            endpoints.append(
                Endpoint(
                    path=path,
                    method=HTTPMethod(method_lower),
                    operation=operation,
                    title=generate_page_title(path, method_lower, operation),
                )
            )
    return endpoints


def generate_page_title(path: str, method: str, operation: Operation) -> str:
    """Derive a page title for an endpoint.

    Example::

        >>> generate_page_title("/users/{id}/posts", "get", Operation())
        'GET Users Id Posts'
    """
    if operation.summary:
        return operation.summary
    if operation.operation_id:
        return clean_operation_id(operation.operation_id)
    return title_from_path(path, method)


def clean_operation_id(operation_id: str) -> str:
    """Turn an ``operationId`` into a readable, title-cased phrase.

    Underscores become spaces and a space is inserted before every upper-case
    letter, so both ``getAllUsers`` and ``get_all_users`` become
    ``Get All Users``.
    """
    spaced = _CAMEL_BOUNDARY.sub(" ", operation_id.replace("_", " "))
    return _title_case(spaced.lower())


def title_from_path(path: str, method: str) -> str:
    """Build ``"<METHOD> <Segments>"`` from a path, or ``"<METHOD> Root"`` for ``/``."""
    clean = path.strip("/").replace("{", "").replace("}", "")
    parts = [_title_case(part) for part in clean.split("/") if part]
    verb = method.upper()
    if not parts:
        return f"{verb} Root"
    return f"{verb} {' '.join(parts)}"


def _title_case(text: str) -> str:
    return _WORD_START.sub(lambda m: m.group(0).upper(), text)
