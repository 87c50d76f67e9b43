"""Spec parser -- load documents, resolve ``$ref`` pointers, and extract endpoints.

This sub-package turns a raw Swagger 2.0 / OpenAPI 3.x document (JSON or
YAML, local file or remote URL) into a frozen :class:`~swagfluence.models.Spec`
and the list of endpoints to document.

Typical usage::

    from swagfluence.parser import Resolver, extract_endpoints, load_and_parse

    spec = load_and_parse("https://petstore.swagger.io/v2/swagger.json")
    resolver = Resolver(spec)
    for endpoint in extract_endpoints(spec):
        ...

Sub-modules:

* :mod:`~swagfluence.parser.loader` -- I/O layer (URL, file, stdin) plus
  format detection and version validation.
* :mod:`~swagfluence.parser.resolver` -- On-demand ``$ref`` resolution with
  cycle and depth guards.
* :mod:`~swagfluence.parser.extractor` -- Endpoint flattening and page titles.
"""

from swagfluence.parser.extractor import extract_endpoints, generate_page_title
from swagfluence.parser.loader import (
    load_and_parse,
    load_spec,
    parse_spec,
    validate_spec_version,
)
from swagfluence.parser.resolver import Resolver, ref_name

__all__ = [
    "load_spec",
    "load_and_parse",
    "parse_spec",
    "validate_spec_version",
    "extract_endpoints",
    "generate_page_title",
    "Resolver",
    "ref_name",
]
