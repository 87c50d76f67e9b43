"""Synthesise sample payloads from schemas.

:class:`ExampleSynthesizer` walks a schema (resolved or not) and builds a
JSON-compatible value of the same shape. Explicit ``example`` values always
win. Otherwise scalars get fixed literals chosen by ``format`` and by the name
of the field they belong to:

=======================================  ==========================================
Condition                                Value
=======================================  ==========================================
``format: date``                         ``"2024-01-15"``
``format: date-time``                    ``"2024-01-15T10:30:00Z"``
``format: email`` or name has ``email``  ``"user@example.com"``
name has ``name``                        ``"Sample <field name>"``
name has ``id``                          ``"123e4567-e89b-12d3-a456-426614174000"``
any other string                         ``"string"``
``integer`` / ``number`` / ``boolean``   ``0`` / ``0.0`` / ``False``
=======================================  ==========================================

Arrays always produce exactly one element. Objects keep the declaration order
of their properties.

References are followed lazily, one definition at a time, through
:meth:`Resolver.lookup <swagfluence.parser.resolver.Resolver.lookup>`. Each
hop and each level of nesting counts towards the depth bound, a reference
already being expanded on the current path yields ``None``, and a walk
expands at most a fixed number of references in total, so densely linked
definition tables produce a bounded example.

Example generation is best effort: a reference that cannot be looked up
becomes the placeholder string ``"<Name>"`` in its own position, and anything
past the depth bound or the expansion budget becomes ``None``. Nothing in this
module raises.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from swagfluence.exceptions import ResolutionError
from swagfluence.models import Schema
from swagfluence.parser.resolver import (
    DEFAULT_MAX_EXPANSIONS,
    ExpansionBudget,
    Resolver,
    ref_name,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 10

SAMPLE_DATE = "2024-01-15"
SAMPLE_DATE_TIME = "2024-01-15T10:30:00Z"
SAMPLE_EMAIL = "user@example.com"
SAMPLE_UUID = "123e4567-e89b-12d3-a456-426614174000"


class ExampleSynthesizer:
    """Builds one example value per schema.

    Args:
        resolver: Used to look up ``$ref`` targets met during the walk.
            Without one, every reference becomes its ``"<Name>"`` placeholder.
        max_depth: Nesting depth past which ``None`` is produced. Reference
            hops count as one level each.
        max_expansions: Number of references one :meth:`synthesize` call may
            expand; later ones produce ``None``.
    """

    def __init__(
        self,
        resolver: Optional[Resolver] = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_expansions: int = DEFAULT_MAX_EXPANSIONS,
    ) -> None:
        self._resolver = resolver
        self._max_depth = max_depth
        self._max_expansions = max_expansions

    def synthesize(self, schema: Optional[Schema], field_name: str = "", depth: int = 0) -> Any:
        """Return an example value for *schema*.

        Args:
            schema: The schema to exemplify, resolved or not. ``None`` yields
                ``None``.
            field_name: Name of the property the schema describes; drives the
                string heuristics. Empty for top-level schemas.
            depth: Starting nesting depth. Callers normally leave it at 0.

        Returns:
            ``None``, a bool, int, float, str, a one-element list, or a dict.
        """
        return self._example(
            schema, field_name, depth, frozenset(), ExpansionBudget(self._max_expansions)
        )

    def generate_json(self, schema: Optional[Schema]) -> str:
        """Return the example for *schema* as JSON text with 2-space indentation."""
        return json.dumps(self.synthesize(schema), indent=2, ensure_ascii=False, default=str)

    def _example(
        self,
        schema: Optional[Schema],
        field_name: str,
        depth: int,
        seen: frozenset[str],
        budget: ExpansionBudget,
    ) -> Any:
        if schema is None or depth > self._max_depth:
            return None

        if schema.has_example:
            return schema.example

        if schema.is_reference:
            return self._reference_example(schema.ref, field_name, depth, seen, budget)

        if schema.type == "array":
            return [self._example(schema.items, field_name, depth + 1, seen, budget)]

        if schema.type == "object" or schema.properties:
            return {
                name: self._example(prop, name, depth + 1, seen, budget)
                for name, prop in schema.properties.items()
            }

        if schema.type == "string":
            return string_example(field_name, schema.format)
        if schema.type == "integer":
            return 0
        if schema.type == "number":
            return 0.0
        if schema.type == "boolean":
            return False
        return None

    def _reference_example(
        self,
        ref: str,
        field_name: str,
        depth: int,
        seen: frozenset[str],
        budget: ExpansionBudget,
    ) -> Any:
        placeholder = f"<{ref_name(ref)}>"
        if self._resolver is None:
            return placeholder
        try:
            _, definition = self._resolver.lookup(ref)
        except ResolutionError as exc:
            logger.debug("Example for %s degraded to %s: %s", ref, placeholder, exc)
            return placeholder

        if ref in seen:
            logger.debug("Circular $ref %s in example truncated", ref)
            return None
        if not budget.spend():
            logger.debug("Example for %s truncated, expansion budget spent", ref)
            return None
        return self._example(definition, field_name, depth + 1, seen | {ref}, budget)


def string_example(field_name: str, fmt: Optional[str] = None) -> str:
    """Pick the sample literal for a string field.

    >>> string_example("userEmail")
    'user@example.com'
    >>> string_example("lastName")
    'Sample lastName'
    """
    lowered = field_name.lower()
    if fmt == "date":
        return SAMPLE_DATE
    if fmt == "date-time":
        return SAMPLE_DATE_TIME
    if fmt == "email" or "email" in lowered:
        return SAMPLE_EMAIL
    if "name" in lowered:
        return f"Sample {field_name}"
    if "id" in lowered:
        return SAMPLE_UUID
    return "string"


def generate_example_json(schema: Optional[Schema], resolver: Optional[Resolver] = None) -> str:
    """Shortcut for ``ExampleSynthesizer(resolver).generate_json(schema)``."""
    return ExampleSynthesizer(resolver).generate_json(schema)
