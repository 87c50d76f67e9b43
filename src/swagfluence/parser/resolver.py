"""Resolve ``$ref`` pointers in schemas against a spec's definition tables.

Swagger 2.0 keeps reusable schemas in a flat ``definitions`` table
(``#/definitions/Pet``); OpenAPI 3.x nests them under ``components``
(``#/components/schemas/Pet``). :class:`Resolver` accepts both forms through
one lookup function that picks the table from the reference prefix. Any other
reference form raises :class:`~swagfluence.exceptions.UnsupportedReferenceFormat`.

Resolution is on demand and per schema site: nothing is dereferenced when the
document is loaded, and the :class:`~swagfluence.models.Spec` is never
mutated. Expanded nodes are fresh copies, so one ``Spec`` can back any number
of resolvers running concurrently.

Cycles (``Node.children -> Node``) are broken with a set of the reference
strings already being expanded on the current path, plus a bound on the
number of reference hops. Densely linked tables, where every definition
points at several others, are acyclic but still grow exponentially with the
hop bound, so each resolve call also has a budget of reference expansions.
Where any guard trips, the reference is replaced by a kind-less placeholder
titled with the definition name, so the output never contains a ``$ref``.

Example::

    resolver = Resolver(spec)
    user = resolver.resolve(Schema(ref="#/components/schemas/User"))
    user.properties["address"].properties  # expanded Address fields
"""

from __future__ import annotations

import logging
from typing import Optional

from swagfluence.exceptions import (
    DefinitionNotFound,
    ItemsResolutionFailed,
    PropertyResolutionFailed,
    ResolutionError,
    UnsupportedReferenceFormat,
)
from swagfluence.models import Schema, Spec

logger = logging.getLogger(__name__)

COMPONENTS_PREFIX = "#/components/schemas/"
DEFINITIONS_PREFIX = "#/definitions/"

DEFAULT_MAX_DEPTH = 10
"""Maximum number of chained ``$ref`` hops expanded below one resolve call."""

DEFAULT_MAX_EXPANSIONS = 200
"""Maximum number of ``$ref`` expansions performed by one resolve call."""


def ref_name(ref: str) -> str:
    """Return the decoded last path segment of a reference string.

    ``"#/components/schemas/Pet"`` becomes ``"Pet"`` and
    ``"#/definitions/a~1b"`` becomes ``"a/b"``.
    """
    return _unescape(ref.rsplit("/", 1)[-1])


def _unescape(segment: str) -> str:
    """Decode JSON-pointer escapes, ``~1`` before ``~0`` as RFC 6901 requires."""
    return segment.replace("~1", "/").replace("~0", "~")


class ExpansionBudget:
    """Counts the reference expansions left to one walk over a schema.

    Shared by every branch of the walk, so the total work stays bounded no
    matter how many definitions each definition links to.
    """

    __slots__ = ("remaining",)

    def __init__(self, remaining: int = DEFAULT_MAX_EXPANSIONS) -> None:
        self.remaining = remaining

    def spend(self) -> bool:
        """Take one expansion; ``False`` once the budget is used up."""
        if self.remaining <= 0:
            return False
        self.remaining -= 1
        return True


class Resolver:
    """Dereferences schemas against one read-only :class:`~swagfluence.models.Spec`.

    Args:
        spec: The loaded spec whose definition tables are used for lookups.
        max_depth: Maximum number of reference hops followed from the schema
            passed to :meth:`resolve`. Deeper references are truncated.
        max_expansions: Maximum number of references expanded by one
            :meth:`resolve` call, counted across all branches. References met
            once it is spent are truncated.
    """

    def __init__(
        self,
        spec: Spec,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_expansions: int = DEFAULT_MAX_EXPANSIONS,
    ) -> None:
        self._spec = spec
        self._max_depth = max_depth
        self._max_expansions = max_expansions

    @property
    def spec(self) -> Spec:
        return self._spec

    def resolve(self, schema: Optional[Schema]) -> Optional[Schema]:
        """Return a reference-free copy of *schema*.

        A reference node resolves to its target definition's shape (kind,
        properties, required list, element type and the definition's own
        annotations). Annotations written next to the ``$ref`` at the
        referencing site are dropped. Object properties and array elements
        are resolved recursively, in declaration order, until the hop bound
        or the expansion budget is reached.

        Args:
            schema: The schema to resolve. ``None`` is passed through.

        Returns:
            The resolved schema, or ``None`` when *schema* is ``None``.

        Raises:
            UnsupportedReferenceFormat: A ``$ref`` has neither supported prefix.
            DefinitionNotFound: A ``$ref`` names a missing definition.
            PropertyResolutionFailed: A property failed; wraps the cause.
            ItemsResolutionFailed: An array element type failed; wraps the cause.
        """
        if schema is None:
            return None
        return self._resolve(schema, frozenset(), 0, ExpansionBudget(self._max_expansions))

    def lookup(self, ref: str) -> tuple[str, Schema]:
        """Find the definition a reference string points to.

        Only this one hop is taken; references inside the returned definition
        are left as they are.

        Args:
            ref: A ``#/components/schemas/<Name>`` or ``#/definitions/<Name>``
                string. ``~1`` and ``~0`` escapes in the name are decoded.

        Returns:
            A ``(name, definition)`` tuple.

        Raises:
            UnsupportedReferenceFormat: If *ref* has neither prefix.
            DefinitionNotFound: If the applicable table has no such name.
        """
        if ref.startswith(COMPONENTS_PREFIX):
            name = ref[len(COMPONENTS_PREFIX):]
            table = self._spec.components.schemas if self._spec.components else {}
        elif ref.startswith(DEFINITIONS_PREFIX):
            name = ref[len(DEFINITIONS_PREFIX):]
            table = self._spec.definitions
        else:
            raise UnsupportedReferenceFormat(ref)

        name = _unescape(name)
        definition = table.get(name)
        if definition is None:
            raise DefinitionNotFound(ref, name)
        return name, definition

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _resolve(
        self, schema: Schema, seen: frozenset[str], hops: int, budget: ExpansionBudget
    ) -> Schema:
        if schema.is_reference:
            return self._expand_reference(schema.ref, seen, hops, budget)

        updates: dict[str, object] = {}
        if schema.properties:
            properties: dict[str, Schema] = {}
            for field_name, prop in schema.properties.items():
                try:
                    properties[field_name] = self._resolve(prop, seen, hops, budget)
                except ResolutionError as exc:
                    raise PropertyResolutionFailed(field_name, exc) from exc
            updates["properties"] = properties

        if schema.items is not None:
            try:
                updates["items"] = self._resolve(schema.items, seen, hops, budget)
            except ResolutionError as exc:
                raise ItemsResolutionFailed(exc) from exc

        return schema.model_copy(update=updates) if updates else schema

    def _expand_reference(
        self, ref: str, seen: frozenset[str], hops: int, budget: ExpansionBudget
    ) -> Schema:
        name, definition = self.lookup(ref)

        if ref in seen:
            logger.debug("Circular $ref %s truncated", ref)
            return Schema(title=name)
        if hops >= self._max_depth:
            logger.debug("$ref %s truncated after %d hops", ref, hops)
            return Schema(title=name)
        if not budget.spend():
            logger.debug("$ref %s truncated, expansion budget spent", ref)
            return Schema(title=name)

        expanded = self._resolve(definition, seen | {ref}, hops + 1, budget)
        if expanded.title is None:
            expanded = expanded.model_copy(update={"title": name})
        return expanded
