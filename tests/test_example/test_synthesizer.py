"""Tests for swagfluence.example.synthesizer."""

from __future__ import annotations

import json

import pytest

from swagfluence.example import ExampleSynthesizer, generate_example_json, string_example
from swagfluence.example.synthesizer import SAMPLE_DATE, SAMPLE_DATE_TIME, SAMPLE_EMAIL, SAMPLE_UUID
from swagfluence.models import Schema, Spec
from swagfluence.parser.resolver import DEFAULT_MAX_EXPANSIONS, Resolver


def _spec(schemas: dict) -> Spec:
    return Spec.model_validate({"openapi": "3.0.3", "components": {"schemas": schemas}})


def _ref(name: str) -> Schema:
    return Schema(ref=f"#/components/schemas/{name}")


def _count_values(value: object) -> int:
    if isinstance(value, dict):
        return 1 + sum(_count_values(v) for v in value.values())
    if isinstance(value, list):
        return 1 + sum(_count_values(v) for v in value)
    return 1


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


class TestScalars:
    @pytest.mark.parametrize(
        ("schema_type", "expected"),
        [("integer", 0), ("number", 0.0), ("boolean", False)],
    )
    def test_fixed_literals(self, schema_type: str, expected: object) -> None:
        value = ExampleSynthesizer().synthesize(Schema(type=schema_type))
        assert value == expected
        assert type(value) is type(expected)

    def test_unknown_kind_is_none(self) -> None:
        assert ExampleSynthesizer().synthesize(Schema()) is None

    def test_none_schema_is_none(self) -> None:
        assert ExampleSynthesizer().synthesize(None) is None

    def test_plain_string(self) -> None:
        assert ExampleSynthesizer().synthesize(Schema(type="string"), "status") == "string"


class TestStringHeuristics:
    def test_date_format(self) -> None:
        schema = Schema(type="string", format="date")
        assert ExampleSynthesizer().synthesize(schema, "birthday") == SAMPLE_DATE == "2024-01-15"

    def test_date_time_format(self) -> None:
        schema = Schema(type="string", format="date-time")
        assert ExampleSynthesizer().synthesize(schema, "when") == SAMPLE_DATE_TIME

    def test_email_field_name(self) -> None:
        assert ExampleSynthesizer().synthesize(Schema(type="string"), "userEmail") == SAMPLE_EMAIL

    def test_email_format(self) -> None:
        schema = Schema(type="string", format="email")
        assert ExampleSynthesizer().synthesize(schema, "contact") == "user@example.com"

    def test_format_beats_name(self) -> None:
        schema = Schema(type="string", format="date")
        assert ExampleSynthesizer().synthesize(schema, "emailDate") == SAMPLE_DATE

    def test_name_field(self) -> None:
        assert string_example("lastName") == "Sample lastName"

    def test_id_field(self) -> None:
        assert string_example("orderId") == SAMPLE_UUID

    def test_email_beats_name(self) -> None:
        assert string_example("emailName") == SAMPLE_EMAIL

    def test_name_beats_id(self) -> None:
        # "identifierName" contains both; name is checked first.
        assert string_example("identifierName") == "Sample identifierName"

    def test_empty_field_name(self) -> None:
        assert string_example("") == "string"


# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------


class TestArrays:
    def test_exactly_one_element(self) -> None:
        schema = Schema(type="array", items=Schema(type="integer"))
        assert ExampleSynthesizer().synthesize(schema) == [0]

    def test_element_receives_field_name(self) -> None:
        schema = Schema(type="array", items=Schema(type="string"))
        assert ExampleSynthesizer().synthesize(schema, "emails") == [SAMPLE_EMAIL]

    def test_missing_items(self) -> None:
        assert ExampleSynthesizer().synthesize(Schema(type="array")) == [None]

    def test_nested_arrays(self) -> None:
        schema = Schema(type="array", items=Schema(type="array", items=Schema(type="boolean")))
        assert ExampleSynthesizer().synthesize(schema) == [[False]]


class TestObjects:
    def test_declaration_order(self) -> None:
        schema = Schema.model_validate(
            {
                "type": "object",
                "properties": {
                    "zeta": {"type": "integer"},
                    "alpha": {"type": "integer"},
                    "mid": {"type": "integer"},
                },
            }
        )
        value = ExampleSynthesizer().synthesize(schema)
        assert list(value) == ["zeta", "alpha", "mid"]
        assert generate_example_json(schema).index('"zeta"') < generate_example_json(schema).index('"alpha"')

    def test_object_without_properties(self) -> None:
        assert ExampleSynthesizer().synthesize(Schema(type="object")) == {}

    def test_properties_without_type(self) -> None:
        schema = Schema(properties={"count": Schema(type="integer")})
        assert ExampleSynthesizer().synthesize(schema) == {"count": 0}


# ---------------------------------------------------------------------------
# Explicit examples
# ---------------------------------------------------------------------------


class TestExplicitExample:
    @pytest.mark.parametrize("example", ["doggie", 7, {"nested": [1, 2]}, [1, 2, 3], False])
    def test_returned_verbatim(self, example: object) -> None:
        schema = Schema.model_validate({"type": "string", "example": example})
        assert ExampleSynthesizer().synthesize(schema, "name") == example

    def test_explicit_null(self) -> None:
        schema = Schema.model_validate({"type": "integer", "example": None})
        assert ExampleSynthesizer().synthesize(schema) is None

    def test_example_beats_reference(self) -> None:
        schema = Schema.model_validate({"$ref": "#/components/schemas/Missing", "example": "x"})
        assert ExampleSynthesizer(Resolver(_spec({}))).synthesize(schema) == "x"

    def test_property_example_inside_object(self, swagger2_spec: Spec) -> None:
        synthesizer = ExampleSynthesizer(Resolver(swagger2_spec))
        value = synthesizer.synthesize(Schema(ref="#/definitions/Pet"))
        assert value["name"] == "doggie"


# ---------------------------------------------------------------------------
# References
# ---------------------------------------------------------------------------


class TestReferences:
    def test_round_trip_through_resolver(self) -> None:
        spec = _spec(
            {
                "D": {
                    "type": "object",
                    "properties": {"id": {"type": "integer"}, "name": {"type": "string"}},
                }
            }
        )
        resolver = Resolver(spec)
        resolved = resolver.resolve(_ref("D"))
        assert ExampleSynthesizer(resolver).synthesize(resolved) == {"id": 0, "name": "Sample name"}

    def test_unresolved_reference_is_followed(self, openapi3_spec: Spec) -> None:
        value = ExampleSynthesizer(Resolver(openapi3_spec)).synthesize(_ref("User"))
        assert value == {
            "id": SAMPLE_UUID,
            "email": SAMPLE_EMAIL,
            "firstName": "Sample firstName",
            "createdAt": SAMPLE_DATE_TIME,
            "age": 0,
            "score": 0.0,
            "active": False,
            "address": {"street": "string", "city": "string"},
            "nicknames": ["Sample nicknames"],
        }

    def test_missing_definition_gives_placeholder(self) -> None:
        synthesizer = ExampleSynthesizer(Resolver(_spec({})))
        assert synthesizer.synthesize(_ref("Ghost")) == "<Ghost>"

    def test_bad_reference_format_gives_placeholder(self) -> None:
        synthesizer = ExampleSynthesizer(Resolver(_spec({})))
        assert synthesizer.synthesize(Schema(ref="http://x/y.json#/Remote")) == "<Remote>"

    def test_no_resolver_gives_placeholder(self) -> None:
        assert ExampleSynthesizer().synthesize(_ref("Pet")) == "<Pet>"

    def test_placeholder_decodes_escaped_name(self) -> None:
        synthesizer = ExampleSynthesizer(Resolver(_spec({})))
        assert synthesizer.synthesize(Schema(ref="#/definitions/a~1b")) == "<a/b>"

    def test_broken_property_inside_reference_degrades_locally(self) -> None:
        spec = _spec(
            {
                "Order": {
                    "type": "object",
                    "properties": {
                        "id": {"type": "integer"},
                        "item": {"$ref": "#/components/schemas/Nope"},
                    },
                }
            }
        )
        value = ExampleSynthesizer(Resolver(spec)).synthesize(_ref("Order"))
        assert value == {"id": 0, "item": "<Nope>"}

    def test_broken_property_degrades_locally_without_resolve(self) -> None:
        schema = Schema(
            type="object",
            properties={"ok": Schema(type="integer"), "bad": _ref("Nope")},
        )
        value = ExampleSynthesizer(Resolver(_spec({}))).synthesize(schema)
        assert value == {"ok": 0, "bad": "<Nope>"}


# ---------------------------------------------------------------------------
# Termination
# ---------------------------------------------------------------------------


class TestTermination:
    def test_self_reference(self, openapi3_spec: Spec) -> None:
        value = ExampleSynthesizer(Resolver(openapi3_spec)).synthesize(_ref("TreeNode"))
        assert value == {"value": "string", "children": [None]}

    def test_mutual_reference(self, openapi3_spec: Spec) -> None:
        value = ExampleSynthesizer(Resolver(openapi3_spec)).synthesize(_ref("A"))
        assert value == {"b": {"a": None}}

    def test_depth_guard(self) -> None:
        schema = Schema(type="integer")
        for _ in range(15):
            schema = Schema(type="array", items=schema)
        value = ExampleSynthesizer(max_depth=3).synthesize(schema)
        assert value == [[[[None]]]]

    def test_generate_json_never_raises_on_cycles(self, openapi3_spec: Spec) -> None:
        text = generate_example_json(_ref("TreeNode"), Resolver(openapi3_spec))
        assert json.loads(text) == {"value": "string", "children": [None]}

    def test_densely_linked_table_stays_bounded(self) -> None:
        schemas = {}
        for i in range(16):
            schemas[f"E{i}"] = {
                "type": "object",
                "properties": {
                    f"p{k}": (
                        {"$ref": f"#/components/schemas/E{i + k}"} if i + k < 16 else {"type": "integer"}
                    )
                    for k in range(1, 6)
                },
            }
        value = ExampleSynthesizer(Resolver(_spec(schemas))).synthesize(_ref("E0"))
        assert set(value) == {"p1", "p2", "p3", "p4", "p5"}
        # One object per expansion, five values each.
        assert _count_values(value) <= 6 * DEFAULT_MAX_EXPANSIONS
        assert len(json.dumps(value)) < 100_000

    def test_spent_budget_gives_none(self) -> None:
        spec = _spec(
            {
                "Order": {
                    "type": "object",
                    "properties": {
                        "item": {"$ref": "#/components/schemas/Item"},
                        "ghost": {"$ref": "#/components/schemas/Ghost"},
                    },
                },
                "Item": {"type": "string"},
            }
        )
        value = ExampleSynthesizer(Resolver(spec), max_expansions=1).synthesize(_ref("Order"))
        assert value == {"item": None, "ghost": "<Ghost>"}

    def test_budget_is_per_call(self) -> None:
        spec = _spec({"Item": {"type": "integer"}})
        synthesizer = ExampleSynthesizer(Resolver(spec), max_expansions=1)
        assert synthesizer.synthesize(_ref("Item")) == 0
        assert synthesizer.synthesize(_ref("Item")) == 0

    def test_reference_hop_counts_towards_depth(self) -> None:
        spec = _spec({"Box": {"type": "object", "properties": {"n": {"type": "integer"}}}})
        synthesizer = ExampleSynthesizer(Resolver(spec), max_depth=1)
        assert synthesizer.synthesize(_ref("Box")) == {"n": None}


# ---------------------------------------------------------------------------
# JSON text
# ---------------------------------------------------------------------------


class TestGenerateJson:
    def test_two_space_indent(self) -> None:
        schema = Schema(type="object", properties={"n": Schema(type="integer")})
        assert generate_example_json(schema) == '{\n  "n": 0\n}'

    def test_non_ascii_kept(self) -> None:
        schema = Schema.model_validate({"type": "string", "example": "héllo"})
        assert generate_example_json(schema) == '"héllo"'

    def test_null(self) -> None:
        assert generate_example_json(None) == "null"
