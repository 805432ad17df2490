"""Tests for the callback-table traversal."""

import pytest
from graphql import parse
from graphql.utilities import TypeInfo

from gql_emit.core.traversal import (
    DEFINITION_KINDS,
    EXECUTABLE_KINDS,
    EXTENSION_KINDS,
    TYPE_SYSTEM_KINDS,
    CallbackTable,
    definitions,
    fragment_spreads,
    schema_document,
    traverse,
)

ALL_PASSTHROUGH = DEFINITION_KINDS


class TestCallbackTable:
    """Tests for CallbackTable construction."""

    def test_all_definitions_passthrough(self):
        table = CallbackTable({}, passthrough=ALL_PASSTHROUGH)
        assert table.get("object_type_definition") is None

    def test_missing_definition_kind_is_rejected(self):
        with pytest.raises(TypeError, match="object_type_definition"):
            CallbackTable({}, passthrough=ALL_PASSTHROUGH - {"object_type_definition"})

    def test_unknown_kind_is_rejected(self):
        with pytest.raises(TypeError, match="Unknown AST node kinds"):
            CallbackTable({"objekt": lambda node: None}, passthrough=ALL_PASSTHROUGH)

    def test_handled_and_passthrough_overlap_is_rejected(self):
        with pytest.raises(TypeError, match="both handled and passed through"):
            CallbackTable(
                {"object_type_definition": lambda node: None},
                passthrough=ALL_PASSTHROUGH,
            )

    def test_kind_sets_partition_definitions(self):
        assert not EXECUTABLE_KINDS & TYPE_SYSTEM_KINDS
        assert not TYPE_SYSTEM_KINDS & EXTENSION_KINDS
        assert DEFINITION_KINDS == EXECUTABLE_KINDS | TYPE_SYSTEM_KINDS | EXTENSION_KINDS


class TestTraverse:
    """Tests for post-order traversal with replacement."""

    def test_children_are_replaced_before_parent(self):
        document = parse("type A { x: Int y: String }")
        table = CallbackTable(
            {
                "field_definition": lambda node: node.name.value,
                "object_type_definition": lambda node: (
                    f"{node.name.value}({', '.join(node.fields)})"
                ),
            },
            passthrough=DEFINITION_KINDS - {"object_type_definition"},
        )
        assert definitions(traverse(document, table)) == ["A(x, y)"]

    def test_none_removes_list_members(self):
        document = parse("type A { x: Int } type B { y: Int } type C { z: Int }")
        table = CallbackTable(
            {
                "object_type_definition": lambda node: (
                    None if node.name.value == "B" else node.name.value
                ),
            },
            passthrough=DEFINITION_KINDS - {"object_type_definition"},
        )
        result = traverse(document, table)
        assert len(result.definitions) == 2
        assert definitions(result) == ["A", "C"]

    def test_kinds_without_callback_keep_nodes(self):
        document = parse("scalar Money type A { x: Int }")
        table = CallbackTable(
            {"object_type_definition": lambda node: "A"},
            passthrough=DEFINITION_KINDS - {"object_type_definition"},
        )
        result = traverse(document, table)
        assert result.definitions[0].kind == "scalar_type_definition"
        assert definitions(result) == ["A"]

    def test_input_is_not_modified(self):
        document = parse("type A { x: Int }")
        table = CallbackTable(
            {"object_type_definition": lambda node: "A"},
            passthrough=DEFINITION_KINDS - {"object_type_definition"},
        )
        traverse(document, table)
        assert document.definitions[0].kind == "object_type_definition"

    def test_document_order_is_kept(self):
        document = parse("type Z { x: Int } type A { x: Int } type M { x: Int }")
        table = CallbackTable(
            {"object_type_definition": lambda node: node.name.value},
            passthrough=DEFINITION_KINDS - {"object_type_definition"},
        )
        assert definitions(traverse(document, table)) == ["Z", "A", "M"]

    def test_type_info_is_available_to_callbacks(self, app_schema):
        document = parse("query Q { user(id: 1) { name } }")
        seen = []
        type_info = TypeInfo(app_schema)

        def field(node):
            seen.append((type_info.get_parent_type().name, node.name.value))
            return node

        table = CallbackTable({"field": field}, passthrough=ALL_PASSTHROUGH)
        traverse(document, table, type_info)
        assert seen == [("User", "name"), ("Query", "user")]


class TestHelpers:
    def test_schema_document_is_cached(self, app_schema):
        assert schema_document(app_schema) is schema_document(app_schema)

    def test_schema_document_contains_types(self, app_schema):
        names = [
            d.name.value for d in schema_document(app_schema).definitions
            if hasattr(d, "name") and d.name is not None
        ]
        assert "User" in names
        assert "SearchResult" in names

    def test_fragment_spreads_in_order(self):
        document = parse(
            "query Q { a { ...B ...A } b { ...B } ... on Query { ...C } }"
        )
        assert fragment_spreads(document.definitions[0]) == ["B", "A", "C"]
