"""Tests for loading schema and operation documents."""

import pytest
from graphql import GraphQLError, OperationDefinitionNode

from gql_emit.core.errors import CodegenError
from gql_emit.core.loader import (
    DocumentFile,
    build_schema_from_sdl,
    load_documents,
    load_schema,
    merge_documents,
)


class TestLoadSchema:
    def test_single_file(self, tmp_path):
        path = tmp_path / "schema.graphql"
        path.write_text("type Query { add(x: Int!, y: Int!): Int! }")
        schema = load_schema(str(path))
        assert "add" in schema.query_type.fields

    def test_directory_is_walked(self, tmp_path):
        (tmp_path / "nested").mkdir()
        (tmp_path / "query.graphql").write_text("type Query { me: User }")
        (tmp_path / "nested" / "user.gql").write_text("type User { id: ID! }")
        (tmp_path / "notes.txt").write_text("not a schema")
        schema = load_schema(str(tmp_path))
        assert schema.get_type("User") is not None

    def test_empty_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_schema(str(tmp_path))

    def test_invalid_sdl(self):
        with pytest.raises(GraphQLError):
            build_schema_from_sdl("type Query {")

    def test_unknown_type(self):
        with pytest.raises(CodegenError, match="Invalid schema"):
            build_schema_from_sdl("type Query { me: Missing }")


class TestLoadDocuments:
    def test_glob_patterns(self, tmp_path):
        (tmp_path / "b.graphql").write_text("query B { b }")
        (tmp_path / "a.graphql").write_text("query A { a }")
        documents = load_documents([str(tmp_path / "*.graphql")])
        assert [d.location for d in documents] == [
            str(tmp_path / "a.graphql"),
            str(tmp_path / "b.graphql"),
        ]
        assert documents[0].raw_sdl == "query A { a }"

    def test_overlapping_patterns_load_once(self, tmp_path):
        path = tmp_path / "a.graphql"
        path.write_text("query A { a }")
        documents = load_documents([str(path), str(tmp_path / "*.graphql")])
        assert len(documents) == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_documents([str(tmp_path / "missing.graphql")])


def test_merge_documents():
    merged = merge_documents([
        DocumentFile.from_string("query A { a }"),
        DocumentFile.from_string("fragment F on Query { a }"),
    ])
    assert len(merged.definitions) == 2
    assert isinstance(merged.definitions[0], OperationDefinitionNode)
