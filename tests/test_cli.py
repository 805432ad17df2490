"""Tests for the command-line interface."""

import ast
import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from gql_emit.cli import main

from conftest import ADD_OPERATION, ADD_SDL


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def project(tmp_path, monkeypatch):
    """A working directory with a schema and one operation document."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "schema.graphql").write_text(ADD_SDL)
    queries = tmp_path / "queries"
    queries.mkdir()
    (queries / "add.graphql").write_text(ADD_OPERATION)
    return tmp_path


class TestGenerate:
    def test_writes_combined_module(self, runner, project):
        result = runner.invoke(main, [
            "generate",
            "-s", "schema.graphql",
            "-d", "queries/*.graphql",
            "-o", "src/app/graphql/sdk.py",
            "-p", "schema-types",
            "-p", "operation-types",
            "-p", "client",
        ])
        assert result.exit_code == 0, result.output
        assert "Done!" in result.output

        code = Path("src/app/graphql/sdk.py").read_text()
        ast.parse(code)
        assert "Package: app.graphql" in code
        assert "Add: GraphQLOperation[AddQueryVariables, AddQuery]" in code

    def test_requires_plugin(self, runner, project):
        result = runner.invoke(main, ["generate", "-s", "schema.graphql", "-o", "out.py"])
        assert result.exit_code == 2

    def test_unknown_plugin(self, runner, project):
        result = runner.invoke(main, [
            "generate", "-s", "schema.graphql", "-o", "out.py", "-p", "typescript",
        ])
        assert result.exit_code == 2
        assert not Path("out.py").exists()

    def test_header_and_config(self, runner, project):
        Path("codegen.json").write_text(json.dumps({"className": "Root"}))
        result = runner.invoke(main, [
            "generate", "-s", "schema.graphql", "-o", "app/resolvers.py",
            "-p", "resolvers", "-c", "codegen.json", "--header", "# Generated",
        ])
        assert result.exit_code == 0, result.output
        code = Path("app/resolvers.py").read_text()
        assert code.startswith("# Generated\n\n")
        assert "class Root:" in code

    def test_verbose(self, runner, project):
        result = runner.invoke(main, [
            "generate", "-s", "schema.graphql", "-o", "out.py", "-p", "resolvers", "-v",
        ])
        assert result.exit_code == 0, result.output
        assert "Plugins: resolvers" in result.output


class TestClient:
    def test_client_preset(self, runner, project):
        result = runner.invoke(main, [
            "client", "-s", "schema.graphql", "-d", "queries/add.graphql", "-o", "sdk.py",
        ])
        assert result.exit_code == 0, result.output
        code = Path("sdk.py").read_text()
        assert "class Query(BaseModel):" in code
        assert "class AddQuery(BaseModel):" in code
        assert "class GraphQLClient:" in code
        assert "Package: generated" in code

    def test_requires_documents(self, runner, project):
        result = runner.invoke(main, ["client", "-s", "schema.graphql", "-o", "sdk.py"])
        assert result.exit_code == 2


class TestResolvers:
    def test_schema_directory(self, runner, project):
        schema_dir = project / "schema"
        schema_dir.mkdir()
        (schema_dir / "query.graphql").write_text("type Query { me: User }")
        (schema_dir / "user.graphqls").write_text("type User { id: ID! }")

        result = runner.invoke(main, ["resolvers", "-s", "schema", "-o", "src/app/resolvers.py"])
        assert result.exit_code == 0, result.output
        code = Path("src/app/resolvers.py").read_text()
        assert "class Resolvers:" in code
        assert "class User(Protocol):" in code
        assert "Package: app" in code


class TestErrors:
    def test_invalid_config_is_reported(self, runner, project):
        Path("codegen.json").write_text(json.dumps({"nope": True}))
        result = runner.invoke(main, [
            "resolvers", "-s", "schema.graphql", "-o", "out.py", "-c", "codegen.json",
        ])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        assert not Path("out.py").exists()

    def test_invalid_schema_is_reported(self, runner, project):
        Path("broken.graphql").write_text("type Query {")
        result = runner.invoke(main, ["resolvers", "-s", "broken.graphql", "-o", "out.py"])
        assert result.exit_code == 1
        assert "Syntax Error" in result.output

    def test_unresolvable_output_path(self, runner, project):
        result = runner.invoke(main, ["resolvers", "-s", "schema.graphql", "-o", "../out.py"])
        assert result.exit_code == 1
