"""Shared fixtures for generator tests."""

import ast
import sys
import types

import pytest

from gql_emit.core.loader import DocumentFile, build_schema_from_sdl

ADD_SDL = """
type Query {
  add(x: Int!, y: Int!): Int!
}
"""

ADD_OPERATION = """
query Add($x: Int!, $y: Int!) {
  add(x: $x, y: $y)
}
"""

APP_SDL = '''
scalar DateTime
scalar Money

"""Something that has an id."""
interface Node {
  id: ID!
}

enum Role {
  ADMIN
  USER
}

type User implements Node {
  id: ID!
  "Display name"
  name: String!
  email: String
  tags: [String]!
  friends: [User!]
  role: Role!
  createdAt: DateTime
  balance: Money
  from: String
}

type Post implements Node {
  id: ID!
  title: String!
  author: User!
}

union SearchResult = User | Post

input UserFilter {
  name: String
  limit: Int = 10
  role: Role!
}

type Query {
  user(id: ID!): User
  users(filter: UserFilter, first: Int): [User!]!
  search(term: String!): [SearchResult!]!
  node(id: ID!): Node
}

type Mutation {
  renameUser(id: ID!, name: String!): User!
}
'''


def imported_names(code: str) -> dict[str, list[str]]:
    """Map each module of the top-level ``from ... import`` statements to its names."""
    names: dict[str, list[str]] = {}
    for node in ast.parse(code).body:
        if isinstance(node, ast.ImportFrom):
            module = "." * node.level + (node.module or "")
            names.setdefault(module, []).extend(a.asname or a.name for a in node.names)
    return names


@pytest.fixture
def add_schema():
    return build_schema_from_sdl(ADD_SDL)


@pytest.fixture
def add_documents():
    return [DocumentFile.from_string(ADD_OPERATION, "add.graphql")]


@pytest.fixture
def app_schema():
    return build_schema_from_sdl(APP_SDL)


@pytest.fixture
def imports_of():
    return imported_names


@pytest.fixture
def load_module():
    """Execute generated code as a registered module."""
    loaded = []

    def load(code: str, name: str = "generated_module"):
        module = types.ModuleType(name)
        sys.modules[name] = module
        loaded.append(name)
        exec(compile(code, f"{name}.py", "exec"), module.__dict__)
        return module

    yield load
    for name in loaded:
        sys.modules.pop(name, None)
