"""Tests for the schema type generator."""

import ast

import pytest

from gql_emit.core import types_generator


def generate(schema, config=None, output_file="src/app/graphql/types.py"):
    return types_generator.plugin(schema, config=config, output_file=output_file)


@pytest.fixture
def code(app_schema):
    return generate(app_schema)


class TestDeclarations:
    """Tests for the shape of generated declarations."""

    def test_valid_python(self, code):
        ast.parse(code)

    def test_declaration_order(self, code):
        tree = ast.parse(code)
        classes = [n.name for n in tree.body if isinstance(n, ast.ClassDef)]
        assert classes == ["Node", "Role", "User", "Post", "UserFilter", "Query", "Mutation"]

    def test_scalars_are_not_declared(self, code):
        assert "class DateTime" not in code
        assert "Money =" not in code

    def test_enum(self, code):
        assert 'class Role(str, Enum):\n    ADMIN = "ADMIN"\n    USER = "USER"' in code

    def test_object_type_has_typename(self, code):
        assert 'typename__: Literal["User"] = Field(default="User", alias="__typename")' in code
        assert "model_config = ConfigDict(populate_by_name=True)" in code

    def test_field_nullability(self, code):
        assert "    id: str\n" in code
        assert "    email: Optional[str] = None\n" in code
        assert "    tags: List[Optional[str]]\n" in code
        assert "    friends: Optional[List[User]] = None\n" in code
        assert "    role: Role\n" in code

    def test_keyword_field_is_aliased(self, code):
        assert 'from_: Optional[str] = Field(default=None, alias="from")' in code

    def test_descriptions(self, code):
        assert '    """Display name"""' in code
        assert 'class Node(BaseModel):\n    """Something that has an id."""' in code

    def test_union_alias(self, code):
        assert 'SearchResult = Union["User", "Post"]' in code

    def test_input_defaults(self, code):
        assert "    limit: Optional[int] = 10\n" in code
        assert "    name: Optional[str] = None\n" in code

    def test_field_arguments_are_not_rendered(self, code):
        assert "term" not in code
        assert "    first:" not in code

    def test_input_has_no_typename(self, code):
        assert 'Literal["UserFilter"]' not in code

    def test_rebuild_block_last(self, code):
        lines = code.rstrip("\n").splitlines()
        assert lines[-1] == "Mutation.model_rebuild()"
        assert "User.model_rebuild()" in lines

    def test_imports(self, code, imports_of):
        imports = imports_of(code)
        assert imports["__future__"] == ["annotations"]
        assert set(imports["pydantic"]) == {"BaseModel", "ConfigDict", "Field"}
        assert set(imports["typing"]) == {"Any", "List", "Literal", "Optional", "Union"}
        assert imports["enum"] == ["Enum"]
        assert imports["datetime"] == ["datetime"]


class TestConfiguration:
    def test_skip_typename(self, app_schema):
        code = generate(app_schema, {"skipTypename": True})
        assert "typename__" not in code
        ast.parse(code)

    def test_scalar_overrides(self, app_schema, imports_of):
        code = generate(app_schema, {"scalars": {"Money": "decimal.Decimal"}})
        assert "    balance: Optional[Decimal] = None\n" in code
        assert imports_of(code)["decimal"] == ["Decimal"]

    def test_deterministic(self, app_schema):
        assert generate(app_schema) == generate(app_schema)

    def test_namespace(self, code):
        assert "Package: app.graphql" in code


class TestGeneratedModels:
    """The generated module imports and validates data."""

    def test_models_validate_responses(self, code, load_module):
        module = load_module(code, "app_types")
        user = module.User.model_validate({
            "__typename": "User",
            "id": "1",
            "name": "Ada",
            "tags": ["a", None],
            "role": "ADMIN",
            "from": "earth",
            "friends": [{"id": "2", "name": "Bob", "tags": [], "role": "USER"}],
        })
        assert user.role is module.Role.ADMIN
        assert user.from_ == "earth"
        assert user.friends[0].name == "Bob"
        assert user.email is None

    def test_inputs_dump_by_alias(self, code, load_module):
        module = load_module(code, "app_types")
        user_filter = module.UserFilter(role=module.Role.USER)
        assert user_filter.model_dump(by_alias=True) == {
            "name": None,
            "limit": 10,
            "role": module.Role.USER,
        }
