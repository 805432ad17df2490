"""Schema type generator.

Generates Python declarations for the named types of a schema:

- enums become ``str`` enums, values in declared order
- object, interface and input types become pydantic models, fields in
  declared order
- unions become ``Union`` aliases of their member models

Every model is rebuilt at the end of the module so forward references
between models resolve at import time.
"""

import logging
from dataclasses import dataclass

from graphql import GraphQLSchema, value_from_ast_untyped

from .assembler import GeneratedUnit
from .config import GeneratorConfig, load_config
from .imports import ImportRegistry
from .naming import (
    class_name,
    default_namespace,
    docstring,
    module_docstring,
    safe_identifier,
)
from .scalars import ScalarRegistry
from .traversal import (
    EXECUTABLE_KINDS,
    EXTENSION_KINDS,
    CallbackTable,
    definitions,
    schema_document,
    traverse,
)
from .type_mapper import TypeMapper, is_non_null

logger = logging.getLogger(__name__)

INDENT = " " * 4


@dataclass(frozen=True)
class ModelField:
    """One rendered model field."""
    line: str
    description: str | None = None
    aliased: bool = False

    def lines(self) -> list[str]:
        return [f"{INDENT}{self.line}", *docstring(self.description, INDENT)]


@dataclass(frozen=True)
class InputField:
    """An input value, rendered only if it belongs to an input object.

    Field arguments are input values too; those are never rendered.
    """
    name: str
    type_node: object
    default: str | None
    description: str | None


def _description(node) -> str | None:
    return node.description.value if node.description else None


def _class_block(declaration: str, sections: list[list[str]]) -> str:
    """Join non-empty class body sections with blank lines."""
    lines = [declaration]
    for section in sections:
        if not section:
            continue
        if len(lines) > 1:
            lines.append("")
        lines.extend(section)
    if len(lines) == 1:
        lines.append(f"{INDENT}pass")
    return "\n".join(lines)


class TypesGenerator:
    """Builds enum, model and union declarations from the schema AST."""

    def __init__(
        self,
        schema: GraphQLSchema,
        config: GeneratorConfig,
        type_mapper: TypeMapper | None = None,
        imports: ImportRegistry | None = None,
    ):
        self.schema = schema
        self.config = config
        self.imports = imports or ImportRegistry(config.use_type_imports)
        self.type_mapper = type_mapper or TypeMapper(schema, ScalarRegistry(config.scalars))
        self.imports.record("annotations", "__future__")
        # Models in declaration order, for the rebuild block
        self.models: list[str] = []

    def callbacks(self) -> CallbackTable:
        return CallbackTable(
            {
                "schema_definition": self.suppress,
                "directive_definition": self.suppress,
                "scalar_type_definition": self.suppress,
                "enum_type_definition": self.enum_type_definition,
                "object_type_definition": self.object_type_definition,
                "interface_type_definition": self.interface_type_definition,
                "input_object_type_definition": self.input_object_type_definition,
                "union_type_definition": self.union_type_definition,
                "field_definition": self.field_definition,
                "input_value_definition": self.input_value_definition,
            },
            passthrough=EXECUTABLE_KINDS | EXTENSION_KINDS,
        )

    @staticmethod
    def suppress(_node) -> None:
        return None

    def _model_field(
        self,
        name: str,
        type_node,
        default: str | None = None,
        description: str | None = None,
    ) -> ModelField:
        resolved = self.type_mapper.resolve(type_node)
        self.imports.record_all(resolved.imports)

        attr = safe_identifier(name)
        if default is None and not is_non_null(type_node):
            default = "None"

        if attr != name:
            field = self.imports.record("Field", "pydantic")
            if default is None:
                line = f'{attr}: {resolved} = {field}(alias="{name}")'
            else:
                line = f'{attr}: {resolved} = {field}(default={default}, alias="{name}")'
            return ModelField(line, description, aliased=True)
        if default is None:
            return ModelField(f"{attr}: {resolved}", description)
        return ModelField(f"{attr}: {resolved} = {default}", description)

    def field_definition(self, node) -> ModelField:
        return self._model_field(node.name.value, node.type, description=_description(node))

    def input_value_definition(self, node) -> InputField:
        default = None
        if node.default_value is not None:
            default = repr(value_from_ast_untyped(node.default_value))
        return InputField(node.name.value, node.type, default, _description(node))

    def _model(self, node, fields: list[ModelField], typename: bool = False) -> str:
        name = class_name(node.name.value)
        self.models.append(name)
        base = self.imports.record("BaseModel", "pydantic")

        if typename:
            literal = self.imports.record("Literal", "typing")
            field = self.imports.record("Field", "pydantic")
            graphql_name = node.name.value
            fields = [
                ModelField(
                    f'typename__: {literal}["{graphql_name}"] = '
                    f'{field}(default="{graphql_name}", alias="__typename")',
                    aliased=True,
                ),
                *fields,
            ]

        sections = [docstring(_description(node), INDENT)]
        if any(f.aliased for f in fields):
            config_dict = self.imports.record("ConfigDict", "pydantic")
            sections.append([f"{INDENT}model_config = {config_dict}(populate_by_name=True)"])
        sections.append([line for f in fields for line in f.lines()])
        return _class_block(f"class {name}({base}):", sections)

    def object_type_definition(self, node) -> str:
        return self._model(node, list(node.fields or ()), typename=not self.config.skip_typename)

    def interface_type_definition(self, node) -> str:
        return self._model(node, list(node.fields or ()))

    def input_object_type_definition(self, node) -> str:
        fields = [
            self._model_field(f.name, f.type_node, f.default, f.description)
            for f in node.fields or ()
        ]
        return self._model(node, fields)

    def enum_type_definition(self, node) -> str:
        enum = self.imports.record("Enum", "enum")
        values = []
        for value in node.values or ():
            graphql_name = value.name.value
            values.append(f'{INDENT}{safe_identifier(graphql_name)} = "{graphql_name}"')
            values.extend(docstring(_description(value), INDENT))
        return _class_block(
            f"class {class_name(node.name.value)}(str, {enum}):",
            [docstring(_description(node), INDENT), values],
        )

    def union_type_definition(self, node) -> str:
        union = self.imports.record("Union", "typing")
        members = ", ".join(f'"{class_name(t.name.value)}"' for t in node.types or ())
        description = _description(node)
        comment = [f"# {line}".rstrip() for line in description.splitlines()] if description else []
        return "\n".join([*comment, f"{class_name(node.name.value)} = {union}[{members}]"])

    def rebuild_block(self) -> str:
        return "\n".join(f"{name}.model_rebuild()" for name in self.models)


def build(
    schema: GraphQLSchema,
    documents=(),
    config: GeneratorConfig | dict | None = None,
    output_file: str = "types.py",
) -> GeneratedUnit:
    """Generate schema type declarations; documents are unused."""
    config = load_config(config)
    namespace = default_namespace(output_file)
    generator = TypesGenerator(schema, config)
    result = traverse(schema_document(schema), generator.callbacks())
    body = definitions(result)
    logger.debug("Generated %d schema type declarations", len(body))
    return GeneratedUnit(
        header=module_docstring("Generated GraphQL schema types.", namespace),
        imports=generator.imports,
        body=body,
        extras=[generator.rebuild_block()],
    )


def plugin(schema, documents=(), config=None, output_file="types.py") -> str:
    return build(schema, documents, config, output_file).render()
