"""Resolver interface generator.

Generates one ``typing.Protocol`` per object, interface and union type of a
schema, all nested in a single enclosing class:

    class Resolvers:
        class Query(Protocol):
            def add(self, parent: Any, info: GraphQLResolveInfo, *, x: int, y: int) -> int: ...

Field types come from the TypeMapper; each argument honors its own
nullability, independently of the field's.
"""

import logging
import textwrap
from dataclasses import dataclass

from graphql import GraphQLSchema

from .assembler import GeneratedUnit
from .config import GeneratorConfig, load_config
from .imports import ImportKind, ImportRegistry
from .naming import (
    class_name,
    default_namespace,
    docstring,
    module_docstring,
    resolve_module,
    safe_identifier,
)
from .scalars import ScalarMapping, ScalarRegistry
from .traversal import (
    EXECUTABLE_KINDS,
    EXTENSION_KINDS,
    CallbackTable,
    definitions,
    schema_document,
    traverse,
)
from .type_mapper import ResolvedType, TypeMapper, is_non_null

logger = logging.getLogger(__name__)

MAX_LINE_LENGTH = 79
INDENT = " " * 4
ROOT_TYPES = ("Query", "Mutation", "Subscription")
TYPES_ALIAS = "Types"


@dataclass(frozen=True)
class FieldSignature:
    """A resolver method, rendered once its owning type is known."""
    name: str
    return_type: str
    arguments: tuple[str, ...]
    description: str | None = None

    def render(self, parent_type: str, is_interface: bool, is_async: bool) -> list[str]:
        params = ["self", f"parent: {parent_type}", "info: GraphQLResolveInfo"]
        if self.arguments:
            params.append("*")
            params.extend(self.arguments)

        prefix = "async def" if is_async else "def"
        doc = docstring(self.description, INDENT * 2)
        tail = "" if doc or is_interface else " ..."

        one_line = f"{INDENT}{prefix} {self.name}({', '.join(params)}) -> {self.return_type}:{tail}"
        if not self.arguments and len(one_line) <= MAX_LINE_LENGTH:
            lines = [one_line]
        else:
            lines = [f"{INDENT}{prefix} {self.name}("]
            lines.extend(f"{INDENT * 2}{param}," for param in params)
            lines.append(f"{INDENT}) -> {self.return_type}:{tail}")

        lines.extend(doc)
        if is_interface:
            lines.append(f"{INDENT * 2}raise NotImplementedError")
        return lines


class ResolversGenerator:
    """Builds resolver interfaces from the schema AST.

    Args:
        schema: The GraphQL schema
        config: Generation options
        default_package: Package used when ``config.package`` is not set
        type_mapper: Shared TypeMapper; built from ``config`` when omitted
        imports: Import registry owned by this generator
    """

    def __init__(
        self,
        schema: GraphQLSchema,
        config: GeneratorConfig,
        default_package: str,
        type_mapper: TypeMapper | None = None,
        imports: ImportRegistry | None = None,
    ):
        self.schema = schema
        self.config = config
        self.package = config.package or default_package
        self.imports = imports or ImportRegistry(config.use_type_imports)

        self.imports.record("annotations", "__future__")
        self.imports.record("Any", "typing", ImportKind.TYPE)
        self.imports.record("Protocol", "typing")
        self.imports.record("GraphQLResolveInfo", "graphql", ImportKind.TYPE)

        if type_mapper is None:
            prefix = ""
            if config.import_types_from:
                alias = self.imports.record_module(
                    config.import_types_from, TYPES_ALIAS, ImportKind.TYPE
                )
                prefix = f"{alias}."
            type_mapper = TypeMapper(
                schema,
                ScalarRegistry(config.scalars),
                prefix=prefix,
                mappers=self._mappers(),
            )
        self.type_mapper = type_mapper

    def _mappers(self) -> dict[str, ResolvedType]:
        mappers = {}
        for type_name, target in self.config.mappers.items():
            mapping = ScalarMapping.parse(target)
            if mapping.module is None:
                mappers[type_name] = ResolvedType(mapping.python_type)
                continue
            module = resolve_module(mapping.module, self.package)
            self.imports.record(mapping.python_type, module, ImportKind.TYPE)
            mappers[type_name] = ResolvedType(mapping.python_type)
        return mappers

    def callbacks(self) -> CallbackTable:
        return CallbackTable(
            {
                "field_definition": self.field_definition,
                "object_type_definition": self.object_type_definition,
                "interface_type_definition": self.interface_type_definition,
                "union_type_definition": self.union_type_definition,
            },
            passthrough=EXECUTABLE_KINDS | EXTENSION_KINDS | {
                "schema_definition",
                "scalar_type_definition",
                "enum_type_definition",
                "input_object_type_definition",
                "directive_definition",
            },
        )

    def get_package_name(self) -> str:
        return module_docstring("Generated GraphQL resolver interfaces.", self.package)

    def wrap_with_class(self, content: str) -> str:
        lines = [
            f"class {self.config.class_name}:",
            f'{INDENT}"""Resolver interfaces for every object, interface and union type."""',
        ]
        if content:
            lines.append("")
            lines.append(textwrap.indent(content, INDENT))
        return "\n".join(lines)

    def _resolve(self, type_node) -> str:
        resolved = self.type_mapper.resolve(type_node)
        self.imports.record_all(resolved.imports, ImportKind.TYPE)
        return resolved.expression

    def _parent_type(self, name: str) -> str:
        if name in ROOT_TYPES:
            return "Any"
        return self._resolve_named(name)

    def _resolve_named(self, name: str) -> str:
        resolved = self.type_mapper.named(name)
        self.imports.record_all(resolved.imports, ImportKind.TYPE)
        return resolved.expression

    def field_definition(self, node) -> FieldSignature:
        arguments = []
        for arg in node.arguments or ():
            type_hint = self._resolve(arg.type)
            param = f"{safe_identifier(arg.name.value)}: {type_hint}"
            # Omitted nullable arguments are not passed to the resolver
            if not is_non_null(arg.type) and arg.default_value is None:
                param += " = None"
            arguments.append(param)

        return FieldSignature(
            name=safe_identifier(node.name.value),
            return_type=self._resolve(node.type),
            arguments=tuple(arguments),
            description=node.description.value if node.description else None,
        )

    def _type_block(self, node, methods: list[list[str]], default_doc: str) -> str:
        description = node.description.value if node.description else default_doc
        lines = [f"class {class_name(node.name.value)}(Protocol):"]
        lines.extend(docstring(description, INDENT))
        for method in methods:
            lines.append("")
            lines.extend(method)
        return "\n".join(lines)

    def _resolve_type_method(self) -> list[str]:
        self.imports.record("GraphQLAbstractType", "graphql", ImportKind.TYPE)
        return [
            f"{INDENT}def resolve_type(",
            f"{INDENT * 2}self,",
            f"{INDENT * 2}obj: Any,",
            f"{INDENT * 2}info: GraphQLResolveInfo,",
            f"{INDENT * 2}abstract_type: GraphQLAbstractType,",
            f"{INDENT}) -> Optional[str]: ...",
        ]

    def object_type_definition(self, node) -> str:
        name = node.name.value
        parent = self._parent_type(name)
        methods = [
            field.render(parent, is_interface=False, is_async=self.config.async_resolvers)
            for field in node.fields or ()
        ]
        return self._type_block(node, methods, f"Resolvers for the {name} type.")

    def interface_type_definition(self, node) -> str:
        name = node.name.value
        self.imports.record("Optional", "typing", ImportKind.TYPE)
        parent = self._parent_type(name)
        methods = [self._resolve_type_method()]
        methods.extend(
            field.render(parent, is_interface=True, is_async=self.config.async_resolvers)
            for field in node.fields or ()
        )
        return self._type_block(node, methods, f"Resolvers for the {name} interface.")

    def union_type_definition(self, node) -> str:
        self.imports.record("Optional", "typing", ImportKind.TYPE)
        return self._type_block(
            node,
            [self._resolve_type_method()],
            "Set the correct type resolver for this union.",
        )


def build(
    schema: GraphQLSchema,
    documents=(),
    config: GeneratorConfig | dict | None = None,
    output_file: str = "resolvers.py",
) -> GeneratedUnit:
    """Generate resolver interfaces for ``schema``; documents are unused."""
    config = load_config(config)
    generator = ResolversGenerator(schema, config, default_namespace(output_file))
    result = traverse(schema_document(schema), generator.callbacks())
    body = definitions(result)
    logger.debug("Generated %d resolver interfaces", len(body))
    return GeneratedUnit(
        header=generator.get_package_name(),
        imports=generator.imports,
        body=body,
        wrap=generator.wrap_with_class,
    )


def plugin(schema, documents=(), config=None, output_file="resolvers.py") -> str:
    return build(schema, documents, config, output_file).render()
