"""Operation type generator.

For every named operation of the input documents, generates:

- ``<Name><Operation>Variables``: a ``TypedDict`` of the operation variables
- ``<Name><Operation>``: a pydantic model of the selected result, with one
  nested model per composite selection

Fragment definitions get a ``<Name>Fragment`` model. Fragment spreads and
inline fragments are merged into the enclosing selection; fields that are
only selected under another type condition, or under ``@include``/``@skip``,
become optional.

Example:
    query Add($x: Int!, $y: Int!) { add(x: $x, y: $y) }

    class AddQueryVariables(TypedDict):
        x: int
        y: int

    class AddQuery(BaseModel):
        add: int
"""

import logging
from dataclasses import dataclass, replace

from graphql import (
    DocumentNode,
    FragmentDefinitionNode,
    GraphQLSchema,
    OperationDefinitionNode,
    print_ast,
)
from graphql.utilities import TypeInfo

from .assembler import GeneratedUnit
from .config import GeneratorConfig, load_config
from .errors import CodegenError
from .imports import ImportRegistry
from .loader import DocumentFile, merge_documents
from .naming import (
    NameAllocator,
    default_namespace,
    fragment_type_name,
    is_safe_identifier,
    module_docstring,
    operation_type_name,
    pascal_case,
    safe_identifier,
)
from .scalars import ScalarRegistry
from .traversal import (
    EXTENSION_KINDS,
    TYPE_SYSTEM_KINDS,
    CallbackTable,
    definitions,
    traverse,
)
from .type_mapper import TypeMapper, is_non_null

logger = logging.getLogger(__name__)

INDENT = " " * 4
TYPES_ALIAS = "Types"
CONDITION_DIRECTIVES = ("include", "skip")


@dataclass(frozen=True)
class Selection:
    """A field in the response shape of an operation.

    ``field_type`` is None for ``__typename``; ``children`` is None for
    leaf fields.
    """
    response_name: str
    field_type: object | None
    children: tuple["Selection", ...] | None = None
    conditional: bool = False

    def merge(self, other: "Selection") -> "Selection":
        children = self.children
        if self.children is not None and other.children is not None:
            children = merge_selections(self.children + other.children)
        return replace(
            self,
            children=children,
            conditional=self.conditional and other.conditional,
        )


def merge_selections(selections) -> tuple[Selection, ...]:
    """Flatten fragment results and merge fields sharing a response name."""
    merged: dict[str, Selection] = {}
    for item in selections:
        for selection in item if isinstance(item, (list, tuple)) else (item,):
            existing = merged.get(selection.response_name)
            merged[selection.response_name] = (
                existing.merge(selection) if existing else selection
            )
    return tuple(merged.values())


def _has_condition(node) -> bool:
    return any(d.name.value in CONDITION_DIRECTIVES for d in node.directives or ())


def _conditional(selections, conditional: bool) -> tuple[Selection, ...]:
    if not conditional:
        return tuple(selections)
    return tuple(replace(s, conditional=True) for s in selections)


class OperationsGenerator:
    """Builds variables and result types for operations and fragments.

    Args:
        schema: The GraphQL schema the documents are written against
        config: Generation options
        document: All input documents merged into one
        type_info: Type context shared with the traversal
        type_mapper: Shared TypeMapper; built from ``config`` when omitted
        imports: Import registry owned by this generator
    """

    def __init__(
        self,
        schema: GraphQLSchema,
        config: GeneratorConfig,
        document: DocumentNode,
        type_info: TypeInfo,
        type_mapper: TypeMapper | None = None,
        imports: ImportRegistry | None = None,
    ):
        self.schema = schema
        self.config = config
        self.type_info = type_info
        self.imports = imports or ImportRegistry(config.use_type_imports)
        self.imports.record("annotations", "__future__")

        if type_mapper is None:
            prefix = ""
            if config.import_types_from:
                alias = self.imports.record_module(config.import_types_from, TYPES_ALIAS)
                prefix = f"{alias}."
            type_mapper = TypeMapper(schema, ScalarRegistry(config.scalars), prefix=prefix)
        self.type_mapper = type_mapper

        self.fragments: dict[str, FragmentDefinitionNode] = {}
        self.names = NameAllocator()
        # Unedited anonymous operations, in document order
        self._anonymous: list[OperationDefinitionNode] = []
        for definition in document.definitions:
            if isinstance(definition, FragmentDefinitionNode):
                self.fragments[definition.name.value] = definition
                self.names.reserve(fragment_type_name(definition.name.value))
            elif isinstance(definition, OperationDefinitionNode) and not definition.name:
                self._anonymous.append(definition)
            elif isinstance(definition, OperationDefinitionNode):
                result_name = self.result_type_name(definition)
                self.names.reserve(result_name)
                self.names.reserve(f"{result_name}Variables")

        self.models: list[str] = []
        self._fragment_selections: dict[str, tuple[Selection, ...]] = {}
        self._expanding: set[str] = set()

    def callbacks(self) -> CallbackTable:
        return CallbackTable(
            {
                "operation_definition": self.operation_definition,
                "fragment_definition": self.fragment_definition,
                "selection_set": self.selection_set,
                "field": self.field,
                "inline_fragment": self.inline_fragment,
                "fragment_spread": self.fragment_spread,
            },
            passthrough=TYPE_SYSTEM_KINDS | EXTENSION_KINDS,
        )

    def result_type_name(self, node: OperationDefinitionNode) -> str:
        return operation_type_name(
            node.name.value, node.operation.value, self.config.dedupe_operation_suffix
        )

    # Selections

    def field(self, node) -> Selection:
        response_name = node.alias.value if node.alias else node.name.value
        conditional = _has_condition(node)
        if node.name.value == "__typename":
            return Selection(response_name, None, conditional=conditional)

        field_def = self.type_info.get_field_def()
        if field_def is None:
            parent = self.type_info.get_parent_type()
            raise CodegenError(
                f'Cannot query field "{node.name.value}" on type '
                f'"{parent.name if parent else "?"}"'
            )
        children = node.selection_set
        return Selection(
            response_name,
            field_def.type,
            tuple(children) if children is not None else None,
            conditional,
        )

    def selection_set(self, node) -> tuple[Selection, ...]:
        return merge_selections(node.selections)

    def inline_fragment(self, node) -> tuple[Selection, ...]:
        parent = self.type_info.get_parent_type()
        condition = node.type_condition.name.value if node.type_condition else None
        conditional = _has_condition(node) or (
            condition is not None and parent is not None and condition != parent.name
        )
        return _conditional(node.selection_set, conditional)

    def fragment_spread(self, node) -> tuple[Selection, ...]:
        name = node.name.value
        fragment = self.fragments.get(name)
        if fragment is None:
            raise CodegenError(f'Unknown fragment "{name}"')
        parent = self.type_info.get_parent_type()
        condition = fragment.type_condition.name.value
        conditional = _has_condition(node) or (
            parent is not None and condition != parent.name
        )
        return _conditional(self._expand_fragment(fragment), conditional)

    def _expand_fragment(self, fragment: FragmentDefinitionNode) -> tuple[Selection, ...]:
        name = fragment.name.value
        if name in self._fragment_selections:
            return self._fragment_selections[name]
        if name in self._expanding:
            raise CodegenError(f'Fragment "{name}" spreads itself')

        condition_type = self.schema.get_type(fragment.type_condition.name.value)
        if condition_type is None:
            raise CodegenError(
                f'Unknown type "{fragment.type_condition.name.value}" '
                f'in fragment "{name}"'
            )
        self._expanding.add(name)
        outer = self.type_info
        self.type_info = TypeInfo(self.schema, initial_type=condition_type)
        try:
            selections = traverse(fragment.selection_set, self.callbacks(), self.type_info)
        finally:
            self.type_info = outer
            self._expanding.discard(name)
        self._fragment_selections[name] = selections
        return selections

    # Definitions

    def operation_definition(self, node) -> str | None:
        if not node.name:
            # node already holds edited selections
            logger.warning(
                "Anonymous GraphQL operation was ignored by the operation types "
                "generator, please make sure to name your operation:\n%s",
                print_ast(self._anonymous.pop(0)),
            )
            return None

        result_name = self.result_type_name(node)
        blocks = [self._variables_block(f"{result_name}Variables", node.variable_definitions)]
        self._model_blocks(result_name, node.selection_set, blocks)
        return "\n\n\n".join(blocks)

    def fragment_definition(self, node) -> str:
        blocks: list[str] = []
        self._model_blocks(fragment_type_name(node.name.value), node.selection_set, blocks)
        return "\n\n\n".join(blocks)

    def _variables_block(self, name: str, variable_definitions) -> str:
        typed_dict = self.imports.record("TypedDict", "typing")
        entries = []
        for definition in variable_definitions or ():
            resolved = self.type_mapper.resolve(definition.type)
            self.imports.record_all(resolved.imports)
            expression = resolved.expression
            if not is_non_null(definition.type) or definition.default_value is not None:
                not_required = self.imports.record("NotRequired", "typing")
                expression = f"{not_required}[{expression}]"
            entries.append((definition.variable.name.value, expression))

        if all(is_safe_identifier(key) for key, _ in entries):
            lines = [f"class {name}({typed_dict}):"]
            lines.extend(f"{INDENT}{key}: {expression}" for key, expression in entries)
            if not entries:
                lines.append(f"{INDENT}pass")
            return "\n".join(lines)

        # Keys that are not identifiers need the functional syntax
        lines = [f'{name} = {typed_dict}("{name}", {{']
        lines.extend(f'{INDENT}"{key}": {expression},' for key, expression in entries)
        lines.append("})")
        return "\n".join(lines)

    def _model_blocks(self, name: str, selections, blocks: list[str]):
        """Append the model for ``selections`` to ``blocks``, nested models first."""
        base = self.imports.record("BaseModel", "pydantic")
        fields = []
        aliased = False
        for selection in selections:
            attr = safe_identifier(selection.response_name)
            if selection.field_type is None:
                if selection.response_name == "__typename":
                    attr = "typename__"
                expression, nullable = "str", False
            elif selection.children is not None:
                nested = self.names.allocate(f"{name}{pascal_case(selection.response_name)}")
                self._model_blocks(nested, selection.children, blocks)
                resolved = self.type_mapper.resolve(selection.field_type, base=nested)
                self.imports.record_all(resolved.imports)
                expression = resolved.expression
                nullable = not is_non_null(selection.field_type)
            else:
                resolved = self.type_mapper.resolve(selection.field_type)
                self.imports.record_all(resolved.imports)
                expression = resolved.expression
                nullable = not is_non_null(selection.field_type)

            if selection.conditional and not nullable:
                optional = self.imports.record("Optional", "typing")
                expression = f"{optional}[{expression}]"
                nullable = True

            default = "None" if nullable else None
            if attr != selection.response_name:
                aliased = True
                field = self.imports.record("Field", "pydantic")
                arguments = f'alias="{selection.response_name}"'
                if default:
                    arguments = f"default={default}, {arguments}"
                fields.append(f"{attr}: {expression} = {field}({arguments})")
            elif default:
                fields.append(f"{attr}: {expression} = {default}")
            else:
                fields.append(f"{attr}: {expression}")

        lines = [f"class {name}({base}):"]
        if aliased:
            config_dict = self.imports.record("ConfigDict", "pydantic")
            lines.append(f"{INDENT}model_config = {config_dict}(populate_by_name=True)")
            lines.append("")
        lines.extend(f"{INDENT}{f}" for f in fields)
        if not fields:
            lines.append(f"{INDENT}pass")
        self.models.append(name)
        blocks.append("\n".join(lines))

    def rebuild_block(self) -> str:
        return "\n".join(f"{name}.model_rebuild()" for name in self.models)


def build(
    schema: GraphQLSchema,
    documents: list[DocumentFile] = (),
    config: GeneratorConfig | dict | None = None,
    output_file: str = "operations.py",
) -> GeneratedUnit:
    """Generate variables and result types for the given documents."""
    config = load_config(config)
    namespace = default_namespace(output_file)
    document = merge_documents(list(documents))
    type_info = TypeInfo(schema)
    generator = OperationsGenerator(schema, config, document, type_info)
    result = traverse(document, generator.callbacks(), type_info)
    body = definitions(result)
    logger.debug("Generated types for %d operations and fragments", len(body))
    return GeneratedUnit(
        header=module_docstring("Generated GraphQL operation types.", namespace),
        imports=generator.imports,
        body=body,
        extras=[generator.rebuild_block()],
    )


def plugin(schema, documents=(), config=None, output_file="operations.py") -> str:
    return build(schema, documents, config, output_file).render()
