"""Typed operation client generator.

Generates an httpx-based client module: a fixed runtime prelude followed by
one document constant and one typed operation helper per named operation:

    ADD_DOCUMENT = \"\"\"
    query Add($x: Int!, $y: Int!) {
      add(x: $x, y: $y)
    }
    \"\"\"

    Add: GraphQLOperation[AddQueryVariables, AddQuery] = make_graphql_operation(
        document=ADD_DOCUMENT,
        fallback_operation_name="Add",
        result_type=AddQuery,
    )

Operation definitions emit nothing while the document is walked; the named
ones are collected and rendered once the walk is over (``sdk_content``).
Anonymous operations cannot be called by name and are skipped.
"""

import logging
from dataclasses import dataclass

from graphql import FragmentDefinitionNode, GraphQLSchema, OperationDefinitionNode, print_ast
from jinja2 import Environment, PackageLoader, select_autoescape

from .assembler import GeneratedUnit
from .config import DocumentMode, GeneratorConfig, load_config
from .errors import CodegenError, ConfigError
from .imports import ImportKind, ImportRegistry
from .loader import DocumentFile, merge_documents
from .naming import (
    NameAllocator,
    class_name,
    default_namespace,
    document_variable_name,
    module_docstring,
    operation_type_name,
    safe_docstring,
    safe_identifier,
)
from .traversal import (
    EXTENSION_KINDS,
    TYPE_SYSTEM_KINDS,
    CallbackTable,
    definitions,
    fragment_spreads,
    traverse,
)

logger = logging.getLogger(__name__)

INDENT = " " * 4
TYPES_ALIAS = "Types"
OPERATIONS_ALIAS = "Operations"
PRELUDE_TEMPLATE = "client_prelude.py.j2"

# Top-level names defined by the prelude
PRELUDE_NAMES = (
    "DataT",
    "VariablesT",
    "DEFAULT_HEADERS",
    "GraphQLOperationOptions",
    "GraphQLSuccessResponse",
    "MissingDataGraphQLResponseError",
    "GraphQLClient",
    "GraphQLOperation",
    "make_graphql_operation",
)


@dataclass
class PendingOperation:
    """A named operation waiting to be rendered as a client helper."""
    node: OperationDefinitionNode
    document_variable_name: str
    operation_type: str
    result_type_name: str
    variables_type_name: str

    @property
    def name(self) -> str:
        return self.node.name.value


def _string_literal(text: str) -> str:
    return f'"""\n{safe_docstring(text)}\n"""'


class ClientGenerator:
    """Collects named operations and renders the typed client module.

    Args:
        schema: The GraphQL schema the documents are written against
        config: Generation options
        imports: Import registry owned by this generator

    Raises:
        ConfigError: ``document_mode`` is external but no
            ``import_documents_from`` module is configured.
    """

    def __init__(
        self,
        schema: GraphQLSchema,
        config: GeneratorConfig,
        imports: ImportRegistry | None = None,
    ):
        self.schema = schema
        self.config = config
        self.imports = imports or ImportRegistry(config.use_type_imports)
        self.env = Environment(
            loader=PackageLoader("gql_emit", "templates"),
            autoescape=select_autoescape(),
        )

        self.operations: list[PendingOperation] = []
        self.fragments: dict[str, FragmentDefinitionNode] = {}

        self._record_prelude_imports()

        self.types_prefix = ""
        if config.import_operation_types_from:
            alias = self.imports.record_module(config.import_operation_types_from, TYPES_ALIAS)
            self.types_prefix = f"{alias}."

        self.documents_prefix = ""
        if config.document_mode is DocumentMode.EXTERNAL:
            if not config.import_documents_from:
                raise ConfigError(
                    "documentMode 'external' requires importDocumentsFrom "
                    "to name the module holding the documents"
                )
            alias = self.imports.record_module(config.import_documents_from, OPERATIONS_ALIAS)
            self.documents_prefix = f"{alias}."

        # Helpers share the module with schema and operation types
        self.names = NameAllocator(PRELUDE_NAMES)
        for entry in self.imports:
            self.names.reserve(entry.local_name)
        for name in schema.type_map:
            self.names.reserve(class_name(name))

    def _record_prelude_imports(self):
        self.imports.record("annotations", "__future__")
        self.imports.record("dataclass", "dataclasses")
        self.imports.record("Any", "typing", ImportKind.TYPE)
        self.imports.record("Generic", "typing")
        self.imports.record("TypedDict", "typing")
        self.imports.record("TypeVar", "typing")
        self.imports.record_module("httpx")
        self.imports.record("to_jsonable_python", "pydantic_core")
        if self.config.document_mode is DocumentMode.DOCUMENT_NODE:
            self.imports.record("parse", "graphql")
        if self.config.document_mode is not DocumentMode.STRING:
            self.imports.record("DocumentNode", "graphql", ImportKind.TYPE)
            self.imports.record("print_ast", "graphql")

    def callbacks(self) -> CallbackTable:
        return CallbackTable(
            {
                "operation_definition": self.operation_definition,
                "fragment_definition": self.fragment_definition,
            },
            passthrough=TYPE_SYSTEM_KINDS | EXTENSION_KINDS,
        )

    def operation_definition(self, node) -> None:
        if not node.name:
            logger.warning(
                "Anonymous GraphQL operation was ignored by the client generator, "
                "please make sure to name your operation:\n%s",
                print_ast(node),
            )
            return None

        operation_type = node.operation.value
        result_type = operation_type_name(
            node.name.value, operation_type, self.config.dedupe_operation_suffix
        )
        if not self.types_prefix:
            self.names.reserve(result_type)
            self.names.reserve(f"{result_type}Variables")
        self.operations.append(
            PendingOperation(
                node=node,
                document_variable_name=document_variable_name(node.name.value),
                operation_type=operation_type,
                result_type_name=f"{self.types_prefix}{result_type}",
                variables_type_name=f"{self.types_prefix}{result_type}Variables",
            )
        )
        return None

    def fragment_definition(self, node) -> None:
        self.fragments[node.name.value] = node
        return None

    def used_fragments(self, node) -> list[FragmentDefinitionNode]:
        """Fragments ``node`` depends on, transitively, in first-use order."""
        used: list[str] = []

        def collect(current):
            for name in fragment_spreads(current):
                if name in used:
                    continue
                if name not in self.fragments:
                    raise CodegenError(f'Unknown fragment "{name}"')
                used.append(name)
                collect(self.fragments[name])

        collect(node)
        return [self.fragments[name] for name in used]

    def document_text(self, operation: PendingOperation) -> str:
        parts = [operation.node, *self.used_fragments(operation.node)]
        return "\n\n".join(print_ast(part) for part in parts)

    def _document_block(self, operation: PendingOperation, constant: str) -> str:
        literal = _string_literal(self.document_text(operation))
        if self.config.document_mode is DocumentMode.DOCUMENT_NODE:
            return f"{constant} = parse({literal})"
        return f"{constant} = {literal}"

    def _operation_block(self, operation: PendingOperation, helper: str, document: str) -> str:
        return "\n".join([
            f"{helper}: GraphQLOperation[{operation.variables_type_name}, "
            f"{operation.result_type_name}] = make_graphql_operation(",
            f"{INDENT}document={document},",
            f'{INDENT}fallback_operation_name="{operation.name}",',
            f"{INDENT}result_type={operation.result_type_name},",
            ")",
        ])

    def prelude(self) -> str:
        template = self.env.get_template(PRELUDE_TEMPLATE)
        return template.render(document_mode=self.config.document_mode.value)

    @property
    def sdk_content(self) -> str:
        """The prelude followed by the helpers of every collected operation."""
        blocks = [self.prelude()]
        for operation in self.operations:
            if self.config.document_mode is DocumentMode.EXTERNAL:
                document = f"{self.documents_prefix}{operation.document_variable_name}"
            else:
                document = self.names.allocate(operation.document_variable_name)
                blocks.append(self._document_block(operation, document))
            helper = self.names.allocate(safe_identifier(operation.name))
            blocks.append(self._operation_block(operation, helper, document))
        return "\n\n\n".join(blocks)


def build(
    schema: GraphQLSchema,
    documents: list[DocumentFile] = (),
    config: GeneratorConfig | dict | None = None,
    output_file: str = "sdk.py",
) -> GeneratedUnit:
    """Generate the typed client for the operations of ``documents``."""
    config = load_config(config)
    namespace = default_namespace(output_file)
    generator = ClientGenerator(schema, config)
    result = traverse(merge_documents(list(documents)), generator.callbacks())
    logger.debug("Collected %d operations for the client", len(generator.operations))
    return GeneratedUnit(
        header=module_docstring("Generated GraphQL client.", namespace),
        imports=generator.imports,
        body=definitions(result),
        extras=[generator.sdk_content],
    )


def plugin(schema, documents=(), config=None, output_file="sdk.py") -> str:
    return build(schema, documents, config, output_file).render()
