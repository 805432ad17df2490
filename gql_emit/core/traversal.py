"""Single-pass traversal of GraphQL ASTs driven by per-kind callbacks.

Generators do not subclass a visitor. They hand ``traverse`` a
``CallbackTable`` mapping node kinds (``"object_type_definition"``,
``"field_definition"``, ...) to plain callables. The walk is post-order:
a callback sees its node with every child already replaced by the child's
own callback result, so e.g. a type definition receives its fields as
rendered fragments.

A callback returning None removes its node from a list (the node emits
nothing). Kinds without a callback keep their node unchanged.
"""

import weakref
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from graphql import DocumentNode, GraphQLSchema, Node, parse, print_schema, visit
from graphql.language import IDLE, REMOVE, Visitor
from graphql.language.ast import QUERY_DOCUMENT_KEYS
from graphql.utilities import TypeInfo, TypeInfoVisitor

Callback = Callable[[Any], Any]

EXECUTABLE_KINDS = frozenset({
    "operation_definition",
    "fragment_definition",
})

TYPE_SYSTEM_KINDS = frozenset({
    "schema_definition",
    "scalar_type_definition",
    "object_type_definition",
    "interface_type_definition",
    "union_type_definition",
    "enum_type_definition",
    "input_object_type_definition",
    "directive_definition",
})

EXTENSION_KINDS = frozenset({
    "schema_extension",
    "scalar_type_extension",
    "object_type_extension",
    "interface_type_extension",
    "union_type_extension",
    "enum_type_extension",
    "input_object_type_extension",
})

# Every kind that can appear directly in DocumentNode.definitions
DEFINITION_KINDS = EXECUTABLE_KINDS | TYPE_SYSTEM_KINDS | EXTENSION_KINDS


class CallbackTable:
    """Per-node-kind callbacks for one generator.

    Every top-level definition kind must be either handled or listed in
    ``passthrough``; construction fails otherwise, so a generator cannot
    silently miss a definition kind.

    Args:
        handlers: Callbacks keyed by graphql-core node kind
        passthrough: Definition kinds the generator deliberately leaves alone
    """

    def __init__(
        self,
        handlers: Mapping[str, Callback],
        passthrough: Iterable[str] = (),
    ):
        handled = set(handlers)
        ignored = set(passthrough)

        unknown = (handled | ignored) - set(QUERY_DOCUMENT_KEYS)
        if unknown:
            raise TypeError(f"Unknown AST node kinds: {', '.join(sorted(unknown))}")
        both = handled & ignored
        if both:
            raise TypeError(
                f"Kinds both handled and passed through: {', '.join(sorted(both))}"
            )
        missing = DEFINITION_KINDS - handled - ignored
        if missing:
            raise TypeError(
                f"Unhandled definition kinds: {', '.join(sorted(missing))}"
            )

        self.handlers = dict(handlers)
        self.passthrough = frozenset(ignored)

    def get(self, kind: str) -> Callback | None:
        return self.handlers.get(kind)


class _TableVisitor(Visitor):
    """Adapts a CallbackTable to graphql-core's visitor protocol."""

    def __init__(self, table: CallbackTable):
        super().__init__()
        self._table = table

    def leave(self, node: Node, key, *_args):
        callback = self._table.get(node.kind)
        if callback is None:
            return IDLE
        result = callback(node)
        if result is None:
            # Only list members can be removed; single children stay as nodes
            return REMOVE if isinstance(key, int) else IDLE
        return result


def traverse(node: Node, table: CallbackTable, type_info: TypeInfo | None = None):
    """Walk ``node`` once, post-order, applying the callbacks of ``table``.

    With ``type_info``, callbacks can query the type context of the node they
    receive (``type_info.get_parent_type()``, ``get_field_def()``, ...).

    Returns:
        The edited tree; the input node is not modified.
    """
    visitor: Visitor = _TableVisitor(table)
    if type_info is not None:
        visitor = TypeInfoVisitor(type_info, visitor)
    return visit(node, visitor)


def definitions(result) -> list[str]:
    """String fragments of a traversed document, in document order."""
    return [d for d in result.definitions if isinstance(d, str)]


_schema_documents: "weakref.WeakKeyDictionary[GraphQLSchema, DocumentNode]" = (
    weakref.WeakKeyDictionary()
)


def schema_document(schema: GraphQLSchema) -> DocumentNode:
    """Return the AST of a schema (printed and re-parsed, cached per schema)."""
    document = _schema_documents.get(schema)
    if document is None:
        document = parse(print_schema(schema))
        _schema_documents[schema] = document
    return document


class _SpreadCollector(Visitor):
    def __init__(self):
        super().__init__()
        self.names: list[str] = []

    def enter_fragment_spread(self, node, *_args):
        name = node.name.value
        if name not in self.names:
            self.names.append(name)


def fragment_spreads(node: Node) -> list[str]:
    """Names of the fragments spread directly inside ``node``, in order."""
    collector = _SpreadCollector()
    visit(node, collector)
    return collector.names
