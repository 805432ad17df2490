"""Mapping of GraphQL type references to Python type expressions.

Works on both AST type references (``NamedTypeNode``, ``ListTypeNode``,
``NonNullTypeNode``) and schema types (``GraphQLNonNull``, ``GraphQLList``,
named types). Nullability is applied per position: every list dimension and
the named type itself are wrapped in ``Optional`` unless a non-null wrapper
sits directly around them.

    [Int!]!  ->  List[int]
    [Int]!   ->  List[Optional[int]]
    [Int!]   ->  Optional[List[int]]
    [Int]    ->  Optional[List[Optional[int]]]
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Union

from graphql import (
    GraphQLList,
    GraphQLNamedType,
    GraphQLNonNull,
    GraphQLSchema,
    GraphQLType,
    ListTypeNode,
    NamedTypeNode,
    NonNullTypeNode,
    TypeNode,
    is_scalar_type,
)

from .naming import class_name
from .scalars import FALLBACK_SCALAR_TYPE, ScalarRegistry

logger = logging.getLogger(__name__)

TypeRef = Union[TypeNode, GraphQLType]


@dataclass(frozen=True)
class ResolvedType:
    """A Python type expression and the imports it needs."""
    expression: str
    imports: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        return self.expression


def named_type_name(type_ref: TypeRef) -> str:
    """Return the name of the named type at the bottom of a wrapper chain."""
    while isinstance(type_ref, (NonNullTypeNode, ListTypeNode)):
        type_ref = type_ref.type
    while isinstance(type_ref, (GraphQLNonNull, GraphQLList)):
        type_ref = type_ref.of_type
    if isinstance(type_ref, NamedTypeNode):
        return type_ref.name.value
    if isinstance(type_ref, GraphQLNamedType):
        return type_ref.name
    raise TypeError(f"Not a GraphQL type reference: {type_ref!r}")


def is_non_null(type_ref: TypeRef) -> bool:
    return isinstance(type_ref, (NonNullTypeNode, GraphQLNonNull))


class TypeMapper:
    """Resolves GraphQL type references to Python type expressions.

    Stateless once constructed; a single instance can be shared by any
    number of generators.

    Args:
        schema: Schema used to tell scalars from composite types
        scalars: Scalar mapping table
        prefix: Prefix for composite type names (e.g. ``"Types."``) when the
            generated module imports them from elsewhere
        mappers: Replacement expressions for specific type names
    """

    def __init__(
        self,
        schema: GraphQLSchema | None,
        scalars: ScalarRegistry | None = None,
        *,
        prefix: str = "",
        mappers: Mapping[str, ResolvedType] | None = None,
    ):
        self.schema = schema
        self.scalars = scalars or ScalarRegistry()
        self.prefix = prefix
        self.mappers = dict(mappers or {})

    def named(self, name: str) -> ResolvedType:
        """Resolve a named type, without any nullability decoration."""
        if name in self.mappers:
            return self.mappers[name]

        graphql_type = self.schema.get_type(name) if self.schema else None
        if graphql_type is not None and not is_scalar_type(graphql_type):
            return ResolvedType(f"{self.prefix}{class_name(name)}")

        mapping = self.scalars.get(name)
        if mapping is None:
            logger.debug("Scalar %s is not mapped, using %s", name, FALLBACK_SCALAR_TYPE)
            return ResolvedType(FALLBACK_SCALAR_TYPE, ((FALLBACK_SCALAR_TYPE, "typing"),))
        if mapping.module is None:
            return ResolvedType(mapping.python_type)
        return ResolvedType(mapping.python_type, ((mapping.python_type, mapping.module),))

    def resolve(
        self, type_ref: TypeRef, base: ResolvedType | str | None = None
    ) -> ResolvedType:
        """Resolve a type reference, applying list and nullability wrappers.

        Args:
            type_ref: AST or schema type reference
            base: Expression to use for the innermost named type instead of
                its mapped name (e.g. a generated selection model)
        """
        if isinstance(base, str):
            base = ResolvedType(base)
        imports: list[tuple[str, str]] = []
        expression = self._wrap(type_ref, base, imports, nullable=True)
        return ResolvedType(expression, tuple(dict.fromkeys(imports)))

    def _wrap(
        self,
        type_ref: TypeRef,
        base: ResolvedType | None,
        imports: list[tuple[str, str]],
        nullable: bool,
    ) -> str:
        if isinstance(type_ref, NonNullTypeNode):
            return self._wrap(type_ref.type, base, imports, nullable=False)
        if isinstance(type_ref, GraphQLNonNull):
            return self._wrap(type_ref.of_type, base, imports, nullable=False)

        if isinstance(type_ref, (ListTypeNode, GraphQLList)):
            inner_ref = (
                type_ref.type if isinstance(type_ref, ListTypeNode) else type_ref.of_type
            )
            inner = self._wrap(inner_ref, base, imports, nullable=True)
            imports.append(("List", "typing"))
            expression = f"List[{inner}]"
        else:
            named = base or self.named(named_type_name(type_ref))
            imports.extend(named.imports)
            expression = named.expression

        if nullable:
            imports.append(("Optional", "typing"))
            return f"Optional[{expression}]"
        return expression
