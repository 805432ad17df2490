"""Scalar mapping table for GraphQL code generation.

Maps GraphQL scalar names to the Python type expressions used in generated
code, together with the import each expression needs.

Example usage:
    from gql_emit.core.scalars import ScalarMapping, ScalarRegistry

    registry = ScalarRegistry()
    registry.register("Money", ScalarMapping("Decimal", "decimal"))

    # Or from configuration strings
    registry.register("Money", ScalarMapping.parse("decimal.Decimal"))
"""

from collections.abc import Mapping
from dataclasses import dataclass

# Representation used for scalars missing from the table
FALLBACK_SCALAR_TYPE = "Any"


@dataclass(frozen=True)
class ScalarMapping:
    """How a GraphQL scalar maps to Python.

    Attributes:
        python_type: The Python type name (e.g., "datetime", "Decimal")
        module: Module to import ``python_type`` from, or None for builtins
    """
    python_type: str
    module: str | None = None

    @classmethod
    def parse(cls, value: str) -> "ScalarMapping":
        """Parse ``"pkg.mod.Name"``, ``"pkg.mod:Name"`` or a builtin ``"str"``."""
        value = value.strip()
        if ":" in value:
            module, _, name = value.partition(":")
            return cls(name, module)
        module, _, name = value.rpartition(".")
        if not module:
            return cls(name)
        return cls(name, module)


BUILTIN_SCALARS = {
    "ID": ScalarMapping("str"),
    "String": ScalarMapping("str"),
    "Boolean": ScalarMapping("bool"),
    "Int": ScalarMapping("int"),
    "Float": ScalarMapping("float"),
}

DEFAULT_CUSTOM_SCALARS = {
    "DateTime": ScalarMapping("datetime", "datetime"),
    "Date": ScalarMapping("date", "datetime"),
    "UUID": ScalarMapping("UUID", "uuid"),
    "JSON": ScalarMapping("Any", "typing"),
    "JSONObject": ScalarMapping("Any", "typing"),
}


class ScalarRegistry:
    """Registry of scalar mappings.

    Pre-populated with the GraphQL built-in scalars and common custom
    scalars (DateTime, Date, UUID, JSON, JSONObject).
    """

    def __init__(self, overrides: Mapping[str, str | ScalarMapping] | None = None):
        self._mappings: dict[str, ScalarMapping] = {}
        self._mappings.update(BUILTIN_SCALARS)
        self._mappings.update(DEFAULT_CUSTOM_SCALARS)
        for name, value in (overrides or {}).items():
            if isinstance(value, str):
                value = ScalarMapping.parse(value)
            self.register(name, value)

    def register(self, name: str, mapping: ScalarMapping):
        """Register (or replace) the mapping of a scalar."""
        self._mappings[name] = mapping

    def get(self, name: str) -> ScalarMapping | None:
        """Get the mapping of a scalar, or None if it is not mapped."""
        return self._mappings.get(name)
