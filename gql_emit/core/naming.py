"""Naming utilities for generated code.

Derives package names from output paths and canonical Python identifiers
from GraphQL names. Everything here is a pure function of its input except
``NameAllocator``, which tracks the names handed out for one generated module.
"""

import importlib.util
import keyword
import posixpath
import re

from .errors import ConfigError

# Package used when the output path has no directory component
DEFAULT_NAMESPACE = "generated"

# Soft keywords are valid identifiers but confusing as parameter names
PYTHON_KEYWORDS = frozenset(keyword.kwlist) | {"type", "match", "case"}

# Names imported by generated modules; schema types may not shadow them
IMPORTED_NAMES = frozenset({
    "Any", "Enum", "Field", "List", "Literal", "Mapping", "NotRequired",
    "Optional", "Protocol", "TypedDict", "Union", "BaseModel", "ConfigDict",
    "Generic", "TypeVar", "GraphQLResolveInfo", "GraphQLAbstractType",
})


def snake_case(name: str) -> str:
    """Convert PascalCase or camelCase to snake_case."""
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


def pascal_case(name: str) -> str:
    """Convert snake_case or camelCase to PascalCase."""
    return "".join(word.capitalize() for word in snake_case(name).split("_"))


def upper_case(name: str) -> str:
    """Convert to UPPER_CASE."""
    return snake_case(name).upper()


def safe_identifier(name: str) -> str:
    """Make a name safe for Python by suffixing keywords with underscore."""
    if name in PYTHON_KEYWORDS:
        return f"{name}_"
    return name


def is_safe_identifier(name: str) -> bool:
    return name.isidentifier() and name not in PYTHON_KEYWORDS


def class_name(name: str) -> str:
    """Canonical class name for a GraphQL named type."""
    cleaned = re.sub(r"\W", "_", name)
    if cleaned[:1].isdigit():
        cleaned = f"_{cleaned}"
    if cleaned in IMPORTED_NAMES:
        return f"{cleaned}_"
    return safe_identifier(cleaned)


def safe_docstring(text: str) -> str:
    """Escape text for use in docstrings."""
    if not text:
        return ""
    text = text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    if text.endswith('"'):
        text += " "
    return text


def docstring(text: str | None, indent: str = "") -> list[str]:
    """Render a (possibly multi-line) description as docstring lines."""
    if not text:
        return []
    lines = safe_docstring(text.strip()).splitlines()
    if len(lines) == 1:
        return [f'{indent}"""{lines[0]}"""']
    rendered = [f'{indent}"""{lines[0]}']
    rendered.extend(f"{indent}{line}" if line else "" for line in lines[1:])
    rendered.append(f'{indent}"""')
    return rendered


def module_docstring(title: str, namespace: str | None = None) -> str:
    """Render the namespace line of a generated module."""
    lines = [f'"""{title}', ""]
    if namespace:
        lines.append(f"Package: {namespace}")
        lines.append("")
    lines.append("This file is generated. Do not edit it by hand.")
    lines.append('"""')
    return "\n".join(lines)


def operation_type_name(name: str, operation: str, dedupe_suffix: bool = False) -> str:
    """Result type name of an operation: ``Add`` + ``query`` -> ``AddQuery``."""
    base = pascal_case(name)
    suffix = pascal_case(operation)
    if dedupe_suffix and base.endswith(suffix):
        return base
    return f"{base}{suffix}"


def fragment_type_name(name: str) -> str:
    return f"{pascal_case(name)}Fragment"


def document_variable_name(name: str) -> str:
    """Name of the constant holding an operation document."""
    return f"{upper_case(name)}_DOCUMENT"


def _package_segment(segment: str) -> str:
    cleaned = re.sub(r"\W", "_", segment)
    if cleaned[:1].isdigit():
        cleaned = f"_{cleaned}"
    return safe_identifier(cleaned)


def default_namespace(output_path: str) -> str:
    """Derive the dotted package name of a generated module from its path.

    ``src/myapp/graphql/sdk.py`` becomes ``myapp.graphql``. A path without a
    directory component yields ``DEFAULT_NAMESPACE``.

    Raises:
        ConfigError: The path is empty, names a directory, or walks above
            its root, so no package can be derived from it.
    """
    if not output_path or not str(output_path).strip():
        raise ConfigError("Output path is empty; cannot derive a package name")

    path = str(output_path).replace("\\", "/")
    if path.endswith("/"):
        raise ConfigError(
            f"Output path {output_path!r} names a directory, not a file"
        )

    directory = posixpath.dirname(posixpath.normpath(path))
    segments = [s for s in directory.split("/") if s and s != "."]
    if ".." in segments:
        raise ConfigError(
            f"Output path {output_path!r} leaves its root directory; "
            "cannot derive a package name"
        )
    if segments and segments[0] == "src":
        segments = segments[1:]
    if not segments:
        return DEFAULT_NAMESPACE
    return ".".join(_package_segment(s) for s in segments)


def resolve_module(module: str, namespace: str) -> str:
    """Resolve a relative module path (``.models``) against a package."""
    if not module.startswith("."):
        return module
    try:
        return importlib.util.resolve_name(module, namespace)
    except ImportError as e:
        raise ConfigError(
            f"Cannot resolve module {module!r} relative to {namespace!r}: {e}"
        ) from e


class NameAllocator:
    """Hands out unique names within one generated module.

    The first request for a name gets it unchanged; later requests get a
    numeric suffix (``User``, ``User2``, ``User3``).
    """

    def __init__(self, reserved=()):
        self._used: set[str] = set(reserved)

    def __contains__(self, name: str) -> bool:
        return name in self._used

    def reserve(self, name: str):
        self._used.add(name)

    def allocate(self, name: str) -> str:
        candidate = name
        index = 2
        while candidate in self._used:
            candidate = f"{name}{index}"
            index += 1
        self._used.add(candidate)
        return candidate
