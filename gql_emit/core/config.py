"""Configuration for code generation.

Raw configuration (a mapping or a JSON file) is validated into a typed
``GeneratorConfig``. Keys may be written in snake_case or camelCase:

    {
        "scalars": {"Money": "decimal.Decimal"},
        "useTypeImports": true,
        "documentMode": "documentNode"
    }
"""

import enum
import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from .errors import ConfigError


class DocumentMode(str, enum.Enum):
    """How operation documents are carried by generated client code."""
    # Documents embedded as string literals
    STRING = "string"
    # Documents embedded as parsed graphql-core DocumentNode objects
    DOCUMENT_NODE = "documentNode"
    # Documents imported from another module
    EXTERNAL = "external"


class GeneratorConfig(BaseModel):
    """Options shared by every generation module."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )

    # Scalar name -> Python type ("decimal.Decimal", "pkg.mod:Name", "str")
    scalars: dict[str, str] = {}
    # Put imports only needed by annotations under `if TYPE_CHECKING:`
    use_type_imports: bool = False
    # Module the client imports operation result/variables types from
    import_operation_types_from: str | None = None
    # Module resolvers and operation types import schema types from
    import_types_from: str | None = None
    document_mode: DocumentMode = DocumentMode.STRING
    # Module holding the document constants when document_mode is external
    import_documents_from: str | None = None

    # Resolvers: package override, enclosing class, type mappers
    package: str | None = None
    class_name: str = "Resolvers"
    mappers: dict[str, str] = {}
    async_resolvers: bool = False

    # Schema and operation types
    skip_typename: bool = False
    dedupe_operation_suffix: bool = False


def load_config(
    source: GeneratorConfig | Mapping[str, Any] | str | Path | None = None,
) -> GeneratorConfig:
    """Build a GeneratorConfig from a mapping or a JSON file path.

    Raises:
        ConfigError: The file cannot be read or the options are invalid.
    """
    if source is None:
        return GeneratorConfig()
    if isinstance(source, GeneratorConfig):
        return source

    if isinstance(source, (str, Path)):
        path = Path(source)
        try:
            with open(path) as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Error loading config file {path}: {e}") from e
    else:
        raw = source

    if not isinstance(raw, Mapping):
        raise ConfigError("Configuration must be a mapping of options")
    try:
        return GeneratorConfig.model_validate(dict(raw))
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
