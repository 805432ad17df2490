"""Core modules for GraphQL code generation."""

from .assembler import AssemblyMode, GeneratedUnit, assemble, combine
from .client_generator import ClientGenerator, PendingOperation
from .codegen import PLUGINS, codegen
from .config import DocumentMode, GeneratorConfig, load_config
from .errors import CodegenError, ConfigError
from .hooks import AddHeaderHook, HookRunner, PostGenerateHook
from .imports import ImportEntry, ImportKind, ImportRegistry
from .loader import (
    DocumentFile,
    build_schema_from_sdl,
    load_documents,
    load_schema,
    merge_documents,
)
from .naming import DEFAULT_NAMESPACE, NameAllocator, default_namespace
from .operations_generator import OperationsGenerator
from .resolvers_generator import ResolversGenerator
from .scalars import ScalarMapping, ScalarRegistry
from .traversal import CallbackTable, schema_document, traverse
from .type_mapper import ResolvedType, TypeMapper
from .types_generator import TypesGenerator

__all__ = [
    # Driver
    "PLUGINS",
    "codegen",
    # Generators
    "ClientGenerator",
    "OperationsGenerator",
    "PendingOperation",
    "ResolversGenerator",
    "TypesGenerator",
    # Building blocks
    "AssemblyMode",
    "CallbackTable",
    "GeneratedUnit",
    "ImportEntry",
    "ImportKind",
    "ImportRegistry",
    "NameAllocator",
    "ResolvedType",
    "TypeMapper",
    "assemble",
    "combine",
    "default_namespace",
    "schema_document",
    "traverse",
    "DEFAULT_NAMESPACE",
    # Scalars
    "ScalarMapping",
    "ScalarRegistry",
    # Configuration
    "DocumentMode",
    "GeneratorConfig",
    "load_config",
    # Loading
    "DocumentFile",
    "build_schema_from_sdl",
    "load_documents",
    "load_schema",
    "merge_documents",
    # Hooks
    "AddHeaderHook",
    "HookRunner",
    "PostGenerateHook",
    # Errors
    "CodegenError",
    "ConfigError",
]
