"""Loading of schema and operation documents from disk."""

import glob
import logging
import os
from dataclasses import dataclass

from graphql import DocumentNode, GraphQLSchema, Source, build_ast_schema, concat_ast, parse

from .errors import CodegenError

logger = logging.getLogger(__name__)

SCHEMA_EXTENSIONS = (".graphql", ".graphqls", ".gql")


@dataclass
class DocumentFile:
    """One parsed operation document."""
    location: str
    document: DocumentNode
    raw_sdl: str | None = None

    @classmethod
    def from_string(cls, source: str, location: str = "inline.graphql") -> "DocumentFile":
        return cls(location, parse(Source(source, location)), source)


def _collect_schema_files(schema_path: str) -> list[str]:
    """Collect schema files from a file or directory path."""
    files = []
    if os.path.isfile(schema_path):
        files.append(schema_path)
    else:
        for root, _, filenames in os.walk(schema_path):
            for filename in filenames:
                if filename.endswith(SCHEMA_EXTENSIONS):
                    files.append(os.path.join(root, filename))
    return sorted(files)


def _build_schema(document: DocumentNode, location: str) -> GraphQLSchema:
    try:
        return build_ast_schema(document)
    except TypeError as e:
        # graphql-core reports SDL validation errors as TypeError
        raise CodegenError(f"Invalid schema {location}: {e}") from e


def build_schema_from_sdl(sdl: str, location: str = "schema.graphql") -> GraphQLSchema:
    return _build_schema(parse(Source(sdl, location)), location)


def load_schema(schema_path: str) -> GraphQLSchema:
    """Parse every schema file under ``schema_path`` into one schema.

    Raises:
        FileNotFoundError: No schema file was found.
        graphql.GraphQLError: A file does not parse.
        CodegenError: The parsed definitions do not form a valid schema.
    """
    schema_files = _collect_schema_files(schema_path)
    if not schema_files:
        raise FileNotFoundError(f"No GraphQL schema files found in {schema_path}")

    documents = []
    for file_path in schema_files:
        logger.debug("Parsing schema file %s", file_path)
        with open(file_path) as f:
            documents.append(parse(Source(f.read(), file_path)))
    return _build_schema(concat_ast(documents), schema_path)


def load_documents(patterns: list[str]) -> list[DocumentFile]:
    """Parse the operation documents matching the given glob patterns."""
    paths: list[str] = []
    for pattern in patterns:
        matches = sorted(glob.glob(pattern, recursive=True)) or [pattern]
        for path in matches:
            if path not in paths:
                paths.append(path)

    documents = []
    for path in paths:
        logger.debug("Parsing document %s", path)
        with open(path) as f:
            content = f.read()
        documents.append(DocumentFile(path, parse(Source(content, path)), content))
    return documents


def merge_documents(documents: list[DocumentFile]) -> DocumentNode:
    """Merge all documents so fragments can be used across files."""
    return concat_ast([d.document for d in documents])
