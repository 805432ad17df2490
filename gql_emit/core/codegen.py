"""Generation driver: runs plugins and assembles one output module.

Example:
    from gql_emit.core import codegen, load_documents, load_schema

    content = codegen(
        load_schema("schema.graphql"),
        load_documents(["queries/*.graphql"]),
        plugins=["schema-types", "operation-types", "client"],
        output_file="src/app/graphql/sdk.py",
    )
"""

import ast
import logging
from collections.abc import Callable, Sequence

from graphql import GraphQLSchema

from . import client_generator, operations_generator, resolvers_generator, types_generator
from .assembler import GeneratedUnit, combine
from .config import GeneratorConfig, load_config
from .errors import CodegenError, ConfigError
from .hooks import HookRunner
from .loader import DocumentFile

logger = logging.getLogger(__name__)

Builder = Callable[..., GeneratedUnit]

# Plugin name -> unit builder, in the order plugins are usually combined
PLUGINS: dict[str, Builder] = {
    "schema-types": types_generator.build,
    "operation-types": operations_generator.build,
    "client": client_generator.build,
    "resolvers": resolvers_generator.build,
}


def codegen(
    schema: GraphQLSchema,
    documents: Sequence[DocumentFile] = (),
    plugins: Sequence[str] = ("resolvers",),
    config: GeneratorConfig | dict | str | None = None,
    output_file: str = "generated.py",
    hooks: HookRunner | None = None,
) -> str:
    """Generate one module by running ``plugins`` in order.

    Each plugin works with its own generator and import registry; the
    registries are merged into a single import block and the bodies follow
    each other in plugin order.

    Raises:
        ConfigError: Unknown plugin or invalid configuration.
        CodegenError: The generated module is not valid Python.
    """
    if not plugins:
        raise ConfigError("At least one plugin is required")
    unknown = [p for p in plugins if p not in PLUGINS]
    if unknown:
        raise ConfigError(
            f"Unknown plugins: {', '.join(unknown)} "
            f"(available: {', '.join(PLUGINS)})"
        )

    config = load_config(config)
    units = []
    for name in plugins:
        logger.debug("Running plugin %s for %s", name, output_file)
        units.append(PLUGINS[name](schema, list(documents), config, output_file))

    content = combine(units)
    if hooks is not None:
        content = hooks.run_post_hooks(output_file, content)

    try:
        ast.parse(content)
    except SyntaxError as e:
        raise CodegenError(f"Generated invalid Python for {output_file}: {e}") from e
    return content
