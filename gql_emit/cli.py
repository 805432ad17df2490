"""Command-line interface for gql-emit."""

import logging
from pathlib import Path

import click
from graphql import GraphQLError

from .core.codegen import PLUGINS, codegen
from .core.errors import CodegenError
from .core.hooks import AddHeaderHook, HookRunner
from .core.loader import load_documents, load_schema

CLIENT_PLUGINS = ("schema-types", "operation-types", "client")


def common_options(func):
    """Options shared by every generation command."""
    options = [
        click.option(
            "--schema",
            "-s",
            required=True,
            type=click.Path(exists=True),
            help="Path to a GraphQL schema file or a directory of schema files.",
        ),
        click.option(
            "--output",
            "-o",
            required=True,
            type=click.Path(dir_okay=False),
            help="Output module; its directory names the generated package.",
        ),
        click.option(
            "--config",
            "-c",
            type=click.Path(exists=True, dir_okay=False),
            help="JSON file with generation options.",
        ),
        click.option(
            "--header",
            help="Comment added at the top of the generated module.",
        ),
        click.option(
            "--verbose",
            "-v",
            is_flag=True,
            help="Enable verbose output.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def documents_option(required: bool):
    return click.option(
        "--documents",
        "-d",
        multiple=True,
        required=required,
        help="Operation documents (glob patterns allowed). Repeatable.",
    )


def _run(
    schema: str,
    documents: tuple[str, ...],
    output: str,
    plugins: tuple[str, ...],
    config: str | None,
    header: str | None,
    verbose: bool,
):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    output_path = Path(output)

    if verbose:
        click.echo(f"Schema: {schema}")
        click.echo(f"Plugins: {', '.join(plugins)}")
        click.echo(f"Output: {output_path}")

    hooks = HookRunner()
    if header:
        hooks.add_post_hook(AddHeaderHook(header))

    try:
        click.echo("Parsing schema...")
        graphql_schema = load_schema(schema)
        docs = load_documents(list(documents)) if documents else []
        if verbose:
            click.echo(f"  Types: {len(graphql_schema.type_map)}")
            click.echo(f"  Documents: {len(docs)}")

        click.echo("Generating code...")
        code = codegen(graphql_schema, docs, plugins, config, output, hooks)
    except (CodegenError, GraphQLError, OSError) as e:
        raise click.ClickException(str(e)) from e

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        f.write(code)

    click.echo(f"Done! Generated {output_path}")


@click.group()
@click.version_option(package_name="gql-emit")
def main():
    """GraphQL code generator for Python.

    Generate resolver interfaces, typed models and typed operation clients
    from GraphQL schemas and documents.
    """
    pass


@main.command()
@common_options
@documents_option(required=False)
@click.option(
    "--plugin",
    "-p",
    "plugins",
    multiple=True,
    required=True,
    type=click.Choice(list(PLUGINS)),
    help="Plugin to run. Repeatable; outputs are combined in the given order.",
)
def generate(schema, documents, output, plugins, config, header, verbose):
    """Generate one module from any combination of plugins.

    Examples:

        gql-emit generate -s schema.graphql -o src/app/resolvers.py -p resolvers

        gql-emit generate -s ./schema -d "queries/*.graphql" -o sdk.py \\
            -p schema-types -p operation-types -p client
    """
    _run(schema, documents, output, plugins, config, header, verbose)


@main.command()
@common_options
@documents_option(required=True)
def client(schema, documents, output, config, header, verbose):
    """Generate a typed operation client with its models.

    Examples:

        gql-emit client -s schema.graphql -d "queries/**/*.graphql" -o src/app/sdk.py
    """
    _run(schema, documents, output, CLIENT_PLUGINS, config, header, verbose)


@main.command()
@common_options
def resolvers(schema, output, config, header, verbose):
    """Generate resolver interfaces for a schema.

    Examples:

        gql-emit resolvers -s ./schema -o src/app/graphql/resolvers.py
    """
    _run(schema, (), output, ("resolvers",), config, header, verbose)


if __name__ == "__main__":
    main()
