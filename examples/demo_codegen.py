#!/usr/bin/env python3
"""Demonstration of the typed operation client.

This script shows how to:
1. Build a schema and an operation document in memory
2. Generate a module with schema types, operation types and a client
3. Load the generated module and call an operation against a mock endpoint

Note: This demo doesn't make real API calls - httpx.MockTransport answers
every request locally.
"""

import asyncio
import json
import sys
import types

import httpx

from gql_emit.core import DocumentFile, build_schema_from_sdl, codegen

SCHEMA = """
type Query {
  add(x: Int!, y: Int!): Int!
}
"""

OPERATION = """
query Add($x: Int!, $y: Int!) {
  add(x: $x, y: $y)
}
"""


def handler(request: httpx.Request) -> httpx.Response:
    variables = json.loads(request.content)["variables"]
    return httpx.Response(200, json={"data": {"add": variables["x"] + variables["y"]}})


async def call(module, x: int, y: int):
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        client = module.GraphQLClient("https://example.com/graphql", http)
        return await module.Add(client, {"x": x, "y": y})


def main():
    print("=== Typed GraphQL Client Demo ===\n")

    print("1. Generating client module...")
    code = codegen(
        build_schema_from_sdl(SCHEMA),
        [DocumentFile.from_string(OPERATION, "add.graphql")],
        plugins=["schema-types", "operation-types", "client"],
        output_file="demo/sdk.py",
    )
    print(f"   Generated {len(code.splitlines())} lines\n")

    print("2. Loading generated module...")
    module = types.ModuleType("demo_sdk")
    sys.modules[module.__name__] = module
    exec(compile(code, "demo/sdk.py", "exec"), module.__dict__)

    print("3. Calling Add(2, 3)...")
    response = asyncio.run(call(module, 2, 3))
    print(f"   status={response.status_code} data={response.data!r}")


if __name__ == "__main__":
    main()
