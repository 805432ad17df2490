"""gql-emit: GraphQL code generator for Python."""

__version__ = "0.1.0"
