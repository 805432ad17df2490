"""Post-processing of generated modules.

``codegen`` hands the assembled text of a module to every registered hook,
in registration order, and checks the final text with ``ast.parse``:

    from gql_emit.core import AddHeaderHook, HookRunner, codegen

    hooks = HookRunner([AddHeaderHook("# Generated by gql-emit, do not edit")])
    content = codegen(schema, documents, ["client"], hooks=hooks)

Any object with a ``post_generate(filename, content)`` method is a hook.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class PostGenerateHook(Protocol):
    """Transforms the text of one generated module.

    ``filename`` is the output path given to ``codegen``; the module has
    not been written yet when hooks run.
    """

    def post_generate(self, filename: str, content: str) -> str:
        ...


class AddHeaderHook:
    """Prepends a comment block, separated from the module by a blank line."""

    def __init__(self, header: str):
        self.header = header.rstrip("\n")

    def post_generate(self, _filename: str, content: str) -> str:
        return f"{self.header}\n\n{content}"


class HookRunner:
    """Ordered collection of post-generation hooks."""

    def __init__(self, post_hooks: list[PostGenerateHook] | None = None):
        self.post_hooks: list[PostGenerateHook] = []
        for hook in post_hooks or ():
            self.add_post_hook(hook)

    def add_post_hook(self, hook: PostGenerateHook):
        if not isinstance(hook, PostGenerateHook):
            raise TypeError(f"{hook!r} has no post_generate(filename, content) method")
        self.post_hooks.append(hook)

    def run_post_hooks(self, filename: str, content: str) -> str:
        for hook in self.post_hooks:
            content = hook.post_generate(filename, content)
        return content
