"""Import bookkeeping for generated modules.

Generators record every symbol they reference while visiting the AST; the
registry deduplicates the records and renders them as Python import
statements once the walk is over.

Example:
    registry = ImportRegistry()
    registry.record("Optional", "typing")
    registry.record("BaseModel", "pydantic")
    registry.record("Optional", "typing")  # no-op
    registry.render()
    # ['from typing import Optional', 'from pydantic import BaseModel']
"""

import enum
from collections.abc import Iterable
from dataclasses import dataclass, replace

MAX_LINE_LENGTH = 79

# Symbol used for imports of a whole module (``import httpx``)
MODULE = "."


class ImportKind(enum.Enum):
    """Whether an imported symbol is needed at runtime or only for typing."""
    TYPE = "type"
    VALUE = "value"


@dataclass(frozen=True)
class ImportEntry:
    """A single recorded import."""
    symbol: str
    module: str
    kind: ImportKind = ImportKind.VALUE
    alias: str | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.symbol, self.module)

    @property
    def local_name(self) -> str:
        if self.alias:
            return self.alias
        if self.symbol == MODULE:
            return self.module
        return self.symbol


class ImportRegistry:
    """Accumulates imports for one generated module.

    Entries are keyed by ``(symbol, module)``. Recording a key again is a
    no-op: the first recorded kind and alias win.
    """

    def __init__(self, use_type_imports: bool = False):
        self.use_type_imports = use_type_imports
        self._entries: dict[tuple[str, str], ImportEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries.values())

    def __contains__(self, key: tuple[str, str]) -> bool:
        return key in self._entries

    def get(self, symbol: str, module: str) -> ImportEntry | None:
        return self._entries.get((symbol, module))

    def record(
        self,
        symbol: str,
        module: str,
        kind: ImportKind = ImportKind.VALUE,
        alias: str | None = None,
    ) -> str:
        """Record ``from module import symbol`` and return the local name."""
        entry = self._entries.setdefault(
            (symbol, module), ImportEntry(symbol, module, kind, alias)
        )
        return entry.local_name

    def record_module(
        self,
        module: str,
        alias: str | None = None,
        kind: ImportKind = ImportKind.VALUE,
    ) -> str:
        """Record an import of a whole module and return the local name."""
        return self.record(MODULE, module, kind, alias)

    def record_all(
        self,
        pairs: Iterable[tuple[str, str]],
        kind: ImportKind = ImportKind.VALUE,
    ):
        """Record ``(symbol, module)`` pairs with a common kind."""
        for symbol, module in pairs:
            self.record(symbol, module, kind)

    def merge(self, other: "ImportRegistry"):
        """Record every entry of another registry, in its order.

        The first alias wins, but a symbol ``other`` needs at runtime is
        kept as ``ImportKind.VALUE`` even if this registry recorded it as
        type-only.
        """
        for entry in other:
            existing = self._entries.get(entry.key)
            if existing is None:
                self._entries[entry.key] = entry
            elif existing.kind is ImportKind.TYPE and entry.kind is ImportKind.VALUE:
                self._entries[entry.key] = replace(existing, kind=ImportKind.VALUE)

    def render(self) -> list[str]:
        """Render the recorded imports as import statements.

        Modules keep their first-insertion order, and so do the symbols of a
        module. With ``use_type_imports``, modules whose symbols are all
        ``ImportKind.TYPE`` go into a single ``if TYPE_CHECKING:`` block.
        """
        by_module: dict[str, list[ImportEntry]] = {}
        for entry in self._entries.values():
            by_module.setdefault(entry.module, []).append(entry)

        runtime: dict[str, list[ImportEntry]] = {}
        typecheck: dict[str, list[ImportEntry]] = {}
        for module, entries in by_module.items():
            if self.use_type_imports and all(
                e.kind is ImportKind.TYPE for e in entries
            ):
                typecheck[module] = entries
            else:
                runtime[module] = entries

        if typecheck:
            tc = ImportEntry("TYPE_CHECKING", "typing")
            if not any(e.key == tc.key for e in runtime.get("typing", [])):
                runtime.setdefault("typing", []).append(tc)

        # __future__ imports must precede every other statement
        modules = sorted(runtime, key=lambda m: m != "__future__")
        lines = []
        for module in modules:
            lines.extend(_render_module(module, runtime[module]))

        if typecheck:
            block = ["if TYPE_CHECKING:"]
            for module, entries in typecheck.items():
                for line in _render_module(module, entries):
                    block.extend(f"    {part}" for part in line.splitlines())
            lines.append("\n".join(block))

        return lines


def _render_module(module: str, entries: list[ImportEntry]) -> list[str]:
    lines = []
    names = []
    for entry in entries:
        if entry.symbol == MODULE:
            lines.append(_render_module_import(module, entry.alias))
        elif entry.alias and entry.alias != entry.symbol:
            names.append(f"{entry.symbol} as {entry.alias}")
        else:
            names.append(entry.symbol)

    if names:
        line = f"from {module} import {', '.join(names)}"
        if len(line) > MAX_LINE_LENGTH:
            line = (
                f"from {module} import (\n    "
                + ",\n    ".join(names)
                + ",\n)"
            )
        lines.append(line)
    return lines


def _render_module_import(module: str, alias: str | None) -> str:
    if module.startswith("."):
        depth = len(module) - len(module.lstrip("."))
        relative, rest = module[:depth], module[depth:]
        package, _, name = rest.rpartition(".")
        line = f"from {relative}{package} import {name}"
        if alias and alias != name:
            line += f" as {alias}"
        return line
    if alias:
        return f"import {module} as {alias}"
    return f"import {module}"
