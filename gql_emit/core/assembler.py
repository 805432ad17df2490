"""Assembly of generated fragments into the text of one module."""

import enum
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

from .imports import ImportRegistry

SECTION_SEPARATOR = "\n\n\n"


class AssemblyMode(enum.Enum):
    """How body fragments are laid out in the final module."""
    # All fragments inside one enclosing class
    WRAPPED = "wrapped"
    # Fragments and composed extras at module level
    MODULE = "module"


def assemble(
    header: str | None,
    imports: Sequence[str],
    body: Sequence[str],
    extras: Iterable[str] = (),
    wrap: Callable[[str], str] | None = None,
) -> str:
    """Concatenate a module in fixed order: header, imports, body, extras.

    Args:
        header: Module docstring carrying the namespace, or None
        imports: Rendered import statements
        body: Fragments in visit order; never reordered or deduplicated
        extras: Composite blocks rendered after the walk
        wrap: Encloses the joined body in one declaration (wrapped mode)
    """
    sections = []
    if header:
        sections.append(header)
    if imports:
        sections.append("\n".join(imports))
    fragments = [f for f in body if f]
    if wrap is not None:
        sections.append(wrap("\n\n".join(fragments)))
    else:
        sections.extend(fragments)
    sections.extend(e for e in extras if e)
    return SECTION_SEPARATOR.join(s.strip("\n") for s in sections) + "\n"


@dataclass
class GeneratedUnit:
    """What one generator produced for one output unit."""
    header: str | None
    imports: ImportRegistry
    body: list[str] = field(default_factory=list)
    extras: list[str] = field(default_factory=list)
    wrap: Callable[[str], str] | None = None

    @property
    def mode(self) -> AssemblyMode:
        return AssemblyMode.WRAPPED if self.wrap else AssemblyMode.MODULE

    def render(self) -> str:
        return assemble(
            self.header, self.imports.render(), self.body, self.extras, self.wrap
        )


def combine(units: Sequence[GeneratedUnit]) -> str:
    """Assemble several units into one module with a single import block.

    Imports are merged in unit order (see ``ImportRegistry.merge``); each unit's body
    keeps its own layout and the units follow each other in order.
    """
    if not units:
        return ""
    registry = ImportRegistry(units[0].imports.use_type_imports)
    header = None
    body: list[str] = []
    extras: list[str] = []
    for unit in units:
        registry.merge(unit.imports)
        header = header or unit.header
        fragments = [f for f in unit.body if f]
        if unit.wrap is not None:
            body.append(unit.wrap("\n\n".join(fragments)))
        else:
            body.extend(fragments)
        extras.extend(unit.extras)
    return assemble(header, registry.render(), body, extras)
