"""Symbol and violation models shared by the parser, resolver and rules."""

from __future__ import annotations

from pydantic import BaseModel, Field

SCOPE_SEPARATOR = "."


class Symbol(BaseModel):
    """A script-level declaration.

    ``name`` is the upper-cased, dot-joined qualified name. ``source_file``
    is the patch-relative path of the declaring file, or ``""`` for
    built-in and external-framework symbols.
    """

    name: str
    source_file: str = Field(
        default="", description="Patch-relative file path, empty if external"
    )
    line: int = Field(default=0, description="1-based line, 0 for synthetic")

    @property
    def in_patch(self) -> bool:
        return self.source_file != ""

    @property
    def is_global(self) -> bool:
        return SCOPE_SEPARATOR not in self.name


class Reference(Symbol):
    """A use-site of an identifier (call, expression, parent type)."""


class ResourceViolation(BaseModel):
    """A resource file with a disallowed extension or an unprefixed name."""

    file: str
    name: str
    line: int = 0


SymbolTable = list[Symbol]
ReferenceTable = list[Reference]

__all__ = [
    "SCOPE_SEPARATOR",
    "Reference",
    "ReferenceTable",
    "ResourceViolation",
    "Symbol",
    "SymbolTable",
]
