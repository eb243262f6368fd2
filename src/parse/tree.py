"""Syntax-tree node types for Daedalus sources.

One dataclass per grammar production. Every node exposes ``line`` (1-based
line of its first token) and ``iter_children()`` for generic traversal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass(frozen=True)
class Name:
    """Identifier token as written in source."""

    text: str
    line: int

    @property
    def upper(self) -> str:
        return self.text.upper()


class Node:
    line: int

    def iter_children(self) -> Iterator[Node]:
        return iter(())


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


@dataclass
class Literal(Node):
    kind: str
    value: str
    line: int


@dataclass
class Reference(Node):
    """Dotted identifier chain, e.g. ``self.attribute[ATR_HITPOINTS]``."""

    parts: list[Name]
    indices: list[Node] = field(default_factory=list)

    @property
    def line(self) -> int:  # type: ignore[override]
        return self.parts[0].line

    @property
    def dotted(self) -> str:
        return ".".join(part.text for part in self.parts)

    def iter_children(self) -> Iterator[Node]:
        yield from self.indices


@dataclass
class FuncCall(Node):
    name: Name
    args: list[Node] = field(default_factory=list)

    @property
    def line(self) -> int:  # type: ignore[override]
        return self.name.line

    def iter_children(self) -> Iterator[Node]:
        yield from self.args


@dataclass
class UnaryOp(Node):
    op: str
    operand: Node
    line: int

    def iter_children(self) -> Iterator[Node]:
        yield self.operand


@dataclass
class BinaryOp(Node):
    op: str
    left: Node
    right: Node
    line: int

    def iter_children(self) -> Iterator[Node]:
        yield self.left
        yield self.right


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


@dataclass
class Block(Node):
    statements: list[Node]
    line: int

    def iter_children(self) -> Iterator[Node]:
        yield from self.statements


@dataclass
class Assignment(Node):
    target: Node
    op: str
    value: Node
    line: int

    def iter_children(self) -> Iterator[Node]:
        yield self.target
        yield self.value


@dataclass
class Return(Node):
    value: Node | None
    line: int

    def iter_children(self) -> Iterator[Node]:
        if self.value is not None:
            yield self.value


@dataclass
class If(Node):
    """``if`` chain: one (condition, block) pair per ``if``/``else if``."""

    branches: list[tuple[Node, Block]]
    otherwise: Block | None
    line: int

    def iter_children(self) -> Iterator[Node]:
        for condition, block in self.branches:
            yield condition
            yield block
        if self.otherwise is not None:
            yield self.otherwise


@dataclass
class ExpressionStatement(Node):
    expression: Node
    line: int

    def iter_children(self) -> Iterator[Node]:
        yield self.expression


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


@dataclass
class ConstDef(Node):
    """Constant value or array definition (``const int X[2] = {0, 1}``)."""

    name: Name
    type_name: Name
    values: list[Node]
    size: Node | None = None

    @property
    def line(self) -> int:  # type: ignore[override]
        return self.name.line

    def iter_children(self) -> Iterator[Node]:
        if self.size is not None:
            yield self.size
        yield from self.values


@dataclass
class VarDecl(Node):
    """Variable value or array declaration (``var int x[3]``)."""

    name: Name
    type_name: Name
    size: Node | None = None

    @property
    def line(self) -> int:  # type: ignore[override]
        return self.name.line

    def iter_children(self) -> Iterator[Node]:
        if self.size is not None:
            yield self.size


@dataclass
class ParamDecl(Node):
    name: Name
    type_name: Name
    size: Node | None = None

    @property
    def line(self) -> int:  # type: ignore[override]
        return self.name.line

    def iter_children(self) -> Iterator[Node]:
        if self.size is not None:
            yield self.size


@dataclass
class DeclarationList(Node):
    """Comma list of declarations sharing one statement (``var int a, b;``)."""

    declarations: list[Node]
    line: int

    def iter_children(self) -> Iterator[Node]:
        yield from self.declarations


@dataclass
class ClassDef(Node):
    name: Name
    members: list[Node]

    @property
    def line(self) -> int:  # type: ignore[override]
        return self.name.line

    def iter_children(self) -> Iterator[Node]:
        yield from self.members


@dataclass
class PrototypeDef(Node):
    name: Name
    parent: Name
    body: Block

    @property
    def line(self) -> int:  # type: ignore[override]
        return self.name.line

    def iter_children(self) -> Iterator[Node]:
        yield self.body


@dataclass
class InstanceDef(Node):
    name: Name
    parent: Name
    body: Block

    @property
    def line(self) -> int:  # type: ignore[override]
        return self.name.line

    def iter_children(self) -> Iterator[Node]:
        yield self.body


@dataclass
class InstanceDecl(Node):
    """Forward declaration of one or more instances without a body."""

    names: list[Name]
    parent: Name

    @property
    def line(self) -> int:  # type: ignore[override]
        return self.names[0].line


@dataclass
class FunctionDef(Node):
    name: Name
    return_type: Name
    params: list[ParamDecl]
    body: Block

    @property
    def line(self) -> int:  # type: ignore[override]
        return self.name.line

    def iter_children(self) -> Iterator[Node]:
        yield from self.params
        yield self.body


@dataclass
class DaedalusFile(Node):
    definitions: list[Node]
    errors: list[str] = field(default_factory=list)
    line: int = 1

    def iter_children(self) -> Iterator[Node]:
        yield from self.definitions


__all__ = [
    "Assignment",
    "BinaryOp",
    "Block",
    "ClassDef",
    "ConstDef",
    "DaedalusFile",
    "DeclarationList",
    "ExpressionStatement",
    "FuncCall",
    "FunctionDef",
    "If",
    "InstanceDecl",
    "InstanceDef",
    "Literal",
    "Name",
    "Node",
    "ParamDecl",
    "PrototypeDef",
    "Reference",
    "Return",
    "UnaryOp",
    "VarDecl",
]
