"""Symbol and reference table construction from Daedalus syntax trees."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from contract.models import SCOPE_SEPARATOR, Reference, Symbol
from parse.parser import parse_to_tree
from parse.tree import (
    Block,
    ClassDef,
    ConstDef,
    FuncCall,
    FunctionDef,
    InstanceDecl,
    InstanceDef,
    ParamDecl,
    PrototypeDef,
    VarDecl,
)
from parse.tree import Reference as ReferenceNode

if TYPE_CHECKING:
    from parse.tree import Name, Node

# Data types without members; declarations of these never inherit fields.
PRIMITIVE_TYPES = frozenset({"INT", "FLOAT", "STRING", "FUNC", "VOID", "INSTANCE"})


@dataclass(frozen=True)
class _Scope:
    """Immutable traversal context threaded through recursive calls."""

    name: str = ""
    line: int = 0

    def qualify(self, name: str) -> str:
        if self.name:
            return f"{self.name}{SCOPE_SEPARATOR}{name}".upper()
        return name.upper()

    def enter(self, name: str) -> _Scope:
        return replace(self, name=self.qualify(name))

    def at(self, line: int) -> _Scope:
        return replace(self, line=line)


@dataclass
class _Tables:
    file: str
    symbols: list[Symbol]
    references: list[Reference]

    def declare(self, name: str, line: int) -> None:
        self.symbols.append(Symbol(name=name, source_file=self.file, line=line))

    def refer(self, name: str, line: int) -> None:
        self.references.append(Reference(name=name, source_file=self.file, line=line))

    def inherit(self, base: str, target: str, line: int) -> None:
        """Clone every ``<BASE>.<member>`` symbol as ``<TARGET>.<member>``."""
        prefix = f"{base.upper()}{SCOPE_SEPARATOR}"
        members = [s.name[len(prefix) :] for s in self.symbols if s.name.startswith(prefix)]
        for member in members:
            self.declare(f"{target}{SCOPE_SEPARATOR}{member}", line)


def _declare_typed(tables: _Tables, scope: _Scope, name: Name, type_name: Name) -> None:
    qualified = scope.qualify(name.text)
    tables.declare(qualified, name.line)
    if type_name.upper not in PRIMITIVE_TYPES:
        tables.inherit(type_name.upper, qualified, name.line)


def _handle_scoped_definition(node: Node, tables: _Tables, scope: _Scope) -> None:
    """Class, prototype, instance and function definitions."""
    name: Name = node.name  # type: ignore[attr-defined]
    qualified = scope.qualify(name.text)
    tables.declare(qualified, name.line)
    inner = scope.enter(name.text).at(name.line)

    if isinstance(node, (PrototypeDef, InstanceDef)):
        tables.refer(scope.qualify(node.parent.text), node.parent.line)
        tables.inherit(node.parent.upper, qualified, node.parent.line)

    for child in node.iter_children():
        _traverse(child, tables, inner)


def _handle_instance_decl(node: InstanceDecl, tables: _Tables, scope: _Scope) -> None:
    tables.refer(scope.qualify(node.parent.text), node.parent.line)
    for name in node.names:
        qualified = scope.qualify(name.text)
        tables.declare(qualified, name.line)
        tables.inherit(node.parent.upper, qualified, node.parent.line)


def _traverse_block(block: Block, tables: _Tables, scope: _Scope) -> None:
    for statement in block.statements:
        _traverse(statement, tables, scope.at(statement.line))


def _traverse(node: Node, tables: _Tables, scope: _Scope) -> None:
    """Visit ``node`` in source order, appending to the tables."""
    if isinstance(node, (ClassDef, PrototypeDef, InstanceDef, FunctionDef)):
        _handle_scoped_definition(node, tables, scope)
        return

    if isinstance(node, InstanceDecl):
        _handle_instance_decl(node, tables, scope)
        return

    if isinstance(node, Block):
        _traverse_block(node, tables, scope)
        return

    if isinstance(node, (VarDecl, ParamDecl, ConstDef)):
        _declare_typed(tables, scope, node.name, node.type_name)

    elif isinstance(node, ReferenceNode):
        dotted = SCOPE_SEPARATOR.join(part.text for part in node.parts)
        tables.refer(scope.qualify(dotted), scope.line or node.line)

    elif isinstance(node, FuncCall):
        tables.refer(scope.qualify(node.name.text), scope.line or node.line)

    for child in node.iter_children():
        _traverse(child, tables, scope)


def collect_symbols(
    tree: Node,
    symbols: list[Symbol],
    references: list[Reference],
    file: str = "",
    scope: str = "",
) -> None:
    """Append the declarations and references found in ``tree``.

    Args:
        tree: Parsed file (or any subtree)
        symbols: Symbol table to extend; also read for inheritance propagation
        references: Reference table to extend
        file: Source file tag for all produced entries ("" for external code)
        scope: Qualified name of the enclosing scope
    """
    tables = _Tables(file=file, symbols=symbols, references=references)
    if isinstance(tree, Block):
        _traverse_block(tree, tables, _Scope(name=scope.upper()))
        return
    for definition in tree.iter_children():
        _traverse(definition, tables, _Scope(name=scope.upper(), line=definition.line))


def extract_tables(text: str, file: str = "") -> tuple[list[Symbol], list[Reference]]:
    """Parse ``text`` and return fresh symbol and reference tables."""
    symbols: list[Symbol] = []
    references: list[Reference] = []
    collect_symbols(parse_to_tree(text), symbols, references, file=file)
    return symbols, references


__all__ = ["PRIMITIVE_TYPES", "collect_symbols", "extract_tables"]
