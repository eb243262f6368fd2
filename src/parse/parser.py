"""Recursive-descent parser producing Daedalus syntax trees."""

from __future__ import annotations

import logging

from parse.lexer import EOF, FLOAT, INT, KEYWORDS, NAME, OP, STRING, Token, tokenize
from parse.tree import (
    Assignment,
    BinaryOp,
    Block,
    ClassDef,
    ConstDef,
    DaedalusFile,
    DeclarationList,
    ExpressionStatement,
    FuncCall,
    FunctionDef,
    If,
    InstanceDecl,
    InstanceDef,
    Literal,
    Name,
    Node,
    ParamDecl,
    PrototypeDef,
    Reference,
    Return,
    UnaryOp,
    VarDecl,
)

logger = logging.getLogger(__name__)

ASSIGNMENT_OPS = frozenset({"=", "+=", "-=", "*=", "/="})

# Binary operator precedence, loosest first.
_PRECEDENCE: dict[str, int] = {
    "||": 1,
    "&&": 2,
    "|": 3,
    "&": 4,
    "==": 5,
    "!=": 5,
    "<": 6,
    ">": 6,
    "<=": 6,
    ">=": 6,
    "<<": 7,
    ">>": 7,
    "+": 8,
    "-": 8,
    "*": 9,
    "/": 9,
    "%": 9,
}
_UNARY_OPS = frozenset({"!", "~", "-", "+"})


class DaedalusSyntaxError(Exception):
    """Raised when the token stream does not match the grammar."""

    def __init__(self, message: str, line: int) -> None:
        super().__init__(f"line {line}: {message}")
        self.line = line


class _Parser:
    def __init__(self, text: str) -> None:
        self.tokens: list[Token] = list(tokenize(text))
        self.pos = 0

    # -- token helpers -----------------------------------------------------

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def peek(self, offset: int = 1) -> Token:
        index = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def advance(self) -> Token:
        token = self.current
        if token.kind != EOF:
            self.pos += 1
        return token

    def accept_op(self, text: str) -> bool:
        if self.current.is_op(text):
            self.advance()
            return True
        return False

    def expect_op(self, text: str) -> Token:
        if not self.current.is_op(text):
            msg = f"expected '{text}', found '{self.current.text or 'end of file'}'"
            raise DaedalusSyntaxError(msg, self.current.line)
        return self.advance()

    def expect_keyword(self, keyword: str) -> Token:
        if not self.current.is_keyword(keyword):
            msg = f"expected '{keyword.lower()}', found '{self.current.text}'"
            raise DaedalusSyntaxError(msg, self.current.line)
        return self.advance()

    def expect_name(self) -> Name:
        token = self.current
        if token.kind != NAME or token.upper in KEYWORDS:
            msg = f"expected identifier, found '{token.text or 'end of file'}'"
            raise DaedalusSyntaxError(msg, token.line)
        self.advance()
        return Name(token.text, token.line)

    def expect_type(self) -> Name:
        # Data types include keywords such as ``func`` and ``instance``.
        token = self.current
        if token.kind != NAME:
            msg = f"expected data type, found '{token.text or 'end of file'}'"
            raise DaedalusSyntaxError(msg, token.line)
        self.advance()
        return Name(token.text, token.line)

    def skip_statement(self) -> None:
        """Skip to just past the next ``;`` at the current brace depth.

        Stops before a ``}`` that closes the enclosing block.
        """
        depth = 0
        while self.current.kind != EOF:
            token = self.current
            if token.is_op("{"):
                depth += 1
            elif token.is_op("}"):
                if depth == 0:
                    return
                depth -= 1
            elif token.is_op(";") and depth == 0:
                self.advance()
                return
            self.advance()

    # -- top level ---------------------------------------------------------

    def parse_file(self) -> DaedalusFile:
        tree = DaedalusFile(definitions=[])
        while self.current.kind != EOF:
            if self.accept_op(";"):
                continue
            start = self.pos
            try:
                tree.definitions.append(self.parse_definition())
            except DaedalusSyntaxError as exc:
                logger.debug("Syntax error, skipping definition: %s", exc)
                tree.errors.append(str(exc))
                if self.pos == start:
                    self.advance()
                self.skip_statement()
                if self.current.is_op("}"):
                    self.advance()
        return tree

    def parse_definition(self) -> Node:
        token = self.current
        if token.is_keyword("FUNC"):
            node: Node = self.parse_function()
        elif token.is_keyword("CLASS"):
            node = self.parse_class()
        elif token.is_keyword("PROTOTYPE"):
            node = self.parse_prototype()
        elif token.is_keyword("INSTANCE"):
            node = self.parse_instance()
        elif token.is_keyword("CONST"):
            node = self.parse_const()
        elif token.is_keyword("VAR"):
            node = self.parse_var()
        else:
            msg = f"unexpected '{token.text}' at top level"
            raise DaedalusSyntaxError(msg, token.line)
        self.accept_op(";")
        return node

    def parse_function(self) -> FunctionDef:
        self.expect_keyword("FUNC")
        return_type = self.expect_type()
        name = self.expect_name()
        self.expect_op("(")
        params: list[ParamDecl] = []
        if not self.current.is_op(")"):
            params.append(self.parse_param())
            while self.accept_op(","):
                params.append(self.parse_param())
        self.expect_op(")")
        body = self.parse_block()
        return FunctionDef(name=name, return_type=return_type, params=params, body=body)

    def parse_param(self) -> ParamDecl:
        self.expect_keyword("VAR")
        type_name = self.expect_type()
        name = self.expect_name()
        size = self.parse_array_size()
        return ParamDecl(name=name, type_name=type_name, size=size)

    def parse_class(self) -> ClassDef:
        self.expect_keyword("CLASS")
        name = self.expect_name()
        self.expect_op("{")
        members: list[Node] = []
        while not self.current.is_op("}"):
            if self.current.kind == EOF:
                raise DaedalusSyntaxError("unterminated class", name.line)
            if self.accept_op(";"):
                continue
            members.append(self.parse_var())
            self.expect_op(";")
        self.expect_op("}")
        return ClassDef(name=name, members=members)

    def parse_prototype(self) -> PrototypeDef:
        self.expect_keyword("PROTOTYPE")
        name = self.expect_name()
        parent = self.parse_parent()
        body = self.parse_block()
        return PrototypeDef(name=name, parent=parent, body=body)

    def parse_instance(self) -> InstanceDef | InstanceDecl:
        self.expect_keyword("INSTANCE")
        names = [self.expect_name()]
        while self.accept_op(","):
            names.append(self.expect_name())
        parent = self.parse_parent()
        if len(names) == 1 and self.current.is_op("{"):
            body = self.parse_block()
            return InstanceDef(name=names[0], parent=parent, body=body)
        return InstanceDecl(names=names, parent=parent)

    def parse_parent(self) -> Name:
        self.expect_op("(")
        parent = self.expect_name()
        self.expect_op(")")
        return parent

    def parse_array_size(self) -> Node | None:
        if not self.accept_op("["):
            return None
        size = self.parse_expression()
        self.expect_op("]")
        return size

    def parse_const(self) -> Node:
        line = self.expect_keyword("CONST").line
        type_name = self.expect_type()
        definitions: list[Node] = [self.parse_const_item(type_name)]
        while self.accept_op(","):
            definitions.append(self.parse_const_item(type_name))
        if len(definitions) == 1:
            return definitions[0]
        return DeclarationList(declarations=definitions, line=line)

    def parse_const_item(self, type_name: Name) -> ConstDef:
        name = self.expect_name()
        size = self.parse_array_size()
        self.expect_op("=")
        if size is None:
            return ConstDef(name=name, type_name=type_name, values=[self.parse_expression()])
        self.expect_op("{")
        values = [self.parse_expression()]
        while self.accept_op(","):
            values.append(self.parse_expression())
        self.expect_op("}")
        return ConstDef(name=name, type_name=type_name, values=values, size=size)

    def parse_var(self) -> Node:
        line = self.expect_keyword("VAR").line
        type_name = self.expect_type()
        declarations: list[Node] = [self.parse_var_item(type_name)]
        while self.accept_op(","):
            if self.current.is_keyword("VAR"):
                self.advance()
                type_name = self.expect_type()
            declarations.append(self.parse_var_item(type_name))
        if len(declarations) == 1:
            return declarations[0]
        return DeclarationList(declarations=declarations, line=line)

    def parse_var_item(self, type_name: Name) -> VarDecl:
        name = self.expect_name()
        size = self.parse_array_size()
        return VarDecl(name=name, type_name=type_name, size=size)

    # -- statements --------------------------------------------------------

    def parse_block(self) -> Block:
        line = self.expect_op("{").line
        statements: list[Node] = []
        while not self.current.is_op("}"):
            if self.current.kind == EOF:
                raise DaedalusSyntaxError("unterminated block", line)
            if self.accept_op(";"):
                continue
            start = self.pos
            try:
                statements.append(self.parse_statement())
            except DaedalusSyntaxError as exc:
                logger.debug("Syntax error, skipping statement: %s", exc)
                if self.pos == start and not self.current.is_op("}"):
                    self.advance()
                self.skip_statement()
        self.expect_op("}")
        return Block(statements=statements, line=line)

    def parse_statement(self) -> Node:
        token = self.current
        if token.is_keyword("IF"):
            node = self.parse_if()
            self.accept_op(";")
            return node
        if token.is_op("{"):
            block = self.parse_block()
            self.accept_op(";")
            return block
        if token.is_keyword("RETURN"):
            self.advance()
            value = None if self.current.is_op(";") else self.parse_expression()
            self.expect_op(";")
            return Return(value=value, line=token.line)
        if token.is_keyword("VAR"):
            node = self.parse_var()
            self.expect_op(";")
            return node
        if token.is_keyword("CONST"):
            node = self.parse_const()
            self.expect_op(";")
            return node

        expression = self.parse_expression()
        if self.current.kind == OP and self.current.text in ASSIGNMENT_OPS:
            op = self.advance().text
            value = self.parse_expression()
            self.expect_op(";")
            return Assignment(target=expression, op=op, value=value, line=token.line)
        self.expect_op(";")
        return ExpressionStatement(expression=expression, line=token.line)

    def parse_if(self) -> If:
        line = self.expect_keyword("IF").line
        branches = [(self.parse_expression(), self.parse_block())]
        otherwise: Block | None = None
        while self.current.is_keyword("ELSE"):
            self.advance()
            if self.current.is_keyword("IF"):
                self.advance()
                branches.append((self.parse_expression(), self.parse_block()))
            else:
                otherwise = self.parse_block()
                break
        return If(branches=branches, otherwise=otherwise, line=line)

    # -- expressions -------------------------------------------------------

    def parse_expression(self, min_precedence: int = 1) -> Node:
        left = self.parse_unary()
        while True:
            token = self.current
            precedence = _PRECEDENCE.get(token.text) if token.kind == OP else None
            if precedence is None or precedence < min_precedence:
                return left
            self.advance()
            right = self.parse_expression(precedence + 1)
            left = BinaryOp(op=token.text, left=left, right=right, line=token.line)

    def parse_unary(self) -> Node:
        token = self.current
        if token.kind == OP and token.text in _UNARY_OPS:
            self.advance()
            return UnaryOp(op=token.text, operand=self.parse_unary(), line=token.line)
        return self.parse_value()

    def parse_value(self) -> Node:
        token = self.current
        if token.kind in (INT, FLOAT, STRING):
            self.advance()
            return Literal(kind=token.kind, value=token.text, line=token.line)
        if token.is_op("("):
            self.advance()
            inner = self.parse_expression()
            self.expect_op(")")
            return inner
        if token.kind == NAME and token.upper not in KEYWORDS:
            if self.peek().is_op("("):
                return self.parse_call()
            return self.parse_reference()
        msg = f"unexpected '{token.text or 'end of file'}' in expression"
        raise DaedalusSyntaxError(msg, token.line)

    def parse_call(self) -> FuncCall:
        name = self.expect_name()
        self.expect_op("(")
        args: list[Node] = []
        if not self.current.is_op(")"):
            args.append(self.parse_expression())
            while self.accept_op(","):
                args.append(self.parse_expression())
        self.expect_op(")")
        return FuncCall(name=name, args=args)

    def parse_reference(self) -> Reference:
        parts = [self.expect_name()]
        indices: list[Node] = []
        if self.accept_op("["):
            indices.append(self.parse_expression())
            self.expect_op("]")
        while self.current.is_op(".") and self.peek().kind == NAME:
            self.advance()
            parts.append(self.expect_name())
            if self.accept_op("["):
                indices.append(self.parse_expression())
                self.expect_op("]")
        return Reference(parts=parts, indices=indices)


def parse_to_tree(text: str) -> DaedalusFile:
    """Parse Daedalus source text into a syntax tree.

    Malformed definitions are skipped; their messages are collected in
    ``DaedalusFile.errors``.
    """
    return _Parser(text).parse_file()


__all__ = ["ASSIGNMENT_OPS", "DaedalusSyntaxError", "parse_to_tree"]
