"""Tokenizer for Daedalus script files."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

NAME = "name"
INT = "int"
FLOAT = "float"
STRING = "string"
OP = "op"
EOF = "eof"

KEYWORDS = frozenset(
    {"CONST", "VAR", "FUNC", "CLASS", "PROTOTYPE", "INSTANCE", "IF", "ELSE", "RETURN"}
)

_TOKEN_PATTERN = re.compile(
    r"""
    (?P<ws>[ \t\r\n\f\v]+)
    | (?P<line_comment>//[^\n]*)
    | (?P<block_comment>/\*.*?(?:\*/|\Z))
    | (?P<string>"[^"]*"?)
    | (?P<float>\d+\.\d+(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?)
    | (?P<int>\d+)
    | (?P<name>[^\W\d][\w@^]*)
    | (?P<op><<|>>|<=|>=|==|!=|&&|\|\||\+=|-=|\*=|/=|[-+*/%&|!~<>=(){}\[\];,.])
    | (?P<other>.)
    """,
    re.VERBOSE | re.DOTALL,
)

_SKIPPED = frozenset({"ws", "line_comment", "block_comment"})


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    line: int

    @property
    def upper(self) -> str:
        return self.text.upper()

    def is_keyword(self, keyword: str) -> bool:
        return self.kind == NAME and self.text.upper() == keyword

    def is_op(self, text: str) -> bool:
        return self.kind == OP and self.text == text


def tokenize(text: str) -> Iterator[Token]:
    """Yield the tokens of ``text`` followed by a single EOF token.

    Characters outside the language are emitted as OP tokens and left for
    the parser to reject.
    """
    line = 1
    for match in _TOKEN_PATTERN.finditer(text):
        group = match.lastgroup
        value = match.group()
        if group not in _SKIPPED:
            kind = OP if group == "other" else group
            yield Token(kind=kind or OP, text=value, line=line)
        line += value.count("\n")
    yield Token(kind=EOF, text="", line=line)


__all__ = ["EOF", "FLOAT", "INT", "KEYWORDS", "NAME", "OP", "STRING", "Token", "tokenize"]
