"""Token types shared by the lexer and parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    """Lexical token categories."""

    DATA = "data"

    VARIABLE_BEGIN = "variable_begin"
    VARIABLE_END = "variable_end"
    BLOCK_BEGIN = "block_begin"
    BLOCK_END = "block_end"
    COMMENT_BEGIN = "comment_begin"
    COMMENT_END = "comment_end"

    NAME = "name"
    STRING = "string"
    DOT = "dot"
    ASSIGN = "assign"

    EOF = "eof"


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexical token.

    Attributes:
        type: Token category
        value: Source text of the token (unquoted for strings)
        lineno: 1-based line number
        col_offset: 0-based column offset
    """

    type: TokenType
    value: str
    lineno: int
    col_offset: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.lineno}:{self.col_offset})"
