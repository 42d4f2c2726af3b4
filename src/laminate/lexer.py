"""Lexer for Laminate templates.

Splits template source into a flat token stream. Text outside delimiters
becomes DATA tokens; the inside of ``{{ }}`` and ``{% %}`` is tokenized into
names, string literals, dots and ``=``. Comments are dropped after their
delimiters are emitted.

Delimiters:
    ``{{ ... }}``   variable output
    ``{% ... %}``   statement tag
    ``{# ... #}``   comment

A ``-`` right after an opening delimiter strips whitespace from the end of
the preceding DATA token; a ``-`` right before a closing delimiter strips
whitespace from the start of the following one.

A closing delimiter inside a string literal does not end the tag:
``{% inside_layout 'x%}y' %}`` names the layout ``x%}y``.

"""

from __future__ import annotations

import re

from laminate._types import Token, TokenType
from laminate.exceptions import ErrorCode, TemplateSyntaxError

_BEGIN_RE = re.compile(r"\{([{%#])(-?)")

_END_DELIMITERS = {
    "{": ("}}", TokenType.VARIABLE_BEGIN, TokenType.VARIABLE_END, ErrorCode.UNCLOSED_VARIABLE),
    "%": ("%}", TokenType.BLOCK_BEGIN, TokenType.BLOCK_END, ErrorCode.UNCLOSED_TAG),
    "#": ("#}", TokenType.COMMENT_BEGIN, TokenType.COMMENT_END, ErrorCode.UNCLOSED_COMMENT),
}

_WHITESPACE_RE = re.compile(r"\s+")
_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_STRING_RE = re.compile(r"""'([^'\\]*(?:\\.[^'\\]*)*)'|"([^"\\]*(?:\\.[^"\\]*)*)\"""")
_ESCAPE_RE = re.compile(r"\\(.)")

# Closing delimiter of a tag, skipping over string literals that contain it.
_CLOSING_RE = {
    closing: re.compile(_STRING_RE.pattern + "|(?P<end>" + re.escape(closing) + ")")
    for closing in ("}}", "%}")
}

_OPERATORS = {
    ".": TokenType.DOT,
    "=": TokenType.ASSIGN,
}


class LexerError(TemplateSyntaxError):
    """Tokenization failure with source location."""


class Lexer:
    """Tokenize one template source.

    Example:
        >>> [t.type.name for t in Lexer("a{{ yield }}").tokenize()]
        ['DATA', 'VARIABLE_BEGIN', 'NAME', 'VARIABLE_END', 'EOF']
    """

    __slots__ = (
        "_filename",
        "_name",
        "_pos",
        "_source",
        "_strip_next",
        "_tokens",
        "_trim_blocks",
    )

    def __init__(
        self,
        source: str,
        name: str | None = None,
        filename: str | None = None,
        *,
        trim_blocks: bool = False,
    ):
        self._source = source
        self._trim_blocks = trim_blocks
        self._name = name
        self._filename = filename
        self._pos = 0
        self._tokens: list[Token] = []
        self._strip_next = False

    def tokenize(self) -> list[Token]:
        source = self._source
        while self._pos < len(source):
            match = _BEGIN_RE.search(source, self._pos)
            if match is None:
                self._emit_data(source[self._pos :], self._pos)
                self._pos = len(source)
                break

            self._emit_data(source[self._pos : match.start()], self._pos)
            if match.group(2):
                self._rstrip_last_data()
            self._lex_tag(match)

        lineno, col = self._location(len(source))
        self._tokens.append(Token(TokenType.EOF, "", lineno, col))
        return self._tokens

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _location(self, pos: int) -> tuple[int, int]:
        lineno = self._source.count("\n", 0, pos) + 1
        line_start = self._source.rfind("\n", 0, pos) + 1
        return lineno, pos - line_start

    def _error(self, message: str, pos: int, code: ErrorCode) -> LexerError:
        lineno, col = self._location(pos)
        return LexerError(
            message,
            lineno=lineno,
            name=self._name,
            filename=self._filename,
            source=self._source,
            col_offset=col,
            code=code,
        )

    def _emit_data(self, text: str, pos: int) -> None:
        if self._strip_next:
            stripped = text.lstrip()
            pos += len(text) - len(stripped)
            text = stripped
            self._strip_next = False
        if text:
            lineno, col = self._location(pos)
            self._tokens.append(Token(TokenType.DATA, text, lineno, col))

    def _rstrip_last_data(self) -> None:
        if self._tokens and self._tokens[-1].type is TokenType.DATA:
            last = self._tokens.pop()
            value = last.value.rstrip()
            if value:
                self._tokens.append(Token(TokenType.DATA, value, last.lineno, last.col_offset))

    def _lex_tag(self, begin: re.Match[str]) -> None:
        closing, begin_type, end_type, unclosed_code = _END_DELIMITERS[begin.group(1)]
        lineno, col = self._location(begin.start())
        self._tokens.append(Token(begin_type, begin.group(0), lineno, col))

        end = self._find_closing(closing, begin.end())
        if end == -1:
            raise self._error(
                f"Unclosed '{begin.group(0)[:2]}' (expected '{closing}')",
                begin.start(),
                unclosed_code,
            )

        inner_end = end
        strip_after = end > begin.end() and self._source[end - 1] == "-"
        if strip_after:
            inner_end -= 1

        if begin_type is not TokenType.COMMENT_BEGIN:
            self._lex_inside(begin.end(), inner_end)

        lineno, col = self._location(end)
        self._tokens.append(Token(end_type, closing, lineno, col))
        self._pos = end + len(closing)
        self._strip_next = strip_after
        if (
            self._trim_blocks
            and end_type is not TokenType.VARIABLE_END
            and self._source.startswith("\n", self._pos)
        ):
            self._pos += 1

    def _find_closing(self, closing: str, start: int) -> int:
        pattern = _CLOSING_RE.get(closing)
        if pattern is None:
            return self._source.find(closing, start)
        for match in pattern.finditer(self._source, start):
            if match.group("end"):
                return match.start()
        return -1

    def _lex_inside(self, start: int, stop: int) -> None:
        source = self._source
        pos = start
        while pos < stop:
            ws = _WHITESPACE_RE.match(source, pos, stop)
            if ws:
                pos = ws.end()
                continue

            lineno, col = self._location(pos)
            name = _NAME_RE.match(source, pos, stop)
            if name:
                self._tokens.append(Token(TokenType.NAME, name.group(0), lineno, col))
                pos = name.end()
                continue

            string = _STRING_RE.match(source, pos, stop)
            if string:
                raw = string.group(1) if string.group(1) is not None else string.group(2)
                value = _ESCAPE_RE.sub(r"\1", raw)
                self._tokens.append(Token(TokenType.STRING, value, lineno, col))
                pos = string.end()
                continue

            char = source[pos]
            if char in _OPERATORS:
                self._tokens.append(Token(_OPERATORS[char], char, lineno, col))
                pos += 1
                continue

            raise self._error(
                f"Unexpected character {char!r}", pos, ErrorCode.UNEXPECTED_CHARACTER
            )


def tokenize(
    source: str,
    name: str | None = None,
    filename: str | None = None,
    *,
    trim_blocks: bool = False,
) -> list[Token]:
    """Tokenize template source into a list ending with an EOF token."""
    return Lexer(source, name, filename, trim_blocks=trim_blocks).tokenize()
