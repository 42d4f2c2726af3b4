"""Recursive-descent parser producing the Laminate AST.

Grammar (informal):
    body        := (DATA | output | comment | statement)*
    output      := '{{' expression '}}'
    statement   := '{%' keyword ... '%}'
    expression  := 'yield' [primary] | primary
    primary     := STRING | NAME ('.' NAME)*

Block statements (``inside_layout``, ``content_for``) are closed by
``{% end %}`` or by their specific ``{% end<keyword> %}`` tag.
"""

from __future__ import annotations

from difflib import get_close_matches

from laminate._types import Token, TokenType
from laminate.exceptions import ErrorCode
from laminate.nodes import (
    Const,
    ContentFor,
    Data,
    Expr,
    Getattr,
    InsideLayout,
    Name,
    Node,
    Output,
    Set,
    Template,
    Yield,
)
from laminate.parser.errors import ParseError

# Block keyword → parser method name.
_BLOCK_PARSERS: dict[str, str] = {
    "inside_layout": "_parse_inside_layout",
    "content_for": "_parse_content_for",
    "set": "_parse_set",
}

_END_KEYWORDS = frozenset({"end", "endinside_layout", "endcontent_for"})

_VALID_KEYWORDS = frozenset(_BLOCK_PARSERS)

_RESERVED_NAMES = frozenset({"yield"})


class Parser:
    """Parse a token stream into a `Template` node.

    Example:
        >>> from laminate.lexer import tokenize
        >>> Parser(tokenize("<b>{{ yield }}</b>")).parse().body[1]
        Output(lineno=1, col_offset=3, expr=Yield(lineno=1, col_offset=6, slot=None))
    """

    __slots__ = ("_block_stack", "_filename", "_name", "_pos", "_source", "_tokens")

    def __init__(
        self,
        tokens: list[Token],
        name: str | None = None,
        filename: str | None = None,
        source: str | None = None,
    ):
        self._tokens = tokens
        self._name = name
        self._filename = filename
        self._source = source
        self._pos = 0
        # (keyword, opening token) for every block still waiting for its end tag
        self._block_stack: list[tuple[str, Token]] = []

    def parse(self) -> Template:
        body = self._parse_body()
        return Template(lineno=1, col_offset=0, body=tuple(body))

    # ------------------------------------------------------------------
    # Token navigation
    # ------------------------------------------------------------------

    @property
    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _peek(self, offset: int = 1) -> Token:
        index = min(self._pos + offset, len(self._tokens) - 1)
        return self._tokens[index]

    def _advance(self) -> Token:
        token = self._tokens[self._pos]
        if token.type is not TokenType.EOF:
            self._pos += 1
        return token

    def _expect(self, token_type: TokenType) -> Token:
        if self._current.type is not token_type:
            raise self._error(
                f"Expected {token_type.value}, got {self._describe(self._current)}"
            )
        return self._advance()

    def _error(
        self,
        message: str,
        token: Token | None = None,
        suggestion: str | None = None,
        code: ErrorCode = ErrorCode.UNEXPECTED_TOKEN,
    ) -> ParseError:
        return ParseError(
            message,
            token or self._current,
            source=self._source,
            filename=self._filename,
            name=self._name,
            suggestion=suggestion,
            code=code,
        )

    @staticmethod
    def _describe(token: Token) -> str:
        if token.type is TokenType.EOF:
            return "end of template"
        return f"{token.type.value} {token.value!r}"

    # ------------------------------------------------------------------
    # Body
    # ------------------------------------------------------------------

    def _parse_body(self) -> list[Node]:
        """Parse nodes until EOF or an end tag (left unconsumed)."""
        nodes: list[Node] = []
        while True:
            token = self._current

            if token.type is TokenType.EOF:
                if self._block_stack:
                    keyword, opener = self._block_stack[-1]
                    raise self._error(
                        f"Unclosed '{keyword}' block",
                        opener,
                        suggestion="Close it with {% end %}",
                        code=ErrorCode.UNCLOSED_BLOCK,
                    )
                return nodes

            if token.type is TokenType.DATA:
                self._advance()
                nodes.append(Data(lineno=token.lineno, col_offset=token.col_offset, value=token.value))
            elif token.type is TokenType.VARIABLE_BEGIN:
                self._advance()
                expr = self._parse_expression()
                self._expect(TokenType.VARIABLE_END)
                nodes.append(Output(lineno=token.lineno, col_offset=token.col_offset, expr=expr))
            elif token.type is TokenType.COMMENT_BEGIN:
                self._advance()
                self._expect(TokenType.COMMENT_END)
            elif token.type is TokenType.BLOCK_BEGIN:
                keyword = self._peek()
                if keyword.type is TokenType.NAME and keyword.value in _END_KEYWORDS:
                    if not self._block_stack:
                        raise self._error(
                            f"Unexpected '{keyword.value}' with no open block", keyword
                        )
                    return nodes
                self._advance()
                nodes.append(self._parse_statement())
            else:
                raise self._error(f"Unexpected {self._describe(token)}")

    def _parse_statement(self) -> Node:
        keyword = self._current
        if keyword.type is not TokenType.NAME:
            raise self._error("Expected a tag name after '{%'", code=ErrorCode.UNKNOWN_TAG)

        method_name = _BLOCK_PARSERS.get(keyword.value)
        if method_name is None:
            matches = get_close_matches(keyword.value, sorted(_VALID_KEYWORDS), n=1)
            suggestion = f"Did you mean '{matches[0]}'?" if matches else None
            raise self._error(
                f"Unknown tag '{keyword.value}'",
                keyword,
                suggestion=suggestion,
                code=ErrorCode.UNKNOWN_TAG,
            )
        return getattr(self, method_name)()

    def _consume_end_tag(self, keyword: str) -> None:
        self._expect(TokenType.BLOCK_BEGIN)
        end = self._advance()
        if end.value not in ("end", f"end{keyword}"):
            raise self._error(
                f"'{end.value}' cannot close '{keyword}'",
                end,
                suggestion=f"Use {{% end %}} or {{% end{keyword} %}}",
            )
        self._expect(TokenType.BLOCK_END)
        self._block_stack.pop()

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _parse_inside_layout(self) -> InsideLayout:
        """Parse {% inside_layout 'outer' %}...{% end %}."""
        start = self._advance()
        self._block_stack.append(("inside_layout", start))
        layout = self._parse_expression()
        self._expect(TokenType.BLOCK_END)
        body = self._parse_body()
        self._consume_end_tag("inside_layout")
        return InsideLayout(
            lineno=start.lineno,
            col_offset=start.col_offset,
            layout=layout,
            body=tuple(body),
        )

    def _parse_content_for(self) -> ContentFor:
        """Parse {% content_for 'menu' %}...{% end %}."""
        start = self._advance()
        self._block_stack.append(("content_for", start))
        slot = self._parse_expression()
        self._expect(TokenType.BLOCK_END)
        body = self._parse_body()
        self._consume_end_tag("content_for")
        return ContentFor(
            lineno=start.lineno,
            col_offset=start.col_offset,
            slot=slot,
            body=tuple(body),
        )

    def _parse_set(self) -> Set:
        """Parse {% set name = expr %}."""
        start = self._advance()
        target = self._expect(TokenType.NAME)
        if target.value in _RESERVED_NAMES:
            raise self._error(f"Cannot assign to reserved name '{target.value}'", target)
        self._expect(TokenType.ASSIGN)
        value = self._parse_expression()
        self._expect(TokenType.BLOCK_END)
        return Set(
            lineno=start.lineno,
            col_offset=start.col_offset,
            name=target.value,
            value=value,
        )

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _parse_expression(self) -> Expr:
        token = self._current
        if token.type is TokenType.NAME and token.value == "yield":
            self._advance()
            slot = None
            if self._current.type in (TokenType.STRING, TokenType.NAME):
                slot = self._parse_primary()
            return Yield(lineno=token.lineno, col_offset=token.col_offset, slot=slot)
        return self._parse_primary()

    def _parse_primary(self) -> Expr:
        token = self._current
        if token.type is TokenType.STRING:
            self._advance()
            return Const(lineno=token.lineno, col_offset=token.col_offset, value=token.value)

        if token.type is TokenType.NAME:
            if token.value in _RESERVED_NAMES:
                raise self._error(f"'{token.value}' cannot be used here", token)
            self._advance()
            expr: Expr = Name(lineno=token.lineno, col_offset=token.col_offset, name=token.value)
            while self._current.type is TokenType.DOT:
                self._advance()
                attr = self._expect(TokenType.NAME)
                expr = Getattr(
                    lineno=token.lineno,
                    col_offset=token.col_offset,
                    obj=expr,
                    attr=attr.value,
                )
            return expr

        raise self._error(
            f"Expected an expression, got {self._describe(token)}",
            code=ErrorCode.INVALID_EXPRESSION,
        )
