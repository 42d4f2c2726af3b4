"""Parser error handling for Laminate.

Provides ParseError with source context and suggestions.
"""

from __future__ import annotations

from laminate._types import Token
from laminate.exceptions import ErrorCode, TemplateSyntaxError


class ParseError(TemplateSyntaxError):
    """Parser error with source context.

    Displays the offending line with a pointer at the token, plus an
    optional suggestion. Catchable as `TemplateSyntaxError`.
    """

    def __init__(
        self,
        message: str,
        token: Token,
        source: str | None = None,
        filename: str | None = None,
        name: str | None = None,
        suggestion: str | None = None,
        code: ErrorCode = ErrorCode.UNEXPECTED_TOKEN,
    ):
        self.token = token
        self.suggestion = suggestion
        super().__init__(
            message,
            lineno=token.lineno,
            name=name,
            filename=filename,
            source=source,
            col_offset=token.col_offset,
            code=code,
        )

    def _format_message(self) -> str:
        msg = super()._format_message().replace("Syntax Error:", "Parse Error:", 1)
        if self.suggestion:
            msg += f"\n\nSuggestion: {self.suggestion}"
        return msg
