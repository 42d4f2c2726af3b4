"""Exceptions for the Laminate template system.

Exception Hierarchy:
TemplateError (base)
├── TemplateNotFoundError     # Template or layout not found by loader
├── TemplateSyntaxError       # Parse-time syntax error
├── TemplateRuntimeError      # Render-time error with context
│   ├── CaptureError          # Block failed while its output was captured
│   └── LayoutRenderError     # Resolved layout failed while rendering
└── UndefinedError            # Undefined variable access

Error Messages:
Runtime exceptions carry the template name, line number, and the chain of
layouts being composed when the error happened:

    ```
    Runtime Error: division by zero
      Location: layouts/outer.html
      Layout: layouts/outer.html

    Template stack:
      • page.html:3
      • layouts/inner.html:1
    ```

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------

_LAMINATE_DOCS_BASE = "https://laminate.readthedocs.io/en/latest/errors"


class ErrorCode(Enum):
    """Searchable error codes for Laminate template errors.

    Format: L-{CATEGORY}-{NUMBER}
    Categories: LEX (lexer), PAR (parser), RUN (runtime), TPL (template loading)

    Example:
        >>> ErrorCode.TEMPLATE_NOT_FOUND.docs_url
        'https://laminate.readthedocs.io/en/latest/errors/#l-tpl-001'
    """

    # Lexer errors (L-LEX-xxx)
    UNCLOSED_TAG = "L-LEX-001"
    UNCLOSED_COMMENT = "L-LEX-002"
    UNCLOSED_VARIABLE = "L-LEX-003"
    UNEXPECTED_CHARACTER = "L-LEX-004"

    # Parser errors (L-PAR-xxx)
    UNEXPECTED_TOKEN = "L-PAR-001"
    UNCLOSED_BLOCK = "L-PAR-002"
    INVALID_EXPRESSION = "L-PAR-003"
    UNKNOWN_TAG = "L-PAR-004"

    # Runtime errors (L-RUN-xxx)
    UNDEFINED_VARIABLE = "L-RUN-001"
    RUNTIME_ERROR = "L-RUN-007"
    CAPTURE_FAILED = "L-RUN-010"
    LAYOUT_FAILED = "L-RUN-011"

    # Template loading errors (L-TPL-xxx)
    TEMPLATE_NOT_FOUND = "L-TPL-001"
    SYNTAX_ERROR = "L-TPL-002"

    @property
    def docs_url(self) -> str:
        """Documentation URL for this error code."""
        return f"{_LAMINATE_DOCS_BASE}/#{self.value.lower()}"

    @property
    def category(self) -> str:
        """Error category (e.g., 'runtime', 'lexer', 'parser', 'template')."""
        prefix = self.value.split("-")[1]
        return {
            "LEX": "lexer",
            "PAR": "parser",
            "RUN": "runtime",
            "TPL": "template",
        }.get(prefix, "unknown")


# ---------------------------------------------------------------------------
# Source snippets
# ---------------------------------------------------------------------------


def format_template_stack(stack: list[tuple[str, int]] | None) -> str:
    """Format the layout chain for error messages.

    Example:
        >>> print(format_template_stack([("page.html", 3), ("layouts/inner.html", 1)]))
        Template stack:
          • page.html:3
          • layouts/inner.html:1
    """
    if not stack:
        return ""

    lines = ["Template stack:"]
    for template_name, line_num in stack:
        lines.append(f"  • {template_name}:{line_num}")
    return "\n".join(lines)


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Template source context around an error line.

    Attributes:
        lines: Tuple of (line_number, line_content) pairs around the error.
        error_line: The 1-based line number where the error occurred.
        column: Optional column offset for caret pointer.
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int
    column: int | None = None

    def format(self) -> str:
        """Format snippet with line numbers, marking the error line with ``>``."""
        parts: list[str] = ["   |"]
        for lineno, content in self.lines:
            marker = ">" if lineno == self.error_line else " "
            parts.append(f"{marker}{lineno:>2} | {content}")
            if lineno == self.error_line and self.column is not None:
                parts.append(f"   | {' ' * self.column}^")
        parts.append("   |")
        return "\n".join(parts)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 2,
    column: int | None = None,
) -> SourceSnippet:
    """Build a SourceSnippet from template source.

    Args:
        source: Full template source text.
        error_line: 1-based line number of the error.
        context_lines: Number of lines to show before/after the error line.
        column: Optional column offset for caret pointer.
    """
    all_lines = source.splitlines()
    start = max(0, error_line - 1 - context_lines)
    end = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(start, end))
    return SourceSnippet(lines=lines, error_line=error_line, column=column)


class TemplateError(Exception):
    """Base exception for all Laminate template errors.

        >>> try:
        ...     env.render("page.html", layout="inner")
        ... except TemplateError as e:
        ...     log.error("Template error: %s", e)

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format error as a short diagnostic: code, message and docs link."""
        header = str(self)
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        parts = [header]
        if self.code:
            parts.append(f"  Docs: {self.code.docs_url}")
        return "\n".join(parts)


class TemplateNotFoundError(TemplateError):
    """Template not found by the configured loader.

    Raised by `Environment.get_template(name)` and when a layout named by
    ``{% inside_layout %}`` does not resolve. Never recovered from inside
    the engine: a missing layout aborts the whole render.

    Example:
            >>> env.get_template("layouts/missing.html")
        TemplateNotFoundError: Template 'layouts/missing.html' not found
    """

    code: ErrorCode | None = ErrorCode.TEMPLATE_NOT_FOUND


class TemplateSyntaxError(TemplateError):
    """Parse-time syntax error in template source.

    When ``source`` and ``lineno`` are provided, the message includes the
    offending line; with ``col_offset`` a caret points at the column.
    """

    code: ErrorCode | None = ErrorCode.SYNTAX_ERROR

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        name: str | None = None,
        filename: str | None = None,
        source: str | None = None,
        col_offset: int | None = None,
        *,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.lineno = lineno
        self.name = name
        self.filename = filename
        self.source = source
        self.col_offset = col_offset
        if code is not None:
            self.code = code
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        location = self.filename or self.name or "<template>"
        if self.lineno:
            location += f":{self.lineno}"
            if self.col_offset is not None:
                location += f":{self.col_offset}"

        header = f"Syntax Error: {self.message}\n  --> {location}"

        if self.source and self.lineno:
            lines = self.source.splitlines()
            if 0 < self.lineno <= len(lines):
                snippet = f"\n   |\n{self.lineno:>3} | {lines[self.lineno - 1]}"
                if self.col_offset is not None:
                    snippet += f"\n   | {' ' * self.col_offset}^"
                return header + snippet

        return header


class TemplateRuntimeError(TemplateError):
    """Render-time error with debugging context.

    Attributes:
        message: Error description
        template_name: Name of the template being rendered
        lineno: Line number in template source
        suggestion: Actionable fix suggestion
        source_snippet: Source lines around the error
        template_stack: Chain of (template_name, line) composing the failing render
    """

    code: ErrorCode | None = ErrorCode.RUNTIME_ERROR

    def __init__(
        self,
        message: str,
        *,
        template_name: str | None = None,
        lineno: int | None = None,
        suggestion: str | None = None,
        source_snippet: SourceSnippet | None = None,
        template_stack: list[tuple[str, int]] | None = None,
    ):
        self.message = message
        self.template_name = template_name
        self.lineno = lineno
        self.suggestion = suggestion
        self.source_snippet = source_snippet
        self.template_stack = template_stack or []
        super().__init__(self._format_message())

    def _location(self) -> str:
        loc = self.template_name or "<template>"
        if self.lineno:
            loc += f":{self.lineno}"
        return loc

    def _format_message(self) -> str:
        parts = [f"Runtime Error: {self.message}"]

        if self.template_name or self.lineno:
            parts.append(f"  Location: {self._location()}")

        if self.source_snippet:
            parts.append(self.source_snippet.format())

        if self.template_stack:
            parts.append("")
            parts.append(format_template_stack(self.template_stack))

        if self.suggestion:
            parts.append(f"\n  Suggestion: {self.suggestion}")

        return "\n".join(parts)

    def format_compact(self) -> str:
        """Format runtime error as a structured terminal diagnostic."""
        code_prefix = f"{self.code.value}: " if self.code else ""
        parts = [f"{code_prefix}{self.message}", f"  Location: {self._location()}"]
        if self.source_snippet:
            parts.append(self.source_snippet.format())
        if self.template_stack:
            parts.append(format_template_stack(self.template_stack))
        if self.suggestion:
            parts.append(f"  Hint: {self.suggestion}")
        if self.code:
            parts.append(f"  Docs: {self.code.docs_url}")
        return "\n".join(parts)


class CaptureError(TemplateRuntimeError):
    """A content block raised while its output was being captured.

    The output target has already been restored when this is raised, and
    nothing the block wrote reached the caller's output. The original
    exception is available as ``__cause__``.
    """

    code: ErrorCode | None = ErrorCode.CAPTURE_FAILED


class LayoutRenderError(TemplateRuntimeError):
    """A resolved layout failed while rendering.

    Raised after the wrapped block's capture completed. Output spliced by
    earlier, already finished layout calls stays in place; only the failing
    call is aborted.

    Attributes:
        layout: Qualified name of the layout that failed
    """

    code: ErrorCode | None = ErrorCode.LAYOUT_FAILED

    def __init__(self, message: str, *, layout: str, **kwargs: Any):
        self.layout = layout
        super().__init__(message, **kwargs)

    def _format_message(self) -> str:
        head, sep, rest = super()._format_message().partition("\n")
        return f"{head}\n  Layout: {self.layout}{sep}{rest}"


class UndefinedError(TemplateError):
    """Raised when a template reads an undefined variable.

    Strict mode is always on: a missing variable is an error, never an
    empty string. Named slots are the exception, ``{{ yield 'missing' }}``
    renders as empty.

    If ``available_names`` is provided, a "Did you mean?" suggestion is
    included when a close match is found.
    """

    code: ErrorCode | None = ErrorCode.UNDEFINED_VARIABLE

    def __init__(
        self,
        name: str,
        template: str | None = None,
        lineno: int | None = None,
        available_names: frozenset[str] | None = None,
        template_stack: list[tuple[str, int]] | None = None,
    ):
        self.name = name
        self.template = template or "<template>"
        self.lineno = lineno
        self._available_names = available_names
        self.template_stack = template_stack or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        location = self.template
        if self.lineno:
            location += f":{self.lineno}"
        msg = f"Undefined variable '{self.name}' in {location}"

        if self._available_names:
            from difflib import get_close_matches

            matches = get_close_matches(self.name, self._available_names, n=1, cutoff=0.6)
            if matches:
                msg += f". Did you mean '{matches[0]}'?"

        if self.template_stack:
            msg += "\n\n" + format_template_stack(self.template_stack)

        return msg
