"""Laminate — nested layouts for Python templates.

A layout wraps rendered content and exposes it through ``{{ yield }}``.
Laminate lets a layout wrap *itself* in another layout from inside the
template, forwarding its output and named content slots outward, to any
depth. The page only names its innermost layout; every layout knows the
layout it customizes.

Quickstart:
    >>> from laminate import DictLoader, Environment
    >>> env = Environment(loader=DictLoader({
    ...     "layouts/outer.html": (
    ...         "<html><nav>{{ yield 'menu' }}</nav>"
    ...         "<body>{{ yield }}</body></html>"
    ...     ),
    ...     "layouts/inner.html": (
    ...         "{% content_for 'menu' %}<ul></ul>{% end %}"
    ...         "{% inside_layout 'outer' %}<div class=\\"hello\\">{{ yield }}</div>{% end %}"
    ...     ),
    ... }))
    >>> env.render_layout("inner", "Hello, world!")
    '<html><nav><ul></ul></nav><body><div class="hello">Hello, world!</div></body></html>'

Syntax:
    {{ yield }}                      content handed to this layout
    {{ yield 'menu' }}               named slot ('' when nothing registered)
    {{ user.name }}                  variable output (strict: undefined raises)
    {% inside_layout 'outer' %}...{% end %}
                                     wrap the body in layouts/outer
    {% content_for 'menu' %}...{% end %}
                                     register a slot for the next layout out
    {% set title = 'Products' %}     variable, visible to wrapping layouts
    {# comment #}

Python API:
The same protocol is available to Python code through the explicit
`RenderContext` each render creates:

    >>> def page(ctx):
    ...     ctx.capture_for("menu", lambda c: c.write("<ul></ul>"))
    ...     ctx.inside_layout("outer", lambda c: c.write("Body"))

Architecture:
    Template Source → Lexer → Parser → AST → Template.render_into(ctx)

    - `capture()` redirects a frame's output into a buffer for one block
    - `compose_layout()` captures a block, resolves a layout, renders it in
      a new frame and splices the result back at the call site
    - `RenderContext` holds the frame stack for one top-level render

Thread-Safety:
Templates are immutable after parsing and all render state lives on the
`RenderContext` created per render call, so concurrent renders never share
mutable state.

"""

from laminate._types import Token, TokenType
from laminate.capture import ContentBlock, OutputSink, capture
from laminate.composer import compose_layout
from laminate.environment import (
    BaseLoader,
    CaptureError,
    DictLoader,
    Environment,
    ErrorCode,
    FileSystemLoader,
    LayoutRenderError,
    SourceSnippet,
    TemplateError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    UndefinedError,
    build_source_snippet,
)
from laminate.render_context import (
    Frame,
    RenderContext,
    RenderState,
    SlotMap,
    render_context,
)
from laminate.resolver import LayoutResolver
from laminate.template import BaseTemplate, FunctionTemplate, Template

__version__ = "0.1.0"

__all__ = [
    "BaseLoader",
    "BaseTemplate",
    "CaptureError",
    "ContentBlock",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "Frame",
    "FunctionTemplate",
    "LayoutRenderError",
    "LayoutResolver",
    "OutputSink",
    "RenderContext",
    "RenderState",
    "SlotMap",
    "SourceSnippet",
    "Template",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "Token",
    "TokenType",
    "UndefinedError",
    "__version__",
    "build_source_snippet",
    "capture",
    "compose_layout",
    "render_context",
]
