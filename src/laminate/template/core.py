"""Laminate templates — parsed templates ready for rendering.

A template renders by walking its immutable AST and writing through the
`RenderContext` it is given. Layout composition, slot capture and
variable scoping all live on the context, so the same template object is
safe to render concurrently and at several depths of one layout chain.

Two kinds share the `BaseTemplate` interface:

- `Template`: parsed from source (``{{ yield }}``, ``{% inside_layout %}``...)
- `FunctionTemplate`: a Python callable ``func(ctx)`` writing through
  ``ctx.write``; useful for layouts built in code and in tests

"""

from __future__ import annotations

import weakref
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from laminate.capture import capture
from laminate.exceptions import (
    TemplateError,
    TemplateRuntimeError,
    build_source_snippet,
)
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
    Yield,
)
from laminate.render_context import render_context
from laminate.template.helpers import lookup_attr, str_safe

if TYPE_CHECKING:
    from laminate.environment import Environment
    from laminate.nodes import Template as TemplateNode
    from laminate.render_context import RenderContext


class BaseTemplate:
    """Render interface shared by every template kind."""

    __slots__ = ("_env_ref", "_filename", "_name")

    def __init__(self, env: Environment, name: str | None, filename: str | None):
        # Use weakref to prevent circular reference: Template <-> Environment cache
        self._env_ref: weakref.ref[Environment] = weakref.ref(env)
        self._name = name
        self._filename = filename

    @property
    def _env(self) -> Environment:
        env = self._env_ref()
        if env is None:
            raise RuntimeError("Environment has been garbage collected")
        return env

    @property
    def name(self) -> str | None:
        """Template name."""
        return self._name

    @property
    def filename(self) -> str | None:
        """Source filename."""
        return self._filename

    def render_into(self, ctx: RenderContext) -> None:
        """Write this template's output through ``ctx``.

        Subclasses implement this; `render()` and layout composition call it.
        """
        raise NotImplementedError(f"{type(self).__name__} does not implement render_into()")

    def render(self, *args: Any, layout: str | None = None, **kwargs: Any) -> str:
        """Render template with given context.

        Args:
            *args: Single dict of context variables
            layout: Innermost layout to wrap the output in, if any
            **kwargs: Context variables as keyword arguments

        Returns:
            Rendered template as string

        Example:
            >>> t.render(name="World")
            'Hello, World!'
            >>> t.render({"name": "World"}, layout="inner")
            '<main>Hello, World!</main>'
        """
        env = self._env
        variables: dict[str, Any] = dict(env.globals)
        if args:
            if len(args) == 1 and isinstance(args[0], dict):
                variables.update(args[0])
            else:
                raise TypeError(
                    f"render() takes at most 1 positional argument (a dict), got {len(args)}"
                )
        variables.update(kwargs)

        with render_context(
            env.resolver,
            template_name=self._name,
            variables=variables,
            max_depth=env.max_depth,
        ) as ctx:
            try:
                if layout is None:
                    self.render_into(ctx)
                else:
                    ctx.inside_layout(layout, self.render_into)
            except TemplateError:
                raise
            except Exception as e:
                raise self._enhance_error(e, ctx) from e
            return ctx.getvalue()

    def _enhance_error(self, error: Exception, ctx: RenderContext) -> TemplateRuntimeError:
        return TemplateRuntimeError(
            f"{type(error).__name__}: {error}",
            template_name=self._name,
            lineno=ctx.frame.line or None,
            template_stack=ctx.template_stack,
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._name or '(inline)'!r}>"


class Template(BaseTemplate):
    """Template parsed from source.

    Example:
        >>> env = Environment(loader=DictLoader({
        ...     "layouts/outer.html": "<div>{{ yield }}</div>",
        ... }))
        >>> env.from_string("{% inside_layout 'outer' %}Hello{% end %}").render()
        '<div>Hello</div>'
    """

    __slots__ = ("_ast", "_source")

    def __init__(
        self,
        env: Environment,
        ast: TemplateNode,
        name: str | None,
        filename: str | None,
        source: str | None = None,
    ):
        super().__init__(env, name, filename)
        self._ast = ast
        self._source = source

    @property
    def ast(self) -> TemplateNode:
        return self._ast

    def render_into(self, ctx: RenderContext) -> None:
        self._render_nodes(ctx, self._ast.body)

    def _enhance_error(self, error: Exception, ctx: RenderContext) -> TemplateRuntimeError:
        lineno = ctx.frame.line or None
        snippet = None
        if self._source and lineno:
            snippet = build_source_snippet(self._source, lineno)
        return TemplateRuntimeError(
            f"{type(error).__name__}: {error}",
            template_name=self._name,
            lineno=lineno,
            source_snippet=snippet,
            template_stack=ctx.template_stack,
        )

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _render_nodes(self, ctx: RenderContext, nodes: Sequence[Node]) -> None:
        for node in nodes:
            ctx.frame.line = node.lineno
            _NODE_RENDERERS[type(node)](self, ctx, node)

    def _block(self, nodes: Sequence[Node]) -> Callable[[RenderContext], None]:
        return lambda ctx: self._render_nodes(ctx, nodes)

    def _render_data(self, ctx: RenderContext, node: Data) -> None:
        ctx.write(node.value)

    def _render_output(self, ctx: RenderContext, node: Output) -> None:
        ctx.write(str_safe(self._eval(ctx, node.expr)))

    def _render_inside_layout(self, ctx: RenderContext, node: InsideLayout) -> None:
        layout = str_safe(self._eval(ctx, node.layout))
        ctx.inside_layout(layout, self._block(node.body))

    def _render_content_for(self, ctx: RenderContext, node: ContentFor) -> None:
        slot = str_safe(self._eval(ctx, node.slot))
        ctx.content_for(slot, capture(ctx, self._block(node.body)))

    def _render_set(self, ctx: RenderContext, node: Set) -> None:
        ctx.set(node.name, self._eval(ctx, node.value))

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _eval(self, ctx: RenderContext, expr: Expr) -> Any:
        if isinstance(expr, Const):
            return expr.value
        if isinstance(expr, Name):
            return ctx.lookup(expr.name)
        if isinstance(expr, Getattr):
            return lookup_attr(
                self._eval(ctx, expr.obj),
                expr.attr,
                _dotted(expr),
                self._name,
                expr.lineno,
            )
        if isinstance(expr, Yield):
            if expr.slot is None:
                return ctx.yield_content()
            return ctx.yield_content(str_safe(self._eval(ctx, expr.slot)))
        raise TypeError(f"Unknown expression node {type(expr).__name__}")


def _dotted(expr: Expr) -> str:
    if isinstance(expr, Getattr):
        return f"{_dotted(expr.obj)}.{expr.attr}"
    if isinstance(expr, Name):
        return expr.name
    return "<expr>"


# Node type → renderer. Every statement node the parser emits has an entry.
_NODE_RENDERERS: dict[type[Node], Callable[[Template, RenderContext, Any], None]] = {
    Data: Template._render_data,
    Output: Template._render_output,
    InsideLayout: Template._render_inside_layout,
    ContentFor: Template._render_content_for,
    Set: Template._render_set,
}


class FunctionTemplate(BaseTemplate):
    """Template backed by a Python callable.

    Example:
        >>> def outer(ctx):
        ...     ctx.write("<div>")
        ...     ctx.write(ctx.yield_content())
        ...     ctx.write("</div>")
        >>> env.add_template("layouts/outer", outer)
        >>> env.render_layout("outer", "Hello")
        '<div>Hello</div>'
    """

    __slots__ = ("_func",)

    def __init__(
        self,
        env: Environment,
        func: Callable[[RenderContext], object],
        name: str | None,
    ):
        super().__init__(env, name, None)
        self._func = func

    def render_into(self, ctx: RenderContext) -> None:
        self._func(ctx)
