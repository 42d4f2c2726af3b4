"""Laminate Environment — configuration, template loading and caching.

The Environment ties a loader to the layout resolver and the renderer:

    >>> env = Environment(loader=FileSystemLoader("templates/"))
    >>> env.render("hello.html", layout="inner", name="World")

renders ``hello.html`` and wraps it in ``layouts/inner(.html)``, which may
wrap itself in further layouts with ``{% inside_layout %}``.

Configuration is passed as keyword arguments:

    loader        Where template source comes from (None: only templates
                  registered with add_template()/from_string())
    layouts       Namespace for unqualified layout names (default "layouts")
    extensions    Suffixes tried when a name does not resolve as given
    max_depth     Maximum nesting of layout frames (circular layout guard)
    trim_blocks   Drop the first newline after a ``{% ... %}`` tag
    globals       Variables visible to every render

Thread-Safety:
Templates are immutable once parsed. The cache is a plain dict whose
entries are only ever added; two threads loading the same template at the
same time both parse it and the last write wins, which is harmless.

"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from laminate.exceptions import TemplateNotFoundError
from laminate.lexer import tokenize
from laminate.parser import Parser
from laminate.render_context import render_context
from laminate.resolver import LayoutResolver
from laminate.template import BaseTemplate, FunctionTemplate, Template

if TYPE_CHECKING:
    from laminate.environment.loaders import BaseLoader
    from laminate.render_context import RenderContext

logger = logging.getLogger(__name__)


class Environment:
    """Central configuration and template cache.

    Example:
        >>> env = Environment(loader=DictLoader({
        ...     "layouts/outer.html": "<html>{{ yield }}</html>",
        ...     "layouts/inner.html": (
        ...         "{% inside_layout 'outer' %}<main>{{ yield }}</main>{% end %}"
        ...     ),
        ...     "hello.html": "Hello, {{ name }}!",
        ... }))
        >>> env.render("hello.html", layout="inner", name="World")
        '<html><main>Hello, World!</main></html>'
    """

    def __init__(
        self,
        loader: BaseLoader | None = None,
        *,
        layouts: str = "layouts",
        extensions: Sequence[str] = (".html",),
        max_depth: int = 50,
        trim_blocks: bool = False,
        globals: dict[str, Any] | None = None,
    ):
        if max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")
        self.loader = loader
        self.extensions = tuple(extensions)
        self.max_depth = max_depth
        self.trim_blocks = trim_blocks
        self.globals: dict[str, Any] = dict(globals or {})
        self.resolver = LayoutResolver(self, layouts)
        self._registered: dict[str, BaseTemplate] = {}
        self._cache: dict[str, BaseTemplate] = {}

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _candidates(self, name: str) -> list[str]:
        candidates = [name]
        for ext in self.extensions:
            if not name.endswith(ext):
                candidates.append(name + ext)
        return candidates

    def get_template(self, name: str) -> BaseTemplate:
        """Load a template by name, trying each configured extension.

        Raises:
            TemplateNotFoundError: If no candidate name resolves
            TemplateSyntaxError: If the template source is invalid
        """
        cached = self._cache.get(name)
        if cached is not None:
            return cached

        candidates = self._candidates(name)
        for candidate in candidates:
            registered = self._registered.get(candidate)
            if registered is not None:
                self._cache[name] = registered
                return registered

        if self.loader is None:
            raise TemplateNotFoundError(
                f"Template '{name}' not found (no loader configured)"
            )

        errors: list[TemplateNotFoundError] = []
        for candidate in candidates:
            try:
                source, filename = self.loader.get_source(candidate)
            except TemplateNotFoundError as e:
                errors.append(e)
                continue
            template = self._compile(source, candidate, filename)
            logger.debug("Loaded template %r from %s", candidate, filename or "<memory>")
            self._cache[name] = template
            return template

        if len(errors) == 1:
            raise errors[0]
        raise TemplateNotFoundError(
            f"Template '{name}' not found (tried: {', '.join(candidates)})"
        )

    def from_string(self, source: str, name: str | None = None) -> Template:
        """Parse a template from source without caching it."""
        return self._compile(source, name, None)

    def add_template(
        self,
        name: str,
        template: str | Callable[[RenderContext], object],
    ) -> BaseTemplate:
        """Register a template under ``name``, from source or a callable.

        Registered templates take precedence over the loader.
        """
        if isinstance(template, str):
            compiled: BaseTemplate = self._compile(template, name, None)
        else:
            compiled = FunctionTemplate(self, template, name)
        self._registered[name] = compiled
        self.clear_cache()
        return compiled

    def list_templates(self) -> list[str]:
        names = set(self._registered)
        if self.loader is not None:
            names.update(self.loader.list_templates())
        return sorted(names)

    def clear_cache(self) -> None:
        self._cache = {}

    def _compile(self, source: str, name: str | None, filename: str | None) -> Template:
        tokens = tokenize(source, name, filename, trim_blocks=self.trim_blocks)
        ast = Parser(tokens, name, filename, source).parse()
        return Template(self, ast, name, filename, source)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(
        self,
        template_name: str,
        *args: Any,
        layout: str | None = None,
        **kwargs: Any,
    ) -> str:
        """Render a template, optionally wrapped in its innermost layout."""
        return self.get_template(template_name).render(*args, layout=layout, **kwargs)

    def render_layout(self, layout: str, content: str = "", *args: Any, **kwargs: Any) -> str:
        """Wrap literal content in a layout chain.

        Example:
            >>> env.render_layout("inner", "Hello, world!")
            '<html><main>Hello, world!</main></html>'
        """
        variables: dict[str, Any] = dict(self.globals)
        if args:
            if len(args) == 1 and isinstance(args[0], dict):
                variables.update(args[0])
            else:
                raise TypeError(
                    f"render_layout() takes at most 1 context dict, got {len(args)}"
                )
        variables.update(kwargs)

        with render_context(self.resolver, variables=variables, max_depth=self.max_depth) as ctx:
            ctx.inside_layout(layout, lambda c: c.write(content))
            return ctx.getvalue()
