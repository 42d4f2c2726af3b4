"""Layout name resolution.

A layout name without a ``/`` lives in the layouts namespace
(``"inner"`` → ``"layouts/inner"``). A name containing ``/`` is a template
path and bypasses the namespace (``"admin/layouts/base"`` stays as is; a
leading ``/`` is dropped). The environment then tries each configured
extension, so ``"layouts/inner"`` also finds ``"layouts/inner.html"``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from laminate.exceptions import TemplateNotFoundError

if TYPE_CHECKING:
    from laminate.environment import Environment
    from laminate.template import BaseTemplate


class LayoutResolver:
    """Resolve layout names to templates through an environment.

    Example:
        >>> resolver = LayoutResolver(env)
        >>> resolver.qualify("outer")
        'layouts/outer'
        >>> resolver.qualify("/shared/outer.html")
        'shared/outer.html'
    """

    __slots__ = ("_env", "_namespace")

    def __init__(self, env: Environment, namespace: str = "layouts"):
        self._env = env
        self._namespace = namespace.strip("/")

    @property
    def namespace(self) -> str:
        return self._namespace

    def qualify(self, name: str) -> str:
        """Template name that ``name`` refers to."""
        if not name or not name.strip("/"):
            raise TemplateNotFoundError("Layout name must not be empty")
        if "/" in name:
            return name.lstrip("/")
        if not self._namespace:
            return name
        return f"{self._namespace}/{name}"

    def resolve(self, name: str) -> BaseTemplate:
        """Load the layout template for ``name``.

        Raises:
            TemplateNotFoundError: If the layout does not resolve
        """
        qualified = self.qualify(name)
        try:
            return self._env.get_template(qualified)
        except TemplateNotFoundError as e:
            if qualified == name:
                raise
            raise TemplateNotFoundError(f"Layout '{name}' not found: {e}") from e
