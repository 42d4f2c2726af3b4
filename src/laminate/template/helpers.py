"""Pure runtime helpers used while template nodes render.

None of them hold state; they are safe for concurrent use.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from laminate.exceptions import UndefinedError

_MISSING = object()


def str_safe(value: Any) -> str:
    """Convert a value for output; None renders as an empty string."""
    if value is None:
        return ""
    return str(value)


def lookup_attr(obj: Any, attr: str, path: str, template: str | None, lineno: int | None) -> Any:
    """Resolve ``obj.attr``, falling back to ``obj[attr]`` for mappings.

    Args:
        obj: Object being accessed
        attr: Attribute or key name
        path: Dotted expression text for error messages (``user.name``)
        template: Template name for error messages
        lineno: Source line for error messages

    Raises:
        UndefinedError: If neither the attribute nor the key exists
    """
    if isinstance(obj, Mapping):
        value = obj.get(attr, _MISSING)
        if value is not _MISSING:
            return value
    value = getattr(obj, attr, _MISSING)
    if value is _MISSING:
        raise UndefinedError(path, template=template, lineno=lineno)
    return value
