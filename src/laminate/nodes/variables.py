"""Variable nodes for the Laminate AST."""

from __future__ import annotations

from dataclasses import dataclass

from laminate.nodes.base import Node
from laminate.nodes.expressions import Expr


@dataclass(frozen=True, slots=True)
class Set(Node):
    """Render-scoped variable: {% set title = 'Products' %}

    Visible to the rest of the template and to any layout this template
    wraps itself in afterwards.
    """

    name: str
    value: Expr
