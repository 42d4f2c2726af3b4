"""Layout structure nodes for the Laminate AST."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from laminate.nodes.base import Node
from laminate.nodes.expressions import Expr


@dataclass(frozen=True, slots=True)
class InsideLayout(Node):
    """Wrap the body in an outer layout: {% inside_layout 'outer' %}...{% end %}"""

    layout: Expr
    body: Sequence[Node]


@dataclass(frozen=True, slots=True)
class ContentFor(Node):
    """Capture the body into a named slot: {% content_for 'menu' %}...{% end %}"""

    slot: Expr
    body: Sequence[Node]


@dataclass(frozen=True, slots=True)
class Template(Node):
    """Root node representing a complete template."""

    body: Sequence[Node]
