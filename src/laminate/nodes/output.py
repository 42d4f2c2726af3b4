"""Output nodes for the Laminate AST."""

from __future__ import annotations

from dataclasses import dataclass

from laminate.nodes.base import Node
from laminate.nodes.expressions import Expr


@dataclass(frozen=True, slots=True)
class Output(Node):
    """Output expression: {{ expr }}"""

    expr: Expr


@dataclass(frozen=True, slots=True)
class Data(Node):
    """Raw text data between template constructs."""

    value: str
