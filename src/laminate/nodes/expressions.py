"""Expression nodes for the Laminate AST."""

from __future__ import annotations

from dataclasses import dataclass

from laminate.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Expr(Node):
    """Base class for expressions."""


@dataclass(frozen=True, slots=True)
class Const(Expr):
    """String literal: 'menu'"""

    value: str


@dataclass(frozen=True, slots=True)
class Name(Expr):
    """Variable reference: {{ user }}"""

    name: str


@dataclass(frozen=True, slots=True)
class Getattr(Expr):
    """Attribute or key access: user.name"""

    obj: Expr
    attr: str


@dataclass(frozen=True, slots=True)
class Yield(Expr):
    """Content injection point: {{ yield }} or {{ yield 'menu' }}

    ``slot`` is None for the primary content of the current layout frame.
    """

    slot: Expr | None = None
