"""Laminate AST node definitions.

Nodes are frozen dataclasses produced by the parser and walked by
`laminate.template.core.Template` at render time.
"""

from laminate.nodes.base import Node
from laminate.nodes.expressions import Const, Expr, Getattr, Name, Yield
from laminate.nodes.output import Data, Output
from laminate.nodes.structure import ContentFor, InsideLayout, Template
from laminate.nodes.variables import Set

__all__ = [
    "Const",
    "ContentFor",
    "Data",
    "Expr",
    "Getattr",
    "InsideLayout",
    "Name",
    "Node",
    "Output",
    "Set",
    "Template",
    "Yield",
]
