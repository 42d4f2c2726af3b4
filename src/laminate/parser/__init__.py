"""Template parser for Laminate."""

from laminate.parser.core import Parser
from laminate.parser.errors import ParseError

__all__ = ["ParseError", "Parser"]
