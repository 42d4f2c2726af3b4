"""Template objects for Laminate."""

from laminate.template.core import BaseTemplate, FunctionTemplate, Template

__all__ = ["BaseTemplate", "FunctionTemplate", "Template"]
