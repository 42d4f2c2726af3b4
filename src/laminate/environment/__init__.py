"""Laminate environment: configuration, loaders and exceptions."""

from laminate.environment.core import Environment
from laminate.exceptions import (
    CaptureError,
    ErrorCode,
    LayoutRenderError,
    SourceSnippet,
    TemplateError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    UndefinedError,
    build_source_snippet,
)
from laminate.environment.loaders import (
    BaseLoader,
    DictLoader,
    FileSystemLoader,
)

__all__ = [
    "BaseLoader",
    "CaptureError",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "LayoutRenderError",
    "SourceSnippet",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "UndefinedError",
    "build_source_snippet",
]
