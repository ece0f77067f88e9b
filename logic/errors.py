"""Exceptions raised while producing AIA documents from templates."""

from __future__ import annotations


class AIATemplateError(RuntimeError):
    """Base class for template generation failures."""


class TemplateFetchError(AIATemplateError):
    """Raised when the template storage returns an unusable response."""


class TemplateParseError(AIATemplateError):
    """Raised when template bytes are not a readable spreadsheet."""


class TemplateWriteError(AIATemplateError):
    """Raised when the generated workbook cannot be serialized."""


__all__ = [
    "AIATemplateError",
    "TemplateFetchError",
    "TemplateParseError",
    "TemplateWriteError",
]
