"""External services used by the AIA document generator."""

from .template_repository import TemplateRepository

__all__ = ["TemplateRepository"]
