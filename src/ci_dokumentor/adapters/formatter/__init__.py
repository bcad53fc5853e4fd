"""Output formatters."""

from __future__ import annotations

from .markdown import MarkdownFormatter
from .service import FormatterService

__all__ = ["FormatterService", "MarkdownFormatter"]
