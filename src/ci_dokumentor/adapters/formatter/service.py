"""Formatter selection by destination file extension."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence, Union

from ci_dokumentor.domain.docs.errors import UnsupportedFormatError

from .markdown import MarkdownFormatter


class FormatterService:
    def __init__(self, formatters: Optional[Sequence[MarkdownFormatter]] = None) -> None:
        self._formatters: List[MarkdownFormatter] = list(formatters or [MarkdownFormatter()])

    def for_destination(self, destination: Union[str, Path]) -> MarkdownFormatter:
        name = str(destination)
        for formatter in self._formatters:
            if formatter.supports_destination(name):
                return formatter
        raise UnsupportedFormatError(f"No formatter supports destination {name}")

    def languages(self) -> List[str]:
        return [formatter.language for formatter in self._formatters]
