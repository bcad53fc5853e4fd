"""Port definition for documentation renderers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from ci_dokumentor.adapters.formatter.markdown import MarkdownFormatter
from ci_dokumentor.domain.docs.content import ContentLike, ReadableContent
from ci_dokumentor.domain.docs.sections import SectionIdentifier


class RendererAdapter(ABC):
    """Accumulates sections for one destination and produces the final output."""

    @abstractmethod
    def initialize(self, destination: Path, formatter: MarkdownFormatter) -> None:
        """Bind the renderer to a destination and read its current content."""

    @property
    @abstractmethod
    def destination(self) -> Path:
        """Destination bound by :meth:`initialize`."""

    @property
    @abstractmethod
    def formatter(self) -> MarkdownFormatter:
        """Formatter bound by :meth:`initialize`."""

    @abstractmethod
    def write_section(self, identifier: Union[str, SectionIdentifier], content: ContentLike) -> None:
        """Queue generated content for a section."""

    @abstractmethod
    def read_existing_content(self) -> ReadableContent:
        """Return the base content the sections will be merged into."""

    @abstractmethod
    def replace_content(self, content: ContentLike) -> None:
        """Replace the base content wholesale (used by migrations)."""

    @abstractmethod
    def finalize(self) -> Optional[str]:
        """Produce the output; returns diff text for dry runs, ``None`` otherwise."""
