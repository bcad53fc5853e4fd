"""Shared state handling for renderers."""

from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import List, Optional, Union

from ci_dokumentor.adapters.formatter.markdown import MarkdownFormatter
from ci_dokumentor.domain.docs.content import ContentLike, ReadableContent
from ci_dokumentor.domain.docs.errors import DocumentEncodingError, RendererStateError
from ci_dokumentor.domain.docs.sections import SectionEntry, SectionIdentifier
from ci_dokumentor.domain.docs.synchronizer import SYNCHRONIZER, SectionSynchronizer
from ci_dokumentor.ports.renderer import RendererAdapter


def read_destination(path: Path) -> str:
    """Decode the destination without newline translation; missing files read as empty."""

    if not path.exists():
        return ""
    try:
        return ReadableContent.from_bytes(path.read_bytes()).text
    except UnicodeDecodeError as exc:
        raise DocumentEncodingError(path.as_posix(), exc) from exc


class BufferedRenderer(RendererAdapter):
    """Collects sections in memory; subclasses decide what to do with the result.

    The destination is parsed only in :meth:`finalize`, so a malformed
    document aborts before anything is written.
    """

    def __init__(self, synchronizer: SectionSynchronizer = SYNCHRONIZER) -> None:
        self._synchronizer = synchronizer
        self._reset()

    def _reset(self) -> None:
        self._destination: Optional[Path] = None
        self._formatter: Optional[MarkdownFormatter] = None
        self._original = ""
        self._base = ""
        self._existed = False
        self._replaced = False
        self._entries: List[SectionEntry] = []

    # ------------------------------------------------------------------
    # RendererAdapter
    # ------------------------------------------------------------------

    def initialize(self, destination: Path, formatter: MarkdownFormatter) -> None:
        if self._destination is not None:
            raise RendererStateError(f"Renderer already initialised for {self._destination}")
        destination = Path(destination)
        self._destination = destination
        self._formatter = formatter
        self._existed = destination.exists()
        self._original = read_destination(destination)
        self._base = self._original

    @property
    def destination(self) -> Path:
        return self._require_destination()

    def _require_destination(self) -> Path:
        if self._destination is None:
            raise RendererStateError("Renderer is not initialised")
        return self._destination

    @property
    def formatter(self) -> MarkdownFormatter:
        if self._formatter is None:
            raise RendererStateError("Renderer is not initialised")
        return self._formatter

    def write_section(self, identifier: Union[str, SectionIdentifier], content: ContentLike) -> None:
        self._require_destination()
        self._entries.append(SectionEntry.create(identifier, content))

    def read_existing_content(self) -> ReadableContent:
        self._require_destination()
        return ReadableContent(self._base)

    def replace_content(self, content: ContentLike) -> None:
        self._require_destination()
        self._base = ReadableContent.of(content).text
        self._replaced = True

    def render(self) -> str:
        """Compute the document that :meth:`finalize` would produce."""

        self._require_destination()
        if self._replaced and not self._entries:
            return self._base
        return self._synchronizer.synchronize(self._base, self._entries).text

    def finalize(self) -> Optional[str]:
        destination = self.destination
        try:
            rendered = self.render()
            return self._emit(destination, self._original, rendered, existed=self._existed)
        finally:
            self._reset()

    @abstractmethod
    def _emit(self, destination: Path, original: str, rendered: str, *, existed: bool) -> Optional[str]:
        """Publish the rendered document."""
