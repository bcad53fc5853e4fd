"""Port definition for CI/CD platforms."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Generic, Iterable, List, Mapping, Optional, Sequence

from ci_dokumentor.adapters.formatter.markdown import MarkdownFormatter
from ci_dokumentor.domain.docs.sections import SectionEntry, SectionIdentifier

from .repository import Repository
from .section_generator import ManifestT, SectionGenerator


class PlatformAdapter(ABC, Generic[ManifestT]):
    """Parses one platform's manifests and owns its section generator registry.

    Generators are keyed by identifier; registering two generators for the
    same identifier keeps the last one.
    """

    platform: str

    def __init__(self, generators: Iterable[SectionGenerator[ManifestT]]) -> None:
        self._generators: List[SectionGenerator[ManifestT]] = list(generators)

    @abstractmethod
    def supports_source(self, source: Path) -> bool:
        """Return True when ``source`` is a manifest of this platform."""

    @abstractmethod
    def documentation_path(self, source: Path) -> Path:
        """Default destination for the documentation of ``source``."""

    @abstractmethod
    def parse(self, source: Path, repository: Repository) -> ManifestT:
        """Load ``source`` into the platform's manifest model."""

    def supported_sections(self) -> List[SectionIdentifier]:
        return [generator.identifier for generator in self._generators]

    def generate_sections(
        self,
        manifest: ManifestT,
        formatter: MarkdownFormatter,
        repository: Repository,
        *,
        sections: Sequence[SectionIdentifier],
        options: Optional[Mapping[str, Mapping[str, Any]]] = None,
    ) -> List[SectionEntry]:
        """Run the generators for ``sections`` and return entries in their order."""

        by_identifier = {generator.identifier: generator for generator in self._generators}
        entries: List[SectionEntry] = []
        for identifier in sections:
            generator = by_identifier.get(identifier)
            if generator is None:
                continue
            section_options = (options or {}).get(identifier.value, {})
            content = generator.generate(manifest, formatter, repository, section_options)
            entries.append(SectionEntry(identifier=identifier, content=content))
        return entries
