"""GitHub Actions platform: manifest parsing plus the section generator registry."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from ci_dokumentor.ports.platform import PlatformAdapter
from ci_dokumentor.ports.repository import Repository
from ci_dokumentor.ports.section_generator import SectionGenerator

from .parser import GitHubActionsManifest, GitHubActionsParser
from .sections import default_generators


class GitHubActionsGenerator(PlatformAdapter[GitHubActionsManifest]):
    platform = "github-actions"

    def __init__(
        self,
        parser: Optional[GitHubActionsParser] = None,
        generators: Optional[Iterable[SectionGenerator[GitHubActionsManifest]]] = None,
    ) -> None:
        super().__init__(generators if generators is not None else default_generators())
        self._parser = parser or GitHubActionsParser()

    def supports_source(self, source: Path) -> bool:
        return self._parser.supports(Path(source))

    def documentation_path(self, source: Path) -> Path:
        return self._parser.documentation_path(Path(source))

    def parse(self, source: Path, repository: Repository) -> GitHubActionsManifest:
        return self._parser.parse(Path(source), repository)
