"""GitLab CI platform: pipelines and CI/CD components."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from ci_dokumentor.ports.platform import PlatformAdapter
from ci_dokumentor.ports.repository import Repository
from ci_dokumentor.ports.section_generator import SectionGenerator

from .parser import GitLabCIManifest, GitLabCIParser
from .sections import default_generators


class GitLabCIGenerator(PlatformAdapter[GitLabCIManifest]):
    platform = "gitlab-ci"

    def __init__(
        self,
        parser: Optional[GitLabCIParser] = None,
        generators: Optional[Iterable[SectionGenerator[GitLabCIManifest]]] = None,
    ) -> None:
        super().__init__(generators if generators is not None else default_generators())
        self._parser = parser or GitLabCIParser()

    def supports_source(self, source: Path) -> bool:
        return self._parser.supports(Path(source))

    def documentation_path(self, source: Path) -> Path:
        return self._parser.documentation_path(Path(source))

    def parse(self, source: Path, repository: Repository) -> GitLabCIManifest:
        return self._parser.parse(Path(source), repository)
