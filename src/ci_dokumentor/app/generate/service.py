"""Generates documentation for a CI/CD manifest into its destination."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ci_dokumentor.adapters.formatter import FormatterService
from ci_dokumentor.adapters.github_actions import GitHubActionsGenerator
from ci_dokumentor.adapters.gitlab_ci import GitLabCIGenerator
from ci_dokumentor.adapters.renderer import BufferedRenderer, renderer_for
from ci_dokumentor.adapters.repository import GitRepositoryProvider
from ci_dokumentor.domain.docs.errors import UnsupportedSourceError
from ci_dokumentor.domain.docs.sections import DEFAULT_ORDER, SectionIdentifier
from ci_dokumentor.domain.docs.value_objects import DokumentorConfig
from ci_dokumentor.ports.platform import PlatformAdapter
from ci_dokumentor.ports.repository import RepositoryProvider

RendererFactory = Callable[[bool], BufferedRenderer]


@dataclass(frozen=True)
class GenerationResult:
    source: Path
    destination: Path
    platform: str
    dry_run: bool
    sections: Tuple[SectionIdentifier, ...]
    skipped: Tuple[SectionIdentifier, ...]
    diff: Optional[str] = None

    def as_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "source": self.source.as_posix(),
            "destination": self.destination.as_posix(),
            "platform": self.platform,
            "dryRun": self.dry_run,
            "sections": [identifier.value for identifier in self.sections],
            "skipped": [identifier.value for identifier in self.skipped],
        }
        if self.dry_run:
            payload["diff"] = self.diff or ""
            payload["changed"] = bool(self.diff)
        return payload


class GeneratorService:
    """Parses a manifest, runs the section generators and renders the destination."""

    def __init__(
        self,
        platforms: Optional[Iterable[PlatformAdapter[Any]]] = None,
        *,
        repository_provider: Optional[RepositoryProvider] = None,
        formatter_service: Optional[FormatterService] = None,
        renderer_factory: RendererFactory = renderer_for,
    ) -> None:
        self._platforms: Dict[str, PlatformAdapter[Any]] = {}
        for platform in platforms if platforms is not None else [GitHubActionsGenerator(), GitLabCIGenerator()]:
            self._platforms[platform.platform] = platform
        self._repository_provider = repository_provider or GitRepositoryProvider()
        self._formatter_service = formatter_service or FormatterService()
        self._renderer_factory = renderer_factory

    def get_supported_platforms(self) -> List[str]:
        return list(self._platforms)

    def platform_for(self, source: Path, cicd: Optional[str] = None) -> PlatformAdapter[Any]:
        if cicd:
            platform = self._platforms.get(cicd.strip().lower())
            if platform is None:
                supported = ", ".join(self.get_supported_platforms())
                raise UnsupportedSourceError(f"Unsupported CI/CD platform '{cicd}' (supported: {supported})")
            if not platform.supports_source(source):
                raise UnsupportedSourceError(f"{cicd} does not support source file {source}")
            return platform
        for platform in self._platforms.values():
            if platform.supports_source(source):
                return platform
        raise UnsupportedSourceError(f"Unsupported source file: {source}")

    def documentation_path(self, source: Path, config: Optional[DokumentorConfig] = None) -> Path:
        config = config or DokumentorConfig.default()
        if config.output is not None:
            return config.output
        return self.platform_for(source, config.cicd).documentation_path(source)

    def generate(
        self,
        source: Path,
        *,
        config: Optional[DokumentorConfig] = None,
        dry_run: bool = False,
    ) -> GenerationResult:
        source = Path(source)
        config = config or DokumentorConfig.default()
        platform = self.platform_for(source, config.cicd)
        destination = config.output if config.output is not None else platform.documentation_path(source)
        formatter = self._formatter_service.for_destination(destination)
        supported = set(platform.supported_sections())
        requested = config.sections.apply(DEFAULT_ORDER)
        selected = tuple(identifier for identifier in requested if identifier in supported)

        repository = self._repository_provider.get_repository(source.parent)
        manifest = platform.parse(source, repository)
        entries = platform.generate_sections(
            manifest,
            formatter,
            repository,
            sections=selected,
            options=config.options,
        )

        renderer = self._renderer_factory(dry_run)
        renderer.initialize(destination, formatter)
        for entry in entries:
            renderer.write_section(entry.identifier, entry.content)
        diff = renderer.finalize()
        return GenerationResult(
            source=source,
            destination=destination,
            platform=platform.platform,
            dry_run=dry_run,
            sections=tuple(entry.identifier for entry in entries if not entry.is_empty()),
            skipped=tuple(entry.identifier for entry in entries if entry.is_empty()),
            diff=diff,
        )
