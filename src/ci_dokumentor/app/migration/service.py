"""Migrates documentation written by other tools to ci-dokumentor markers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from ci_dokumentor.adapters.formatter import FormatterService
from ci_dokumentor.adapters.migration import default_adapters
from ci_dokumentor.adapters.renderer import BufferedRenderer, renderer_for
from ci_dokumentor.domain.docs.errors import ToolDetectionError, UnsupportedToolError
from ci_dokumentor.ports.migration import MigrationAdapter

RendererFactory = Callable[[bool], BufferedRenderer]


@dataclass(frozen=True)
class MigrationResult:
    destination: Path
    tool: str
    dry_run: bool
    diff: Optional[str] = None

    @property
    def changed(self) -> Optional[bool]:
        if self.diff is None:
            return None
        return bool(self.diff)

    def as_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "destination": self.destination.as_posix(),
            "tool": self.tool,
            "dryRun": self.dry_run,
        }
        if self.dry_run:
            payload["diff"] = self.diff or ""
            payload["changed"] = bool(self.diff)
        return payload


class MigrationService:
    """Registry of migration adapters keyed by lower-cased tool name."""

    def __init__(
        self,
        adapters: Optional[Iterable[MigrationAdapter]] = None,
        *,
        formatter_service: Optional[FormatterService] = None,
        renderer_factory: RendererFactory = renderer_for,
    ) -> None:
        self._adapters: Dict[str, MigrationAdapter] = {}
        for adapter in adapters if adapters is not None else default_adapters():
            self._adapters[adapter.name.lower()] = adapter
        self._formatter_service = formatter_service or FormatterService()
        self._renderer_factory = renderer_factory

    def get_supported_tools(self) -> List[str]:
        return list(self._adapters)

    def get_adapter(self, tool: str) -> MigrationAdapter:
        adapter = self._adapters.get(tool.strip().lower())
        if adapter is None:
            raise UnsupportedToolError(tool, self.get_supported_tools())
        return adapter

    def detect_tools(self, destination: Path) -> List[str]:
        return [name for name, adapter in self._adapters.items() if adapter.supports_destination(destination)]

    def auto_detect(self, destination: Path) -> MigrationAdapter:
        detected = self.detect_tools(destination)
        if not detected:
            raise ToolDetectionError(f"No supported documentation tool detected in {destination}")
        return self._adapters[detected[0]]

    def migrate(self, destination: Path, *, tool: Optional[str] = None, dry_run: bool = False) -> MigrationResult:
        """Rewrite ``destination``; unknown tools fail before the file is touched."""

        destination = Path(destination)
        adapter = self.get_adapter(tool) if tool else self.auto_detect(destination)
        formatter = self._formatter_service.for_destination(destination)
        renderer = self._renderer_factory(dry_run)
        renderer.initialize(destination, formatter)
        adapter.migrate_documentation(destination, renderer)
        diff = renderer.finalize()
        return MigrationResult(destination=destination, tool=adapter.name, dry_run=dry_run, diff=diff)
