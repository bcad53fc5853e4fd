"""Port definition for foreign documentation tool migrations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from .renderer import RendererAdapter


class MigrationAdapter(ABC):
    @property
    @abstractmethod
    def name(self) -> str:
        """Tool name used for lookup (case-insensitive)."""

    @abstractmethod
    def supports_destination(self, destination: Path) -> bool:
        """Return True when ``destination`` carries this tool's markers."""

    @abstractmethod
    def migrate_documentation(self, destination: Path, renderer: RendererAdapter) -> None:
        """Rewrite the renderer's content to canonical markers."""
