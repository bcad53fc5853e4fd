"""Port definition for repository metadata lookups."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class LicenseInfo:
    name: str
    spdx_id: Optional[str] = None
    url: Optional[str] = None


@dataclass(frozen=True)
class Repository:
    """Repository facts used by section generators.

    ``contributing`` and ``security`` are links to the guideline documents,
    absolute when the repository has a web URL.
    """

    owner: str
    name: str
    root: Path
    url: Optional[str] = None
    license: Optional[LicenseInfo] = None
    contributing: Optional[str] = None
    security: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


class RepositoryProvider(ABC):
    @abstractmethod
    def get_repository(self, root: Path) -> Repository:
        """Describe the repository containing ``root``."""
