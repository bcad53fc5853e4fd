"""Port definition for section generators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, Mapping, TypeVar

from ci_dokumentor.adapters.formatter.markdown import MarkdownFormatter
from ci_dokumentor.domain.docs.content import ReadableContent
from ci_dokumentor.domain.docs.sections import SectionIdentifier

from .repository import Repository

ManifestT = TypeVar("ManifestT")


class SectionGenerator(ABC, Generic[ManifestT]):
    """Produces the content of one section from a parsed manifest."""

    identifier: SectionIdentifier

    @abstractmethod
    def generate(
        self,
        manifest: ManifestT,
        formatter: MarkdownFormatter,
        repository: Repository,
        options: Mapping[str, Any],
    ) -> ReadableContent:
        """Return the section body; empty content removes the section."""
