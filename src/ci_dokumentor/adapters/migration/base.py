"""Shared regex-driven rewriting for foreign documentation markers."""

from __future__ import annotations

import re
from pathlib import Path
from typing import ClassVar, Dict, Optional, Set

from ci_dokumentor.adapters.renderer.base import read_destination
from ci_dokumentor.domain.docs.markers import PROTOCOL, MarkerProtocol
from ci_dokumentor.domain.docs.sections import SectionIdentifier
from ci_dokumentor.ports.migration import MigrationAdapter
from ci_dokumentor.ports.renderer import RendererAdapter

_IDENTIFIERS = "|".join(re.escape(value) for value in SectionIdentifier.values())
# Two regions for one identifier separated only by whitespace.
_ADJACENT_REGIONS = re.compile(
    rf"^[ \t]*<!-- (?P<identifier>{_IDENTIFIERS}):end -->[ \t]*\r?\n\s*^[ \t]*<!-- (?P=identifier):start -->[ \t]*(?=\r?$)",
    re.MULTILINE,
)


class RegexMigrationAdapter(MigrationAdapter):
    """Rewrites a tool's start/end comments to canonical section markers.

    Each pattern is applied as one independent substitution over the whole
    content; the first group of every pattern captures the foreign section
    name. Names missing from ``section_mappings`` are left untouched. When the
    start and end patterns are identical, successive occurrences of the same
    name alternate between start and end.
    """

    tool_name: ClassVar[str]
    section_mappings: ClassVar[Dict[str, SectionIdentifier]]
    start_pattern: ClassVar[Optional[re.Pattern[str]]] = None
    end_pattern: ClassVar[Optional[re.Pattern[str]]] = None
    detection_pattern: ClassVar[re.Pattern[str]]

    def __init__(self, protocol: MarkerProtocol = PROTOCOL) -> None:
        self._protocol = protocol

    @property
    def name(self) -> str:
        return self.tool_name

    def supports_destination(self, destination: Path) -> bool:
        destination = Path(destination)
        if not destination.is_file():
            return False
        text = read_destination(destination)
        return self.detection_pattern.search(text) is not None

    def migrate_documentation(self, destination: Path, renderer: RendererAdapter) -> None:
        content = renderer.read_existing_content()
        if content.is_empty():
            return
        renderer.replace_content(self.migrate_content(content.text))

    def migrate_content(self, text: str) -> str:
        migrated = self._rewrite_markers(text)
        return merge_adjacent_regions(migrated)

    def map_section(self, name: str) -> Optional[SectionIdentifier]:
        return self.section_mappings.get(self.normalize_name(name))

    def normalize_name(self, name: str) -> str:
        return name.strip().lower()

    # ------------------------------------------------------------------
    # Marker rewriting
    # ------------------------------------------------------------------

    def _rewrite_markers(self, text: str) -> str:
        start, end = self.start_pattern, self.end_pattern
        if start is None:
            return text
        if end is None or (end.pattern == start.pattern and end.flags == start.flags):
            return self._rewrite_toggling(text, start)
        text = end.sub(lambda match: self._canonical(match, kind="end"), text)
        return start.sub(lambda match: self._canonical(match, kind="start"), text)

    def _rewrite_toggling(self, text: str, pattern: re.Pattern[str]) -> str:
        opened: Set[SectionIdentifier] = set()

        def replace(match: re.Match[str]) -> str:
            identifier = self.map_section(match.group(1))
            if identifier is None:
                return match.group(0)
            if identifier in opened:
                opened.discard(identifier)
                return self._protocol.end_marker(identifier)
            opened.add(identifier)
            return self._protocol.start_marker(identifier)

        return pattern.sub(replace, text)

    def _canonical(self, match: re.Match[str], *, kind: str) -> str:
        identifier = self.map_section(match.group(1))
        if identifier is None:
            return match.group(0)
        if kind == "start":
            return self._protocol.start_marker(identifier)
        return self._protocol.end_marker(identifier)


def merge_adjacent_regions(text: str) -> str:
    """Join back-to-back regions that map to the same identifier."""

    return _ADJACENT_REGIONS.sub("", text)
