"""Migration from auto-doc, which writes plain ``## Inputs`` style headings."""

from __future__ import annotations

import re
from typing import List, Set

from ci_dokumentor.domain.docs.markers import MARKER_PATTERN
from ci_dokumentor.domain.docs.sections import SectionIdentifier

from .base import RegexMigrationAdapter, merge_adjacent_regions

HEADING = re.compile(r"^##\s+(Inputs|Outputs|Secrets|Description)\s*$", re.IGNORECASE)
BOUNDARY = re.compile(r"^#{1,2}\s")
FENCE = re.compile(r"^\s*(```|~~~)")


class AutoDocMigrationAdapter(RegexMigrationAdapter):
    """Wraps each known heading and the text below it in canonical markers.

    A wrapped region runs from the heading to the line before the next level 1
    or 2 heading, an existing marker line, or the end of the document. Fenced
    code blocks are skipped. Sections that already carry canonical markers are
    left alone.
    """

    tool_name = "auto-doc"
    section_mappings = {
        "inputs": SectionIdentifier.INPUTS,
        "outputs": SectionIdentifier.OUTPUTS,
        "secrets": SectionIdentifier.SECRETS,
        "description": SectionIdentifier.OVERVIEW,
    }
    detection_pattern = re.compile(r"^##\s+(Inputs|Outputs|Secrets|Description)\s*$", re.MULTILINE | re.IGNORECASE)

    def migrate_content(self, text: str) -> str:
        lines = text.splitlines(keepends=True)
        fenced = _fenced_lines(lines)
        taken: Set[SectionIdentifier] = {
            SectionIdentifier(match.group("identifier")) for match in MARKER_PATTERN.finditer(text)
        }
        output: List[str] = []
        index = 0
        while index < len(lines):
            line = lines[index]
            match = None if index in fenced else HEADING.match(line.rstrip("\r\n"))
            identifier = self.map_section(match.group(1)) if match else None
            if identifier is None or identifier in taken:
                output.append(line)
                index += 1
                continue

            stop = index + 1
            while stop < len(lines) and not self._is_boundary(lines[stop], stop in fenced):
                stop += 1
            newline = "\r\n" if line.endswith("\r\n") else "\n"
            block = lines[index:stop]
            keep = len(block)
            while keep > 1 and not block[keep - 1].strip():
                keep -= 1
            body = "".join(block[:keep])
            if not body.endswith("\n"):
                body += newline
            start, end = self._protocol.start_marker(identifier), self._protocol.end_marker(identifier)
            output.append(f"{start}{newline}{body}{end}{newline}")
            output.extend(block[keep:])
            taken.add(identifier)
            index = stop
        return merge_adjacent_regions("".join(output))

    @staticmethod
    def _is_boundary(line: str, in_fence: bool) -> bool:
        if in_fence:
            return False
        stripped = line.rstrip("\r\n")
        return bool(BOUNDARY.match(stripped)) or MARKER_PATTERN.match(stripped) is not None


def _fenced_lines(lines: List[str]) -> Set[int]:
    fenced: Set[int] = set()
    inside = False
    for number, line in enumerate(lines):
        if FENCE.match(line):
            fenced.add(number)
            inside = not inside
            continue
        if inside:
            fenced.add(number)
    return fenced
