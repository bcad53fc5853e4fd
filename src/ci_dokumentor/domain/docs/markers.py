"""Marker protocol: delimiting owned sections inside a destination document."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Set, Union

from .errors import MalformedDocumentError
from .sections import SectionIdentifier

START_TEMPLATE = "<!-- {identifier}:start -->"
END_TEMPLATE = "<!-- {identifier}:end -->"

_IDENTIFIERS = "|".join(re.escape(value) for value in SectionIdentifier.values())
# Markers only count when they occupy a whole line.
MARKER_PATTERN = re.compile(
    rf"^[ \t]*<!--[ \t]*(?P<identifier>{_IDENTIFIERS}):(?P<kind>start|end)[ \t]*-->[ \t]*\r?$",
    re.MULTILINE,
)


@dataclass(frozen=True)
class OwnedBlock:
    """Marker-delimited region; ``text`` spans both marker lines."""

    identifier: SectionIdentifier
    text: str
    body: str
    offset: int


@dataclass(frozen=True)
class UntouchedBlock:
    text: str
    offset: int

    def is_blank(self) -> bool:
        return not self.text.strip()


Block = Union[OwnedBlock, UntouchedBlock]


class MarkerProtocol:
    """Renders and parses section markers."""

    def start_marker(self, identifier: Union[str, SectionIdentifier]) -> str:
        return START_TEMPLATE.format(identifier=SectionIdentifier.parse(identifier).value)

    def end_marker(self, identifier: Union[str, SectionIdentifier]) -> str:
        return END_TEMPLATE.format(identifier=SectionIdentifier.parse(identifier).value)

    def find_marker(self, text: str) -> Optional[re.Match[str]]:
        return MARKER_PATTERN.search(text)

    def contains_marker(self, text: str) -> bool:
        return self.find_marker(text) is not None

    def parse(self, document: str) -> List[Block]:
        """Partition ``document`` into owned and untouched blocks.

        The partition is lossless: joining every block's ``text`` yields
        ``document``. Raises :class:`MalformedDocumentError` when markers do
        not pair up.
        """

        blocks: List[Block] = []
        seen: Set[SectionIdentifier] = set()
        cursor = 0
        open_match: Optional[re.Match[str]] = None
        open_identifier: Optional[SectionIdentifier] = None

        for match in MARKER_PATTERN.finditer(document):
            identifier = SectionIdentifier(match.group("identifier"))
            kind = match.group("kind")
            if kind == "start":
                if open_identifier is not None:
                    raise MalformedDocumentError(
                        identifier.value,
                        match.start(),
                        f"start marker found while section '{open_identifier.value}' is still open",
                    )
                if identifier in seen:
                    raise MalformedDocumentError(identifier.value, match.start(), "duplicate section markers")
                open_match = match
                open_identifier = identifier
                continue

            if open_identifier is None or open_match is None:
                raise MalformedDocumentError(identifier.value, match.start(), "end marker without matching start marker")
            if identifier is not open_identifier:
                raise MalformedDocumentError(
                    open_identifier.value,
                    match.start(),
                    f"end marker for '{identifier.value}' closes section '{open_identifier.value}'",
                )

            start = open_match.start()
            if start > cursor:
                blocks.append(UntouchedBlock(text=document[cursor:start], offset=cursor))
            body_start = _line_end(document, open_match.end())
            end = _line_end(document, match.end())
            blocks.append(
                OwnedBlock(
                    identifier=identifier,
                    text=document[start:end],
                    body=document[body_start:match.start()],
                    offset=start,
                )
            )
            seen.add(identifier)
            cursor = end
            open_match = None
            open_identifier = None

        if open_identifier is not None and open_match is not None:
            raise MalformedDocumentError(open_identifier.value, open_match.start(), "start marker is never closed")
        if cursor < len(document):
            blocks.append(UntouchedBlock(text=document[cursor:], offset=cursor))
        return blocks


def _line_end(text: str, position: int) -> int:
    if position < len(text) and text[position] == "\n":
        return position + 1
    return position


PROTOCOL = MarkerProtocol()
