"""Non-destructive merge of generated sections into an existing document."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from .content import ReadableContent
from .errors import MarkerCollisionError
from .markers import PROTOCOL, MarkerProtocol, OwnedBlock, UntouchedBlock
from .sections import SectionEntry, SectionIdentifier

SEPARATOR = "\n\n"


@dataclass(frozen=True)
class SynchronizationResult:
    content: ReadableContent
    emitted: Tuple[SectionIdentifier, ...]
    removed: Tuple[SectionIdentifier, ...]
    preserved: int

    @property
    def text(self) -> str:
        return self.content.text


@dataclass
class _Slot:
    identifier: Optional[SectionIdentifier]
    items: List[str] = field(default_factory=list)


class SectionSynchronizer:
    """Merges an ordered list of section entries into destination text.

    Hand-written text before the first marker is kept byte-for-byte and text
    after the last marker is kept apart from its leading newlines. Text found
    between owned regions, and owned regions for identifiers not supplied in
    this run, are re-attached after the section they followed. Entries with
    empty content remove their section.
    """

    def __init__(self, protocol: MarkerProtocol = PROTOCOL) -> None:
        self._protocol = protocol

    def synchronize(self, existing: str, entries: Iterable[SectionEntry]) -> ReadableContent:
        return self.merge(existing, entries).content

    def merge(self, existing: str, entries: Iterable[SectionEntry]) -> SynchronizationResult:
        ordered = _collapse(entries)
        rendered: Dict[SectionIdentifier, str] = {}
        for entry in ordered:
            if entry.is_empty():
                continue
            rendered[entry.identifier] = self.render_section(entry)
        declared = {entry.identifier for entry in ordered}

        blocks = self._protocol.parse(existing)
        owned_positions = [index for index, block in enumerate(blocks) if isinstance(block, OwnedBlock)]
        if not owned_positions and not rendered:
            return SynchronizationResult(ReadableContent(existing), (), (), 0)

        if owned_positions:
            first, last = owned_positions[0], owned_positions[-1]
            head = "".join(block.text for block in blocks[:first])
            middle = blocks[first : last + 1]
            tail = "".join(block.text for block in blocks[last + 1 :])
        else:
            head, middle, tail = existing, [], ""

        leading = _Slot(identifier=None)
        slots: Dict[SectionIdentifier, _Slot] = {identifier: _Slot(identifier) for identifier in rendered}
        current = leading
        removed: List[SectionIdentifier] = []
        preserved = 0
        for block in middle:
            if isinstance(block, OwnedBlock):
                if block.identifier in rendered:
                    current = slots[block.identifier]
                    continue
                if block.identifier in declared:
                    removed.append(block.identifier)
                    continue
                current.items.append(block.text.strip("\r\n"))
                preserved += 1
                continue
            if isinstance(block, UntouchedBlock) and not block.is_blank():
                current.items.append(block.text.strip("\r\n"))
                preserved += 1

        chunks: List[str] = list(leading.items)
        for identifier, text in rendered.items():
            chunks.append(text)
            chunks.extend(slots[identifier].items)

        segments: List[str] = []
        if chunks:
            segments.append(SEPARATOR.join(chunks))
        tail_text = tail.lstrip("\r\n")
        if tail_text.strip():
            segments.append(tail_text)
        body = SEPARATOR.join(segments)

        if not head.strip():
            text = body
        elif not body:
            text = head
        else:
            text = _pad_head(head) + body
        text = _ensure_trailing_newline(text)
        return SynchronizationResult(
            content=ReadableContent(text),
            emitted=tuple(rendered),
            removed=tuple(removed),
            preserved=preserved,
        )

    def render_section(self, entry: SectionEntry) -> str:
        body = entry.content.trim().text
        collision = self._protocol.find_marker(body)
        if collision is not None:
            raise MarkerCollisionError(entry.identifier.value, collision.start(), collision.group(0).strip())
        start = self._protocol.start_marker(entry.identifier)
        end = self._protocol.end_marker(entry.identifier)
        return f"{start}{SEPARATOR}{body}{SEPARATOR}{end}"


def _collapse(entries: Iterable[SectionEntry]) -> List[SectionEntry]:
    """Keep the first position of each identifier and the last content written for it."""

    positions: Dict[SectionIdentifier, int] = {}
    ordered: List[SectionEntry] = []
    for entry in entries:
        if entry.identifier in positions:
            ordered[positions[entry.identifier]] = entry
            continue
        positions[entry.identifier] = len(ordered)
        ordered.append(entry)
    return ordered


def _pad_head(head: str) -> str:
    if head.endswith(("\n\n", "\n\r\n")):
        return head
    if head.endswith("\n"):
        return head + "\n"
    return head + SEPARATOR


def _ensure_trailing_newline(text: str) -> str:
    return text if not text or text.endswith("\n") else text + "\n"


SYNCHRONIZER = SectionSynchronizer()
