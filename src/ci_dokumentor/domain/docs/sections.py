"""Section identifiers and the per-run section entry value object."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Union

from .content import ContentLike, ReadableContent
from .errors import UnknownSectionIdentifierError


class SectionIdentifier(str, Enum):
    """Closed set of section identifiers, declared in default document order."""

    HEADER = "header"
    BADGES = "badges"
    OVERVIEW = "overview"
    CONTENTS = "contents"
    QUICKSTART = "quickstart"
    USAGE = "usage"
    INPUTS = "inputs"
    OUTPUTS = "outputs"
    SECRETS = "secrets"
    EXAMPLES = "examples"
    CONTRIBUTING = "contributing"
    SECURITY = "security"
    LICENSE = "license"
    GENERATED = "generated"

    @classmethod
    def parse(cls, value: Union[str, "SectionIdentifier"]) -> "SectionIdentifier":
        if isinstance(value, SectionIdentifier):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise UnknownSectionIdentifierError(value)

    @classmethod
    def values(cls) -> List[str]:
        return [member.value for member in cls]

    def __str__(self) -> str:
        return self.value


DEFAULT_ORDER: Sequence[SectionIdentifier] = tuple(SectionIdentifier)


def parse_section_list(values: Optional[Iterable[str]]) -> List[SectionIdentifier]:
    """Parse identifiers from CLI/config input, accepting comma separated chunks."""

    result: List[SectionIdentifier] = []
    for raw in values or ():
        for chunk in str(raw).split(","):
            chunk = chunk.strip()
            if not chunk:
                continue
            identifier = SectionIdentifier.parse(chunk)
            if identifier not in result:
                result.append(identifier)
    return result


@dataclass(frozen=True)
class SectionEntry:
    """A generated section for the current run; never persisted."""

    identifier: SectionIdentifier
    content: ReadableContent

    def __post_init__(self) -> None:
        object.__setattr__(self, "identifier", SectionIdentifier.parse(self.identifier))
        object.__setattr__(self, "content", ReadableContent.of(self.content))

    @classmethod
    def create(cls, identifier: Union[str, SectionIdentifier], content: ContentLike) -> "SectionEntry":
        return cls(identifier=identifier, content=content)  # type: ignore[arg-type]

    def is_empty(self) -> bool:
        return self.content.trim().is_empty()
