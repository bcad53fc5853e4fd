"""Immutable text unit shared by formatters, generators and renderers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Union

ContentLike = Union[str, "ReadableContent"]

_HTML_ESCAPES = {"&": "&amp;", "<": "&lt;", ">": "&gt;"}
_HTML_PATTERN = re.compile(r"[&<>]")


def _text(value: ContentLike) -> str:
    if isinstance(value, ReadableContent):
        return value.text
    return str(value)


@dataclass(frozen=True)
class ReadableContent:
    """Text value object; every transformation returns a new instance.

    Bytes only appear at I/O boundaries through :meth:`from_bytes` and
    :meth:`to_bytes` (UTF-8).
    """

    text: str = ""

    @classmethod
    def empty(cls) -> "ReadableContent":
        return cls("")

    @classmethod
    def of(cls, value: ContentLike) -> "ReadableContent":
        if isinstance(value, ReadableContent):
            return value
        return cls(str(value))

    @classmethod
    def from_bytes(cls, data: bytes) -> "ReadableContent":
        return cls(data.decode("utf-8"))

    def to_bytes(self) -> bytes:
        return self.text.encode("utf-8")

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def is_empty(self) -> bool:
        return len(self.text) == 0

    @property
    def size(self) -> int:
        """UTF-8 byte length."""

        return len(self.to_bytes())

    def __len__(self) -> int:
        return len(self.text)

    def __str__(self) -> str:
        return self.text

    def __add__(self, other: ContentLike) -> "ReadableContent":
        return self.append(other)

    def __radd__(self, other: ContentLike) -> "ReadableContent":
        return ReadableContent.of(other).append(self)

    def equals(self, other: ContentLike) -> bool:
        return self.text == _text(other)

    def starts_with(self, prefix: ContentLike) -> bool:
        return self.text.startswith(_text(prefix))

    def ends_with(self, suffix: ContentLike) -> bool:
        return self.text.endswith(_text(suffix))

    def includes(self, needle: ContentLike) -> bool:
        return _text(needle) in self.text

    def search(self, needle: ContentLike, offset: int = 0) -> int:
        """Return the index of ``needle`` at or after ``offset``, or -1."""

        return self.text.find(_text(needle), offset)

    def test(self, pattern: Union[str, re.Pattern[str]]) -> bool:
        return re.search(pattern, self.text) is not None

    def match(self, pattern: Union[str, re.Pattern[str]]) -> Optional[re.Match[str]]:
        return re.search(pattern, self.text)

    def is_multiline(self) -> bool:
        return "\n" in self.text or "\r" in self.text

    # ------------------------------------------------------------------
    # Transformations
    # ------------------------------------------------------------------

    def append(self, *parts: ContentLike) -> "ReadableContent":
        if not parts:
            return self
        return ReadableContent(self.text + "".join(_text(part) for part in parts))

    def trim(self) -> "ReadableContent":
        return ReadableContent(self.text.strip())

    def trim_start(self) -> "ReadableContent":
        return ReadableContent(self.text.lstrip())

    def trim_end(self) -> "ReadableContent":
        return ReadableContent(self.text.rstrip())

    def slice(self, start: Optional[int] = None, end: Optional[int] = None) -> "ReadableContent":
        return ReadableContent(self.text[start:end])

    def replace(
        self,
        pattern: Union[ContentLike, re.Pattern[str]],
        replacement: Union[ContentLike, Callable[[re.Match[str]], str]],
    ) -> "ReadableContent":
        """Replace a literal (every occurrence) or a compiled pattern."""

        if isinstance(pattern, re.Pattern):
            repl = replacement if callable(replacement) else _text(replacement).replace("\\", "\\\\")
            return ReadableContent(pattern.sub(repl, self.text))
        if callable(replacement):
            raise TypeError("callable replacements require a compiled pattern")
        return ReadableContent(self.text.replace(_text(pattern), _text(replacement)))

    def escape(self, search: Union[str, Sequence[str]], escape_char: str = "\\") -> "ReadableContent":
        """Prefix every character of each occurrence of ``search`` with ``escape_char``.

        A sequence of strings escapes each entry in turn.
        """

        if self.is_empty() or not search:
            return self
        if not isinstance(search, str):
            result = self
            for item in search:
                result = result.escape(item, escape_char)
            return result
        escaped = "".join(escape_char + char for char in search)
        return ReadableContent(self.text.replace(search, escaped))

    def html_escape(self) -> "ReadableContent":
        if not _HTML_PATTERN.search(self.text):
            return self
        return ReadableContent(_HTML_PATTERN.sub(lambda m: _HTML_ESCAPES[m.group(0)], self.text))

    def split_lines(self) -> List["ReadableContent"]:
        if self.is_empty():
            return []
        return [ReadableContent(line) for line in re.split(r"\r\n|\r|\n", self.text)]

    @staticmethod
    def join(parts: Iterable[ContentLike], separator: ContentLike = "") -> "ReadableContent":
        return ReadableContent(_text(separator).join(_text(part) for part in parts))
