"""Markdown formatter used by section generators."""

from __future__ import annotations

from typing import Optional, Sequence

from ci_dokumentor.domain.docs.content import ContentLike, ReadableContent

LINE_BREAK = "\n"


def _c(value: ContentLike) -> ReadableContent:
    return ReadableContent.of(value)


class MarkdownFormatter:
    """GitHub flavoured markdown helpers returning :class:`ReadableContent`."""

    language = "markdown"
    extensions = (".md", ".markdown")

    def supports_destination(self, destination: str) -> bool:
        return destination.lower().endswith(self.extensions)

    def line_break(self) -> ReadableContent:
        return ReadableContent(LINE_BREAK)

    def horizontal_rule(self) -> ReadableContent:
        return ReadableContent("---")

    def heading(self, text: ContentLike, level: int = 1) -> ReadableContent:
        hashes = "#" * max(1, min(6, level))
        return ReadableContent(f"{hashes} ").append(text, LINE_BREAK)

    def paragraph(self, text: ContentLike) -> ReadableContent:
        return _c(text).append(LINE_BREAK)

    def comment(self, text: ContentLike) -> ReadableContent:
        return ReadableContent("<!-- ").append(text, " -->", LINE_BREAK)

    def bold(self, text: ContentLike) -> ReadableContent:
        return ReadableContent("**").append(text, "**")

    def italic(self, text: ContentLike) -> ReadableContent:
        return ReadableContent("*").append(text, "*")

    def inline_code(self, text: ContentLike) -> ReadableContent:
        return ReadableContent("`").append(text, "`")

    def code(self, text: ContentLike, language: Optional[ContentLike] = None) -> ReadableContent:
        body = _c(text).trim_end()
        return ReadableContent("```").append(language or "", LINE_BREAK, body, LINE_BREAK, "```", LINE_BREAK)

    def link(self, text: ContentLike, url: ContentLike) -> ReadableContent:
        return ReadableContent("[").append(text, "](", url, ")")

    def image(
        self,
        url: ContentLike,
        alt_text: ContentLike,
        *,
        width: Optional[str] = None,
        align: Optional[str] = None,
    ) -> ReadableContent:
        if width or align:
            attributes = ""
            if width:
                attributes += f' width="{width}"'
            if align:
                attributes += f' align="{align}"'
            return ReadableContent(f'<img src="{_c(url)}"{attributes} alt="{_c(alt_text)}" />')
        return ReadableContent("![").append(alt_text, "](", url, ")")

    def badge(self, label: ContentLike, url: ContentLike, link: Optional[ContentLike] = None) -> ReadableContent:
        badge = ReadableContent("![").append(label, "](", url, ")")
        if link:
            return self.link(badge, link)
        return badge

    def center(self, text: ContentLike) -> ReadableContent:
        lines = [f"  {line}" if line else "" for line in _c(text).trim().text.split(LINE_BREAK)]
        indented = LINE_BREAK.join(lines)
        if not indented.strip():
            return ReadableContent('<div align="center"></div>' + LINE_BREAK)
        return ReadableContent('<div align="center">').append(LINE_BREAK, indented, LINE_BREAK, "</div>", LINE_BREAK)

    def list(self, items: Sequence[ContentLike], ordered: bool = False) -> ReadableContent:
        lines = []
        for index, item in enumerate(items, start=1):
            prefix = f"{index}. " if ordered else "- "
            lines.append(prefix + str(_c(item)))
        if not lines:
            return ReadableContent.empty()
        return ReadableContent(LINE_BREAK.join(lines) + LINE_BREAK)

    def blockquote(self, text: ContentLike) -> ReadableContent:
        lines = [f"> {line}" for line in _c(text).text.split(LINE_BREAK)]
        return ReadableContent(LINE_BREAK.join(lines) + LINE_BREAK)

    def details(self, summary: ContentLike, text: ContentLike) -> ReadableContent:
        return ReadableContent(f"<details>\n<summary>{_c(summary)}</summary>\n\n{_c(text)}\n\n</details>\n")

    def table(self, headers: Sequence[ContentLike], rows: Sequence[Sequence[ContentLike]]) -> ReadableContent:
        """Render a pipe table; multi-line cells spill into continuation rows."""

        lines = []
        header_cells = [_c(header).split_lines() or [ReadableContent.empty()] for header in headers]
        lines.append(_table_row([cells[0] for cells in header_cells]))
        lines.append("| " + " | ".join("---" for _ in headers) + " |")
        lines.extend(_continuation_rows(header_cells))
        for row in rows:
            row_cells = [_c(cell).split_lines() or [ReadableContent.empty()] for cell in row]
            lines.append(_table_row([cells[0] for cells in row_cells]))
            lines.extend(_continuation_rows(row_cells))
        return ReadableContent(LINE_BREAK.join(lines) + LINE_BREAK)


def _table_cell(cell: ReadableContent) -> str:
    return cell.escape("|").text


def _table_row(cells: Sequence[ReadableContent]) -> str:
    return "| " + " | ".join(_table_cell(cell) for cell in cells) + " |"


def _continuation_rows(columns: Sequence[Sequence[ReadableContent]]) -> list:
    depth = max((len(cells) for cells in columns), default=1)
    rows = []
    for index in range(1, depth):
        rows.append(_table_row([cells[index] if index < len(cells) else ReadableContent.empty() for cells in columns]))
    return rows
