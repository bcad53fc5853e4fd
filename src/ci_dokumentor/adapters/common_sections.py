"""Section generators shared by every CI/CD platform.

They rely on repository facts or on other generators, never on a platform's
manifest model.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any, List, Sequence

from ci_dokumentor.adapters.formatter.markdown import MarkdownFormatter
from ci_dokumentor.domain.docs.content import ReadableContent
from ci_dokumentor.domain.docs.sections import SectionIdentifier
from ci_dokumentor.ports.section_generator import ManifestT, SectionGenerator

_LEVEL_TWO_HEADING = re.compile(r"^##\s+(.+?)\s*#*\s*$")
_ANCHOR_DROP = re.compile(r"[^\w\- ]")


def heading_anchor(title: str) -> str:
    """GitHub-style anchor for a heading: lower case, punctuation dropped, spaces to hyphens."""

    return _ANCHOR_DROP.sub("", title.strip().lower()).replace(" ", "-")


class MarkdownSectionGenerator(SectionGenerator[ManifestT]):
    """Table and cell helpers used by the platform generators."""

    @staticmethod
    def _table(
        formatter: MarkdownFormatter,
        headers: Sequence[str],
        rows: Sequence[Sequence[ReadableContent]],
    ) -> ReadableContent:
        return formatter.table([formatter.bold(header) for header in headers], rows)

    @staticmethod
    def _name_cell(formatter: MarkdownFormatter, name: str) -> ReadableContent:
        return formatter.bold(formatter.inline_code(name))

    @staticmethod
    def _flag_cell(formatter: MarkdownFormatter, value: Any) -> ReadableContent:
        return formatter.bold("true" if value else "false")


class ContributingSectionGenerator(MarkdownSectionGenerator[Any]):
    """Empty when the repository has no contributing guidelines."""

    identifier = SectionIdentifier.CONTRIBUTING

    def generate(self, manifest, formatter, repository, options):
        if not repository.contributing:
            return ReadableContent.empty()
        link = formatter.link("contributing guidelines", repository.contributing)
        text = ReadableContent("Contributions are welcome! Please see the ").append(link, " for more details.")
        return formatter.heading("Contributing", 2).append(formatter.line_break(), formatter.paragraph(text))


class SecuritySectionGenerator(MarkdownSectionGenerator[Any]):
    """Empty when the repository has no security policy."""

    identifier = SectionIdentifier.SECURITY

    def generate(self, manifest, formatter, repository, options):
        if not repository.security:
            return ReadableContent.empty()
        link = formatter.link("security policy", repository.security)
        text = ReadableContent("We take security seriously. Please see our ").append(
            link, " for information on how to report security vulnerabilities."
        )
        return formatter.heading("Security", 2).append(formatter.line_break(), formatter.paragraph(text))


class LicenseSectionGenerator(MarkdownSectionGenerator[Any]):
    """Empty when no licence file is detected, which removes the section."""

    identifier = SectionIdentifier.LICENSE

    def generate(self, manifest, formatter, repository, options):
        license_info = repository.license
        if license_info is None:
            return ReadableContent.empty()
        author = getattr(manifest, "author", None) or repository.owner
        year = options.get("year") or date.today().year
        content = formatter.heading("License", 2).append(
            formatter.line_break(),
            formatter.paragraph(f"This project is licensed under the {license_info.name}."),
        )
        if license_info.spdx_id:
            content = content.append(formatter.line_break(), formatter.paragraph(f"SPDX-License-Identifier: {license_info.spdx_id}"))
        content = content.append(formatter.line_break(), formatter.paragraph(f"Copyright © {year} {author}"))
        if license_info.url:
            link = formatter.link("license", license_info.url)
            content = content.append(formatter.line_break(), formatter.paragraph(ReadableContent("For more details, see the ").append(link, ".")))
        return content


class GeneratedSectionGenerator(MarkdownSectionGenerator[Any]):
    identifier = SectionIdentifier.GENERATED

    def generate(self, manifest, formatter, repository, options):
        return formatter.paragraph(formatter.italic("This documentation was automatically generated by ci-dokumentor."))


class ContentsSectionGenerator(MarkdownSectionGenerator[Any]):
    """Links to the level 2 heading of each section in ``sections``.

    Sections that would come out empty for the manifest are left out.
    """

    identifier = SectionIdentifier.CONTENTS

    def __init__(self, sections: Sequence[SectionGenerator[Any]]) -> None:
        self._sections = list(sections)

    def generate(self, manifest, formatter, repository, options):
        items: List[ReadableContent] = []
        for generator in self._sections:
            content = generator.generate(manifest, formatter, repository, {})
            for line in content.split_lines():
                match = _LEVEL_TWO_HEADING.match(line.text)
                if match:
                    title = match.group(1)
                    items.append(formatter.link(title, f"#{heading_anchor(title)}"))
                    break
        if not items:
            return ReadableContent.empty()
        return formatter.heading("Contents", 2).append(formatter.line_break(), formatter.list(items))
