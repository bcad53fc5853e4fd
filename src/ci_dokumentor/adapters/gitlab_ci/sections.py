"""Section generators for GitLab CI pipelines and components."""

from __future__ import annotations

import json
from typing import Any, List, Mapping

from ci_dokumentor.adapters.common_sections import (
    ContentsSectionGenerator,
    ContributingSectionGenerator,
    GeneratedSectionGenerator,
    LicenseSectionGenerator,
    MarkdownSectionGenerator,
    SecuritySectionGenerator,
)
from ci_dokumentor.domain.docs.content import ReadableContent
from ci_dokumentor.domain.docs.sections import SectionIdentifier
from ci_dokumentor.ports.section_generator import SectionGenerator

from .parser import GitLabCIManifest, GitLabComponent, GitLabPipeline

DEFAULT_VERSION = "main"


def _yaml_scalar(value: Any) -> str:
    if value is None:
        return '""'
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False)
    return json.dumps(str(value), ensure_ascii=False)


def _display(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class GitLabCISectionGenerator(MarkdownSectionGenerator[GitLabCIManifest]):
    """Base for generators that need the GitLab manifest model."""


class HeaderSectionGenerator(GitLabCISectionGenerator):
    identifier = SectionIdentifier.HEADER

    def generate(self, manifest, formatter, repository, options):
        prefix = "GitLab CI Component" if isinstance(manifest, GitLabComponent) else "GitLab CI Pipeline"
        return formatter.heading(f"{prefix}: {manifest.name}", 1)


class OverviewSectionGenerator(GitLabCISectionGenerator):
    """Leading comment of the file, then stages and jobs."""

    identifier = SectionIdentifier.OVERVIEW

    def generate(self, manifest, formatter, repository, options):
        parts: List[ReadableContent] = []
        if manifest.description:
            parts.append(formatter.paragraph(manifest.description.strip()))
        if isinstance(manifest, GitLabPipeline) and manifest.stages:
            stages = formatter.list([formatter.inline_code(stage) for stage in manifest.stages], ordered=True)
            parts.append(formatter.heading("Stages", 3).append(formatter.line_break(), stages))
        if manifest.jobs:
            rows = [
                [
                    self._name_cell(formatter, name),
                    ReadableContent(str(job.get("stage") or "test")),
                    ReadableContent(_job_image(job)),
                ]
                for name, job in manifest.jobs.items()
            ]
            table = self._table(formatter, ("Job", "Stage", "Image"), rows)
            parts.append(formatter.heading("Jobs", 3).append(formatter.line_break(), table))
        if not parts:
            return ReadableContent.empty()
        return formatter.heading("Overview", 2).append(formatter.line_break(), ReadableContent.join(parts, formatter.line_break()))


def _job_image(job: Mapping[str, Any]) -> str:
    image = job.get("image")
    if isinstance(image, dict):
        image = image.get("name")
    return str(image) if image else "-"


class UsageSectionGenerator(GitLabCISectionGenerator):
    """``include:`` snippet pinned to ``options['version']``."""

    identifier = SectionIdentifier.USAGE

    def generate(self, manifest, formatter, repository, options):
        version = str(options.get("version") or DEFAULT_VERSION)
        if isinstance(manifest, GitLabComponent):
            lines = ["include:", f"  - component: {manifest.uses_name}@{version}"]
            if manifest.inputs:
                lines.append("    inputs:")
                for name, definition in manifest.inputs.items():
                    description = str(definition.get("description") or "").strip()
                    for line in description.splitlines():
                        lines.append(f"      # {line.rstrip()}" if line.strip() else "      #")
                    if "default" in definition:
                        lines.append(f"      {name}: {_yaml_scalar(definition['default'])}")
                    else:
                        lines.append("      # This input is required.")
                        lines.append(f'      {name}: ""')
        else:
            lines = [
                "include:",
                f"  - project: {_yaml_scalar(manifest.uses_name)}",
                f"    ref: {_yaml_scalar(version)}",
                f"    file: {_yaml_scalar('/' + manifest.path)}",
            ]
        snippet = "\n".join(lines)
        return formatter.heading("Usage", 2).append(formatter.line_break(), formatter.code(snippet, "yaml"))


class InputsSectionGenerator(GitLabCISectionGenerator):
    """Component ``spec:inputs``; an input without a default is required."""

    identifier = SectionIdentifier.INPUTS

    def generate(self, manifest, formatter, repository, options):
        if not isinstance(manifest, GitLabComponent) or not manifest.inputs:
            return ReadableContent.empty()
        rows = []
        for name, definition in manifest.inputs.items():
            description = str(definition.get("description") or "").strip()
            choices = definition.get("options")
            if isinstance(choices, list) and choices:
                rendered = ", ".join(f"`{choice}`" for choice in choices)
                description = "\n".join(part for part in (description, f"Options: {rendered}") if part)
            default = definition.get("default")
            rows.append(
                [
                    self._name_cell(formatter, name),
                    ReadableContent(description),
                    self._flag_cell(formatter, "default" not in definition),
                    formatter.bold(str(definition.get("type") or "string")),
                    formatter.inline_code(_display(default)),
                ]
            )
        table = self._table(formatter, ("Input", "Description", "Required", "Type", "Default"), rows)
        return formatter.heading("Inputs", 2).append(formatter.line_break(), table)


def default_generators() -> List[SectionGenerator[GitLabCIManifest]]:
    """Generators in default document order."""

    body: List[SectionGenerator[GitLabCIManifest]] = [
        OverviewSectionGenerator(),
        UsageSectionGenerator(),
        InputsSectionGenerator(),
        ContributingSectionGenerator(),
        SecuritySectionGenerator(),
        LicenseSectionGenerator(),
    ]
    return [
        HeaderSectionGenerator(),
        body[0],
        ContentsSectionGenerator(body),
        *body[1:],
        GeneratedSectionGenerator(),
    ]
