"""Section generators for GitHub Actions and workflows."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

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

from .parser import GitHubAction, GitHubActionsManifest, GitHubWorkflow

DEFAULT_VERSION = "main"
SHIELDS = "https://img.shields.io"
EXAMPLE_DIRS = ("examples", ".github/examples")

_HEADING = re.compile(r"^(#{1,6})\s+(.*)$")
_LOCAL_USES = re.compile(r"^\s*-?\s*uses:\s*\./?\s*$", re.MULTILINE)
_USES_LINE = re.compile(r"^(?P<prefix>\s*-?\s*uses:\s*)(?P<ref>[^\s#]+)(?P<rest>.*)$", re.MULTILINE)


def _description_lines(text: Optional[str]) -> List[str]:
    return [line.rstrip() for line in (text or "").strip().splitlines()]


def _scalar(value: Any) -> str:
    if value is None or value == "":
        return '""'
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(str(value), ensure_ascii=False)


def _with_block(entries: Mapping[str, Mapping[str, Any]], indent: str) -> List[str]:
    """Render ``key: default`` lines, each preceded by its description as comments."""

    lines: List[str] = []
    for name, definition in entries.items():
        for line in _description_lines(definition.get("description")):
            lines.append(f"{indent}# {line}" if line.strip() else f"{indent}#")
        if definition.get("required"):
            lines.append(f"{indent}# This input is required.")
        if definition.get("default") not in (None, ""):
            lines.append(f"{indent}# Default: `{definition.get('default')}`")
        lines.append(f"{indent}{name}: {_scalar(definition.get('default'))}")
    return lines


class GitHubActionsSectionGenerator(MarkdownSectionGenerator[GitHubActionsManifest]):
    """Base for generators that need the GitHub manifest model."""


class HeaderSectionGenerator(GitHubActionsSectionGenerator):
    identifier = SectionIdentifier.HEADER

    def generate(self, manifest, formatter, repository, options):
        if isinstance(manifest, GitHubAction):
            prefix = "GitHub Action"
        elif manifest.is_reusable:
            prefix = "GitHub Reusable Workflow"
        else:
            prefix = "GitHub Workflow"
        return formatter.heading(f"{prefix}: {manifest.name}", 1)


class BadgesSectionGenerator(GitHubActionsSectionGenerator):
    """Release, licence and stars badges; extra badges come from ``extra_badges`` options."""

    identifier = SectionIdentifier.BADGES

    def generate(self, manifest, formatter, repository, options):
        badges: List[ReadableContent] = []
        if repository.url:
            full_name = repository.full_name
            if isinstance(manifest, GitHubAction):
                slug = manifest.name.lower().replace(" ", "-")
                badges.append(
                    formatter.badge(
                        "Marketplace",
                        f"{SHIELDS}/badge/Marketplace-{slug}-blue?logo=github-actions",
                        f"https://github.com/marketplace/actions/{slug}",
                    )
                )
            badges.append(
                formatter.badge("Release", f"{SHIELDS}/github/v/release/{full_name}", f"{repository.url}/releases")
            )
            if repository.license:
                badges.append(
                    formatter.badge("License", f"{SHIELDS}/github/license/{full_name}", f"{repository.url}/blob/main/LICENSE")
                )
            badges.append(
                formatter.badge("Stars", f"{SHIELDS}/github/stars/{full_name}?style=social", f"{repository.url}/stargazers")
            )
        for extra in options.get("extra_badges") or ():
            if isinstance(extra, Mapping) and extra.get("label") and extra.get("url"):
                badges.append(formatter.badge(str(extra["label"]), str(extra["url"]), extra.get("link_url")))
        if not badges:
            return ReadableContent.empty()
        return ReadableContent.join(badges, "\n").append("\n")


class OverviewSectionGenerator(GitHubActionsSectionGenerator):
    """Description, merged permissions and, for workflows, a jobs table."""

    identifier = SectionIdentifier.OVERVIEW

    def generate(self, manifest, formatter, repository, options):
        parts: List[ReadableContent] = []
        if manifest.description:
            parts.append(formatter.paragraph(manifest.description.strip()))
        permissions = self._permissions(manifest)
        if permissions:
            items = [
                formatter.bold(formatter.inline_code(permission)).append(": ", formatter.inline_code(level))
                for permission, level in permissions
            ]
            parts.append(formatter.heading("Permissions", 3).append(formatter.line_break(), formatter.list(items)))
        if isinstance(manifest, GitHubWorkflow) and manifest.jobs:
            parts.append(formatter.heading("Jobs", 3).append(formatter.line_break(), self._jobs_table(formatter, manifest)))
        if not parts:
            return ReadableContent.empty()
        return formatter.heading("Overview", 2).append(formatter.line_break(), ReadableContent.join(parts, formatter.line_break()))

    @staticmethod
    def _permissions(manifest: GitHubActionsManifest) -> List[Tuple[str, str]]:
        if not isinstance(manifest, GitHubWorkflow):
            return []
        merged: Dict[str, str] = dict(manifest.permissions)
        for job in manifest.jobs.values():
            job_permissions = job.get("permissions")
            if isinstance(job_permissions, dict):
                merged.update({str(key): str(value) for key, value in job_permissions.items()})
        return sorted(merged.items())

    def _jobs_table(self, formatter, manifest: GitHubWorkflow) -> ReadableContent:
        rows = []
        for job_id, job in manifest.jobs.items():
            if job.get("uses"):
                runs_on = ReadableContent("uses ").append(formatter.inline_code(str(job["uses"])))
            else:
                runs_on = ReadableContent(_join_values(job.get("runs-on")) or "-")
            steps = job.get("steps")
            rows.append(
                [
                    self._name_cell(formatter, job_id),
                    ReadableContent(str(job.get("name") or "")),
                    runs_on,
                    ReadableContent(str(len(steps)) if isinstance(steps, list) else "-"),
                    ReadableContent(_join_values(job.get("needs")) or "-"),
                ]
            )
        return self._table(formatter, ("Job", "Name", "Runs on", "Steps", "Needs"), rows)


def _join_values(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(str(item) for item in value)
    return str(value)


class UsageSectionGenerator(GitHubActionsSectionGenerator):
    """YAML snippet referencing the manifest at ``options['version']``."""

    identifier = SectionIdentifier.USAGE

    def generate(self, manifest, formatter, repository, options):
        version = str(options.get("version") or DEFAULT_VERSION)
        if isinstance(manifest, GitHubAction):
            snippet = self._action_usage(manifest, version)
        else:
            snippet = self._workflow_usage(manifest, version)
        return formatter.heading("Usage", 2).append(formatter.line_break(), formatter.code(snippet, "yaml"))

    @staticmethod
    def _action_usage(manifest: GitHubAction, version: str) -> str:
        lines = [f"- uses: {manifest.uses_name}@{version}"]
        if manifest.inputs:
            lines.append("  with:")
            lines.extend(_with_block(manifest.inputs, "    "))
        return "\n".join(lines)

    @staticmethod
    def _workflow_usage(manifest: GitHubWorkflow, version: str) -> str:
        triggers = {
            key: value or {}
            for key, value in manifest.on.items()
            if key not in ("workflow_call", "workflow_dispatch")
        }
        document: Dict[str, Any] = {
            "name": manifest.name,
            "on": triggers or {"push": {"branches": ["main"]}},
        }
        if manifest.permissions:
            document["permissions"] = dict(manifest.permissions)
        head = yaml.safe_dump(document, sort_keys=False, default_flow_style=False).rstrip("\n")
        # PyYAML emits the trigger key quoted as 'on'.
        head = re.sub(r"^'on':", "on:", head, flags=re.MULTILINE)
        job_name = manifest.source.stem
        lines = [head, "jobs:", f"  {job_name}:", f"    uses: {manifest.uses_name}@{version}"]
        if manifest.secrets:
            lines.append("    secrets:")
            lines.extend(_with_block(manifest.secrets, "      "))
        inputs = manifest.trigger_inputs("workflow_call") or manifest.trigger_inputs("workflow_dispatch")
        if inputs:
            lines.append("    with:")
            lines.extend(_with_block(inputs, "      "))
        return "\n".join(lines)


class InputsSectionGenerator(GitHubActionsSectionGenerator):
    identifier = SectionIdentifier.INPUTS

    def generate(self, manifest, formatter, repository, options):
        if isinstance(manifest, GitHubAction):
            if not manifest.inputs:
                return ReadableContent.empty()
            rows = [
                [
                    self._name_cell(formatter, name),
                    self._description_cell(definition),
                    self._flag_cell(formatter, definition.get("required")),
                    formatter.inline_code(str(definition.get("default", "") or "")),
                ]
                for name, definition in manifest.inputs.items()
            ]
            table = self._table(formatter, ("Input", "Description", "Required", "Default"), rows)
            return formatter.heading("Inputs", 2).append(formatter.line_break(), table)

        parts: List[ReadableContent] = []
        for trigger, title in (("workflow_dispatch", "Workflow Dispatch Inputs"), ("workflow_call", "Workflow Call Inputs")):
            inputs = manifest.trigger_inputs(trigger)
            if not inputs:
                continue
            rows = [
                [
                    self._name_cell(formatter, name),
                    self._description_cell(definition),
                    self._flag_cell(formatter, definition.get("required")),
                    formatter.bold(str(definition.get("type", "string"))),
                    formatter.inline_code(str(definition.get("default", "") or "")),
                ]
                for name, definition in inputs.items()
            ]
            table = self._table(formatter, ("Input", "Description", "Required", "Type", "Default"), rows)
            parts.append(formatter.heading(title, 3).append(formatter.line_break(), table))
        if not parts:
            return ReadableContent.empty()
        return formatter.heading("Inputs", 2).append(formatter.line_break(), ReadableContent.join(parts, "\n"))

    @staticmethod
    def _description_cell(definition: Mapping[str, Any]) -> ReadableContent:
        description = str(definition.get("description") or "").strip()
        deprecation = definition.get("deprecationMessage")
        if deprecation:
            description = " - ".join(part for part in (description, f"**Deprecated:** {deprecation}") if part)
        options = definition.get("options")
        if isinstance(options, list) and options:
            rendered = ", ".join(f"`{option}`" for option in options)
            description = "\n".join(part for part in (description, f"Options: {rendered}") if part)
        return ReadableContent(description)


class OutputsSectionGenerator(GitHubActionsSectionGenerator):
    identifier = SectionIdentifier.OUTPUTS

    def generate(self, manifest, formatter, repository, options):
        outputs = manifest.outputs
        if not outputs:
            return ReadableContent.empty()
        rows = [
            [self._name_cell(formatter, name), ReadableContent(str(definition.get("description") or "").strip())]
            for name, definition in outputs.items()
        ]
        table = self._table(formatter, ("Output", "Description"), rows)
        return formatter.heading("Outputs", 2).append(formatter.line_break(), table)


class SecretsSectionGenerator(GitHubActionsSectionGenerator):
    """Only reusable workflows declare secrets."""

    identifier = SectionIdentifier.SECRETS

    def generate(self, manifest, formatter, repository, options):
        if not isinstance(manifest, GitHubWorkflow) or not manifest.secrets:
            return ReadableContent.empty()
        rows = [
            [
                self._name_cell(formatter, name),
                ReadableContent(str(definition.get("description") or "").strip()),
                self._flag_cell(formatter, definition.get("required")),
            ]
            for name, definition in manifest.secrets.items()
        ]
        table = self._table(formatter, ("Secret", "Description", "Required"), rows)
        return formatter.heading("Secrets", 2).append(formatter.line_break(), table)


@dataclass(frozen=True)
class ExampleBlock:
    kind: str
    text: str
    level: int = 3
    language: str = "yaml"


def _markdown_example_blocks(text: str) -> List[ExampleBlock]:
    """Split a Markdown example into headings (demoted by two levels), paragraphs and code."""

    blocks: List[ExampleBlock] = []
    paragraph: List[str] = []
    code: Optional[List[str]] = None
    language = "yaml"

    def flush() -> None:
        if paragraph:
            blocks.append(ExampleBlock("text", "\n".join(paragraph)))
            paragraph.clear()

    for line in text.splitlines():
        if code is not None:
            if line.lstrip().startswith("```"):
                if "".join(code).strip():
                    blocks.append(ExampleBlock("code", "\n".join(code).strip("\n"), language=language))
                code = None
            else:
                code.append(line)
            continue
        if line.lstrip().startswith("```"):
            flush()
            code = []
            language = line.lstrip()[3:].strip() or "yaml"
            continue
        heading = _HEADING.match(line)
        if heading:
            flush()
            blocks.append(ExampleBlock("heading", heading.group(2).strip(), level=min(6, len(heading.group(1)) + 2)))
        elif line.strip():
            paragraph.append(line.rstrip())
        else:
            flush()
    flush()
    return blocks


def find_examples(root: Path, manifest: GitHubActionsManifest) -> List[ExampleBlock]:
    """Collect examples from the example directories and, for actions, workflows using it."""

    blocks: List[ExampleBlock] = []
    for directory in EXAMPLE_DIRS:
        base = root / directory
        if not base.is_dir():
            continue
        for path in sorted(base.iterdir()):
            if not path.is_file():
                continue
            suffix = path.suffix.lower()
            if suffix in (".yml", ".yaml"):
                blocks.append(ExampleBlock("heading", path.stem))
                blocks.append(ExampleBlock("code", path.read_text(encoding="utf-8", errors="replace").strip("\n")))
            elif suffix == ".md":
                blocks.extend(_markdown_example_blocks(path.read_text(encoding="utf-8", errors="replace")))

    workflows = root / ".github" / "workflows"
    if isinstance(manifest, GitHubAction) and workflows.is_dir():
        for path in sorted(workflows.iterdir()):
            if not path.is_file() or path.suffix.lower() not in (".yml", ".yaml"):
                continue
            text = path.read_text(encoding="utf-8", errors="replace")
            if f"{manifest.uses_name}@" in text or _LOCAL_USES.search(text):
                blocks.append(ExampleBlock("heading", f"Example: {path.stem}"))
                blocks.append(ExampleBlock("code", text.strip("\n")))
    return blocks


def pin_uses(code: str, uses_name: str, version: Optional[str]) -> str:
    """Point ``uses:`` lines that reference ``uses_name`` (or ``./``) at ``version``."""

    if not version:
        return code

    def replace(match: re.Match[str]) -> str:
        reference = match.group("ref").split("@", 1)[0]
        if reference not in (uses_name, ".", "./"):
            return match.group(0)
        return f"{match.group('prefix')}{uses_name}@{version}{match.group('rest')}"

    return _USES_LINE.sub(replace, code)


class ExamplesSectionGenerator(GitHubActionsSectionGenerator):
    """Examples from ``examples/`` and ``.github/examples/`` (YAML or Markdown files).

    Actions also pick up workflows under ``.github/workflows/`` that use them.
    ``uses:`` references are pinned to ``options['version']`` when it is set.
    """

    identifier = SectionIdentifier.EXAMPLES

    def generate(self, manifest, formatter, repository, options):
        blocks = find_examples(repository.root, manifest)
        if not blocks:
            return ReadableContent.empty()
        version = options.get("version")
        content = formatter.heading("Examples", 2)
        for block in blocks:
            content = content.append(formatter.line_break())
            if block.kind == "heading":
                content = content.append(formatter.heading(block.text, block.level))
            elif block.kind == "text":
                content = content.append(formatter.paragraph(block.text))
            else:
                content = content.append(formatter.code(pin_uses(block.text, manifest.uses_name, version), block.language))
        return content


def default_generators() -> List[SectionGenerator[GitHubActionsManifest]]:
    """Generators in default document order."""

    body: List[SectionGenerator[GitHubActionsManifest]] = [
        OverviewSectionGenerator(),
        UsageSectionGenerator(),
        InputsSectionGenerator(),
        OutputsSectionGenerator(),
        SecretsSectionGenerator(),
        ExamplesSectionGenerator(),
        ContributingSectionGenerator(),
        SecuritySectionGenerator(),
        LicenseSectionGenerator(),
    ]
    return [
        HeaderSectionGenerator(),
        BadgesSectionGenerator(),
        body[0],
        ContentsSectionGenerator(body),
        *body[1:],
        GeneratedSectionGenerator(),
    ]
