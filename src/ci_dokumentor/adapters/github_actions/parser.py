"""Parsing of GitHub Action and workflow manifests."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from ci_dokumentor.domain.docs.errors import ManifestError, UnsupportedSourceError
from ci_dokumentor.ports.repository import Repository

ACTION_FILENAMES = ("action.yml", "action.yaml")
WORKFLOWS_DIR = ".github/workflows/"


@dataclass(frozen=True)
class GitHubAction:
    name: str
    uses_name: str
    source: Path
    description: Optional[str] = None
    author: Optional[str] = None
    inputs: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    outputs: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    runs: Mapping[str, Any] = field(default_factory=dict)
    branding: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class GitHubWorkflow:
    name: str
    uses_name: str
    source: Path
    on: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    permissions: Mapping[str, str] = field(default_factory=dict)
    jobs: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    description: Optional[str] = None

    @property
    def is_reusable(self) -> bool:
        return "workflow_call" in self.on

    def trigger_inputs(self, trigger: str) -> Mapping[str, Mapping[str, Any]]:
        return _mapping(self.on.get(trigger, {}).get("inputs"))

    @property
    def secrets(self) -> Mapping[str, Mapping[str, Any]]:
        return _mapping(self.on.get("workflow_call", {}).get("secrets"))

    @property
    def outputs(self) -> Mapping[str, Mapping[str, Any]]:
        return _mapping(self.on.get("workflow_call", {}).get("outputs"))


GitHubActionsManifest = Union[GitHubAction, GitHubWorkflow]


class GitHubActionsParser:
    def is_action_file(self, source: Path) -> bool:
        return Path(source).name in ACTION_FILENAMES

    def is_workflow_file(self, source: Path) -> bool:
        return WORKFLOWS_DIR in Path(source).as_posix() and Path(source).suffix in (".yml", ".yaml")

    def supports(self, source: Path) -> bool:
        return self.is_action_file(source) or self.is_workflow_file(source)

    def parse(self, source: Path, repository: Repository) -> GitHubActionsManifest:
        source = Path(source)
        if not self.supports(source):
            raise UnsupportedSourceError(f"Unsupported source file: {source}")
        try:
            raw = yaml.safe_load(source.read_text(encoding="utf-8"))
        except OSError as exc:
            raise ManifestError(f"Cannot read manifest {source}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise ManifestError(f"Invalid YAML in {source}: {exc}") from exc
        if not isinstance(raw, dict):
            raise ManifestError(f"Unsupported GitHub Actions file format: {source}")

        name = raw.get("name")
        if not isinstance(name, str) or not name.strip():
            name = _title_from_filename(source)
        uses_name = self._uses_name(source, repository)

        if self.is_action_file(source):
            runs = raw.get("runs")
            if not isinstance(runs, dict) or not isinstance(runs.get("using"), str):
                raise ManifestError(f"Action manifest {source} must define runs.using")
            return GitHubAction(
                name=name,
                uses_name=uses_name,
                source=source,
                description=_optional_str(raw.get("description")),
                author=_optional_str(raw.get("author")),
                inputs=_entries(raw.get("inputs")),
                outputs=_entries(raw.get("outputs")),
                runs=runs,
                branding=_mapping(raw.get("branding")),
            )

        # PyYAML follows YAML 1.1 where a bare ``on`` key is the boolean True.
        triggers = raw.get("on", raw.get(True))
        if triggers is None:
            raise ManifestError(f"Workflow manifest {source} must define 'on'")
        return GitHubWorkflow(
            name=name,
            uses_name=uses_name,
            source=source,
            on=_triggers(triggers),
            permissions=_permissions(raw.get("permissions")),
            jobs=_entries(raw.get("jobs")),
            description=_optional_str(raw.get("description")),
        )

    def documentation_path(self, source: Path) -> Path:
        source = Path(source)
        if self.is_action_file(source):
            return source.parent / "README.md"
        if self.is_workflow_file(source):
            return source.with_suffix(".md")
        raise UnsupportedSourceError(f"Unsupported source file: {source}")

    def _uses_name(self, source: Path, repository: Repository) -> str:
        relative = _relative_to(source.resolve(), repository.root.resolve())
        if self.is_action_file(source):
            directory = relative.parent.as_posix()
            if directory in ("", "."):
                return repository.full_name
            return f"{repository.full_name}/{directory}"
        return f"{repository.full_name}/{relative.as_posix()}"


def _relative_to(path: Path, root: Path) -> Path:
    try:
        return path.relative_to(root)
    except ValueError:
        return Path(os.path.relpath(path, root))


def _title_from_filename(source: Path) -> str:
    stem = source.stem
    if source.name in ACTION_FILENAMES and source.parent.name:
        stem = source.parent.name
    words = [word for word in re.split(r"[-_\s]+", stem) if word]
    return " ".join(word[:1].upper() + word[1:].lower() for word in words) or stem


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _mapping(value: Any) -> Dict[str, Any]:
    return dict(value) if isinstance(value, dict) else {}


def _entries(value: Any) -> Dict[str, Dict[str, Any]]:
    if not isinstance(value, dict):
        return {}
    return {str(key): _mapping(item) for key, item in value.items()}


def _triggers(value: Any) -> Dict[str, Dict[str, Any]]:
    if isinstance(value, str):
        return {value: {}}
    if isinstance(value, list):
        return {str(item): {} for item in value}
    if isinstance(value, dict):
        return {str(key): _mapping(item) for key, item in value.items()}
    raise ManifestError(f"Unsupported workflow trigger definition: {value!r}")


def _permissions(value: Any) -> Dict[str, str]:
    if isinstance(value, dict):
        return {str(key): str(level) for key, level in value.items()}
    if isinstance(value, str):
        return {"*": value}
    return {}
