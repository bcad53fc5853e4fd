"""Parsing of GitLab CI pipelines and CI/CD component templates."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from ci_dokumentor.domain.docs.errors import ManifestError, UnsupportedSourceError
from ci_dokumentor.ports.repository import Repository

PIPELINE_PATTERN = re.compile(r"^\.gitlab-ci\.ya?ml$", re.IGNORECASE)
TEMPLATE_PATTERN = re.compile(r"^template\.ya?ml$", re.IGNORECASE)
TEMPLATES_DIR = "templates"
COMPONENT_HOST = "$CI_SERVER_FQDN"

# Top-level pipeline keys that are not job definitions.
GLOBAL_KEYWORDS = frozenset(
    {"default", "include", "stages", "variables", "workflow", "image", "services", "cache", "before_script", "after_script", "spec"}
)


@dataclass(frozen=True)
class GitLabComponent:
    """A CI/CD component: a ``spec:`` header document followed by job definitions."""

    name: str
    uses_name: str
    source: Path
    description: Optional[str] = None
    inputs: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    jobs: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)


@dataclass(frozen=True)
class GitLabPipeline:
    name: str
    uses_name: str
    source: Path
    path: str = ".gitlab-ci.yml"
    description: Optional[str] = None
    stages: List[str] = field(default_factory=list)
    variables: Mapping[str, Any] = field(default_factory=dict)
    jobs: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)


GitLabCIManifest = Union[GitLabComponent, GitLabPipeline]


class GitLabCIParser:
    def is_pipeline_file(self, source: Path) -> bool:
        return bool(PIPELINE_PATTERN.match(Path(source).name))

    def is_component_file(self, source: Path) -> bool:
        """``templates/<name>.yml`` or ``templates/<name>/template.yml``."""

        source = Path(source)
        if source.suffix.lower() not in (".yml", ".yaml"):
            return False
        if source.parent.name == TEMPLATES_DIR:
            return True
        return bool(TEMPLATE_PATTERN.match(source.name)) and source.parent.parent.name == TEMPLATES_DIR

    def supports(self, source: Path) -> bool:
        return self.is_pipeline_file(source) or self.is_component_file(source)

    def component_name(self, source: Path) -> str:
        source = Path(source)
        if TEMPLATE_PATTERN.match(source.name) and source.parent.parent.name == TEMPLATES_DIR:
            return source.parent.name
        return source.stem

    def documentation_path(self, source: Path) -> Path:
        source = Path(source)
        if self.is_component_file(source):
            if source.parent.name == TEMPLATES_DIR:
                return source.with_suffix(".md")
            return source.parent / "README.md"
        if self.is_pipeline_file(source):
            return source.with_suffix(".md")
        raise UnsupportedSourceError(f"Unsupported source file: {source}")

    def parse(self, source: Path, repository: Repository) -> GitLabCIManifest:
        source = Path(source)
        if not self.supports(source):
            raise UnsupportedSourceError(f"Unsupported source file: {source}")
        try:
            text = source.read_text(encoding="utf-8")
            documents = [document for document in yaml.safe_load_all(text) if document is not None]
        except OSError as exc:
            raise ManifestError(f"Cannot read manifest {source}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise ManifestError(f"Invalid YAML in {source}: {exc}") from exc
        if not documents or not all(isinstance(document, dict) for document in documents):
            raise ManifestError(f"Unsupported GitLab CI file format: {source}")

        description = leading_comment(text)
        header = documents[0]
        if self.is_component_file(source):
            spec = header.get("spec")
            if not isinstance(spec, dict):
                raise ManifestError(f"Component {source} must start with a 'spec:' header document")
            body: Dict[str, Any] = {}
            for document in documents[1:]:
                body.update(document)
            name = self.component_name(source)
            return GitLabComponent(
                name=_title(name),
                uses_name=f"{COMPONENT_HOST}/{repository.full_name}/{name}",
                source=source,
                description=description,
                inputs=_entries(spec.get("inputs")),
                jobs=_jobs(body),
            )

        if len(documents) > 1:
            raise ManifestError(f"Pipeline {source} must be a single YAML document")
        stages = header.get("stages")
        workflow = header.get("workflow")
        workflow_name = workflow.get("name") if isinstance(workflow, dict) else None
        return GitLabPipeline(
            name=str(workflow_name) if workflow_name else _title(repository.name),
            uses_name=repository.full_name,
            source=source,
            path=_relative_path(source, repository.root),
            description=description,
            stages=[str(stage) for stage in stages] if isinstance(stages, list) else [],
            variables=dict(header["variables"]) if isinstance(header.get("variables"), dict) else {},
            jobs=_jobs(header),
        )


def leading_comment(text: str) -> Optional[str]:
    """Text of the ``#`` comment block at the top of the file, if any."""

    lines: List[str] = []
    for raw in text.splitlines():
        stripped = raw.strip()
        if stripped == "---":
            break
        if not stripped:
            if lines:
                lines.append("")
            continue
        if not stripped.startswith("#"):
            break
        comment = stripped[1:]
        lines.append(comment[1:] if comment.startswith(" ") else comment)
    description = "\n".join(lines).strip("\n")
    return description or None


def _title(name: str) -> str:
    words = [word for word in re.split(r"[-_\s]+", name.lstrip(".")) if word]
    if not words:
        return name
    if any(char.isupper() for char in name):
        return " ".join(words)
    return " ".join(word[:1].upper() + word[1:] for word in words)


def _relative_path(source: Path, root: Path) -> str:
    try:
        return source.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return source.name


def _entries(value: Any) -> Dict[str, Dict[str, Any]]:
    if not isinstance(value, dict):
        return {}
    return {str(key): dict(item) if isinstance(item, dict) else {} for key, item in value.items()}


def _jobs(document: Mapping[str, Any]) -> Dict[str, Dict[str, Any]]:
    """Job definitions: mapping values under keys that are not global keywords or hidden (``.``) templates."""

    return {
        str(key): dict(value)
        for key, value in document.items()
        if isinstance(value, dict) and str(key) not in GLOBAL_KEYWORDS and not str(key).startswith(".")
    }
