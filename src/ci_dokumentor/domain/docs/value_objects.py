"""Value objects describing a documentation generation request."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import ConfigError, UnknownSectionIdentifierError
from .sections import DEFAULT_ORDER, SectionIdentifier, parse_section_list

DEFAULT_VERSION = 1
DEFAULT_CICD = "github-actions"


@dataclass(frozen=True)
class SectionSelection:
    """Include/exclude filter applied to the default section order."""

    include: Tuple[SectionIdentifier, ...] = ()
    exclude: Tuple[SectionIdentifier, ...] = ()

    def apply(self, available=DEFAULT_ORDER) -> Tuple[SectionIdentifier, ...]:
        ordered = [identifier for identifier in available]
        if self.include:
            ordered = [identifier for identifier in ordered if identifier in self.include]
        return tuple(identifier for identifier in ordered if identifier not in self.exclude)


@dataclass(frozen=True)
class DokumentorConfig:
    """Project configuration loaded from ``.ci-dokumentor.yaml``."""

    version: int = DEFAULT_VERSION
    cicd: str = DEFAULT_CICD
    output: Optional[Path] = None
    sections: SectionSelection = field(default_factory=SectionSelection)
    options: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, config_path: Path) -> "DokumentorConfig":
        if not isinstance(data, Mapping):
            raise ConfigError(f"Configuration in {config_path} must be a mapping")
        version = int(data.get("version", DEFAULT_VERSION))
        if version != DEFAULT_VERSION:
            raise ConfigError(f"Unsupported ci-dokumentor config version {version} in {config_path}")

        cicd = data.get("cicd", DEFAULT_CICD)
        if not isinstance(cicd, str) or not cicd.strip():
            raise ConfigError("'cicd' must be a non-empty string")

        output_value = data.get("output")
        output = None
        if output_value is not None:
            if not isinstance(output_value, str):
                raise ConfigError("'output' must be a string path")
            output = Path(output_value)
            if not output.is_absolute():
                output = config_path.parent / output

        raw_sections = data.get("sections", {}) or {}
        if not isinstance(raw_sections, Mapping):
            raise ConfigError("'sections' must be a mapping")
        try:
            selection = SectionSelection(
                include=tuple(parse_section_list(raw_sections.get("include"))),
                exclude=tuple(parse_section_list(raw_sections.get("exclude"))),
            )
        except UnknownSectionIdentifierError as exc:
            raise ConfigError(f"{config_path}: {exc.message}") from exc

        options: Dict[str, Dict[str, Any]] = {}
        raw_options = raw_sections.get("options", {}) or {}
        if not isinstance(raw_options, Mapping):
            raise ConfigError("'sections.options' must be a mapping")
        for key, value in raw_options.items():
            try:
                identifier = SectionIdentifier.parse(key)
            except UnknownSectionIdentifierError as exc:
                raise ConfigError(f"{config_path}: {exc.message}") from exc
            if not isinstance(value, Mapping):
                raise ConfigError(f"Options for section '{identifier.value}' must be a mapping")
            options[identifier.value] = dict(value)

        return cls(version=version, cicd=cicd.strip(), output=output, sections=selection, options=options)

    @classmethod
    def default(cls) -> "DokumentorConfig":
        return cls()

    def with_overrides(
        self,
        *,
        cicd: Optional[str] = None,
        output: Optional[Path] = None,
        include: Optional[Tuple[SectionIdentifier, ...]] = None,
        exclude: Optional[Tuple[SectionIdentifier, ...]] = None,
        options: Optional[Mapping[str, Mapping[str, Any]]] = None,
    ) -> "DokumentorConfig":
        """Return a copy where explicitly passed values win over file values."""

        selection = SectionSelection(
            include=include if include else self.sections.include,
            exclude=exclude if exclude else self.sections.exclude,
        )
        merged_options: Dict[str, Dict[str, Any]] = {key: dict(value) for key, value in self.options.items()}
        for key, value in (options or {}).items():
            merged_options.setdefault(key, {}).update({k: v for k, v in value.items() if v is not None})
        return replace(
            self,
            cicd=cicd or self.cicd,
            output=output or self.output,
            sections=selection,
            options=merged_options,
        )

    def section_options(self, identifier: SectionIdentifier) -> Mapping[str, Any]:
        return self.options.get(identifier.value, {})
