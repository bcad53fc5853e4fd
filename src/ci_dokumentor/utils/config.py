"""Loading of ``.ci-dokumentor.yaml`` project configuration."""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import jsonschema
import yaml

from ci_dokumentor.domain.docs.errors import ConfigError
from ci_dokumentor.domain.docs.value_objects import DokumentorConfig

DEFAULT_CONFIG_RELATIVE = Path(".ci-dokumentor.yaml")
ALTERNATE_CONFIG_RELATIVE = Path(".ci-dokumentor.yml")
SCHEMA_RESOURCE = "config.schema.json"

_CONFIG_CACHE: Dict[Path, Tuple[int, int, DokumentorConfig]] = {}
_VALIDATOR: Optional[jsonschema.Draft202012Validator] = None


def config_validator() -> jsonschema.Draft202012Validator:
    global _VALIDATOR
    if _VALIDATOR is None:
        schema_resource = resources.files("ci_dokumentor.resources") / SCHEMA_RESOURCE
        schema = json.loads(schema_resource.read_text(encoding="utf-8"))
        _VALIDATOR = jsonschema.Draft202012Validator(schema)
    return _VALIDATOR


def validate_raw_config(raw: Any, config_path: Path) -> None:
    errors = sorted(config_validator().iter_errors(raw), key=lambda error: list(error.absolute_path))
    if not errors:
        return
    details = "; ".join(
        f"{'/'.join(str(part) for part in error.absolute_path) or '<root>'}: {error.message}" for error in errors
    )
    raise ConfigError(f"Invalid configuration {config_path}: {details}")


def resolve_config_path(project_root: Path, path: Optional[Path] = None) -> Path:
    if path is not None:
        return Path(path).resolve()
    candidate = (project_root / DEFAULT_CONFIG_RELATIVE).resolve()
    if not candidate.exists():
        alternate = (project_root / ALTERNATE_CONFIG_RELATIVE).resolve()
        if alternate.exists():
            return alternate
    return candidate


def load_config(project_root: Path, path: Optional[Path] = None) -> Tuple[DokumentorConfig, Path]:
    """Load configuration from disk, falling back to defaults when absent."""

    config_path = resolve_config_path(project_root, path)
    if not config_path.exists():
        if path is not None:
            raise ConfigError(f"Configuration file {config_path} does not exist")
        return DokumentorConfig.default(), config_path

    stat = config_path.stat()
    cached = _CONFIG_CACHE.get(config_path)
    if cached and cached[0] == stat.st_mtime_ns and cached[1] == stat.st_size:
        return cached[2], config_path
    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc
    validate_raw_config(raw, config_path)
    config = DokumentorConfig.from_dict(raw, config_path=config_path)
    _CONFIG_CACHE[config_path] = (stat.st_mtime_ns, stat.st_size, config)
    return config, config_path
