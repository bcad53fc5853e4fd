"""Migration adapters for documentation produced by other tools."""

from __future__ import annotations

from typing import List

from ci_dokumentor.ports.migration import MigrationAdapter

from .actdocs import ActdocsMigrationAdapter
from .action_docs import ActionDocsMigrationAdapter
from .auto_doc import AutoDocMigrationAdapter
from .base import RegexMigrationAdapter, merge_adjacent_regions
from .readme_generator import GitHubActionReadmeGeneratorMigrationAdapter


def default_adapters() -> List[MigrationAdapter]:
    return [
        ActionDocsMigrationAdapter(),
        ActdocsMigrationAdapter(),
        AutoDocMigrationAdapter(),
        GitHubActionReadmeGeneratorMigrationAdapter(),
    ]


__all__ = [
    "ActdocsMigrationAdapter",
    "ActionDocsMigrationAdapter",
    "AutoDocMigrationAdapter",
    "GitHubActionReadmeGeneratorMigrationAdapter",
    "RegexMigrationAdapter",
    "default_adapters",
    "merge_adjacent_regions",
]
