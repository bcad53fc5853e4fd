"""Migration from github-action-readme-generator ``<!-- start <name> -->`` markers."""

from __future__ import annotations

import re

from ci_dokumentor.domain.docs.sections import SectionIdentifier

from .base import RegexMigrationAdapter

EXAMPLES_PATH = ".github/ghadocs/examples"


class GitHubActionReadmeGeneratorMigrationAdapter(RegexMigrationAdapter):
    tool_name = "github-action-readme-generator"
    section_mappings = {
        "branding": SectionIdentifier.HEADER,
        "title": SectionIdentifier.HEADER,
        "badges": SectionIdentifier.BADGES,
        "description": SectionIdentifier.OVERVIEW,
        "usage": SectionIdentifier.USAGE,
        "inputs": SectionIdentifier.INPUTS,
        "outputs": SectionIdentifier.OUTPUTS,
        "examples": SectionIdentifier.EXAMPLES,
    }
    start_pattern = re.compile(r"<!--\s*start\s+([\w\[\]/.-]+)\s*-->", re.IGNORECASE)
    end_pattern = re.compile(r"<!--\s*end\s+([\w\[\]/.-]+)\s*-->", re.IGNORECASE)
    detection_pattern = re.compile(r"<!--\s*(start|end)\s+[\w\[\]/.-]+\s*-->")

    def normalize_name(self, name: str) -> str:
        # Example blocks reference their source directory, e.g. [.github/ghadocs/examples/]
        normalized = name.strip().lower()
        if EXAMPLES_PATH in normalized:
            return "examples"
        return normalized
