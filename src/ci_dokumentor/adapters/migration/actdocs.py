"""Migration from actdocs ``<!-- actdocs <name> start|end -->`` markers."""

from __future__ import annotations

import re

from ci_dokumentor.domain.docs.sections import SectionIdentifier

from .base import RegexMigrationAdapter


class ActdocsMigrationAdapter(RegexMigrationAdapter):
    tool_name = "actdocs"
    section_mappings = {
        "description": SectionIdentifier.OVERVIEW,
        "inputs": SectionIdentifier.INPUTS,
        "secrets": SectionIdentifier.SECRETS,
        "outputs": SectionIdentifier.OUTPUTS,
        "permissions": SectionIdentifier.SECURITY,
    }
    start_pattern = re.compile(r"<!--\s*actdocs\s+(\w+)\s+start\s*-->", re.IGNORECASE)
    end_pattern = re.compile(r"<!--\s*actdocs\s+(\w+)\s+end\s*-->", re.IGNORECASE)
    detection_pattern = re.compile(r"<!--\s*actdocs\s+\w+\s+(start|end)\s*-->", re.IGNORECASE)
