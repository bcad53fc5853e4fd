"""Migration from action-docs self-closing ``<!-- action-docs-<name> source="..." -->`` markers."""

from __future__ import annotations

import re

from ci_dokumentor.domain.docs.sections import SectionIdentifier

from .base import RegexMigrationAdapter

_MARKER = re.compile(r"""<!--\s*action-docs-(\w+)\s+source=["'][^"']+["']\s*-->""")


class ActionDocsMigrationAdapter(RegexMigrationAdapter):
    """The same comment opens and closes a section, so occurrences toggle."""

    tool_name = "action-docs"
    section_mappings = {
        "header": SectionIdentifier.HEADER,
        "description": SectionIdentifier.OVERVIEW,
        "inputs": SectionIdentifier.INPUTS,
        "outputs": SectionIdentifier.OUTPUTS,
        "runs": SectionIdentifier.USAGE,
    }
    start_pattern = _MARKER
    end_pattern = _MARKER
    detection_pattern = re.compile(r"""<!--\s*action-docs-\w+\s+source=["'][^"']+["']\s*-->""")
