"""Constants for the documentation synchronisation domain."""

from __future__ import annotations

ERROR_REMEDIATIONS = {
    "DOKUMENTOR_FAILED": "Rerun with --json for details and report the error if it persists.",
    "DOC_MARKERS_MALFORMED": "Restore the start/end marker pair for the reported section or delete the broken marker before regenerating.",
    "DOC_SECTION_MARKER_COLLISION": "Remove ci-dokumentor marker lines from the generated section content (for example from manifest descriptions).",
    "DOC_WRITE_FAILED": "Check permissions and free space for the destination directory, then rerun ci-dokumentor generate.",
    "DOC_ENCODING_INVALID": "Re-save the destination as UTF-8 before generating or migrating it.",
    "SECTION_UNKNOWN": "Use one of the identifiers listed by `ci-dokumentor sections`.",
    "MIGRATION_TOOL_UNSUPPORTED": "Pass one of the tools listed by `ci-dokumentor sections` via --tool.",
    "MIGRATION_TOOL_UNDETECTED": "Pass --tool explicitly; no known documentation tool markers were found in the destination.",
    "FORMAT_UNSUPPORTED": "Use a Markdown destination (.md or .markdown).",
    "SOURCE_UNSUPPORTED": "Point --source at an action.yml, a file under .github/workflows/, a .gitlab-ci.yml or a component under templates/.",
    "MANIFEST_INVALID": "Fix the manifest so it parses as a GitHub Action (runs.using), a workflow (on:), a GitLab pipeline or a component with a spec: header.",
    "CONFIG_INVALID": "Update .ci-dokumentor.yaml to match the documented configuration schema.",
    "RENDERER_STATE": "Initialise the renderer once per destination and finalise it before reuse.",
    "REPOSITORY_LOOKUP_FAILED": "Check network access and GITHUB_TOKEN, or rerun without --github-api to use local git metadata only.",
}


def remediation_for(code: str) -> str | None:
    """Return default remediation text for a given error code."""

    return ERROR_REMEDIATIONS.get(code)
