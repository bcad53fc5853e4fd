from __future__ import annotations

from pathlib import Path

import pytest

from ci_dokumentor.app.migration import MigrationService
from ci_dokumentor.domain.docs.errors import ToolDetectionError, UnsupportedToolError

ACTDOCS_README = (
    "# Action\n\n"
    "<!-- actdocs inputs start -->\n| a |\n<!-- actdocs inputs end -->\n"
)


def test_supported_tools() -> None:
    assert MigrationService().get_supported_tools() == [
        "action-docs",
        "actdocs",
        "auto-doc",
        "github-action-readme-generator",
    ]


def test_unknown_tool_fails_before_touching_destination(tmp_path: Path) -> None:
    destination = tmp_path / "README.md"
    with pytest.raises(UnsupportedToolError) as excinfo:
        MigrationService().migrate(destination, tool="docsify")
    assert excinfo.value.code == "MIGRATION_TOOL_UNSUPPORTED"
    assert "actdocs" in excinfo.value.message
    assert not destination.exists()


def test_tool_lookup_is_case_insensitive() -> None:
    assert MigrationService().get_adapter(" ActDocs ").name == "actdocs"


def test_auto_detection(tmp_path: Path) -> None:
    destination = tmp_path / "README.md"
    destination.write_text(ACTDOCS_README, encoding="utf-8")
    service = MigrationService()
    assert service.detect_tools(destination) == ["actdocs"]
    result = service.migrate(destination)
    assert result.tool == "actdocs"
    assert destination.read_text(encoding="utf-8") == "# Action\n\n<!-- inputs:start -->\n| a |\n<!-- inputs:end -->\n"


def test_auto_detection_without_known_markers(tmp_path: Path) -> None:
    destination = tmp_path / "README.md"
    destination.write_text("# Plain\n", encoding="utf-8")
    with pytest.raises(ToolDetectionError) as excinfo:
        MigrationService().migrate(destination)
    assert excinfo.value.code == "MIGRATION_TOOL_UNDETECTED"


def test_dry_run_returns_diff_and_keeps_file(tmp_path: Path) -> None:
    destination = tmp_path / "README.md"
    destination.write_text(ACTDOCS_README, encoding="utf-8")
    result = MigrationService().migrate(destination, tool="actdocs", dry_run=True)
    assert result.changed is True
    assert "+<!-- inputs:start -->\n" in (result.diff or "")
    assert destination.read_text(encoding="utf-8") == ACTDOCS_README
    payload = result.as_dict()
    assert payload["dryRun"] is True
    assert payload["changed"] is True


def test_empty_destination_is_left_alone(tmp_path: Path) -> None:
    destination = tmp_path / "README.md"
    result = MigrationService().migrate(destination, tool="auto-doc")
    assert result.diff is None
    assert result.changed is None
    assert not destination.exists()
