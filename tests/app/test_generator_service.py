from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from ci_dokumentor.app.generate import GeneratorService
from ci_dokumentor.domain.docs.errors import UnsupportedSourceError
from ci_dokumentor.domain.docs.sections import SectionIdentifier
from ci_dokumentor.domain.docs.value_objects import DokumentorConfig, SectionSelection
from ci_dokumentor.ports.repository import LicenseInfo, Repository, RepositoryProvider

ACTION = dedent(
    """\
    name: Build Thing
    description: Builds the thing.
    author: Octo
    inputs:
      token:
        description: Access token
        required: true
      level:
        description: Verbosity
        default: info
    outputs:
      artifact:
        description: Produced artifact path
    runs:
      using: node20
      main: dist/index.js
    """
)


class StaticRepositoryProvider(RepositoryProvider):
    def __init__(self, root: Path) -> None:
        self.root = root
        self.calls: list[Path] = []

    def get_repository(self, root: Path) -> Repository:
        self.calls.append(root)
        return Repository(
            owner="octo",
            name="thing",
            root=self.root,
            url="https://github.com/octo/thing",
            license=LicenseInfo(name="MIT License", spdx_id="MIT", url="LICENSE"),
        )


@pytest.fixture()
def action_repo(tmp_path: Path) -> Path:
    (tmp_path / "action.yml").write_text(ACTION, encoding="utf-8")
    return tmp_path


def _service(root: Path) -> GeneratorService:
    return GeneratorService(repository_provider=StaticRepositoryProvider(root))


def test_generate_writes_readme_next_to_action(action_repo: Path) -> None:
    result = _service(action_repo).generate(action_repo / "action.yml")
    readme = action_repo / "README.md"
    assert result.destination == readme
    text = readme.read_text(encoding="utf-8")
    assert text.startswith("<!-- header:start -->\n\n# GitHub Action: Build Thing\n\n<!-- header:end -->\n")
    assert "- uses: octo/thing@main" in text
    assert "| **`token`** | Access token | **true** | `` |" in text
    assert "SPDX-License-Identifier: MIT" in text
    assert SectionIdentifier.SECRETS in result.skipped
    assert result.sections[0] is SectionIdentifier.HEADER


def test_generate_is_stable_and_keeps_manual_prose(action_repo: Path) -> None:
    service = _service(action_repo)
    readme = action_repo / "README.md"
    readme.write_text("Hand written intro.\n", encoding="utf-8")
    service.generate(action_repo / "action.yml")
    first = readme.read_text(encoding="utf-8")
    assert first.startswith("Hand written intro.\n\n<!-- header:start -->")
    result = service.generate(action_repo / "action.yml", dry_run=True)
    assert result.diff == ""
    assert readme.read_text(encoding="utf-8") == first


def test_generate_honours_selection_and_options(action_repo: Path) -> None:
    config = DokumentorConfig(
        output=action_repo / "docs" / "ACTION.md",
        sections=SectionSelection(include=(SectionIdentifier.USAGE, SectionIdentifier.CONTRIBUTING)),
        options={"usage": {"version": "v1.2.3"}},
    )
    result = _service(action_repo).generate(action_repo / "action.yml", config=config)
    text = (action_repo / "docs" / "ACTION.md").read_text(encoding="utf-8")
    assert result.sections == (SectionIdentifier.USAGE,)
    assert "octo/thing@v1.2.3" in text
    assert "header:start" not in text
    assert not (action_repo / "README.md").exists()


def test_dry_run_does_not_write(action_repo: Path) -> None:
    result = _service(action_repo).generate(action_repo / "action.yml", dry_run=True)
    assert result.diff and "+# GitHub Action: Build Thing" in result.diff
    assert not (action_repo / "README.md").exists()
    assert result.as_dict()["changed"] is True


def test_workflow_documentation_path(tmp_path: Path) -> None:
    service = _service(tmp_path)
    source = tmp_path / ".github" / "workflows" / "release.yml"
    assert service.documentation_path(source) == tmp_path / ".github" / "workflows" / "release.md"


def test_unsupported_sources_and_platforms(tmp_path: Path) -> None:
    service = _service(tmp_path)
    with pytest.raises(UnsupportedSourceError):
        service.platform_for(tmp_path / "Jenkinsfile")
    with pytest.raises(UnsupportedSourceError) as excinfo:
        service.platform_for(tmp_path / "action.yml", "jenkins")
    assert "github-actions, gitlab-ci" in excinfo.value.message
    with pytest.raises(UnsupportedSourceError) as excinfo:
        service.platform_for(tmp_path / "action.yml", "gitlab-ci")
    assert "does not support" in excinfo.value.message
    assert service.get_supported_platforms() == ["github-actions", "gitlab-ci"]


def test_generate_gitlab_component(tmp_path: Path) -> None:
    source = tmp_path / "templates" / "lint.yml"
    source.parent.mkdir()
    source.write_text(
        "# Lints the code.\nspec:\n  inputs:\n    paths:\n      default: src\n---\nlint:\n  script:\n    - ruff check '$[[ inputs.paths ]]'\n",
        encoding="utf-8",
    )
    result = _service(tmp_path).generate(source)
    assert result.platform == "gitlab-ci"
    assert result.destination == tmp_path / "templates" / "lint.md"
    text = result.destination.read_text(encoding="utf-8")
    assert text.startswith("<!-- header:start -->\n\n# GitLab CI Component: Lint\n\n<!-- header:end -->\n")
    assert "  - component: $CI_SERVER_FQDN/octo/thing/lint@main\n" in text
    assert "SPDX-License-Identifier: MIT" in text
    assert SectionIdentifier.BADGES not in result.sections + result.skipped
