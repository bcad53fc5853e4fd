from __future__ import annotations

from pathlib import Path

import pytest

from ci_dokumentor.domain.docs.errors import ConfigError
from ci_dokumentor.domain.docs.sections import DEFAULT_ORDER, SectionIdentifier
from ci_dokumentor.domain.docs.value_objects import DokumentorConfig, SectionSelection


def test_selection_filters_default_order() -> None:
    selection = SectionSelection(
        include=(SectionIdentifier.INPUTS, SectionIdentifier.HEADER, SectionIdentifier.USAGE),
        exclude=(SectionIdentifier.USAGE,),
    )
    assert selection.apply(DEFAULT_ORDER) == (SectionIdentifier.HEADER, SectionIdentifier.INPUTS)
    assert SectionSelection().apply(DEFAULT_ORDER) == tuple(DEFAULT_ORDER)


def test_from_dict_resolves_relative_output(tmp_path: Path) -> None:
    config_path = tmp_path / ".ci-dokumentor.yaml"
    config = DokumentorConfig.from_dict(
        {
            "cicd": "github-actions",
            "output": "docs/README.md",
            "sections": {"exclude": ["badges"], "options": {"usage": {"version": "v2"}}},
        },
        config_path=config_path,
    )
    assert config.output == tmp_path / "docs" / "README.md"
    assert config.sections.exclude == (SectionIdentifier.BADGES,)
    assert config.section_options(SectionIdentifier.USAGE) == {"version": "v2"}
    assert config.section_options(SectionIdentifier.LICENSE) == {}


@pytest.mark.parametrize(
    "data",
    [
        {"version": 2},
        {"cicd": ""},
        {"output": 3},
        {"sections": {"include": ["changelog"]}},
        {"sections": {"options": {"usage": "v1"}}},
    ],
)
def test_from_dict_rejects_invalid_values(tmp_path: Path, data: dict) -> None:
    with pytest.raises(ConfigError) as excinfo:
        DokumentorConfig.from_dict(data, config_path=tmp_path / "config.yaml")
    assert excinfo.value.code == "CONFIG_INVALID"


def test_overrides_win_over_file_values(tmp_path: Path) -> None:
    base = DokumentorConfig.from_dict(
        {"sections": {"include": ["header", "usage"], "options": {"usage": {"version": "v1", "extra": 1}}}},
        config_path=tmp_path / "c.yaml",
    )
    merged = base.with_overrides(
        output=tmp_path / "OUT.md",
        exclude=(SectionIdentifier.HEADER,),
        options={"usage": {"version": "v3"}},
    )
    assert merged.output == tmp_path / "OUT.md"
    assert merged.cicd == "github-actions"
    assert merged.sections.include == (SectionIdentifier.HEADER, SectionIdentifier.USAGE)
    assert merged.sections.apply(DEFAULT_ORDER) == (SectionIdentifier.USAGE,)
    assert merged.section_options(SectionIdentifier.USAGE) == {"version": "v3", "extra": 1}
    assert base.section_options(SectionIdentifier.USAGE)["version"] == "v1"
