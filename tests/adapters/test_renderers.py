from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from ci_dokumentor.adapters.formatter.markdown import MarkdownFormatter
from ci_dokumentor.adapters.renderer import DiffRenderer, FileRenderer, renderer_for
from ci_dokumentor.adapters.renderer import file as file_renderer
from ci_dokumentor.domain.docs.errors import (
    DocumentEncodingError,
    MalformedDocumentError,
    RendererStateError,
    WriteFailure,
)

FORMATTER = MarkdownFormatter()


def _render(renderer, destination: Path, **sections: str):
    renderer.initialize(destination, FORMATTER)
    for identifier, content in sections.items():
        renderer.write_section(identifier, content)
    return renderer.finalize()


def test_renderer_factory() -> None:
    assert isinstance(renderer_for(True), DiffRenderer)
    assert isinstance(renderer_for(False), FileRenderer)


def test_file_renderer_creates_missing_destination(tmp_path: Path) -> None:
    destination = tmp_path / "docs" / "README.md"
    assert _render(FileRenderer(), destination, header="# Title") is None
    assert destination.read_text(encoding="utf-8") == "<!-- header:start -->\n\n# Title\n\n<!-- header:end -->\n"


def test_file_renderer_skips_unchanged_destination(tmp_path: Path) -> None:
    destination = tmp_path / "README.md"
    _render(FileRenderer(), destination, usage="run it")
    os.utime(destination, ns=(1_000_000_000, 1_000_000_000))
    _render(FileRenderer(), destination, usage="run it")
    assert destination.stat().st_mtime_ns == 1_000_000_000


def test_file_renderer_does_not_create_empty_file(tmp_path: Path) -> None:
    destination = tmp_path / "README.md"
    _render(FileRenderer(), destination, usage="")
    assert not destination.exists()


def test_file_renderer_preserves_mode(tmp_path: Path) -> None:
    destination = tmp_path / "README.md"
    destination.write_text("Intro\n", encoding="utf-8")
    destination.chmod(0o640)
    _render(FileRenderer(), destination, usage="run it")
    assert stat.S_IMODE(destination.stat().st_mode) == 0o640
    assert destination.read_text(encoding="utf-8").startswith("Intro\n\n<!-- usage:start -->")


def test_file_renderer_creates_files_with_umask_mode(tmp_path: Path) -> None:
    destination = tmp_path / "README.md"
    previous = os.umask(0o027)
    try:
        _render(FileRenderer(), destination, usage="run it")
    finally:
        os.umask(previous)
    assert stat.S_IMODE(destination.stat().st_mode) == 0o640


def test_file_renderer_keeps_crlf_outside_owned_regions(tmp_path: Path) -> None:
    destination = tmp_path / "README.md"
    destination.write_bytes(
        b"Intro line\r\nSecond line\r\n\r\n"
        b"<!-- usage:start -->\r\n\r\nold\r\n\r\n<!-- usage:end -->\r\n\r\n"
        b"Closing notes\r\n"
    )
    _render(FileRenderer(), destination, usage="run it")
    data = destination.read_bytes()
    assert data.startswith(b"Intro line\r\nSecond line\r\n\r\n<!-- usage:start -->")
    assert data.endswith(b"<!-- usage:end -->\n\nClosing notes\r\n")
    assert b"old" not in data


def test_file_renderer_skips_unchanged_crlf_head(tmp_path: Path) -> None:
    destination = tmp_path / "README.md"
    destination.write_bytes(b"Intro\r\n\r\n")
    _render(FileRenderer(), destination, usage="run it")
    first = destination.read_bytes()
    assert first.startswith(b"Intro\r\n\r\n<!-- usage:start -->\n")
    _render(FileRenderer(), destination, usage="run it")
    assert destination.read_bytes() == first


def test_invalid_utf8_destination_raises_domain_error(tmp_path: Path) -> None:
    destination = tmp_path / "README.md"
    destination.write_bytes(b"Intro \xff\xfe\n")
    with pytest.raises(DocumentEncodingError) as excinfo:
        _render(FileRenderer(), destination, usage="run it")
    assert excinfo.value.code == "DOC_ENCODING_INVALID"
    assert "byte offset 6" in excinfo.value.message
    assert destination.read_bytes() == b"Intro \xff\xfe\n"


def test_failed_write_leaves_destination_untouched(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    destination = tmp_path / "README.md"
    destination.write_text("Intro\n", encoding="utf-8")

    def boom(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(file_renderer.os, "replace", boom)
    with pytest.raises(WriteFailure) as excinfo:
        _render(FileRenderer(), destination, usage="run it")
    assert excinfo.value.code == "DOC_WRITE_FAILED"
    assert destination.read_text(encoding="utf-8") == "Intro\n"
    assert sorted(path.name for path in tmp_path.iterdir()) == ["README.md"]


def test_malformed_destination_is_not_written(tmp_path: Path) -> None:
    destination = tmp_path / "README.md"
    destination.write_text("<!-- usage:start -->\nunterminated\n", encoding="utf-8")
    with pytest.raises(MalformedDocumentError):
        _render(FileRenderer(), destination, usage="run it")
    assert destination.read_text(encoding="utf-8") == "<!-- usage:start -->\nunterminated\n"


def test_diff_renderer_never_writes(tmp_path: Path) -> None:
    destination = tmp_path / "README.md"
    destination.write_text("Intro\n", encoding="utf-8")
    before = destination.stat().st_mtime_ns
    diff = _render(DiffRenderer(), destination, usage="run it")
    assert diff.startswith(f"--- a/{destination.as_posix()}\n+++ b/{destination.as_posix()}\n")
    assert "+<!-- usage:start -->\n" in diff
    assert destination.read_text(encoding="utf-8") == "Intro\n"
    assert destination.stat().st_mtime_ns == before


def test_diff_renderer_reports_no_changes_as_empty(tmp_path: Path) -> None:
    destination = tmp_path / "README.md"
    _render(FileRenderer(), destination, usage="run it")
    assert _render(DiffRenderer(), destination, usage="run it") == ""


def test_diff_marks_missing_trailing_newline(tmp_path: Path) -> None:
    destination = tmp_path / "README.md"
    destination.write_text("Intro", encoding="utf-8")
    diff = _render(DiffRenderer(), destination, usage="run it")
    assert "-Intro\n\\ No newline at end of file\n" in diff


def test_diff_for_missing_destination(tmp_path: Path) -> None:
    destination = tmp_path / "NEW.md"
    diff = _render(DiffRenderer(), destination, header="# New")
    assert "+# New\n" in diff
    assert not destination.exists()


def test_renderer_state_machine(tmp_path: Path) -> None:
    renderer = FileRenderer()
    with pytest.raises(RendererStateError):
        renderer.write_section("usage", "x")
    with pytest.raises(RendererStateError):
        renderer.read_existing_content()
    renderer.initialize(tmp_path / "README.md", FORMATTER)
    with pytest.raises(RendererStateError):
        renderer.initialize(tmp_path / "OTHER.md", FORMATTER)
    renderer.finalize()
    renderer.initialize(tmp_path / "OTHER.md", FORMATTER)
    assert renderer.destination == tmp_path / "OTHER.md"
    assert renderer.formatter is FORMATTER


def test_replaced_content_is_written_verbatim(tmp_path: Path) -> None:
    destination = tmp_path / "README.md"
    destination.write_text("old", encoding="utf-8")
    renderer = FileRenderer()
    renderer.initialize(destination, FORMATTER)
    assert renderer.read_existing_content().text == "old"
    renderer.replace_content("new text without newline")
    assert renderer.read_existing_content().text == "new text without newline"
    renderer.finalize()
    assert destination.read_text(encoding="utf-8") == "new text without newline"
