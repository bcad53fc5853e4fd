from __future__ import annotations

import pytest

from ci_dokumentor.domain.docs.errors import MalformedDocumentError, MarkerCollisionError
from ci_dokumentor.domain.docs.sections import SectionEntry, SectionIdentifier
from ci_dokumentor.domain.docs.synchronizer import SYNCHRONIZER


def _entries(*pairs: tuple[str, str]) -> list[SectionEntry]:
    return [SectionEntry.create(identifier, content) for identifier, content in pairs]


def _region(identifier: str, body: str) -> str:
    return f"<!-- {identifier}:start -->\n\n{body}\n\n<!-- {identifier}:end -->"


def test_sections_are_written_in_declared_order_into_empty_document() -> None:
    result = SYNCHRONIZER.synchronize("", _entries(("header", "# Name\n"), ("inputs", "table")))
    assert result.text == _region("header", "# Name") + "\n\n" + _region("inputs", "table") + "\n"


def test_hand_written_head_and_tail_survive() -> None:
    existing = "# My Project\n\nIntro.\n\n<!-- usage:start -->\n\nold\n\n<!-- usage:end -->\n\nFooter text\n"
    result = SYNCHRONIZER.synchronize(existing, _entries(("usage", "new")))
    assert result.text == "# My Project\n\nIntro.\n\n" + _region("usage", "new") + "\n\nFooter text\n"


def test_crlf_head_and_tail_are_kept_verbatim() -> None:
    existing = "# Title\r\n\r\nIntro.\r\n\r\n<!-- usage:start -->\r\nold\r\n<!-- usage:end -->\r\n\r\nFooter\r\n"
    result = SYNCHRONIZER.synchronize(existing, _entries(("usage", "new")))
    assert result.text == "# Title\r\n\r\nIntro.\r\n\r\n" + _region("usage", "new") + "\n\nFooter\r\n"
    assert SYNCHRONIZER.synchronize(result.text, _entries(("usage", "new"))).text == result.text


def test_empty_content_removes_section() -> None:
    existing = _region("header", "H") + "\n\n" + _region("inputs", "I") + "\n"
    merged = SYNCHRONIZER.merge(existing, _entries(("header", "H2"), ("inputs", "  \n")))
    assert merged.text == _region("header", "H2") + "\n"
    assert merged.emitted == (SectionIdentifier.HEADER,)
    assert merged.removed == (SectionIdentifier.INPUTS,)


def test_prose_and_undeclared_sections_follow_their_preceding_section() -> None:
    examples = "<!-- examples:start -->\nEx\n<!-- examples:end -->"
    existing = (
        "<!-- header:start -->\nH\n<!-- header:end -->\n"
        "Middle prose\n"
        f"{examples}\n"
        "<!-- inputs:start -->\nI\n<!-- inputs:end -->\n"
    )
    merged = SYNCHRONIZER.merge(existing, _entries(("header", "H2"), ("inputs", "I2")))
    assert merged.text == (
        _region("header", "H2") + "\n\nMiddle prose\n\n" + examples + "\n\n" + _region("inputs", "I2") + "\n"
    )
    assert merged.preserved == 2


def test_declared_order_wins_over_document_order() -> None:
    existing = _region("inputs", "I") + "\n\n" + _region("header", "H") + "\n"
    result = SYNCHRONIZER.synchronize(existing, _entries(("header", "H"), ("inputs", "I")))
    assert result.text.index("header:start") < result.text.index("inputs:start")


def test_document_without_markers_and_nothing_to_write_is_unchanged() -> None:
    assert SYNCHRONIZER.synchronize("abc", []).text == "abc"
    assert SYNCHRONIZER.synchronize("abc", _entries(("usage", ""))).text == "abc"


def test_sections_are_appended_after_existing_prose() -> None:
    result = SYNCHRONIZER.synchronize("# Title", _entries(("usage", "U")))
    assert result.text == "# Title\n\n" + _region("usage", "U") + "\n"


def test_duplicate_entries_keep_first_position_and_last_content() -> None:
    result = SYNCHRONIZER.synchronize("", _entries(("usage", "a"), ("inputs", "i"), ("usage", "b")))
    assert result.text == _region("usage", "b") + "\n\n" + _region("inputs", "i") + "\n"


def test_marker_inside_content_is_rejected() -> None:
    with pytest.raises(MarkerCollisionError) as excinfo:
        SYNCHRONIZER.synchronize("", _entries(("usage", "x\n<!-- inputs:start -->\ny")))
    assert excinfo.value.code == "DOC_SECTION_MARKER_COLLISION"
    assert excinfo.value.identifier == "usage"


def test_malformed_destination_is_rejected() -> None:
    with pytest.raises(MalformedDocumentError):
        SYNCHRONIZER.synchronize("<!-- usage:start -->\n", _entries(("usage", "U")))


def test_synchronize_is_idempotent() -> None:
    entries = _entries(("header", "# Name"), ("usage", "```yaml\nuses: a/b@main\n```"), ("license", "MIT"))
    existing = "Intro\n\n" + _region("usage", "old") + "\n\nTrailing notes\n"
    once = SYNCHRONIZER.synchronize(existing, entries).text
    twice = SYNCHRONIZER.synchronize(once, entries).text
    assert once == twice
