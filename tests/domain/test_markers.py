from __future__ import annotations

import pytest

from ci_dokumentor.domain.docs.errors import MalformedDocumentError, UnknownSectionIdentifierError
from ci_dokumentor.domain.docs.markers import PROTOCOL, OwnedBlock, UntouchedBlock
from ci_dokumentor.domain.docs.sections import SectionIdentifier


DOCUMENT = (
    "# Title\n"
    "\n"
    "<!-- header:start -->\n"
    "old header\n"
    "<!-- header:end -->\n"
    "\n"
    "Notes\n"
    "<!-- inputs:start -->\n"
    "old inputs\n"
    "<!-- inputs:end -->\n"
    "Footer\n"
)


def test_marker_rendering() -> None:
    assert PROTOCOL.start_marker(SectionIdentifier.HEADER) == "<!-- header:start -->"
    assert PROTOCOL.end_marker("Inputs") == "<!-- inputs:end -->"
    with pytest.raises(UnknownSectionIdentifierError):
        PROTOCOL.start_marker("changelog")


def test_parse_is_lossless() -> None:
    blocks = PROTOCOL.parse(DOCUMENT)
    assert "".join(block.text for block in blocks) == DOCUMENT
    kinds = [type(block) for block in blocks]
    assert kinds == [UntouchedBlock, OwnedBlock, UntouchedBlock, OwnedBlock, UntouchedBlock]
    header = blocks[1]
    assert isinstance(header, OwnedBlock)
    assert header.identifier is SectionIdentifier.HEADER
    assert header.body == "old header\n"
    assert header.offset == DOCUMENT.index("<!-- header:start -->")


def test_document_without_markers_is_one_untouched_block() -> None:
    blocks = PROTOCOL.parse("just prose\n")
    assert blocks == [UntouchedBlock(text="just prose\n", offset=0)]
    assert PROTOCOL.parse("") == []


def test_markers_must_occupy_a_whole_line() -> None:
    text = "inline <!-- header:start --> mention\n<!-- changelog:start -->\n"
    assert not PROTOCOL.contains_marker(text)
    assert len(PROTOCOL.parse(text)) == 1


def test_markers_tolerate_surrounding_whitespace_and_crlf() -> None:
    text = "  <!--  usage:start  -->  \r\nbody\r\n<!-- usage:end -->\r\n"
    blocks = PROTOCOL.parse(text)
    assert len(blocks) == 1
    assert isinstance(blocks[0], OwnedBlock)
    assert blocks[0].identifier is SectionIdentifier.USAGE


@pytest.mark.parametrize(
    "document, identifier",
    [
        ("<!-- header:start -->\n<!-- inputs:start -->\n<!-- inputs:end -->\n<!-- header:end -->\n", "inputs"),
        ("<!-- header:start -->\n<!-- header:end -->\n<!-- header:start -->\n<!-- header:end -->\n", "header"),
        ("text\n<!-- usage:end -->\n", "usage"),
        ("<!-- usage:start -->\n<!-- inputs:end -->\n", "usage"),
        ("<!-- license:start -->\nnever closed\n", "license"),
    ],
)
def test_malformed_documents_raise(document: str, identifier: str) -> None:
    with pytest.raises(MalformedDocumentError) as excinfo:
        PROTOCOL.parse(document)
    error = excinfo.value
    assert error.identifier == identifier
    assert error.code == "DOC_MARKERS_MALFORMED"
    assert error.offset >= 0
    payload = error.to_dict()
    assert payload["identifier"] == identifier
    assert payload["remediation"]
