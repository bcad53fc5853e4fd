from __future__ import annotations

import re

import pytest

from ci_dokumentor.domain.docs.content import ReadableContent


def test_size_counts_utf8_bytes_and_len_counts_characters() -> None:
    content = ReadableContent("héllo")
    assert len(content) == 5
    assert content.size == 6
    assert ReadableContent.from_bytes(content.to_bytes()).equals(content)


def test_transformations_return_new_instances() -> None:
    original = ReadableContent("  body  ")
    trimmed = original.trim()
    assert trimmed.text == "body"
    assert original.text == "  body  "
    assert original.trim_start().text == "body  "
    assert original.trim_end().text == "  body"


def test_append_and_addition_accept_strings_and_content() -> None:
    content = ReadableContent("a").append("b", ReadableContent("c"))
    assert content.text == "abc"
    assert (content + "d").text == "abcd"
    assert ("z" + content).text == "zabc"
    assert content.append() is content


def test_empty_content() -> None:
    empty = ReadableContent.empty()
    assert empty.is_empty()
    assert empty.split_lines() == []
    assert ReadableContent("   ").trim().is_empty()


def test_search_and_predicates() -> None:
    content = ReadableContent("one two one")
    assert content.search("one") == 0
    assert content.search("one", 1) == 8
    assert content.search("three") == -1
    assert content.starts_with("one")
    assert content.ends_with(ReadableContent("one"))
    assert content.includes("two")
    assert content.test(r"t\w+")
    match = content.match(r"(t\w+)")
    assert match is not None and match.group(1) == "two"
    assert not content.is_multiline()
    assert ReadableContent("a\r\nb").is_multiline()


def test_replace_literal_and_pattern() -> None:
    content = ReadableContent("a-b-c")
    assert content.replace("-", "+").text == "a+b+c"
    assert content.replace(re.compile(r"-"), "\\").text == "a\\b\\c"
    assert content.replace(re.compile(r"[a-c]"), lambda m: m.group(0).upper()).text == "A-B-C"
    with pytest.raises(TypeError):
        content.replace("-", lambda m: "x")


def test_escape_prefixes_each_character_of_occurrences() -> None:
    assert ReadableContent("a|b").escape("|").text == "a\\|b"
    assert ReadableContent("xaby").escape("ab").text == "x\\a\\by"
    assert ReadableContent("a*b_c").escape(["*", "_"]).text == "a\\*b\\_c"
    assert ReadableContent("a|b").escape("|", "^").text == "a^|b"


def test_escape_is_identity_for_empty_inputs() -> None:
    content = ReadableContent("a|b")
    assert content.escape("") is content
    empty = ReadableContent.empty()
    assert empty.escape("|") is empty


def test_html_escape() -> None:
    assert ReadableContent("<a & b>").html_escape().text == "&lt;a &amp; b&gt;"
    plain = ReadableContent("plain")
    assert plain.html_escape() is plain


def test_split_lines_and_join() -> None:
    lines = ReadableContent("a\r\nb\nc").split_lines()
    assert [line.text for line in lines] == ["a", "b", "c"]
    assert ReadableContent.join(lines, "\n").text == "a\nb\nc"
    assert ReadableContent("abcdef").slice(1, 3).text == "bc"
