from __future__ import annotations

import pytest

from noteid.filters import InvalidPatternError, compile_patterns, is_ignored, parse_patterns


def test_prefix_pattern():
    assert is_ignored("templates/foo.md", ["^templates/"])
    assert not is_ignored("notes/foo.md", ["^templates/"])


def test_no_patterns_ignores_nothing():
    assert not is_ignored("templates/foo.md", [])
    assert not is_ignored("", [])


def test_patterns_are_searched_not_anchored():
    assert is_ignored("daily/2024-01-01.excalidraw.md", [r"\.excalidraw\.md$"])
    assert is_ignored("a/foobar-x-baz.md", ["foobar.*baz"])


def test_any_pattern_matches():
    patterns = ["^archive/", "^templates/"]
    assert is_ignored("templates/x.md", patterns)
    assert is_ignored("archive/x.md", patterns)
    assert not is_ignored("inbox/x.md", patterns)


def test_empty_pattern_matches_everything():
    assert is_ignored("notes/foo.md", [""])


def test_invalid_pattern_names_the_pattern():
    with pytest.raises(InvalidPatternError) as excinfo:
        is_ignored("notes/foo.md", ["^ok/", "([unclosed"])
    err = excinfo.value
    assert err.pattern == "([unclosed"
    assert err.index == 1
    assert "([unclosed" in str(err)
    assert "line 2" in str(err)


def test_invalid_pattern_is_not_a_match():
    with pytest.raises(InvalidPatternError):
        compile_patterns(["*.md"])


def test_first_match_reports_pattern():
    ignore = compile_patterns(["^archive/", "draft"])
    assert ignore.first_match("archive/draft.md") == "^archive/"
    assert ignore.first_match("notes/draft.md") == "draft"
    assert ignore.first_match("notes/final.md") is None


def test_parse_patterns_drops_blank_lines():
    assert parse_patterns("") == []
    assert parse_patterns("^templates/\n\n\\.png$\n") == ["^templates/", "\\.png$"]


def test_parse_patterns_accepts_crlf():
    patterns = parse_patterns("^templates/\r\n\\.png$\r\n")
    assert patterns == ["^templates/", "\\.png$"]
    assert is_ignored("templates/t.md", patterns)
