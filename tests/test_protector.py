#!/usr/bin/env python3
"""
Tests for protected region detection.
"""

from autolink_core.models import Segment
from autolink_core.protector import split, join


def _protected(text):
    return [s.text for s in split(text) if s.protected]


def test_split_plain_text():
    """Text without code or frontmatter is a single rewritable segment."""
    assert split("Just SomeWords here") == [Segment("Just SomeWords here", False, 0)]


def test_split_fenced_block():
    """Fenced blocks are protected including their fences."""
    text = "prefix ```CamelCaseWord``` suffix"
    segments = split(text)

    assert [s.text for s in segments] == ["prefix ", "```CamelCaseWord```", " suffix"]
    assert [s.protected for s in segments] == [False, True, False]
    assert [s.start for s in segments] == [0, 7, 26]
    assert segments[1].end == 26


def test_split_multiline_fence():
    """Fenced blocks span newlines and stop at the first closing fence."""
    text = "a\n```python\nfoo_bar = 1\n```\nb ```x```"
    assert _protected(text) == ["```python\nfoo_bar = 1\n```", "```x```"]


def test_split_inline_code():
    """Inline code spans are protected but may not cross a newline."""
    segments = split("use `fooBar` here")
    assert [s.text for s in segments] == ["use ", "`fooBar`", " here"]
    assert segments[1].protected

    assert _protected("`foo\nbar`") == []


def test_split_frontmatter_at_start():
    """A frontmatter block is only recognised at the very start of the text."""
    text = "---\ntitle: FooBar\n---\nBody"
    segments = split(text)
    assert [s.text for s in segments] == ["", "---\ntitle: FooBar\n---", "\nBody"]
    assert segments[1].protected

    assert _protected("Intro\n---\ntitle: FooBar\n---\n") == []


def test_unterminated_regions_are_plain_text():
    """Unterminated fences and spans are left as ordinary text."""
    assert _protected("```\nFooBar") == []
    assert _protected("a `FooBar") == []


def test_split_is_a_partition():
    """Joining the segments gives back the input exactly."""
    samples = [
        "",
        "plain",
        "prefix ```CamelCaseWord``` suffix",
        "---\na: 1\n---\n`x` and ```\ny\n``` and `z`",
        "``````",
        "text with ` lone backtick",
    ]
    for text in samples:
        assert join(split(text)) == text
