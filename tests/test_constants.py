#!/usr/bin/env python3
"""
Tests for constants module.
"""

from autolink_core.constants import (
    PROTECTION_RE, PASCAL_CASE_RE, CAMEL_CASE_RE, SNAKE_CASE_RE, WIKILINK_ALL_RE,
    MARKDOWN_EXTENSIONS, DEFAULT_CONFIG_PATH, DEFAULT_NOTES_DIR, DEFAULT_LOG_LEVEL,
    DEFAULT_DEBOUNCE_MS, DEFAULT_MIN_LENGTH, DEFAULT_IGNORE_LIST
)


def test_detection_patterns():
    """Test the built-in word patterns."""
    assert PASCAL_CASE_RE.search("a CamelCaseWord here").group(1) == "CamelCaseWord"
    assert PASCAL_CASE_RE.search("Single") is None
    assert PASCAL_CASE_RE.search("HTTPServer") is None

    assert CAMEL_CASE_RE.search("call helloWorld now").group(1) == "helloWorld"
    assert CAMEL_CASE_RE.search("iOS") is None

    assert SNAKE_CASE_RE.search("the my_var value").group(1) == "my_var"
    assert SNAKE_CASE_RE.search("_private") is None
    assert SNAKE_CASE_RE.search("v1_2") is None


def test_protection_pattern():
    """Frontmatter only matches at the start of the text."""
    assert PROTECTION_RE.search("---\na: 1\n---").group(0) == "---\na: 1\n---"
    assert PROTECTION_RE.search("x\n---\na: 1\n---") is None


def test_wikilink_pattern():
    match = WIKILINK_ALL_RE.search("[[link|alias]]")
    assert match.group(1) == "link"
    assert match.group(2) == "alias"


def test_default_values():
    """Test default configuration values."""
    assert "~/.config" in DEFAULT_CONFIG_PATH
    assert "~/" in DEFAULT_NOTES_DIR
    assert DEFAULT_LOG_LEVEL in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    assert ".md" in MARKDOWN_EXTENSIONS
    assert DEFAULT_DEBOUNCE_MS == 500
    assert DEFAULT_MIN_LENGTH == 4
    assert "iOS" in DEFAULT_IGNORE_LIST
