#!/usr/bin/env python3
"""
Tests for utilities module.
"""

import os
import tempfile

from autolink_core.utils import (
    read_text_file, write_text_file, scandir_recursive, find_note_files, is_excluded
)


def _touch(path, content=""):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)


def test_read_and_write_text_file():
    """Test text file round trip and error handling."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "note.md")

        assert write_text_file(path, "line one\r\nline two")
        assert read_text_file(path) == "line one\r\nline two"

        assert read_text_file(os.path.join(tmpdir, "missing.md")) is None
        assert not write_text_file(os.path.join(tmpdir, "no", "such", "dir.md"), "x")


def test_is_excluded():
    assert is_excluded("/notes/.git", "/notes", [".git"])
    assert is_excluded("/notes/templates/a.md", "/notes", ["templates/*"])
    assert not is_excluded("/notes/a.md", "/notes", [".git"])


def test_scandir_recursive():
    """Test recursive directory scanning with excludes."""
    with tempfile.TemporaryDirectory() as tmpdir:
        _touch(os.path.join(tmpdir, "file1.md"))
        _touch(os.path.join(tmpdir, "subdir1", "file2.md"))
        _touch(os.path.join(tmpdir, ".obsidian", "workspace.md"))

        found = scandir_recursive(tmpdir, [".obsidian"], quiet=True)

        assert sorted(os.path.basename(p) for p in found) == ["file1.md", "file2.md"]


def test_find_note_files():
    """Directories are filtered by extension, explicit files are kept."""
    with tempfile.TemporaryDirectory() as tmpdir:
        note = os.path.join(tmpdir, "a.md")
        text = os.path.join(tmpdir, "b.txt")
        nested = os.path.join(tmpdir, "sub", "c.markdown")
        _touch(note)
        _touch(text)
        _touch(nested)

        found = find_note_files([tmpdir], quiet=True)
        assert sorted(os.path.basename(p) for p in found) == ["a.md", "c.markdown"]

        found = find_note_files([text, note, note, os.path.join(tmpdir, "missing.md")], quiet=True)
        assert found == [text, note]
