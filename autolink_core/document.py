"""
Document access for the link converter.

The converter never touches an editor directly. It reads and writes through
the DocumentAccess protocol, and listens for edits through an EditNotifier.
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from typing_extensions import Protocol

from autolink_core.utils import read_text_file, write_text_file

logger = logging.getLogger(__name__)


class DocumentAccess(Protocol):
    """What the converter needs from a document or editor."""

    def get_full_text(self) -> str: ...

    def get_line(self, index: int) -> str: ...

    def set_full_text(self, text: str) -> None: ...

    def set_line(self, index: int, text: str) -> None: ...

    def get_cursor(self) -> Tuple[int, int]: ...

    def set_cursor(self, line: int, ch: int) -> None: ...


EditCallback = Callable[[DocumentAccess], None]


class EditNotifier:
    """Fans document edit events out to subscribers."""

    def __init__(self):
        self.subscribers: List[EditCallback] = []

    def subscribe(self, callback: EditCallback) -> None:
        if callback not in self.subscribers:
            self.subscribers.append(callback)

    def unsubscribe(self, callback: EditCallback) -> None:
        if callback in self.subscribers:
            self.subscribers.remove(callback)

    def notify(self, document: DocumentAccess) -> None:
        for callback in list(self.subscribers):
            callback(document)


class TextBuffer:
    """An in-memory document with a cursor that reports every edit."""

    def __init__(self, text: str = "", notifier: Optional[EditNotifier] = None):
        """
        Initialize a buffer.

        Args:
            text: Initial content
            notifier: Receives an event after each write (optional)
        """
        self._lines = text.split("\n")
        self._cursor = (0, 0)
        self.notifier = notifier
        self.modified = False

    def _edited(self) -> None:
        self.modified = True
        if self.notifier:
            self.notifier.notify(self)

    def get_full_text(self) -> str:
        return "\n".join(self._lines)

    def get_line(self, index: int) -> str:
        return self._lines[index]

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def set_full_text(self, text: str) -> None:
        self._lines = text.split("\n")
        line, ch = self._cursor
        self._cursor = self._clamp(line, ch)
        self._edited()

    def set_line(self, index: int, text: str) -> None:
        if "\n" in text:
            raise ValueError("set_line() text must not contain a newline")
        self._lines[index] = text
        self._edited()

    def insert(self, text: str) -> None:
        """Type text at the cursor, as a user would."""
        line, ch = self._cursor
        current = self._lines[line]
        self._lines[line] = current[:ch] + text + current[ch:]
        self._cursor = (line, ch + len(text))
        self._edited()

    def get_cursor(self) -> Tuple[int, int]:
        return self._cursor

    def set_cursor(self, line: int, ch: int) -> None:
        self._cursor = self._clamp(line, ch)

    def _clamp(self, line: int, ch: int) -> Tuple[int, int]:
        line = max(0, min(line, len(self._lines) - 1))
        ch = max(0, min(ch, len(self._lines[line])))
        return line, ch


class FileDocument(TextBuffer):
    """A markdown file loaded into a TextBuffer."""

    def __init__(self, path: Union[str, Path], notifier: Optional[EditNotifier] = None):
        self.path = Path(path)
        text = read_text_file(self.path)
        if text is None:
            raise FileNotFoundError(f"Could not read note: {self.path}")
        super().__init__(text, notifier)

    def save(self) -> bool:
        """Write the buffer back if it was modified."""
        if not self.modified:
            return True
        if write_text_file(self.path, self.get_full_text()):
            self.modified = False
            return True
        return False
