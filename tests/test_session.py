#!/usr/bin/env python3
"""
Tests for the linker session (batch and live conversion).
"""

import logging
import threading
from unittest.mock import MagicMock

import pytest

from autolink_core.config import LinkerConfig
from autolink_core.document import EditNotifier, TextBuffer
from autolink_core.session import CallQueue, Debouncer, LinkerSession


@pytest.fixture
def notifier():
    return EditNotifier()


@pytest.fixture
def session(notifier):
    """Session with a long debounce so timers never fire on their own."""
    session = LinkerSession(LinkerConfig(debounce_ms=60000), notifier)
    yield session
    session.close()


def test_convert_current_file():
    """Batch conversion rewrites the whole document."""
    session = LinkerSession(LinkerConfig())
    buffer = TextBuffer("FooBar\nplain line\n`my_var` and my_var")

    result = session.convert_current_file(buffer)

    assert result.changed
    assert buffer.get_full_text() == "[[Foo Bar|FooBar]]\nplain line\n`my_var` and [[my var|my_var]]"
    assert result.original == "FooBar\nplain line\n`my_var` and my_var"


def test_convert_current_file_without_changes():
    """Nothing is written back when the text does not change."""
    session = LinkerSession(LinkerConfig())
    buffer = TextBuffer("nothing to link")

    result = session.convert_current_file(buffer)

    assert not result.changed
    assert not buffer.modified


def test_convert_in_editor_skips_word_at_cursor():
    """The word being typed is left alone."""
    session = LinkerSession(LinkerConfig())
    buffer = TextBuffer("CamelCaseWord")
    buffer.set_cursor(0, 5)

    result = session.convert_in_editor(buffer)

    assert not result.changed
    assert buffer.get_line(0) == "CamelCaseWord"


def test_convert_in_editor_moves_cursor():
    """The cursor shifts by the change in line length."""
    session = LinkerSession(LinkerConfig())
    buffer = TextBuffer("first\nCamelCaseWord is")
    buffer.set_cursor(1, 16)

    result = session.convert_in_editor(buffer)

    assert result.changed
    assert buffer.get_line(1) == "[[Camel Case Word|CamelCaseWord]] is"
    assert buffer.get_line(0) == "first"
    assert buffer.get_cursor() == (1, 36)


def test_convert_in_editor_is_not_reentrant():
    """A conversion is refused while another one is writing."""
    session = LinkerSession(LinkerConfig())
    buffer = TextBuffer("FooBar is")
    buffer.set_cursor(0, 9)
    session.is_converting = True

    assert session.convert_in_editor(buffer) is None
    assert buffer.get_line(0) == "FooBar is"


def test_edit_schedules_live_conversion(session, notifier):
    """Typing restarts the debounce timer and flushing converts the line."""
    buffer = TextBuffer("FooBar is", notifier)
    buffer.set_cursor(0, 9)

    buffer.insert(" more")
    assert session.debouncer.pending

    assert session.debouncer.flush()
    assert buffer.get_line(0) == "[[Foo Bar|FooBar]] is more"
    assert not session.debouncer.pending


def test_write_back_does_not_retrigger(session, notifier):
    """The session's own edit does not schedule another conversion."""
    buffer = TextBuffer("FooBar is", notifier)
    buffer.set_cursor(0, 9)

    result = session.convert_in_editor(buffer)

    assert result.changed
    assert not session.debouncer.pending
    assert not session.is_converting


def test_live_mode_off(notifier):
    """Edits are ignored when live mode is disabled."""
    session = LinkerSession(LinkerConfig(live_mode=False), notifier)
    buffer = TextBuffer("FooBar", notifier)

    buffer.insert("x")

    assert not session.debouncer.pending
    session.close()


def test_close_unsubscribes(session, notifier):
    """A closed session no longer reacts to edits."""
    session.close()
    buffer = TextBuffer("FooBar", notifier)
    buffer.insert("x")
    assert not session.debouncer.pending
    assert notifier.subscribers == []


def test_independent_sessions():
    """Each session has its own re-entrancy flag."""
    first = LinkerSession(LinkerConfig())
    second = LinkerSession(LinkerConfig())
    first.is_converting = True

    buffer = TextBuffer("FooBar is")
    buffer.set_cursor(0, 9)
    assert second.convert_in_editor(buffer).changed


def test_debouncer_last_call_wins():
    """Only the most recent call runs."""
    callback = MagicMock()
    debouncer = Debouncer(60000, callback)

    debouncer.call("first")
    debouncer.call("second")

    assert debouncer.flush()
    callback.assert_called_once_with("second")
    assert not debouncer.flush()


def test_debouncer_cancel():
    """A cancelled call never runs."""
    callback = MagicMock()
    debouncer = Debouncer(60000, callback)

    debouncer.call("x")
    debouncer.cancel()

    assert not debouncer.pending
    assert not debouncer.flush()
    callback.assert_not_called()


def test_debouncer_fires_after_delay():
    """The timer runs the callback on its own after the delay."""
    fired = threading.Event()
    received = []

    def callback(value):
        received.append(value)
        fired.set()

    debouncer = Debouncer(10, callback)
    debouncer.call("done")

    assert fired.wait(5)
    assert received == ["done"]


def test_debouncer_ignores_replaced_timer():
    """A timer that fires after being replaced does not run the callback."""
    callback = MagicMock()
    debouncer = Debouncer(60000, callback)

    debouncer.call("old")
    stale = debouncer._generation
    debouncer.call("new")
    debouncer._fire(stale)

    callback.assert_not_called()
    assert debouncer.pending

    debouncer.cancel()
    assert not debouncer.pending
    assert not debouncer.flush()


def test_debouncer_logs_callback_errors(caplog):
    """An error raised by a fired callback is logged, not propagated."""
    debouncer = Debouncer(60000, MagicMock(side_effect=ValueError("boom")))
    debouncer.call("x")
    debouncer._timer.cancel()

    with caplog.at_level(logging.ERROR, logger="autolink_core.session"):
        debouncer._fire(debouncer._generation)

    assert "boom" in caplog.text
    assert not debouncer.pending


def test_call_queue_runs_in_order_and_logs_errors(caplog):
    """Queued calls run on the caller's thread; a failing call does not stop the rest."""
    calls = CallQueue()
    received = []

    calls.post(MagicMock(side_effect=RuntimeError("broken")))
    calls.post(received.append, "after")

    assert calls.wait(0)
    with caplog.at_level(logging.ERROR, logger="autolink_core.session"):
        assert calls.run_pending() == 2

    assert received == ["after"]
    assert "broken" in caplog.text
    assert not calls.wait(0)
    assert calls.run_pending() == 0


def test_live_conversion_runs_on_owner_thread(notifier):
    """A fired timer only queues the conversion; run_pending applies it."""
    session = LinkerSession(LinkerConfig(debounce_ms=10), notifier)
    buffer = TextBuffer("FooBar is", notifier)
    buffer.set_cursor(0, 9)

    buffer.insert(" more")

    assert session.calls.wait(5)
    assert buffer.get_line(0) == "FooBar is more"
    assert session.debouncer.pending

    assert session.run_pending() == 1
    assert buffer.get_line(0) == "[[Foo Bar|FooBar]] is more"
    assert not session.debouncer.pending
    session.close()


def test_queued_conversion_dropped_after_new_edit(session, notifier):
    """An edit made after the timer fired replaces the queued conversion."""
    buffer = TextBuffer("FooBar is", notifier)
    buffer.set_cursor(0, 9)

    buffer.insert(" x")
    session.debouncer._timer.cancel()
    session.debouncer._fire(session.debouncer._generation)
    buffer.insert("y")

    session.run_pending()

    assert buffer.get_line(0) == "FooBar is xy"
    assert session.debouncer.pending

    assert session.debouncer.flush()
    assert buffer.get_line(0) == "[[Foo Bar|FooBar]] is xy"
