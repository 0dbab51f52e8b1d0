"""
Linker session.

A LinkerSession owns everything that lives for as long as the linker is
attached to an editor: the settings, the debounce timer for live conversion
and the flag that stops the session's own write-back from triggering another
conversion.

Debounce timers run on their own threads, but they never convert anything
there. A fired timer only posts the conversion to the session's CallQueue,
and the editor's own loop runs it with LinkerSession.run_pending(). Reading
the line, rewriting it and writing it back therefore happen in one turn of
the thread that also applies the user's edits.
"""

import queue
import logging
import threading
from typing import Any, Callable, Optional, Tuple

from autolink_core.config import LinkerConfig
from autolink_core.document import DocumentAccess, EditNotifier
from autolink_core.engine import convert_with
from autolink_core.models import ConversionResult
from autolink_core.rewriter import Rewriter

logger = logging.getLogger(__name__)

Dispatch = Callable[..., None]


class CallQueue:
    """Calls handed over from timer threads, run later on the owner's thread."""

    def __init__(self):
        self._calls: "queue.Queue[Tuple[Callable[..., Any], tuple]]" = queue.Queue()
        self._ready = threading.Event()

    def post(self, fn: Callable[..., Any], *args: Any) -> None:
        """Queue a call. Safe to use from any thread."""
        self._calls.put((fn, args))
        self._ready.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until something has been posted. Returns False on timeout."""
        return self._ready.wait(timeout)

    def run_pending(self) -> int:
        """
        Run every queued call on the current thread.

        Errors are logged and do not stop the remaining calls.

        Returns:
            Number of calls run
        """
        count = 0
        self._ready.clear()
        while True:
            try:
                fn, args = self._calls.get_nowait()
            except queue.Empty:
                break
            try:
                fn(*args)
            except Exception as e:
                logger.error(f"Error running queued call {getattr(fn, '__name__', fn)}: {e}")
            count += 1
        return count


class Debouncer:
    """Runs a callback once calls have stopped arriving for a delay."""

    def __init__(self, delay_ms: int, callback: Callable[..., Any], dispatch: Optional[Dispatch] = None):
        """
        Initialize a debouncer.

        Args:
            delay_ms: Quiet period before the callback runs
            callback: Function to run with the arguments of the latest call
            dispatch: Hands a fired call to another thread (e.g. CallQueue.post).
                Without it the callback runs on the timer thread.
        """
        self.delay_ms = delay_ms
        self.callback = callback
        self.dispatch = dispatch
        self._timer: Optional[threading.Timer] = None
        self._due: Optional[int] = None
        self._generation = 0
        self._args: tuple = ()
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        """True while a call waits on its timer or in the dispatch queue."""
        with self._lock:
            return self._timer is not None or self._due is not None

    def call(self, *args: Any) -> None:
        """
        Schedule the callback, replacing any call still waiting.

        The replaced call never runs, whether it was still on its timer or
        already handed to the dispatcher.
        """
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._args = args
            self._due = None
            self._timer = threading.Timer(max(self.delay_ms, 0) / 1000.0, self._fire, args=(self._generation,))
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        """Drop the waiting call, if any."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._due = None
            self._generation += 1

    def flush(self) -> bool:
        """Run a pending call now, on this thread. Returns True if there was one."""
        with self._lock:
            if self._timer is None and self._due is None:
                return False
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._due = None
            self._generation += 1
            args = self._args
        self.callback(*args)
        return True

    def _fire(self, generation: int) -> None:
        """Timer thread entry point; ignored if a newer call replaced this one."""
        with self._lock:
            if generation != self._generation:
                return
            self._timer = None
            if self.dispatch is not None:
                self._due = generation
        if self.dispatch is not None:
            self.dispatch(self._deliver, generation)
        else:
            self._deliver(generation)

    def _deliver(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._timer = None
            self._due = None
            self._generation += 1
            args = self._args
        try:
            self.callback(*args)
        except Exception as e:
            logger.error(f"Error in debounced call to {getattr(self.callback, '__name__', self.callback)}: {e}")


class LinkerSession:
    """Batch and live link conversion for one editor."""

    def __init__(self, config: Optional[LinkerConfig] = None, notifier: Optional[EditNotifier] = None):
        """
        Initialize a session.

        Args:
            config: Linker settings, shared with whoever edits them
            notifier: Edit event source to subscribe the live trigger to
        """
        self.config = config or LinkerConfig()
        self.is_converting = False
        self.calls = CallQueue()
        self.debouncer = Debouncer(self.config.debounce_ms, self.convert_in_editor, dispatch=self.calls.post)
        self.notifier = notifier
        if notifier is not None:
            notifier.subscribe(self.on_edit)

    def close(self) -> None:
        """Detach from the notifier and drop any pending live conversion."""
        self.debouncer.cancel()
        if self.notifier is not None:
            self.notifier.unsubscribe(self.on_edit)
            self.notifier = None

    def run_pending(self) -> int:
        """Run live conversions whose delay has passed. Call from the editor's loop."""
        return self.calls.run_pending()

    def on_edit(self, document: DocumentAccess) -> None:
        """Edit event handler: restart the live conversion timer."""
        if not self.config.live_mode or self.is_converting:
            return
        self.debouncer.delay_ms = self.config.debounce_ms
        self.debouncer.call(document)

    def convert_current_file(self, document: DocumentAccess) -> ConversionResult:
        """Convert every eligible word in the document."""
        text = document.get_full_text()
        result = ConversionResult(original=text, text=convert_with(self._rewriter(), text))
        if result.changed:
            self.is_converting = True
            try:
                document.set_full_text(result.text)
            finally:
                self.is_converting = False
        return result

    def convert_in_editor(self, document: DocumentAccess) -> Optional[ConversionResult]:
        """
        Convert the line under the cursor, skipping the word being typed.

        Returns:
            The conversion result, or None if a conversion is already running
        """
        if self.is_converting:
            return None

        line_no, ch = document.get_cursor()
        line = document.get_line(line_no)
        result = ConversionResult(original=line, text=convert_with(self._rewriter(), line, ch))

        if result.changed:
            self.is_converting = True
            try:
                length_diff = len(result.text) - len(line)
                document.set_line(line_no, result.text)
                document.set_cursor(line_no, max(0, min(ch + length_diff, len(result.text))))
            finally:
                self.is_converting = False
        return result

    def _rewriter(self) -> Rewriter:
        rewriter = Rewriter(self.config)
        if rewriter.custom_pattern_error:
            logger.debug(f"Custom pattern disabled: {rewriter.custom_pattern_error}")
        return rewriter
