"""Terminal interface using Blessed for display and Curtsies for input."""

import logging
import select
import sys
import termios
from contextlib import contextmanager
from typing import Optional

import blessed
from curtsies import Input

logger = logging.getLogger(__name__)


class TerminalError(RuntimeError):
    """The terminal could not be prepared for the editor."""


class TerminalInterface:
    """Fullscreen terminal that frames are written to.

    Implements the sink interface used by ``FrameBuffer.render`` and
    ``emit_patches``: output is queued and written on ``flush``.
    """

    def __init__(self, terminal: Optional[blessed.Terminal] = None, in_stream=None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.in_stream = in_stream
        self.is_fullscreen = False
        self._input: Optional[Input] = None
        self._saved_tty = None
        self._pending: list[str] = []

    def setup(self):
        """Enter fullscreen and raw input mode."""
        print(self.term.enter_fullscreen + self.term.hide_cursor + self.term.clear, end='', flush=True)
        self.is_fullscreen = True
        in_stream = self.in_stream or sys.stdin
        try:
            self._input = Input(in_stream=in_stream, keynames='curtsies')
            self._input.__enter__()
        except Exception as e:
            # curtsies raises termios.error/OSError/AttributeError without a tty
            self._input = None
            raise TerminalError(f"Could not enter raw input mode: {e}") from e
        self._disable_flow_control(in_stream)

    def _disable_flow_control(self, in_stream):
        """Let Ctrl-S and Ctrl-Q through as keys instead of XOFF/XON."""
        try:
            old_settings = termios.tcgetattr(in_stream)
            new_settings = list(old_settings)
            # Input flags live at index 0
            new_settings[0] &= ~(termios.IXON | termios.IXOFF)
            termios.tcsetattr(in_stream, termios.TCSANOW, new_settings)
        except (termios.error, AttributeError, OSError) as e:
            raise TerminalError(f"Could not disable terminal flow control: {e}") from e
        self._saved_tty = (in_stream, old_settings)

    def cleanup(self):
        """Leave raw mode and fullscreen; safe to call more than once."""
        if self._saved_tty is not None:
            in_stream, old_settings = self._saved_tty
            self._saved_tty = None
            try:
                termios.tcsetattr(in_stream, termios.TCSANOW, old_settings)
            except (termios.error, OSError):
                logger.exception("Failed to restore terminal flow control")
        if self._input is not None:
            try:
                self._input.__exit__(None, None, None)
            except Exception:
                logger.exception("Failed to restore terminal input mode")
            finally:
                self._input = None
        if self.is_fullscreen:
            print(self.term.normal + self.term.normal_cursor + self.term.exit_fullscreen, end='', flush=True)
            self.is_fullscreen = False

    @contextmanager
    def screen(self):
        """Hold the terminal in editor mode for the duration of the block.

        The terminal is restored on every exit path, including errors.
        """
        try:
            self.setup()
            yield self
        finally:
            self.cleanup()

    # --- Sink interface ---
    def clear(self):
        self._pending.append(self.term.home + self.term.clear)

    def move(self, x: int, y: int):
        self._pending.append(self.term.move_xy(x, y))

    def set_colors(self, fg: str, bg: str):
        self._pending.append(self.term.normal + getattr(self.term, f"{fg}_on_{bg}"))

    def write(self, text: str):
        self._pending.append(text)

    def flush(self):
        if self._pending:
            print(''.join(self._pending), end='', flush=True)
            self._pending.clear()

    # --- Input ---
    def get_key(self, timeout=None):
        """Get a single key token from curtsies.

        Args:
            timeout: Timeout in seconds (None for blocking, 0 for non-blocking)

        Returns:
            The curtsies key name as a string, or None if nothing arrived.
        """
        if self._input is None:
            return None
        if timeout is not None:
            ready, _, _ = select.select([self.in_stream or sys.stdin], [], [], float(timeout))
            if not ready:
                return None
        return str(next(self._input))

    @property
    def width(self):
        """Terminal width in columns."""
        return self.term.width

    @property
    def height(self):
        """Terminal height in rows."""
        return self.term.height
