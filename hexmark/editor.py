"""Main editor controller for the hex editor."""

import errno
import logging
import os
import time
from typing import Optional

from .commands import CommandRegistry
from .config import EditorConfig
from .constants import EditorConstants
from .frame import DoubleBuffer, FrameBuffer, FrameDimensionError, emit_patches
from .keyboard import KeyboardHandler, KeyEvent, KeyType
from .model import ByteGrid
from .terminal import TerminalError, TerminalInterface
from .view import render_bar, render_byte_grid

logger = logging.getLogger(__name__)

# Rows taken by the header and status bars
BAR_ROWS = 2


class Editor:
    """Hex editor session: one file, one grid, one terminal."""

    def __init__(self, terminal=None, config: Optional[EditorConfig] = None):
        """Initialize the editor components."""
        self.terminal = terminal or TerminalInterface()
        self.keyboard = KeyboardHandler(self.terminal)
        self.config = config or EditorConfig()
        self.grid = ByteGrid(b"")
        self.command_registry = CommandRegistry(self.config.keys)
        self.frames: Optional[DoubleBuffer] = None
        self.running = False
        self.filename: Optional[str] = None
        self.status_message: Optional[str] = None
        self.prompt_mode: Optional[str] = None  # None or 'quit_confirm'
        self.top_line = 0
        self._needs_full_repaint = True
        self._reported_errors: set[str] = set()

    # --- Files ---
    def load_file(self, filename: str):
        """Read the whole file into a new grid.

        Raises:
            OSError: if the file cannot be opened or read.
        """
        with open(filename, 'rb') as f:
            data = f.read()
        self.grid = ByteGrid(data)
        self.filename = filename
        self.top_line = 0
        logger.info("Loaded %d bytes from %s", len(data), filename)

    def save_file(self, filename: Optional[str] = None) -> bool:
        """Overwrite the file in place with the current bytes.

        The file is opened without truncation and written from offset 0, so
        its length is unchanged. Failures are reported in status_message.

        Returns:
            True if save succeeded, False otherwise
        """
        filename = filename or self.filename
        if filename is None:
            self.status_message = "Error: No file to save to"
            return False
        data = self.grid.to_bytes()
        try:
            with open(filename, 'r+b') as f:
                f.seek(0)
                written = f.write(data)
                f.flush()
                os.fsync(f.fileno())
        except PermissionError:
            self.status_message = f"Error: Permission denied saving {filename}"
            logger.warning("Permission denied saving %s", filename)
            return False
        except OSError as e:
            if e.errno == errno.ENOSPC:
                self.status_message = "Error: No space left on device"
            else:
                self.status_message = f"Error: Cannot save to {filename}"
            logger.warning("Saving %s failed: %s", filename, e)
            return False
        if written != len(data):
            self.status_message = f"Error: Short write to {filename}"
            logger.warning("Short write to %s: %d of %d bytes", filename, written, len(data))
            return False
        self.grid.mark_clean()
        self.filename = filename
        logger.info("Saved %d bytes to %s", written, filename)
        return True

    def handle_save(self):
        """Handle the save key."""
        if self.save_file():
            self.status_message = EditorConstants.SAVED_MESSAGE.format(
                self.grid.size, os.path.basename(self.filename))

    # --- Input ---
    def _handle_key_event(self, key_event: KeyEvent):
        """Handle a keyboard event."""
        # Status messages last until the next key press
        if self.status_message and not self.prompt_mode:
            self.status_message = None

        if self.prompt_mode == 'quit_confirm':
            self._handle_quit_confirm(key_event)
            return

        self.command_registry.execute(self, key_event)

    def _handle_quit_confirm(self, key_event: KeyEvent):
        """Handle keypress during quit confirmation."""
        self.prompt_mode = None
        if key_event.key_type == KeyType.CTRL and key_event.value == 'c':
            self.running = False
        elif key_event.key_type == KeyType.REGULAR:
            char = key_event.value.lower()
            if char == 'y':
                if self.save_file():
                    self.running = False
            elif char == 'n':
                self.running = False

    # --- Drawing ---
    @property
    def grid_rows(self) -> int:
        height = self.frames.height if self.frames else self.terminal.height
        return max(0, height - BAR_ROWS)

    def scroll_to_cursor(self):
        """Adjust top_line so the cursor line is on screen."""
        rows = self.grid_rows
        if rows == 0:
            return
        line = self.grid.cursor.line
        if line < self.top_line:
            self.top_line = line
        elif line >= self.top_line + rows:
            self.top_line = line - rows + 1

    def status_text(self, width: int) -> str:
        if self.prompt_mode == 'quit_confirm':
            return f" {EditorConstants.QUIT_CONFIRM_MESSAGE}"
        if self.status_message:
            return f" {self.status_message}"
        offset = self.grid.cursor_offset()
        if self.grid.cursor.visible and offset is not None:
            position = f"offset 0x{offset:08X}  value 0x{self.grid.byte_at_cursor():02X}"
        else:
            position = "offset --  value --"
        left = f" {position}"
        if self.grid.dirty:
            left += "  [modified]"
        hint = EditorConstants.HINT_MESSAGE.format(
            save=self.config.keys['save'], quit=self.config.keys['quit'])
        if len(left) + len(hint) + 2 <= width:
            return left + hint.rjust(width - len(left) - 1)
        return left

    def draw(self, buffer: FrameBuffer):
        """Draw header, grid and status bar into ``buffer``."""
        palette = self.config.palette
        name = os.path.basename(self.filename) if self.filename else "[no file]"
        render_bar(buffer, 0, f" {EditorConstants.APP_NAME}  {name}", palette.bar_fg, palette.bar_bg)
        render_byte_grid(
            buffer,
            self.grid,
            origin=(0, 1),
            first_line=self.top_line,
            max_lines=self.grid_rows,
            palette=palette,
        )
        render_bar(buffer, buffer.height - 1, self.status_text(buffer.width),
                   palette.bar_fg, palette.bar_bg)

    def refresh(self):
        """Draw the next frame and send only what changed to the terminal."""
        frames = self.frames
        frames.back.clear()
        self.draw(frames.back)
        if self._needs_full_repaint:
            frames.back.render(self.terminal)
            self._needs_full_repaint = False
        else:
            try:
                patches = frames.back.diff(frames.front)
            except FrameDimensionError as e:
                self._report_once('frame_dimensions', e)
                frames.front = FrameBuffer(frames.back.width, frames.back.height)
                frames.back.render(self.terminal)
            else:
                emit_patches(patches, self.terminal)
        frames.swap()

    def _report_once(self, kind: str, error: Exception):
        if kind not in self._reported_errors:
            self._reported_errors.add(kind)
            logger.error("Internal error (%s): %s", kind, error)

    # --- Main loop ---
    def tick(self):
        """Process at most one key press and redraw."""
        key_event = self.keyboard.get_key_event(timeout=0)
        if key_event:
            self._handle_key_event(key_event)
        self.refresh()

    def run(self):
        """Run the main editor loop until quit."""
        with self.terminal.screen():
            width, height = self.terminal.width, self.terminal.height
            if not width or not height:
                raise TerminalError("Could not get terminal size")
            self.frames = DoubleBuffer(width, height)
            self._needs_full_repaint = True
            self.scroll_to_cursor()
            self.running = True
            try:
                while self.running:
                    self.tick()
                    time.sleep(self.config.frame_interval)
            except KeyboardInterrupt:
                self.running = False
