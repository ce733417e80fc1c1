from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .constants import EditorConstants


class Side(Enum):
    HIGH = "high"
    LOW = "low"


class Direction(Enum):
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class Line:
    """Span of the document shown on one grid row."""
    start: int
    end: int

    @property
    def address(self) -> int:
        return self.start

    @property
    def address_text(self) -> str:
        return f"{self.start:0{EditorConstants.ADDRESS_DIGITS}X}"

    def __len__(self) -> int:
        return self.end - self.start


@dataclass
class Cursor:
    line: int = 0
    column: int = 0
    side: Side = Side.HIGH
    visible: bool = False


def layout(data, line_width: int = EditorConstants.BYTES_PER_LINE) -> list[Line]:
    """Partition ``data`` into lines of ``line_width`` bytes.

    Line i covers [i*line_width, min(len(data), (i+1)*line_width)). Only
    the last line may be shorter; empty data yields no lines.
    """
    if line_width < 1:
        raise ValueError(f"line width must be positive, got {line_width}")
    size = len(data)
    return [Line(start, min(size, start + line_width))
            for start in range(0, size, line_width)]


class ByteGrid:
    """Byte document laid out as addressed lines, with a nibble cursor.

    The document length never changes: edits overwrite single nibbles, so
    the line partition is computed once at construction.
    """
    cursor: Cursor
    dirty: bool

    def __init__(self, data=b"", line_width: int = EditorConstants.BYTES_PER_LINE):
        self._data = bytearray(data)
        self._line_width = line_width
        self._lines = layout(self._data, line_width)
        self.cursor = Cursor()
        self.dirty = False

    @property
    def lines(self) -> list[Line]:
        return self._lines

    @property
    def line_count(self) -> int:
        return len(self._lines)

    @property
    def line_width(self) -> int:
        return self._line_width

    @property
    def size(self) -> int:
        return len(self._data)

    def line_bytes(self, index: int) -> bytes:
        line = self._lines[index]
        return bytes(self._data[line.start:line.end])

    def line_length(self, index: int) -> int:
        return len(self._lines[index])

    def last_column(self, index: int) -> int:
        return len(self._lines[index]) - 1

    # --- Cursor movement ---
    def move_cursor(self, direction: Direction):
        """Move the cursor one step.

        The first press after startup only reveals the cursor where it is.
        """
        if not self.cursor.visible:
            self.cursor.visible = True
            return
        if direction is Direction.LEFT:
            self._step_left()
        elif direction is Direction.RIGHT:
            self._step_right()
        elif direction is Direction.UP:
            self._step_up()
        elif direction is Direction.DOWN:
            self._step_down()

    def move_left(self):
        self.move_cursor(Direction.LEFT)

    def move_right(self):
        self.move_cursor(Direction.RIGHT)

    def move_up(self):
        self.move_cursor(Direction.UP)

    def move_down(self):
        self.move_cursor(Direction.DOWN)

    def _step_left(self):
        cursor = self.cursor
        if cursor.side is Side.LOW:
            cursor.side = Side.HIGH
        elif cursor.column > 0:
            cursor.column -= 1
            cursor.side = Side.LOW

    def _step_right(self):
        cursor = self.cursor
        # A column past the end of a short line stays put
        if self.cursor_offset() is None:
            return
        if cursor.side is Side.HIGH:
            cursor.side = Side.LOW
        elif cursor.column < self.last_column(cursor.line):
            cursor.column += 1
            cursor.side = Side.HIGH

    def _step_up(self):
        # Column is kept as-is, see cursor_offset() for the short last line
        if self.cursor.line > 0:
            self.cursor.line -= 1

    def _step_down(self):
        if self.cursor.line < self.line_count - 1:
            self.cursor.line += 1

    # --- Byte access ---
    def cursor_offset(self) -> Optional[int]:
        """Document index of the byte under the cursor.

        None when the document is empty or the cursor column lies past the
        end of a short line (vertical moves keep the column).
        """
        cursor = self.cursor
        if not 0 <= cursor.line < self.line_count:
            return None
        line = self._lines[cursor.line]
        if not 0 <= cursor.column < len(line):
            return None
        return line.start + cursor.column

    def byte_at_cursor(self) -> Optional[int]:
        offset = self.cursor_offset()
        if offset is None:
            return None
        return self._data[offset]

    def write_nibble(self, digit: Union[int, str]) -> bool:
        """Overwrite the nibble under the cursor with a hex digit.

        Returns True when a byte was changed; a hidden cursor or a cursor
        with no byte under it leaves the document untouched.
        """
        if isinstance(digit, str):
            digit = int(digit, 16)
        if not 0 <= digit <= 0xF:
            raise ValueError(f"not a hex digit: {digit!r}")
        if not self.cursor.visible:
            return False
        offset = self.cursor_offset()
        if offset is None:
            return False
        byte = self._data[offset]
        if self.cursor.side is Side.HIGH:
            self._data[offset] = (digit << 4) | (byte & 0x0F)
        else:
            self._data[offset] = (byte & 0xF0) | digit
        self.dirty = True
        return True

    def to_bytes(self) -> bytes:
        return b"".join(self.line_bytes(i) for i in range(self.line_count))

    def mark_clean(self):
        self.dirty = False
