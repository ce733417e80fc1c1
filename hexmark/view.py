"""Projection of a ByteGrid onto a FrameBuffer.

Each grid row reads::

    00000010:  41 42 43 ...  ABC...

The offset column starts at the origin, hex pairs at ``HEX_COLUMN`` with
three cells per byte, and the ASCII column one cell after the hex area.
"""

from typing import Optional

from .config import Palette
from .constants import EditorConstants
from .frame import FrameBuffer
from .model import ByteGrid, Side

HEX_DIGITS = "0123456789ABCDEF"


def hex_column(column: int) -> int:
    """Cell offset of a byte's high nibble relative to the grid origin."""
    return EditorConstants.HEX_COLUMN + 3 * column


def ascii_column(column: int, line_width: int) -> int:
    return EditorConstants.HEX_COLUMN + 3 * line_width + 1 + column


def ascii_glyph(byte: int) -> str:
    """Printable ASCII ('!' through '~') as itself, anything else as a dot."""
    if 0x21 <= byte <= 0x7E:
        return chr(byte)
    return "."


def render_byte_grid(
    buffer: FrameBuffer,
    grid: ByteGrid,
    origin: tuple[int, int] = (0, 0),
    first_line: int = 0,
    max_lines: Optional[int] = None,
    palette: Optional[Palette] = None,
) -> None:
    """Write lines ``first_line`` onward into ``buffer`` starting at ``origin``.

    The nibble under a visible cursor is drawn with foreground and
    background swapped.
    """
    palette = palette or Palette()
    fg, bg = palette.normal_fg, palette.normal_bg
    x0, y0 = origin
    cursor = grid.cursor
    end_line = grid.line_count
    if max_lines is not None:
        end_line = min(end_line, first_line + max_lines)

    for index in range(max(first_line, 0), end_line):
        row = y0 + index - first_line
        line = grid.lines[index]
        buffer.put_run(x0, row, f"{line.address_text}:", fg, bg)

        for column, byte in enumerate(grid.line_bytes(index)):
            high_colors = low_colors = (fg, bg)
            if cursor.visible and cursor.line == index and cursor.column == column:
                if cursor.side is Side.HIGH:
                    high_colors = (bg, fg)
                else:
                    low_colors = (bg, fg)
            x = x0 + hex_column(column)
            buffer.put_cell(x, row, HEX_DIGITS[byte >> 4], *high_colors)
            buffer.put_cell(x + 1, row, HEX_DIGITS[byte & 0x0F], *low_colors)
            buffer.put_cell(x0 + ascii_column(column, grid.line_width), row,
                            ascii_glyph(byte), fg, bg)


def render_bar(buffer: FrameBuffer, row: int, label: str, fg: str, bg: str) -> None:
    """Fill a whole row with the bar color, label left-justified."""
    buffer.put_run(0, row, label[:buffer.width].ljust(buffer.width), fg, bg)
