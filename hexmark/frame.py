"""Double-buffered grid of colored terminal cells with differential redraw.

A frame is drawn into a ``FrameBuffer`` with point and run writes, then
compared against the previously shown frame. The resulting patch list is
the minimal set of cells the terminal has to repaint.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, NamedTuple, Protocol

from .constants import EditorConstants


@dataclass(frozen=True)
class Cell:
    glyph: str = " "
    fg: str = EditorConstants.NORMAL_FG
    bg: str = EditorConstants.NORMAL_BG


DEFAULT_CELL = Cell()


class Patch(NamedTuple):
    x: int
    y: int
    cell: Cell


class FrameDimensionError(ValueError):
    """Two frames of different sizes were compared."""


class Sink(Protocol):
    """Destination for frame output (the terminal, or a recorder in tests)."""

    def clear(self) -> None: ...
    def move(self, x: int, y: int) -> None: ...
    def set_colors(self, fg: str, bg: str) -> None: ...
    def write(self, text: str) -> None: ...
    def flush(self) -> None: ...


class FrameBuffer:
    """A W x H grid of cells stored row-major."""

    def __init__(self, width: int, height: int):
        if width < 0 or height < 0:
            raise ValueError(f"invalid frame size {width}x{height}")
        self.width = width
        self.height = height
        self._cells: list[Cell] = [DEFAULT_CELL] * (width * height)

    def clear(self) -> None:
        """Reset every cell to the default, keeping the same list."""
        self._cells[:] = [DEFAULT_CELL] * len(self._cells)

    def _index(self, x: int, y: int) -> int | None:
        if 0 <= x < self.width and 0 <= y < self.height:
            return y * self.width + x
        return None

    def put_cell(self, x: int, y: int, glyph: str, fg: str, bg: str) -> None:
        """Write one cell; positions off the grid are ignored."""
        index = self._index(x, y)
        if index is not None:
            self._cells[index] = Cell(glyph, fg, bg)

    def put_run(self, x: int, y: int, text: str, fg: str, bg: str) -> None:
        """Write ``text`` left to right from (x, y) without wrapping."""
        for i, glyph in enumerate(text):
            self.put_cell(x + i, y, glyph, fg, bg)

    def cell_at(self, x: int, y: int) -> Cell:
        index = self._index(x, y)
        if index is None:
            raise IndexError(f"cell ({x}, {y}) outside {self.width}x{self.height} frame")
        return self._cells[index]

    def row_text(self, y: int) -> str:
        start = y * self.width
        return "".join(cell.glyph for cell in self._cells[start:start + self.width])

    def diff(self, reference: FrameBuffer) -> list[Patch]:
        """Patches that turn ``reference`` into this frame, in row-major order."""
        if (self.width, self.height) != (reference.width, reference.height):
            raise FrameDimensionError(
                f"cannot diff {self.width}x{self.height} frame against "
                f"{reference.width}x{reference.height} frame"
            )
        width = self.width
        return [
            Patch(index % width, index // width, cell)
            for index, (cell, old) in enumerate(zip(self._cells, reference._cells))
            if cell != old
        ]

    def apply(self, patches: Iterable[Patch]) -> None:
        for x, y, cell in patches:
            self.put_cell(x, y, cell.glyph, cell.fg, cell.bg)

    def render(self, sink: Sink) -> None:
        """Repaint the whole frame, re-sending colors only when they change."""
        fg, bg = EditorConstants.NORMAL_FG, EditorConstants.NORMAL_BG
        sink.clear()
        sink.set_colors(fg, bg)
        for y in range(self.height):
            sink.move(0, y)
            row = self._cells[y * self.width:(y + 1) * self.width]
            for cell in row:
                if (cell.fg, cell.bg) != (fg, bg):
                    fg, bg = cell.fg, cell.bg
                    sink.set_colors(fg, bg)
                sink.write(cell.glyph)
        sink.flush()

    def __eq__(self, other):
        if not isinstance(other, FrameBuffer):
            return NotImplemented
        return (self.width, self.height, self._cells) == (other.width, other.height, other._cells)


def emit_patches(patches: Iterable[Patch], sink: Sink) -> None:
    """Send a patch list to ``sink``.

    Consecutive patches on the same row are written without a cursor move,
    and colors are only re-sent when they differ from the last ones sent.
    """
    next_pos = None
    colors = None
    for x, y, cell in patches:
        if (x, y) != next_pos:
            sink.move(x, y)
        if (cell.fg, cell.bg) != colors:
            colors = (cell.fg, cell.bg)
            sink.set_colors(cell.fg, cell.bg)
        sink.write(cell.glyph)
        next_pos = (x + 1, y)
    sink.flush()


class DoubleBuffer:
    """Front (on screen) and back (being drawn) frames, exchanged by swap."""

    def __init__(self, width: int, height: int):
        self.front = FrameBuffer(width, height)
        self.back = FrameBuffer(width, height)

    @property
    def width(self) -> int:
        return self.front.width

    @property
    def height(self) -> int:
        return self.front.height

    def swap(self) -> None:
        self.front, self.back = self.back, self.front
