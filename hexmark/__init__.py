"""hexmark - A terminal hex viewer and editor."""

from .model import ByteGrid, Cursor, Direction, Line, Side, layout
from .frame import Cell, DoubleBuffer, FrameBuffer, FrameDimensionError, Patch, emit_patches
from .view import render_bar, render_byte_grid

__all__ = [
    'ByteGrid',
    'Cursor',
    'Direction',
    'Line',
    'Side',
    'layout',
    'Cell',
    'DoubleBuffer',
    'FrameBuffer',
    'FrameDimensionError',
    'Patch',
    'emit_patches',
    'render_bar',
    'render_byte_grid',
]
