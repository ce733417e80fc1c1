"""Test the editor session: key dispatch, drawing, load and save."""

import os
import time

import pytest
from unittest.mock import patch

from hexmark.config import EditorConfig
from hexmark.editor import Editor
from hexmark.frame import DoubleBuffer, FrameBuffer
from hexmark.keyboard import KeyEvent, KeyType
from hexmark.model import Side


def regular(ch):
    return KeyEvent(KeyType.REGULAR, ch, ch)


def special(name):
    return KeyEvent(KeyType.SPECIAL, name, f'<{name.upper()}>')


def ctrl(ch):
    return KeyEvent(KeyType.CTRL, ch, f'<Ctrl-{ch}>', is_ctrl=True)


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "data.bin"
    path.write_bytes(b"\x41\x42\x43")
    return path


@pytest.fixture
def editor(make_terminal, data_file):
    ed = Editor(terminal=make_terminal())
    ed.load_file(str(data_file))
    ed.frames = DoubleBuffer(80, 24)
    return ed


def test_load_file(editor, data_file):
    assert editor.filename == str(data_file)
    assert editor.grid.to_bytes() == b"ABC"
    assert not editor.grid.dirty


def test_load_missing_file_raises(make_terminal, tmp_path):
    ed = Editor(terminal=make_terminal())
    with pytest.raises(OSError):
        ed.load_file(str(tmp_path / "missing.bin"))


def test_example_session_edit_and_save(editor, data_file):
    """Reveal, move to byte 1 low nibble, type 5, save."""
    editor._handle_key_event(special('right'))
    assert editor.grid.cursor.visible
    assert editor.grid.cursor.column == 0
    for _ in range(3):
        editor._handle_key_event(regular('l'))
    assert (editor.grid.cursor.column, editor.grid.cursor.side) == (1, Side.LOW)

    editor._handle_key_event(regular('5'))
    assert editor.grid.dirty
    editor._handle_key_event(regular('w'))

    assert data_file.read_bytes() == b"\x41\x45\x43"
    assert not editor.grid.dirty
    assert editor.status_message == "Saved 3 bytes to data.bin"


def test_save_without_edits_round_trips(editor, data_file):
    assert editor.save_file()
    assert data_file.read_bytes() == b"ABC"


def test_save_keeps_file_length(make_terminal, tmp_path):
    path = tmp_path / "big.bin"
    data = bytes(range(256)) * 4
    path.write_bytes(data)
    ed = Editor(terminal=make_terminal())
    ed.load_file(str(path))
    ed.grid.cursor.visible = True
    ed.grid.write_nibble(0xF)
    assert ed.save_file()
    saved = path.read_bytes()
    assert len(saved) == len(data)
    assert saved[0] == 0xF0
    assert saved[1:] == data[1:]


def test_ctrl_keys_move_and_save(editor, data_file):
    editor._handle_key_event(ctrl('l'))
    editor._handle_key_event(ctrl('l'))
    assert editor.grid.cursor.side == Side.LOW
    editor._handle_key_event(regular('F'))
    editor._handle_key_event(ctrl('s'))
    assert data_file.read_bytes() == b"\x4f\x42\x43"


def test_hex_digits_before_reveal_do_nothing(editor):
    editor._handle_key_event(regular('7'))
    assert editor.grid.to_bytes() == b"ABC"
    assert not editor.grid.dirty


def test_unbound_keys_are_ignored(editor):
    editor._handle_key_event(regular('z'))
    editor._handle_key_event(special('home'))
    assert editor.grid.to_bytes() == b"ABC"
    assert not editor.grid.cursor.visible


def test_save_failure_is_reported_not_raised(editor, data_file):
    with patch("builtins.open", side_effect=PermissionError("denied")):
        assert not editor.save_file()
    assert "Permission denied" in editor.status_message

    os.remove(data_file)
    assert not editor.save_file()
    assert editor.status_message.startswith("Error: Cannot save to")
    # save never creates the file
    assert not data_file.exists()


def test_save_failure_keeps_dirty(editor, data_file):
    editor.grid.cursor.visible = True
    editor.grid.write_nibble(0)
    os.remove(data_file)
    editor.handle_save()
    assert editor.grid.dirty
    assert editor.status_message.startswith("Error")


def test_no_space_message(editor):
    error = OSError(28, "No space left on device")
    with patch("builtins.open", side_effect=error):
        assert not editor.save_file()
    assert editor.status_message == "Error: No space left on device"


def test_status_message_cleared_by_next_key(editor):
    editor.status_message = "Saved"
    editor._handle_key_event(special('left'))
    assert editor.status_message is None


def test_quit_when_clean(editor):
    editor.running = True
    editor._handle_key_event(regular('q'))
    assert not editor.running


def test_quit_when_dirty_asks_first(editor, data_file):
    editor.running = True
    editor.grid.cursor.visible = True
    editor.grid.write_nibble(0)
    editor._handle_key_event(regular('q'))
    assert editor.running
    assert editor.prompt_mode == 'quit_confirm'

    editor._handle_key_event(regular('x'))
    assert editor.running
    assert editor.prompt_mode is None

    editor._handle_key_event(ctrl('q'))
    editor._handle_key_event(regular('y'))
    assert not editor.running
    assert data_file.read_bytes() == b"\x01\x42\x43"


def test_quit_confirm_no_discards(editor, data_file):
    editor.running = True
    editor.grid.cursor.visible = True
    editor.grid.write_nibble(0)
    editor._handle_key_event(regular('q'))
    editor._handle_key_event(regular('n'))
    assert not editor.running
    assert data_file.read_bytes() == b"ABC"


def test_ctrl_c_quits_immediately_even_when_dirty(editor):
    editor.running = True
    editor.grid.cursor.visible = True
    editor.grid.write_nibble(0)
    editor._handle_key_event(ctrl('c'))
    assert not editor.running


def test_draw_layout(editor):
    frame = editor.frames.back
    editor.draw(frame)
    assert frame.row_text(0).startswith(" hexmark  data.bin")
    assert frame.row_text(1).startswith("00000000:  41 42 43")
    assert "offset --" in frame.row_text(23)
    assert frame.cell_at(79, 0).bg == "cyan"


def test_status_shows_offset_value_and_modified(editor):
    editor._handle_key_event(special('right'))
    assert "offset 0x00000000  value 0x41" in editor.status_text(80)
    editor._handle_key_event(regular('0'))
    text = editor.status_text(80)
    assert "value 0x01" in text
    assert "[modified]" in text
    assert len(text) <= 80


def test_first_refresh_repaints_everything_then_patches(editor):
    terminal = editor.terminal
    editor.refresh()
    assert terminal.calls[0] == ('clear',)
    assert terminal.count('write') == 80 * 24

    terminal.calls.clear()
    editor.refresh()
    assert terminal.count('write') == 0

    editor._handle_key_event(special('right'))
    editor.refresh()
    assert ('clear',) not in terminal.calls
    # the highlighted nibble plus the changed status text
    assert 0 < terminal.count('write') < 80
    assert terminal.screen_cells[(11, 1)] == ('4', 'black', 'white')


def test_screen_matches_last_frame_after_several_ticks(make_terminal, data_file):
    terminal = make_terminal(keys=['<RIGHT>', 'l', 'l', 'l', '5', '<DOWN>', 'h'])
    ed = Editor(terminal=terminal)
    ed.load_file(str(data_file))
    ed.frames = DoubleBuffer(80, 24)
    for _ in range(9):
        ed.tick()
    for y in range(24):
        assert terminal.row_text(y) == ed.frames.front.row_text(y)
    assert ed.grid.to_bytes() == b"\x41\x45\x43"


def test_dimension_mismatch_is_logged_once_and_repaints(editor, caplog):
    editor.refresh()
    editor.frames.front = FrameBuffer(10, 10)
    with caplog.at_level("ERROR", logger="hexmark"):
        editor.refresh()
        editor.frames.front = FrameBuffer(10, 10)
        editor.refresh()
    assert sum("frame_dimensions" in r.getMessage() for r in caplog.records) == 1


def test_scrolls_to_keep_cursor_visible(make_terminal, tmp_path):
    path = tmp_path / "long.bin"
    path.write_bytes(bytes(16 * 50))
    ed = Editor(terminal=make_terminal(height=7))
    ed.load_file(str(path))
    ed.frames = DoubleBuffer(80, 7)
    assert ed.grid_rows == 5
    ed._handle_key_event(special('down'))  # reveal
    for _ in range(7):
        ed._handle_key_event(special('down'))
    assert ed.grid.cursor.line == 7
    assert ed.top_line == 3
    frame = ed.frames.back
    ed.draw(frame)
    assert frame.row_text(1).startswith("00000030:")
    assert frame.row_text(5).startswith("00000070:")

    for _ in range(6):
        ed._handle_key_event(special('up'))
    assert ed.top_line == 1


def test_run_restores_terminal_and_quits(make_terminal, data_file):
    terminal = make_terminal(keys=['<RIGHT>', '<Ctrl-c>'])
    config = EditorConfig(frame_interval=0.001)
    ed = Editor(terminal=terminal, config=config)
    ed.load_file(str(data_file))
    with patch.object(time, 'sleep'):
        ed.run()
    assert terminal.entered and terminal.restored
    assert not ed.running


def test_run_restores_terminal_on_error(make_terminal, data_file):
    terminal = make_terminal()
    ed = Editor(terminal=terminal)
    ed.load_file(str(data_file))
    with patch.object(Editor, 'tick', side_effect=RuntimeError("boom")):
        with pytest.raises(RuntimeError):
            ed.run()
    assert terminal.restored


def test_run_keyboard_interrupt_exits_cleanly(make_terminal, data_file):
    terminal = make_terminal()
    ed = Editor(terminal=terminal)
    ed.load_file(str(data_file))
    with patch.object(Editor, 'tick', side_effect=KeyboardInterrupt):
        ed.run()
    assert terminal.restored
    assert not ed.running


def test_run_zero_size_terminal_is_fatal(make_terminal, data_file):
    from hexmark.terminal import TerminalError
    terminal = make_terminal(width=0, height=0)
    ed = Editor(terminal=terminal)
    with pytest.raises(TerminalError):
        ed.run()
    assert terminal.restored
