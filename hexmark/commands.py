"""Command pattern implementation for editor actions."""

import string
from abc import ABC, abstractmethod
from typing import Dict, Mapping, Optional, Tuple, TYPE_CHECKING

from .constants import EditorConstants
from .keyboard import KeyType
from .model import Direction

if TYPE_CHECKING:
    from .editor import Editor
    from .keyboard import KeyEvent


class EditorCommand(ABC):
    """Base class for editor commands."""

    @abstractmethod
    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """Execute the command.

        Args:
            editor: Editor instance
            key_event: The key event that triggered this command

        Returns:
            True if the command modified the document
        """


class MoveCursorCommand(EditorCommand):
    def __init__(self, direction: Direction):
        self.direction = direction

    def execute(self, editor, key_event):
        editor.grid.move_cursor(self.direction)
        editor.scroll_to_cursor()
        return False


class WriteNibbleCommand(EditorCommand):
    def execute(self, editor, key_event):
        return editor.grid.write_nibble(key_event.value)


class SaveCommand(EditorCommand):
    def execute(self, editor, key_event):
        editor.handle_save()
        return False


class QuitCommand(EditorCommand):
    def execute(self, editor, key_event):
        if editor.grid.dirty:
            editor.prompt_mode = 'quit_confirm'
        else:
            editor.running = False
        return False


class ForceQuitCommand(EditorCommand):
    def execute(self, editor, key_event):
        editor.running = False
        return False


class CommandRegistry:
    """Registry for mapping key combinations to commands."""

    def __init__(self, keys: Optional[Mapping[str, str]] = None):
        self._commands: Dict[Tuple[KeyType, str], EditorCommand] = {}
        self._write_nibble = WriteNibbleCommand()
        self.keys = dict(keys or EditorConstants.DEFAULT_KEYS)
        self._setup_default_commands()

    def _setup_default_commands(self):
        moves = {
            'left': MoveCursorCommand(Direction.LEFT),
            'right': MoveCursorCommand(Direction.RIGHT),
            'up': MoveCursorCommand(Direction.UP),
            'down': MoveCursorCommand(Direction.DOWN),
        }
        for name, command in moves.items():
            self.register((KeyType.SPECIAL, name), command)

        # Ctrl + vi keys
        self.register((KeyType.CTRL, 'h'), moves['left'])
        self.register((KeyType.CTRL, 'l'), moves['right'])
        self.register((KeyType.CTRL, 'k'), moves['up'])
        self.register((KeyType.CTRL, 'j'), moves['down'])

        # System commands
        self.register((KeyType.CTRL, 's'), SaveCommand())
        self.register((KeyType.CTRL, 'q'), QuitCommand())
        self.register((KeyType.CTRL, 'c'), ForceQuitCommand())

        # Plain letter bindings
        letters = dict(moves, save=SaveCommand(), quit=QuitCommand())
        for action, key in self.keys.items():
            self.register((KeyType.REGULAR, key), letters[action])

    def register(self, key: Tuple[KeyType, str], command: EditorCommand):
        """Register a command for a key combination."""
        self._commands[key] = command

    def get_command(self, key_type: KeyType, value: str) -> Optional[EditorCommand]:
        command = self._commands.get((key_type, value))
        if command is None and key_type == KeyType.REGULAR and len(value) == 1 \
                and value in string.hexdigits:
            return self._write_nibble
        return command

    def execute(self, editor: 'Editor', key_event: 'KeyEvent') -> bool:
        """Execute the command for the given key event.

        Returns:
            True if the document was modified
        """
        command = self.get_command(key_event.key_type, key_event.value)
        if command:
            return command.execute(editor, key_event)
        return False
