"""Keyboard input handling using curtsies-style tokens."""

from typing import Optional
from dataclasses import dataclass
from enum import Enum


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"
    ALT = "alt"
    CTRL = "ctrl"
    SPECIAL = "special"


@dataclass
class KeyEvent:
    """Represents a decoded key press."""
    key_type: KeyType
    value: str  # The base key (e.g., 'a', 'left', 'escape')
    raw: str  # The token as delivered by curtsies
    is_alt: bool = False
    is_ctrl: bool = False


class KeyboardHandler:
    """Turns terminal key tokens into KeyEvents."""

    def __init__(self, terminal_interface):
        self.terminal = terminal_interface

    def get_key_event(self, timeout: Optional[float] = None) -> Optional[KeyEvent]:
        key = self.terminal.get_key(timeout)
        if not key:
            return None
        return self.parse_key(key)

    def parse_key(self, key) -> KeyEvent:
        """Parse a curtsies key name ('<LEFT>', '<Ctrl-c>', 'a', '\\x03')."""
        key_str = str(key)

        if len(key_str) > 2 and key_str.startswith('<') and key_str.endswith('>'):
            parts = key_str[1:-1].lower().replace('+', '-').split('-')
            base = parts[-1]
            mods = set(parts[:-1])
            if base in ('pageup', 'page_up'):
                base = 'page_up'
            elif base in ('pagedown', 'page_down'):
                base = 'page_down'
            elif base == 'esc':
                base = 'escape'
            # '<Ctrl-->' and similar leave an empty base after the split
            if not base:
                base = '-'

            if 'ctrl' in mods and len(base) == 1:
                return KeyEvent(KeyType.CTRL, base, key_str, is_ctrl=True)
            if mods & {'alt', 'meta', 'esc'}:
                return KeyEvent(KeyType.ALT, base, key_str, is_alt=True)
            if base in ('space', 'spacebar'):
                return KeyEvent(KeyType.REGULAR, ' ', key_str)
            return KeyEvent(KeyType.SPECIAL, base, key_str)

        if len(key_str) == 1:
            code = ord(key_str)
            if code == 27:
                return KeyEvent(KeyType.SPECIAL, 'escape', key_str)
            if code in (10, 13):
                return KeyEvent(KeyType.SPECIAL, 'enter', key_str)
            if code == 127:
                return KeyEvent(KeyType.SPECIAL, 'backspace', key_str)
            if 1 <= code <= 26:
                return KeyEvent(KeyType.CTRL, chr(ord('a') + code - 1), key_str, is_ctrl=True)

        return KeyEvent(KeyType.REGULAR, key_str, key_str)
