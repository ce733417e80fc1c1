#!/usr/bin/env python3
"""hexmark - A terminal hex viewer and editor.

Usage:
    python main.py <filename>

Controls:
    Arrow keys, h/j/k/l, Ctrl-H/J/K/L: Move the cursor (first press shows it)
    0-9, a-f: Overwrite the nibble under the cursor
    w, Ctrl-S: Save (overwrites the file in place)
    q, Ctrl-Q: Quit (asks to save if modified)
    Ctrl-C: Quit immediately
"""

import sys
from hexmark.__main__ import main


if __name__ == "__main__":
    sys.exit(main())
