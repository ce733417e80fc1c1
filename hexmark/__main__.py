"""hexmark CLI entry point.

Allows running via `python -m hexmark` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from .version import get_version_string

logger = logging.getLogger(__name__)


def _escape_bytes(s: str) -> str:
    """Return a printable representation of raw key string."""
    return s.encode('unicode_escape').decode('ascii')


def run_keyboard_test() -> None:
    """Echo decoded key events until ESC is pressed."""
    from .terminal import TerminalInterface
    from .keyboard import KeyboardHandler, KeyType

    print("Keyboard test mode - press keys to see parsed events.")
    print("Quit with ESC.")

    term = TerminalInterface()
    kb = KeyboardHandler(term)
    with term.screen():
        row = 0
        while True:
            ev = kb.get_key_event(timeout=None)
            if not ev:
                continue
            if ev.key_type == KeyType.SPECIAL and ev.value == 'escape':
                break
            parts = [f"type={ev.key_type.value}", f"value={ev.value}", f"raw='{_escape_bytes(ev.raw)}'"]
            if ev.is_ctrl:
                parts.append("ctrl")
            if ev.is_alt:
                parts.append("alt")
            term.move(0, row % max(1, term.height))
            term.write(term.term.clear_eol + ' '.join(parts))
            term.flush()
            row += 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hexmark", description="Terminal hex viewer and editor.")
    parser.add_argument("file", nargs="?", help="file to view and edit")
    parser.add_argument("-V", "--version", action="store_true", help="print version and exit")
    parser.add_argument("--keytest", "--keyboard-test", action="store_true",
                        help="show decoded key events (quit with ESC)")
    parser.add_argument("--config", help="path to a JSON config file")
    parser.add_argument("--log-file", help="write the debug log here")
    parser.add_argument("--log-level", help="log level (default: $HEXMARK_LOG_LEVEL or WARNING)")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.version:
        print(get_version_string())
        return 0
    if args.keytest:
        run_keyboard_test()
        return 0
    if not args.file:
        parser.print_usage(sys.stderr)
        print("hexmark: error: a file is required", file=sys.stderr)
        return 2

    # Lazy imports keep --version free of UI dependencies
    from .config import ConfigLoader
    from .editor import Editor
    from .logsetup import configure_logging
    from .terminal import TerminalError

    configure_logging(args.log_level, args.log_file)
    config = ConfigLoader(args.config).load()
    editor = Editor(config=config)
    try:
        editor.load_file(args.file)
    except OSError as e:
        print(f"Could not open file: {args.file}: {e.strerror or e}", file=sys.stderr)
        return 1
    try:
        editor.run()
    except TerminalError as e:
        logger.error("%s", e)
        print(f"hexmark: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
