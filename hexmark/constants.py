"""Constants and configuration for the hexmark editor."""

class EditorConstants:
    """Central configuration constants for the editor."""

    # Document layout
    BYTES_PER_LINE = 16  # Bytes shown on each grid row
    ADDRESS_DIGITS = 8  # Hex digits in the offset column
    HEX_COLUMN = 11  # First hex digit column, relative to the grid origin

    # Colors (blessed color names)
    NORMAL_FG = "white"
    NORMAL_BG = "black"
    BAR_FG = "black"
    BAR_BG = "cyan"

    # Tick timing
    FRAME_INTERVAL = 1 / 60  # Sleep between ticks (seconds)
    MAX_FRAME_INTERVAL = 1.0

    # Default letter bindings; hex digits are reserved for editing
    DEFAULT_KEYS = {
        "left": "h",
        "right": "l",
        "up": "k",
        "down": "j",
        "save": "w",
        "quit": "q",
    }

    # Application identity for platformdirs
    APP_NAME = "hexmark"
    CONFIG_FILENAME = "config.json"
    LOG_FILENAME = "hexmark.log"

    # Status messages
    QUIT_CONFIRM_MESSAGE = "Unsaved changes. Save before quitting? (y, n)"
    SAVED_MESSAGE = "Saved {} bytes to {}"
    HINT_MESSAGE = "{save}: save  {quit}: quit  Ctrl-C: exit"
