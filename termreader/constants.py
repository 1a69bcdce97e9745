"""Constants and configuration for the termreader pagination engine and UI."""

class ReaderConstants:
    """Central configuration constants for the reader."""

    # File window: lines kept around the line being displayed
    PREVIOUS_LINES = 50  # Lines kept above the surrounded line
    NEXT_LINES = 150  # Lines kept below the surrounded line
    # Recentre distance above which the window is reread from scratch.
    # SHIFT_AMOUNT must stay below NEXT_LINES so a surrounded line is never
    # shifted out of the window.
    MINIMUM_JUMP_LINES = 30
    SHIFT_AMOUNT = 100  # Lines dropped/loaded by shift_down/shift_up

    # Wrapping
    HYPHEN = "-"  # Appended to a word split at the viewport edge
    NEWLINE_TOKEN = "\n"  # Line-break sentinel in the word stream

    # Viewport requirements
    MIN_VIEW_WIDTH = 2  # A hard break needs one character plus the hyphen
    MIN_VIEW_HEIGHT = 1

    # File reading
    FILE_ENCODING = "utf-8"
    FILE_ERRORS = "replace"  # Undecodable bytes become U+FFFD

    # Resize handling
    RESIZE_PIPE_MARKER = b'R'  # Byte written to pipe to signal resize

    # Status messages
    TERMINAL_TOO_SMALL_MESSAGE = "Terminal too small! Need at least {}x{}."
    CURRENT_SIZE_MESSAGE = "Current size: {}x{}."
    READ_ERROR_MESSAGE = "Could not read {}: {}"
    HELP_TEXT = "j/k scroll  PgUp/PgDn page  g top  q quit"
