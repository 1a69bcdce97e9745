"""Terminal interface using Blessed for display and Curtsies for input."""

import blessed
from typing import Optional
import sys
import select

from .constants import ReaderConstants


class TerminalInterface:
    """Handles terminal I/O using Blessed."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.is_fullscreen = False
        self._curtsies_input: Optional[object] = None
        self._curtsies_active: bool = False
        # Virtual screen state for minimal updates
        self._last_lines: list[str] | None = None
        self._last_status: str | None = None
        self._last_view_width: int | None = None

    def setup(self):
        """Enter fullscreen mode and prepare terminal."""
        print(self.term.enter_fullscreen)
        print(self.term.hide_cursor)
        print(self.term.clear)
        self.is_fullscreen = True
        if self._curtsies_input is None:
            try:
                from curtsies import Input  # type: ignore
                self._curtsies_input = Input(keynames='curtsies')  # type: ignore
                self._curtsies_input.__enter__()
                self._curtsies_active = True
            except Exception:
                # Without raw input the reader still draws; get_key returns None
                self._curtsies_input = None
                self._curtsies_active = False

    def cleanup(self):
        """Exit fullscreen mode and restore terminal."""
        if self.is_fullscreen:
            print(self.term.exit_fullscreen)
            print(self.term.normal_cursor)
            self.is_fullscreen = False
        if self._curtsies_input is not None:
            try:
                if self._curtsies_active:
                    self._curtsies_input.__exit__(None, None, None)  # type: ignore
            except Exception:
                # Teardown must not mask the reader's own exit path
                pass
            finally:
                self._curtsies_input = None
                self._curtsies_active = False

    def invalidate_frame(self) -> None:
        """Invalidate cached frame so next update does a full clear."""
        self._last_lines = None
        self._last_status = None
        self._last_view_width = None

    def _compose_display_line(self, line: str, view_width: int) -> str:
        return line[:view_width].ljust(view_width)

    def update_frame(self, lines: list[str], view_width: int, status_text: str = "") -> None:
        """Diff against last frame and write only changes.

        Falls back to a full clear on first paint or when geometry changes.
        Rows below the last display line are blanked.
        """
        rows = self.height
        padded = list(lines[:rows]) + [""] * max(0, rows - len(lines))

        need_full_clear = (
            self._last_lines is None
            or self._last_view_width != view_width
            or len(self._last_lines) != len(padded)
        )
        if need_full_clear:
            print(self.term.home + self.term.clear, end='')
            self._last_lines = ["" for _ in range(len(padded))]
            self._last_status = None
            self._last_view_width = view_width

        for y, line in enumerate(padded):
            new_disp = self._compose_display_line(line, view_width)
            if new_disp != self._last_lines[y]:
                print(self.term.move(y, 0) + new_disp, end='')
                self._last_lines[y] = new_disp

        # Status line at bottom, help right-justified when there's room
        help_text = ReaderConstants.HELP_TEXT
        width = self.term.width
        if len(status_text) + len(help_text) + 2 <= width:
            status_line = status_text.ljust(width - len(help_text) - 1) + help_text + " "
        else:
            status_line = status_text[:width].ljust(width)
        if status_line != (self._last_status or ""):
            print(self.term.move(self.term.height - 1, 0) + self.term.reverse + status_line
                  + self.term.normal, end='')
            self._last_status = status_line
        print('', end='', flush=True)

    def draw_error_message(self, message1: str, message2: str = ""):
        """Draw an error message in the center of the screen.

        Args:
            message1: Primary error message
            message2: Secondary information
        """
        print(self.term.home + self.term.clear, end='')
        self.invalidate_frame()

        center_y = self.term.height // 2
        box_width = max(len(message1), len(message2)) + 4
        left_margin = max(0, (self.term.width - box_width) // 2)

        print(self.term.move(center_y - 2, left_margin) + "╔" + "═" * (box_width - 2) + "╗", end='')
        print(self.term.move(center_y - 1, left_margin) + "║ " + message1.center(box_width - 4) + " ║", end='')
        if message2:
            print(self.term.move(center_y, left_margin) + "║ " + message2.center(box_width - 4) + " ║", end='')
            print(self.term.move(center_y + 1, left_margin) + "╚" + "═" * (box_width - 2) + "╝", end='')
        else:
            print(self.term.move(center_y, left_margin) + "╚" + "═" * (box_width - 2) + "╝", end='')

        help_text = "q to quit | Resize terminal to continue"
        help_pos = max(0, (self.term.width - len(help_text)) // 2)
        print(self.term.move(self.term.height - 1, help_pos), end='')
        print(help_text, end='', flush=True)

    def get_key(self, timeout=None):
        """Get a single keypress from the user.

        Args:
            timeout: Timeout in seconds (None for blocking, 0 for non-blocking)

        Returns:
            The curtsies key name as a string, or None if there was no key.
        """
        if self._curtsies_input is not None:
            if timeout is None:
                evt = next(self._curtsies_input)  # blocks
                return str(evt)
            t = 0.0 if timeout == 0 else float(timeout)
            r, _, _ = select.select([sys.stdin], [], [], t)
            if not r:
                return None
            evt = next(self._curtsies_input)
            return str(evt)
        return None

    @property
    def width(self):
        """Terminal width in columns."""
        return self.term.width

    @property
    def height(self):
        """Terminal height in rows (excluding status line)."""
        return self.term.height - 1  # Reserve one line for status
