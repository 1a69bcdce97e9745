"""Rendering glue between a text viewport and the terminal."""

import logging
from typing import Optional

from .constants import ReaderConstants
from .model import TextViewport

logger = logging.getLogger(__name__)


class ReaderView:
    """Pulls frames from a viewport and draws them with a status line.

    A change in viewport size invalidates everything a paginator derived
    from the old size, so the next frame is rebuilt with a jump to the
    current position.
    """

    def __init__(self, viewport: TextViewport, title: str = ""):
        self.viewport = viewport
        self.title = title
        self.lines: list[str] = []
        self._last_size: Optional[tuple[int, int]] = None

    def frame(self, width: int, height: int) -> list[str]:
        """Current display lines for a ``width`` x ``height`` viewport."""
        if (width, height) != self._last_size:
            self.viewport.request_jump()
            self._last_size = (width, height)
        self.lines = self.viewport.render(width, height)
        return self.lines

    def status_text(self) -> str:
        error = getattr(self.viewport, "last_error", None)
        if error is not None:
            return " " + ReaderConstants.READ_ERROR_MESSAGE.format(self.title, error)
        try:
            percent = self.viewport.get_snapshot().percent
        except OSError as e:
            logger.warning("Could not compute progress for %s: %s", self.title, e)
            return " " + ReaderConstants.READ_ERROR_MESSAGE.format(self.title, e)
        return f" {self.title}  {percent:.0f}%"

    def draw(self, terminal, status_message: Optional[str] = None) -> None:
        """Render the current frame to ``terminal``.

        Args:
            terminal: TerminalInterface to draw on
            status_message: Shown instead of the title and progress
        """
        lines = self.frame(terminal.width, terminal.height)
        status = f" {status_message}" if status_message else self.status_text()
        terminal.update_frame(lines, view_width=terminal.width, status_text=status)
