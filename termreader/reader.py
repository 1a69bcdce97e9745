"""Main reader controller for the terminal text reader."""

import logging
import os
import sys
import select
import signal
import termios
from typing import Optional

from .commands import CommandRegistry, QuitCommand
from .constants import ReaderConstants
from .keyboard import KeyboardHandler, KeyEvent
from .model import Position, TextViewport
from .paginator import Paginator
from .progress import ProgressKind
from .progress_store import ProgressStore, get_store
from .terminal import TerminalInterface
from .view import ReaderView
from .word_paginator import WordPaginator, WordTooWideError

logger = logging.getLogger(__name__)


def open_viewport(document_path: str, words: bool, store: ProgressStore) -> TextViewport:
    """Open a document at its remembered position.

    Local files are paginated through a sliding window; with ``words`` the
    whole text is loaded and paginated by word.

    Raises:
        OSError: if the document cannot be read.
    """
    snapshot = store.load(document_path)
    if words:
        with open(document_path, 'r', encoding=ReaderConstants.FILE_ENCODING,
                  errors=ReaderConstants.FILE_ERRORS) as f:
            text = f.read()
        start = 0
        if snapshot is not None and snapshot.progress.kind == ProgressKind.WORD:
            start = snapshot.progress.first
        return WordPaginator(text, start)

    start = Position()
    if snapshot is not None:
        char = snapshot.progress.second if snapshot.progress.kind == ProgressKind.LOCATION else 0
        start = Position(snapshot.line, char)
    return Paginator.from_file(document_path, start)


class Reader:
    """Terminal reader application controller."""

    def __init__(self, viewport: TextViewport, document_path: Optional[str] = None,
                 store: Optional[ProgressStore] = None,
                 terminal: Optional[TerminalInterface] = None):
        self.terminal = terminal or TerminalInterface()
        self.keyboard = KeyboardHandler(self.terminal)
        self.viewport = viewport
        self.document_path = document_path
        title = os.path.basename(document_path) if document_path else ""
        self.view = ReaderView(viewport, title)
        self.store = store or get_store()
        self.command_registry = CommandRegistry()
        self.running = False
        self.error_mode = False  # True while the terminal can't show a frame
        self.status_message: Optional[str] = None
        # Create pipe for resize signaling
        self._resize_pipe_r, self._resize_pipe_w = os.pipe()

    @classmethod
    def open(cls, document_path: str, words: bool = False,
             store: Optional[ProgressStore] = None) -> 'Reader':
        """Create a reader for a local document.

        Raises:
            OSError: if the document cannot be read.
        """
        store = store or get_store()
        return cls(open_viewport(document_path, words, store), document_path, store)

    def page_size(self) -> int:
        return max(1, self.terminal.height)

    def _handle_resize(self, signum, frame):
        """Handle terminal resize signal."""
        del signum, frame  # Unused
        os.write(self._resize_pipe_w, ReaderConstants.RESIZE_PIPE_MARKER)

    def run(self):
        """Run the main reader loop."""
        self.terminal.setup()
        self.running = True
        original_winch_handler = signal.signal(signal.SIGWINCH, self._handle_resize)

        try:
            with self.terminal.term.cbreak():
                # Disable flow control so Ctrl-Q reaches the reader
                old_settings = None
                try:
                    old_settings = termios.tcgetattr(sys.stdin)
                    new_settings = list(old_settings)
                    new_settings[0] &= ~(termios.IXON | termios.IXOFF)
                    termios.tcsetattr(sys.stdin, termios.TCSANOW, new_settings)
                except (termios.error, AttributeError, OSError):
                    old_settings = None

                need_draw = True
                while self.running:
                    if need_draw:
                        self._draw()
                        need_draw = False

                    # Wait for input on stdin or resize pipe
                    ready, _, _ = select.select([0, self._resize_pipe_r], [], [])

                    if self._resize_pipe_r in ready:
                        os.read(self._resize_pipe_r, 1024)
                        self.terminal.invalidate_frame()
                        need_draw = True
                    elif 0 in ready:
                        key_event = self.keyboard.get_key_event(timeout=0)
                        if key_event:
                            self._handle_key_event(key_event)
                            need_draw = True

                if old_settings:
                    try:
                        termios.tcsetattr(sys.stdin, termios.TCSANOW, old_settings)
                    except (termios.error, OSError):
                        pass

        except KeyboardInterrupt:
            pass
        finally:
            signal.signal(signal.SIGWINCH, original_winch_handler)
            os.close(self._resize_pipe_r)
            os.close(self._resize_pipe_w)
            self.terminal.cleanup()
            self.save_progress()

    def _draw(self):
        """Draw the current frame, or an error box if there's no room for one."""
        width, height = self.terminal.width, self.terminal.height
        if width < ReaderConstants.MIN_VIEW_WIDTH or height < ReaderConstants.MIN_VIEW_HEIGHT:
            self.error_mode = True
            self.terminal.draw_error_message(
                ReaderConstants.TERMINAL_TOO_SMALL_MESSAGE.format(
                    ReaderConstants.MIN_VIEW_WIDTH, ReaderConstants.MIN_VIEW_HEIGHT + 1),
                ReaderConstants.CURRENT_SIZE_MESSAGE.format(width, height + 1),
            )
            return
        try:
            self.view.draw(self.terminal, self.status_message)
        except WordTooWideError as e:
            self.error_mode = True
            self.terminal.draw_error_message(str(e), ReaderConstants.CURRENT_SIZE_MESSAGE.format(width, height + 1))
            return
        self.error_mode = False

    def _handle_key_event(self, key_event: KeyEvent):
        """Handle a keyboard event.

        Args:
            key_event: KeyEvent object with parsed key information
        """
        if self.status_message:
            self.status_message = None

        command = self.command_registry.get_command(key_event.key_type, key_event.value)
        # While in error mode only quitting does anything
        if self.error_mode and not isinstance(command, QuitCommand):
            return
        self.command_registry.execute(self, key_event)

    def save_progress(self) -> bool:
        """Persist the current position for the next session."""
        if self.document_path is None:
            return False
        try:
            snapshot = self.viewport.get_snapshot()
        except OSError as e:
            logger.warning(f"Could not record progress for {self.document_path}: {e}")
            return False
        return self.store.save(self.document_path, snapshot)
