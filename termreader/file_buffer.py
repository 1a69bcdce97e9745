"""Bounded, file-backed sliding window of raw lines.

Only a few hundred lines of a local document are held in memory at once.
The window follows the reader: ``surround_line`` recentres it around the
line being displayed, rereading the file from scratch after a large jump and
trimming/extending the edges after a small one.
"""

from __future__ import annotations

import logging
from collections import deque
from itertools import islice
from typing import Optional

from .constants import ReaderConstants

logger = logging.getLogger(__name__)


class WindowedFileBuffer:
    """A window ``[start_line, end_line]`` (inclusive) of a text file.

    An empty window is represented by ``end_line < start_line``.
    """

    PREVIOUS_LINES = ReaderConstants.PREVIOUS_LINES
    NEXT_LINES = ReaderConstants.NEXT_LINES
    MINIMUM_JUMP_LINES = ReaderConstants.MINIMUM_JUMP_LINES
    SHIFT_AMOUNT = ReaderConstants.SHIFT_AMOUNT

    def __init__(self, file_path: str, lines: Optional[deque[str]] = None,
                 start_line: int = 1, end_line: int = 0):
        self.file_path = file_path
        self.lines: deque[str] = lines if lines is not None else deque()
        self.start_line = start_line
        self.end_line = end_line

    @classmethod
    def empty(cls, file_path: str) -> WindowedFileBuffer:
        return cls(file_path)

    @classmethod
    def new(cls, file_path: str, start_line: int, end_line: int) -> WindowedFileBuffer:
        """Read lines ``start_line..end_line`` of a file.

        Returns an empty window if ``start_line`` is past the end of the file
        and clamps ``end_line`` when the file is shorter than requested.

        Raises:
            ValueError: if ``end_line`` is before ``start_line``.
            OSError: if the file cannot be opened or read.
        """
        if end_line < start_line:
            raise ValueError(
                f"The given end line ({end_line}) is before the starting line ({start_line})."
            )
        lines = _read_lines(file_path, start_line, end_line - start_line + 1)
        if not lines:
            return cls.empty(file_path)
        return cls(file_path, deque(lines), start_line, start_line + len(lines) - 1)

    def __len__(self) -> int:
        return len(self.lines)

    def is_empty(self) -> bool:
        return self.end_line < self.start_line

    def get_buffer_line(self, file_line: int) -> Optional[int]:
        """Translate a file line number into an index into ``lines``.

        Returns None when the line is not currently in the window.
        """
        if file_line < self.start_line or file_line > self.end_line:
            return None
        return file_line - self.start_line

    def get_line(self, file_line: int) -> Optional[str]:
        idx = self.get_buffer_line(file_line)
        if idx is None:
            return None
        return self.lines[idx]

    def surround_line(self, line: int) -> None:
        """Recentre the window to ``[line - 50, line + 150]``.

        Raises:
            OSError: if the file cannot be read.
        """
        start = max(0, line - self.PREVIOUS_LINES)
        end = line + self.NEXT_LINES

        if self.is_empty() or abs(start - self.start_line) > self.MINIMUM_JUMP_LINES:
            self._reload(start, end)
            return

        if self.start_line < start:
            self._remove_lines_front(start - self.start_line)
        else:
            self._add_lines_front(self.start_line - start)
        if self.end_line < end:
            self._add_lines_back(end - self.end_line)
        else:
            self._remove_lines_back(self.end_line - end)

    def shift_down(self) -> bool:
        """Move the window 100 lines towards the end of the file.

        Returns True if any line was added at the end.
        """
        self._remove_lines_front(self.SHIFT_AMOUNT)
        return self._add_lines_back(self.SHIFT_AMOUNT)

    def shift_up(self) -> bool:
        """Move the window 100 lines towards the start of the file.

        Returns True if any line was added at the start. A window that
        already starts at the first line is left alone.
        """
        if not self.is_empty() and self.start_line == 0:
            return False
        self._remove_lines_back(self.SHIFT_AMOUNT)
        return self._add_lines_front(self.SHIFT_AMOUNT)

    def _reload(self, start: int, end: int) -> None:
        logger.debug("Reloading %s window at lines %d-%d", self.file_path, start, end)
        fresh = WindowedFileBuffer.new(self.file_path, start, end)
        self.lines = fresh.lines
        self.start_line = fresh.start_line
        self.end_line = fresh.end_line

    def _remove_lines_front(self, count: int) -> None:
        if self.is_empty():
            return
        if len(self.lines) <= count:
            self.start_line = self.end_line + 1
            self.lines = deque()
            return
        for _ in range(count):
            self.lines.popleft()
        self.start_line += count

    def _remove_lines_back(self, count: int) -> None:
        if self.is_empty():
            return
        if len(self.lines) <= count:
            self.end_line = self.start_line - 1
            self.lines = deque()
            return
        for _ in range(count):
            self.lines.pop()
        self.end_line -= count

    def _add_lines_back(self, count: int) -> bool:
        if count <= 0:
            return False
        first = self.end_line + 1
        new_lines = _read_lines(self.file_path, first, count)
        if not new_lines:
            return False
        if self.is_empty():
            self.start_line = first
        self.lines.extend(new_lines)
        self.end_line = first + len(new_lines) - 1
        return True

    def _add_lines_front(self, count: int) -> bool:
        count = min(count, self.start_line)
        if count <= 0:
            return False
        first = self.start_line - count
        new_lines = _read_lines(self.file_path, first, count)
        if not new_lines:
            return False
        if self.is_empty():
            self.end_line = first + len(new_lines) - 1
        self.lines.extendleft(reversed(new_lines))
        self.start_line = first
        return True


def _read_lines(file_path: str, first: int, count: int) -> list[str]:
    """Read up to ``count`` lines starting at line ``first`` (0-based)."""
    with open(file_path, "r", encoding=ReaderConstants.FILE_ENCODING,
              errors=ReaderConstants.FILE_ERRORS) as f:
        return [line.rstrip("\n") for line in islice(f, first, first + count)]


def count_lines(file_path: str) -> int:
    """Total number of lines in a file.

    Raises:
        OSError: if the file cannot be read.
    """
    with open(file_path, "r", encoding=ReaderConstants.FILE_ENCODING,
              errors=ReaderConstants.FILE_ERRORS) as f:
        return sum(1 for _ in f)
