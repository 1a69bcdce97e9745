"""Character-based pagination of line-oriented text.

The paginator turns source lines into display lines no wider than the
viewport. Forward pagination records where it broke each source line in a
``LineBreakIndex``; backward pagination looks those breaks up so scrolling
back reproduces exactly the lines that were shown on the way down.
"""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from collections import deque
from typing import Optional

from .constants import ReaderConstants
from .file_buffer import WindowedFileBuffer, count_lines
from .linebreaks import LineBreakIndex
from .model import (
    LINE_END,
    NON_EXISTENT,
    DisplaySpan,
    LineResult,
    LineResultKind,
    NextDisplay,
    NextDisplayKind,
    Position,
    TextViewport,
)
from .progress import Progress, ProgressSnapshot

logger = logging.getLogger(__name__)

# Character index meaning "the end of the line, whatever its length"
END_OF_LINE = sys.maxsize


class LineSource(ABC):
    """Backing store of source lines."""

    @abstractmethod
    def line_text(self, index: int) -> Optional[str]:
        """Return line ``index``, or None if the document has no such line."""

    @abstractmethod
    def line_count(self) -> int:
        """Total number of lines in the document."""


class MemoryLineSource(LineSource):
    """Lines held entirely in memory."""

    def __init__(self, lines: list[str]):
        self.lines = lines

    @classmethod
    def from_text(cls, text: str) -> MemoryLineSource:
        return cls(text.splitlines())

    def line_text(self, index: int) -> Optional[str]:
        if 0 <= index < len(self.lines):
            return self.lines[index]
        return None

    def line_count(self) -> int:
        return len(self.lines)


class FileLineSource(LineSource):
    """Lines read on demand through a ``WindowedFileBuffer``."""

    def __init__(self, buffer: WindowedFileBuffer):
        self.buffer = buffer
        # Lines at or past this index are known not to exist
        self._line_limit: Optional[int] = None
        self._line_count: Optional[int] = None

    @classmethod
    def open(cls, file_path: str, line: int = 0) -> FileLineSource:
        """Open a file with the window centred on ``line``.

        Raises:
            OSError: if the file cannot be read.
        """
        buffer = WindowedFileBuffer.empty(file_path)
        buffer.surround_line(line)
        return cls(buffer)

    @property
    def file_path(self) -> str:
        return self.buffer.file_path

    def line_text(self, index: int) -> Optional[str]:
        if index < 0 or (self._line_limit is not None and index >= self._line_limit):
            return None
        text = self.buffer.get_line(index)
        if text is not None:
            return text
        # Sequential scrolling only ever steps one line past an edge
        if not self.buffer.is_empty() and index == self.buffer.end_line + 1:
            self.buffer.shift_down()
        elif not self.buffer.is_empty() and index == self.buffer.start_line - 1:
            self.buffer.shift_up()
        else:
            self.buffer.surround_line(index)
        text = self.buffer.get_line(index)
        if text is None:
            # Still not in the window, so the line doesn't exist in the file
            self._line_limit = index
        return text

    def line_count(self) -> int:
        """Number of lines in the file, counted once per source."""
        if self._line_count is None:
            self._line_count = count_lines(self.buffer.file_path)
        return self._line_count


def _break_point(window: str) -> int:
    """Index of the whitespace to wrap a window at, or -1 to hard-break.

    Whitespace before the first visible character doesn't count: wrapping
    there would produce a blank display line.
    """
    first_visible = len(window) - len(window.lstrip())
    for i in range(len(window) - 1, first_visible, -1):
        if window[i].isspace():
            return i
    return -1


class Paginator(TextViewport):
    """Wraps a line source into frames of ``term_height`` display lines."""

    def __init__(self, source: LineSource, display_start: Position = Position()):
        super().__init__()
        self.source = source
        self.display_start = display_start
        self.display_end = display_start
        self.display_spans: deque[DisplaySpan] = deque()
        self.display_copy: deque[str] = deque()
        self.term_width = 0
        self.term_height = 0
        self.breaks = LineBreakIndex()
        self.last_error: Optional[OSError] = None

    @classmethod
    def from_file(cls, file_path: str, start: Position = Position()) -> Paginator:
        """Paginate a local file starting at a remembered position.

        Raises:
            OSError: if the file cannot be read.
        """
        return cls(FileLineSource.open(file_path, start.line), start)

    @classmethod
    def from_text(cls, text: str, start: Position = Position()) -> Paginator:
        return cls(MemoryLineSource.from_text(text), start)

    @property
    def lines(self) -> list[str]:
        return list(self.display_copy)

    def jump(self, line: int, char: int = 0) -> None:
        self.display_start = Position(line, char)
        self.request_jump()

    # --- Single display lines ---

    def _wrap(self, full: str, start: int) -> tuple[str, int, bool]:
        """Wrap the display line beginning at ``full[start]``.

        Returns (text, resume, forced): the display text, the index the next
        display line starts at, and whether the source line was broken.
        """
        rest = full[start:]
        width = self.term_width
        if len(rest) <= width:
            return rest, len(full), False
        window = rest[:width + 1]
        cut = _break_point(window)
        if cut < 0:
            # No whitespace: split the word and mark it with a hyphen
            return window[:width - 1] + ReaderConstants.HYPHEN, start + width - 1, True
        # The whitespace at the cut is consumed but not shown
        return window[:cut], start + cut + 1, True

    @staticmethod
    def _resume_position(line: int, full: str, resume: int) -> Position:
        if resume >= len(full):
            return Position(line + 1, 0)
        return Position(line, resume)

    def get_line(self, start: Position) -> LineResult:
        """The display line starting at ``start``.

        Raises:
            OSError: if the backing file cannot be read.
        """
        full = self.source.line_text(start.line)
        if full is None:
            return NON_EXISTENT
        if not full[start.char:].strip():
            if start.char == 0:
                return LineResult(LineResultKind.LINE_EMPTY, "", DisplaySpan.blank(start.line))
            return LINE_END
        text, resume, forced = self._wrap(full, start.char)
        if forced:
            self.breaks.insert(start.line, resume - 1)
        span = DisplaySpan(start, self._resume_position(start.line, full, resume))
        return LineResult(LineResultKind.LINE_EXISTS, text, span)

    def get_line_backwards(self, end: Position) -> LineResult:
        """The display line whose span ends (exclusively) at ``end``.

        ``end.char`` may be ``END_OF_LINE`` to ask for the last display line
        of a source line.

        Raises:
            OSError: if the backing file cannot be read.
        """
        if end.char == 0:
            return LINE_END
        full = self.source.line_text(end.line)
        if full is None:
            return NON_EXISTENT
        if not full.strip():
            return LineResult(LineResultKind.LINE_EMPTY, "", DisplaySpan.blank(end.line))
        stop = min(end.char, len(full))
        start, text, resume = self._segment_ending_at(end.line, full, stop)
        span = DisplaySpan(Position(end.line, start),
                           self._resume_position(end.line, full, resume))
        return LineResult(LineResultKind.BACKWARDS_LINE_EXISTS, text, span)

    def _segment_ending_at(self, line: int, full: str, stop: int) -> tuple[int, str, int]:
        """Find the display line of ``full`` that ends at ``stop``.

        Starts from the previous recorded break and wraps forward with the same
        rule ``get_line`` uses. Where nothing was recorded (lines above a jump
        target) the line is re-derived from its start, recording the breaks.
        """
        offset = self.breaks.get_previous_break(Position(line, stop))
        cur = 0 if offset is None else offset + 1
        previous: Optional[tuple[int, str, int]] = None
        while True:
            if cur > 0 and not full[cur:].strip():
                # Trailing whitespace after a wrap is never displayed
                if previous is not None:
                    return previous
                return self._segment_ending_at(line, full, cur)
            text, resume, forced = self._wrap(full, cur)
            if resume > stop:
                # Cut at a jump target that isn't a wrap point
                return cur, full[cur:stop], stop
            if resume == stop:
                return cur, text, resume
            if forced:
                self.breaks.insert(line, resume - 1)
            previous = (cur, text, resume)
            cur = resume

    def _next_forward(self, start: Position) -> Optional[LineResult]:
        """First display line at or after ``start``; None at the end of the document."""
        while True:
            result = self.get_line(start)
            if result.kind == LineResultKind.NON_EXISTENT:
                return None
            if result.kind == LineResultKind.LINE_END:
                start = start.next_line()
                continue
            return result

    def _next_backward(self, end: Position) -> Optional[LineResult]:
        """Display line just before ``end``; None at the beginning of the document."""
        while True:
            if end.char == 0:
                if end.line == 0:
                    return None
                end = Position(end.line - 1, END_OF_LINE)
            result = self.get_line_backwards(end)
            if result.kind == LineResultKind.NON_EXISTENT:
                return None
            if result.kind == LineResultKind.LINE_END:
                end = Position(end.line, 0)
                continue
            return result

    # --- Frames ---

    def paginate(self, term_width: int, term_height: int) -> None:
        """Build a full frame from ``display_start`` (a Jump).

        On an early end of document, lines before ``display_start`` are added
        so the frame stays full. Nothing is changed if reading fails.

        Raises:
            ValueError: if the viewport is too small to wrap text in.
            OSError: if the backing file cannot be read.
        """
        if term_width < ReaderConstants.MIN_VIEW_WIDTH or term_height < ReaderConstants.MIN_VIEW_HEIGHT:
            raise ValueError(f"Viewport {term_width}x{term_height} is too small to paginate")

        previous = (self.breaks, self.term_width, self.term_height)
        self.breaks = LineBreakIndex()
        self.term_width, self.term_height = term_width, term_height
        try:
            spans, lines = self._build_frame()
        except OSError:
            self.breaks, self.term_width, self.term_height = previous
            raise

        self.display_spans = spans
        self.display_copy = lines
        if spans:
            self.display_start = spans[0].start
            self.display_end = spans[-1].end
        else:
            self.display_end = self.display_start

    def _build_frame(self) -> tuple[deque[DisplaySpan], deque[str]]:
        spans: deque[DisplaySpan] = deque()
        lines: deque[str] = deque()
        start = self.display_start
        if start.char > 0:
            # A mid-line start is a boundary for lines derived above it
            self.breaks.insert(start.line, start.char - 1)

        eof = False
        pos = start
        while len(lines) < self.term_height:
            result = self._next_forward(pos)
            if result is None:
                eof = True
                break
            spans.append(result.span)
            lines.append(result.text)
            pos = result.span.end

        if not eof:
            return spans, lines

        if spans:
            start = spans[0].start
        elif start.line > 0:
            # Remembered position is past the end (the file may have shrunk)
            start = Position(min(start.line, self.source.line_count()), 0)

        while len(lines) < self.term_height:
            result = self._next_backward(start)
            if result is None:
                break
            spans.appendleft(result.span)
            lines.appendleft(result.text)
            start = result.span.start
        return spans, lines

    def scroll_down_once(self) -> bool:
        """Move the frame down one display line.

        Returns False, leaving the frame as it was, at the end of the document.
        """
        if not self.display_spans:
            return False
        result = self._next_forward(self.display_end)
        if result is None:
            return False
        self.display_spans.append(result.span)
        self.display_copy.append(result.text)
        self.display_spans.popleft()
        self.display_copy.popleft()
        self.display_start = self.display_spans[0].start
        self.display_end = result.span.end
        return True

    def scroll_up_once(self) -> bool:
        """Move the frame up one display line.

        Returns False, leaving the frame as it was, at the beginning of the
        document.
        """
        if not self.display_spans:
            return False
        result = self._next_backward(self.display_start)
        if result is None:
            return False
        self.display_spans.appendleft(result.span)
        self.display_copy.appendleft(result.text)
        self.display_spans.pop()
        self.display_copy.pop()
        self.display_start = result.span.start
        self.display_end = self.display_spans[-1].end
        return True

    def _apply(self, intent: NextDisplay, term_width: int, term_height: int) -> None:
        if self.term_width == 0 and intent.kind != NextDisplayKind.NO_OP:
            # Never paginated: any movement needs a first frame
            intent = NextDisplay.jump()
        try:
            if intent.kind == NextDisplayKind.JUMP:
                self.paginate(term_width, term_height)
            elif intent.kind == NextDisplayKind.SCROLL_DOWN:
                for _ in range(intent.amount):
                    if not self.scroll_down_once():
                        break
            elif intent.kind == NextDisplayKind.SCROLL_UP:
                for _ in range(intent.amount):
                    if not self.scroll_up_once():
                        break
        except OSError as e:
            # Keep the last good frame; the step that failed is dropped
            logger.warning("Navigation step failed: %s", e)
            self.last_error = e
            return
        if intent.kind != NextDisplayKind.NO_OP:
            self.last_error = None

    # --- Progress ---

    def get_progress(self) -> Progress:
        """``Finished`` once the last display line of the document is on screen.

        Raises:
            OSError: if the backing file cannot be read.
        """
        if self.term_width and self._next_forward(self.display_end) is None:
            return Progress.finished()
        return Progress.location(self.display_start.line, self.display_start.char)

    def get_snapshot(self) -> ProgressSnapshot:
        return ProgressSnapshot(self.source.line_count(), self.get_progress())
