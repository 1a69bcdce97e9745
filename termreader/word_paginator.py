"""Word-based pagination of text held entirely in memory.

Chapter text is tokenised once into words plus a newline token after each
source line. Frames are packed greedily from ``start_word_idx``. Scrolling
down remembers where each frame started so scrolling back up shows exactly
what was shown before; when that history is gone (after a resize or a jump)
the previous line is worked out by walking backwards word by word.
"""

from __future__ import annotations

import logging
from typing import Optional

from .constants import ReaderConstants
from .model import NextDisplay, NextDisplayKind, TextViewport
from .progress import Progress, ProgressSnapshot

logger = logging.getLogger(__name__)

NEWLINE = ReaderConstants.NEWLINE_TOKEN


class WordTooWideError(ValueError):
    """A single word does not fit on one display line."""

    def __init__(self, word: str, width: int):
        super().__init__(f"Word {word!r} ({len(word)} characters) is wider than the viewport ({width})")
        self.word = word
        self.width = width


def tokenize(text: str) -> tuple[list[str], list[int]]:
    """Split text into word tokens with a newline token after each line.

    Returns the tokens and, for each source line that has any, the index of
    its first token. Trailing newline tokens are dropped.
    """
    words: list[str] = []
    line_starts: list[int] = []
    for line in text.splitlines():
        line_starts.append(len(words))
        words.extend(line.split())
        words.append(NEWLINE)
    while words and words[-1] == NEWLINE:
        words.pop()
    # Lines that only contributed trimmed newline tokens
    while line_starts and line_starts[-1] >= len(words):
        line_starts.pop()
    return words, line_starts


class WordPaginator(TextViewport):
    """Paginates a token stream into frames of whole words."""

    def __init__(self, text: str, start_word_idx: int = 0):
        super().__init__()
        self.words, self.line_starts = tokenize(text)
        self.text_length = len(text)
        self.start_word_idx = min(max(0, start_word_idx), len(self.words))
        self.end_word_idx = self.start_word_idx
        # Frame starts before each scroll down, popped by scroll up
        self.prev_start_words: list[int] = []
        self.term_width = 0
        self.term_height = 0
        self._lines: list[str] = []

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    def jump(self, line: int) -> None:
        if not self.line_starts:
            self.start_word_idx = 0
        else:
            line = min(max(0, line), len(self.line_starts) - 1)
            self.start_word_idx = self.line_starts[line]
        self.request_jump()

    def _track_viewport(self, term_width: int, term_height: int) -> None:
        if term_width < ReaderConstants.MIN_VIEW_WIDTH or term_height < ReaderConstants.MIN_VIEW_HEIGHT:
            raise ValueError(f"Viewport {term_width}x{term_height} is too small to paginate")
        if (term_width, term_height) != (self.term_width, self.term_height):
            # Recorded frame starts are only valid for the size they were made at
            if self.prev_start_words:
                logger.debug("Viewport resized to %dx%d, dropping scroll history",
                             term_width, term_height)
            self.prev_start_words.clear()
            self.term_width, self.term_height = term_width, term_height

    def _pack(self, start: int, term_width: int, term_height: int) -> tuple[list[str], list[int], int]:
        """Pack tokens from ``start`` into at most ``term_height`` lines.

        Returns the lines, the number of tokens each line consumed and the
        index one past the last consumed token. A newline token is consumed
        by the line it ends. When the tokens run out, the line in progress is
        emitted even if it's empty.
        """
        lines: list[str] = []
        counts: list[int] = []
        idx = start
        current = ""
        taken = 0
        while len(lines) < term_height:
            if idx >= len(self.words):
                lines.append(current)
                counts.append(taken)
                break
            word = self.words[idx]
            if word == NEWLINE:
                lines.append(current)
                counts.append(taken + 1)
                current, taken = "", 0
                idx += 1
                continue
            if not current:
                if len(word) > term_width:
                    raise WordTooWideError(word, term_width)
                current = word
            elif len(current) + 1 + len(word) <= term_width:
                current += " " + word
            else:
                lines.append(current)
                counts.append(taken)
                current, taken = "", 0
                continue
            taken += 1
            idx += 1
        return lines, counts, idx

    def get_display_lines(self, term_width: int, term_height: int) -> list[str]:
        """Lines of the frame starting at ``start_word_idx``.

        Raises:
            WordTooWideError: if a word on the frame is wider than ``term_width``.
            ValueError: if the viewport is too small.
        """
        self._track_viewport(term_width, term_height)
        lines, _, end = self._pack(self.start_word_idx, term_width, term_height)
        self.end_word_idx = end
        return lines

    def scroll_down_once(self, term_width: int, term_height: int) -> bool:
        """Advance the frame by its first line.

        Returns False, leaving the frame as it was, if the next frame would
        not fill the viewport.
        """
        self._track_viewport(term_width, term_height)
        if self.start_word_idx >= len(self.words):
            return False
        _, counts, _ = self._pack(self.start_word_idx, term_width, term_height)
        proposed = self.start_word_idx + counts[0]
        lines, _, _ = self._pack(proposed, term_width, term_height)
        if len(lines) < term_height:
            return False
        self.prev_start_words.append(self.start_word_idx)
        self.start_word_idx = proposed
        return True

    def scroll_up_once(self, term_width: int, term_height: int) -> bool:
        """Move the frame back one line.

        Returns False at the beginning of the text.
        """
        self._track_viewport(term_width, term_height)
        if self.prev_start_words:
            self.start_word_idx = self.prev_start_words.pop()
            return True
        start = self._walk_back_start(term_width)
        if start is None:
            return False
        self.start_word_idx = start
        return True

    def _walk_back_start(self, term_width: int) -> Optional[int]:
        """First token of the line before ``start_word_idx``, packed backwards."""
        if self.start_word_idx == 0:
            return None
        idx = self.start_word_idx - 1
        if self.words[idx] == NEWLINE:
            if idx == 0 or self.words[idx - 1] == NEWLINE:
                # The previous line is blank
                return idx
            # Step over the newline token that ended the previous line
            idx -= 1

        word = self.words[idx]
        if len(word) > term_width:
            raise WordTooWideError(word, term_width)
        length = len(word)
        while idx > 0:
            previous = self.words[idx - 1]
            if previous == NEWLINE or length + 1 + len(previous) > term_width:
                break
            length += 1 + len(previous)
            idx -= 1
        return idx

    def _apply(self, intent: NextDisplay, term_width: int, term_height: int) -> None:
        if intent.kind == NextDisplayKind.JUMP:
            self.prev_start_words.clear()
        elif intent.kind == NextDisplayKind.SCROLL_DOWN:
            for _ in range(intent.amount):
                if not self.scroll_down_once(term_width, term_height):
                    break
        elif intent.kind == NextDisplayKind.SCROLL_UP:
            for _ in range(intent.amount):
                if not self.scroll_up_once(term_width, term_height):
                    break
        self._lines = self.get_display_lines(term_width, term_height)

    def get_progress(self) -> Progress:
        if self.end_word_idx >= len(self.words):
            return Progress.finished()
        return Progress.word(self.start_word_idx, self.end_word_idx)

    def get_snapshot(self) -> ProgressSnapshot:
        return ProgressSnapshot(len(self.words), self.get_progress())
