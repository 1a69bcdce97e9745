from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .progress import Progress, ProgressSnapshot


@dataclass(frozen=True, order=True)
class Position:
    """An absolute (line, character) coordinate in source text."""
    line: int = 0
    char: int = 0

    def next_line(self) -> "Position":
        return Position(self.line + 1, 0)


@dataclass(frozen=True)
class DisplaySpan:
    """Source range covered by one rendered display line.

    ``end`` is exclusive: it is the position at which the next display line
    resumes. A display line that consumes the rest of its source line ends at
    the start of the following source line.
    """
    start: Position
    end: Position

    @classmethod
    def blank(cls, line: int) -> "DisplaySpan":
        return cls(Position(line, 0), Position(line + 1, 0))


class NextDisplayKind(Enum):
    """Navigation intents consumed on the next render."""
    NO_OP = "no_op"
    JUMP = "jump"
    SCROLL_DOWN = "scroll_down"
    SCROLL_UP = "scroll_up"


@dataclass(frozen=True)
class NextDisplay:
    kind: NextDisplayKind = NextDisplayKind.NO_OP
    amount: int = 0

    @classmethod
    def no_op(cls) -> "NextDisplay":
        return cls(NextDisplayKind.NO_OP)

    @classmethod
    def jump(cls) -> "NextDisplay":
        return cls(NextDisplayKind.JUMP)

    @classmethod
    def scroll_down(cls, amount: int = 1) -> "NextDisplay":
        return cls(NextDisplayKind.SCROLL_DOWN, amount)

    @classmethod
    def scroll_up(cls, amount: int = 1) -> "NextDisplay":
        return cls(NextDisplayKind.SCROLL_UP, amount)


class LineResultKind(Enum):
    NON_EXISTENT = "non_existent"  # Past the last line of the document
    LINE_END = "line_end"  # Source line fully consumed
    LINE_EMPTY = "line_empty"  # Blank source line, shown as one empty row
    LINE_EXISTS = "line_exists"
    BACKWARDS_LINE_EXISTS = "backwards_line_exists"


@dataclass(frozen=True)
class LineResult:
    kind: LineResultKind
    text: str = ""
    span: Optional[DisplaySpan] = None

    @property
    def has_text(self) -> bool:
        return self.kind in (LineResultKind.LINE_EXISTS,
                             LineResultKind.BACKWARDS_LINE_EXISTS)


NON_EXISTENT = LineResult(LineResultKind.NON_EXISTENT)
LINE_END = LineResult(LineResultKind.LINE_END)


class TextViewport(ABC):
    """A bidirectional text viewport over some backing store.

    Navigation calls only record an intent; the intent is carried out, and
    reset to a no-op, by the next ``render``.
    """

    def __init__(self):
        self.display_next: NextDisplay = NextDisplay.jump()

    def scroll_down(self, scrolls: int = 1) -> None:
        self.display_next = NextDisplay.scroll_down(scrolls)

    def scroll_up(self, scrolls: int = 1) -> None:
        self.display_next = NextDisplay.scroll_up(scrolls)

    def request_jump(self) -> None:
        self.display_next = NextDisplay.jump()

    def render(self, term_width: int, term_height: int) -> list[str]:
        """Apply the pending intent for this viewport size and return the frame."""
        intent = self.display_next
        self.display_next = NextDisplay.no_op()
        self._apply(intent, term_width, term_height)
        return self.lines

    @abstractmethod
    def _apply(self, intent: NextDisplay, term_width: int, term_height: int) -> None:
        """Carry out a navigation intent."""

    @property
    @abstractmethod
    def lines(self) -> list[str]:
        """Display strings of the current frame."""

    @abstractmethod
    def jump(self, line: int) -> None:
        """Move the view to the start of a source line on the next render."""

    @abstractmethod
    def get_progress(self) -> Progress:
        """Resumable marker for the current view."""

    @abstractmethod
    def get_snapshot(self) -> ProgressSnapshot:
        """Progress together with the document size."""
