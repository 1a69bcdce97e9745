from bisect import bisect_left, insort
from typing import Optional

from .model import Position


class LineBreakIndex:
    """Offsets at which display lines were broken, per source line.

    Going backwards it is possible for the words of a line to be packed
    differently than they were going forwards. Breaks are recorded on the way
    down so the way back up reproduces them.

    An offset is the index of the last source character consumed by a
    display line; the next display line starts at ``offset + 1``.
    """

    def __init__(self):
        self._breaks: dict[int, list[int]] = {}

    def insert(self, line: int, char_offset: int) -> None:
        offsets = self._breaks.setdefault(line, [])
        i = bisect_left(offsets, char_offset)
        if i < len(offsets) and offsets[i] == char_offset:
            return
        insort(offsets, char_offset)

    def get_line(self, line: int) -> tuple[int, ...]:
        return tuple(self._breaks.get(line, ()))

    def get_previous_break(self, position: Position) -> Optional[int]:
        """Largest offset on ``position.line`` strictly below ``position.char - 1``.

        Returns None if the line has no such break.
        """
        offsets = self._breaks.get(position.line)
        if not offsets:
            return None
        i = bisect_left(offsets, position.char - 1)
        if i == 0:
            return None
        return offsets[i - 1]

    def clear(self) -> None:
        self._breaks.clear()

    def __len__(self) -> int:
        return sum(len(offsets) for offsets in self._breaks.values())

    def __contains__(self, line: int) -> bool:
        return bool(self._breaks.get(line))
