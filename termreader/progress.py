"""Resumable reading-progress markers.

A marker is persisted between sessions and handed back to a paginator when
a document is reopened. Local files are tracked by source position, chapter
text by word indexes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ProgressKind(Enum):
    LOCATION = "location"  # (line, char) in a source file
    WORD = "word"  # (start, end) word indexes in a chapter
    FINISHED = "finished"


@dataclass(frozen=True)
class Progress:
    kind: ProgressKind
    first: int = 0
    second: int = 0

    @classmethod
    def location(cls, line: int, char: int) -> Progress:
        return cls(ProgressKind.LOCATION, line, char)

    @classmethod
    def word(cls, start: int, end: int) -> Progress:
        return cls(ProgressKind.WORD, start, end)

    @classmethod
    def finished(cls) -> Progress:
        return cls(ProgressKind.FINISHED)

    @property
    def is_finished(self) -> bool:
        return self.kind == ProgressKind.FINISHED

    def to_dict(self) -> dict[str, Any]:
        if self.kind == ProgressKind.LOCATION:
            return {"kind": self.kind.value, "line": self.first, "char": self.second}
        if self.kind == ProgressKind.WORD:
            return {"kind": self.kind.value, "start": self.first, "end": self.second}
        return {"kind": self.kind.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Progress:
        """Rebuild a marker from ``to_dict`` output.

        Raises:
            ValueError: if the data does not describe a marker.
        """
        try:
            kind = ProgressKind(data["kind"])
            if kind == ProgressKind.LOCATION:
                return cls.location(int(data["line"]), int(data["char"]))
            if kind == ProgressKind.WORD:
                return cls.word(int(data["start"]), int(data["end"]))
            return cls.finished()
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid progress data: {data!r}") from e


NO_PROGRESS = Progress.location(0, 0)


@dataclass(frozen=True)
class ProgressSnapshot:
    """A progress marker plus the size of the document it refers to.

    ``total`` counts source lines for local files and word tokens for
    chapter text.
    """
    total: int
    progress: Progress = NO_PROGRESS

    @property
    def percent(self) -> float:
        if self.progress.is_finished:
            return 100.0
        if self.total <= 0:
            return 0.0
        if self.progress.kind == ProgressKind.WORD:
            # Based on the last word on screen
            return 100.0 * self.progress.second / self.total
        return 100.0 * self.progress.first / self.total

    @property
    def line(self) -> int:
        """Source line to reopen a local document at."""
        if self.progress.is_finished:
            return max(0, self.total - 1)
        if self.progress.kind == ProgressKind.LOCATION:
            return self.progress.first
        return 0

    def to_dict(self) -> dict[str, Any]:
        return {"total": self.total, "progress": self.progress.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProgressSnapshot:
        try:
            return cls(int(data["total"]), Progress.from_dict(data["progress"]))
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid progress snapshot: {data!r}") from e
