"""Tests for the rendering glue between paginators and the terminal."""

from unittest.mock import MagicMock, patch

from termreader.model import Position
from termreader.paginator import Paginator
from termreader.view import ReaderView
from termreader.word_paginator import WordPaginator


FOX = "The quick brown fox jumps over the lazy dog."
TEXT = f"{FOX}\n\nPack my box with five dozen liquor jugs."


class MockTerminal:
    """Mock terminal interface for testing."""

    def __init__(self, width=12, height=3):
        self.width = width
        self.height = height
        self.update_frame = MagicMock()


def test_frame_requests_jump_only_on_resize():
    paginator = Paginator.from_text(TEXT)
    view = ReaderView(paginator)
    with patch.object(paginator, 'request_jump', wraps=paginator.request_jump) as jump:
        view.frame(12, 3)
        view.frame(12, 3)
        assert jump.call_count == 1
        view.frame(20, 3)
        assert jump.call_count == 2


def test_resize_keeps_reading_position():
    paginator = Paginator.from_text(TEXT)
    view = ReaderView(paginator)
    view.frame(12, 3)
    paginator.scroll_down(3)
    assert view.frame(12, 3) == ["the lazy", "dog.", ""]

    assert view.frame(20, 3) == ["the lazy dog.", "", "Pack my box with"]
    assert paginator.display_start == Position(0, 31)


def test_resize_clears_word_history():
    paginator = WordPaginator("one two three four five six seven eight nine ten")
    view = ReaderView(paginator)
    view.frame(10, 2)
    paginator.scroll_down()
    view.frame(10, 2)
    assert paginator.prev_start_words == [0]
    view.frame(12, 2)
    assert paginator.prev_start_words == []
    assert paginator.start_word_idx == 2


def test_status_shows_title_and_percent():
    view = ReaderView(Paginator.from_text(TEXT), title="book.txt")
    view.frame(12, 3)
    status = view.status_text()
    assert "book.txt" in status
    assert "0%" in status


def test_status_shows_read_error():
    paginator = Paginator.from_text(TEXT)
    view = ReaderView(paginator, title="book.txt")
    view.frame(12, 3)
    paginator.last_error = OSError("disk gone")
    assert "disk gone" in view.status_text()


def test_draw_sends_frame_to_terminal():
    terminal = MockTerminal()
    view = ReaderView(Paginator.from_text(TEXT), title="book.txt")
    view.draw(terminal)
    terminal.update_frame.assert_called_once()
    args, kwargs = terminal.update_frame.call_args
    assert args[0] == ["The quick", "brown fox", "jumps over"]
    assert kwargs["view_width"] == 12
    assert "book.txt" in kwargs["status_text"]


def test_draw_with_status_message():
    terminal = MockTerminal()
    view = ReaderView(Paginator.from_text(TEXT), title="book.txt")
    view.draw(terminal, "Hello")
    _, kwargs = terminal.update_frame.call_args
    assert kwargs["status_text"] == " Hello"
