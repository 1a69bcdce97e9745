"""Tests for the reader controller and its key commands."""

import os
from unittest.mock import MagicMock, patch

import pytest

from termreader.keyboard import KeyEvent, KeyType
from termreader.model import NextDisplayKind, Position
from termreader.paginator import Paginator
from termreader.progress import Progress, ProgressSnapshot
from termreader.progress_store import ProgressStore
from termreader.reader import Reader, open_viewport
from termreader.word_paginator import WordPaginator


TEXT = "\n".join(f"Paragraph {i} has a few words in it." for i in range(20))


class MockTerminal:
    """Mock terminal interface for testing."""

    def __init__(self, width=20, height=5):
        self.term = MagicMock()
        self.width = width
        self.height = height
        self.setup = MagicMock()
        self.cleanup = MagicMock()
        self.update_frame = MagicMock()
        self.draw_error_message = MagicMock()
        self.invalidate_frame = MagicMock()

    def get_key(self, timeout=None):
        return None


def key(key_type, value):
    return KeyEvent(key_type=key_type, value=value, raw=value)


@pytest.fixture
def store(tmp_path):
    return ProgressStore(data_dir=tmp_path / "data")


@pytest.fixture
def make_reader(store):
    def make(viewport, document_path=None, terminal=None):
        return Reader(viewport, document_path, store=store, terminal=terminal or MockTerminal())
    return make


def test_line_scroll_keys(make_reader):
    reader = make_reader(Paginator.from_text(TEXT))
    reader._handle_key_event(key(KeyType.REGULAR, 'j'))
    assert reader.viewport.display_next.kind == NextDisplayKind.SCROLL_DOWN
    assert reader.viewport.display_next.amount == 1

    reader._handle_key_event(key(KeyType.SPECIAL, 'up'))
    assert reader.viewport.display_next.kind == NextDisplayKind.SCROLL_UP


def test_page_keys_scroll_a_screen(make_reader):
    reader = make_reader(Paginator.from_text(TEXT))
    reader._handle_key_event(key(KeyType.REGULAR, ' '))
    assert reader.viewport.display_next.kind == NextDisplayKind.SCROLL_DOWN
    assert reader.viewport.display_next.amount == 5

    reader._handle_key_event(key(KeyType.SPECIAL, 'page_up'))
    assert reader.viewport.display_next.kind == NextDisplayKind.SCROLL_UP
    assert reader.viewport.display_next.amount == 5


def test_home_jumps_to_top(make_reader):
    reader = make_reader(Paginator.from_text(TEXT, Position(10, 0)))
    reader._draw()
    reader._handle_key_event(key(KeyType.REGULAR, 'g'))
    reader._draw()
    assert reader.viewport.display_start == Position(0, 0)


@pytest.mark.parametrize("event", [
    key(KeyType.REGULAR, 'q'),
    key(KeyType.CTRL, 'q'),
    key(KeyType.SPECIAL, 'escape'),
])
def test_quit_keys(make_reader, event):
    reader = make_reader(Paginator.from_text(TEXT))
    reader.running = True
    reader._handle_key_event(event)
    assert reader.running is False


def test_draw_renders_frame(make_reader):
    terminal = MockTerminal()
    reader = make_reader(Paginator.from_text(TEXT), terminal=terminal)
    reader._draw()
    lines = terminal.update_frame.call_args[0][0]
    assert len(lines) == 5
    assert lines[0] == "Paragraph 0 has a"
    assert reader.error_mode is False


def test_too_small_terminal_shows_error(make_reader):
    terminal = MockTerminal(width=1, height=5)
    reader = make_reader(Paginator.from_text(TEXT), terminal=terminal)
    reader._draw()
    terminal.draw_error_message.assert_called_once()
    terminal.update_frame.assert_not_called()
    assert reader.error_mode is True

    # Only quitting works until the terminal is usable again
    reader.running = True
    reader._handle_key_event(key(KeyType.REGULAR, 'j'))
    assert reader.viewport.display_next.kind == NextDisplayKind.JUMP
    reader._handle_key_event(key(KeyType.REGULAR, 'q'))
    assert reader.running is False


def test_word_too_wide_shows_error(make_reader):
    terminal = MockTerminal(width=5, height=3)
    reader = make_reader(WordPaginator("a extraordinarily long word"), terminal=terminal)
    reader._draw()
    terminal.draw_error_message.assert_called_once()
    assert "extraordinarily" in terminal.draw_error_message.call_args[0][0]
    assert reader.error_mode is True


def test_save_progress(make_reader, store, tmp_path):
    path = tmp_path / "book.txt"
    path.write_text(TEXT, encoding="utf-8")
    reader = make_reader(Paginator.from_file(str(path), Position(4, 0)), document_path=str(path))
    reader._draw()
    assert reader.save_progress() is True
    assert store.load(str(path)) == ProgressSnapshot(20, Progress.location(4, 0))


def test_save_progress_without_document(make_reader):
    reader = make_reader(Paginator.from_text(TEXT))
    assert reader.save_progress() is False


def test_open_viewport_resumes_file_position(store, tmp_path):
    path = tmp_path / "book.txt"
    path.write_text(TEXT, encoding="utf-8")
    store.save(str(path), ProgressSnapshot(20, Progress.location(7, 0)))
    viewport = open_viewport(str(path), False, store)
    assert isinstance(viewport, Paginator)
    assert viewport.display_start == Position(7, 0)


def test_open_viewport_resumes_word_position(store, tmp_path):
    path = tmp_path / "chapter.txt"
    path.write_text(TEXT, encoding="utf-8")
    store.save(str(path), ProgressSnapshot(180, Progress.word(24, 30)))
    viewport = open_viewport(str(path), True, store)
    assert isinstance(viewport, WordPaginator)
    assert viewport.start_word_idx == 24


def test_open_viewport_missing_file(store, tmp_path):
    with pytest.raises(OSError):
        open_viewport(str(tmp_path / "missing.txt"), False, store)


def test_run_quits_and_saves_progress(make_reader, store, tmp_path):
    path = tmp_path / "book.txt"
    path.write_text(TEXT, encoding="utf-8")
    terminal = MockTerminal()
    reader = make_reader(Paginator.from_file(str(path)), document_path=str(path), terminal=terminal)
    quit_event = KeyEvent(key_type=KeyType.CTRL, value='q', raw='\x11', is_ctrl=True)

    with patch.object(reader.keyboard, 'get_key_event', return_value=quit_event) as get_key_event:
        with patch('termreader.reader.select.select', return_value=([0], [], [])) as mock_select:
            reader.run()
            mock_select.assert_called()
            get_key_event.assert_called_with(timeout=0)

    terminal.setup.assert_called_once()
    terminal.cleanup.assert_called_once()
    terminal.update_frame.assert_called()
    assert store.load(str(path)) == ProgressSnapshot(20, Progress.location(0, 0))


def test_resize_redraws(make_reader):
    terminal = MockTerminal()
    reader = make_reader(Paginator.from_text(TEXT), terminal=terminal)
    quit_event = KeyEvent(key_type=KeyType.REGULAR, value='q', raw='q')

    with patch.object(reader.keyboard, 'get_key_event', return_value=quit_event):
        with patch('termreader.reader.select.select') as mock_select:
            mock_select.side_effect = [
                ([reader._resize_pipe_r], [], []),
                ([0], [], []),
            ]
            os.write(reader._resize_pipe_w, b'R')
            with patch.object(reader, '_draw', wraps=reader._draw) as draw:
                reader.run()
                assert draw.call_count == 2
    terminal.invalidate_frame.assert_called_once()
