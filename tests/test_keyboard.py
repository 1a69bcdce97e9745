"""Test keyboard input handling."""

import pytest

from termreader.keyboard import KeyboardHandler, KeyType


class MockTerminal:
    """Mock terminal interface for testing."""

    def __init__(self):
        self._key_queue = []

    def get_key(self, timeout=None):
        if self._key_queue:
            return self._key_queue.pop(0)
        return None

    def add_key(self, key_str):
        self._key_queue.append(key_str)


@pytest.mark.parametrize("token,key_type,value", [
    ('<DOWN>', KeyType.SPECIAL, 'down'),
    ('<UP>', KeyType.SPECIAL, 'up'),
    ('<PAGEDOWN>', KeyType.SPECIAL, 'page_down'),
    ('<PAGEUP>', KeyType.SPECIAL, 'page_up'),
    ('<HOME>', KeyType.SPECIAL, 'home'),
    ('<SPACE>', KeyType.REGULAR, ' '),
    ('<ESC>', KeyType.SPECIAL, 'escape'),
    ('\x1b', KeyType.SPECIAL, 'escape'),
    ('<Ctrl-q>', KeyType.CTRL, 'q'),
    ('\x11', KeyType.CTRL, 'q'),
    ('j', KeyType.REGULAR, 'j'),
    ('q', KeyType.REGULAR, 'q'),
])
def test_parse_key(token, key_type, value):
    event = KeyboardHandler(MockTerminal()).parse_key(token)
    assert event.key_type == key_type
    assert event.value == value


def test_modified_special_acts_like_plain_key():
    event = KeyboardHandler(MockTerminal()).parse_key('<Shift-DOWN>')
    assert event.key_type == KeyType.SPECIAL
    assert event.value == 'down'


def test_get_key_event_reads_from_terminal():
    terminal = MockTerminal()
    handler = KeyboardHandler(terminal)
    assert handler.get_key_event(timeout=0) is None

    terminal.add_key('<Ctrl-q>')
    event = handler.get_key_event(timeout=0)
    assert event is not None
    assert event.is_ctrl
    assert event.value == 'q'
