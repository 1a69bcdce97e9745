"""Command pattern implementation for reader actions."""

from abc import ABC, abstractmethod
from typing import Dict, Tuple, Optional, TYPE_CHECKING
from .keyboard import KeyType

if TYPE_CHECKING:
    from .reader import Reader
    from .keyboard import KeyEvent


class ReaderCommand(ABC):
    """Base class for reader commands."""

    @abstractmethod
    def execute(self, reader: 'Reader', key_event: 'KeyEvent') -> bool:
        """Execute the command.

        Args:
            reader: Reader instance
            key_event: The key event that triggered this command

        Returns:
            True if the view needs to be redrawn
        """
        pass


class NavigationCommand(ReaderCommand):
    """Base class for commands that move the view.

    Movement is only recorded on the viewport; it happens on the next draw.
    """

    def execute(self, reader: 'Reader', key_event: 'KeyEvent') -> bool:
        self._navigate(reader, reader.viewport)
        return True

    @abstractmethod
    def _navigate(self, reader: 'Reader', viewport):
        """Record the navigation intent."""
        pass


class ScrollDownCommand(NavigationCommand):
    def _navigate(self, reader, viewport):
        viewport.scroll_down(1)


class ScrollUpCommand(NavigationCommand):
    def _navigate(self, reader, viewport):
        viewport.scroll_up(1)


class PageDownCommand(NavigationCommand):
    def _navigate(self, reader, viewport):
        viewport.scroll_down(reader.page_size())


class PageUpCommand(NavigationCommand):
    def _navigate(self, reader, viewport):
        viewport.scroll_up(reader.page_size())


class TopCommand(NavigationCommand):
    def _navigate(self, reader, viewport):
        viewport.jump(0)


class QuitCommand(ReaderCommand):
    def execute(self, reader, key_event):
        reader.running = False
        return False


class CommandRegistry:
    """Registry for mapping key combinations to commands."""

    def __init__(self):
        self._commands: Dict[Tuple[KeyType, str], ReaderCommand] = {}
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default command mappings."""
        # Line scrolling
        self.register((KeyType.SPECIAL, 'down'), ScrollDownCommand())
        self.register((KeyType.REGULAR, 'j'), ScrollDownCommand())
        self.register((KeyType.SPECIAL, 'up'), ScrollUpCommand())
        self.register((KeyType.REGULAR, 'k'), ScrollUpCommand())

        # Paging
        self.register((KeyType.SPECIAL, 'page_down'), PageDownCommand())
        self.register((KeyType.REGULAR, ' '), PageDownCommand())
        self.register((KeyType.SPECIAL, 'page_up'), PageUpCommand())
        self.register((KeyType.SPECIAL, 'home'), TopCommand())
        self.register((KeyType.REGULAR, 'g'), TopCommand())

        # Quit
        self.register((KeyType.REGULAR, 'q'), QuitCommand())
        self.register((KeyType.CTRL, 'q'), QuitCommand())
        self.register((KeyType.SPECIAL, 'escape'), QuitCommand())

    def register(self, key: Tuple[KeyType, str], command: ReaderCommand):
        """Register a command for a key combination."""
        self._commands[key] = command

    def get_command(self, key_type: KeyType, value: str) -> Optional[ReaderCommand]:
        """Get the command for a key combination."""
        return self._commands.get((key_type, value))

    def execute(self, reader: 'Reader', key_event: 'KeyEvent') -> bool:
        """Execute the command for the given key event.

        Returns:
            True if the view needs to be redrawn
        """
        command = self.get_command(key_event.key_type, key_event.value)
        if command:
            return command.execute(reader, key_event)
        return False
