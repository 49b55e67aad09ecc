"""Append-only transcript of a chat session."""
import logging
from typing import Callable, List, Tuple

from models.conversation import Turn

logger = logging.getLogger(__name__)

TurnListener = Callable[[Turn], None]


class TranscriptStore:
    """Ordered log of turns; the single source of truth for rendering."""

    def __init__(self):
        self._turns: List[Turn] = []
        self._listeners: List[TurnListener] = []

    def append(self, turn: Turn) -> None:
        """
        Add a turn to the end of the transcript and notify listeners.

        Args:
            turn: Turn to append
        """
        self._turns.append(turn)
        logger.debug(f"Appended {turn.sender.value} turn (#{len(self._turns)}, status={turn.status.value})")

        for listener in list(self._listeners):
            listener(turn)

    def all(self) -> Tuple[Turn, ...]:
        """Return a snapshot of every turn in arrival order."""
        return tuple(self._turns)

    def subscribe(self, listener: TurnListener) -> Callable[[], None]:
        """
        Register a callback fired after every append.

        Args:
            listener: Called with the newly appended turn

        Returns:
            Callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def clear(self) -> None:
        """Drop all turns and listeners. Only used on session teardown."""
        self._turns.clear()
        self._listeners.clear()

    def __len__(self) -> int:
        return len(self._turns)
