"""Conversation data models."""
from dataclasses import dataclass
from enum import Enum


class Sender(str, Enum):
    """Who produced a turn."""
    USER = "user"
    ASSISTANT = "assistant"


class TurnStatus(str, Enum):
    """Whether a turn carries a normal utterance or an error notice."""
    NORMAL = "normal"
    ERROR = "error"


class SessionState(str, Enum):
    """Lifecycle of a chat session."""
    IDLE = "idle"
    SUBMITTING = "submitting"
    CLOSED = "closed"


@dataclass(frozen=True)
class Turn:
    """Represents a single utterance in a conversation."""
    text: str
    sender: Sender
    status: TurnStatus = TurnStatus.NORMAL

    @property
    def is_error(self) -> bool:
        return self.status is TurnStatus.ERROR

    @classmethod
    def user(cls, text: str) -> "Turn":
        return cls(text=text, sender=Sender.USER)

    @classmethod
    def assistant(cls, text: str, error: bool = False) -> "Turn":
        status = TurnStatus.ERROR if error else TurnStatus.NORMAL
        return cls(text=text, sender=Sender.ASSISTANT, status=status)
