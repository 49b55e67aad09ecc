"""Data models for the medical chat assistant."""
from .conversation import Sender, TurnStatus, SessionState, Turn
from .request import MessagePart, ComposedRequest

__all__ = [
    "Sender",
    "TurnStatus",
    "SessionState",
    "Turn",
    "MessagePart",
    "ComposedRequest",
]
