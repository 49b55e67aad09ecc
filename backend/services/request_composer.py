"""Builds generateContent request bodies from a transcript snapshot."""
import logging
from typing import Iterable

from models.conversation import Sender, Turn
from models.request import ComposedRequest, MessagePart

logger = logging.getLogger(__name__)

# The remote API calls the assistant side "model"
ROLE_MAP = {
    Sender.USER: "user",
    Sender.ASSISTANT: "model",
}


class EmptyInputError(ValueError):
    """Raised when the user text is empty after trimming."""


class RequestComposer:
    """Converts prior turns plus new user text into a ComposedRequest."""

    def __init__(self, preamble: str):
        """
        Initialize the composer.

        Args:
            preamble: System instruction sent out of band with every request
        """
        self.preamble = preamble

    def compose(self, history: Iterable[Turn], text: str) -> ComposedRequest:
        """
        Compose a request from the transcript as it stood before the new turn.

        Args:
            history: Turns preceding the pending user message
            text: New user text

        Returns:
            ComposedRequest with history, new message and preamble

        Raises:
            EmptyInputError: If text is empty or whitespace only
        """
        trimmed = (text or "").strip()
        if not trimmed:
            raise EmptyInputError("Message text is empty")

        contents = [MessagePart(role=ROLE_MAP[turn.sender], text=turn.text) for turn in history]
        contents.append(MessagePart(role=ROLE_MAP[Sender.USER], text=trimmed))

        logger.debug(f"Composed request with {len(contents)} content entries")
        return ComposedRequest(contents=tuple(contents), system_instruction=self.preamble)
