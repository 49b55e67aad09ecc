"""Conversation manager for live chat sessions."""
import logging
import time
import uuid
from typing import Callable, Dict, List, Optional

from services.chat_session import ChatSession
from services.gemini_gateway import GeminiGateway
from services.request_composer import RequestComposer

logger = logging.getLogger(__name__)


class ConversationManager:
    """Keeps open chat sessions in memory, keyed by conversation ID."""

    def __init__(
        self,
        gateway: GeminiGateway,
        preamble: str,
        greeting: Optional[str] = None,
        idle_ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the conversation manager.

        Args:
            gateway: Shared gateway handed to every session
            preamble: System instruction used by each session's composer
            greeting: Assistant turn each new session starts with
            idle_ttl_seconds: Idle sessions older than this are evicted when a
                new one opens; None keeps sessions until closed
            clock: Monotonic time source shared with the sessions
        """
        self.gateway = gateway
        self.composer = RequestComposer(preamble)
        self.greeting = greeting
        self.idle_ttl_seconds = idle_ttl_seconds
        self.clock = clock
        self._sessions: Dict[str, ChatSession] = {}
        logger.info("ConversationManager initialized")

    def open_session(self) -> ChatSession:
        """
        Create a new session with a fresh transcript.

        Returns:
            The newly opened ChatSession
        """
        self.evict_idle_sessions()

        conversation_id = self._generate_conversation_id()
        session = ChatSession(
            gateway=self.gateway,
            composer=self.composer,
            greeting=self.greeting,
            session_id=conversation_id,
            clock=self.clock,
        )
        self._sessions[conversation_id] = session

        logger.info(f"Opened conversation: {conversation_id}")
        return session

    def get_session(self, conversation_id: str) -> ChatSession:
        """
        Look up an open session.

        Args:
            conversation_id: ID returned by open_session()

        Returns:
            The matching ChatSession

        Raises:
            KeyError: If no open session has this ID
        """
        try:
            return self._sessions[conversation_id]
        except KeyError:
            logger.warning(f"Conversation {conversation_id} not found")
            raise

    def close_session(self, conversation_id: str) -> None:
        """
        Close a session and forget it.

        Raises:
            KeyError: If no open session has this ID
        """
        session = self._sessions.pop(conversation_id, None)
        if session is None:
            logger.warning(f"Cannot close unknown conversation {conversation_id}")
            raise KeyError(conversation_id)

        session.close()
        logger.info(f"Closed conversation: {conversation_id}")

    def close_all(self) -> None:
        for conversation_id in list(self._sessions):
            self.close_session(conversation_id)

    def evict_idle_sessions(self) -> List[str]:
        """
        Close sessions with no activity for longer than idle_ttl_seconds.

        Sessions with a call in flight are never evicted.

        Returns:
            IDs of the evicted sessions
        """
        if self.idle_ttl_seconds is None:
            return []

        now = self.clock()
        stale = [
            conversation_id
            for conversation_id, session in self._sessions.items()
            if not session.busy and now - session.last_activity > self.idle_ttl_seconds
        ]
        for conversation_id in stale:
            self.close_session(conversation_id)

        if stale:
            logger.info(f"Evicted {len(stale)} idle conversation(s)")
        return stale

    def session_ids(self) -> List[str]:
        return list(self._sessions)

    def _generate_conversation_id(self) -> str:
        """
        Generate a unique conversation ID.

        Returns:
            Unique conversation ID string
        """
        return f"conv_{uuid.uuid4().hex[:12]}"
