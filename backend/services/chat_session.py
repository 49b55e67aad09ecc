"""
Chat session controller.

One ChatSession backs one open chat widget. Each accepted submission goes
compose -> send -> interpret and leaves exactly one user turn and one
assistant turn in the transcript. The `busy` flag is read and set before the
first await, so on a single event loop at most one call is outstanding and a
second submission during that window is dropped rather than queued.
"""

import logging
import time
from typing import Callable, Optional, Tuple

from models.conversation import SessionState, Turn
from services.gemini_gateway import GatewayError, GeminiGateway, TransportError
from services.request_composer import EmptyInputError, RequestComposer
from services.response_interpreter import interpret
from services.transcript_store import TranscriptStore

logger = logging.getLogger(__name__)


class ChatSession:
    """Drives one conversation between a user and the remote model."""

    def __init__(
        self,
        gateway: GeminiGateway,
        composer: RequestComposer,
        greeting: Optional[str] = None,
        session_id: str = "",
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the session.

        Args:
            gateway: Gateway used for every remote call
            composer: Builds request bodies from transcript snapshots
            greeting: Optional assistant turn shown when the session opens
            session_id: Identifier used in log lines
            clock: Source of last-activity timestamps
        """
        self.gateway = gateway
        self.composer = composer
        self.session_id = session_id
        self.clock = clock
        self.transcript = TranscriptStore()
        self.draft_input = ""
        self._state = SessionState.IDLE
        self.last_activity = clock()

        if greeting:
            self.transcript.append(Turn.assistant(greeting))

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._state is SessionState.SUBMITTING

    @property
    def closed(self) -> bool:
        return self._state is SessionState.CLOSED

    def turns(self) -> Tuple[Turn, ...]:
        return self.transcript.all()

    def subscribe(self, listener: Callable[[Turn], None]) -> Callable[[], None]:
        """Forward to the transcript's change signal (scroll-to-latest hook)."""
        return self.transcript.subscribe(listener)

    async def submit(self, text: str) -> Optional[Turn]:
        """
        Submit user text and wait for the assistant's reply.

        Submissions are ignored (not queued, not an error) when the session is
        closed, a call is already outstanding, or the text is blank.

        Args:
            text: Raw user input

        Returns:
            The assistant turn appended for this submission, or None if the
            submission was ignored or the session closed mid-flight
        """
        if self.closed:
            logger.debug(f"Session {self.session_id}: submit after close ignored")
            return None
        if self.busy:
            logger.info(f"Session {self.session_id}: submit while busy dropped")
            return None

        history = self.transcript.all()
        try:
            composed = self.composer.compose(history, text)
        except EmptyInputError:
            logger.debug(f"Session {self.session_id}: empty input ignored")
            return None

        user_text = composed.contents[-1].text
        self._state = SessionState.SUBMITTING
        self.draft_input = ""
        self.last_activity = self.clock()

        try:
            self.transcript.append(Turn.user(user_text))

            try:
                outcome = await self.gateway.send(composed)
            except GatewayError as e:
                outcome = e
            except Exception as e:
                logger.error(f"Session {self.session_id}: unexpected gateway failure: {e}", exc_info=True)
                outcome = TransportError(e)

            if self.closed:
                logger.info(f"Session {self.session_id}: response arrived after close, discarded")
                return None

            reply = interpret(outcome)
            self.transcript.append(reply)
        finally:
            # Cancellation or a raising listener must not leave the session busy
            if not self.closed:
                self._state = SessionState.IDLE
            self.last_activity = self.clock()

        logger.info(
            f"Session {self.session_id}: turn complete "
            f"(status={reply.status.value}, transcript_length={len(self.transcript)})"
        )
        return reply

    def close(self) -> None:
        """End the session. Drops the transcript; no network effect."""
        if self.closed:
            return
        self._state = SessionState.CLOSED
        self.transcript.clear()
        self.draft_input = ""
        logger.info(f"Session {self.session_id}: closed")
