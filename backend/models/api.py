"""API request and response models for the HTTP boundary."""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from models.conversation import Sender, SessionState, Turn, TurnStatus


class TurnModel(BaseModel):
    """Serialized turn."""
    text: str
    sender: Sender
    status: TurnStatus

    @classmethod
    def from_turn(cls, turn: Turn) -> "TurnModel":
        return cls(text=turn.text, sender=turn.sender, status=turn.status)


class SessionResponse(BaseModel):
    """Snapshot of a chat session."""
    session_id: str
    state: SessionState
    busy: bool
    transcript: List[TurnModel]


class MessageRequest(BaseModel):
    """User submission. Blank text is accepted here and ignored by the session."""
    text: str = Field(..., max_length=8000)


class MessageResponse(BaseModel):
    """Result of one submission."""
    session_id: str
    accepted: bool
    reply: Optional[TurnModel] = None
    transcript: List[TurnModel]


class PharmacyPayload(BaseModel):
    """Pharmacy record forwarded as-is to the registry backend."""
    model_config = {"extra": "allow"}

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump()
