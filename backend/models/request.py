"""Outbound request models for the generative-language API."""
from dataclasses import dataclass
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class MessagePart:
    """One role-tagged message in the `contents` list."""
    role: str  # "user" or "model"
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"role": self.role, "parts": [{"text": self.text}]}


@dataclass(frozen=True)
class ComposedRequest:
    """Immutable request built fresh for every call."""
    contents: Tuple[MessagePart, ...]
    system_instruction: str

    def to_payload(self) -> Dict[str, Any]:
        """Render the JSON body fragment expected by generateContent."""
        return {
            "contents": [part.to_dict() for part in self.contents],
            "systemInstruction": {"parts": [{"text": self.system_instruction}]},
        }
