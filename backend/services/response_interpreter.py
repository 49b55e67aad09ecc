"""
Response interpreter for generateContent results.

Maps whatever came back from the gateway (a decoded body or a gateway error)
onto a single assistant turn. The classification keeps "the call failed"
apart from "the call succeeded but the model declined to answer", since the
user-facing copy differs between the two.
"""

from enum import Enum
from typing import Any, Optional, Union
import logging

from models.conversation import Turn
from services.gemini_gateway import ApiError, GatewayError, TransportError

logger = logging.getLogger(__name__)

Outcome = Union[GatewayError, Any]

FILTERED_MESSAGE = "I cannot provide a response due to safety guidelines. Please try rephrasing your query."
MALFORMED_MESSAGE = "Sorry, I received an empty or unexpected response from the AI."
NETWORK_FALLBACK = "Network issue"

SAFETY_FINISH_REASON = "SAFETY"


class ResponseKind(str, Enum):
    """Classification of one gateway outcome."""
    OK = "ok"
    TRANSPORT_ERROR = "transport_error"
    API_ERROR = "api_error"
    CONTENT_FILTERED = "content_filtered"
    MALFORMED = "malformed"


def _first_candidate(body: Any) -> Optional[dict]:
    if not isinstance(body, dict):
        return None
    candidates = body.get("candidates")
    if isinstance(candidates, list) and candidates and isinstance(candidates[0], dict):
        return candidates[0]
    return None


def extract_text(body: Any) -> Optional[str]:
    """Return candidates[0].content.parts[0].text when present and non-empty."""
    candidate = _first_candidate(body)
    if candidate is None:
        return None

    content = candidate.get("content")
    if not isinstance(content, dict):
        return None

    parts = content.get("parts")
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None

    text = parts[0].get("text")
    if isinstance(text, str) and text:
        return text
    return None


def block_reason(body: Any) -> Optional[str]:
    """Return the reason content was withheld, or None if it was not."""
    candidate = _first_candidate(body)
    if candidate is not None and candidate.get("finishReason") == SAFETY_FINISH_REASON:
        return SAFETY_FINISH_REASON

    if isinstance(body, dict):
        feedback = body.get("promptFeedback")
        if isinstance(feedback, dict) and feedback.get("blockReason"):
            return str(feedback["blockReason"])

    return None


def classify(outcome: Outcome) -> ResponseKind:
    """
    Classify a gateway outcome. First match wins:

    1. Transport or API failure
    2. Non-empty generated text
    3. Content withheld by a safety filter
    4. Anything else
    """
    if isinstance(outcome, TransportError):
        return ResponseKind.TRANSPORT_ERROR
    if isinstance(outcome, GatewayError):
        return ResponseKind.API_ERROR
    if extract_text(outcome) is not None:
        return ResponseKind.OK
    if block_reason(outcome) is not None:
        return ResponseKind.CONTENT_FILTERED
    return ResponseKind.MALFORMED


def describe_error(error: GatewayError) -> str:
    """Human-readable error copy embedding the underlying cause."""
    if isinstance(error, ApiError):
        cause = str(error)
    else:
        cause = error.message or NETWORK_FALLBACK
    return f"Sorry, there was an error: {cause}. Please try again."


def interpret(outcome: Outcome) -> Turn:
    """
    Turn a gateway outcome into the assistant turn to append.

    Args:
        outcome: Decoded response body, or the GatewayError raised by send()

    Returns:
        Assistant Turn, with status=error for every non-OK classification
    """
    kind = classify(outcome)

    if kind in (ResponseKind.TRANSPORT_ERROR, ResponseKind.API_ERROR):
        return Turn.assistant(describe_error(outcome), error=True)

    if kind is ResponseKind.OK:
        return Turn.assistant(extract_text(outcome))

    if kind is ResponseKind.CONTENT_FILTERED:
        logger.warning(f"Content blocked due to: {block_reason(outcome)}")
        return Turn.assistant(FILTERED_MESSAGE, error=True)

    logger.error(f"Unexpected API response structure: {outcome!r:.500}")
    return Turn.assistant(MALFORMED_MESSAGE, error=True)
