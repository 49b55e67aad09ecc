"""Services for the medical chat assistant."""
from .transcript_store import TranscriptStore
from .request_composer import RequestComposer, EmptyInputError
from .gemini_gateway import (
    GeminiGateway,
    GatewayError,
    TransportError,
    RequestTimeoutError,
    ApiError,
    PayloadTooLargeError,
)
from .response_interpreter import ResponseKind, classify, interpret
from .chat_session import ChatSession
from .conversation_manager import ConversationManager
from .pharmacy_client import PharmacyClient, PharmacyApiError

__all__ = ['TranscriptStore', 'RequestComposer', 'EmptyInputError', 'GeminiGateway', 'GatewayError', 'TransportError', 'RequestTimeoutError', 'ApiError', 'PayloadTooLargeError', 'ResponseKind', 'classify', 'interpret', 'ChatSession', 'ConversationManager', 'PharmacyClient', 'PharmacyApiError']
