"""Main entry point for the medical chat assistant API."""
import logging
from typing import Any, Dict, List, Optional
import httpx
from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware

from config import (
    CORS_ORIGINS,
    GREETING_MESSAGE,
    LOG_FORMAT,
    LOG_LEVEL,
    PORT,
    SESSION_IDLE_TTL_SECONDS,
    SYSTEM_PROMPT,
    load_gemini_config,
)
from logger import setup_logging
from models.api import MessageRequest, MessageResponse, PharmacyPayload, SessionResponse, TurnModel
from services.chat_session import ChatSession
from services.conversation_manager import ConversationManager
from services.gemini_gateway import GeminiGateway
from services.pharmacy_client import PharmacyApiError, PharmacyClient

if LOG_FORMAT == "json":
    setup_logging(LOG_LEVEL)

# Initialize logging
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Medical Chat Assistant",
    description="Chat widget backend and pharmacy registry proxy",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services (will be done on startup)
gateway: GeminiGateway = None
conversation_manager: ConversationManager = None
pharmacy_client: PharmacyClient = None


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup."""
    global gateway, conversation_manager, pharmacy_client

    logger.info("Initializing medical chat assistant services...")

    try:
        pharmacy_client = PharmacyClient()
        logger.info("Initialized PharmacyClient")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}", exc_info=True)
        raise

    # The pharmacy routes stay up without a model key; only chat is disabled
    try:
        gateway = GeminiGateway(load_gemini_config())
    except ValueError as e:
        logger.warning(f"Chat disabled: {e}")
        return
    logger.info("Initialized GeminiGateway")

    conversation_manager = ConversationManager(
        gateway,
        SYSTEM_PROMPT,
        GREETING_MESSAGE,
        idle_ttl_seconds=SESSION_IDLE_TTL_SECONDS,
    )
    logger.info("Initialized ConversationManager")

    logger.info("All services initialized successfully")


@app.on_event("shutdown")
async def shutdown_event():
    """Close open sessions and HTTP clients."""
    if conversation_manager is not None:
        conversation_manager.close_all()
    if gateway is not None:
        await gateway.aclose()
    if pharmacy_client is not None:
        pharmacy_client.close()
    logger.info("Services shut down")


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "message": "Medical Chat Assistant API"}


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "service": "medical-chat-assistant",
        "version": "1.0.0",
        "open_sessions": len(conversation_manager.session_ids()) if conversation_manager else 0,
        "chat_enabled": conversation_manager is not None,
    }


def _turns(session: ChatSession) -> List[TurnModel]:
    return [TurnModel.from_turn(turn) for turn in session.turns()]


def _require_chat() -> ConversationManager:
    if conversation_manager is None:
        raise HTTPException(status_code=503, detail="Chat is unavailable: no model API key configured")
    return conversation_manager


def _get_session(session_id: str) -> ChatSession:
    try:
        return _require_chat().get_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Chat session {session_id} not found")


def _session_response(session: ChatSession) -> SessionResponse:
    return SessionResponse(
        session_id=session.session_id,
        state=session.state,
        busy=session.busy,
        transcript=_turns(session),
    )


@app.post("/chat/sessions", response_model=SessionResponse, status_code=201)
async def open_chat_session() -> SessionResponse:
    """Open a chat session; the transcript starts with the greeting."""
    session = _require_chat().open_session()
    return _session_response(session)


@app.get("/chat/sessions/{session_id}", response_model=SessionResponse)
async def get_chat_session(session_id: str) -> SessionResponse:
    return _session_response(_get_session(session_id))


@app.post("/chat/sessions/{session_id}/messages", response_model=MessageResponse)
async def submit_message(session_id: str, request: MessageRequest) -> MessageResponse:
    """
    Submit user text to a chat session.

    Blank text and submissions made while a previous one is still in flight
    are ignored; the response then carries accepted=false and no reply.
    Remote failures are not HTTP errors here: they arrive as assistant turns
    with status "error".

    Args:
        session_id: ID returned by POST /chat/sessions
        request: MessageRequest with the user text

    Returns:
        MessageResponse with the reply (if any) and the full transcript
    """
    session = _get_session(session_id)

    logger.info(f"Submitting message to {session_id}: {request.text[:100]}")
    reply = await session.submit(request.text)

    return MessageResponse(
        session_id=session_id,
        accepted=reply is not None,
        reply=TurnModel.from_turn(reply) if reply is not None else None,
        transcript=_turns(session),
    )


@app.delete("/chat/sessions/{session_id}", status_code=204)
async def close_chat_session(session_id: str) -> Response:
    try:
        _require_chat().close_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Chat session {session_id} not found")
    return Response(status_code=204)


def _call_pharmacy_api(operation, *args) -> Any:
    """Run a pharmacy client call, mapping its failures to HTTP errors."""
    try:
        return operation(*args)
    except PharmacyApiError as e:
        raise HTTPException(status_code=e.status_code, detail={"message": e.message})
    except httpx.HTTPError as e:
        logger.error(f"Pharmacy backend unreachable: {e}", exc_info=True)
        raise HTTPException(status_code=502, detail={"message": "Pharmacy backend unreachable"})


@app.get("/pharmacies")
def list_pharmacies(
    name: Optional[str] = None,
    city: Optional[str] = None,
    is_active: Optional[bool] = None,
) -> Any:
    params: Dict[str, Any] = {}
    if name:
        params["name"] = name
    if city:
        params["city"] = city
    if is_active is not None:
        params["isActive"] = str(is_active).lower()
    return _call_pharmacy_api(pharmacy_client.list_pharmacies, params)


@app.post("/pharmacies", status_code=201)
def create_pharmacy(payload: PharmacyPayload) -> Any:
    return _call_pharmacy_api(pharmacy_client.create_pharmacy, payload.to_record())


@app.put("/pharmacies/{pharmacy_id}")
def update_pharmacy(pharmacy_id: str, payload: PharmacyPayload) -> Any:
    return _call_pharmacy_api(pharmacy_client.update_pharmacy, pharmacy_id, payload.to_record())


@app.delete("/pharmacies/{pharmacy_id}")
def delete_pharmacy(pharmacy_id: str) -> Any:
    result = _call_pharmacy_api(pharmacy_client.delete_pharmacy, pharmacy_id)
    return result if result is not None else {"deleted": pharmacy_id}


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting Medical Chat Assistant API on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
