"""FastAPI routes for the lead qualification chat."""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.core.agent import ChatOrchestrator
from app.core.errors import RelayError, SessionNotFound, UnknownIndustry
from app.models.schemas import (
    ChatRequest,
    ErrorResponse,
    StartChatRequest,
    StartChatResponse,
    StructuredCompletion,
    Turn,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])

INVALID_INDUSTRY = "Invalid industry."
CHAT_NOT_INITIATED = "Chat not initiated."
AI_FAILURE = "Failed to get response from AI."


def get_orchestrator(request: Request) -> ChatOrchestrator:
    """Orchestrator built at startup (see app.main.lifespan)."""
    return request.app.state.orchestrator


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@router.post(
    "/start-chat",
    response_model=StartChatResponse,
    responses={400: {"model": ErrorResponse}},
)
def start_chat(req: StartChatRequest, orchestrator: ChatOrchestrator = Depends(get_orchestrator)):
    """Start (or restart) a conversation for a lead and return the opening message."""
    logger.info("Received start-chat request: phone=%s industry=%s", req.phone, req.industry)
    try:
        reply, history = orchestrator.start_chat(req.phone, req.industry, req.name)
    except UnknownIndustry:
        logger.error("Invalid industry: %s", req.industry)
        return _error(400, INVALID_INDUSTRY)
    return StartChatResponse(
        reply=reply,
        history=[Turn(role=t.role, content=t.content) for t in history],
    )


@router.post(
    "/chat",
    response_model=StructuredCompletion,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def chat(req: ChatRequest, orchestrator: ChatOrchestrator = Depends(get_orchestrator)):
    """Continue a started conversation; returns reply, lead classification and extracted metadata."""
    logger.info("Received chat request: phone=%s industry=%s", req.phone, req.industry)
    try:
        return await orchestrator.continue_chat(req.phone, req.industry, req.message)
    except SessionNotFound:
        logger.error("Chat not initiated for phone: %s", req.phone)
        return _error(400, CHAT_NOT_INITIATED)
    except RelayError:
        logger.exception("Completion failed for %s", req.phone)
        return _error(500, AI_FAILURE)


@router.get("/health")
def health() -> dict:
    """Health check."""
    return {"status": "ok"}
