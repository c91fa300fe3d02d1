"""Ticket agent API routes streaming conversation events over SSE."""

import asyncio
import json
import logging
from typing import AsyncIterator, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, StreamingResponse

from api.schemas.agent import AgentRequest, ErrorResponse
from app.modules.ai_module.application.ai_service import AIService
from app.modules.ai_module.domain.events import WireEvent
from app.modules.ai_module.domain.exceptions import CancelReason, InvalidAgentRequest
from app.modules.ai_module.domain.models import ConversationState
from app.modules.ai_module.infrastructure.history import parse_chat_history, validate_pairs
from app.modules.ai_module.infrastructure.llm_client import OpenAIChatModel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Ticket Agent"])

SSE_HEADERS = {"Cache-Control": "no-cache", "Connection": "keep-alive"}

# Global AI service instance
_ai_service = None


def get_ai_service() -> AIService:
    """Dependency injection for the AI service."""
    global _ai_service
    if _ai_service is None:
        _ai_service = AIService(model=OpenAIChatModel())
    return _ai_service


def format_sse(event: WireEvent) -> str:
    return f"data: {json.dumps(event.to_wire())}\n\n"


def bad_request(error: InvalidAgentRequest) -> JSONResponse:
    logger.warning(f"Rejected agent request: {error}")
    error_response = ErrorResponse(error="invalid_request", message=str(error))
    return JSONResponse(status_code=400, content=error_response.model_dump(mode="json"))


def stream_run(ai_service: AIService, state: ConversationState) -> StreamingResponse:
    cancellation = ai_service.new_cancellation()

    async def event_generator() -> AsyncIterator[str]:
        try:
            async for event in ai_service.stream_events(state, cancellation):
                yield format_sse(event)
        except asyncio.CancelledError:
            # Raised into the stream when the client disconnects
            cancellation.cancel(CancelReason.CLIENT_DISCONNECTED)
            raise

    return StreamingResponse(
        event_generator(), media_type="text/event-stream", headers=SSE_HEADERS
    )


@router.get("/agent")
async def agent_stream(
    input: Optional[str] = Query(default=None, description="Latest user utterance"),
    chat_history: Optional[str] = Query(
        default=None, description="JSON list of [role, text] pairs"
    ),
    ai_service: AIService = Depends(get_ai_service),
):
    """Run one conversation turn and stream its events."""
    try:
        pairs = parse_chat_history(chat_history or "")
        state = ai_service.build_initial_state(input or "", pairs)
    except InvalidAgentRequest as e:
        return bad_request(e)
    return stream_run(ai_service, state)


@router.post("/agent")
async def agent_stream_body(
    request: AgentRequest,
    ai_service: AIService = Depends(get_ai_service),
):
    """Same as GET /api/agent with the turn in a JSON body."""
    try:
        pairs = validate_pairs(request.chat_history)
        state = ai_service.build_initial_state(request.input, pairs)
    except InvalidAgentRequest as e:
        return bad_request(e)
    return stream_run(ai_service, state)
