"""AI service for handling ticket conversations."""

import logging
from typing import AsyncIterator, Optional, Sequence, Tuple

from app.core.config.settings import Settings, settings as default_settings
from app.modules.ai_module.application.cancellation import RunCancellation
from app.modules.ai_module.application.session_controller import StreamingSessionController
from app.modules.ai_module.domain.events import WireEvent
from app.modules.ai_module.domain.exceptions import InvalidAgentRequest
from app.modules.ai_module.domain.models import ConversationState
from app.modules.ai_module.infrastructure.graph.builder import build_ticket_machine
from app.modules.ai_module.infrastructure.history import to_turns
from app.modules.ai_module.infrastructure.llm_client import ChatModel
from app.modules.ticket_module.application.ticket_service import TicketService

logger = logging.getLogger(__name__)


class AIService:
    """Service for handling AI-powered ticket conversations.

    Holds no per-conversation state: callers resubmit the full history on
    every turn.
    """

    def __init__(
        self,
        model: ChatModel,
        settings: Optional[Settings] = None,
        ticket_service: Optional[TicketService] = None,
    ):
        self.settings = settings or default_settings
        self.machine = build_ticket_machine(ticket_service, self.settings)
        self.controller = StreamingSessionController(self.machine, model, self.settings)

    def build_initial_state(
        self, user_input: str, chat_history: Sequence[Tuple[str, str]] = ()
    ) -> ConversationState:
        """Fresh state for one request; raises InvalidAgentRequest on empty input."""
        if not user_input:
            raise InvalidAgentRequest("Input query parameter is required")
        return ConversationState(input=user_input, history=to_turns(chat_history))

    def new_cancellation(self) -> RunCancellation:
        return self.controller.new_cancellation()

    def stream_events(
        self,
        state: ConversationState,
        cancellation: Optional[RunCancellation] = None,
    ) -> AsyncIterator[WireEvent]:
        """Wire events of one run, in emission order."""
        return self.controller.stream(state, cancellation)
