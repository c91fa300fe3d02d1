"""
Ticket creation node - builds the ticket-issuance request without a model call
"""

import logging

from app.modules.ai_module.domain.models import (
    ConversationState,
    Operation,
    Stage,
    StageResult,
    StructuredPayload,
)
from app.modules.ai_module.infrastructure.llm_client import ChatModel
from app.modules.ticket_module.application.ticket_service import TicketService

logger = logging.getLogger(__name__)


async def ticket_creation_node(
    state: ConversationState, model: ChatModel, ticket_service: TicketService
) -> StageResult:
    """Creates the NFT ticket object from the collected event fields"""
    if not state.has_event_fields:
        logger.warning("Creating ticket with missing event fields, using placeholders")

    ticket = ticket_service.create_ticket_with_defaults(state.event_name, state.event_date)
    summary = ticket_service.summarize(ticket)
    record = ticket.to_record()

    return StageResult(
        state=state.advance(
            operation=Operation.FINALIZING,
            stage=Stage.COMPLETED,
            ticket_object=record,
            messages=[summary],
        ),
        outputs=[StructuredPayload(text=summary, record=record)],
        next_stage=Stage.COMPLETED,
    )
