"""
Machine builder for the ticket conversation - binds services to stage handlers
"""

import logging
from functools import partial
from typing import Optional

from app.core.config.settings import Settings, settings as default_settings
from app.modules.ai_module.domain.models import Stage
from app.modules.ai_module.infrastructure.graph.machine import ConversationMachine
from app.modules.ai_module.infrastructure.nodes.event_extraction_node import (
    event_extraction_node,
)
from app.modules.ai_module.infrastructure.nodes.introduction_node import introduction_node
from app.modules.ai_module.infrastructure.nodes.ticket_creation_node import (
    ticket_creation_node,
)
from app.modules.ticket_module.application.ticket_service import TicketService

logger = logging.getLogger(__name__)


def build_ticket_machine(
    ticket_service: Optional[TicketService] = None, settings: Optional[Settings] = None
) -> ConversationMachine:
    """Builds the state machine with one handler per non-terminal stage"""
    settings = settings or default_settings
    ticket_service = ticket_service or TicketService(settings)

    extraction_with_policy = partial(
        event_extraction_node, enforce_date_format=settings.enforce_date_format
    )
    ticket_creation_with_service = partial(ticket_creation_node, ticket_service=ticket_service)

    handlers = {
        Stage.INITIAL: introduction_node,
        Stage.EVENT_EXTRACTION: extraction_with_policy,
        Stage.NFT_CREATION: ticket_creation_with_service,
    }
    return ConversationMachine(handlers, max_stage_executions=settings.max_stage_executions)
