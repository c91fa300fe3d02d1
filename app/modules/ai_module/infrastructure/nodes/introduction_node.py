"""
Introduction node - presents Adaptic or hands off to event extraction
"""

import logging

from app.modules.ai_module.domain.constants import INTENT_PATTERN
from app.modules.ai_module.domain.models import (
    ConversationState,
    Operation,
    PlainMessage,
    Stage,
    StageResult,
)
from app.modules.ai_module.infrastructure.llm_client import ChatModel
from app.modules.ai_module.infrastructure.prompts import INTRODUCTION_PROMPT, render

logger = logging.getLogger(__name__)


def wants_ticket(user_input: str) -> bool:
    """True when the input asks to create an event, ticket or contract."""
    return INTENT_PATTERN.search(user_input.lower()) is not None


async def introduction_node(state: ConversationState, model: ChatModel) -> StageResult:
    """Introduces Adaptic, or skips straight to extraction on ticket intent"""
    logger.info(f"👋 Introduction: '{state.input[:50]}'")

    if wants_ticket(state.input):
        logger.info("🎫 Ticket intent detected - moving to event extraction")
        return StageResult(
            state=state.advance(
                operation=Operation.EXTRACTING_EVENT,
                stage=Stage.EVENT_EXTRACTION,
                messages=[],
            ),
            outputs=[],
            next_stage=Stage.EVENT_EXTRACTION,
        )

    reply = await model.invoke(render(INTRODUCTION_PROMPT, {}), state.history, state.input)
    return StageResult(
        state=state.advance(
            operation=Operation.INTRODUCING,
            stage=Stage.COMPLETED,
            messages=[reply],
        ),
        outputs=[PlainMessage(text=reply)],
        next_stage=Stage.COMPLETED,
    )
