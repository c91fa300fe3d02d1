"""
Event extraction node - collects the event name and date through the model
"""

import logging
from datetime import datetime
from typing import Optional, Tuple

from app.modules.ai_module.domain.constants import (
    DATE_FORMAT,
    DATE_PATTERN,
    EXTRACTION_MARKER,
    FIELD_SEPARATOR,
    MESSAGES,
    MISSING_FIELD,
)
from app.modules.ai_module.domain.models import (
    ConversationState,
    Operation,
    PlainMessage,
    Stage,
    StageResult,
)
from app.modules.ai_module.infrastructure.llm_client import ChatModel
from app.modules.ai_module.infrastructure.prompts import EVENT_EXTRACTION_PROMPT, render

logger = logging.getLogger(__name__)


def parse_completion(reply: str) -> Optional[Tuple[str, str]]:
    """Return (name, date) from a completion reply, or None when malformed."""
    remainder = reply[len(EXTRACTION_MARKER):]
    if FIELD_SEPARATOR not in remainder:
        return None
    name, date = (part.strip() for part in remainder.split(FIELD_SEPARATOR, 1))
    if not name or not date:
        return None
    return name, date


def is_valid_date(value: str) -> bool:
    """DD/MM/YYYY and an actual calendar date."""
    if not DATE_PATTERN.match(value):
        return False
    try:
        datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        return False
    return True


def _awaiting_input(state: ConversationState, question: str) -> StageResult:
    return StageResult(
        state=state.advance(
            operation=Operation.EXTRACTING_EVENT,
            stage=Stage.EVENT_EXTRACTION,
            messages=[question],
        ),
        outputs=[PlainMessage(text=question)],
        next_stage=Stage.EVENT_EXTRACTION,
    )


async def event_extraction_node(
    state: ConversationState, model: ChatModel, enforce_date_format: bool = False
) -> StageResult:
    """Asks the model for the event fields and parses its completion marker"""
    system_prompt = render(
        EVENT_EXTRACTION_PROMPT,
        {
            "event_name": state.event_name or MISSING_FIELD,
            "event_date": state.event_date or MISSING_FIELD,
        },
    )
    reply = await model.invoke(system_prompt, state.history, state.input)

    if not reply.startswith(EXTRACTION_MARKER):
        logger.info("💬 Extraction incomplete - asking the user for more details")
        return _awaiting_input(state, reply)

    fields = parse_completion(reply)
    if fields is None:
        logger.warning(f"Malformed extraction marker in model reply: '{reply[:80]}'")
        return _awaiting_input(state, MESSAGES["incomplete_extraction"])

    event_name, event_date = fields
    if not is_valid_date(event_date):
        logger.warning(f"Extracted date '{event_date}' is not DD/MM/YYYY")
        if enforce_date_format:
            return _awaiting_input(state, MESSAGES["invalid_date"])

    logger.info(f"✅ Extracted event '{event_name}' on {event_date}")
    return StageResult(
        state=state.advance(
            operation=Operation.EXTRACTING_EVENT,
            stage=Stage.NFT_CREATION,
            event_name=event_name,
            event_date=event_date,
            messages=[],
        ),
        outputs=[],
        next_stage=Stage.NFT_CREATION,
    )
