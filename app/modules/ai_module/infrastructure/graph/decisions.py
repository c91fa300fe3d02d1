"""
Transition table for the ticket conversation and the checks applied to each step
"""

import logging
from typing import Dict, FrozenSet

from app.modules.ai_module.domain.exceptions import InvalidTransitionError
from app.modules.ai_module.domain.models import ConversationState, Stage, StageResult

logger = logging.getLogger(__name__)

# Allowed edges. COMPLETED is the only terminal stage.
TRANSITIONS: Dict[Stage, FrozenSet[Stage]] = {
    Stage.INITIAL: frozenset({Stage.EVENT_EXTRACTION, Stage.COMPLETED}),
    Stage.EVENT_EXTRACTION: frozenset({Stage.NFT_CREATION, Stage.EVENT_EXTRACTION}),
    Stage.NFT_CREATION: frozenset({Stage.COMPLETED}),
    Stage.COMPLETED: frozenset(),
}


def is_terminal(stage: Stage) -> bool:
    return not TRANSITIONS[stage]


def awaits_next_turn(stage: Stage, result: StageResult) -> bool:
    """A stage routing to itself ends the run until the user replies."""
    return result.next_stage is stage


def validate_transition(
    stage: Stage, previous: ConversationState, result: StageResult
) -> None:
    """Reject results that leave the table or break the state invariants."""
    if result.next_stage not in TRANSITIONS[stage]:
        raise InvalidTransitionError(
            f"No transition from {stage.value} to {result.next_stage.value}"
        )

    updated = result.state
    if updated.stage is not result.next_stage:
        raise InvalidTransitionError(
            f"State stage {updated.stage.value} does not match routed stage "
            f"{result.next_stage.value}"
        )
    if updated.operation.rank < previous.operation.rank:
        raise InvalidTransitionError(
            f"Operation regressed from {previous.operation.value} to {updated.operation.value}"
        )
    for field in ("event_name", "event_date", "ticket_object"):
        if getattr(previous, field) and not getattr(updated, field):
            raise InvalidTransitionError(f"{field} was cleared by stage {stage.value}")
    if previous.ticket_object is not None and updated.ticket_object != previous.ticket_object:
        raise InvalidTransitionError("ticket_object cannot change once produced")
    if result.next_stage is Stage.NFT_CREATION and not updated.has_event_fields:
        raise InvalidTransitionError("Event name and date are required before ticket creation")

    logger.info(f"Transition: {stage.value} -> {result.next_stage.value}")
