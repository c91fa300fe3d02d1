"""
Conversation state machine - executes stage handlers along the transition table
"""

import logging
from typing import AsyncIterator, Awaitable, Callable, Dict, Union

from pydantic import BaseModel, ConfigDict

from app.modules.ai_module.domain.exceptions import StepLimitExceeded
from app.modules.ai_module.domain.models import ConversationState, Stage, StageResult
from app.modules.ai_module.infrastructure.graph.decisions import (
    awaits_next_turn,
    is_terminal,
    validate_transition,
)
from app.modules.ai_module.infrastructure.llm_client import ChatModel

logger = logging.getLogger(__name__)

StageHandler = Callable[[ConversationState, ChatModel], Awaitable[StageResult]]


class StageEntered(BaseModel):
    """A stage is about to execute."""

    model_config = ConfigDict(frozen=True)

    stage: Stage


class StageCompleted(BaseModel):
    """A stage finished and its transition was accepted."""

    model_config = ConfigDict(frozen=True)

    stage: Stage
    result: StageResult


MachineEvent = Union[StageEntered, StageCompleted]


class ConversationMachine:
    """Runs one conversation turn from the state's current stage."""

    def __init__(self, handlers: Dict[Stage, StageHandler], max_stage_executions: int = 100):
        self.handlers = handlers
        self.max_stage_executions = max_stage_executions

    async def run(
        self, state: ConversationState, model: ChatModel
    ) -> AsyncIterator[MachineEvent]:
        """Yield stage events in execution order until the run ends."""
        executions = 0
        while not is_terminal(state.stage):
            if executions >= self.max_stage_executions:
                raise StepLimitExceeded(self.max_stage_executions)
            executions += 1

            stage = state.stage
            yield StageEntered(stage=stage)

            # Each stage starts with an empty message list
            state = state.advance(messages=[])
            result = await self.handlers[stage](state, model)
            validate_transition(stage, state, result)
            yield StageCompleted(stage=stage, result=result)

            if awaits_next_turn(stage, result):
                logger.info(f"⏸️ Stage {stage.value} awaiting next user turn")
                return
            state = result.state

        logger.info("🏁 Conversation reached a terminal stage")
