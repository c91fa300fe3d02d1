"""Streaming session controller - relays one state-machine run as wire events."""

import inspect
import json
import logging
from contextlib import aclosing
from typing import AsyncIterator, Awaitable, Callable, Optional, Sequence, Union

from app.core.config.settings import Settings, settings as default_settings
from app.modules.ai_module.application.cancellation import RunCancellation
from app.modules.ai_module.domain.constants import EMBEDDED_PAYLOAD_PATTERN, MESSAGES
from app.modules.ai_module.domain.events import EventType, WireEvent
from app.modules.ai_module.domain.exceptions import (
    CancelReason,
    RunCancelled,
    StepLimitExceeded,
)
from app.modules.ai_module.domain.models import (
    ConversationState,
    Stage,
    StructuredPayload,
    Turn,
)
from app.modules.ai_module.infrastructure.graph.machine import (
    ConversationMachine,
    StageCompleted,
    StageEntered,
)
from app.modules.ai_module.infrastructure.llm_client import ChatModel

logger = logging.getLogger(__name__)

Emit = Callable[[WireEvent], Union[None, Awaitable[None]]]

USER_FACING = (EventType.MESSAGE, EventType.WAGER)


class GuardedModel:
    """Model capability whose calls are abandoned when the run is cancelled."""

    def __init__(self, model: ChatModel, cancellation: RunCancellation):
        self.model = model
        self.cancellation = cancellation

    async def invoke(
        self, system_prompt: str, history: Sequence[Turn], human_input: str
    ) -> str:
        return await self.cancellation.guard(
            self.model.invoke(system_prompt, history, human_input)
        )


def relay_text(stage: Stage, text: str) -> WireEvent:
    """Plain text, or a ticket event when the creation stage embeds [OBJ]...[/OBJ]."""
    match = EMBEDDED_PAYLOAD_PATTERN.search(text)
    if match is None or stage is not Stage.NFT_CREATION:
        return WireEvent.message(text)

    try:
        record = json.loads(match.group(1))
    except json.JSONDecodeError as e:
        logger.warning(f"Error parsing embedded ticket object: {e}")
        return WireEvent.message(MESSAGES["ticket_error"])
    if not isinstance(record, dict):
        logger.warning("Embedded ticket object is not a JSON object")
        return WireEvent.message(MESSAGES["ticket_error"])
    return WireEvent.ticket(MESSAGES["ticket_created"], record)


def relay_stage(event: StageCompleted) -> Optional[WireEvent]:
    """Wire event for the first output of a finished stage, if it produced any."""
    outputs = event.result.outputs
    if not outputs:
        return None
    if len(outputs) > 1:
        logger.debug(f"Stage {event.stage.value} produced {len(outputs)} outputs, relaying the first")

    first = outputs[0]
    if isinstance(first, StructuredPayload):
        if event.stage is Stage.NFT_CREATION:
            return WireEvent.ticket(first.text, first.record)
        return WireEvent.message(first.text)
    return relay_text(event.stage, first.text)


class StreamingSessionController:
    """Drives one run per request and translates it into wire events."""

    def __init__(
        self,
        machine: ConversationMachine,
        model: ChatModel,
        settings: Optional[Settings] = None,
    ):
        self.machine = machine
        self.model = model
        self.settings = settings or default_settings

    def new_cancellation(self) -> RunCancellation:
        return RunCancellation(self.settings.run_timeout_seconds)

    async def stream(
        self,
        state: ConversationState,
        cancellation: Optional[RunCancellation] = None,
    ) -> AsyncIterator[WireEvent]:
        """Yield wire events as soon as they are produced; always ends with ``end``."""
        cancellation = cancellation or self.new_cancellation()
        model = GuardedModel(self.model, cancellation)
        loading_sent = False
        user_message_sent = False

        async with cancellation:
            try:
                async with aclosing(self.machine.run(state, model)) as updates:
                    async for update in updates:
                        cancellation.raise_if_cancelled()

                        if isinstance(update, StageEntered):
                            if update.stage is Stage.INITIAL and not loading_sent:
                                loading_sent = True
                                yield WireEvent.loading(MESSAGES["loading"])
                            continue

                        wire_event = relay_stage(update)
                        if wire_event is None:
                            continue
                        if wire_event.type in USER_FACING:
                            user_message_sent = True
                        yield wire_event

            except RunCancelled as e:
                if e.reason is CancelReason.TIMEOUT:
                    logger.warning("Run timed out")
                    if not user_message_sent:
                        yield WireEvent.message(MESSAGES["fallback"])
                    yield WireEvent.error(MESSAGES["timeout"])
                else:
                    logger.info("Run aborted after client disconnect")
            except StepLimitExceeded as e:
                logger.error(f"❌ {e}")
                if not user_message_sent:
                    yield WireEvent.message(MESSAGES["fallback"])
                yield WireEvent.error(MESSAGES["step_limit"])
            except Exception as e:
                logger.error(f"❌ Error during conversation run: {e}", exc_info=True)
                if not user_message_sent:
                    yield WireEvent.message(MESSAGES["fallback"])
                yield WireEvent.error(str(e) or MESSAGES["server_error"])

            yield WireEvent.end()

    async def run(
        self,
        state: ConversationState,
        emit: Emit,
        cancellation: Optional[RunCancellation] = None,
    ) -> None:
        """Push every wire event of one run to ``emit`` (sync or async)."""
        async with aclosing(self.stream(state, cancellation)) as events:
            async for event in events:
                outcome = emit(event)
                if inspect.isawaitable(outcome):
                    await outcome
