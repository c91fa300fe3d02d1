"""Tests for the introduction, extraction and ticket creation stages."""

import pytest

from app.core.config.settings import Settings
from app.modules.ai_module.domain.constants import MESSAGES
from app.modules.ai_module.domain.models import (
    ConversationState,
    Operation,
    PlainMessage,
    Stage,
    StructuredPayload,
    Turn,
)
from app.modules.ai_module.infrastructure.nodes.event_extraction_node import (
    event_extraction_node,
    is_valid_date,
    parse_completion,
)
from app.modules.ai_module.infrastructure.nodes.introduction_node import (
    introduction_node,
    wants_ticket,
)
from app.modules.ai_module.infrastructure.nodes.ticket_creation_node import (
    ticket_creation_node,
)
from app.modules.ai_module.infrastructure.prompts import INTRODUCTION_PROMPT
from app.modules.ticket_module.application.ticket_service import TicketService


def extraction_state(**changes) -> ConversationState:
    fields = {
        "input": "My event is the Summer Gala on 25/12/2025",
        "stage": Stage.EVENT_EXTRACTION,
        "operation": Operation.EXTRACTING_EVENT,
    }
    fields.update(changes)
    return ConversationState(**fields)


@pytest.mark.parametrize(
    "text",
    ["I want to create tickets", "Tell me about EVENTS", "deploy it", "my NFT", "smart contract?"],
)
def test_intent_keywords(text):
    assert wants_ticket(text)


def test_no_intent():
    assert not wants_ticket("hello, what is adaptic?")


@pytest.mark.asyncio
async def test_introduction_with_intent_skips_model(scripted_model):
    model = scripted_model()
    state = ConversationState(input="I want to create an event")

    result = await introduction_node(state, model)

    assert model.calls == []
    assert result.next_stage is Stage.EVENT_EXTRACTION
    assert result.state.stage is Stage.EVENT_EXTRACTION
    assert result.state.operation is Operation.EXTRACTING_EVENT
    assert result.outputs == []
    assert result.state.messages == []


@pytest.mark.asyncio
async def test_introduction_without_intent_calls_model_once(scripted_model):
    model = scripted_model(["Adaptic is an NFT platform."])
    history = [Turn.human("hi"), Turn.assistant("Hello!")]
    state = ConversationState(input="what is this?", history=history)

    result = await introduction_node(state, model)

    assert len(model.calls) == 1
    assert model.calls[0]["system_prompt"] == INTRODUCTION_PROMPT
    assert model.calls[0]["history"] == history
    assert model.calls[0]["input"] == "what is this?"
    assert result.outputs == [PlainMessage(text="Adaptic is an NFT platform.")]
    assert result.next_stage is Stage.COMPLETED
    assert result.state.operation is Operation.INTRODUCING
    assert result.state.messages == ["Adaptic is an NFT platform."]
    assert result.state.ticket_object is None


@pytest.mark.asyncio
async def test_extraction_complete(scripted_model):
    model = scripted_model(["EXTRACTION_COMPLETE: Summer Gala | 25/12/2025"])

    result = await event_extraction_node(extraction_state(), model)

    assert result.state.event_name == "Summer Gala"
    assert result.state.event_date == "25/12/2025"
    assert result.next_stage is Stage.NFT_CREATION
    assert result.state.stage is Stage.NFT_CREATION
    assert result.outputs == []


@pytest.mark.asyncio
async def test_extraction_prompt_uses_missing_sentinel(scripted_model):
    model = scripted_model(["What's the date?", "What's the date?"])

    await event_extraction_node(extraction_state(), model)
    await event_extraction_node(extraction_state(event_name="Summer Gala"), model)

    assert "- Event Name: Missing" in model.calls[0]["system_prompt"]
    assert "- Event Date: Missing" in model.calls[0]["system_prompt"]
    assert "- Event Name: Summer Gala" in model.calls[1]["system_prompt"]
    assert "- Event Date: Missing" in model.calls[1]["system_prompt"]


@pytest.mark.asyncio
async def test_extraction_without_marker_asks_user(scripted_model):
    question = "Great! When is the event? Please use DD/MM/YYYY."
    model = scripted_model([question])
    state = extraction_state(event_name="Summer Gala")

    result = await event_extraction_node(state, model)

    assert result.next_stage is Stage.EVENT_EXTRACTION
    assert result.state.event_name == "Summer Gala"
    assert result.state.event_date is None
    assert result.outputs == [PlainMessage(text=question)]


@pytest.mark.asyncio
async def test_extraction_marker_not_at_start_is_a_question(scripted_model):
    reply = "Sure. EXTRACTION_COMPLETE: Summer Gala | 25/12/2025"
    model = scripted_model([reply])

    result = await event_extraction_node(extraction_state(), model)

    assert result.next_stage is Stage.EVENT_EXTRACTION
    assert result.outputs == [PlainMessage(text=reply)]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "reply",
    [
        "EXTRACTION_COMPLETE: Summer Gala",
        "EXTRACTION_COMPLETE:  | 25/12/2025",
        "EXTRACTION_COMPLETE: Summer Gala |   ",
    ],
)
async def test_malformed_marker_stays_in_extraction(scripted_model, reply):
    model = scripted_model([reply])

    result = await event_extraction_node(extraction_state(), model)

    assert result.next_stage is Stage.EVENT_EXTRACTION
    assert result.state.event_name is None
    assert result.state.event_date is None
    assert result.outputs == [PlainMessage(text=MESSAGES["incomplete_extraction"])]


@pytest.mark.asyncio
async def test_bad_date_trusted_by_default(scripted_model):
    model = scripted_model(["EXTRACTION_COMPLETE: Summer Gala | next Friday"])

    result = await event_extraction_node(extraction_state(), model)

    assert result.next_stage is Stage.NFT_CREATION
    assert result.state.event_date == "next Friday"


@pytest.mark.asyncio
async def test_bad_date_rejected_when_enforced(scripted_model):
    model = scripted_model(["EXTRACTION_COMPLETE: Summer Gala | 31/02/2025"])

    result = await event_extraction_node(extraction_state(), model, enforce_date_format=True)

    assert result.next_stage is Stage.EVENT_EXTRACTION
    assert result.state.event_name is None
    assert result.outputs == [PlainMessage(text=MESSAGES["invalid_date"])]


def test_parse_completion_splits_on_first_separator():
    assert parse_completion("EXTRACTION_COMPLETE: A | B | C") == ("A", "B | C")


@pytest.mark.parametrize(
    "value,expected",
    [("25/12/2025", True), ("31/02/2025", False), ("2025-12-25", False), ("5/1/2025", False)],
)
def test_is_valid_date(value, expected):
    assert is_valid_date(value) is expected


@pytest.mark.asyncio
async def test_ticket_creation(scripted_model, ticket_service):
    model = scripted_model()
    state = ConversationState(
        input="25/12/2025",
        stage=Stage.NFT_CREATION,
        operation=Operation.EXTRACTING_EVENT,
        event_name="Summer Gala",
        event_date="25/12/2025",
    )

    result = await ticket_creation_node(state, model, ticket_service=ticket_service)

    assert model.calls == []
    assert result.next_stage is Stage.COMPLETED
    assert result.state.operation is Operation.FINALIZING
    record = result.state.ticket_object
    assert record["eventDetails"] == {"name": "Summer Gala", "date": "25/12/2025"}
    assert record["contractDetails"] == {
        "ticketPrice": "0.1",
        "maxSupply": "100",
        "transferable": True,
        "refundable": False,
    }
    assert record["status"] == "ready_to_deploy"
    assert record["createdAt"] == "2025-06-01T12:30:45.123Z"

    [output] = result.outputs
    assert isinstance(output, StructuredPayload)
    assert output.record == record
    assert "**Event:** Summer Gala" in output.text
    assert "**Date:** 25/12/2025" in output.text
    assert "0.1 MASSA" in output.text
    assert result.state.messages == [output.text]


@pytest.mark.asyncio
async def test_ticket_creation_with_missing_fields(scripted_model, ticket_service):
    state = ConversationState(
        input="go", stage=Stage.NFT_CREATION, operation=Operation.EXTRACTING_EVENT
    )

    result = await ticket_creation_node(state, scripted_model(), ticket_service=ticket_service)

    record = result.state.ticket_object
    assert record["eventDetails"] == {"name": "Unknown Event", "date": "Unknown Date"}
    assert record["metadata"]["description"] == "NFT Ticket for Event"
    assert {"trait_type": "Date", "value": "TBD"} in record["metadata"]["attributes"]


@pytest.mark.asyncio
async def test_ticket_creation_is_deterministic_apart_from_timestamp(scripted_model, fixed_now):
    settings = Settings(openai_api_key=None)
    state = ConversationState(
        input="go",
        stage=Stage.NFT_CREATION,
        operation=Operation.EXTRACTING_EVENT,
        event_name="Summer Gala",
        event_date="25/12/2025",
    )
    first = await ticket_creation_node(
        state, scripted_model(), ticket_service=TicketService(settings, clock=lambda: fixed_now)
    )
    second = await ticket_creation_node(state, scripted_model(), ticket_service=TicketService(settings))

    first_record = dict(first.state.ticket_object)
    second_record = dict(second.state.ticket_object)
    first_record.pop("createdAt")
    second_record.pop("createdAt")
    assert first_record == second_record
