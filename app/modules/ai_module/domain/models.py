"""AI domain models and data structures."""

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from pydantic import BaseModel, ConfigDict, Field, model_validator


class Role(str, Enum):
    """Speaker of a historical turn."""

    HUMAN = "human"
    ASSISTANT = "assistant"


class Operation(str, Enum):
    """High-level task of the conversation, in advancing order."""

    NONE = "none"
    INTRODUCING = "introducing"
    EXTRACTING_EVENT = "extracting_event"
    FINALIZING = "finalizing"

    @property
    def rank(self) -> int:
        return list(Operation).index(self)


class Stage(str, Enum):
    """States of the ticket conversation state machine."""

    INITIAL = "initial"
    EVENT_EXTRACTION = "event_extraction"
    NFT_CREATION = "nft_creation"
    COMPLETED = "completed"


class Turn(BaseModel):
    """One historical utterance."""

    model_config = ConfigDict(frozen=True)

    role: Role
    text: str

    @classmethod
    def human(cls, text: str) -> "Turn":
        return cls(role=Role.HUMAN, text=text)

    @classmethod
    def assistant(cls, text: str) -> "Turn":
        return cls(role=Role.ASSISTANT, text=text)

    def to_message(self) -> BaseMessage:
        if self.role is Role.ASSISTANT:
            return AIMessage(content=self.text)
        return HumanMessage(content=self.text)


class PlainMessage(BaseModel):
    """Text relayed to the user as-is."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["message"] = "message"
    text: str


class StructuredPayload(BaseModel):
    """Text accompanied by a structured record for the client."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["payload"] = "payload"
    text: str
    record: Dict[str, Any]


StageOutput = Annotated[Union[PlainMessage, StructuredPayload], Field(discriminator="kind")]


class ConversationState(BaseModel):
    """State threaded through the stages of one run.

    Instances are immutable; stage handlers return updated copies.
    """

    model_config = ConfigDict(frozen=True)

    input: str = Field(..., min_length=1, description="Latest user utterance")
    history: List[Turn] = Field(default_factory=list, description="Prior turns")
    messages: List[str] = Field(
        default_factory=list, description="Assistant lines of the current stage"
    )
    operation: Operation = Operation.NONE
    stage: Stage = Stage.INITIAL
    event_name: Optional[str] = None
    event_date: Optional[str] = None
    ticket_object: Optional[Dict[str, Any]] = None

    @model_validator(mode="after")
    def _ticket_only_when_completed(self) -> "ConversationState":
        if self.ticket_object is not None and self.stage is not Stage.COMPLETED:
            raise ValueError("ticket_object can only be set on a completed conversation")
        return self

    @property
    def has_event_fields(self) -> bool:
        return bool(self.event_name) and bool(self.event_date)

    def advance(self, **changes: Any) -> "ConversationState":
        """Return a validated copy with ``changes`` applied."""
        data = self.model_dump()
        data.update(changes)
        return ConversationState.model_validate(data)


class StageResult(BaseModel):
    """Outcome of one stage handler execution."""

    model_config = ConfigDict(frozen=True)

    state: ConversationState
    outputs: List[StageOutput] = Field(default_factory=list)
    next_stage: Stage
