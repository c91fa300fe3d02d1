"""Wire events pushed to the client during a run."""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class EventType(str, Enum):
    LOADING = "loading"
    MESSAGE = "message"
    WAGER = "wager"
    ERROR = "error"
    END = "end"


class WireEvent(BaseModel):
    """One event of the response stream."""

    model_config = ConfigDict(frozen=True)

    type: EventType
    content: Optional[str] = None
    wager: Optional[Dict[str, Any]] = None
    error_message: Optional[str] = None

    @classmethod
    def loading(cls, content: str) -> "WireEvent":
        return cls(type=EventType.LOADING, content=content)

    @classmethod
    def message(cls, content: str) -> "WireEvent":
        return cls(type=EventType.MESSAGE, content=content)

    @classmethod
    def ticket(cls, content: str, record: Dict[str, Any]) -> "WireEvent":
        return cls(type=EventType.WAGER, content=content, wager=record)

    @classmethod
    def error(cls, message: str) -> "WireEvent":
        return cls(type=EventType.ERROR, error_message=message)

    @classmethod
    def end(cls) -> "WireEvent":
        return cls(type=EventType.END)

    def to_wire(self) -> Dict[str, Any]:
        """JSON object in the shape clients expect for this event type."""
        if self.type is EventType.ERROR:
            return {"type": self.type.value, "payload": {"message": self.error_message}}
        if self.type is EventType.END:
            return {"type": self.type.value}
        return {"type": self.type.value, "content": self.content, "wager": self.wager}
