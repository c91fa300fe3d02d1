"""API schemas for the ticket agent."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class AgentRequest(BaseModel):
    """Request body for one conversation turn."""

    input: str = Field(default="", description="Latest user utterance")
    chat_history: List[Any] = Field(
        default_factory=list, description="Prior turns as [role, text] pairs"
    )


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    details: Optional[Dict[str, Any]] = Field(
        default=None, description="Additional error details"
    )
    timestamp: datetime = Field(
        default_factory=datetime.now, description="Error timestamp"
    )


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str = Field(default="healthy", description="Service status")
    timestamp: datetime = Field(
        default_factory=datetime.now, description="Health check timestamp"
    )
    version: str = Field(default="1.0.0", description="API version")
