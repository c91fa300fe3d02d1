"""Domain exceptions for the conversation agent."""

from enum import Enum


class AgentError(Exception):
    """Base exception for conversation agent errors."""


class InvalidAgentRequest(AgentError):
    """Exception raised when a request is rejected before a run starts."""


class InvalidChatHistory(InvalidAgentRequest):
    """Exception raised when chat history is not a list of [role, text] pairs."""


class ModelCallError(AgentError):
    """Exception raised when the language model call fails."""


class ModelNotConfigured(ModelCallError):
    """Exception raised when no model credentials are configured."""


class InvalidTransitionError(AgentError):
    """Exception raised when a stage routes along an unknown edge."""


class StepLimitExceeded(AgentError):
    """Exception raised when a run executes too many stages."""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"Run exceeded {limit} stage executions")


class CancelReason(str, Enum):
    TIMEOUT = "timeout"
    CLIENT_DISCONNECTED = "client_disconnected"


class RunCancelled(AgentError):
    """Exception raised when a run is cancelled by timeout or disconnect."""

    def __init__(self, reason: CancelReason):
        self.reason = reason
        super().__init__(f"Run cancelled: {reason.value}")
