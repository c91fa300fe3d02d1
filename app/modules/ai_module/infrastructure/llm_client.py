"""
Language model capability used by the conversation stages
"""

import logging
from typing import List, Optional, Protocol, Sequence

from langchain_core.messages import BaseMessage, SystemMessage
from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder
from openai import AsyncOpenAI, OpenAIError

from app.core.config.settings import Settings, settings as default_settings
from app.modules.ai_module.domain.exceptions import ModelCallError, ModelNotConfigured
from app.modules.ai_module.domain.models import Turn

logger = logging.getLogger(__name__)

CONVERSATION_PROMPT = ChatPromptTemplate.from_messages(
    [
        MessagesPlaceholder(variable_name="system"),
        MessagesPlaceholder(variable_name="chat_history", optional=True),
        ("human", "{input}"),
    ]
)

OPENAI_ROLES = {"system": "system", "human": "user", "ai": "assistant"}


class ChatModel(Protocol):
    """Opaque model capability; must be safe to call from concurrent runs."""

    async def invoke(
        self, system_prompt: str, history: Sequence[Turn], human_input: str
    ) -> str:
        ...


def build_messages(
    system_prompt: str, history: Sequence[Turn], human_input: str
) -> List[BaseMessage]:
    """System prompt, then prior turns, then the current input as the last human turn."""
    # Placeholders keep braces in the system prompt and input from being templated
    return CONVERSATION_PROMPT.format_messages(
        system=[SystemMessage(content=system_prompt)],
        chat_history=[turn.to_message() for turn in history],
        input=human_input,
    )


class OpenAIChatModel:
    """Chat model backed by an OpenAI-compatible endpoint."""

    def __init__(self, settings: Optional[Settings] = None, client: Optional[AsyncOpenAI] = None):
        self.settings = settings or default_settings
        if client is None:
            try:
                client = AsyncOpenAI(
                    api_key=self.settings.openai_api_key,
                    base_url=self.settings.llm_base_url,
                )
            except OpenAIError as e:
                raise ModelNotConfigured(f"Model client is not configured: {e}") from e
        self.client = client

    async def invoke(
        self, system_prompt: str, history: Sequence[Turn], human_input: str
    ) -> str:
        messages = build_messages(system_prompt, history, human_input)
        request = {
            "model": self.settings.llm_model,
            "input": [
                {"role": OPENAI_ROLES[message.type], "content": message.content}
                for message in messages
            ],
        }
        if self.settings.llm_temperature is not None:
            request["temperature"] = self.settings.llm_temperature

        try:
            response = await self.client.responses.create(**request)
        except OpenAIError as e:
            logger.error(f"❌ Model call failed: {e}")
            raise ModelCallError(f"Model call failed: {e}") from e

        return response.output_text
