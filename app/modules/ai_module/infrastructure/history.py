"""
Adapter from wire-level chat history to conversation turns
"""

import json
import logging
from typing import List, Sequence, Tuple

from app.modules.ai_module.domain.exceptions import InvalidChatHistory
from app.modules.ai_module.domain.models import Role, Turn

logger = logging.getLogger(__name__)

ROLE_LABELS = {
    "human": Role.HUMAN,
    "assistant": Role.ASSISTANT,
    "ai": Role.ASSISTANT,
}


def to_turns(pairs: Sequence[Tuple[str, str]]) -> List[Turn]:
    """Convert (role label, text) pairs to turns, preserving order."""
    turns = []
    for role_label, text in pairs:
        role = ROLE_LABELS.get(role_label.lower())
        if role is None:
            logger.warning(
                f"Unknown role '{role_label}' in chat history. Treating as human message."
            )
            role = Role.HUMAN
        turns.append(Turn(role=role, text=text))
    return turns


def validate_pairs(value: object) -> List[Tuple[str, str]]:
    """Check a decoded chat history is a list of [role, text] string pairs."""
    if not isinstance(value, list):
        raise InvalidChatHistory("Chat history must be an array.")

    pairs = []
    for index, item in enumerate(value):
        if (
            not isinstance(item, (list, tuple))
            or len(item) != 2
            or not all(isinstance(part, str) for part in item)
        ):
            raise InvalidChatHistory(
                f"Chat history entry {index} must be a [role, text] pair of strings."
            )
        pairs.append((item[0], item[1]))
    return pairs


def parse_chat_history(raw: str) -> List[Tuple[str, str]]:
    """Decode a JSON-encoded chat history; empty input means no history."""
    if not raw:
        return []
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidChatHistory(f"Chat history is not valid JSON: {e.msg}") from e
    return validate_pairs(decoded)
