import asyncio
from datetime import datetime, timezone
from typing import List, Optional, Sequence

import pytest

from app.core.config.settings import Settings
from app.modules.ai_module.domain.models import Turn
from app.modules.ticket_module.application.ticket_service import TicketService

FIXED_NOW = datetime(2025, 6, 1, 12, 30, 45, 123000, tzinfo=timezone.utc)


class ScriptedModel:
    """Model fake that replays canned replies and records every call."""

    def __init__(self, replies: Optional[List[str]] = None, error: Optional[Exception] = None):
        self.replies = list(replies or [])
        self.error = error
        self.calls = []

    async def invoke(self, system_prompt: str, history: Sequence[Turn], human_input: str) -> str:
        self.calls.append(
            {"system_prompt": system_prompt, "history": list(history), "input": human_input}
        )
        if self.error is not None:
            raise self.error
        return self.replies.pop(0)


class HangingModel:
    """Model fake whose call never resolves until cancelled."""

    def __init__(self):
        self.started = asyncio.Event()
        self.cancelled = False

    async def invoke(self, system_prompt: str, history: Sequence[Turn], human_input: str) -> str:
        self.started.set()
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return ""


@pytest.fixture
def test_settings():
    return Settings(
        openai_api_key=None,
        run_timeout_seconds=5.0,
        max_stage_executions=100,
        enforce_date_format=False,
    )


@pytest.fixture
def ticket_service(test_settings):
    return TicketService(test_settings, clock=lambda: FIXED_NOW)


@pytest.fixture
def scripted_model():
    return ScriptedModel


@pytest.fixture
def hanging_model():
    return HangingModel()


@pytest.fixture
def fixed_now():
    return FIXED_NOW
