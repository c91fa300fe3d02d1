"""Per-run cancellation signal: wall-clock timeout or client disconnect."""

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from app.modules.ai_module.domain.exceptions import CancelReason, RunCancelled

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RunCancellation:
    """Cancellation scope for one run.

    Entering the scope arms the timeout timer; leaving it disarms the timer on
    every exit path so it never fires after the response has closed.
    """

    def __init__(self, timeout_seconds: float):
        self.timeout_seconds = timeout_seconds
        self.reason: Optional[CancelReason] = None
        self._event = asyncio.Event()
        self._timer: Optional[asyncio.TimerHandle] = None

    async def __aenter__(self) -> "RunCancellation":
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.timeout_seconds, self.cancel, CancelReason.TIMEOUT)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        self.release()
        return False

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: CancelReason = CancelReason.CLIENT_DISCONNECTED) -> None:
        if self._event.is_set():
            return
        self.reason = reason
        self._event.set()
        logger.info(f"Run cancellation requested: {reason.value}")

    def release(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise RunCancelled(self.reason)

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless cancellation is requested first.

        On cancellation the in-flight work is cancelled and RunCancelled raised.
        """
        if self.cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise RunCancelled(self.reason)

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not task.done():
                task.cancel()

        if task in done:
            return task.result()
        raise RunCancelled(self.reason)
