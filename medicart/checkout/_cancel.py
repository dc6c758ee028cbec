"""
CancelToken: one per payment flow.

Every external call is raced against the token. Once cancelled, the call's
task is cancelled and whatever it would have returned is dropped.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import structlog

logger = structlog.get_logger()


class OperationCancelled(Exception):
    """The flow was abandoned while the call was in flight."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class CancelToken:
    def __init__(self, attempt_id: str) -> None:
        self.attempt_id = attempt_id
        self._event = asyncio.Event()
        self._reason: str | None = None

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str = "abandoned") -> bool:
        """Cancel the token. Returns False if it was already cancelled."""
        if self.is_cancelled:
            return False
        self._reason = reason
        self._event.set()
        logger.info("token_cancelled", attempt_id=self.attempt_id, reason=reason)
        return True

    def check(self) -> None:
        if self.is_cancelled:
            raise OperationCancelled(self._reason or "abandoned")

    async def race[T](self, call: Callable[[], Awaitable[T]]) -> T:
        """
        Run ``call()`` until it finishes or the token is cancelled.

        Raises:
            OperationCancelled: the token was cancelled first (or already).
        """
        self.check()
        work = asyncio.ensure_future(call())
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({work, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not work.done():
                work.cancel()
        # A response landing in the same tick as the cancel is still late
        self.check()
        return work.result()


__all__ = ("OperationCancelled", "CancelToken")
