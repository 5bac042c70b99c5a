"""FIFO mutual exclusion for create-pane-then-write sequences.

Creating a Zellij pane moves focus to it, and ``write-chars`` targets whichever
pane has focus. Two interleaved create+write sequences would type one caller's
command into the other's pane, so the whole sequence runs under this lock.

Ownership is handed directly to the next waiter on release, so a newcomer can
never overtake a queued acquirer. There is no timeout: a holder that never
releases stalls the queue. Prefer ``async with lock:`` so every exit path
releases.
"""

from __future__ import annotations

import asyncio
from collections import deque
from types import TracebackType


class FifoLock:
    """Cooperative lock granting ownership strictly in request order."""

    def __init__(self) -> None:
        self._held = False
        self._waiters: deque[asyncio.Future[None]] = deque()

    @property
    def locked(self) -> bool:
        return self._held

    @property
    def waiting(self) -> int:
        return len(self._waiters)

    async def acquire(self) -> None:
        """Wait until every earlier acquirer has released, then take ownership."""

        if not self._held and not self._waiters:
            self._held = True
            return

        waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        try:
            await waiter
        except asyncio.CancelledError:
            if waiter.done() and not waiter.cancelled():
                # Ownership was handed over just before the cancellation landed.
                self.release()
            elif waiter in self._waiters:
                self._waiters.remove(waiter)
            raise

    def release(self) -> None:
        """Pass ownership to the oldest waiter, or return to idle."""

        if not self._held:
            raise RuntimeError("FifoLock.release() called on an unlocked lock")
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)
                return
        self._held = False

    async def __aenter__(self) -> "FifoLock":
        await self.acquire()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()


__all__ = ["FifoLock"]
