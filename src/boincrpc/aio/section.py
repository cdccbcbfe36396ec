# SPDX-FileCopyrightText: 2020-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

from asyncio import AbstractEventLoop, CancelledError, Future, get_running_loop
from collections import deque
from typing import Self

from . import exceptions

__all__ = 'ExclusiveSection',  # noqa: COM818


class WaiterQueue[T](deque[T]):
    def discard(self, value: T) -> None:
        try:  # noqa: SIM105
            self.remove(value)
        except ValueError:
            pass


class ExclusiveSection:
    """
    A first-in first-out mutual exclusion primitive.

    Tasks enter the section in the order in which they asked for it. When the
    section is left, ownership is handed over directly to the next waiting
    task, so a task that arrives later can never overtake the ones already
    queued. A task that is cancelled while waiting simply leaves the queue.
    """

    def __init__(self) -> None:
        self._waiters = WaiterQueue[Future[None]]()
        self._locked = False
        self._closed = False

    def __repr__(self) -> str:
        state = 'closed' if self._closed else 'locked' if self._locked else 'unlocked'
        return f'<{self.__class__.__qualname__}: {state}, waiters={self.waiters}>'

    @property
    def _loop(self) -> AbstractEventLoop:
        loop = get_running_loop()
        if self.__dict__.setdefault('_loop', loop) is not loop:
            raise RuntimeError(f'{self!r} is bound to a different event loop')
        return loop

    @property
    def locked(self) -> bool:
        return self._locked

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def waiters(self) -> int:
        return sum(1 for future in self._waiters if not future.done())

    def acquire_nowait(self) -> None:
        if self._closed:
            raise exceptions.ClosedResourceError
        if self._locked or self.waiters:
            raise exceptions.WouldBlock
        self._locked = True

    async def acquire(self) -> None:
        try:
            self.acquire_nowait()
        except exceptions.WouldBlock:
            future = self._loop.create_future()
            self._waiters.append(future)
            try:
                await future
            except CancelledError:
                self._waiters.discard(future)
                if future.done() and not future.cancelled() and future.exception() is None:
                    # ownership was handed to us just before we got cancelled, pass it on
                    self.release()
                raise

    def release(self) -> None:
        if not self._locked:
            raise RuntimeError('cannot release an exclusive section that was not acquired')
        while self._waiters:
            future = self._waiters.popleft()
            if not future.done():
                future.set_result(None)  # the section stays locked, it now belongs to the waiter
                return
        self._locked = False

    def close(self) -> None:
        """Refuse entry to all the queued and future tasks. The current owner is not affected."""
        if self._closed:
            return
        self._closed = True
        while self._waiters:
            future = self._waiters.popleft()
            if not future.done():
                future.set_exception(exceptions.ClosedResourceError())

    async def __aenter__(self) -> Self:
        await self.acquire()
        return self

    async def __aexit__(self, exc_type: object, exc_value: object, exc_traceback: object) -> None:
        self.release()
