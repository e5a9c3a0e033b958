"""Reader-writer lock for coroutines sharing one event loop."""

import asyncio
from contextlib import asynccontextmanager


class AsyncRWLock:
    """Many concurrent readers or one writer.
    
    Writers are preferred: once a writer is waiting, new readers queue
    behind it so a steady stream of reads cannot starve writes.
    """
    
    def __init__(self):
        self._cond = asyncio.Condition()
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0
    
    @property
    def readers(self) -> int:
        return self._readers
    
    @property
    def writer_active(self) -> bool:
        return self._writer
    
    @asynccontextmanager
    async def read(self):
        """Hold the lock in shared mode."""
        async with self._cond:
            await self._cond.wait_for(
                lambda: not self._writer and self._writers_waiting == 0
            )
            self._readers += 1
        try:
            yield
        finally:
            async with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()
    
    @asynccontextmanager
    async def write(self):
        """Hold the lock in exclusive mode."""
        async with self._cond:
            self._writers_waiting += 1
            try:
                await self._cond.wait_for(
                    lambda: not self._writer and self._readers == 0
                )
            finally:
                self._writers_waiting -= 1
                # readers blocked on a cancelled writer must re-check
                self._cond.notify_all()
            self._writer = True
        try:
            yield
        finally:
            async with self._cond:
                self._writer = False
                self._cond.notify_all()
