"""Per-workspace readers/writer locks.

Every operation that touches a workspace's working tree or HEAD takes the
exclusive side; operations that only read (or only refresh remote-tracking
refs) take the shared side. Waiting writers block new readers, so a stream of
listings cannot starve a commit-push.
"""
import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator


class WorkspaceLock:
    """An asyncio readers/writer lock with writer preference."""

    def __init__(self) -> None:
        self._cond = asyncio.Condition()
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    @property
    def locked(self) -> bool:
        return self._writer or self._readers > 0

    @asynccontextmanager
    async def shared(self) -> AsyncIterator[None]:
        async with self._cond:
            await self._cond.wait_for(
                lambda: not self._writer and self._waiting_writers == 0
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
    async def exclusive(self) -> AsyncIterator[None]:
        async with self._cond:
            self._waiting_writers += 1
            try:
                await self._cond.wait_for(
                    lambda: not self._writer and self._readers == 0
                )
            except BaseException:
                self._waiting_writers -= 1
                # Readers may have been held back only by this waiter
                self._cond.notify_all()
                raise
            self._waiting_writers -= 1
            self._writer = True
        try:
            yield
        finally:
            async with self._cond:
                self._writer = False
                self._cond.notify_all()


class WorkspaceLocks:
    """Registry handing out one WorkspaceLock per workspace path."""

    def __init__(self) -> None:
        self._locks: dict[str, WorkspaceLock] = {}

    def get(self, path: Path) -> WorkspaceLock:
        key = str(path)
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = WorkspaceLock()
        return lock

    def exclusive(self, path: Path):
        return self.get(path).exclusive()

    def shared(self, path: Path):
        return self.get(path).shared()

    def reset(self) -> None:
        """Forget all locks (they are bound to the event loop that first used them)."""
        self._locks.clear()


workspace_locks = WorkspaceLocks()
