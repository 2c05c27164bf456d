"""Keeps relay tasks alive and cancels them all together."""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import List, Optional, Tuple

from dmnd_proxy.shared import AbortOnDrop

logger = logging.getLogger(__name__)

_QUEUE_SIZE = 10


class TaskKind(enum.Enum):
    """The role of a task held by a manager."""

    RELAY_UP = "RelayUp"
    RELAY_DOWN = "RelayDown"


class TaskManager:
    """Hold relay tasks in a supervising task.

    Cancelling the supervising task, through the handle returned by
    ``get_aborter``, cancels every task the manager holds.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._queue: "asyncio.Queue[Tuple[TaskKind, AbortOnDrop]]" = asyncio.Queue(
            maxsize=_QUEUE_SIZE
        )
        self._held: List[Tuple[TaskKind, AbortOnDrop]] = []
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name=f"{name} task manager"
        )
        self._abort: Optional[AbortOnDrop] = AbortOnDrop(self._task)

    @classmethod
    def initialize(cls, name: str) -> "TaskManager":
        """Start a manager; must be called with a running event loop."""
        return cls(name)

    async def _run(self) -> None:
        try:
            while True:
                kind, abortable = await self._queue.get()
                self._held.append((kind, abortable))
        finally:
            logger.warning("%s task manager stopped", self.name)
            for _, abortable in self._held:
                abortable.abort()

    @property
    def held(self) -> List[TaskKind]:
        """Kinds of the tasks received so far, in arrival order."""
        return [kind for kind, _ in self._held]

    def get_aborter(self) -> Optional[AbortOnDrop]:
        """Hand out the handle of the supervising task; only the first call gets it."""
        aborter, self._abort = self._abort, None
        return aborter

    async def _add(self, kind: TaskKind, abortable: AbortOnDrop) -> None:
        if self._task.done():
            raise RuntimeError(f"{self.name} task manager is not running")
        await self._queue.put((kind, abortable))

    async def add_relay_up(self, abortable: AbortOnDrop) -> None:
        """Hand the upward relay task to the manager."""
        await self._add(TaskKind.RELAY_UP, abortable)

    async def add_relay_down(self, abortable: AbortOnDrop) -> None:
        """Hand the downward relay task to the manager."""
        await self._add(TaskKind.RELAY_DOWN, abortable)