"""Shared helpers: task handles that cancel on release, user ids and version rolling."""

from __future__ import annotations

import asyncio
import contextlib
import enum
from dataclasses import dataclass
from typing import Any, Optional, Tuple

VERSION_ROLLING_MASK_LIMIT = 0x1FFFE000


class AbortOnDrop:
    """Own an asyncio task and cancel it when released.

    The task is cancelled on ``abort()``, on leaving a ``with`` block, or when
    the handle is garbage collected.
    """

    def __init__(self, task: "asyncio.Future[Any]") -> None:
        self._task = task

    @property
    def task(self) -> "asyncio.Future[Any]":
        return self._task

    def is_finished(self) -> bool:
        """Return True once the task has completed, failed or been cancelled."""
        return self._task.done()

    def abort(self) -> None:
        """Cancel the task if it is still running."""
        if not self._task.done():
            self._task.cancel()

    def __enter__(self) -> "AbortOnDrop":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.abort()

    def __del__(self) -> None:
        task = getattr(self, "_task", None)
        if task is None:
            return
        with contextlib.suppress(RuntimeError):
            if not task.done():
                task.cancel()

    def __repr__(self) -> str:
        state = "finished" if self.is_finished() else "running"
        return f"AbortOnDrop({state})"


@dataclass(frozen=True)
class UserId:
    """Numeric identifier of a user."""

    value: int

    def __str__(self) -> str:
        return str(self.value)


class Sv1IngressError(enum.Enum):
    """Reasons the SV1 ingress can stop."""

    TRANSLATOR_DROPPED = "TranslatorDropped"
    DOWNSTREAM_DROPPED = "DownstreamDropped"
    TASK_FAILED = "TaskFailed"


def sv1_rolling(
    version_rolling_mask: Optional[int],
    version_rolling_min_bit_count: Optional[int],
) -> Tuple[int, int]:
    """Select the version rolling mask and minimum bit count for a miner.

    The requested mask is restricted to the 16 general purpose version bits
    (``0x1FFFE000``); missing values become 0.
    """
    mask = (
        version_rolling_mask & VERSION_ROLLING_MASK_LIMIT
        if version_rolling_mask is not None
        else 0
    )
    min_bits = version_rolling_min_bit_count if version_rolling_min_bit_count is not None else 0
    return mask, min_bits