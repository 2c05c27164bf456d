"""Relays between the mining channel and the pool with share accounting.

Shares submitted upstream are remembered by job id. When the pool
acknowledges one with ``ShareOk``, the proxy answers downstream with a
``SubmitSharesSuccess``. Channels are asyncio queues, and ``None`` on a queue
means its sending side has closed. A sink whose ``put`` raises counts as
closed.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from dmnd_proxy.messages import (
    COMMON_MESSAGES,
    ShareOk,
    SubmitSharesExtended,
    SubmitSharesSuccess,
)
from dmnd_proxy.proxy_state import (
    PoolState,
    ProxyState,
    ShareAccounterState,
    global_state,
)
from dmnd_proxy.shared import AbortOnDrop
from dmnd_proxy.task_manager import TaskManager

logger = logging.getLogger(__name__)

_EXPECTED_SHARES = 100


class ShareAccounterError(Exception):
    """The share accounter could not be started."""

    class Kind(enum.Enum):
        TASK_MANAGER_MUTEX_CORRUPTED = "Share Accounter Task Manager Mutex Corrupted"
        TASK_MANAGER_ERROR = "Share Accounter TaskManager Failed to add Task"

    def __init__(self, kind: "ShareAccounterError.Kind") -> None:
        self.kind = kind
        super().__init__(kind.value)


@dataclass(frozen=True)
class ShareSentUp:
    """Where a share that was sent to the pool came from."""

    channel_id: int
    sequence_number: int


async def start(
    receiver: "asyncio.Queue[Any]",
    sender: Any,
    up_receiver: "asyncio.Queue[Any]",
    up_sender: Any,
    state: Optional[ProxyState] = None,
) -> AbortOnDrop:
    """Start both relays and return the handle that cancels them together."""
    if state is None:
        state = global_state()
    task_manager = TaskManager.initialize("Share accounter")
    aborter = task_manager.get_aborter()
    if aborter is None:
        raise ShareAccounterError(ShareAccounterError.Kind.TASK_MANAGER_ERROR)

    shares_sent_up: Dict[int, ShareSentUp] = {}
    try:
        await task_manager.add_relay_up(relay_up(receiver, up_sender, shares_sent_up))
        await task_manager.add_relay_down(
            relay_down(up_receiver, sender, shares_sent_up, state)
        )
    except RuntimeError as exc:
        aborter.abort()
        raise ShareAccounterError(ShareAccounterError.Kind.TASK_MANAGER_ERROR) from exc
    return aborter


def relay_up(
    receiver: "asyncio.Queue[Any]",
    up_sender: Any,
    shares_sent_up: Dict[int, ShareSentUp],
) -> AbortOnDrop:
    """Forward mining messages to the pool, remembering submitted shares."""

    async def run() -> None:
        while (msg := await receiver.get()) is not None:
            if isinstance(msg, SubmitSharesExtended):
                shares_sent_up[msg.job_id] = ShareSentUp(
                    channel_id=msg.channel_id,
                    sequence_number=msg.sequence_number,
                )
            try:
                await up_sender.put(msg)
            except Exception:
                break

    return AbortOnDrop(asyncio.get_running_loop().create_task(run()))


def relay_down(
    up_receiver: "asyncio.Queue[Any]",
    sender: Any,
    shares_sent_up: Dict[int, ShareSentUp],
    state: Optional[ProxyState] = None,
) -> AbortOnDrop:
    """Forward pool messages downstream, turning ShareOk into SubmitSharesSuccess."""
    if state is None:
        state = global_state()

    async def run() -> None:
        while (msg := await up_receiver.get()) is not None:
            if isinstance(msg, ShareOk):
                share = shares_sent_up.pop(msg.job_id(), None)
                if share is None:
                    logger.error("Pool sent invalid share success")
                    state.update_pool_state(PoolState.DOWN)
                    return
                success = SubmitSharesSuccess(
                    channel_id=share.channel_id,
                    last_sequence_number=share.sequence_number,
                    new_submits_accepted_count=1,
                    new_shares_sum=1,
                )
                try:
                    await sender.put(success)
                except Exception as exc:
                    logger.error("%r", exc)
                    state.update_share_accounter_state(ShareAccounterState.DOWN)
                    break
            elif isinstance(msg, COMMON_MESSAGES):
                logger.error("Pool send unexpected message on mining connection")
                state.update_pool_state(PoolState.DOWN)
                break
            else:
                try:
                    await sender.put(msg)
                except Exception as exc:
                    logger.error("%s", exc)
                    state.update_share_accounter_state(ShareAccounterState.DOWN)
                    break

    return AbortOnDrop(asyncio.get_running_loop().create_task(run()))