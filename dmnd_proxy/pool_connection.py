"""Connection setup and message relays between the proxy and the pool.

Channels are asyncio queues; putting ``None`` on a queue signals that its
sending side has closed. A sink whose ``put`` raises counts as closed.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import os
import secrets
import string
from typing import Any, Optional

from dmnd_proxy.messages import (
    COMMON_MESSAGES,
    Protocol,
    SetupConnection,
    SetupConnectionSuccess,
)
from dmnd_proxy.proxy_state import PoolState, ProxyState, global_state
from dmnd_proxy.shared import AbortOnDrop

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0

_DEVICE_ID_ALPHABET = string.ascii_letters + string.digits


class PoolConnectionError(Exception):
    """Failure on the mining connection to the pool."""

    class Kind(enum.Enum):
        BINARY_SV2 = "Binary SV2 error: `{}`"
        SV2_CONNECTION = "Demand SV2 connectiom  error: `{}"
        FRAMING_SV2 = "Framing SV2 error: `{}`"
        IO = "I/O error: `{}"
        ROLES_SV2_LOGIC = "Roles SV2 Logic Error: `{}`"
        UPSTREAM_INCOMING = "Upstream parse incoming error: `{}`"
        TIMEOUT = "Timeout Elapsed"
        UNRECOVERABLE = "Unrecoverable error"
        UNEXPECTED_MESSAGE = "Unexpected Message Type"
        MINING_POOL_MUTEX_CORRUPTED = "Mining Pool Mutex Corrupted"
        MINING_POOL_TASK_MANAGER_FAILED = "Mining Pool TaskManager Error"

    def __init__(self, kind: "PoolConnectionError.Kind", cause: Any = None) -> None:
        self.kind = kind
        self.cause = cause
        super().__init__(kind.value.format(cause) if "{}" in kind.value else kind.value)


def get_mining_setup_connection_msg(work_selection: bool) -> SetupConnection:
    """Build the SetupConnection message sent to the pool.

    Requires the TOKEN environment variable.
    """
    flags = 0b110 if work_selection else 0b100
    token = os.environ.get("TOKEN")
    if token is None:
        raise RuntimeError("Missing TOKEN environment variable")
    device_prefix = "".join(secrets.choice(_DEVICE_ID_ALPHABET) for _ in range(16))
    return SetupConnection(
        protocol=Protocol.MINING_PROTOCOL,
        min_version=2,
        max_version=2,
        flags=flags,
        endpoint_host="0.0.0.0",
        endpoint_port=50,
        vendor="",
        hardware_version="",
        firmware="",
        device_id=f"{device_prefix}::POOLED::{token}",
    )


async def mining_setup_connection(
    recv: "asyncio.Queue[Any]",
    send: Any,
    setup_connection: SetupConnection,
    timeout: Optional[float] = None,
) -> SetupConnectionSuccess:
    """Send ``setup_connection`` and wait for the pool to accept it."""
    if not isinstance(setup_connection, SetupConnection):
        logger.error("Failed to convert message to a frame.")
        raise PoolConnectionError(PoolConnectionError.Kind.ROLES_SV2_LOGIC, setup_connection)
    try:
        await send.put(setup_connection)
    except Exception as exc:
        logger.error("Failed to send setup connection message")
        raise PoolConnectionError(PoolConnectionError.Kind.UNRECOVERABLE) from exc

    try:
        reply = await asyncio.wait_for(
            recv.get(), DEFAULT_TIMEOUT if timeout is None else timeout
        )
    except asyncio.TimeoutError:
        reply = None
    if reply is None:
        logger.error("Failed to setup connection: Timeout")
        raise PoolConnectionError(PoolConnectionError.Kind.TIMEOUT)

    if not isinstance(reply, COMMON_MESSAGES):
        logger.error("Unexpected Message: %r", reply)
        raise PoolConnectionError(PoolConnectionError.Kind.UPSTREAM_INCOMING, reply)
    if isinstance(reply, SetupConnectionSuccess):
        return reply
    logger.error("Unexpected Message: %r", reply)
    raise PoolConnectionError(PoolConnectionError.Kind.UNEXPECTED_MESSAGE)


def relay_up(
    recv: "asyncio.Queue[Any]", send: Any, state: Optional[ProxyState] = None
) -> AbortOnDrop:
    """Forward messages from the proxy to the pool until either side closes."""
    state = state or global_state()

    async def run() -> None:
        while (msg := await recv.get()) is not None:
            try:
                await send.put(msg)
            except Exception:
                logger.error("Mining upstream failed")
                state.update_pool_state(PoolState.DOWN)
                break

    return AbortOnDrop(asyncio.get_running_loop().create_task(run()))


def relay_down(
    recv: "asyncio.Queue[Any]", send: Any, state: Optional[ProxyState] = None
) -> AbortOnDrop:
    """Forward messages from the pool to the proxy; mark the pool down when it closes."""
    state = state or global_state()

    async def run() -> None:
        while True:
            msg = await recv.get()
            if msg is None:
                logger.error("Mining Upstream down.")
                break
            try:
                await send.put(msg)
            except Exception:
                logger.error("Internal Mining downstream not available")
                state.update_inconsistency(1)
        logger.error("Failed to receive msg from Pool")
        state.update_pool_state(PoolState.DOWN)

    return AbortOnDrop(asyncio.get_running_loop().create_task(run()))