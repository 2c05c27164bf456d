"""Health state of the proxy's components."""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

logger = logging.getLogger(__name__)


class PoolState(enum.Enum):
    UP = "Up"
    DOWN = "Down"


class TpState(enum.Enum):
    UP = "Up"
    DOWN = "Down"


class TranslatorState(enum.Enum):
    UP = "Up"
    DOWN = "Down"


class JdState(enum.Enum):
    UP = "Up"
    DOWN = "Down"


class ShareAccounterState(enum.Enum):
    UP = "Up"
    DOWN = "Down"


class DownstreamType(enum.Enum):
    JD_CLIENT_MINING_DOWNSTREAM = "JdClientMiningDownstream"
    TRANSLATOR_DOWNSTREAM = "TranslatorDownstream"


class UpstreamType(enum.Enum):
    JDC_MINING_UPSTREAM = "JDCMiningUpstream"
    TRANSLATOR_UPSTREAM = "TranslatorUpstream"


def _describe_down(items) -> str:
    return "Down([" + ", ".join(item.value for item in items) + "])"


@dataclass(frozen=True)
class DownstreamState:
    """Up when ``down`` is empty, otherwise lists the downstreams that failed."""

    down: Tuple[DownstreamType, ...] = ()

    @property
    def is_up(self) -> bool:
        return not self.down

    def __str__(self) -> str:
        return "Up" if self.is_up else _describe_down(self.down)


@dataclass(frozen=True)
class UpstreamState:
    """Up when ``down`` is empty, otherwise lists the upstreams that failed."""

    down: Tuple[UpstreamType, ...] = ()

    @property
    def is_up(self) -> bool:
        return not self.down

    def __str__(self) -> str:
        return "Up" if self.is_up else _describe_down(self.down)


StateValue = Union[
    PoolState,
    TpState,
    JdState,
    ShareAccounterState,
    TranslatorState,
    DownstreamState,
    UpstreamState,
    int,
]


@dataclass(frozen=True)
class ProxyError:
    """A component that is not healthy, with the state it reported."""

    component: str
    state: StateValue

    def __str__(self) -> str:
        if isinstance(self.state, enum.Enum):
            detail = self.state.value
        else:
            detail = str(self.state)
        return f"{self.component}({detail})"


class ProxyState:
    """Thread-safe record of the state of every proxy component."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.pool = PoolState.UP
        self.tp = TpState.UP
        self.jd = JdState.UP
        self.share_accounter = ShareAccounterState.UP
        self.translator = TranslatorState.UP
        self.inconsistency: Optional[int] = None
        self.downstream = DownstreamState()
        self.upstream = UpstreamState()

    def update_pool_state(self, pool_state: PoolState) -> None:
        logger.info("Updating PoolState state to %s", pool_state.value)
        with self._lock:
            self.pool = pool_state

    def update_tp_state(self, tp_state: TpState) -> None:
        logger.info("Updating TpState state to %s", tp_state.value)
        with self._lock:
            self.tp = tp_state

    def update_jd_state(self, jd_state: JdState) -> None:
        logger.info("Updating JdState state to %s", jd_state.value)
        with self._lock:
            self.jd = jd_state

    def update_translator_state(self, translator_state: TranslatorState) -> None:
        logger.info("Updating Translator state to %s", translator_state.value)
        with self._lock:
            self.translator = translator_state

    def update_share_accounter_state(self, share_accounter_state: ShareAccounterState) -> None:
        logger.info("Updating ShareAccounterState state to %s", share_accounter_state.value)
        with self._lock:
            self.share_accounter = share_accounter_state

    def update_inconsistency(self, code: Optional[int]) -> None:
        logger.info("Updating Internal Inconsistency state to %s", code)
        with self._lock:
            self.inconsistency = code

    def update_downstream_state(self, downstream_type: DownstreamType) -> None:
        logger.info("Updating Downstream state to %s", downstream_type.value)
        with self._lock:
            self.downstream = DownstreamState((downstream_type,))

    def update_upstream_state(self, upstream_type: UpstreamType) -> None:
        logger.info("Updating Upstream state to %s", upstream_type.value)
        with self._lock:
            self.upstream = UpstreamState((upstream_type,))

    def update_proxy_state_up(self) -> None:
        """Mark every component as up and clear any inconsistency."""
        with self._lock:
            self.pool = PoolState.UP
            self.jd = JdState.UP
            self.translator = TranslatorState.UP
            self.tp = TpState.UP
            self.share_accounter = ShareAccounterState.UP
            self.upstream = UpstreamState()
            self.downstream = DownstreamState()
            self.inconsistency = None

    def get_errors(self) -> List[ProxyError]:
        """Return the unhealthy components in a fixed order."""
        errors: List[ProxyError] = []
        with self._lock:
            if self.pool is PoolState.DOWN:
                errors.append(ProxyError("Pool", self.pool))
            if self.tp is TpState.DOWN:
                errors.append(ProxyError("Tp", self.tp))
            if self.jd is JdState.DOWN:
                errors.append(ProxyError("Jd", self.jd))
            if self.share_accounter is ShareAccounterState.DOWN:
                errors.append(ProxyError("ShareAccounter", self.share_accounter))
            if self.translator is TranslatorState.DOWN:
                errors.append(ProxyError("Translator", self.translator))
            if self.inconsistency is not None:
                errors.append(ProxyError("InternalInconsistency", self.inconsistency))
            if not self.downstream.is_up:
                errors.append(ProxyError("Downstream", self.downstream))
            if not self.upstream.is_up:
                errors.append(ProxyError("Upstream", self.upstream))
        return errors

    def is_proxy_down(self) -> Tuple[bool, Optional[str]]:
        """Return whether anything is down, with a description of what is."""
        errors = self.get_errors()
        if not errors:
            return False, None
        return True, ", ".join(str(error) for error in errors)


_GLOBAL_STATE = ProxyState()


def global_state() -> ProxyState:
    """Return the process-wide proxy state."""
    return _GLOBAL_STATE