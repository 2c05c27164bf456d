"""Messages exchanged with the pool on the mining connection."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Protocol(enum.IntEnum):
    """Sub-protocol requested when setting up a connection."""

    MINING_PROTOCOL = 0
    JOB_DECLARATION_PROTOCOL = 1
    TEMPLATE_DISTRIBUTION_PROTOCOL = 2


@dataclass(frozen=True)
class SetupConnection:
    """First message sent to the pool."""

    protocol: Protocol
    min_version: int
    max_version: int
    flags: int
    endpoint_host: str
    endpoint_port: int
    vendor: str
    hardware_version: str
    firmware: str
    device_id: str


@dataclass(frozen=True)
class SetupConnectionSuccess:
    """Pool accepted the connection setup."""

    used_version: int
    flags: int


@dataclass(frozen=True)
class SetupConnectionError:
    """Pool refused the connection setup."""

    flags: int
    error_code: str


@dataclass(frozen=True)
class SubmitSharesExtended:
    """A share submitted on an extended channel."""

    channel_id: int
    sequence_number: int
    job_id: int
    nonce: int
    ntime: int
    version: int
    extranonce: bytes = b""


@dataclass(frozen=True)
class SubmitSharesSuccess:
    """Acknowledgement of accepted shares."""

    channel_id: int
    last_sequence_number: int
    new_submits_accepted_count: int
    new_shares_sum: int


@dataclass(frozen=True)
class ShareOk:
    """Share accounting acknowledgement of a single share."""

    ref_job_id: int
    share_index: int

    def job_id(self) -> int:
        """The job id carried in the upper 32 bits of ``ref_job_id``."""
        return (self.ref_job_id >> 32) & 0xFFFFFFFF


COMMON_MESSAGES = (SetupConnection, SetupConnectionSuccess, SetupConnectionError)