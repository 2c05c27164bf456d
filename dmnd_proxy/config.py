"""Command line options and endpoint settings of the proxy."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from dmnd_proxy.hashrate import DEFAULT_HASHRATE, parse_hashrate

logger = logging.getLogger(__name__)

TRANSLATOR_BUFFER_SIZE = 32
MIN_EXTRANONCE_SIZE = 6
MIN_EXTRANONCE2_SIZE = 5
UPSTREAM_EXTRANONCE1_SIZE = 15
SHARE_PER_MIN = 10.0
CHANNEL_DIFF_UPDATE_INTERVAL = 10
MAX_LEN_DOWN_MSG = 10000
MAIN_POOL_ADDRESS = "mining.dmnd.work:2000"
TEST_POOL_ADDRESS = "18.193.252.132:2000"
MAIN_AUTH_PUB_KEY = "9bQHWXsQ2J9TRFTaxRh3KjoxdyLRfWVEy25YHtKF8y8gotLoCZZ"
TEST_AUTH_PUB_KEY = "9auqWEzQDVyd2oe1JVGFLMLHZtCo2FFqZwtKA5gd9xbuEu7PH72"
DEFAULT_LISTEN_ADDRESS = "0.0.0.0:32767"

LOG_LEVELS = ("trace", "debug", "info", "warn", "error")


@dataclass(frozen=True)
class Args:
    """Options given on the command line."""

    test: bool = False
    downstream_hashrate: Optional[float] = None
    loglevel: str = "info"
    noise_connection_log: str = "off"
    delay: int = 0
    adjustment_interval: int = 120000

    @property
    def expected_hashrate(self) -> float:
        """The downstream hashrate, or the default when none was given."""
        if self.downstream_hashrate is None:
            return DEFAULT_HASHRATE
        return self.downstream_hashrate


def _hashrate_arg(text: str) -> float:
    try:
        return parse_hashrate(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def _unsigned_arg(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid digit found in string: '{text}'") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"invalid digit found in string: '{text}'")
    return value


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="demand-cli", allow_abbrev=False)
    parser.add_argument("--test", action="store_true", help="use the test endpoint")
    parser.add_argument(
        "-d", "--d", dest="downstream_hashrate", type=_hashrate_arg, default=None,
        help="expected downstream hashrate, e.g. 10T, 2.5P, 5E",
    )
    parser.add_argument("-l", "--loglevel", dest="loglevel", default="info")
    parser.add_argument("-n", "--nc", dest="noise_connection_log", default="off")
    parser.add_argument("--delay", dest="delay", type=_unsigned_arg, default=0)
    parser.add_argument(
        "-i", "--interval", dest="adjustment_interval", type=_unsigned_arg, default=120000
    )
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> Args:
    """Parse command line options; exits with status 2 on invalid input."""
    namespace = _parser().parse_args(argv)
    return Args(
        test=namespace.test,
        downstream_hashrate=namespace.downstream_hashrate,
        loglevel=namespace.loglevel,
        noise_connection_log=namespace.noise_connection_log,
        delay=namespace.delay,
        adjustment_interval=namespace.adjustment_interval,
    )


def normalize_log_level(level: str, default: str) -> str:
    """Return ``level`` if it names a known log level, otherwise ``default``."""
    if level.lower() in LOG_LEVELS:
        return level
    logger.error("Invalid log level '%s'. Defaulting to '%s'.", level, default)
    return default


def pool_address(test: bool) -> str:
    """Address of the pool, test or main."""
    return TEST_POOL_ADDRESS if test else MAIN_POOL_ADDRESS


def auth_pub_key(test: bool) -> str:
    """Authority public key of the pool, test or main."""
    return TEST_AUTH_PUB_KEY if test else MAIN_AUTH_PUB_KEY


def log_filter(log_level: str, noise_log_level: str) -> str:
    """Log filter directive: the global level plus the noise connection level."""
    return f"{log_level},demand_sv2_connection::noise_connection_tokio={noise_log_level}"