"""Parsing and formatting of hashrates given with a T, P or E unit."""

from __future__ import annotations

import enum
import math
from typing import Optional

DEFAULT_HASHRATE = 100_000_000_000_000.0

_F32_MAX = 3.4028234663852886e38

_FORMAT_HINT = "Expected format: '<number><unit>' (e.g., '10T', '2.5P', '5E')"


class HashUnit(enum.Enum):
    """Hashrate units and their multiplier in h/s."""

    TERA = 1e12
    PETA = 1e15
    EXA = 1e18

    @property
    def multiplier(self) -> float:
        return self.value

    @classmethod
    def from_str(cls, text: str) -> Optional["HashUnit"]:
        """Return the unit for "T", "P" or "E" (any case), or None."""
        return {"T": cls.TERA, "P": cls.PETA, "E": cls.EXA}.get(text.upper())


def _parse_number(text: str) -> float:
    if text != text.strip() or "_" in text:
        raise ValueError(text)
    return float(text)


def parse_hashrate(text: str) -> float:
    """Parse a string such as "10T", "2.5P" or "500E" into h/s.

    Raises ValueError with a description of what is wrong.
    """
    text = text.strip()
    if not text:
        raise ValueError(
            "Hashrate cannot be empty. Expected format: '<number><unit>' (e.g., '10T', '2.5P', '5E'"
        )

    unit_text = text[-1]
    number_text = text[:-1]

    try:
        number = _parse_number(number_text)
    except ValueError:
        raise ValueError(f"Invalid number '{number_text}'. {_FORMAT_HINT}") from None

    unit = HashUnit.from_str(unit_text)
    if unit is None:
        raise ValueError(
            f"Invalid unit '{unit_text}'. Expected 'T' (Terahash), 'P' (Petahash), "
            "or 'E' (Exahash). Example: '10T', '2.5P', '5E'"
        )

    hashrate = number * unit.multiplier
    if math.isinf(hashrate) or math.isnan(hashrate) or abs(hashrate) > _F32_MAX:
        raise ValueError("Hashrate too large or invalid")
    return hashrate


def format_hashrate(value: float) -> str:
    """Format a hashrate in h/s with two decimals and the largest fitting unit."""
    if value >= 1e18:
        return f"{value / 1e18:.2f}E"
    if value >= 1e15:
        return f"{value / 1e15:.2f}P"
    if value >= 1e12:
        return f"{value / 1e12:.2f}T"
    return f"{value:.2f}"