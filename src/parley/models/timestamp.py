# src/parley/models/timestamp.py
"""Whole-second event timestamps."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

MAX_SECONDS = 2**64 - 1


@dataclass(frozen=True, order=True)
class Timestamp:
    """Number of whole seconds since the Unix epoch."""

    seconds: int

    def __post_init__(self) -> None:
        if isinstance(self.seconds, bool) or not isinstance(self.seconds, int):
            raise TypeError("Timestamp seconds must be an int")
        if not 0 <= self.seconds <= MAX_SECONDS:
            raise ValueError("Timestamp seconds out of 64-bit unsigned range")

    def to_datetime(self) -> datetime:
        """Return the timestamp as a timezone-aware UTC datetime.

        Raises:
            ValueError: If the timestamp lies past the end of year 9999, the
                last instant ``datetime`` can represent.
        """
        try:
            return datetime.fromtimestamp(self.seconds, UTC)
        except (OverflowError, OSError, ValueError):
            raise ValueError("Timestamp outside the datetime range") from None

    @classmethod
    def from_datetime(cls, value: datetime) -> Timestamp:
        """Truncate an aware datetime to a whole-second timestamp."""
        if value.tzinfo is None:
            raise ValueError("Timestamp requires a timezone-aware datetime")
        return cls(int(value.timestamp()))
