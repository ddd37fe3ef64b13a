# src/parley/models/ids.py
"""Opaque, kind-tagged 64-bit identifiers.

Each entity kind gets its own nominal wrapper so a ``UserID`` can never be
passed where a ``MessageID`` is expected. IDs of different kinds compare
unequal and refuse ordering comparisons.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

MAX_ID = 2**64 - 1
ID_WIRE_LENGTH = 8
# Reserved for "no such ID"; never minted.
NO_ID = 0


@dataclass(frozen=True, order=True)
class OpaqueID:
    """An unsigned 64-bit identifier ordered by creation."""

    value: int

    kind: ClassVar[str] = ""

    def __post_init__(self) -> None:
        if type(self) is OpaqueID:
            raise TypeError("OpaqueID must be used through a kind-specific subclass")
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"{type(self).__name__} value must be an int")
        if not NO_ID <= self.value <= MAX_ID:
            raise ValueError(f"{type(self).__name__} value out of 64-bit unsigned range")

    def __int__(self) -> int:
        return self.value

    def to_bytes(self) -> bytes:
        """Return the 8-byte big-endian wire form."""
        return self.value.to_bytes(ID_WIRE_LENGTH, "big")

    @classmethod
    def from_bytes(cls, data: bytes) -> OpaqueID:
        """Decode the 8-byte big-endian wire form."""
        if len(data) != ID_WIRE_LENGTH:
            raise ValueError(f"{cls.__name__} wire form must be {ID_WIRE_LENGTH} bytes")
        return cls(int.from_bytes(data, "big"))


class UserID(OpaqueID):
    """Identifier of a ``User``."""

    kind = "user"


class RoomID(OpaqueID):
    """Identifier of a ``Room``."""

    kind = "room"


class MessageID(OpaqueID):
    """Identifier of a ``Message``."""

    kind = "message"
