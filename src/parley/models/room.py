# src/parley/models/room.py
"""Chat rooms."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .ids import RoomID


class RoomVisibility(Enum):
    """Who can discover and join a room.

    Membership policy is enforced outside the core.
    """

    PUBLIC = "public"     # Listed and joinable by anyone
    PRIVATE = "private"   # Unlisted; joinable by invitation only


@dataclass(frozen=True)
class Room:
    """A room. Visibility is fixed at creation; recreate the room to change it."""

    id: RoomID
    name: str
    visibility: RoomVisibility
