# src/parley/models/message.py
"""Room message log entries."""

from __future__ import annotations

from dataclasses import dataclass

from .ids import MessageID, RoomID, UserID
from .message_data import MessageData
from .timestamp import Timestamp


@dataclass(frozen=True)
class Message:
    """One entry in a room's message log.

    Messages are never mutated; corrections are new ``Edit`` messages.
    """

    id: MessageID
    date: Timestamp
    user_id: UserID
    room_id: RoomID
    data: MessageData
