# src/parley/models/__init__.py
"""Immutable domain entities for Parley."""

from .ids import MessageID, OpaqueID, RoomID, UserID
from .message import Message
from .message_data import (
    DirectMessage,
    Edit,
    Join,
    Leave,
    MessageData,
    PlainMessage,
    body,
    references,
    targets,
)
from .room import Room, RoomVisibility
from .timestamp import Timestamp
from .user import User

__all__ = [
    "OpaqueID", "UserID", "RoomID", "MessageID",
    "Timestamp",
    "User",
    "Room", "RoomVisibility",
    "Message",
    "MessageData", "PlainMessage", "DirectMessage", "Edit", "Join", "Leave",
    "body", "targets", "references",
]
