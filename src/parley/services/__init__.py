# src/parley/services/__init__.py
"""Constructors and process-wide services for the Parley core."""

from .clock import MonotonicClock, get_clock, now
from .identifiers import IdentifierService, get_identifier_service, next_id
from .message_service import create_message, post_message, restore_message
from .room_service import create_room, register_room
from .user_service import authenticate, create_user, register_user

__all__ = [
    "IdentifierService", "get_identifier_service", "next_id",
    "MonotonicClock", "get_clock", "now",
    "create_user", "register_user", "authenticate",
    "create_room", "register_room",
    "create_message", "post_message", "restore_message",
]
